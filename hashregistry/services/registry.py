"""Document hash registry.

Records that an authorized party registered a 64-character document hash at
a given time, and answers public queries about those registrations. State
lives in three slots of the key-value store (the hash -> record map, one
ordered hash list per user, and the registration count) and is append-only.
"""
import logging
import threading
from typing import List, Optional

from hashregistry.core.errors import (
    AuthorizationFailure,
    DocumentAlreadyExists,
    RegistryAlreadyInitialized,
    RegistryError,
    RegistryNotInitialized,
)
from hashregistry.models.models import DocumentInfo, DocumentRecord, DocumentRegisteredEvent
from hashregistry.services.auth import AuthGate
from hashregistry.services.counter import Counter
from hashregistry.services.document_store import DocumentStore
from hashregistry.services.events import EventEmitter, LoggingEventEmitter
from hashregistry.services.ledger import Ledger, SystemLedger
from hashregistry.services.user_index import UserIndex
from hashregistry.storage.kv import InMemoryKeyValueStore, KeyValueStore
from hashregistry.utils.validators import validate_hash, validate_name

logger = logging.getLogger(__name__)


class Registry:
    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        ledger: Optional[Ledger] = None,
        events: Optional[EventEmitter] = None,
        auth: Optional[AuthGate] = None,
    ):
        self.store = store if store is not None else InMemoryKeyValueStore()
        self.auth = auth
        self.ledger = ledger or SystemLedger()
        self.events = events or LoggingEventEmitter()
        self.documents = DocumentStore(self.store)
        self.user_index = UserIndex(self.store)
        self.counter = Counter(self.store)
        self._register_lock = threading.Lock()

    # ------------------------------------------------------------------ lifecycle

    def initialize(self) -> None:
        """Set the document count to 0. Must run exactly once per store."""
        with self.store.transaction() as tx:
            if self.counter.is_initialized(tx):
                raise RegistryAlreadyInitialized()
            self.counter.reset(tx)
        logger.info("Registry initialized")

    def ensure_initialized(self) -> bool:
        """Initialize if needed; returns True when this call did it."""
        try:
            self.initialize()
        except RegistryAlreadyInitialized:
            return False
        return True

    def is_initialized(self) -> bool:
        return self.counter.is_initialized()

    def _require_initialized(self) -> None:
        if not self.counter.is_initialized():
            raise RegistryNotInitialized()

    # --------------------------------------------------------------- registration

    def register_document(
        self,
        caller: str,
        document_hash: str,
        document_name: str,
        auth: Optional[AuthGate] = None,
    ) -> int:
        """Register ``document_hash`` under ``caller`` and return the new total.

        ``auth`` overrides the registry's gate for this call (the HTTP layer
        builds one per request from the submitted signature). Authorization
        runs first and aborts the call on failure. The duplicate
        check, record insert, user index append and count increment commit as
        one transaction; the event is published after the commit, while the
        registration lock is still held.
        """
        gate = auth or self.auth
        if gate is None:
            raise AuthorizationFailure("No authorization gate configured")
        try:
            gate.require_auth(caller)
        except AuthorizationFailure:
            logger.warning("Registration refused: %s not authorized", caller)
            raise

        with self._register_lock:
            try:
                validate_hash(document_hash)
                validate_name(document_name)
                with self.store.transaction() as tx:
                    if not self.counter.is_initialized(tx):
                        raise RegistryNotInitialized()
                    if self.documents.exists(document_hash, tx):
                        raise DocumentAlreadyExists()

                    record = DocumentRecord(
                        document_hash=document_hash,
                        document_name=document_name,
                        registered_by=caller,
                        timestamp=self.ledger.timestamp(),
                        block_number=self.ledger.sequence(tx),
                    )
                    self.documents.insert(document_hash, record, tx)
                    self.user_index.append(caller, document_hash, tx)
                    new_count = self.counter.increment(tx)
            except RegistryError as e:
                logger.warning("Registration of %s by %s rejected: %s", document_hash, caller, e.error_code)
                raise

            logger.info("Document %s registered by %s (count=%d)", document_hash, caller, new_count)
            self._publish(record)
        return new_count

    def _publish(self, record: DocumentRecord) -> None:
        # Delivery is best-effort; the registration is already committed.
        try:
            self.events.publish(DocumentRegisteredEvent.from_record(record))
        except Exception:
            logger.exception("Failed to publish registration event for %s", record.document_hash)

    # -------------------------------------------------------------------- queries

    def verify_document(self, document_hash: str) -> DocumentInfo:
        self._require_initialized()
        record = self.documents.get(document_hash)
        if record is None:
            return DocumentInfo.missing()
        return DocumentInfo.found(record)

    def get_user_documents(self, user: str) -> List[DocumentRecord]:
        self._require_initialized()
        # Take hashes and records from one snapshot so a concurrent
        # registration is seen entirely or not at all.
        with self.store.transaction() as tx:
            hashes = self.user_index.list(user, tx)
            resolved = self.documents.get_many(hashes, tx)
        records = []
        for document_hash in hashes:
            record = resolved.get(document_hash)
            if record is None:
                logger.warning("User index for %s references unknown hash %s", user, document_hash)
                continue
            records.append(record)
        return records

    def get_document_count(self) -> int:
        return self.counter.current()

    def is_document_name_used(self, user: str, document_name: str) -> bool:
        return self.get_document_by_name(user, document_name).exists

    def get_document_by_name(self, user: str, document_name: str) -> DocumentInfo:
        """Earliest registration by ``user`` with this name, if any."""
        for record in self.get_user_documents(user):
            if record.document_name == document_name:
                return DocumentInfo.found(record)
        return DocumentInfo.missing()
