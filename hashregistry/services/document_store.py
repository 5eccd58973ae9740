"""Primary index: document hash -> DocumentRecord, globally unique."""
from typing import Optional

from hashregistry.core.errors import DocumentAlreadyExists
from hashregistry.models.models import DocumentRecord

DOCUMENTS_KEY = "DOCS"

_MISSING = object()


class DocumentStore:
    """Records live as entries of the ``DOCS`` map; each operation touches
    only the entries it names."""

    def __init__(self, store):
        self._store = store

    def _raw(self, document_hash: str, tx=None):
        source = tx if tx is not None else self._store
        return source.get_item(DOCUMENTS_KEY, document_hash, _MISSING)

    def exists(self, document_hash: str, tx=None) -> bool:
        source = tx if tx is not None else self._store
        return source.contains_item(DOCUMENTS_KEY, document_hash)

    def get(self, document_hash: str, tx=None) -> Optional[DocumentRecord]:
        raw = self._raw(document_hash, tx)
        if raw is _MISSING:
            return None
        return DocumentRecord.model_validate(raw)

    def get_many(self, hashes, tx=None) -> dict:
        """Resolve several hashes; pass ``tx`` to read them from one snapshot."""
        resolved = {}
        for h in hashes:
            record = self.get(h, tx)
            if record is not None:
                resolved[h] = record
        return resolved

    def insert(self, document_hash: str, record: DocumentRecord, tx) -> None:
        # Records are write-once; the check runs inside the caller's transaction.
        if self.exists(document_hash, tx):
            raise DocumentAlreadyExists()
        tx.set_item(DOCUMENTS_KEY, document_hash, record.model_dump(mode="json"))

    def count(self, tx=None) -> int:
        source = tx if tx is not None else self._store
        return len(source.get(DOCUMENTS_KEY) or {})
