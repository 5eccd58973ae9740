"""Secondary index: identity -> hashes in registration order."""
from typing import List

USER_DOCS_PREFIX = "USERDOCS"


def user_docs_key(user: str) -> str:
    return f"{USER_DOCS_PREFIX}:{user}"


class UserIndex:
    def __init__(self, store):
        self._store = store

    def append(self, user: str, document_hash: str, tx) -> None:
        # No de-duplication here; hash uniqueness comes from the primary index.
        key = user_docs_key(user)
        hashes = tx.get(key) or []
        hashes.append(document_hash)
        tx.set(key, hashes)

    def list(self, user: str, tx=None) -> List[str]:
        source = tx if tx is not None else self._store
        return list(source.get(user_docs_key(user)) or [])
