from hashregistry.core.errors import InvalidDocumentName, InvalidHashLength

# Contract limits, in UTF-8 bytes
HASH_LENGTH = 64
MIN_NAME_LENGTH = 1
MAX_NAME_LENGTH = 64


def encoded_length(value: str) -> int:
    return len(value.encode("utf-8"))


def validate_hash(document_hash) -> None:
    """Raise InvalidHashLength unless the hash is exactly 64 bytes of UTF-8.

    Only the length is checked; the character set is left open so any
    64-byte key is accepted.
    """
    if not isinstance(document_hash, str) or encoded_length(document_hash) != HASH_LENGTH:
        raise InvalidHashLength()


def validate_name(document_name) -> None:
    """Raise InvalidDocumentName unless the name is 1 to 64 bytes of UTF-8."""
    if not isinstance(document_name, str):
        raise InvalidDocumentName()
    if not MIN_NAME_LENGTH <= encoded_length(document_name) <= MAX_NAME_LENGTH:
        raise InvalidDocumentName()
