"""Registry error kinds.

Validation and uniqueness errors are recoverable by the caller (fix input and
retry). Authorization failure aborts the whole call and is never retried here.
"""


class RegistryError(Exception):
    error_code = "REGISTRY_ERROR"
    code = 0

    def __init__(self, message: str = None):
        super().__init__(message or self.__class__.__doc__ or self.error_code)
        self.message = str(self)


class InvalidHashLength(RegistryError):
    """Document hash must be exactly 64 characters"""
    error_code = "INVALID_HASH_LENGTH"
    code = 1


class InvalidDocumentName(RegistryError):
    """Document name must be between 1 and 64 characters"""
    error_code = "INVALID_DOCUMENT_NAME"
    code = 2


class DocumentAlreadyExists(RegistryError):
    """Document with this hash is already registered"""
    error_code = "DOCUMENT_ALREADY_EXISTS"
    code = 3


class AuthorizationFailure(RegistryError):
    """Caller did not authorize this operation"""
    error_code = "AUTHORIZATION_FAILURE"


class RegistryNotInitialized(RegistryError):
    """Registry has not been initialized"""
    error_code = "REGISTRY_NOT_INITIALIZED"


class RegistryAlreadyInitialized(RegistryError):
    """Registry is already initialized"""
    error_code = "REGISTRY_ALREADY_INITIALIZED"
