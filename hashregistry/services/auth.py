"""Caller authorization gates.

The registry only asks one question: is this principal authorized to act as
``identity`` for the current call. Gates answer by returning or by raising
AuthorizationFailure.
"""
import logging
from typing import Iterable, Optional

from hashregistry.core.errors import AuthorizationFailure
from hashregistry.utils.blockchain import normalize_identity, recover_signer

logger = logging.getLogger(__name__)


class AuthGate:
    def require_auth(self, identity: str) -> None:
        raise NotImplementedError


class StaticAuthGate(AuthGate):
    """Accepts a fixed set of identities, or every identity when none given."""

    def __init__(self, allowed: Optional[Iterable[str]] = None):
        self._allowed = None if allowed is None else set(allowed)

    def require_auth(self, identity: str) -> None:
        if self._allowed is not None and identity not in self._allowed:
            logger.warning("Authorization refused for %s", identity)
            raise AuthorizationFailure()


class SignatureAuthGate(AuthGate):
    """Authorizes a call when ``signature`` over ``message`` was produced by
    the key behind ``identity`` (EIP-191 personal message)."""

    def __init__(self, message: str, signature: str):
        self.message = message
        self.signature = signature

    def require_auth(self, identity: str) -> None:
        try:
            expected = normalize_identity(identity)
        except ValueError as e:
            raise AuthorizationFailure(f"Caller is not a valid address: {identity}") from e
        try:
            signer = recover_signer(self.message, self.signature)
        except Exception as e:
            logger.warning("Signature recovery failed for %s: %s", identity, e)
            raise AuthorizationFailure("Signature could not be verified") from e
        if signer != expected:
            logger.warning("Signature for %s was produced by %s", expected, signer)
            raise AuthorizationFailure("Signature does not match caller")
