from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import is_address
from web3 import Web3

REGISTRATION_PREFIX = "register"


def normalize_identity(identity: str) -> str:
    """Return the checksum form of an address, or raise ValueError."""
    if not isinstance(identity, str) or not is_address(identity):
        raise ValueError(f"Not a valid address: {identity!r}")
    return Web3.to_checksum_address(identity)


def registration_message(document_hash: str, document_name: str) -> str:
    """Canonical text a registrant signs to authorize one registration."""
    return f"{REGISTRATION_PREFIX}:{document_hash}:{document_name}"


def sign_registration(private_key, document_hash: str, document_name: str) -> str:
    message = encode_defunct(text=registration_message(document_hash, document_name))
    signed = Account.sign_message(message, private_key=private_key)
    return "0x" + signed.signature.hex().removeprefix("0x")


def recover_signer(message_text: str, signature: str) -> str:
    """Recover the checksum address that signed an EIP-191 personal message."""
    message = encode_defunct(text=message_text)
    return Web3.to_checksum_address(Account.recover_message(message, signature=signature))


def canonical_identity(identity: str) -> str:
    """Checksum form for addresses, anything else unchanged."""
    try:
        return normalize_identity(identity)
    except ValueError:
        return identity
