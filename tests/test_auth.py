"""Tests for the signature-based and static authorization gates."""

import pytest
from eth_account import Account

from hashregistry.core.errors import AuthorizationFailure
from hashregistry.services.auth import SignatureAuthGate, StaticAuthGate
from hashregistry.utils.blockchain import (
    canonical_identity,
    normalize_identity,
    registration_message,
    sign_registration,
)

HASH = "ab" * 32


@pytest.fixture
def account():
    return Account.create()


@pytest.fixture
def other_account():
    return Account.create()


def test_registration_message_format():
    assert registration_message(HASH, "Deed") == f"register:{HASH}:Deed"


def test_valid_signature_authorizes(account):
    signature = sign_registration(account.key, HASH, "Deed")
    gate = SignatureAuthGate(registration_message(HASH, "Deed"), signature)
    gate.require_auth(account.address)


def test_lowercase_identity_is_accepted(account):
    signature = sign_registration(account.key, HASH, "Deed")
    gate = SignatureAuthGate(registration_message(HASH, "Deed"), signature)
    gate.require_auth(account.address.lower())


def test_signature_from_other_key(account, other_account):
    signature = sign_registration(other_account.key, HASH, "Deed")
    gate = SignatureAuthGate(registration_message(HASH, "Deed"), signature)
    with pytest.raises(AuthorizationFailure):
        gate.require_auth(account.address)


def test_signature_over_other_message(account):
    signature = sign_registration(account.key, HASH, "Deed")
    gate = SignatureAuthGate(registration_message(HASH, "Other"), signature)
    with pytest.raises(AuthorizationFailure):
        gate.require_auth(account.address)


def test_malformed_signature(account):
    gate = SignatureAuthGate(registration_message(HASH, "Deed"), "0xdeadbeef")
    with pytest.raises(AuthorizationFailure):
        gate.require_auth(account.address)


def test_invalid_identity():
    gate = SignatureAuthGate("anything", "0x00")
    with pytest.raises(AuthorizationFailure):
        gate.require_auth("alice")


def test_static_gate():
    StaticAuthGate().require_auth("anyone")
    StaticAuthGate(["alice"]).require_auth("alice")
    with pytest.raises(AuthorizationFailure):
        StaticAuthGate(["alice"]).require_auth("bob")


def test_identity_helpers(account):
    assert normalize_identity(account.address.lower()) == account.address
    assert canonical_identity(account.address.lower()) == account.address
    assert canonical_identity("alice") == "alice"
    with pytest.raises(ValueError):
        normalize_identity("alice")
