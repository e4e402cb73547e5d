from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from fooddelivery.auth import (
    ROLE_RESTAURANT,
    ROLE_USER,
    create_token,
    decode_token,
    hash_password,
    verify_password,
)
from fooddelivery.models import Restaurant, User


def test_hash_is_not_plaintext_and_verifies() -> None:
    h = hash_password("secret123")
    assert h != "secret123"
    assert verify_password("secret123", h)
    assert not verify_password("secret124", h)


def test_hash_is_salted() -> None:
    assert hash_password("same-password") != hash_password("same-password")


def test_empty_password_is_refused() -> None:
    with pytest.raises(ValueError):
        hash_password("")


def test_malformed_stored_hash_never_verifies() -> None:
    assert not verify_password("secret123", "not-a-hash")
    assert not verify_password("secret123", None)


def test_set_password_always_hashes() -> None:
    u = User(name="Ann", email="ann@example.com")
    u.set_password("secret123")
    first = u.password_hash
    assert first != "secret123"
    assert u.check_password("secret123")

    u.set_password("another-one")
    assert u.password_hash != first
    assert u.check_password("another-one")
    assert not u.check_password("secret123")


def test_failed_hash_keeps_previous_value() -> None:
    r = Restaurant(name="Luigi's", email="luigi@example.com")
    r.set_password("pizza-pass")
    before = r.password_hash
    with pytest.raises(ValueError):
        r.set_password("")
    assert r.password_hash == before


def test_token_round_trip() -> None:
    token = create_token(42, ROLE_USER)
    claims = decode_token(token)
    assert claims is not None
    assert claims.principal_id == 42
    assert claims.role == ROLE_USER
    assert claims.expires_at - claims.issued_at == timedelta(days=7)


def test_token_carries_restaurant_role() -> None:
    claims = decode_token(create_token(7, ROLE_RESTAURANT))
    assert claims is not None
    assert claims.role == ROLE_RESTAURANT


def test_unknown_role_cannot_be_issued() -> None:
    with pytest.raises(ValueError):
        create_token(1, "admin")


def test_expired_token_with_valid_signature_is_rejected() -> None:
    past = datetime.now(timezone.utc) - timedelta(days=8)
    token = jwt.encode(
        {"sub": "1", "role": ROLE_USER, "iat": past, "exp": past + timedelta(hours=1)},
        "test-secret",
        algorithm="HS256",
    )
    assert decode_token(token) is None


def test_token_issued_over_seven_days_ago_is_rejected() -> None:
    issued = datetime.now(timezone.utc) - timedelta(days=7, seconds=5)
    assert decode_token(create_token(1, ROLE_USER, now=issued)) is None


def test_token_signed_with_other_secret_is_rejected() -> None:
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "1", "role": ROLE_USER, "iat": now, "exp": now + timedelta(days=1)},
        "someone-else",
        algorithm="HS256",
    )
    assert decode_token(token) is None


def test_tampered_or_garbage_tokens_are_rejected() -> None:
    token = create_token(1, ROLE_USER)
    head, payload, sig = token.split(".")
    assert decode_token(f"{head}.{payload}.{sig[::-1]}") is None
    assert decode_token("garbage") is None
    assert decode_token("") is None
    assert decode_token(None) is None


def test_token_with_unknown_role_is_rejected() -> None:
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "1", "role": "admin", "iat": now, "exp": now + timedelta(days=1)},
        "test-secret",
        algorithm="HS256",
    )
    assert decode_token(token) is None
