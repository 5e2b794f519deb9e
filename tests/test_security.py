import pytest

from moviemania_api.app.core.config import settings
from moviemania_api.app.core.errors import Forbidden, Unauthenticated
from moviemania_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
    verify_token,
)


def test_token_valid_until_ttl_then_rejected():
    token = create_access_token({"username": "alice", "role": "owner"}, expires_delta=60)
    claims = decode_access_token(token)

    assert claims["username"] == "alice"
    assert claims["role"] == "owner"
    assert claims["exp"] - claims["iat"] == 60
    assert decode_access_token(token, now=claims["exp"] - 1) is not None
    assert decode_access_token(token, now=claims["exp"]) is None
    assert decode_access_token(token, now=claims["exp"] + 3600) is None


def test_default_ttl_comes_from_settings():
    claims = decode_access_token(create_access_token({"username": "alice"}))
    assert claims["exp"] - claims["iat"] == settings.access_token_expire_minutes * 60


def test_tampered_or_foreign_tokens_are_rejected():
    token = create_access_token({"username": "alice", "role": "editor"})
    header, payload, signature = token.split(".")
    forged = create_access_token({"username": "alice", "role": "owner"}).split(".")[1]

    assert decode_access_token(f"{header}.{forged}.{signature}") is None
    assert decode_access_token("not-a-token") is None
    assert decode_access_token("a.b.c") is None

    settings.secret_key = "another-secret"
    assert decode_access_token(token) is None


def test_tokens_issued_together_differ():
    first = create_access_token({"username": "alice"})
    second = create_access_token({"username": "alice"})
    assert first != second


def test_verify_token_statuses():
    with pytest.raises(Unauthenticated) as missing:
        verify_token(None)
    assert missing.value.status_code == 401

    with pytest.raises(Forbidden) as invalid:
        verify_token("a.b.c")
    assert invalid.value.status_code == 403

    identity = verify_token(create_access_token({"username": "bob", "role": "editor"}))
    assert identity["username"] == "bob"


def test_password_hash_is_salted_and_verifies():
    first = hash_password("s3cret")
    second = hash_password("s3cret")

    assert first != second
    assert "s3cret" not in first
    assert verify_password("s3cret", first)
    assert verify_password("s3cret", second)
    assert not verify_password("wrong", first)


@pytest.mark.parametrize("stored", ["s3cret", "", "zz$zz", "nothex$00"])
def test_malformed_or_plaintext_hashes_never_verify(stored):
    assert not verify_password("s3cret", stored)
