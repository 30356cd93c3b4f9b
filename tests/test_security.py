# /tests/test_security.py

from datetime import datetime, timedelta, timezone

import jwt

from notegen.core import security

SECRET = "test-secret-key-for-hs256-signing!"


def test_password_hash_is_salted_and_verifiable():
    first = security.hash_password("hunter2", rounds=4)
    second = security.hash_password("hunter2", rounds=4)

    assert first != second
    assert first.startswith("$2b$04$")
    assert "hunter2" not in first
    assert security.verify_password("hunter2", first)
    assert not security.verify_password("hunter3", first)


def test_verify_password_rejects_malformed_hashes():
    assert not security.verify_password("pw", "not-a-hash")
    assert not security.verify_password("pw", "")


def test_long_passwords_hash_without_error():
    hashed = security.hash_password("x" * 100, rounds=4)
    assert security.verify_password("x" * 100, hashed)


def test_access_token_round_trip():
    token = security.create_access_token("usr_123", SECRET)

    assert security.decode_access_token(token, SECRET) == "usr_123"
    claims = jwt.decode(token, SECRET, algorithms=[security.ALGORITHM])
    assert claims["sub"] == "usr_123"
    assert claims["exp"] > datetime.now(timezone.utc).timestamp()


def test_token_signed_with_another_secret_is_rejected():
    token = security.create_access_token("usr_123", "another-secret-key-for-hs256-sign!")
    assert security.decode_access_token(token, SECRET) is None


def test_unsigned_token_is_rejected():
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=5)
    token = jwt.encode({"sub": "usr_999", "exp": expires_at}, None, algorithm="none")
    assert security.decode_access_token(token, SECRET) is None


def test_token_without_expiry_is_rejected():
    token = jwt.encode({"sub": "usr_123"}, SECRET, algorithm=security.ALGORITHM)
    assert security.decode_access_token(token, SECRET) is None


def test_expired_token_is_rejected():
    token = security.create_access_token("usr_123", SECRET, expires_minutes=-1)
    assert security.decode_access_token(token, SECRET) is None


def test_garbage_tokens_are_rejected():
    for token in ["", "abc", "a.b", "a.b.c", "usr:notanumber:sig"]:
        assert security.decode_access_token(token, SECRET) is None
