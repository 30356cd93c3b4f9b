# /notegen/core/security.py

"""
Password hashing and signed access tokens.

Passwords are stored as bcrypt hashes. Hashing is an explicit call made by the
user service before a user row is written.

Access tokens are HS256 JWTs whose `sub` claim is the user id and whose `exp`
claim bounds their lifetime, so validating one needs no server-side session store.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

ALGORITHM = "HS256"
BCRYPT_ROUNDS = 12
# bcrypt only ever reads the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))
    except (ValueError, AttributeError):
        # Not a bcrypt hash at all.
        return False


def create_access_token(subject: str, secret: str, expires_minutes: int = 60 * 24) -> str:
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode({"sub": subject, "exp": expires_at}, secret, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str) -> Optional[str]:
    """Returns the token's subject, or None if it is malformed, forged, or expired."""
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM], options={"require": ["exp", "sub"]})
    except jwt.PyJWTError:
        return None
    return payload.get("sub") or None
