from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """Salted one-way hash, the salt is embedded in the returned string"""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def issue_token(
    teacher_id: int,
    username: str,
    *,
    secret: str,
    algorithm: str = "HS256",
    expires_in: timedelta = timedelta(hours=8),
    issued_at: Optional[datetime] = None,
) -> str:
    """
    Sign a session token carrying the teacher's id and username.
    """
    now = issued_at or datetime.now(timezone.utc)
    payload = {
        "id": teacher_id,
        "username": username,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, *, secret: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """
    Verify signature and expiry. Raises jwt.InvalidTokenError (or a subclass) on failure.
    """
    return jwt.decode(token, secret, algorithms=[algorithm], options={"require": ["exp"]})
