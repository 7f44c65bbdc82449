from datetime import datetime, timedelta

import bcrypt
from jose import jwt

from kintai.core.config import settings


def hash_pin(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def verify_pin(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode(), hashed.encode())
    except ValueError:
        # malformed hash in configuration
        return False


def create_unlock_token(unlocked_at: datetime, timeout: timedelta) -> str:
    """Admin unlock token; ``iat`` carries the unlock instant, ``exp`` the lock."""
    to_encode = {
        "sub": "admin",
        "type": "admin_unlock",
        "iat": int(unlocked_at.timestamp()),
        "exp": unlocked_at + timeout,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate JWT. Raises JWTError on failure."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
