from datetime import datetime, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from kintai.core.admin_session import AdminSession, default_timeout
from kintai.core.security import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


async def require_admin_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AdminSession:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Admin session is locked",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise unauthorized

    if payload.get("type") != "admin_unlock":
        raise unauthorized

    unlocked_raw = payload.get("iat")
    if not isinstance(unlocked_raw, (int, float)):
        raise unauthorized

    session = AdminSession(
        unlocked_at=datetime.fromtimestamp(unlocked_raw, tz=timezone.utc),
        timeout=default_timeout(),
    )
    if session.is_locked(datetime.now(timezone.utc)):
        raise unauthorized

    return session
