import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from kintai.core.admin_session import AdminSession, default_timeout
from kintai.core.config import settings
from kintai.core.middleware import require_admin_session
from kintai.core.security import create_unlock_token, verify_pin
from kintai.schemas.admin import SessionStatus, UnlockRequest, UnlockResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/unlock",
    response_model=UnlockResponse,
    summary="Unlock administrator operations with the admin PIN",
)
async def unlock(body: UnlockRequest) -> UnlockResponse:
    if not verify_pin(body.pin, settings.ADMIN_PIN_HASH):
        logger.warning("Rejected admin unlock attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin PIN",
        )

    # token timestamps have whole-second precision
    session = AdminSession(
        unlocked_at=datetime.now(timezone.utc).replace(microsecond=0),
        timeout=default_timeout(),
    )
    token = create_unlock_token(session.unlocked_at, session.timeout)
    logger.info("Admin session unlocked until %s", session.expires_at.isoformat())

    return UnlockResponse(access_token=token, expires_at=session.expires_at)


@router.get(
    "/session",
    response_model=SessionStatus,
    summary="Remaining time of the current admin session",
)
async def session_status(
    session: AdminSession = Depends(require_admin_session),
) -> SessionStatus:
    now = datetime.now(timezone.utc)
    return SessionStatus(
        unlocked_at=session.unlocked_at,
        expires_at=session.expires_at,
        remaining_seconds=int(session.remaining(now).total_seconds()),
    )
