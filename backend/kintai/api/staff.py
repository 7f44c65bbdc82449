import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kintai.core.admin_session import AdminSession
from kintai.core.middleware import require_admin_session
from kintai.db.models import Company, Staff
from kintai.db.session import get_db
from kintai.schemas.staff import StaffCreate, StaffResponse, StaffUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

# NOT NULL columns; an explicit null in a PATCH body leaves them unchanged
_REQUIRED_FIELDS = ("name", "dependents")


async def _ensure_company(db: AsyncSession, company_id: uuid.UUID | None) -> None:
    if company_id is None:
        return
    if await db.get(Company, company_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company not found",
        )


async def _ensure_pin_free(
    db: AsyncSession, pin: str | None, exclude_id: uuid.UUID | None = None
) -> None:
    if pin is None:
        return
    q = select(Staff.id).where(Staff.pin == pin)
    if exclude_id is not None:
        q = q.where(Staff.id != exclude_id)
    existing = await db.execute(q.limit(1))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"PIN '{pin}' is already in use",
        )


@router.get(
    "/",
    response_model=list[StaffResponse],
    summary="List staff wage profiles with optional name search",
)
async def list_staff(
    search: str | None = Query(default=None, description="Filter by name (partial, case-insensitive)"),
    company_id: uuid.UUID | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> list[StaffResponse]:
    q = select(Staff)
    if search:
        q = q.where(Staff.name.ilike(f"%{search}%") | Staff.pin.ilike(f"%{search}%"))
    if company_id is not None:
        q = q.where(Staff.company_id == company_id)
    q = q.order_by(Staff.name)

    result = await db.execute(q)
    return [StaffResponse.model_validate(s) for s in result.scalars().all()]


@router.post(
    "/",
    response_model=StaffResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a staff member (admin)",
)
async def create_staff(
    body: StaffCreate,
    db: AsyncSession = Depends(get_db),
    _session: AdminSession = Depends(require_admin_session),
) -> StaffResponse:
    await _ensure_company(db, body.company_id)
    await _ensure_pin_free(db, body.pin)

    staff = Staff(**body.model_dump())
    db.add(staff)
    await db.commit()
    await db.refresh(staff)

    logger.info("Staff registered: id=%s", staff.id)
    return StaffResponse.model_validate(staff)


@router.patch(
    "/{staff_id}",
    response_model=StaffResponse,
    summary="Update wage, tax or allowance settings of a staff member (admin)",
)
async def update_staff(
    staff_id: uuid.UUID,
    body: StaffUpdate,
    db: AsyncSession = Depends(get_db),
    _session: AdminSession = Depends(require_admin_session),
) -> StaffResponse:
    staff = await db.get(Staff, staff_id)
    if staff is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff not found",
        )

    changes = body.model_dump(exclude_unset=True)
    if "company_id" in changes:
        await _ensure_company(db, changes["company_id"])
    if "pin" in changes:
        await _ensure_pin_free(db, changes["pin"], exclude_id=staff.id)
    for field, value in changes.items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(staff, field, value)

    await db.commit()
    await db.refresh(staff)

    logger.info("Staff updated: id=%s fields=%s", staff.id, ",".join(sorted(changes)))
    return StaffResponse.model_validate(staff)
