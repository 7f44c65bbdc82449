import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kintai.api.payroll import month_param
from kintai.db import repository
from kintai.db.session import get_db
from kintai.schemas.payroll import AttendanceDetail
from kintai.services.aggregation import attendance_detail, get_timezone, month_range

router = APIRouter()


@router.get(
    "/{staff_id}",
    response_model=AttendanceDetail,
    summary="Daily attendance breakdown of one staff member for a month",
)
async def get_attendance(
    staff_id: uuid.UUID,
    first_day: date = Depends(month_param),
    db: AsyncSession = Depends(get_db),
) -> AttendanceDetail:
    profiles = await repository.fetch_staff_profiles(db, [staff_id], include_admins=True)
    if not profiles:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff not found",
        )

    tz = get_timezone()
    start, end = month_range(first_day, tz)
    events = await repository.fetch_events(db, [staff_id], start, end)
    return attendance_detail(profiles[0], events, tz, first_day.strftime("%Y-%m"))
