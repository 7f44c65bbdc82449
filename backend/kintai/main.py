import logging
import subprocess
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kintai.api.admin import router as admin_router
from kintai.api.attendance import router as attendance_router
from kintai.api.payroll import router as payroll_router
from kintai.api.staff import router as staff_router
from kintai.api.timecard import router as timecard_router
from kintai.core.config import settings

logger = logging.getLogger(__name__)


def run_migrations() -> None:
    logger.info("Running Alembic migrations...")
    try:
        result = subprocess.run(
            ["alembic", "upgrade", "head"],
            capture_output=True,
            text=True,
            cwd=settings.MIGRATIONS_CWD,
        )
        if result.returncode != 0:
            logger.error("Alembic migration failed:\n%s", result.stderr)
        else:
            logger.info("Migrations applied successfully:\n%s", result.stdout)
    except Exception as exc:
        logger.exception("Failed to run migrations: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Apply Alembic migrations on startup unless disabled."""
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        run_migrations()

    yield

    logger.info("Shutting down Kintai backend.")


app = FastAPI(
    title="Kintai API",
    description="勤怠打刻から月次給与（総支給額・源泉所得税・差引支給額）を算出するAPI",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(admin_router, prefix="/api/admin", tags=["Admin"])
app.include_router(timecard_router, prefix="/api/timecard", tags=["Timecard"])
app.include_router(attendance_router, prefix="/api/attendance", tags=["Attendance"])
app.include_router(payroll_router, prefix="/api/payroll", tags=["Payroll"])
app.include_router(staff_router, prefix="/api/staff", tags=["Staff"])


@app.get("/health", tags=["System"])
async def health_check() -> dict:
    return {"status": "ok"}
