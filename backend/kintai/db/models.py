import uuid
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

EVENT_TYPES = ("clock_in", "break_start", "break_end", "clock_out")
TAX_CATEGORIES = ("甲", "乙")


class Base(DeclarativeBase):
    pass


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_info: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    staff: Mapped[list["Staff"]] = relationship(
        "Staff", back_populates="company", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<Company id={self.id} name={self.name}>"


class Staff(Base):
    __tablename__ = "staff"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    pin: Mapped[str | None] = mapped_column(String(16), nullable=True)
    role: Mapped[str | None] = mapped_column(String(32), nullable=True)
    hourly_wage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    dependents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tax_category: Mapped[str | None] = mapped_column(
        Enum(*TAX_CATEGORIES, name="tax_category_enum"), nullable=True
    )

    allowance1_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    allowance1_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    allowance2_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    allowance2_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    allowance3_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    allowance3_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    deduction1_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    deduction1_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    deduction2_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    deduction2_value: Mapped[int | None] = mapped_column(Integer, nullable=True)

    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    company: Mapped["Company | None"] = relationship("Company", back_populates="staff")
    timecard_logs: Mapped[list["TimecardLog"]] = relationship(
        "TimecardLog", back_populates="staff", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<Staff id={self.id} name={self.name} pin={self.pin}>"


class TimecardLog(Base):
    __tablename__ = "timecard_logs"

    __table_args__ = (
        Index("ix_timecard_logs_staff_time", "staff_id", "timestamp"),
        Index("ix_timecard_logs_timestamp", "timestamp"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    staff_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False
    )
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True
    )
    event_type: Mapped[str] = mapped_column(
        Enum(*EVENT_TYPES, name="timecard_event_type_enum"), nullable=False
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_modified_by_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    staff: Mapped["Staff"] = relationship("Staff", back_populates="timecard_logs")

    def __repr__(self) -> str:
        return (
            f"<TimecardLog id={self.id} staff_id={self.staff_id} "
            f"event_type={self.event_type} timestamp={self.timestamp}>"
        )
