from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from kintai.schemas.payroll import TaxCategory


def _check_pin(v: str | None) -> str | None:
    if v is not None and not v.isdigit():
        raise ValueError("PIN must contain digits only")
    return v


class StaffCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    pin: str | None = Field(default=None, max_length=16)
    role: str | None = None
    company_id: UUID | None = None
    hourly_wage: int = Field(default=0, ge=0)
    dependents: int = Field(default=0, ge=0)
    tax_category: TaxCategory = "甲"

    allowance1_name: str | None = None
    allowance1_value: int | None = Field(default=None, ge=0)
    allowance2_name: str | None = None
    allowance2_value: int | None = Field(default=None, ge=0)
    allowance3_name: str | None = None
    allowance3_value: int | None = Field(default=None, ge=0)
    deduction1_name: str | None = None
    deduction1_value: int | None = Field(default=None, ge=0)
    deduction2_name: str | None = None
    deduction2_value: int | None = Field(default=None, ge=0)

    note: str | None = None

    @field_validator("name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field must not be empty")
        return v.strip()

    @field_validator("pin")
    @classmethod
    def digits_only(cls, v: str | None) -> str | None:
        return _check_pin(v)


class StaffUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    pin: str | None = Field(default=None, max_length=16)
    role: str | None = None
    company_id: UUID | None = None
    hourly_wage: int | None = Field(default=None, ge=0)
    dependents: int | None = Field(default=None, ge=0)
    tax_category: TaxCategory | None = None

    allowance1_name: str | None = None
    allowance1_value: int | None = Field(default=None, ge=0)
    allowance2_name: str | None = None
    allowance2_value: int | None = Field(default=None, ge=0)
    allowance3_name: str | None = None
    allowance3_value: int | None = Field(default=None, ge=0)
    deduction1_name: str | None = None
    deduction1_value: int | None = Field(default=None, ge=0)
    deduction2_name: str | None = None
    deduction2_value: int | None = Field(default=None, ge=0)

    note: str | None = None

    @field_validator("pin")
    @classmethod
    def digits_only(cls, v: str | None) -> str | None:
        return _check_pin(v)


class StaffResponse(BaseModel):
    id: UUID
    name: str
    pin: str | None
    role: str | None
    company_id: UUID | None
    hourly_wage: int | None
    dependents: int
    tax_category: TaxCategory | None

    allowance1_name: str | None
    allowance1_value: int | None
    allowance2_name: str | None
    allowance2_value: int | None
    allowance3_name: str | None
    allowance3_value: int | None
    deduction1_name: str | None
    deduction1_value: int | None
    deduction2_name: str | None
    deduction2_value: int | None

    note: str | None

    model_config = {"from_attributes": True}
