"""Sales Schemas

Pydantic models for sale documents as they come out of a sales store.
Every field of a stored sale is optional; the validators here apply the
defaults the report relies on (missing amounts are zero, blank values are
unknown) and reject values that cannot be shown as a date or an amount."""
import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ...common.formatting import to_decimal


class SaleRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: Optional[datetime.datetime] = None
    employee_email: Optional[str] = Field(
        None, validation_alias=AliasChoices("employee_email", "employeeEmail")
    )
    subtotal: Decimal = Decimal(0)
    total: Decimal = Decimal(0)

    @field_validator("timestamp", "employee_email", mode="before")
    @classmethod
    def _blank_is_unknown(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("subtotal", "total", mode="before")
    @classmethod
    def _amount_or_zero(cls, value: Any) -> Decimal:
        return to_decimal(value)

    @property
    def seller(self) -> Optional[str]:
        """Local part of the seller's email, e.g. 'ana' for 'ana@technorth.mx'."""
        if not self.employee_email:
            return None
        return self.employee_email.split("@")[0]


class SaleCreateSchema(BaseModel):
    """A sale document read from a JSON file by the CLI loader."""
    timestamp: Optional[datetime.datetime] = None
    employee_email: Optional[str] = Field(
        None, validation_alias=AliasChoices("employee_email", "employeeEmail")
    )
    subtotal: Optional[Decimal] = None
    total: Optional[Decimal] = None
