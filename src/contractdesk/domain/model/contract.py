"""Customer service contract aggregate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .entity import TimestampedEntity
from .enums import ContractStatus, Plan

if TYPE_CHECKING:
    from datetime import date, datetime
    from decimal import Decimal

# storage precision of monthly values: 10 integer digits, 2 decimal places
MONTHLY_VALUE_PRECISION = 12
MONTHLY_VALUE_SCALE = 2


def normalize_email(email: str) -> str:
    """Return the identity form of an email address (trimmed, lower-cased)."""

    return email.strip().lower()


@dataclass(eq=False, kw_only=True)
class Contract(TimestampedEntity):
    """A client's subscription to a plan, identified by the client email."""

    client_name: str
    client_email: str
    plan: Plan
    monthly_value: Decimal
    status: ContractStatus
    start_date: date

    def __post_init__(self) -> None:
        self.client_email = normalize_email(self.client_email)

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def reactivate(
        self,
        *,
        client_name: str,
        plan: Plan,
        monthly_value: Decimal,
        start_date: date,
        at: datetime | None = None,
    ) -> None:
        """Move an inactive contract back to active, refreshing its mutable fields."""

        if self.is_active:
            raise ValueError(f"Contract {self.id} is already active")
        self.client_name = client_name
        self.plan = plan
        self.monthly_value = monthly_value
        self.start_date = start_date
        self.status = ContractStatus.ACTIVE
        self.touch(at)

    def change_status(self, status: ContractStatus, *, at: datetime | None = None) -> None:
        """Set the status explicitly (administrative toggle, either direction)."""

        if status is self.status:
            return
        self.status = status
        self.touch(at)
