"""Pydantic model validating one data row of a contract upload."""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal
from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_core import PydanticCustomError

from contractdesk.domain.model import (
    MONTHLY_VALUE_PRECISION,
    MONTHLY_VALUE_SCALE,
    ContractStatus,
    Plan,
    normalize_email,
)

EMAIL_PATTERN: Final = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
ISO_DATE_PATTERN: Final = re.compile(r"\d{4}-\d{2}-\d{2}")
VALUE_INTEGER_DIGITS: Final = MONTHLY_VALUE_PRECISION - MONTHLY_VALUE_SCALE
# plain decimal notation only; exponents, NaN and digit separators are rejected
PLAIN_NUMBER_PATTERN: Final = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")

PLAN_SPELLINGS: Final[dict[str, Plan]] = {
    "basico": Plan.BASIC,
    "pro": Plan.PRO,
    "enterprise": Plan.ENTERPRISE,
}
STATUS_SPELLINGS: Final[dict[str, ContractStatus]] = {
    "ativo": ContractStatus.ACTIVE,
    "inativo": ContractStatus.INACTIVE,
}


def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


class CsvContractRow(BaseModel):
    """Cells of one upload row, keyed by canonical column name."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    email: str
    plan: Plan
    value: Decimal
    status: ContractStatus
    start_date: date

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: object) -> str:
        text = _text(value)
        if not text:
            raise PydanticCustomError("blank_name", "name must not be empty")
        return text

    @field_validator("email", mode="before")
    @classmethod
    def _validate_email(cls, value: object) -> str:
        text = _text(value)
        if not text:
            raise PydanticCustomError("blank_email", "email must not be empty")
        if EMAIL_PATTERN.fullmatch(text) is None:
            raise PydanticCustomError(
                "invalid_email",
                "'{value}' is not a valid email address",
                {"value": text},
            )
        return normalize_email(text)

    @field_validator("plan", mode="before")
    @classmethod
    def _validate_plan(cls, value: object) -> Plan:
        text = _text(value)
        plan = PLAN_SPELLINGS.get(text.lower())
        if plan is None:
            raise PydanticCustomError(
                "unknown_plan",
                "unknown plan '{value}' (expected Basico, Pro or Enterprise)",
                {"value": text},
            )
        return plan

    @field_validator("value", mode="before")
    @classmethod
    def _validate_value(cls, value: object) -> Decimal:
        text = _text(value)
        # spreadsheet exports in pt-BR locales write 1234,56
        candidate = text.replace(",", ".") if "," in text and "." not in text else text
        if PLAIN_NUMBER_PATTERN.fullmatch(candidate) is None:
            raise PydanticCustomError(
                "invalid_value",
                "'{value}' is not a number",
                {"value": text},
            )
        amount = Decimal(candidate)
        if amount < 0:
            raise PydanticCustomError(
                "negative_value",
                "value must not be negative, got {value}",
                {"value": text},
            )
        if -amount.as_tuple().exponent > MONTHLY_VALUE_SCALE:
            raise PydanticCustomError(
                "too_many_decimals",
                "value must have at most {scale} decimal places, got {value}",
                {"value": text, "scale": MONTHLY_VALUE_SCALE},
            )
        if amount.adjusted() >= VALUE_INTEGER_DIGITS:
            raise PydanticCustomError(
                "value_too_large",
                "value must have at most {digits} integer digits, got {value}",
                {"value": text, "digits": VALUE_INTEGER_DIGITS},
            )
        return amount

    @field_validator("status", mode="before")
    @classmethod
    def _validate_status(cls, value: object) -> ContractStatus:
        text = _text(value)
        status = STATUS_SPELLINGS.get(text.lower())
        if status is None:
            raise PydanticCustomError(
                "unknown_status",
                "unknown status '{value}' (expected Ativo or Inativo)",
                {"value": text},
            )
        return status

    @field_validator("start_date", mode="before")
    @classmethod
    def _validate_start_date(cls, value: object) -> date:
        text = _text(value)
        parsed: date | None = None
        if ISO_DATE_PATTERN.fullmatch(text):
            try:
                parsed = date.fromisoformat(text)
            except ValueError:
                parsed = None
        if parsed is None:
            raise PydanticCustomError(
                "invalid_start_date",
                "'{value}' is not an ISO-8601 date (YYYY-MM-DD)",
                {"value": text},
            )
        return parsed
