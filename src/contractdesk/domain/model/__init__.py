"""Domain model for customer contracts."""

from __future__ import annotations

from .contract import (
    MONTHLY_VALUE_PRECISION,
    MONTHLY_VALUE_SCALE,
    Contract,
    normalize_email,
)
from .entity import Entity, TimestampedEntity, new_id, utcnow
from .enums import ContractStatus, Plan

__all__ = [
    "MONTHLY_VALUE_PRECISION",
    "MONTHLY_VALUE_SCALE",
    "Contract",
    "ContractStatus",
    "Entity",
    "Plan",
    "TimestampedEntity",
    "new_id",
    "normalize_email",
    "utcnow",
]
