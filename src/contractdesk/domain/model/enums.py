"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Plan(StrEnum):
    BASIC = "BASICO"
    PRO = "PRO"
    ENTERPRISE = "ENTERPRISE"


class ContractStatus(StrEnum):
    ACTIVE = "ATIVO"
    INACTIVE = "INATIVO"

    @property
    def is_active(self) -> bool:
        return self is ContractStatus.ACTIVE
