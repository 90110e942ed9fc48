"""Ports for persisting contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from contractdesk.domain.model import Contract

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import date
    from decimal import Decimal
    from uuid import UUID

    from contractdesk.domain.model import ContractStatus, Plan


class PersistenceError(RuntimeError):
    """Base class for failures reported by persistence adapters."""


class UniqueViolationError(PersistenceError):
    """Raised when a write collides with a uniqueness guarantee of the store."""


class StorageUnavailableError(PersistenceError):
    """Raised when the store cannot be reached or fails mid-operation."""


@dataclass(frozen=True, slots=True, kw_only=True)
class ContractQuery:
    """Listing filters; ``None`` means "do not filter on this attribute"."""

    contract_id: UUID | None = None
    name_contains: str | None = None
    email_contains: str | None = None
    plan: Plan | None = None
    status: ContractStatus | None = None
    monthly_value: Decimal | None = None
    start_date: date | None = None


@dataclass(frozen=True, slots=True)
class PlanStatusTotals:
    """Aggregated count and monthly value for one (plan, status) pair."""

    plan: Plan
    status: ContractStatus
    count: int
    monthly_value: Decimal


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ContractRepository(Repository[Contract], Protocol):
    """Persistence contract for contracts, keyed by id and by client email."""

    def get(self, contract_id: UUID) -> Contract | None: ...

    def get_by_email(self, email: str) -> Contract | None: ...

    def get_by_emails(self, emails: Iterable[str]) -> dict[str, Contract]:
        """Return stored contracts keyed by normalized email (case-insensitive match)."""
        ...

    def remove(self, entity: Contract) -> None: ...

    def query(
        self,
        criteria: ContractQuery,
        *,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[Contract], int]:
        """Return one page of matching contracts and the total match count."""
        ...

    def totals_by_plan_and_status(self) -> Sequence[PlanStatusTotals]: ...
