"""Contract administration: listing, status changes, deletion and statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from logging import getLogger
from typing import TYPE_CHECKING

from contractdesk.config.importing import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from contractdesk.domain.model import ContractStatus, Plan
from contractdesk.domain.ports.persistence import ContractQuery

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from contractdesk.domain.model import Contract
    from contractdesk.domain.ports.persistence import PlanStatusTotals
    from contractdesk.domain.ports.unit_of_work import ContractUnitOfWork

    UnitOfWorkFactory = Callable[[], ContractUnitOfWork]

log = getLogger(__name__)


class ContractNotFoundError(LookupError):
    """Raised when an administrative operation targets an unknown contract."""

    def __init__(self, contract_id: UUID) -> None:
        self.contract_id = contract_id
        super().__init__(f"Contract {contract_id} not found")


@dataclass(frozen=True, slots=True)
class ContractPage:
    items: tuple[Contract, ...]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


def _zero_by_plan() -> dict[Plan, int]:
    return dict.fromkeys(Plan, 0)


def _zero_value_by_plan() -> dict[Plan, Decimal]:
    return dict.fromkeys(Plan, Decimal(0))


@dataclass(slots=True)
class ContractStatistics:
    """Dashboard aggregates over every stored contract."""

    total_clients: int = 0
    active: int = 0
    inactive: int = 0
    per_plan: dict[Plan, int] = field(default_factory=_zero_by_plan)
    monthly_value_active: Decimal = Decimal(0)
    monthly_value_inactive: Decimal = Decimal(0)
    monthly_value_per_plan: dict[Plan, Decimal] = field(default_factory=_zero_value_by_plan)


def list_contracts(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    criteria: ContractQuery | None = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> ContractPage:
    """Return one page of contracts, newest first."""

    effective_page = max(page, 1)
    effective_limit = min(max(limit, 1), max_limit)
    with unit_of_work_factory() as uow:
        items, total = uow.repositories.contracts.query(
            criteria or ContractQuery(),
            offset=(effective_page - 1) * effective_limit,
            limit=effective_limit,
        )
    return ContractPage(
        items=tuple(items),
        total=total,
        page=effective_page,
        limit=effective_limit,
    )


def change_contract_status(
    contract_id: UUID,
    status: ContractStatus,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
) -> Contract:
    """Toggle a contract's status explicitly (either direction)."""

    with unit_of_work_factory() as uow:
        contract = uow.repositories.contracts.get(contract_id)
        if contract is None:
            raise ContractNotFoundError(contract_id)
        contract.change_status(status)
        uow.commit()
    log.info("Contract %s status set to %s", contract_id, status)
    return contract


def delete_contract(contract_id: UUID, *, unit_of_work_factory: UnitOfWorkFactory) -> None:
    with unit_of_work_factory() as uow:
        repository = uow.repositories.contracts
        contract = repository.get(contract_id)
        if contract is None:
            raise ContractNotFoundError(contract_id)
        repository.remove(contract)
        uow.commit()
    log.info("Contract %s deleted", contract_id)


def contract_statistics(*, unit_of_work_factory: UnitOfWorkFactory) -> ContractStatistics:
    with unit_of_work_factory() as uow:
        totals = uow.repositories.contracts.totals_by_plan_and_status()
    return _aggregate(totals)


def _aggregate(totals: Sequence[PlanStatusTotals]) -> ContractStatistics:
    stats = ContractStatistics()
    for entry in totals:
        stats.total_clients += entry.count
        stats.per_plan[entry.plan] += entry.count
        stats.monthly_value_per_plan[entry.plan] += entry.monthly_value
        if entry.status is ContractStatus.ACTIVE:
            stats.active += entry.count
            stats.monthly_value_active += entry.monthly_value
        else:
            stats.inactive += entry.count
            stats.monthly_value_inactive += entry.monthly_value
    return stats
