"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, cast

from sqlalchemy import func, select

from contractdesk.adapters.sqlalchemy.errors import translated_errors
from contractdesk.adapters.sqlalchemy.mappings import contract_table
from contractdesk.domain.model import Contract, normalize_email
from contractdesk.domain.ports.persistence import PlanStatusTotals

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable, Sequence

    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session

    from contractdesk.domain.ports.persistence import ContractQuery


class SqlAlchemyContractRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Contract) -> None:
        self.session.add(entity)

    def remove(self, entity: Contract) -> None:
        self.session.delete(entity)

    def get(self, contract_id: uuid.UUID) -> Contract | None:
        with translated_errors():
            return self.session.get(Contract, contract_id)

    def get_by_email(self, email: str) -> Contract | None:
        stmt = (
            select(Contract)
            .where(func.lower(contract_table.c.client_email) == normalize_email(email))
            .limit(1)
        )
        with translated_errors():
            return self.session.execute(stmt).scalars().first()

    def get_by_emails(self, emails: Iterable[str]) -> dict[str, Contract]:
        keys = sorted({normalize_email(email) for email in emails})
        if not keys:
            return {}
        stmt = select(Contract).where(func.lower(contract_table.c.client_email).in_(keys))
        with translated_errors():
            contracts = self.session.execute(stmt).scalars().all()
        return {normalize_email(contract.client_email): contract for contract in contracts}

    def query(
        self,
        criteria: ContractQuery,
        *,
        offset: int,
        limit: int,
    ) -> tuple[Sequence[Contract], int]:
        conditions = _conditions(criteria)
        count_stmt = select(func.count()).select_from(contract_table).where(*conditions)
        page_stmt = (
            select(Contract)
            .where(*conditions)
            .order_by(contract_table.c.created_at.desc(), contract_table.c.id)
            .offset(offset)
            .limit(limit)
        )
        with translated_errors():
            total = self.session.execute(count_stmt).scalar_one()
            items = self.session.execute(page_stmt).scalars().all()
        return items, total

    def totals_by_plan_and_status(self) -> Sequence[PlanStatusTotals]:
        stmt = (
            select(
                contract_table.c.plan,
                contract_table.c.status,
                func.count(),
                func.coalesce(func.sum(contract_table.c.monthly_value), 0),
            )
            .group_by(contract_table.c.plan, contract_table.c.status)
            .order_by(contract_table.c.plan, contract_table.c.status)
        )
        with translated_errors():
            rows = self.session.execute(stmt).all()
        return [
            PlanStatusTotals(
                plan=plan,
                status=status,
                count=count,
                monthly_value=Decimal(str(total)).quantize(Decimal("0.01")),
            )
            for plan, status, count, total in rows
        ]


def _conditions(criteria: ContractQuery) -> list[ColumnElement[bool]]:
    columns = contract_table.c
    conditions: list[ColumnElement[bool]] = []
    if criteria.contract_id is not None:
        conditions.append(columns.id == criteria.contract_id)
    if criteria.name_contains:
        needle = criteria.name_contains.strip().lower()
        conditions.append(func.lower(columns.client_name).contains(needle, autoescape=True))
    if criteria.email_contains:
        needle = criteria.email_contains.strip().lower()
        conditions.append(func.lower(columns.client_email).contains(needle, autoescape=True))
    if criteria.plan is not None:
        conditions.append(columns.plan == criteria.plan)
    if criteria.status is not None:
        conditions.append(columns.status == criteria.status)
    if criteria.monthly_value is not None:
        conditions.append(columns.monthly_value == criteria.monthly_value)
    if criteria.start_date is not None:
        conditions.append(columns.start_date == criteria.start_date)
    return conditions


if TYPE_CHECKING:
    from contractdesk.domain.ports.persistence import ContractRepository

    _session_stub = cast("Session", object())
    _repo_check: ContractRepository = SqlAlchemyContractRepository(_session_stub)
