"""Atomic application of a classified batch to the contract store.

Responsibilities of this stage:
- re-read the live store inside the caller's unit of work
- re-classify (the store may have changed since any earlier preview)
- stage inserts and reactivations, then commit once

A storage uniqueness violation means another writer inserted one of the
batch's emails concurrently; the whole batch is rolled back.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from contractdesk.domain.model import Contract, normalize_email, utcnow
from contractdesk.domain.ports.persistence import UniqueViolationError

from .classify import NewContract, Reactivation, classify_rows, snapshot_from_contracts
from .errors import CommitConflictError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from contractdesk.domain.ports.unit_of_work import ContractUnitOfWork

    from .rows import CandidateRow

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Applied counts; ``inserted + updated + ignored == total``."""

    inserted: int = 0
    updated: int = 0
    ignored: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.updated + self.ignored

    def to_dict(self) -> dict[str, int]:
        return {
            "inserted": self.inserted,
            "updated": self.updated,
            "ignored": self.ignored,
            "total": self.total,
        }


def contract_from_row(row: CandidateRow, *, at: datetime | None = None) -> Contract:
    """Build a new contract carrying the row's own status."""

    created = at or utcnow()
    return Contract(
        client_name=row.name,
        client_email=row.email,
        plan=row.plan,
        monthly_value=row.monthly_value,
        status=row.status,
        start_date=row.start_date,
        created_at=created,
        updated_at=created,
    )


def commit_rows(
    rows: Sequence[CandidateRow],
    uow: ContractUnitOfWork,
    *,
    now: datetime | None = None,
) -> CommitResult:
    """Classify ``rows`` against the live store and apply them in one transaction."""

    repository = uow.repositories.contracts
    stored = repository.get_by_emails(row.email for row in rows)
    classifications = classify_rows(rows, snapshot_from_contracts(stored.values()))

    at = now or utcnow()
    pending: dict[str, Contract] = {}
    inserted = updated = ignored = 0
    for classification in classifications:
        row = classification.row
        key = normalize_email(row.email)
        if isinstance(classification, NewContract):
            contract = contract_from_row(row, at=at)
            repository.add(contract)
            pending[key] = contract
            inserted += 1
        elif isinstance(classification, Reactivation):
            target = pending.get(key) or stored[key]
            target.reactivate(
                client_name=row.name,
                plan=row.plan,
                monthly_value=row.monthly_value,
                start_date=row.start_date,
                at=at,
            )
            updated += 1
        else:
            ignored += 1

    try:
        uow.commit()
    except UniqueViolationError as exc:
        uow.rollback()
        log.warning("Contract commit rolled back after a uniqueness conflict: %s", exc)
        raise CommitConflictError(str(exc)) from exc

    return CommitResult(inserted=inserted, updated=updated, ignored=ignored)
