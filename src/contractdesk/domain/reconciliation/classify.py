"""Three-way classification of candidate rows against stored contracts.

The decision table lives in ``classify_row``; ``classify_rows`` threads a
running view of the store through the batch so that repeated emails see the
hypothetical outcome of their earlier occurrences.

    stored      incoming    outcome
    ----------  ----------  ------------
    absent      any         New
    active      any         Unchanged
    inactive    active      Reactivation
    inactive    inactive    Unchanged
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

from contractdesk.domain.model import ContractStatus, normalize_email

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from contractdesk.domain.model import Contract

    from .rows import CandidateRow

type StatusSnapshot = Mapping[str, ContractStatus]

REASON_ALREADY_ACTIVE = "already active"
REASON_STILL_INACTIVE = "inactive, not reactivated"
REASON_DUPLICATE_IN_BATCH = "duplicate in batch"


class Outcome(StrEnum):
    NEW = "new"
    UNCHANGED = "unchanged"
    REACTIVATION = "reactivation"


@dataclass(frozen=True, slots=True, kw_only=True)
class NewContract:
    """No contract exists for the email; the row will be inserted as-is."""

    row: CandidateRow
    reason: str | None = None
    outcome: Literal[Outcome.NEW] = Outcome.NEW


@dataclass(frozen=True, slots=True, kw_only=True)
class UnchangedContract:
    """A contract exists and the row does not change it."""

    row: CandidateRow
    reason: str
    outcome: Literal[Outcome.UNCHANGED] = Outcome.UNCHANGED


@dataclass(frozen=True, slots=True, kw_only=True)
class Reactivation:
    """An inactive contract exists and the row asks for it to be active."""

    row: CandidateRow
    reason: str | None = None
    outcome: Literal[Outcome.REACTIVATION] = Outcome.REACTIVATION


type Classification = NewContract | UnchangedContract | Reactivation


def classify_row(row: CandidateRow, stored: ContractStatus | None) -> Classification:
    """Classify one row given the status currently visible for its email."""

    if stored is None:
        return NewContract(row=row)
    if stored.is_active:
        return UnchangedContract(row=row, reason=REASON_ALREADY_ACTIVE)
    if row.status.is_active:
        return Reactivation(row=row)
    return UnchangedContract(row=row, reason=REASON_STILL_INACTIVE)


def classify_rows(
    rows: Sequence[CandidateRow],
    snapshot: StatusSnapshot,
) -> tuple[Classification, ...]:
    """Classify ``rows`` in order against ``snapshot`` (email -> stored status).

    Pure: ``snapshot`` is never mutated and equal inputs give equal outputs.
    """

    view: dict[str, ContractStatus] = {
        normalize_email(email): status for email, status in snapshot.items()
    }
    seen: set[str] = set()
    classifications: list[Classification] = []
    for row in rows:
        key = normalize_email(row.email)
        classification = classify_row(row, view.get(key))
        if key in seen and isinstance(classification, UnchangedContract):
            classification = UnchangedContract(row=row, reason=REASON_DUPLICATE_IN_BATCH)

        if isinstance(classification, NewContract):
            view[key] = row.status
        elif isinstance(classification, Reactivation):
            view[key] = ContractStatus.ACTIVE

        seen.add(key)
        classifications.append(classification)
    return tuple(classifications)


def snapshot_from_contracts(contracts: Iterable[Contract]) -> dict[str, ContractStatus]:
    """Build a classification snapshot from stored contracts."""

    return {normalize_email(contract.client_email): contract.status for contract in contracts}
