"""Application services for previewing and committing contract uploads."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from contractdesk.domain.reconciliation import (
    CommitResult,
    PreviewSummary,
    RowValidationFailedError,
    build_preview,
    classify_rows,
    commit_rows,
    snapshot_from_contracts,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from contractdesk.domain.ports.parsing import ContractBatchParser
    from contractdesk.domain.ports.unit_of_work import ContractUnitOfWork
    from contractdesk.domain.reconciliation import CandidateRow, ParsedBatch

    UnitOfWorkFactory = Callable[[], ContractUnitOfWork]

log = getLogger(__name__)


def preview_contract_upload(
    data: bytes,
    *,
    parse_batch: ContractBatchParser,
    unit_of_work_factory: UnitOfWorkFactory,
) -> PreviewSummary:
    """Parse an upload and report what committing it would do, without writing."""

    batch = parse_batch(data)
    _require_clean(batch)
    return preview_candidate_rows(batch.rows, unit_of_work_factory=unit_of_work_factory)


def commit_contract_upload(
    data: bytes,
    *,
    parse_batch: ContractBatchParser,
    unit_of_work_factory: UnitOfWorkFactory,
) -> CommitResult:
    """Parse an upload and apply it atomically against the current store."""

    batch = parse_batch(data)
    _require_clean(batch)
    return commit_candidate_rows(batch.rows, unit_of_work_factory=unit_of_work_factory)


def preview_candidate_rows(
    rows: Sequence[CandidateRow],
    *,
    unit_of_work_factory: UnitOfWorkFactory,
) -> PreviewSummary:
    """Classify already-validated rows against the store and summarise them."""

    with unit_of_work_factory() as uow:
        stored = uow.repositories.contracts.get_by_emails(row.email for row in rows)
        classifications = classify_rows(rows, snapshot_from_contracts(stored.values()))

    summary = build_preview(classifications)
    log.info(
        "Previewed contract upload: total=%s, new=%s, unchanged=%s, reactivation=%s",
        summary.total,
        summary.count_new,
        summary.count_unchanged,
        summary.count_reactivation,
    )
    return summary


def commit_candidate_rows(
    rows: Sequence[CandidateRow],
    *,
    unit_of_work_factory: UnitOfWorkFactory,
) -> CommitResult:
    """Apply already-validated rows (for example a resubmitted valid subset)."""

    log.info("Committing contract upload with %s rows", len(rows))
    with unit_of_work_factory() as uow:
        result = commit_rows(rows, uow)

    log.info(
        "Committed contract upload: inserted=%s, updated=%s, ignored=%s, total=%s",
        result.inserted,
        result.updated,
        result.ignored,
        result.total,
    )
    return result


def _require_clean(batch: ParsedBatch) -> None:
    if batch.has_errors:
        log.info(
            "Rejecting upload: %s invalid row(s), %s valid row(s)",
            len(batch.rejected_row_numbers),
            len(batch.rows),
        )
        raise RowValidationFailedError(errors=batch.errors, valid_rows=batch.rows)
