"""Reconciliation of uploaded contract batches against the contract store.

Flow:
1) a parser turns raw bytes into ``CandidateRow`` values plus row diagnostics
2) ``classify_rows`` tags each row New / Unchanged / Reactivation against a
   status snapshot (read-only)
3) ``build_preview`` aggregates the tags for human review, or
4) ``commit_rows`` re-classifies against the live store and applies the batch
   atomically through a unit of work
"""

from __future__ import annotations

from .classify import (
    Classification,
    NewContract,
    Outcome,
    Reactivation,
    StatusSnapshot,
    UnchangedContract,
    classify_row,
    classify_rows,
    snapshot_from_contracts,
)
from .commit import CommitResult, commit_rows, contract_from_row
from .errors import (
    BatchTooLargeError,
    CommitConflictError,
    ContractImportError,
    MalformedFileError,
    RowValidationFailedError,
)
from .preview import PreviewItem, PreviewSummary, build_preview
from .rows import CandidateRow, ParsedBatch, RowValidationError

__all__ = [
    "BatchTooLargeError",
    "CandidateRow",
    "Classification",
    "CommitConflictError",
    "CommitResult",
    "ContractImportError",
    "MalformedFileError",
    "NewContract",
    "Outcome",
    "ParsedBatch",
    "PreviewItem",
    "PreviewSummary",
    "Reactivation",
    "RowValidationError",
    "RowValidationFailedError",
    "StatusSnapshot",
    "UnchangedContract",
    "build_preview",
    "classify_row",
    "classify_rows",
    "commit_rows",
    "contract_from_row",
    "snapshot_from_contracts",
]
