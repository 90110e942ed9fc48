"""Errors raised by the contract upload reconciliation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .rows import CandidateRow, RowValidationError


class ContractImportError(Exception):
    """Base class for upload failures the caller is expected to report."""


class MalformedFileError(ContractImportError):
    """Raised when the upload cannot be read as a contract table at all."""


class BatchTooLargeError(ContractImportError):
    """Raised when the upload exceeds the row limit; no row has been processed."""

    def __init__(self, *, row_count: int, max_rows: int) -> None:
        self.row_count = row_count
        self.max_rows = max_rows
        super().__init__(
            f"Upload has {row_count} data rows; at most {max_rows} are accepted per file"
        )


class RowValidationFailedError(ContractImportError):
    """Raised when some rows were rejected; carries the rows that did validate."""

    def __init__(
        self,
        *,
        errors: Sequence[RowValidationError],
        valid_rows: Sequence[CandidateRow],
    ) -> None:
        self.errors = tuple(errors)
        self.valid_rows = tuple(valid_rows)
        rejected = len({error.row_number for error in self.errors})
        super().__init__(
            f"{rejected} row(s) failed validation; fix them or resubmit the "
            f"{len(self.valid_rows)} valid row(s) explicitly"
        )


class CommitConflictError(ContractImportError):
    """Raised when a concurrent write collided with the batch; nothing was applied."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = "Contract upload conflicted with a concurrent change and was rolled back; "
        message += "run the preview again and retry"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
