"""Candidate rows produced by upload parsers, and their validation diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date
    from decimal import Decimal

    from contractdesk.domain.model import ContractStatus, Plan


@dataclass(frozen=True, slots=True, kw_only=True)
class CandidateRow:
    """One validated upload line describing a prospective contract.

    ``email`` is already in identity form (see ``normalize_email``).
    """

    row_number: int
    name: str
    email: str
    plan: Plan
    monthly_value: Decimal
    status: ContractStatus
    start_date: date


@dataclass(frozen=True, slots=True)
class RowValidationError:
    """Diagnostic for one rejected cell (or a whole row when ``field`` is ``None``)."""

    row_number: int
    reason: str
    field: str | None = None

    def __str__(self) -> str:
        if self.field is None:
            return f"Row {self.row_number}: {self.reason}"
        return f"Row {self.row_number}, column '{self.field}': {self.reason}"


@dataclass(frozen=True, slots=True)
class ParsedBatch:
    """Parser output: valid rows and rejected-row diagnostics, both in file order."""

    rows: tuple[CandidateRow, ...] = ()
    errors: tuple[RowValidationError, ...] = field(default=())

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def rejected_row_numbers(self) -> tuple[int, ...]:
        return tuple(sorted({error.row_number for error in self.errors}))
