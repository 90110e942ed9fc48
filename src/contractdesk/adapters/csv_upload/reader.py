"""Read uploaded CSV bytes into validated candidate rows."""

from __future__ import annotations

import csv
import io
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from contractdesk.config.importing import MAX_UPLOAD_ROWS
from contractdesk.domain.reconciliation import (
    BatchTooLargeError,
    CandidateRow,
    MalformedFileError,
    ParsedBatch,
    RowValidationError,
)

from .schema import CsvContractRow

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

log = getLogger(__name__)

REQUIRED_COLUMNS: Final[tuple[str, ...]] = (
    "name",
    "email",
    "plan",
    "value",
    "status",
    "start_date",
)
# Portuguese headers used by pt-BR spreadsheet templates
HEADER_ALIASES: Final[Mapping[str, str]] = {
    **{column: column for column in REQUIRED_COLUMNS},
    "nome": "name",
    "plano": "plan",
    "valor": "value",
    "data_inicio": "start_date",
}
DELIMITERS: Final[tuple[str, ...]] = (",", ";", "\t")


def parse_contract_csv(data: bytes, *, max_rows: int = MAX_UPLOAD_ROWS) -> ParsedBatch:
    """Parse ``data`` into candidate rows and per-row diagnostics.

    Raises ``MalformedFileError`` when the header is unusable and
    ``BatchTooLargeError`` when there are more than ``max_rows`` data rows;
    in both cases no row is validated.
    """

    text = _decode(data)
    records = _read_records(text)
    if not records:
        raise MalformedFileError("File is empty; expected a header row")

    columns = _resolve_header(records[0])
    data_rows = records[1:]
    if len(data_rows) > max_rows:
        raise BatchTooLargeError(row_count=len(data_rows), max_rows=max_rows)

    rows: list[CandidateRow] = []
    errors: list[RowValidationError] = []
    for row_number, cells in enumerate(data_rows, start=1):
        if len(cells) != len(columns):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    reason=f"expected {len(columns)} values, found {len(cells)}",
                )
            )
            continue
        record = dict(zip(columns, cells, strict=True))
        try:
            validated = CsvContractRow.model_validate(record)
        except ValidationError as exc:
            errors.extend(_row_errors(row_number, exc))
            continue
        rows.append(_to_candidate(row_number, validated))

    log.debug("Parsed contract upload: valid=%s, errors=%s", len(rows), len(errors))
    return ParsedBatch(rows=tuple(rows), errors=tuple(errors))


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedFileError("File is not valid UTF-8 text") from exc


def _read_records(text: str) -> list[list[str]]:
    header_line = next((line for line in text.splitlines() if line.strip()), None)
    if header_line is None:
        return []
    delimiter = max(DELIMITERS, key=header_line.count)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    try:
        return [cells for cells in reader if any(cell.strip() for cell in cells)]
    except csv.Error as exc:
        raise MalformedFileError(f"File is not valid CSV: {exc}") from exc


def _resolve_header(header: Sequence[str]) -> tuple[str, ...]:
    columns: list[str] = []
    unknown: list[str] = []
    duplicated: list[str] = []
    for raw in header:
        name = raw.strip().lower()
        column = HEADER_ALIASES.get(name)
        if column is None:
            unknown.append(raw.strip())
            continue
        if column in columns:
            duplicated.append(raw.strip())
            continue
        columns.append(column)

    missing = [column for column in REQUIRED_COLUMNS if column not in columns]
    problems: list[str] = []
    if missing:
        problems.append(f"missing columns: {', '.join(missing)}")
    if unknown:
        problems.append(f"unknown columns: {', '.join(unknown)}")
    if duplicated:
        problems.append(f"duplicated columns: {', '.join(duplicated)}")
    if problems:
        expected = ", ".join(REQUIRED_COLUMNS)
        raise MalformedFileError(f"Invalid header ({'; '.join(problems)}); expected {expected}")
    return tuple(columns)


def _row_errors(row_number: int, exc: ValidationError) -> list[RowValidationError]:
    errors: list[RowValidationError] = []
    for error in exc.errors():
        location = error.get("loc", ())
        field = str(location[0]) if location else None
        errors.append(RowValidationError(row_number=row_number, reason=error["msg"], field=field))
    return errors


def _to_candidate(row_number: int, validated: CsvContractRow) -> CandidateRow:
    return CandidateRow(
        row_number=row_number,
        name=validated.name,
        email=validated.email,
        plan=validated.plan,
        monthly_value=validated.value,
        status=validated.status,
        start_date=validated.start_date,
    )
