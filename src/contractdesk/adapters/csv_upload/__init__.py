"""CSV upload adapter: header resolution, row validation and translation."""

from __future__ import annotations

from .reader import DELIMITERS, HEADER_ALIASES, REQUIRED_COLUMNS, parse_contract_csv
from .schema import CsvContractRow

__all__ = [
    "DELIMITERS",
    "HEADER_ALIASES",
    "REQUIRED_COLUMNS",
    "CsvContractRow",
    "parse_contract_csv",
]
