"""Upload and listing limits."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_int_env
from .errors import ConfigurationError

MAX_UPLOAD_ROWS = 100
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class ImportConfig:
    max_rows: int = MAX_UPLOAD_ROWS
    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE


def get_import_config() -> ImportConfig:
    # the upload row limit is fixed; only listing page sizes are tunable
    default_page_size = optional_int_env("CONTRACTDESK_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    if not 1 <= default_page_size <= MAX_PAGE_SIZE:
        raise ConfigurationError(
            f"CONTRACTDESK_PAGE_SIZE must be between 1 and {MAX_PAGE_SIZE}"
        )
    return ImportConfig(default_page_size=default_page_size)
