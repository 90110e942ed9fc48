"""SQLAlchemy adapter package for contractdesk."""

from __future__ import annotations

from .mappings import contract_table, create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyContractRepository

__all__ = [
    "SqlAlchemyContractRepository",
    "contract_table",
    "create_all_tables",
    "mapper_registry",
    "start_mappers",
]
