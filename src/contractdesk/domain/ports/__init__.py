"""Domain port definitions for adapters."""

from __future__ import annotations

from .parsing import ContractBatchParser
from .persistence import (
    ContractQuery,
    ContractRepository,
    PersistenceError,
    PlanStatusTotals,
    Repository,
    StorageUnavailableError,
    UniqueViolationError,
)
from .unit_of_work import (
    ContractRepositories,
    ContractUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ContractBatchParser",
    "ContractQuery",
    "ContractRepositories",
    "ContractRepository",
    "ContractUnitOfWork",
    "PersistenceError",
    "PlanStatusTotals",
    "Repository",
    "RepositoryCollection",
    "StorageUnavailableError",
    "UniqueViolationError",
    "UnitOfWork",
]
