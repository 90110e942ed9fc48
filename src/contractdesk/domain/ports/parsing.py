"""Ports for turning uploaded files into candidate rows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contractdesk.domain.reconciliation.rows import ParsedBatch


@runtime_checkable
class ContractBatchParser(Protocol):
    """Callable port parsing raw upload bytes into a validated batch.

    Implementations raise ``BatchTooLargeError`` or ``MalformedFileError`` for
    file-level problems and report row-level problems in ``ParsedBatch.errors``.
    """

    def __call__(self, data: bytes) -> ParsedBatch: ...


__all__ = ["ContractBatchParser"]
