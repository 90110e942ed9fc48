"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from contractdesk.adapters.csv_upload import parse_contract_csv
from contractdesk.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContractUnitOfWork,
    is_started,
    startup,
)
from contractdesk.config import get_import_config
from contractdesk.domain.contract_admin import (
    ContractPage,
    ContractStatistics,
    change_contract_status,
    contract_statistics,
    delete_contract,
    list_contracts,
)
from contractdesk.domain.contract_import import (
    commit_candidate_rows,
    commit_contract_upload,
    preview_contract_upload,
)
from contractdesk.domain.ports.unit_of_work import ContractUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from contractdesk.domain.model import Contract, ContractStatus
    from contractdesk.domain.ports.persistence import ContractQuery
    from contractdesk.domain.reconciliation import (
        CandidateRow,
        CommitResult,
        ParsedBatch,
        PreviewSummary,
    )

UnitOfWorkFactory = Callable[[], ContractUnitOfWork]


log = getLogger(__name__)


def _resolve_unit_of_work(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyContractUnitOfWork


def _upload_parser(data: bytes) -> ParsedBatch:
    return parse_contract_csv(data, max_rows=get_import_config().max_rows)


def preview_contracts_csv(
    data: bytes,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> PreviewSummary:
    """Dry-run an uploaded CSV against the configured contract store."""

    log.info("Previewing contract upload (%s bytes)", len(data))
    return preview_contract_upload(
        data,
        parse_batch=_upload_parser,
        unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory),
    )


def import_contracts_csv(
    data: bytes,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> CommitResult:
    """Apply an uploaded CSV to the configured contract store."""

    log.info("Importing contract upload (%s bytes)", len(data))
    return commit_contract_upload(
        data,
        parse_batch=_upload_parser,
        unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory),
    )


def import_candidate_rows(
    rows: Sequence[CandidateRow],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> CommitResult:
    """Apply an explicitly resubmitted set of already-validated rows."""

    return commit_candidate_rows(
        rows,
        unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory),
    )


def browse_contracts(
    *,
    criteria: ContractQuery | None = None,
    page: int = 1,
    limit: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ContractPage:
    config = get_import_config()
    return list_contracts(
        unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory),
        criteria=criteria,
        page=page,
        limit=limit or config.default_page_size,
        max_limit=config.max_page_size,
    )


def set_contract_status(
    contract_id: UUID,
    status: ContractStatus,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Contract:
    return change_contract_status(
        contract_id,
        status,
        unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory),
    )


def remove_contract(
    contract_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> None:
    delete_contract(contract_id, unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory))


def dashboard_statistics(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ContractStatistics:
    return contract_statistics(unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory))
