from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from contractdesk import app as app_module
from contractdesk.adapters.sqlalchemy.unit_of_work import is_started, shutdown
from contractdesk.domain.model import ContractStatus
from contractdesk.domain.reconciliation import BatchTooLargeError, RowValidationFailedError
from tests.helpers.contracts import csv_bytes, csv_line

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from contractdesk.adapters.sqlalchemy.unit_of_work import SqlAlchemyContractUnitOfWork

    UowFactory = Callable[[], SqlAlchemyContractUnitOfWork]


@pytest.fixture
def fresh_adapter(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    shutdown()
    yield
    shutdown()


def test_entrypoints_start_adapter_on_first_use(fresh_adapter: None) -> None:
    _ = fresh_adapter
    assert not is_started()

    result = app_module.import_contracts_csv(csv_bytes(csv_line("first@x.com")))

    assert is_started()
    assert result.inserted == 1
    assert app_module.dashboard_statistics().total_clients == 1


def test_upload_round_trip_through_entrypoints(sqlite_unit_of_work: UowFactory) -> None:
    data = csv_bytes(
        csv_line("a@x.com"),
        csv_line("b@x.com", status="Inativo"),
        csv_line("a@x.com"),
    )

    preview = app_module.preview_contracts_csv(data, unit_of_work_factory=sqlite_unit_of_work)
    result = app_module.import_contracts_csv(data, unit_of_work_factory=sqlite_unit_of_work)

    assert (preview.count_new, preview.count_unchanged) == (2, 1)
    assert (result.inserted, result.ignored) == (2, 1)


def test_upload_limit_comes_from_config(sqlite_unit_of_work: UowFactory) -> None:
    data = csv_bytes(*(csv_line(f"u{i}@x.com") for i in range(101)))

    with pytest.raises(BatchTooLargeError) as excinfo:
        app_module.preview_contracts_csv(data, unit_of_work_factory=sqlite_unit_of_work)

    assert excinfo.value.max_rows == 100


def test_resubmitting_valid_rows(sqlite_unit_of_work: UowFactory) -> None:
    data = csv_bytes(csv_line("ok@x.com"), csv_line("broken", value="x"))

    with pytest.raises(RowValidationFailedError) as excinfo:
        app_module.import_contracts_csv(data, unit_of_work_factory=sqlite_unit_of_work)

    assert len(excinfo.value.errors) == 2
    result = app_module.import_candidate_rows(
        excinfo.value.valid_rows,
        unit_of_work_factory=sqlite_unit_of_work,
    )
    assert result.inserted == 1


def test_admin_entrypoints(
    sqlite_unit_of_work: UowFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("CONTRACTDESK_PAGE_SIZE", "2")
    app_module.import_contracts_csv(
        csv_bytes(*(csv_line(f"c{i}@x.com") for i in range(5))),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    page = app_module.browse_contracts(unit_of_work_factory=sqlite_unit_of_work)
    assert (page.limit, page.total, page.total_pages) == (2, 5, 3)

    target = page.items[0]
    updated = app_module.set_contract_status(
        target.id,
        ContractStatus.INACTIVE,
        unit_of_work_factory=sqlite_unit_of_work,
    )
    assert updated.status is ContractStatus.INACTIVE

    app_module.remove_contract(target.id, unit_of_work_factory=sqlite_unit_of_work)
    stats = app_module.dashboard_statistics(unit_of_work_factory=sqlite_unit_of_work)
    assert (stats.total_clients, stats.active, stats.inactive) == (4, 4, 0)
