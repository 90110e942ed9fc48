from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from contractdesk.domain.contract_admin import ContractNotFoundError, ContractPage
from contractdesk.domain.model import ContractStatus, Plan
from contractdesk.domain.ports.persistence import ContractQuery
from contractdesk.domain.reconciliation import (
    BatchTooLargeError,
    CommitResult,
    PreviewSummary,
    RowValidationError,
    RowValidationFailedError,
)
from contractdesk.ui import cli as cli_module
from tests.helpers.contracts import make_contract

if TYPE_CHECKING:
    from pathlib import Path

    from contractdesk.domain.model import Contract


@pytest.fixture
def upload(tmp_path: Path) -> Path:
    path = tmp_path / "contracts.csv"
    path.write_bytes(b"name,email,plan,value,status,start_date\n")
    return path


def test_cli_preview_reads_file(monkeypatch: pytest.MonkeyPatch, upload: Path) -> None:
    captured: dict[str, object] = {}

    def fake_preview(data: bytes) -> PreviewSummary:
        captured["data"] = data
        return PreviewSummary(total=0)

    monkeypatch.setattr(cli_module, "preview_contracts_csv", fake_preview)

    cli_module.main(["preview", str(upload)])

    assert captured["data"] == upload.read_bytes()


def test_cli_import_reports_result(monkeypatch: pytest.MonkeyPatch, upload: Path) -> None:
    calls: list[bytes] = []

    def fake_import(data: bytes) -> CommitResult:
        calls.append(data)
        return CommitResult(inserted=1)

    monkeypatch.setattr(cli_module, "import_contracts_csv", fake_import)

    cli_module.main(["import", str(upload)])

    assert len(calls) == 1


def test_cli_missing_file_exits_with_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(tmp_path / "missing.csv")])

    assert excinfo.value.code == 2


def test_cli_row_errors_exit_with_usage_error(
    monkeypatch: pytest.MonkeyPatch,
    upload: Path,
) -> None:
    def fake_import(_data: bytes) -> CommitResult:
        raise RowValidationFailedError(
            errors=[RowValidationError(row_number=3, reason="bad email", field="email")],
            valid_rows=[],
        )

    monkeypatch.setattr(cli_module, "import_contracts_csv", fake_import)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(upload)])

    assert excinfo.value.code == 2


def test_cli_batch_too_large_exits_with_usage_error(
    monkeypatch: pytest.MonkeyPatch,
    upload: Path,
) -> None:
    def fake_preview(_data: bytes) -> PreviewSummary:
        raise BatchTooLargeError(row_count=101, max_rows=100)

    monkeypatch.setattr(cli_module, "preview_contracts_csv", fake_preview)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["preview", str(upload)])

    assert excinfo.value.code == 2


def test_cli_unexpected_failure_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    contract_id = uuid.uuid4()

    def fake_remove(_contract_id: uuid.UUID) -> None:
        raise ContractNotFoundError(contract_id)

    monkeypatch.setattr(cli_module, "remove_contract", fake_remove)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["delete", str(contract_id)])

    assert excinfo.value.code == 1


def test_cli_list_builds_query(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_browse(**kwargs: object) -> ContractPage:
        captured.update(kwargs)
        return ContractPage(items=(make_contract("a@x.com"),), total=1, page=2, limit=5)

    monkeypatch.setattr(cli_module, "browse_contracts", fake_browse)

    cli_module.main(
        [
            "list",
            "--name",
            "ana",
            "--plan",
            "enterprise",
            "--status",
            "Inativo",
            "--value",
            "99.90",
            "--start-date",
            "2024-01-31",
            "--page",
            "2",
            "--limit",
            "5",
        ]
    )

    criteria = captured["criteria"]
    assert isinstance(criteria, ContractQuery)
    assert criteria.name_contains == "ana"
    assert criteria.plan is Plan.ENTERPRISE
    assert criteria.status is ContractStatus.INACTIVE
    assert criteria.monthly_value == Decimal("99.90")
    assert criteria.start_date == date(2024, 1, 31)
    assert (captured["page"], captured["limit"]) == (2, 5)


def test_cli_list_rejects_unknown_plan() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["list", "--plan", "gold"])

    assert excinfo.value.code == 2


def test_cli_status_parses_arguments(monkeypatch: pytest.MonkeyPatch) -> None:
    contract = make_contract("a@x.com")
    captured: dict[str, object] = {}

    def fake_set(contract_id: uuid.UUID, status: ContractStatus) -> Contract:
        captured["args"] = (contract_id, status)
        contract.change_status(status)
        return contract

    monkeypatch.setattr(cli_module, "set_contract_status", fake_set)

    cli_module.main(["status", str(contract.id), "inativo"])

    assert captured["args"] == (contract.id, ContractStatus.INACTIVE)


def test_cli_status_rejects_invalid_id() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["status", "not-a-uuid", "ativo"])

    assert excinfo.value.code == 2


def test_cli_requires_command() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 2


def test_cli_run_installs_sigint_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    installed: list[tuple[object, object]] = []
    calls: list[str] = []

    monkeypatch.setattr(cli_module, "signal", lambda sig, handler: installed.append((sig, handler)))
    monkeypatch.setattr(cli_module, "main", lambda: calls.append("main"))

    cli_module.run()

    assert installed == [(cli_module.SIGINT, cli_module.sigint_handler)]
    assert calls == ["main"]


def test_sigint_handler_exits_cleanly() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.sigint_handler(2, None)

    assert excinfo.value.code == 0
