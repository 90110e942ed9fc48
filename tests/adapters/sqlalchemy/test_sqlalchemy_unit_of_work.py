from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, OperationalError

from contractdesk.adapters.sqlalchemy.errors import translated_errors
from contractdesk.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContractUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)
from contractdesk.domain.ports.persistence import (
    PersistenceError,
    StorageUnavailableError,
    UniqueViolationError,
)
from tests.helpers.contracts import make_contract

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyContractUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert SqlAlchemyContractUnitOfWork().session_factory.kw["bind"] is engine_b
    assert is_started()


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyContractUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_unit_of_work_persists_on_commit(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyContractUnitOfWork() as uow:
        uow.repositories.contracts.add(make_contract("kept@x.com"))
        uow.commit()

    with SqlAlchemyContractUnitOfWork() as uow:
        assert uow.repositories.contracts.get_by_email("kept@x.com") is not None


def test_unit_of_work_discards_without_commit(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyContractUnitOfWork() as uow:
        uow.repositories.contracts.add(make_contract("dropped@x.com"))

    with SqlAlchemyContractUnitOfWork() as uow:
        assert uow.repositories.contracts.get_by_email("dropped@x.com") is None


def test_commit_translates_unique_violation(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    with SqlAlchemyContractUnitOfWork() as uow:
        uow.repositories.contracts.add(make_contract("taken@x.com"))
        uow.commit()

    with SqlAlchemyContractUnitOfWork() as uow:
        uow.repositories.contracts.add(make_contract("fresh@x.com"))
        uow.repositories.contracts.add(make_contract("taken@x.com"))
        with pytest.raises(UniqueViolationError) as excinfo:
            uow.commit()

    assert isinstance(excinfo.value.__cause__, IntegrityError)
    with SqlAlchemyContractUnitOfWork() as uow:
        assert uow.repositories.contracts.get_by_email("fresh@x.com") is None


def test_translated_errors_maps_driver_failures() -> None:
    unavailable = OperationalError("SELECT 1", {}, Exception("database is locked"))
    constraint = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed"))

    with pytest.raises(StorageUnavailableError), translated_errors():
        raise unavailable

    with pytest.raises(PersistenceError) as excinfo, translated_errors():
        raise constraint
    assert not isinstance(excinfo.value, UniqueViolationError)
