"""SQLAlchemy mapping metadata for the contractdesk domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Index,
    Numeric,
    String,
    Table,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from contractdesk.domain.model import (
    MONTHLY_VALUE_PRECISION,
    MONTHLY_VALUE_SCALE,
    Contract,
    ContractStatus,
    Plan,
)

if TYPE_CHECKING:
    from enum import StrEnum

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

contract_table = Table(
    "contract",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("client_name", String(255), nullable=False),
    # stored in identity form (trimmed, lower-cased); see normalize_email
    Column("client_email", String(320), nullable=False),
    Column(
        "plan",
        Enum(
            Plan,
            name="contract_plan",
            native_enum=False,
            length=16,
            values_callable=_enum_values,
        ),
        nullable=False,
    ),
    Column(
        "monthly_value",
        Numeric(MONTHLY_VALUE_PRECISION, MONTHLY_VALUE_SCALE),
        nullable=False,
    ),
    Column(
        "status",
        Enum(
            ContractStatus,
            name="contract_status",
            native_enum=False,
            length=16,
            values_callable=_enum_values,
        ),
        nullable=False,
    ),
    Column("start_date", Date, nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Index("ix_contract_client_email", "client_email", unique=True),
    Index("ix_contract_created_at", "created_at"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Contract, contract_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
