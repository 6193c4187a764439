"""SQLAlchemy mapping metadata for the order mirror and reconciliation ledger."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import relationship

from orderbridge.domain.model import (
    Notification,
    NotificationStatus,
    Order,
    OrderLine,
    ProcessingError,
    ProcessingRun,
    RunStatus,
)

if TYPE_CHECKING:
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


class ExactDecimal(TypeDecorator[Decimal]):
    """Store decimals as their exact text form; no backend rounding."""

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        return str(value)

    def process_result_value(self, value: str | None, dialect: Dialect) -> Decimal | None:
        _ = dialect
        if value is None:
            return None
        return Decimal(value)


def _status_type(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

notification_table = Table(
    "notification",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("event_id", String, nullable=False, default=""),
    Column("event_type", String, nullable=False, default=""),
    Column("source_system", String, nullable=False),
    Column("external_order_id", String, nullable=False),
    Column("occurred_at", UTCDateTime, nullable=False),
    Column("payload", Text, nullable=True),
    Column("status", _status_type(NotificationStatus), nullable=False),
    Column("attempts", Integer, nullable=False, default=0),
    Column("last_error", Text, nullable=True),
    Index("ix_notification_status_source", "status", "source_system"),
)

order_table = Table(
    "customer_order",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_system", String, nullable=False),
    Column("external_order_id", String, nullable=False),
    Column("order_number", String, nullable=False, index=True),
    Column("total", ExactDecimal, nullable=False),
    Column("currency", String, nullable=False),
    Column("order_date", UTCDateTime, nullable=False),
    Column("status", String, nullable=False),
    Column("customer_email", String, nullable=True),
    UniqueConstraint("source_system", "external_order_id"),
)

order_line_table = Table(
    "order_line",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "order_id",
        UUIDColumnType,
        ForeignKey("customer_order.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("position", Integer, nullable=False, default=0),
    Column("sku", String, nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", ExactDecimal, nullable=False),
)

processing_run_table = Table(
    "processing_run",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("start_time", UTCDateTime, nullable=False),
    Column("end_time", UTCDateTime, nullable=True),
    Column("status", _status_type(RunStatus), nullable=False),
    Column("records_processed", Integer, nullable=False, default=0),
    Column("records_failed", Integer, nullable=False, default=0),
    Column("records_skipped", Integer, nullable=False, default=0),
)

processing_error_table = Table(
    "processing_error",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "processing_run_id",
        UUIDColumnType,
        ForeignKey("processing_run.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("source_system", String, nullable=False),
    Column("external_order_id", String, nullable=False),
    Column("error_message", Text, nullable=False),
    Column("occurred_at", UTCDateTime, nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Notification, notification_table)

    mapper_registry.map_imperatively(OrderLine, order_line_table)

    mapper_registry.map_imperatively(
        Order,
        order_table,
        properties={
            "lines": relationship(
                OrderLine,
                cascade="all, delete-orphan",
                order_by=order_line_table.c.position,
                lazy="selectin",
            ),
        },
    )

    mapper_registry.map_imperatively(ProcessingError, processing_error_table)

    mapper_registry.map_imperatively(
        ProcessingRun,
        processing_run_table,
        properties={
            "errors": relationship(
                ProcessingError,
                cascade="all, delete-orphan",
                order_by=processing_error_table.c.occurred_at,
            ),
        },
    )

    orm.configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    start_mappers()
    mapper_registry.metadata.create_all(engine)
