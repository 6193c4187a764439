"""Request and response bodies; JSON keys are camelCase."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from decimal import Decimal  # noqa: TC003
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from orderbridge.domain.model import NotificationStatus, RunStatus  # noqa: TC001


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class OrderNotificationIn(ApiModel):
    """Webhook body posted by the commerce platform."""

    event_id: str = ""
    event_type: str = ""
    source_system: str = Field(min_length=1)
    external_order_id: str = Field(min_length=1)
    occurred_at: datetime | None = None
    payload: str | None = None


class NotificationAccepted(ApiModel):
    id: UUID
    status: NotificationStatus


class ProcessingRunOut(ApiModel):
    id: UUID
    start_time: datetime
    end_time: datetime | None
    status: RunStatus
    records_processed: int
    records_failed: int
    records_skipped: int


class ProcessingErrorOut(ApiModel):
    id: UUID
    source_system: str
    external_order_id: str
    error_message: str
    occurred_at: datetime


class ProcessingRunDetailOut(ProcessingRunOut):
    errors: list[ProcessingErrorOut]


class OrderLineOut(ApiModel):
    sku: str
    quantity: int
    unit_price: Decimal


class OrderOut(ApiModel):
    id: UUID
    source_system: str
    external_order_id: str
    order_number: str
    total: Decimal
    currency: str
    order_date: datetime
    status: str
    customer_email: str | None
    lines: list[OrderLineOut]
