"""Pydantic models describing the Acme order API payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from decimal import Decimal  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class AcmeBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AcmeCustomer(AcmeBaseModel):
    email: str | None = None

    _normalize_email = field_validator("email", mode="before")(_blank_to_none)


class AcmeOrderLine(AcmeBaseModel):
    sku: str = ""
    qty: int
    unit_price: Decimal = Field(alias="unitPrice")


class AcmeOrderResponse(AcmeBaseModel):
    external_order_id: str = Field(default="", alias="externalOrderId")
    order_number: str = Field(default="", alias="orderNumber")
    order_total: Decimal = Field(alias="orderTotal")
    currency: str = ""
    order_date: datetime = Field(alias="orderDate")
    status: str = ""
    customer: AcmeCustomer | None = None
    lines: list[AcmeOrderLine] = Field(default_factory=list["AcmeOrderLine"])

    @field_validator("external_order_id", "order_number", "currency", "status", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        return "" if value is None else value
