from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from orderbridge.adapters.acme import AcmeOrderResponse, simulated_order_payload, to_order_snapshot


def test_translates_simulated_payload() -> None:
    snapshot = to_order_snapshot(simulated_order_payload("ORD_10001"))

    assert snapshot.order_number == "SO-10001"
    assert snapshot.total == Decimal("150.00")
    assert snapshot.customer_email == "integrated.customer@example.com"
    assert snapshot.lines[0].unit_price == Decimal("150.00")


def test_order_date_is_normalised_to_utc() -> None:
    payload = simulated_order_payload("ORD_1") | {"orderDate": "2026-02-18T12:00:00+02:00"}

    snapshot = to_order_snapshot(payload)

    assert snapshot.order_date == datetime(2026, 2, 18, 10, 0, tzinfo=UTC)
    assert snapshot.order_date.utcoffset() == timedelta(0)


def test_naive_order_date_is_treated_as_utc() -> None:
    payload = simulated_order_payload("ORD_1") | {"orderDate": "2026-02-18T10:00:00"}

    assert to_order_snapshot(payload).order_date == datetime(2026, 2, 18, 10, 0, tzinfo=UTC)


def test_numbers_keep_exact_decimal_precision() -> None:
    payload = simulated_order_payload("ORD_1") | {
        "orderTotal": "19.995",
        "lines": [{"sku": "PROD-001", "qty": 1, "unitPrice": "19.995"}],
    }

    snapshot = to_order_snapshot(payload)

    assert str(snapshot.total) == "19.995"
    assert str(snapshot.lines[0].unit_price) == "19.995"


def test_missing_fields_become_blank_for_validation() -> None:
    payload = simulated_order_payload("ORD_1") | {
        "orderNumber": None,
        "currency": None,
        "customer": {"email": "  "},
    }

    snapshot = to_order_snapshot(payload)

    assert snapshot.order_number == ""
    assert snapshot.currency == ""
    assert snapshot.customer_email is None


def test_missing_customer_gives_no_email() -> None:
    payload = simulated_order_payload("ORD_1")
    del payload["customer"]

    assert to_order_snapshot(payload).customer_email is None


def test_missing_lines_give_empty_snapshot_lines() -> None:
    payload = simulated_order_payload("ORD_1")
    del payload["lines"]

    assert to_order_snapshot(payload).lines == ()


def test_missing_total_is_rejected() -> None:
    payload = simulated_order_payload("ORD_1")
    del payload["orderTotal"]

    with pytest.raises(ValidationError):
        AcmeOrderResponse.model_validate(payload)
