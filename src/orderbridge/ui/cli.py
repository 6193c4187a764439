# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, datetime
from signal import SIGINT, SIGTERM, signal
from typing import TYPE_CHECKING
from uuid import UUID

import uvicorn
from dotenv import load_dotenv

from orderbridge.api import create_app
from orderbridge.app import (
    accept_notification,
    build_order_source,
    build_worker,
    order_by_number,
    recent_runs,
    reconcile_once,
    run_details,
)
from orderbridge.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from orderbridge.domain.model import Order, ProcessingRun

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mirror external orders from webhook events")
    subparsers = parser.add_subparsers(dest="command", required=True)

    worker = subparsers.add_parser("worker", help="Run the reconciliation worker until stopped")
    worker.add_argument(
        "--interval",
        type=float,
        help="Seconds to sleep between cycles (defaults to config)",
    )
    reconcile = subparsers.add_parser("reconcile", help="Run a single reconciliation cycle")
    serve = subparsers.add_parser("serve", help="Serve the webhook and visibility HTTP API")
    serve.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Interface to bind (default: %(default)s)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind (default: %(default)s)",
    )
    serve.add_argument(
        "--with-worker",
        action="store_true",
        help="Run the reconciliation worker alongside the API",
    )
    serve.add_argument(
        "--interval",
        type=float,
        help="Seconds between worker cycles (defaults to config)",
    )
    for sub in (worker, reconcile, serve):
        sub.add_argument(
            "--source-system",
            type=str,
            help="Source system label to reconcile (defaults to config)",
        )
        sub.add_argument(
            "--simulate",
            action="store_true",
            help="Fetch orders from the built-in simulated Acme API",
        )

    notify = subparsers.add_parser("notify", help="Record an order-change notification")
    notify.add_argument(
        "external_order_id",
        type=str,
        help="External order id the notification refers to",
    )
    notify.add_argument("--source-system", type=str, help="Source system label")
    notify.add_argument("--event-id", type=str, default="", help="Upstream event id")
    notify.add_argument("--event-type", type=str, default="", help="Upstream event type")
    notify.add_argument(
        "--occurred-at",
        type=str,
        help="ISO-8601 timestamp of the upstream event (defaults to now)",
    )
    notify.add_argument("--payload", type=str, help="Raw webhook payload to keep")

    runs = subparsers.add_parser("runs", help="List recent processing runs")
    runs.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of runs to show (default: %(default)s)",
    )

    run = subparsers.add_parser("run", help="Show a processing run and its errors")
    run.add_argument("run_id", type=str, help="Processing run id")

    order = subparsers.add_parser("order", help="Show a mirrored order")
    order.add_argument("order_number", type=str, help="Order number, e.g. SO-10001")

    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _validate_args(args: argparse.Namespace) -> argparse.Namespace:
    if args.command == "runs" and args.limit <= 0:
        raise ValueError("--limit must be positive")
    if args.command in {"worker", "serve"} and args.interval is not None and args.interval < 0:
        raise ValueError("--interval must be non-negative")
    if args.command == "serve" and not 1 <= args.port <= 65535:
        raise ValueError("--port must be between 1 and 65535")
    if args.command == "notify" and args.occurred_at is not None:
        args.occurred_at = _parse_iso_datetime(args.occurred_at)
    if args.command == "run":
        args.run_id = _parse_uuid(args.run_id)
    return args


def _format_run(run: ProcessingRun) -> str:
    end = run.end_time.isoformat() if run.end_time else "-"
    return (
        f"{run.id}  {run.status}  start={run.start_time.isoformat()}  end={end}  "
        f"processed={run.records_processed}  skipped={run.records_skipped}  "
        f"failed={run.records_failed}"
    )


def _print_order(order: Order) -> None:
    print(
        f"{order.order_number}  {order.source_system}:{order.external_order_id}  "
        f"{order.status}  {order.total} {order.currency}  {order.order_date.isoformat()}  "
        f"{order.customer_email or '-'}"
    )
    for line in order.lines:
        print(f"  {line.sku}  x{line.quantity}  @ {line.unit_price}")


def _run_worker(args: argparse.Namespace) -> None:
    with build_order_source(simulate=args.simulate) as order_source:
        worker = build_worker(
            order_source=order_source,
            source_system=args.source_system,
            poll_interval=args.interval,
        )

        def request_stop(signal_received: int, _frame: FrameType | None) -> None:
            log.info("Received signal %s; stopping after the current cycle", signal_received)
            worker.stop()

        signal(SIGINT, request_stop)
        signal(SIGTERM, request_stop)
        worker.run_forever()


def _serve(args: argparse.Namespace) -> None:
    if not args.with_worker:
        app = create_app(simulate_acme=args.simulate)
        uvicorn.run(app, host=args.host, port=args.port, log_config=None)
        return

    with build_order_source(simulate=args.simulate) as order_source:
        worker = build_worker(
            order_source=order_source,
            source_system=args.source_system,
            poll_interval=args.interval,
        )
        app = create_app(worker=worker, simulate_acme=args.simulate)
        uvicorn.run(app, host=args.host, port=args.port, log_config=None)


def _dispatch(args: argparse.Namespace) -> None:
    if args.command == "worker":
        _run_worker(args)
    elif args.command == "serve":
        _serve(args)
    elif args.command == "reconcile":
        result = reconcile_once(source_system=args.source_system, simulate=args.simulate)
        if result is None:
            log.info("No pending notifications")
    elif args.command == "notify":
        notification = accept_notification(
            external_order_id=args.external_order_id,
            source_system=args.source_system,
            event_id=args.event_id,
            event_type=args.event_type,
            occurred_at=args.occurred_at,
            payload=args.payload,
        )
        print(notification.id)
    elif args.command == "runs":
        for run in recent_runs(limit=args.limit):
            print(_format_run(run))
    elif args.command == "run":
        details = run_details(args.run_id)
        if details is None:
            raise LookupError(f"Processing run {args.run_id} not found")
        print(_format_run(details.run))
        for error in details.errors:
            print(
                f"  {error.occurred_at.isoformat()}  {error.source_system}:"
                f"{error.external_order_id}  {error.error_message}"
            )
    elif args.command == "order":
        order = order_by_number(args.order_number)
        if order is None:
            raise LookupError(f"Order {args.order_number} not found")
        _print_order(order)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _validate_args(_parse_args(args_list))
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _dispatch(parsed_args)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
