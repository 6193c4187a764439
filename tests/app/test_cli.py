from __future__ import annotations

from contextlib import nullcontext
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
from fastapi import FastAPI

from orderbridge.adapters.sqlalchemy.unit_of_work import shutdown
from orderbridge.ui import cli as cli_module

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_notify_passes_parsed_arguments(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}
    notification_id = uuid4()

    def fake_accept(**kwargs: object) -> SimpleNamespace:
        captured.update(kwargs)
        return SimpleNamespace(id=notification_id)

    monkeypatch.setattr(cli_module, "accept_notification", fake_accept)

    cli_module.main(
        [
            "notify",
            "ORD_10001",
            "--source-system",
            "Acme",
            "--event-id",
            "evt-1",
            "--event-type",
            "order.updated",
            "--occurred-at",
            "2026-02-18T12:00:00+02:00",
            "--payload",
            '{"id": "ORD_10001"}',
        ]
    )

    assert captured == {
        "external_order_id": "ORD_10001",
        "source_system": "Acme",
        "event_id": "evt-1",
        "event_type": "order.updated",
        "occurred_at": datetime(2026, 2, 18, 10, 0, tzinfo=UTC),
        "payload": '{"id": "ORD_10001"}',
    }
    assert capsys.readouterr().out.strip() == str(notification_id)


def test_notify_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_accept(**kwargs: object) -> SimpleNamespace:
        captured.update(kwargs)
        return SimpleNamespace(id=uuid4())

    monkeypatch.setattr(cli_module, "accept_notification", fake_accept)

    cli_module.main(["notify", "ORD_1", "--occurred-at", "2026-02-18T12:00:00Z"])

    assert captured["source_system"] is None
    assert captured["event_id"] == ""
    assert captured["payload"] is None
    assert captured["occurred_at"] == datetime(2026, 2, 18, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "argv",
    [
        ["notify", "ORD_1", "--occurred-at", "not-a-date"],
        ["run", "not-a-uuid"],
        ["runs", "--limit", "0"],
        ["worker", "--interval", "-5"],
        ["serve", "--port", "0"],
        ["serve", "--port", "70000"],
        ["serve", "--interval", "-1"],
    ],
)
def test_invalid_arguments_exit_with_usage_error(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)

    assert excinfo.value.code == 2


def test_unknown_run_exits_with_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "run_details", lambda _run_id: None)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["run", str(uuid4())])

    assert excinfo.value.code == 1


def test_worker_command_installs_signal_handlers(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    handlers: dict[int, object] = {}

    class FakeWorker:
        stopped = False

        def stop(self) -> None:
            self.stopped = True

        def run_forever(self) -> int:
            handler = handlers[cli_module.SIGTERM]
            handler(cli_module.SIGTERM, None)  # type: ignore[operator]
            return 1

    worker = FakeWorker()

    def fake_build_worker(**kwargs: object) -> FakeWorker:
        captured.update(kwargs)
        return worker

    def fake_signal(sig: int, handler: object) -> None:
        handlers[sig] = handler

    order_source = object()
    simulate_flags: list[bool] = []

    def fake_build_order_source(*, simulate: bool) -> nullcontext[object]:
        simulate_flags.append(simulate)
        return nullcontext(order_source)

    monkeypatch.setattr(cli_module, "build_order_source", fake_build_order_source)
    monkeypatch.setattr(cli_module, "build_worker", fake_build_worker)
    monkeypatch.setattr(cli_module, "signal", fake_signal)

    cli_module.main(["worker", "--interval", "5", "--source-system", "Acme", "--simulate"])

    assert simulate_flags == [True]
    assert captured == {
        "order_source": order_source,
        "source_system": "Acme",
        "poll_interval": 5.0,
    }
    assert set(handlers) == {cli_module.SIGINT, cli_module.SIGTERM}
    assert worker.stopped


def test_serve_runs_the_http_api(monkeypatch: pytest.MonkeyPatch) -> None:
    served: dict[str, object] = {}

    def fake_run(app: object, **kwargs: object) -> None:
        served["app"] = app
        served.update(kwargs)

    monkeypatch.setattr(cli_module.uvicorn, "run", fake_run)

    cli_module.main(["serve", "--host", "0.0.0.0", "--port", "8080", "--simulate"])  # noqa: S104

    app = served.pop("app")
    assert isinstance(app, FastAPI)
    assert served == {"host": "0.0.0.0", "port": 8080, "log_config": None}  # noqa: S104
    paths = {getattr(route, "path", None) for route in app.routes}
    assert "/webhooks/orders" in paths
    assert "/external-api/orders/{external_order_id}" in paths


def test_serve_with_worker_hands_the_worker_to_the_app(monkeypatch: pytest.MonkeyPatch) -> None:
    order_source = object()
    worker = object()
    app = object()
    app_kwargs: dict[str, object] = {}
    worker_kwargs: dict[str, object] = {}
    served: list[object] = []

    def fake_build_worker(**kwargs: object) -> object:
        worker_kwargs.update(kwargs)
        return worker

    def fake_create_app(**kwargs: object) -> object:
        app_kwargs.update(kwargs)
        return app

    monkeypatch.setattr(
        cli_module, "build_order_source", lambda **_: nullcontext(order_source)
    )
    monkeypatch.setattr(cli_module, "build_worker", fake_build_worker)
    monkeypatch.setattr(cli_module, "create_app", fake_create_app)
    monkeypatch.setattr(
        cli_module.uvicorn, "run", lambda served_app, **_: served.append(served_app)
    )

    cli_module.main(["serve", "--with-worker", "--interval", "2"])

    assert worker_kwargs == {
        "order_source": order_source,
        "source_system": None,
        "poll_interval": 2.0,
    }
    assert app_kwargs == {"worker": worker, "simulate_acme": False}
    assert served == [app]


def test_end_to_end_with_simulated_source(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("DATABASE_URI", f"sqlite+pysqlite:///{tmp_path / 'orders.db'}")
    monkeypatch.setenv("ORDERBRIDGE_SOURCE_SYSTEM", "Acme")

    cli_module.main(["notify", "ORD_10001"])
    cli_module.main(["notify", "ORD_FAIL"])
    cli_module.main(["reconcile", "--simulate"])
    capsys.readouterr()

    cli_module.main(["order", "SO-10001"])
    order_output = capsys.readouterr().out
    assert "SO-10001" in order_output
    assert "Acme:ORD_10001" in order_output
    assert "150.00 USD" in order_output
    assert "PROD-001  x1  @ 150.00" in order_output

    cli_module.main(["runs"])
    runs_output = capsys.readouterr().out.strip().splitlines()
    assert len(runs_output) == 1
    assert "Completed" in runs_output[0]
    assert "processed=1" in runs_output[0]
    assert "failed=1" in runs_output[0]

    run_id = runs_output[0].split()[0]
    cli_module.main(["run", run_id])
    run_output = capsys.readouterr().out
    assert "Acme:ORD_FAIL" in run_output
    assert "Simulated External API Failure" in run_output


def test_missing_order_exits_with_failure(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("DATABASE_URI", f"sqlite+pysqlite:///{tmp_path / 'orders.db'}")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["order", "SO-00000"])

    assert excinfo.value.code == 1
