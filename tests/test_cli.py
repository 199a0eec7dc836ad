from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from cli.app import app


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.pushed: List[tuple[str, Path]] = []
        self.cleared = False
        self.dismissed = False
        self.telemetry_payload: Dict[str, Any] = {
            "temperature": 22.5,
            "humidity": 45.0,
            "status": "optimal",
            "temperature_status": "optimal",
            "humidity_status": "optimal",
            "last_updated": "2026-01-05T16:37:41Z",
            "loading": False,
        }
        self.motion_payload: Dict[str, Any] = {
            "motion": True,
            "alert": {"active": True, "triggered_at": "2026-01-05T16:37:41Z"},
        }
        self.window_payload: Dict[str, Any] = {
            "capacity": 100,
            "readings": [],
            "stats": {
                "count": 2,
                "temperature": {"average": 21.0, "min": 20.0, "max": 22.0},
                "humidity": {"average": 50.0, "min": 45.0, "max": 55.0},
            },
        }
        self.ledger_payload: Dict[str, Any] = {
            "current_inventory": 150,
            "transactions": [
                {
                    "date": "2025-12-20_20-11-20",
                    "amount": 50,
                    "running_balance": 150,
                    "type": "NHAP",
                }
            ],
            "alarms": [{"timestamp": "2026-01-05_16-37-41", "event": "ALARM"}],
            "doors": [],
            "loading": False,
        }
        self.closed = False

    def get_telemetry(self) -> Dict[str, Any]:
        return self.telemetry_payload

    def get_motion(self) -> Dict[str, Any]:
        return self.motion_payload

    def get_window(self) -> Dict[str, Any]:
        return self.window_payload

    def get_ledger(self) -> Dict[str, Any]:
        return self.ledger_payload

    def clear_window(self) -> None:
        self.cleared = True

    def dismiss_alert(self) -> Dict[str, Any]:
        self.dismissed = True
        return {"motion": True, "alert": {"active": False, "triggered_at": None}}

    def push_snapshot(self, feed_path: str, file: Path) -> None:
        self.pushed.append((feed_path, file))

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    client = StubClient(config=None)

    def factory(config):
        client.config = config
        return client

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return client


def test_status_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0
    assert "temperature: 22.5" in result.stdout
    assert "status: optimal" in result.stdout
    assert "Intruder alert raised" in result.stdout
    assert stub.closed is True


def test_window_command_with_clear(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["window", "--clear"])

    assert result.exit_code == 0
    assert stub.cleared is True
    assert "Rolling window cleared." in result.stdout
    assert "temperature: avg=21.0 min=20.0 max=22.0" in result.stdout


def test_ledger_command_formats_timestamps(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["ledger"])

    assert result.exit_code == 0
    assert "20:11:20 20/12/2025: Nhập Hàng 50" in result.stdout
    assert "16:37:41 05/01/2026: ALARM" in result.stdout
    assert "No doors recorded." in result.stdout


def test_ledger_command_keeps_unparseable_dates(runner: CliRunner, stub: StubClient) -> None:
    stub.ledger_payload["transactions"][0]["date"] = "not-a-date"

    result = runner.invoke(app, ["ledger"])

    assert result.exit_code == 0
    assert "not-a-date: Nhập Hàng 50" in result.stdout


def test_push_command(runner: CliRunner, stub: StubClient, tmp_path) -> None:
    snapshot = tmp_path / "warehouse.json"
    snapshot.write_text('{"temperature": "21.5", "humidity": 40}')

    result = runner.invoke(app, ["--base-url", "http://example.test/", "push", "warehouse", str(snapshot)])

    assert result.exit_code == 0
    assert "Snapshot accepted." in result.stdout
    assert stub.pushed == [("warehouse", snapshot)]
    assert stub.config.base_url == "http://example.test"


def test_dismiss_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["dismiss"])

    assert result.exit_code == 0
    assert stub.dismissed is True
    assert "No active alert." in result.stdout
