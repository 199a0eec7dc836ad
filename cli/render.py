from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

from models.records import TransactionType
from services import timestamps

_STATUS_COLORS = {
    "optimal": typer.colors.GREEN,
    "warning": typer.colors.YELLOW,
    "critical": typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _type_label(value: Any) -> str:
    try:
        return TransactionType(value).label
    except ValueError:
        return str(value)


def render_telemetry(payload: Dict[str, Any]) -> None:
    echo_heading("Telemetry")
    if payload.get("loading"):
        typer.echo("Waiting for the first snapshot...")
    echo_key_values(
        [
            ("temperature", payload.get("temperature")),
            ("humidity", payload.get("humidity")),
            ("temperature_status", payload.get("temperature_status")),
            ("humidity_status", payload.get("humidity_status")),
            ("last_updated", payload.get("last_updated")),
        ]
    )
    status = payload.get("status")
    typer.secho(f"status: {status}", fg=_STATUS_COLORS.get(status))


def render_window(payload: Dict[str, Any]) -> None:
    stats = payload.get("stats") or {}
    echo_heading("Rolling Window")
    echo_key_values(
        [
            ("capacity", payload.get("capacity")),
            ("count", stats.get("count", 0)),
        ]
    )
    for dimension in ("temperature", "humidity"):
        values = stats.get(dimension) or {}
        typer.echo(
            f"{dimension}: avg={values.get('average', 0)} "
            f"min={values.get('min', 0)} max={values.get('max', 0)}"
        )


def render_motion(payload: Dict[str, Any]) -> None:
    alert = payload.get("alert") or {}
    echo_heading("Motion")
    echo_key_values([("motion", payload.get("motion"))])
    if alert.get("active"):
        typer.secho(
            f"Intruder alert raised at {alert.get('triggered_at')}",
            fg=typer.colors.RED,
        )
    else:
        typer.echo("No active alert.")


def render_ledger(payload: Dict[str, Any]) -> None:
    echo_heading("Ledger")
    echo_key_values([("current_inventory", payload.get("current_inventory"))])

    transactions = payload.get("transactions") or []
    typer.echo()
    echo_heading("Transactions")
    if transactions:
        for transaction in transactions:
            typer.echo(
                f"  - {timestamps.format(transaction.get('date', ''))}: "
                f"{_type_label(transaction.get('type'))} {transaction.get('amount')} "
                f"(balance {transaction.get('running_balance')})"
            )
    else:
        typer.echo("No transactions recorded.")

    for title, key in (("Alarms", "alarms"), ("Doors", "doors")):
        events = payload.get(key) or []
        typer.echo()
        echo_heading(title)
        if events:
            for event in events:
                typer.echo(
                    f"  - {timestamps.format(event.get('timestamp', ''))}: {event.get('event')}"
                )
        else:
            typer.echo(f"No {key} recorded.")
