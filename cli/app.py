from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_ledger, render_motion, render_telemetry, render_window


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the warehouse telemetry service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Telemetry API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show current temperature, humidity, status and motion."""
    state = _get_state(ctx)
    render_telemetry(state.client.get_telemetry())
    typer.echo()
    render_motion(state.client.get_motion())


@app.command("window")
def window_command(
    ctx: typer.Context,
    clear: bool = typer.Option(False, "--clear", help="Discard the window's readings first."),
) -> None:
    """Show rolling-window statistics."""
    state = _get_state(ctx)
    if clear:
        state.client.clear_window()
        typer.secho("Rolling window cleared.", fg=typer.colors.GREEN)
    render_window(state.client.get_window())


@app.command("ledger")
def ledger_command(ctx: typer.Context) -> None:
    """Show reconciled transactions, alarms and door events."""
    state = _get_state(ctx)
    render_ledger(state.client.get_ledger())


@app.command("push")
def push_command(
    ctx: typer.Context,
    feed_path: str = typer.Argument(..., help="Feed path, e.g. warehouse, motion or ledger."),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to a JSON snapshot."),
) -> None:
    """Write a JSON snapshot into the realtime feed."""
    state = _get_state(ctx)
    typer.echo(f"Pushing {file} to {feed_path} on {state.config.base_url} ...")
    state.client.push_snapshot(feed_path, file)
    typer.secho("Snapshot accepted.", fg=typer.colors.GREEN)


@app.command("dismiss")
def dismiss_command(ctx: typer.Context) -> None:
    """Dismiss an active intruder alert."""
    state = _get_state(ctx)
    render_motion(state.client.dismiss_alert())
