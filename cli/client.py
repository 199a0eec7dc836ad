from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the telemetry service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def get_telemetry(self) -> Dict[str, Any]:
        return self._get("/telemetry")

    def get_window(self) -> Dict[str, Any]:
        return self._get("/telemetry/window")

    def get_motion(self) -> Dict[str, Any]:
        return self._get("/motion")

    def get_ledger(self) -> Dict[str, Any]:
        return self._get("/ledger")

    def dismiss_alert(self) -> Dict[str, Any]:
        try:
            response = self._client.post("/motion/alert/dismiss")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def clear_window(self) -> None:
        try:
            response = self._client.delete("/telemetry/window")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)

    def push_snapshot(self, feed_path: str, file: Path) -> None:
        if not file.is_file():
            raise typer.BadParameter(f"Path {file} is not a file.")
        try:
            snapshot = json.loads(file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"File {file} is not valid JSON: {exc}") from exc

        try:
            response = self._client.put(f"/feed/{feed_path.strip('/')}", json=snapshot)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)

    def _get(self, url: str) -> Dict[str, Any]:
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
