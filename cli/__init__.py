"""CLI package for interacting with the warehouse telemetry service."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# ``cli.app`` names the command module, not the Typer instance, so the
# ``warehouse-telemetry`` entry point and ``monkeypatch.setattr("cli.app.ApiClient", ...)``
# both resolve through it.

__all__ = []
