"""Entrypoint for ``python -m filament_inventory``."""
from __future__ import annotations

from .cli import app


def run() -> None:
    """Launch the interactive menu."""

    app(prog_name="filament-inventory")


if __name__ == "__main__":
    run()
