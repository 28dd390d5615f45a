from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from rich.console import Console

from filament_inventory import cli
from filament_inventory.config import get_settings
from filament_inventory.inventory import InventoryStore
from filament_inventory.threshold import ThresholdSetting


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "DATA_DIR",
        "INVENTORY_FILENAME",
        "THRESHOLD_FILENAME",
        "DEFAULT_THRESHOLD",
        "LOG_LEVEL",
        "LOG_FILE",
    ):
        monkeypatch.delenv(f"FILAMENT_INVENTORY_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def inventory_path(tmp_path: Path) -> Path:
    return tmp_path / "Data" / "Inventory.txt"


@pytest.fixture()
def store(inventory_path: Path) -> InventoryStore:
    return InventoryStore(inventory_path)


@pytest.fixture()
def threshold(tmp_path: Path) -> ThresholdSetting:
    return ThresholdSetting(tmp_path / "Data" / "Sentinel.txt")


@pytest.fixture()
def plain_console(monkeypatch: pytest.MonkeyPatch) -> Console:
    console = Console(color_system=None, force_terminal=False, width=120, highlight=False)
    monkeypatch.setattr(cli, "console", console)
    return console
