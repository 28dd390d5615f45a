"""Filament inventory package."""
from __future__ import annotations

from .exceptions import InventoryError, InventoryIOError, MalformedRecordError, ValidationError
from .inventory import FilamentRecord, InventoryStore
from .threshold import ThresholdSetting

__all__ = [
    "FilamentRecord",
    "InventoryError",
    "InventoryIOError",
    "InventoryStore",
    "MalformedRecordError",
    "ThresholdSetting",
    "ValidationError",
]
