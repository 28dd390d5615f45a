"""Persisted low-stock warning level."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from threading import RLock

from .exceptions import MalformedRecordError
from .inventory import parse_integer, read_text_file, validate_grams, write_text_atomic
from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_THRESHOLD = 250


@dataclass
class ThresholdSetting:
    """A single non-negative gram count stored as bare text in its own file."""

    storage_path: Path
    default: int = DEFAULT_THRESHOLD
    _lock: RLock = field(default_factory=RLock, init=False)

    def __post_init__(self) -> None:
        self.storage_path = Path(self.storage_path)
        self.default = validate_grams(self.default, "default")

    def get(self) -> int:
        with self._lock:
            if not self.storage_path.exists():
                self._write_unlocked(self.default)
                logger.info(
                    "Created warning level file with default",
                    extra={"storage_path": str(self.storage_path), "value": self.default},
                )
                return self.default
            raw = read_text_file(self.storage_path, "warning level file")
        value = parse_integer(raw)
        if value is None or value < 0:
            raise MalformedRecordError(
                "warning level must be a non-negative integer",
                line=raw,
                path=self.storage_path,
            )
        return value

    def set(self, value: int) -> int:
        value = validate_grams(value, "threshold")
        with self._lock:
            self._write_unlocked(value)
        logger.info("Warning level changed", extra={"value": value})
        return value

    def _write_unlocked(self, value: int) -> None:
        write_text_atomic(self.storage_path, str(value), "warning level file")


__all__ = ["DEFAULT_THRESHOLD", "ThresholdSetting"]
