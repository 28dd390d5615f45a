"""Filament inventory records persisted to a flat comma-delimited text file."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional, Tuple
import re

from .exceptions import InventoryIOError, MalformedRecordError, ValidationError
from .logging_config import get_logger

logger = get_logger(__name__)

FIELD_DELIMITER = ","
LINE_TERMINATOR = "\n"
_MIN_FIELDS = 3
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FORBIDDEN_FIELD_CHARS = (FIELD_DELIMITER, "\r", "\n")


def parse_integer(value: str) -> Optional[int]:
    """Parse a base-10 integer, ignoring surrounding whitespace, or return ``None``."""

    candidate = value.strip()
    if not _INTEGER_PATTERN.fullmatch(candidate):
        return None
    return int(candidate)


def validate_grams(value: Any, label: str) -> int:
    """Return ``value`` if it is a non-negative integer, else raise."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{label} must be an integer", errors=[f"{label}={value!r}"])
    if value < 0:
        raise ValidationError(f"{label} cannot be negative", errors=[f"{label}={value!r}"])
    return value


def _validate_field(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} cannot be empty", errors=[f"{label}={value!r}"])
    for char in _FORBIDDEN_FIELD_CHARS:
        if char in value:
            raise ValidationError(
                f"{label} cannot contain {char!r}", errors=[f"{label}={value!r}"]
            )
    return value


def _split_lines(text: str) -> List[str]:
    return text.replace("\r\n", "\n").split("\n")


def _temp_path_for(path: Path) -> Path:
    return path.with_name(path.name + ".tmp")


def read_text_file(path: Path, description: str) -> str:
    """Read ``path`` as UTF-8 (BOM tolerated) without translating line endings."""

    try:
        with path.open("r", encoding="utf-8-sig", newline="") as handle:
            return handle.read()
    except UnicodeDecodeError as exc:
        line_number = exc.object[: exc.start].count(b"\n") + 1
        bad_line = exc.object.split(b"\n")[line_number - 1].decode("utf-8", "replace")
        logger.error(
            f"Invalid UTF-8 in {description}",
            extra={"storage_path": str(path), "line_number": line_number},
        )
        raise MalformedRecordError(
            "file is not valid UTF-8 text",
            line=bad_line.rstrip("\r"),
            line_number=line_number,
            path=path,
        ) from exc
    except OSError as exc:
        logger.error(f"Failed to read {description}", extra={"storage_path": str(path)})
        raise InventoryIOError(path, "read", str(exc)) from exc


def write_text_atomic(path: Path, content: str, description: str) -> None:
    """Write ``content`` to a sibling temporary file, then rename it over ``path``."""

    temp_path = _temp_path_for(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(content, encoding="utf-8", newline="")
        temp_path.replace(path)
    except OSError as exc:
        logger.error(f"Failed to write {description}", extra={"storage_path": str(path)})
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            logger.warning(
                "Could not remove temporary file", extra={"temp_path": str(temp_path)}
            )
        raise InventoryIOError(path, "write", str(exc)) from exc


@dataclass(frozen=True)
class FilamentRecord:
    """A single inventory line: a material/color pair and the grams on hand."""

    material_type: str
    color: str
    quantity_grams: int = 0

    @property
    def key(self) -> Tuple[str, str]:
        return (self.material_type, self.color)

    def matches(self, material_type: str, color: str) -> bool:
        return self.key == (material_type, color)

    def to_line(self) -> str:
        """Canonical line form, without the line terminator."""

        return FIELD_DELIMITER.join(
            [self.material_type, self.color, str(self.quantity_grams), ""]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "material_type": self.material_type,
            "color": self.color,
            "quantity_grams": self.quantity_grams,
        }

    @classmethod
    def from_line(
        cls,
        line: str,
        *,
        line_number: Optional[int] = None,
        path: Optional[Path] = None,
    ) -> "FilamentRecord":
        fields = line.split(FIELD_DELIMITER)
        if len(fields) < _MIN_FIELDS:
            raise MalformedRecordError(
                f"expected at least {_MIN_FIELDS} fields, found {len(fields)}",
                line=line,
                line_number=line_number,
                path=path,
            )
        material_type, color, raw_quantity = fields[:_MIN_FIELDS]
        quantity = parse_integer(raw_quantity)
        if quantity is None:
            raise MalformedRecordError(
                f"quantity {raw_quantity!r} is not an integer",
                line=line,
                line_number=line_number,
                path=path,
            )
        return cls(material_type=material_type, color=color, quantity_grams=quantity)


SEED_RECORD = FilamentRecord(material_type="PLA", color="WHITE", quantity_grams=1000)


@dataclass
class InventoryStore:
    """Ordered filament records kept in a line-oriented text file.

    Every operation reads the whole file, works on the parsed records and, for
    mutations, rewrites the whole file. Nothing is cached between calls. A
    missing file is created with :data:`SEED_RECORD` on first access.
    """

    storage_path: Path
    _lock: RLock = field(default_factory=RLock, init=False)

    def __post_init__(self) -> None:
        self.storage_path = Path(self.storage_path)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def load_all(self) -> List[FilamentRecord]:
        with self._lock:
            lines = self._read_lines_locked()
        return [record for _, record in self._parse_lines(lines)]

    def low_stock(self, threshold_grams: int) -> List[FilamentRecord]:
        threshold_grams = validate_grams(threshold_grams, "threshold")
        return [
            record
            for record in self.load_all()
            if record.quantity_grams <= threshold_grams
        ]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def append(self, material_type: str, color: str, quantity_grams: int) -> FilamentRecord:
        record = FilamentRecord(
            material_type=_validate_field(material_type, "material_type"),
            color=_validate_field(color, "color"),
            quantity_grams=validate_grams(quantity_grams, "quantity_grams"),
        )
        with self._lock:
            self._ensure_storage_locked()
            try:
                with self.storage_path.open("a", encoding="utf-8", newline="") as handle:
                    handle.write(record.to_line() + LINE_TERMINATOR)
            except OSError as exc:
                logger.error(
                    "Failed to append filament record",
                    extra={"storage_path": str(self.storage_path)},
                )
                raise InventoryIOError(self.storage_path, "append to", str(exc)) from exc
        logger.info("Appended filament record", extra=record.to_dict())
        return record

    def find_and_update(
        self,
        material_type: str,
        color: str,
        delta: int,
        is_addition: bool,
    ) -> bool:
        """Add ``delta`` grams to, or subtract them from, the first matching record.

        Subtraction clamps at zero. Returns ``False`` without touching the file
        when no record has the given key.
        """

        _validate_field(material_type, "material_type")
        _validate_field(color, "color")
        delta = validate_grams(delta, "delta")
        with self._lock:
            entries = self._parse_lines(self._read_lines_locked())
            index = self._first_match(entries, material_type, color)
            if index is None:
                logger.debug(
                    "No filament record to update",
                    extra={"material_type": material_type, "color": color},
                )
                return False
            previous = entries[index][1].quantity_grams
            if is_addition:
                new_quantity = previous + delta
            else:
                new_quantity = max(0, previous - delta)
            updated = FilamentRecord(
                material_type=material_type,
                color=color,
                quantity_grams=new_quantity,
            )
            lines = [raw for raw, _ in entries]
            lines[index] = updated.to_line()
            self._write_lines_locked(lines)
        logger.info(
            "Updated filament record",
            extra={
                "material_type": material_type,
                "color": color,
                "previous_quantity": previous,
                "new_quantity": new_quantity,
            },
        )
        return True

    def find_and_delete(self, material_type: str, color: str) -> bool:
        _validate_field(material_type, "material_type")
        _validate_field(color, "color")
        with self._lock:
            entries = self._parse_lines(self._read_lines_locked())
            index = self._first_match(entries, material_type, color)
            if index is None:
                logger.debug(
                    "No filament record to delete",
                    extra={"material_type": material_type, "color": color},
                )
                return False
            removed = entries.pop(index)[1]
            self._write_lines_locked([raw for raw, _ in entries])
        logger.info("Deleted filament record", extra=removed.to_dict())
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _first_match(
        entries: List[Tuple[str, FilamentRecord]],
        material_type: str,
        color: str,
    ) -> Optional[int]:
        for index, (_, record) in enumerate(entries):
            if record.matches(material_type, color):
                return index
        return None

    def _parse_lines(self, lines: List[str]) -> List[Tuple[str, FilamentRecord]]:
        entries: List[Tuple[str, FilamentRecord]] = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            record = FilamentRecord.from_line(
                line, line_number=number, path=self.storage_path
            )
            entries.append((line, record))
        return entries

    def _ensure_storage_locked(self) -> None:
        if self.storage_path.exists():
            return
        self._write_lines_locked([SEED_RECORD.to_line()])
        logger.info(
            "Created inventory file with seed record",
            extra={"storage_path": str(self.storage_path)},
        )

    def _read_lines_locked(self) -> List[str]:
        self._ensure_storage_locked()
        return _split_lines(read_text_file(self.storage_path, "inventory file"))

    def _write_lines_locked(self, lines: List[str]) -> None:
        content = "".join(line + LINE_TERMINATOR for line in lines)
        write_text_atomic(self.storage_path, content, "inventory file")


__all__ = [
    "FilamentRecord",
    "InventoryStore",
    "SEED_RECORD",
    "parse_integer",
    "read_text_file",
    "validate_grams",
    "write_text_atomic",
]
