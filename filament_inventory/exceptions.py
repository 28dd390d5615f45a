"""Exceptions raised by the filament inventory core."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional


class ErrorCodes:
    """Centralized error code constants"""

    IO_FAILURE = "IO_FAILURE"
    MALFORMED_RECORD = "MALFORMED_RECORD"
    VALIDATION_FAILED = "VALIDATION_FAILED"


class InventoryError(Exception):
    """Base exception for inventory and threshold operations."""

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.code = code

    def __str__(self) -> str:
        error_details = f" - Errors: {', '.join(self.errors)}" if self.errors else ""
        return f"{self.message}{error_details}"


class InventoryIOError(InventoryError):
    """Raised when a backing file cannot be read or written."""

    def __init__(self, path: Path, action: str, reason: str) -> None:
        self.path = Path(path)
        self.action = action
        super().__init__(
            message=f"Could not {action} '{self.path}': {reason}",
            code=ErrorCodes.IO_FAILURE,
        )


class MalformedRecordError(InventoryError):
    """Raised when a non-blank line does not parse into a record."""

    def __init__(
        self,
        reason: str,
        *,
        line: str,
        line_number: Optional[int] = None,
        path: Optional[Path] = None,
    ) -> None:
        self.line = line
        self.line_number = line_number
        self.path = Path(path) if path is not None else None
        location = ""
        if self.path is not None:
            location = f" in '{self.path}'"
        if line_number is not None:
            location += f" at line {line_number}"
        super().__init__(
            message=f"Malformed record{location}: {reason}",
            errors=[f"line={line!r}"],
            code=ErrorCodes.MALFORMED_RECORD,
        )


class ValidationError(InventoryError):
    """Raised when a caller supplies an out-of-constraint value."""

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(
            message=message,
            errors=errors,
            code=ErrorCodes.VALIDATION_FAILED,
        )


__all__ = [
    "ErrorCodes",
    "InventoryError",
    "InventoryIOError",
    "MalformedRecordError",
    "ValidationError",
]
