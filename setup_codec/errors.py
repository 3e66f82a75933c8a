"""Exceptions raised by the setup codec."""

from __future__ import annotations

from typing import Any, List, Optional


class SetupCodecError(Exception):
    """Base exception for setup codec errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class MalformedInputError(SetupCodecError):
    """Raised when setup text cannot be split into sections and key/value lines."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        self.line_number = line_number
        self.line = line
        details = None
        if line_number is not None:
            details = f"line {line_number}: {line!r}"
        super().__init__(message, details)


class DuplicateDialectError(SetupCodecError):
    """Raised when a vehicle id is registered twice."""

    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id
        super().__init__(f"Dialect '{vehicle_id}' is already registered")


class InvalidDialectError(SetupCodecError):
    """Raised when a dialect definition fails validation or cannot be loaded."""

    def __init__(self, vehicle_id: str, issues: Optional[List[Any]] = None, details: Optional[str] = None):
        self.vehicle_id = vehicle_id
        self.issues = list(issues or [])
        if details is None and self.issues:
            details = "; ".join(f"{issue.field_path}: {issue.message}" for issue in self.issues)
        super().__init__(f"Dialect '{vehicle_id}' is invalid", details)


class InvalidPathError(SetupCodecError):
    """Raised when a dotted field path cannot be written."""

    def __init__(self, path: str, segment: Optional[str] = None, reason: str = "invalid path"):
        self.path = path
        self.segment = segment
        details = reason if segment is None else f"{reason} at segment '{segment}'"
        super().__init__(f"Cannot resolve field path '{path}'", details)


class InvalidValueError(SetupCodecError):
    """Raised in strict mode when a raw value is not a number."""

    def __init__(self, path: str, raw_value: Any):
        self.path = path
        self.raw_value = raw_value
        super().__init__(f"Value for '{path}' is not numeric", repr(raw_value))
