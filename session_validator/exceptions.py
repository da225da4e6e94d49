"""
Shared exceptions for session-validator.

Exception Hierarchy:
    SessionValidatorError (base)
    ├── TimestampError (timestamp text cannot be turned into an instant)
    │   ├── TimestampFormatError (text does not match the RFC 3339 grammar)
    │   └── TimestampRangeError (grammar matches, calendar values out of range)
    └── SessionFileError (session file cannot be read)

The validators never let these escape: timestamp errors become issues. Only the
loader raises SessionFileError to its caller.
"""

from __future__ import annotations

from pathlib import Path


class SessionValidatorError(Exception):
    """Base exception for all session-validator errors."""


class TimestampError(SessionValidatorError):
    """Base exception for timestamp parsing failures."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f'Invalid timestamp {value!r}: {reason}')


class TimestampFormatError(TimestampError):
    """Raised when a timestamp does not match the RFC 3339 grammar."""


class TimestampRangeError(TimestampError):
    """Raised when a well-formed timestamp names an impossible instant (e.g. February 30)."""


class SessionFileError(SessionValidatorError):
    """Raised when a session file cannot be opened or read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f'Cannot read session file {path}: {reason}')
