"""
Validation report schemas.

Plain, serializable value objects returned by the validators. Field names use the
camelCase keys of the wire format so model_dump(mode='json') can be handed to any
transport unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from session_validator.rules import IssueCode
from session_validator.schemas.types import BaseStrictModel

Severity = Literal['error', 'warning']


class ValidationIssue(BaseStrictModel):
    """A single rule violation.

    Fields:
        severity: 'error' invalidates the message/session, 'warning' is advisory
        code: Stable rule identifier - consumers may branch on it
        message: Human-readable description
        path: Dotted field path or messages[i] for session-level issues
        line: 1-based position of the offending message
        details: Rule-specific context (JSON-compatible values only)
    """

    severity: Severity
    code: IssueCode
    message: str
    path: str | None = None
    line: int | None = None
    details: Mapping[str, Any] | None = None


class ValidationResult(BaseStrictModel):
    """Outcome of validating a single canonical message."""

    valid: bool
    errors: Sequence[ValidationIssue]
    warnings: Sequence[ValidationIssue]
    messageCount: int
    validCount: int


class SessionValidationResult(ValidationResult):
    """Outcome of validating a whole session.

    errors/warnings hold every issue (per-message and session-wide);
    toolChainIssues repeats the tool-chain analyzer's issues on their own.
    """

    sessionId: str
    provider: str
    startTime: str | None = None
    endTime: str | None = None
    duration: int | None = None  # Milliseconds between first and last message
    toolChainIssues: Sequence[ValidationIssue]
