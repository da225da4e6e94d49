"""
session-validator: validation for canonical AI coding session transcripts.

Public API:
    validate_message(message, line=None) -> ValidationResult
    validate_session(messages) -> SessionValidationResult
    check_tool_chain / check_uuid_uniqueness / check_timestamp_ordering -> list[ValidationIssue]
"""

from __future__ import annotations

from session_validator.rules import DEFAULT_POLICY, IssueCode, ValidationPolicy
from session_validator.schemas import (
    CanonicalMessage,
    SessionValidationResult,
    ValidationIssue,
    ValidationResult,
)
from session_validator.services import (
    check_timestamp_ordering,
    check_tool_chain,
    check_uuid_uniqueness,
    validate_message,
    validate_session,
)

__all__ = [
    'DEFAULT_POLICY',
    'CanonicalMessage',
    'IssueCode',
    'SessionValidationResult',
    'ValidationIssue',
    'ValidationPolicy',
    'ValidationResult',
    'check_timestamp_ordering',
    'check_tool_chain',
    'check_uuid_uniqueness',
    'validate_message',
    'validate_session',
]
