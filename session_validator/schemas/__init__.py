"""
Schema definitions for session-validator.

This package contains Pydantic models for:
- canonical: the provider-agnostic session message format (validator input)
- results: validation issues and reports (validator output)
"""

from __future__ import annotations

from session_validator.schemas.canonical import (
    SCHEMA_VERSION,
    CanonicalMessage,
    ContentBlock,
    ContentValue,
    MessageContent,
    TextContent,
    ThinkingContent,
    TokenUsage,
    ToolResultContent,
    ToolUseContent,
)
from session_validator.schemas.results import SessionValidationResult, Severity, ValidationIssue, ValidationResult

__all__ = [
    'SCHEMA_VERSION',
    'CanonicalMessage',
    'ContentBlock',
    'ContentValue',
    'MessageContent',
    'SessionValidationResult',
    'Severity',
    'TextContent',
    'ThinkingContent',
    'TokenUsage',
    'ToolResultContent',
    'ToolUseContent',
    'ValidationIssue',
    'ValidationResult',
]
