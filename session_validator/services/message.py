"""
Message schema validator - validates one canonical message.

Tiered validation in a fixed order:
1. Structural parse (pydantic). Failure short-circuits: semantic checks need a parsed message.
2. Type/role consistency
3. Timestamp semantics
4. Content block checks
5. Provider metadata duplication heuristic

Pure and total: any input produces a ValidationResult, nothing is raised.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import pydantic

from session_validator.content import content_to_json, has_tool_results, iter_blocks, to_compact_json
from session_validator.exceptions import TimestampFormatError, TimestampRangeError
from session_validator.rules import DEFAULT_POLICY, DUPLICATE_CONTENT_PREFIX_LENGTH, IssueCode, ValidationPolicy
from session_validator.schemas.canonical import (
    BLOCK_TYPES,
    CONTENT_VALUE_TAGS,
    CanonicalMessage,
    ToolResultContent,
    ToolUseContent,
)
from session_validator.schemas.results import ValidationIssue, ValidationResult
from session_validator.timestamps import parse_timestamp


def validate_message(
    message: object,
    line: int | None = None,
    *,
    now: datetime | None = None,
    policy: ValidationPolicy = DEFAULT_POLICY,
) -> ValidationResult:
    """
    Validate a single canonical message.

    Args:
        message: Any value - a decoded JSON object, a CanonicalMessage, or garbage
        line: 1-based position reported on every issue
        now: Reference instant for the future/old timestamp rules (naive means UTC; defaults to current UTC time)
        policy: Time thresholds

    Returns:
        ValidationResult with messageCount=1 and validCount 1 or 0
    """
    _, result = validate_and_parse(message, line, now=now, policy=policy)
    return result


def validate_and_parse(
    message: object,
    line: int | None = None,
    *,
    now: datetime | None = None,
    policy: ValidationPolicy = DEFAULT_POLICY,
) -> tuple[CanonicalMessage | None, ValidationResult]:
    """Validate a message and also return the parsed model (None if the structural parse failed)."""
    try:
        parsed = CanonicalMessage.model_validate(message)
    except pydantic.ValidationError as e:
        errors = [_schema_issue(error, line) for error in e.errors(include_url=False)]
        return None, ValidationResult(valid=False, errors=errors, warnings=[], messageCount=1, validCount=0)

    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    issues = [
        *_check_type_role(parsed, line),
        *_check_timestamp(parsed, line, now, policy),
        *_check_content_blocks(parsed, line),
        *_check_provider_metadata(parsed, line),
    ]
    errors = [issue for issue in issues if issue.severity == 'error']
    warnings = [issue for issue in issues if issue.severity == 'warning']
    return parsed, ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        messageCount=1,
        validCount=0 if errors else 1,
    )


# ==============================================================================
# Structural
# ==============================================================================


def format_error_path(loc: Sequence[int | str]) -> str | None:
    """
    Turn a pydantic error location into a dotted field path.

    Pydantic inserts union branch labels into locations, e.g.
    ('message', 'content', 'blocks', 0, 'tool_use', 'id'). Those labels are not
    fields and are dropped: 'message.content.0.id'.
    """
    parts: list[str] = []
    for i, part in enumerate(loc):
        previous = loc[i - 1] if i else None
        if previous == 'content' and part in CONTENT_VALUE_TAGS:
            continue
        if isinstance(previous, int) and part in BLOCK_TYPES:
            continue
        parts.append(str(part))
    return '.'.join(parts) or None


def _schema_issue(error: Mapping[str, Any], line: int | None) -> ValidationIssue:
    return ValidationIssue(
        severity='error',
        code=IssueCode.SCHEMA_VALIDATION_ERROR,
        message=error['msg'],
        path=format_error_path(error['loc']),
        line=line,
        details={'type': error['type'], 'loc': list(error['loc'])},
    )


# ==============================================================================
# Semantic
# ==============================================================================


def _check_type_role(message: CanonicalMessage, line: int | None) -> list[ValidationIssue]:
    """tool_result blocks belong in user messages; role should agree with type."""
    issues: list[ValidationIssue] = []
    role = message.message.role

    if has_tool_results(message.message.content):
        if message.type != 'user':
            issues.append(
                ValidationIssue(
                    severity='error',
                    code=IssueCode.INVALID_TOOL_RESULT_MESSAGE_TYPE,
                    message=f'tool_result blocks must be in user messages, found in {message.type} message',
                    path='type',
                    line=line,
                    details={'type': message.type, 'role': role},
                )
            )
        if role != 'user':
            issues.append(
                ValidationIssue(
                    severity='error',
                    code=IssueCode.INVALID_TOOL_RESULT_ROLE,
                    message=f'tool_result messages must have role "user", found "{role}"',
                    path='message.role',
                    line=line,
                    details={'role': role},
                )
            )

    if message.type == 'user' and role != 'user':
        issues.append(
            ValidationIssue(
                severity='warning',
                code=IssueCode.MISALIGNED_USER_ROLE,
                message=f'User message type should have role "user", found "{role}"',
                path='message.role',
                line=line,
            )
        )

    if message.type == 'assistant' and role != 'assistant':
        issues.append(
            ValidationIssue(
                severity='warning',
                code=IssueCode.MISALIGNED_ASSISTANT_ROLE,
                message=f'Assistant message type should have role "assistant", found "{role}"',
                path='message.role',
                line=line,
            )
        )

    return issues


def _check_timestamp(
    message: CanonicalMessage, line: int | None, now: datetime, policy: ValidationPolicy
) -> list[ValidationIssue]:
    timestamp = message.timestamp
    try:
        instant = parse_timestamp(timestamp)
    except TimestampFormatError as e:
        return [
            ValidationIssue(
                severity='error',
                code=IssueCode.INVALID_TIMESTAMP_FORMAT,
                message='Timestamp is not a valid RFC 3339 date-time',
                path='timestamp',
                line=line,
                details={'timestamp': timestamp, 'reason': e.reason},
            )
        ]
    except TimestampRangeError as e:
        return [
            ValidationIssue(
                severity='error',
                code=IssueCode.TIMESTAMP_PARSE_ERROR,
                message=f'Failed to parse timestamp: {e.reason}',
                path='timestamp',
                line=line,
                details={'timestamp': timestamp, 'error': e.reason},
            )
        ]

    issues: list[ValidationIssue] = []
    if instant > now + policy.future_tolerance:
        issues.append(
            ValidationIssue(
                severity='warning',
                code=IssueCode.FUTURE_TIMESTAMP,
                message=f'Timestamp is more than {_describe(policy.future_tolerance)} in the future',
                path='timestamp',
                line=line,
                details={'timestamp': timestamp},
            )
        )
    if instant < now - policy.max_age:
        issues.append(
            ValidationIssue(
                severity='warning',
                code=IssueCode.OLD_TIMESTAMP,
                message=f'Timestamp is more than {_describe(policy.max_age)} in the past',
                path='timestamp',
                line=line,
                details={'timestamp': timestamp},
            )
        )
    return issues


def _describe(span: timedelta) -> str:
    """Short human form of a threshold: '1 day', '5 years', '36 hours'."""
    days = span.days
    if days and days % 365 == 0 and not span.seconds:
        years = days // 365
        return f'{years} year' + ('s' if years != 1 else '')
    if days and not span.seconds:
        return f'{days} day' + ('s' if days != 1 else '')
    hours = int(span.total_seconds() // 3600)
    return f'{hours} hour' + ('s' if hours != 1 else '')


def _check_content_blocks(message: CanonicalMessage, line: int | None) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for i, block in enumerate(iter_blocks(message.message.content)):
        if isinstance(block, ToolUseContent):
            try:
                json.dumps(block.input, allow_nan=False)
            except (TypeError, ValueError, RecursionError) as e:
                issues.append(
                    ValidationIssue(
                        severity='error',
                        code=IssueCode.INVALID_TOOL_USE_INPUT,
                        message=f'tool_use input is not valid JSON: {e}',
                        path=f'message.content[{i}].input',
                        line=line,
                        details={'blockIndex': i, 'error': str(e)},
                    )
                )
            if not block.id.strip():
                issues.append(
                    ValidationIssue(
                        severity='error',
                        code=IssueCode.EMPTY_TOOL_USE_ID,
                        message='tool_use block has empty ID',
                        path=f'message.content[{i}].id',
                        line=line,
                        details={'blockIndex': i},
                    )
                )

        elif isinstance(block, ToolResultContent):
            if not block.tool_use_id.strip():
                issues.append(
                    ValidationIssue(
                        severity='error',
                        code=IssueCode.EMPTY_TOOL_USE_ID,
                        message='tool_result block has empty tool_use_id',
                        path=f'message.content[{i}].tool_use_id',
                        line=line,
                        details={'blockIndex': i},
                    )
                )
            if not block.content.strip():
                issues.append(
                    ValidationIssue(
                        severity='error',
                        code=IssueCode.EMPTY_TOOL_RESULT_CONTENT,
                        message='tool_result block has empty content',
                        path=f'message.content[{i}].content',
                        line=line,
                        details={'blockIndex': i},
                    )
                )

    return issues


def _check_provider_metadata(message: CanonicalMessage, line: int | None) -> list[ValidationIssue]:
    """Flag converters that copy the message content into providerMetadata."""
    if message.providerMetadata is None:
        return []

    try:
        content_str = content_to_json(message.message.content)
        metadata_str = to_compact_json(message.providerMetadata)
    except (ValueError, RecursionError):
        # Circular or too deeply nested
        return []

    if (
        len(content_str) > DUPLICATE_CONTENT_PREFIX_LENGTH
        and content_str[:DUPLICATE_CONTENT_PREFIX_LENGTH] in metadata_str
    ):
        return [
            ValidationIssue(
                severity='warning',
                code=IssueCode.DUPLICATE_CONTENT_IN_METADATA,
                message='Content appears to be duplicated in providerMetadata',
                path='providerMetadata',
                line=line,
                details={'metadataSize': len(metadata_str), 'contentSize': len(content_str)},
            )
        ]
    return []
