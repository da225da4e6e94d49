"""
Session validator - validates a complete session (ordered list of messages).

Runs the message validator over every message, then the session-wide analyzers,
and merges everything into one SessionValidationResult.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from session_validator.content import string_field
from session_validator.rules import DEFAULT_POLICY, ValidationPolicy
from session_validator.schemas.results import SessionValidationResult, ValidationIssue
from session_validator.services.consistency import check_timestamp_ordering, check_tool_chain, check_uuid_uniqueness
from session_validator.services.message import validate_and_parse
from session_validator.timestamps import to_milliseconds, try_parse_timestamp


def validate_session(
    messages: Sequence[object],
    *,
    now: datetime | None = None,
    policy: ValidationPolicy = DEFAULT_POLICY,
) -> SessionValidationResult:
    """
    Validate a complete session.

    Args:
        messages: Ordered messages (decoded JSON objects or CanonicalMessage instances)
        now: Reference instant shared by every message's timestamp rules (defaults to current UTC time)
        policy: Time thresholds

    Returns:
        SessionValidationResult - valid when no source reported an error
    """
    if not messages:
        return SessionValidationResult(
            valid=True,
            errors=[],
            warnings=[],
            messageCount=0,
            validCount=0,
            sessionId='',
            provider='',
            toolChainIssues=[],
        )

    if now is None:
        now = datetime.now(UTC)

    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    # Parsed model per message, or the raw value where the structural parse failed
    slots: list[object] = []
    valid_count = 0

    for i, message in enumerate(messages):
        model, result = validate_and_parse(message, i + 1, now=now, policy=policy)
        slots.append(message if model is None else model)
        errors.extend(result.errors)
        warnings.extend(result.warnings)
        if result.valid:
            valid_count += 1

    tool_chain_issues = check_tool_chain(slots)
    session_issues = [
        *tool_chain_issues,
        *check_uuid_uniqueness(slots),
        *check_timestamp_ordering(slots, policy=policy),
    ]
    for issue in session_issues:
        if issue.severity == 'error':
            errors.append(issue)
        else:
            warnings.append(issue)

    first, last = messages[0], messages[-1]
    start_time = string_field(first, 'timestamp')
    end_time = string_field(last, 'timestamp')

    return SessionValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        messageCount=len(messages),
        validCount=valid_count,
        sessionId=string_field(first, 'sessionId') or '',
        provider=string_field(first, 'provider') or '',
        startTime=start_time,
        endTime=end_time,
        duration=_duration_ms(start_time, end_time),
        toolChainIssues=tool_chain_issues,
    )


def _duration_ms(start_time: str | None, end_time: str | None) -> int | None:
    if start_time is None or end_time is None:
        return None
    start = try_parse_timestamp(start_time)
    end = try_parse_timestamp(end_time)
    if start is None or end is None:
        return None
    return to_milliseconds(end - start)
