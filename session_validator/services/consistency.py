"""
Session consistency analyzers.

Each analyzer scans the full ordered message list and returns issues about
relationships between messages:
- check_tool_chain: every tool_result answers a tool_use from the same session
- check_uuid_uniqueness: no uuid is reused
- check_timestamp_ordering: timestamps do not go backwards, no long silences

Slots hold CanonicalMessage instances or, where the structural parse failed,
the raw value. Raw slots are read leniently (see content.string_field and
content.tool_use_refs) so a message rejected for an unrelated reason still
takes part in pairing and uniqueness. Unreadable slots (None, non-mappings)
contribute nothing but keep their index.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from typing_extensions import TypeAliasType

from session_validator.content import string_field, tool_result_refs, tool_use_refs
from session_validator.rules import DEFAULT_POLICY, IssueCode, ValidationPolicy
from session_validator.schemas.results import ValidationIssue
from session_validator.timestamps import to_milliseconds, try_parse_timestamp

MessageSlots = TypeAliasType('MessageSlots', Sequence[object])


class ToolUseOrigin(NamedTuple):
    """Where a tool_use id was declared."""

    message_index: int
    name: str | None


# ==============================================================================
# Tool Chain
# ==============================================================================


def check_tool_chain(messages: MessageSlots) -> list[ValidationIssue]:
    """
    Check tool_use/tool_result pairing across a session.

    A tool_use without a tool_result is fine (the tool may still be running when
    the session was captured). A tool_result without a tool_use is an error.
    A second result for the same tool_use id is a warning.
    """
    origins = collect_tool_uses(messages)
    answered: set[str] = set()
    issues: list[ValidationIssue] = []

    for i, message in enumerate(messages):
        uuid = string_field(message, 'uuid')

        for tool_use_id in tool_result_refs(message):
            origin = origins.get(tool_use_id)

            if origin is None:
                issues.append(
                    ValidationIssue(
                        severity='error',
                        code=IssueCode.ORPHAN_TOOL_RESULT,
                        message=f'tool_result references tool_use_id "{tool_use_id}" which doesn\'t exist',
                        path=f'messages[{i}]',
                        line=i + 1,
                        details={'messageIndex': i, 'toolUseId': tool_use_id, 'uuid': uuid},
                    )
                )

            if tool_use_id in answered:
                details: dict[str, object] = {'messageIndex': i, 'toolUseId': tool_use_id, 'uuid': uuid}
                if origin is not None:
                    if origin.name is not None:
                        details['toolName'] = origin.name
                    details['toolUseMessageIndex'] = origin.message_index
                issues.append(
                    ValidationIssue(
                        severity='warning',
                        code=IssueCode.DUPLICATE_TOOL_RESULT,
                        message=f'Multiple tool_result blocks for tool_use_id "{tool_use_id}"',
                        path=f'messages[{i}]',
                        line=i + 1,
                        details=details,
                    )
                )

            answered.add(tool_use_id)

    return issues


def collect_tool_uses(messages: MessageSlots) -> dict[str, ToolUseOrigin]:
    """Map every tool_use id in the session to its origin. A repeated id keeps the last occurrence."""
    origins: dict[str, ToolUseOrigin] = {}
    for i, message in enumerate(messages):
        for ref in tool_use_refs(message):
            origins[ref.id] = ToolUseOrigin(message_index=i, name=ref.name)
    return origins


# ==============================================================================
# UUID Uniqueness
# ==============================================================================


def check_uuid_uniqueness(messages: MessageSlots) -> list[ValidationIssue]:
    """Report each reused uuid once, listing every index that carries it."""
    indices_by_uuid: dict[str, list[int]] = {}
    for i, message in enumerate(messages):
        uuid = string_field(message, 'uuid')
        if uuid is not None:
            indices_by_uuid.setdefault(uuid, []).append(i)

    issues: list[ValidationIssue] = []
    for uuid, indices in indices_by_uuid.items():
        if len(indices) < 2:
            continue
        issues.append(
            ValidationIssue(
                severity='error',
                code=IssueCode.DUPLICATE_UUID,
                message=(
                    f'UUID "{uuid}" appears in {len(indices)} messages '
                    f'(indices: {", ".join(str(index) for index in indices)})'
                ),
                path='uuid',
                details={'uuid': uuid, 'messageIndices': indices, 'count': len(indices)},
            )
        )
    return issues


# ==============================================================================
# Timestamp Ordering
# ==============================================================================


def check_timestamp_ordering(
    messages: MessageSlots, *, policy: ValidationPolicy = DEFAULT_POLICY
) -> list[ValidationIssue]:
    """
    Compare each message's timestamp with the previous message's.

    Logs may be written slightly out of order, so going backwards is only a
    warning. Pairs where either timestamp is missing or does not parse are skipped (the
    message validator already reported them).
    """
    issues: list[ValidationIssue] = []

    for i in range(1, len(messages)):
        previous_timestamp = string_field(messages[i - 1], 'timestamp')
        current_timestamp = string_field(messages[i], 'timestamp')
        if previous_timestamp is None or current_timestamp is None:
            continue

        previous_time = try_parse_timestamp(previous_timestamp)
        current_time = try_parse_timestamp(current_timestamp)
        if previous_time is None or current_time is None:
            continue
        uuid = string_field(messages[i], 'uuid')

        if current_time < previous_time:
            issues.append(
                ValidationIssue(
                    severity='warning',
                    code=IssueCode.OUT_OF_ORDER_TIMESTAMP,
                    message='Message timestamp is earlier than previous message',
                    path=f'messages[{i}]',
                    line=i + 1,
                    details={
                        'messageIndex': i,
                        'timestamp': current_timestamp,
                        'previousTimestamp': previous_timestamp,
                        'uuid': uuid,
                    },
                )
            )

        gap = current_time - previous_time
        if gap > policy.large_gap:
            gap_ms = to_milliseconds(gap)
            gap_minutes = (gap_ms + 30_000) // 60_000  # Round half up
            issues.append(
                ValidationIssue(
                    severity='warning',
                    code=IssueCode.LARGE_TIME_GAP,
                    message=f'Large time gap ({gap_minutes} minutes) between messages',
                    path=f'messages[{i}]',
                    line=i + 1,
                    details={'messageIndex': i, 'gapMs': gap_ms, 'gapMinutes': gap_minutes, 'uuid': uuid},
                )
            )

    return issues
