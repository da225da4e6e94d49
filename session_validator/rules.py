"""
Validation rule codes and time thresholds.

IssueCode values are part of the output contract: consumers branch on them, so a
code never changes meaning once published. Add new codes, never repurpose old ones.
"""

from __future__ import annotations

from datetime import timedelta
from enum import StrEnum

import pydantic


class IssueCode(StrEnum):
    """Every issue code the validators can emit."""

    # Structural
    SCHEMA_VALIDATION_ERROR = 'SCHEMA_VALIDATION_ERROR'

    # Type/role consistency
    INVALID_TOOL_RESULT_MESSAGE_TYPE = 'INVALID_TOOL_RESULT_MESSAGE_TYPE'
    INVALID_TOOL_RESULT_ROLE = 'INVALID_TOOL_RESULT_ROLE'
    MISALIGNED_USER_ROLE = 'MISALIGNED_USER_ROLE'
    MISALIGNED_ASSISTANT_ROLE = 'MISALIGNED_ASSISTANT_ROLE'

    # Timestamps
    INVALID_TIMESTAMP_FORMAT = 'INVALID_TIMESTAMP_FORMAT'
    TIMESTAMP_PARSE_ERROR = 'TIMESTAMP_PARSE_ERROR'
    FUTURE_TIMESTAMP = 'FUTURE_TIMESTAMP'
    OLD_TIMESTAMP = 'OLD_TIMESTAMP'

    # Content blocks
    INVALID_TOOL_USE_INPUT = 'INVALID_TOOL_USE_INPUT'
    EMPTY_TOOL_USE_ID = 'EMPTY_TOOL_USE_ID'
    EMPTY_TOOL_RESULT_CONTENT = 'EMPTY_TOOL_RESULT_CONTENT'

    # Provider metadata
    DUPLICATE_CONTENT_IN_METADATA = 'DUPLICATE_CONTENT_IN_METADATA'

    # Session-wide
    ORPHAN_TOOL_RESULT = 'ORPHAN_TOOL_RESULT'
    DUPLICATE_TOOL_RESULT = 'DUPLICATE_TOOL_RESULT'
    DUPLICATE_UUID = 'DUPLICATE_UUID'
    OUT_OF_ORDER_TIMESTAMP = 'OUT_OF_ORDER_TIMESTAMP'
    LARGE_TIME_GAP = 'LARGE_TIME_GAP'

    # JSONL loading (outside the per-message rules)
    JSONL_DECODE_ERROR = 'JSONL_DECODE_ERROR'


# ==============================================================================
# Time Thresholds
# ==============================================================================

FUTURE_TIMESTAMP_TOLERANCE = timedelta(hours=24)
OLD_TIMESTAMP_MAX_AGE = timedelta(days=5 * 365)
LARGE_TIME_GAP = timedelta(hours=1)

# Minimum content length before the metadata duplication heuristic applies,
# and the prefix length searched for in the serialized metadata
DUPLICATE_CONTENT_PREFIX_LENGTH = 50


class ValidationPolicy(pydantic.BaseModel):
    """Time thresholds applied by the timestamp rules.

    The default instance carries the fixed defaults above; the CLI builds one
    from settings (see config.base.ValidatorSettings.to_policy).
    """

    model_config = pydantic.ConfigDict(extra='forbid', strict=True, frozen=True)

    future_tolerance: timedelta = FUTURE_TIMESTAMP_TOLERANCE
    max_age: timedelta = OLD_TIMESTAMP_MAX_AGE
    large_gap: timedelta = LARGE_TIME_GAP


DEFAULT_POLICY = ValidationPolicy()
