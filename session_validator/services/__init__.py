"""
Validation services.

- message: single-message schema and semantic validation
- consistency: session-wide analyzers (tool chain, uuid uniqueness, timestamp ordering)
- session: orchestrates both into a SessionValidationResult
- loader: reads canonical JSONL files
"""

from __future__ import annotations

from session_validator.services.consistency import check_timestamp_ordering, check_tool_chain, check_uuid_uniqueness
from session_validator.services.loader import LoadedSession, SessionLoaderService
from session_validator.services.message import validate_message
from session_validator.services.session import validate_session

__all__ = [
    'LoadedSession',
    'SessionLoaderService',
    'check_timestamp_ordering',
    'check_tool_chain',
    'check_uuid_uniqueness',
    'validate_message',
    'validate_session',
]
