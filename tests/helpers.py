"""Builders for canonical message test data."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

# Fixed reference instant so FUTURE/OLD timestamp rules are deterministic
NOW = datetime(2026, 1, 20, 12, 0, 0, tzinfo=UTC)


def build_message(
    uuid: str = 'msg-1',
    *,
    type: str = 'user',
    role: str | None = None,
    content: object = 'Hello',
    timestamp: str = '2026-01-20T10:00:00.000Z',
    session_id: str = 'sess-001',
    provider: str = 'claude',
    **extra: Any,
) -> dict[str, Any]:
    """Build a canonical message dict; role defaults to the type for user/assistant."""
    if role is None:
        role = type if type in ('user', 'assistant') else 'system'
    message: dict[str, Any] = {
        'uuid': uuid,
        'timestamp': timestamp,
        'type': type,
        'sessionId': session_id,
        'provider': provider,
        'message': {'role': role, 'content': content},
    }
    message.update(extra)
    return message


def tool_use(tool_id: str, name: str = 'Bash', **input: Any) -> dict[str, Any]:
    return {'type': 'tool_use', 'id': tool_id, 'name': name, 'input': input or {'command': 'ls'}}


def tool_result(tool_use_id: str, content: str = 'ok', **extra: Any) -> dict[str, Any]:
    return {'type': 'tool_result', 'tool_use_id': tool_use_id, 'content': content, **extra}
