"""
Helpers for reading canonical message content.

Content is either a plain string (no blocks) or a list of typed blocks.

The session analyzers also see values that failed the structural parse. The
lenient readers at the bottom take either a CanonicalMessage or a raw mapping
and return whatever can be read from it.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import Any, NamedTuple

from session_validator.schemas.canonical import (
    CanonicalMessage,
    ContentBlock,
    ContentValue,
    ToolResultContent,
    ToolUseContent,
)


def iter_blocks(content: ContentValue) -> Iterator[ContentBlock]:
    """Yield the content blocks of a message; plain string content has none."""
    if isinstance(content, str):
        return
    yield from content


def tool_uses(content: ContentValue) -> list[ToolUseContent]:
    return [block for block in iter_blocks(content) if isinstance(block, ToolUseContent)]


def tool_results(content: ContentValue) -> list[ToolResultContent]:
    return [block for block in iter_blocks(content) if isinstance(block, ToolResultContent)]


def has_tool_uses(content: ContentValue) -> bool:
    return any(isinstance(block, ToolUseContent) for block in iter_blocks(content))


def has_tool_results(content: ContentValue) -> bool:
    return any(isinstance(block, ToolResultContent) for block in iter_blocks(content))


def to_compact_json(value: object) -> str:
    """Serialize like a JSON encoder with no whitespace; unserializable values fall back to str().

    Raises:
        ValueError: Circular reference
        RecursionError: Nesting deeper than the interpreter allows
    """
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=str)


def content_to_json(content: ContentValue) -> str:
    """Render content as text: strings as-is, block lists as compact JSON.

    Only fields present in the input are emitted, so the rendering matches the
    record the converter wrote. Raises like to_compact_json (pydantic's
    serialization error is a ValueError).
    """
    if isinstance(content, str):
        return content
    return to_compact_json([block.model_dump(exclude_unset=True) for block in content])


# ==============================================================================
# Lenient readers (parsed or raw messages)
# ==============================================================================


class ToolUseRef(NamedTuple):
    """A tool_use block's id and, when known, its tool name."""

    id: str
    name: str | None


def string_field(message: object, name: str) -> str | None:
    """Read a top-level string field from a message that may not have passed validation."""
    if isinstance(message, CanonicalMessage):
        value = getattr(message, name)
    elif isinstance(message, Mapping):
        value = message.get(name)
    else:
        return None
    return value if isinstance(value, str) else None


def tool_use_refs(message: object) -> list[ToolUseRef]:
    """Ids and names of every tool_use block in a message."""
    if isinstance(message, CanonicalMessage):
        return [ToolUseRef(block.id, block.name) for block in tool_uses(message.message.content)]

    refs: list[ToolUseRef] = []
    for block in _raw_blocks(message):
        tool_id, name = block.get('id'), block.get('name')
        if block.get('type') == 'tool_use' and isinstance(tool_id, str):
            refs.append(ToolUseRef(tool_id, name if isinstance(name, str) else None))
    return refs


def tool_result_refs(message: object) -> list[str]:
    """The tool_use_id of every tool_result block in a message."""
    if isinstance(message, CanonicalMessage):
        return [block.tool_use_id for block in tool_results(message.message.content)]

    return [
        block['tool_use_id']
        for block in _raw_blocks(message)
        if block.get('type') == 'tool_result' and isinstance(block.get('tool_use_id'), str)
    ]


def _raw_blocks(message: object) -> Iterator[Mapping[str, Any]]:
    if not isinstance(message, Mapping):
        return
    payload = message.get('message')
    if not isinstance(payload, Mapping):
        return
    content = payload.get('content')
    if not isinstance(content, (list, tuple)):
        return
    for block in content:
        if isinstance(block, Mapping):
            yield block
