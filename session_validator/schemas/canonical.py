"""
Pydantic models for canonical session messages.

The canonical format is the provider-agnostic shape every upstream converter
(Claude, Codex, Gemini, Copilot, OpenCode) produces. One JSONL line holds one
CanonicalMessage.

Key points:
- Only conversational messages are canonical: type is user, assistant or meta
- Every converter must set the provider field
- message.content is either a plain string or a list of typed content blocks
- Content blocks use a discriminated union on 'type'
- Unknown keys are kept as extra fields (see PassthroughModel), never dropped

Field names mirror the JSON keys (camelCase) so that
model_dump(exclude_unset=True, mode='json') reproduces the original record.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Annotated, Any, Literal

import pydantic

from session_validator.schemas.types import NonEmptyStr, PassthroughModel, TokenCount

# ==============================================================================
# Schema Version
# ==============================================================================

SCHEMA_VERSION = '1.0.0'

MessageType = Literal['user', 'assistant', 'meta']

# ==============================================================================
# Token Usage
# ==============================================================================


class TokenUsage(PassthroughModel):
    """Token usage statistics reported by the provider."""

    input_tokens: TokenCount | None = None
    output_tokens: TokenCount | None = None
    cache_creation_input_tokens: TokenCount | None = None
    cache_read_input_tokens: TokenCount | None = None


# ==============================================================================
# Content Blocks (Discriminated Union)
# ==============================================================================


class TextContent(PassthroughModel):
    """Plain text content block."""

    type: Literal['text']
    text: NonEmptyStr


class ThinkingContent(PassthroughModel):
    """Reasoning content block.

    Claude records an encrypted signature, other providers record plain text.
    Either may be missing.
    """

    type: Literal['thinking']
    thinking: str | None = None
    signature: str | None = None


class ToolUseContent(PassthroughModel):
    """Tool invocation request."""

    type: Literal['tool_use']
    id: NonEmptyStr
    name: NonEmptyStr
    input: Mapping[str, Any]


class ToolResultContent(PassthroughModel):
    """Outcome of a tool invocation, linked to its request by tool_use_id."""

    type: Literal['tool_result']
    tool_use_id: NonEmptyStr
    content: NonEmptyStr
    is_error: bool | None = None


BLOCK_TYPES = frozenset({'text', 'thinking', 'tool_use', 'tool_result'})

ContentBlock = Annotated[
    TextContent | ThinkingContent | ToolUseContent | ToolResultContent,
    pydantic.Field(discriminator='type'),
]


def _content_kind(value: Any) -> str | None:
    """Pick the ContentValue branch: 'string' for text, 'blocks' for a list of blocks."""
    if isinstance(value, str):
        return 'string'
    if isinstance(value, (list, tuple)):
        return 'blocks'
    return None


# Union branch labels that pydantic inserts into error locations
CONTENT_VALUE_TAGS = frozenset({'string', 'blocks'})

ContentValue = Annotated[
    Annotated[str, pydantic.Tag('string')] | Annotated[Sequence[ContentBlock], pydantic.Tag('blocks')],
    pydantic.Discriminator(
        _content_kind,
        custom_error_type='invalid_content',
        custom_error_message='Content must be a string or a list of content blocks',
    ),
]


# ==============================================================================
# Message Structure
# ==============================================================================


class MessageContent(PassthroughModel):
    """The conversational payload of a canonical message."""

    role: NonEmptyStr
    content: ContentValue
    model: str | None = None
    usage: TokenUsage | None = None


class CanonicalMessage(PassthroughModel):
    """One turn or event of an AI coding session, in canonical form.

    Required fields identify the message (uuid, timestamp, type) and its
    origin (sessionId, provider). Everything else is context carried through
    from the provider and not validated beyond its type.
    """

    # Required
    uuid: NonEmptyStr
    timestamp: NonEmptyStr  # Grammar checked semantically (see services.message)
    type: MessageType
    sessionId: NonEmptyStr
    provider: NonEmptyStr
    message: MessageContent

    # Optional context
    cwd: str | None = None
    gitBranch: str | None = None
    version: str | None = None

    # Threading and metadata
    parentUuid: str | None = None  # Explicit null in Claude-derived records
    logicalParentUuid: str | None = None
    isSidechain: bool | None = None
    userType: str | None = None
    providerMetadata: Mapping[str, Any] | None = None
    isMeta: bool | None = None
    requestId: str | None = None
    toolUseResult: Any = None

    # Claude-specific
    level: str | None = None
    subtype: str | None = None
    content: str | None = None  # System message text
    compactMetadata: Mapping[str, Any] | None = None
    toolUseID: str | None = None
