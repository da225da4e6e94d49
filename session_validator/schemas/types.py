"""
Shared type definitions for schemas.

Centralizes common type annotations used across canonical message and report schemas.

Layering:
- This module provides FOUNDATION types (BaseStrictModel, PassthroughModel, NonEmptyStr)
- canonical.py (input side) and results.py (output side) import from here
"""

from __future__ import annotations

from typing import Annotated

import pydantic
from typing_extensions import TypeAliasType

# ==============================================================================
# Base Strict Model (Foundation)
# ==============================================================================


class BaseStrictModel(pydantic.BaseModel):
    """
    Foundation strict model - report models inherit from this.

    Uses extra='forbid' to reject unknown fields - any field not modeled
    causes immediate validation failure (fail-fast).
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',  # Reject unknown fields (fail-fast)
        strict=True,  # Strict type coercion
        frozen=True,  # Immutable after creation
    )


# ==============================================================================
# Passthrough Model (Foundation)
# ==============================================================================


class PassthroughModel(pydantic.BaseModel):
    """
    Foundation model for canonical input records.

    Symmetry with BaseStrictModel:
    - BaseStrictModel: extra='forbid' (rejects unknown fields)
    - PassthroughModel: extra='allow' (keeps unknown fields)

    Upstream converters attach provider-specific keys we do not model. They are
    kept as extra fields so a validated message round-trips without losing data:

        message.model_dump(exclude_unset=True, mode='json')

    Known fields are still validated strictly.
    """

    model_config = pydantic.ConfigDict(
        extra='allow',  # Keep unknown fields (round-trip safe)
        strict=True,  # Strict type coercion for known fields
        frozen=True,  # Immutable after creation
    )

    def get_extra_fields(self) -> dict[str, object]:
        """Get extra fields captured by this model.

        Returns only the unknown fields, not defined model fields.
        """
        return dict(self.__pydantic_extra__) if self.__pydantic_extra__ else {}


# ==============================================================================
# Primitive Types
# ==============================================================================

NonEmptyStr = TypeAliasType('NonEmptyStr', Annotated[str, pydantic.StringConstraints(min_length=1)])
"""A string that must contain at least one character."""


def _integral_float_to_int(value: object) -> object:
    """JSON has one number type: 12.0 is an integer, 12.5 is not."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


TokenCount = TypeAliasType(
    'TokenCount', Annotated[pydantic.NonNegativeInt, pydantic.BeforeValidator(_integral_float_to_int)]
)
"""A non-negative token count from provider usage statistics (integral floats accepted)."""
