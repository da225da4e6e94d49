"""
Configuration for session-validator.

Threshold defaults match the fixed policy in session_validator.rules; the
environment (or a .env file) may override them for the command-line tool.
"""

from __future__ import annotations

import os
import pathlib
from datetime import timedelta
from typing import TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings

from session_validator.rules import FUTURE_TIMESTAMP_TOLERANCE, LARGE_TIME_GAP, OLD_TIMESTAMP_MAX_AGE, ValidationPolicy

T = TypeVar('T', bound='ValidatorSettings')


class ValidatorSettings(pydantic_settings.BaseSettings):
    """Settings for the session-validator command-line tool."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='ignore',  # .env files are shared with other tools
    )

    # Application metadata
    APP_NAME: str = 'session-validator'
    VERSION: str = '0.1.0'

    # Timestamp rule thresholds
    FUTURE_TIMESTAMP_TOLERANCE_HOURS: int = FUTURE_TIMESTAMP_TOLERANCE // timedelta(hours=1)
    OLD_TIMESTAMP_MAX_AGE_DAYS: int = OLD_TIMESTAMP_MAX_AGE.days
    LARGE_TIME_GAP_MINUTES: int = LARGE_TIME_GAP // timedelta(minutes=1)

    @pydantic.field_validator(
        'FUTURE_TIMESTAMP_TOLERANCE_HOURS', 'OLD_TIMESTAMP_MAX_AGE_DAYS', 'LARGE_TIME_GAP_MINUTES'
    )
    @classmethod
    def validate_positive(cls, v: int, info: pydantic.ValidationInfo) -> int:
        """Thresholds of zero or less would flag every message."""
        if v <= 0:
            raise ValueError(f'{info.field_name} must be positive')
        return v

    def to_policy(self) -> ValidationPolicy:
        """Build the ValidationPolicy handed to the validators."""
        return ValidationPolicy(
            future_tolerance=timedelta(hours=self.FUTURE_TIMESTAMP_TOLERANCE_HOURS),
            max_age=timedelta(days=self.OLD_TIMESTAMP_MAX_AGE_DAYS),
            large_gap=timedelta(minutes=self.LARGE_TIME_GAP_MINUTES),
        )


def get_settings(settings_class: type[T], env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    LOAD_ENV_FILE environment variable specifies custom .env file path.
    When unset, loads from environment variables only.

    Args:
        settings_class: Settings class to instantiate
        env_file: Optional path to .env file (overrides LOAD_ENV_FILE)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If specified .env file doesn't exist
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    if not env_file_path:
        return settings_class(_env_file=None)  # No .env file, load from environment only

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)


def lazy_settings(settings_class: type[T]) -> T:
    """
    Lazy settings - defers instantiation until first access.

    Args:
        settings_class: Settings class to instantiate

    Returns:
        Proxy that instantiates settings on first access
    """
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))


# Module-level singleton (lazy-loaded)
settings = lazy_settings(ValidatorSettings)
