"""Configuration for session-validator."""

from __future__ import annotations

from session_validator.config.base import ValidatorSettings, get_settings, settings

__all__ = [
    'ValidatorSettings',
    'get_settings',
    'settings',
]
