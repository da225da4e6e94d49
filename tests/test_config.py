"""
Tests for settings loading.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pydantic
import pytest

from session_validator import DEFAULT_POLICY
from session_validator.config import ValidatorSettings, get_settings

THRESHOLD_VARS = ('FUTURE_TIMESTAMP_TOLERANCE_HOURS', 'OLD_TIMESTAMP_MAX_AGE_DAYS', 'LARGE_TIME_GAP_MINUTES')


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (*THRESHOLD_VARS, 'LOAD_ENV_FILE'):
        monkeypatch.delenv(name, raising=False)


def test_defaults_match_fixed_policy() -> None:
    config = get_settings(ValidatorSettings)

    assert config.to_policy() == DEFAULT_POLICY
    assert config.FUTURE_TIMESTAMP_TOLERANCE_HOURS == 24
    assert config.OLD_TIMESTAMP_MAX_AGE_DAYS == 1825
    assert config.LARGE_TIME_GAP_MINUTES == 60


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('LARGE_TIME_GAP_MINUTES', '15')
    monkeypatch.setenv('FUTURE_TIMESTAMP_TOLERANCE_HOURS', '2')

    policy = get_settings(ValidatorSettings).to_policy()

    assert policy.large_gap == timedelta(minutes=15)
    assert policy.future_tolerance == timedelta(hours=2)
    assert policy.max_age == DEFAULT_POLICY.max_age


@pytest.mark.parametrize('value', ['0', '-5'])
def test_non_positive_threshold_rejected(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv('OLD_TIMESTAMP_MAX_AGE_DAYS', value)

    with pytest.raises(pydantic.ValidationError, match='OLD_TIMESTAMP_MAX_AGE_DAYS must be positive'):
        get_settings(ValidatorSettings)


def test_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / 'validator.env'
    env_file.write_text('OLD_TIMESTAMP_MAX_AGE_DAYS=30\n', encoding='utf-8')

    config = get_settings(ValidatorSettings, env_file=str(env_file))

    assert config.to_policy().max_age == timedelta(days=30)


def test_env_file_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / 'validator.env'
    env_file.write_text('LARGE_TIME_GAP_MINUTES=5\n', encoding='utf-8')
    monkeypatch.setenv('LOAD_ENV_FILE', str(env_file))

    assert get_settings(ValidatorSettings).LARGE_TIME_GAP_MINUTES == 5


def test_missing_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv('LOAD_ENV_FILE', str(tmp_path / 'absent.env'))

    with pytest.raises(FileNotFoundError):
        get_settings(ValidatorSettings)
