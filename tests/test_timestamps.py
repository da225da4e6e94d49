"""
Tests for RFC 3339 timestamp parsing.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from session_validator.exceptions import TimestampError, TimestampFormatError, TimestampRangeError
from session_validator.timestamps import parse_timestamp, to_milliseconds, try_parse_timestamp


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('2026-01-20T10:00:00Z', datetime(2026, 1, 20, 10, 0, 0, tzinfo=UTC)),
        ('2026-01-20T10:00:00.123Z', datetime(2026, 1, 20, 10, 0, 0, 123000, tzinfo=UTC)),
        ('2026-01-20t10:00:00z', datetime(2026, 1, 20, 10, 0, 0, tzinfo=UTC)),
        ('2026-01-20T12:30:00+02:30', datetime(2026, 1, 20, 10, 0, 0, tzinfo=UTC)),
        ('2026-01-20T05:00:00-05:00', datetime(2026, 1, 20, 10, 0, 0, tzinfo=UTC)),
        ('2026-01-20T10:00:00.123456789Z', datetime(2026, 1, 20, 10, 0, 0, 123456, tzinfo=UTC)),
        ('2024-02-29T00:00:00Z', datetime(2024, 2, 29, tzinfo=UTC)),
    ],
)
def test_parse_valid(value: str, expected: datetime) -> None:
    assert parse_timestamp(value) == expected


@pytest.mark.parametrize(
    'value',
    [
        'not-a-timestamp',
        '',
        '2026-01-20',
        '2026-01-20 10:00:00Z',
        '2026-01-20T10:00:00',
        '2026-01-20T10:00Z',
        '2026-1-20T10:00:00Z',
        '2026-01-20T10:00:00.Z',
        '2026-01-20T10:00:00+0200',
        ' 2026-01-20T10:00:00Z',
    ],
)
def test_grammar_mismatch(value: str) -> None:
    with pytest.raises(TimestampFormatError) as exc_info:
        parse_timestamp(value)

    assert exc_info.value.value == value


@pytest.mark.parametrize(
    'value',
    [
        '2026-13-01T00:00:00Z',
        '2026-02-30T00:00:00Z',
        '2025-02-29T00:00:00Z',
        '2026-01-20T24:00:00Z',
        '2026-01-20T10:60:00Z',
        '2026-01-20T10:00:00+24:00',
    ],
)
def test_calendar_out_of_range(value: str) -> None:
    with pytest.raises(TimestampRangeError):
        parse_timestamp(value)


def test_errors_share_base() -> None:
    assert issubclass(TimestampFormatError, TimestampError)
    assert issubclass(TimestampRangeError, TimestampError)


def test_try_parse() -> None:
    assert try_parse_timestamp('2026-01-20T10:00:00Z') == datetime(2026, 1, 20, 10, tzinfo=UTC)
    assert try_parse_timestamp('2026-02-30T00:00:00Z') is None
    assert try_parse_timestamp('soon') is None


def test_to_milliseconds() -> None:
    assert to_milliseconds(timedelta(seconds=10, milliseconds=250)) == 10_250
    assert to_milliseconds(timedelta(microseconds=1999)) == 1
    assert to_milliseconds(timedelta(seconds=-1)) == -1000
