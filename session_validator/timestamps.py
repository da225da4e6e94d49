"""
RFC 3339 timestamp parsing.

One explicit grammar instead of a locale-sensitive parser:

    YYYY-MM-DDTHH:MM:SS[.fraction](Z|+HH:MM|-HH:MM)

The separator is 'T' (or 't'), the offset is mandatory. Fractions longer than
microsecond precision are truncated.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from session_validator.exceptions import TimestampFormatError, TimestampRangeError

_RFC3339 = re.compile(
    r'^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})'
    r'[Tt](?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})'
    r'(?:\.(?P<fraction>\d+))?'
    r'(?P<offset>[Zz]|[+-]\d{2}:\d{2})$'
)


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime.

    Raises:
        TimestampFormatError: value does not match the grammar
        TimestampRangeError: a component is out of range (month 13, Feb 30, offset >= 24h)
    """
    match = _RFC3339.match(value)
    if match is None:
        raise TimestampFormatError(value, 'expected RFC 3339 (YYYY-MM-DDTHH:MM:SS[.fff]Z or offset)')

    offset = match['offset']
    fraction = (match['fraction'] or '')[:6].ljust(6, '0')
    try:
        if offset in ('Z', 'z'):
            tz = timezone.utc
        else:
            sign = -1 if offset[0] == '-' else 1
            tz = timezone(sign * timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6])))
        return datetime(
            int(match['year']),
            int(match['month']),
            int(match['day']),
            int(match['hour']),
            int(match['minute']),
            int(match['second']),
            int(fraction),
            tzinfo=tz,
        )
    except ValueError as e:
        raise TimestampRangeError(value, str(e)) from e


def try_parse_timestamp(value: str) -> datetime | None:
    """Parse a timestamp, returning None when it cannot be parsed."""
    try:
        return parse_timestamp(value)
    except (TimestampFormatError, TimestampRangeError):
        return None


def to_milliseconds(delta: timedelta) -> int:
    """Whole milliseconds in a time span (floored)."""
    return delta // timedelta(milliseconds=1)
