#!/usr/bin/env python3
"""
Utility functions for LifeMetrics.

This module provides the value coercion helpers shared by the filter engine,
the search and sort stages and the CLI: string coercion of record values,
lenient number and date parsing, and logging setup.
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Optional

from dateutil import parser as date_parser


def coerce_text(value: Any) -> str:
    """
    Coerce a record value to the string form used for comparisons.

    None becomes an empty string, booleans become ``"true"``/``"false"``,
    integral floats drop their fractional part and lists are joined with
    commas, so that ``5``, ``5.0`` and ``"5"`` all compare equal.

    Args:
        value: Any record or filter value

    Returns:
        str: Comparison text for the value

    Examples:
        >>> coerce_text(None)
        ''
        >>> coerce_text(True)
        'true'
        >>> coerce_text(3.0)
        '3'
        >>> coerce_text(['a', 'b'])
        'a,b'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(coerce_text(item) for item in value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # past the interpreter's digit limit for decimal conversion
            return format(value, "#x")
    return str(value)


def to_number(value: Any) -> Optional[float]:
    """
    Convert a value to a float for numeric comparison.

    Numbers and numeric strings are accepted. Booleans, NaN, integers too large
    for a float, empty strings and anything unparsable yield None so that
    callers can fail closed.

    Args:
        value: Value to convert

    Returns:
        Optional[float]: Parsed number or None
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number):
        return None
    return number


def ensure_aware(moment: datetime) -> datetime:
    """Attach UTC to a naive datetime, leaving aware ones untouched."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def parse_date(value: Any, default: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a date value from various input formats.

    Accepts ``datetime`` and ``date`` objects, ISO 8601 strings and the other
    formats understood by ``dateutil``. Naive results are treated as UTC.
    Parts missing from a free-form string (``"10:00"``, ``"June 20"``) are
    taken from the day of ``default``.

    Args:
        value: Date in string, datetime, date or None
        default: Reference time for missing date parts (defaults to now, UTC)

    Returns:
        Optional[datetime]: Timezone-aware datetime or None if unparsable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return ensure_aware(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return ensure_aware(date_parser.isoparse(value.strip()))
        except (ValueError, OverflowError):
            pass
        reference = ensure_aware(default or utc_now()).astimezone(timezone.utc)
        base = reference.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
        try:
            return ensure_aware(date_parser.parse(value, default=base))
        except (ValueError, OverflowError, TypeError):
            return None

    return None


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """
    Set up logging configuration for the application.

    Args:
        verbose: Log at INFO level instead of WARNING
        debug: Log at DEBUG level (takes precedence over verbose)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
