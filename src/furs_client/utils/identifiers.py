"""
Identifier and date helpers for FURS messages

FURS headers carry an uppercase UUID message id and a UTC timestamp
without fractional seconds. ZOI input uses a space-separated UTC
timestamp.
"""

import random
import string
import time
import uuid
from datetime import datetime, timezone
from typing import Optional, Union


BASE36_ALPHABET = string.digits + string.ascii_uppercase

DateInput = Union[datetime, str]


def parse_datetime(value: DateInput) -> datetime:
    """
    Coerce a datetime or ISO-8601 string into a datetime

    A trailing ``Z`` is read as UTC. Strings without an offset give a
    naive datetime, which callers treat as local wall-clock time.

    Raises:
        ValueError: If the string is not ISO-8601
    """
    if isinstance(value, datetime):
        return value

    if not isinstance(value, str):
        raise ValueError(f"Unsupported date value: {value!r}")

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"

    return datetime.fromisoformat(text)


def _to_utc(value: DateInput) -> datetime:
    # Naive values are local time; astimezone() interprets them that way.
    return parse_datetime(value).astimezone(timezone.utc)


def generate_message_id() -> str:
    """Generate a FURS message id (uppercase UUID4)"""
    return str(uuid.uuid4()).upper()


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"

    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_id(prefix: str = "") -> str:
    """
    Generate a short identifier for premises and invoice numbers

    The id is ``prefix`` followed by the last four base36 digits of the
    current millisecond timestamp and four random base36 characters.

    Example:
        >>> generate_id("BP")
        'BP3K9QX7A2'
    """
    timestamp = _to_base36(int(time.time() * 1000))
    suffix = "".join(random.choices(BASE36_ALPHABET, k=4))
    return f"{prefix}{timestamp[-4:]}{suffix}"


def format_date_for_furs(value: Optional[DateInput] = None) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC (defaults to now)"""
    moment = datetime.now(timezone.utc) if value is None else _to_utc(value)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_datetime_for_zoi(value: DateInput) -> str:
    """Format a datetime as ``YYYY-MM-DD HH:MM:SS`` in UTC"""
    return _to_utc(value).strftime("%Y-%m-%d %H:%M:%S")


def format_issue_date_time(value: DateInput) -> str:
    """
    Format an invoice issue timestamp as local ``YYYY-MM-DDTHH:MM:SS``

    Naive values are already local wall-clock time. Aware values are
    converted to the process's local timezone.
    """
    moment = parse_datetime(value)
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime("%Y-%m-%dT%H:%M:%S")
