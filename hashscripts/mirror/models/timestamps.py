"""Consensus timestamp helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any


def parse_consensus_timestamp(value: Any) -> datetime | None:
    """Parse a ``seconds.nanoseconds`` consensus timestamp into an aware UTC datetime.

    Datetimes pass through; None and empty strings give None. Precision below
    a microsecond is truncated.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        exact = Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid consensus timestamp: {value!r}") from e
    seconds = int(exact)
    nanos = int((exact - seconds) * 1_000_000_000)
    return datetime.fromtimestamp(seconds, UTC) + timedelta(microseconds=nanos // 1000)


def to_consensus_timestamp(moment: datetime) -> str:
    """Format a datetime in the ``seconds.nanoseconds`` form the mirror node accepts."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    delta = moment - datetime(1970, 1, 1, tzinfo=UTC)
    seconds = delta.days * 86400 + delta.seconds
    return f"{seconds}.{delta.microseconds * 1000:09d}"
