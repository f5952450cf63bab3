"""Parsing helpers for command-line style inputs."""

from __future__ import annotations

import re

from ..core.exceptions import ValidationError

ENTITY_ID_RE = re.compile(r"^\d+\.\d+\.\d+$")


def validate_entity_id(value: str) -> str:
    """Check a ``shard.realm.num`` id such as ``0.0.1234``."""
    value = value.strip()
    if not ENTITY_ID_RE.match(value):
        raise ValidationError(f"Invalid entity id: {value!r} (expected shard.realm.num)")
    return value


def parse_accounts(value: str | None) -> list[str]:
    """Parse a comma separated list of entity ids."""
    if not value:
        return []
    return [validate_entity_id(part) for part in value.split(",") if part.strip()]


def parse_serials(value: str | None) -> list[int]:
    """Parse ``7``, ``2,5,10`` or an inclusive range ``1-10`` into serial numbers."""
    if not value:
        return []
    value = value.strip()
    try:
        if "-" in value:
            low, high = (int(part) for part in value.split("-", 1))
            if low > high:
                raise ValidationError(f"Serial range is reversed: {value!r}")
            serials = list(range(low, high + 1))
        else:
            serials = [int(part) for part in value.split(",") if part.strip()]
    except ValueError as e:
        raise ValidationError(f"Invalid serial list: {value!r}") from e
    if any(serial < 1 for serial in serials):
        raise ValidationError(f"Serial numbers start at 1: {value!r}")
    return serials
