"""
Common primitives for the artwork catalog.

Identifier generation, timestamps, and the input coercions every service runs
before touching the store.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Tuple, Union

from ulid import ULID

from .enums import CharacterType, SlotName
from .errors import ValidationError

MAX_URL_LENGTH = 2000


def generate_ulid() -> str:
    """Generate a ULID for object IDs.

    ULIDs are lexicographically sortable and globally unique.
    """
    return str(ULID())


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def require_url(value: Any, field: str = "url") -> str:
    """Return the stripped URL or raise ValidationError."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "must be a non-empty string")
    url = value.strip()
    if len(url) > MAX_URL_LENGTH:
        raise ValidationError(field, f"must be at most {MAX_URL_LENGTH} characters")
    return url


def require_id(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "must be a non-empty string")
    return value.strip()


def coerce_character_type(value: Union[CharacterType, str, None]) -> CharacterType:
    try:
        return CharacterType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in CharacterType)
        raise ValidationError(
            "character_type", f"unrecognized value {value!r} (expected one of: {allowed})"
        ) from None


def coerce_slot(value: Union[SlotName, str, None]) -> SlotName:
    try:
        return SlotName(value)
    except ValueError:
        allowed = ", ".join(s.value for s in SlotName)
        raise ValidationError(
            "slot", f"unrecognized value {value!r} (expected one of: {allowed})"
        ) from None


def coerce_display_order(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("display_order", "must be an integer")
    if value < 0:
        raise ValidationError("display_order", "must be >= 0")
    return value


def format_usage_key(
    character_id: str, character_type: Union[CharacterType, str], slot: Union[SlotName, str]
) -> str:
    """Render the composite key the admin dashboard uses for a usage."""
    return f"{character_id}-{CharacterType(character_type).value}-{SlotName(slot).value}"


def parse_usage_key(key: str) -> Tuple[str, CharacterType, SlotName]:
    """Split ``<character_id>-<character_type>-<slot>``.

    Split from the right: type and slot values never contain '-', character
    ids may.
    """
    parts = key.rsplit("-", 2) if isinstance(key, str) else []
    if len(parts) != 3 or not all(parts):
        raise ValidationError(
            "usage_key", f"expected '<character_id>-<character_type>-<slot>', got {key!r}"
        )
    character_id, character_type, slot = parts
    return character_id, coerce_character_type(character_type), coerce_slot(slot)
