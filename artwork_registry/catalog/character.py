"""
Character Schema and the slot/field table.

Characters are owned by the site's character admin. The catalog only needs
their identity and the image-bearing fields, which ``SLOT_FIELDS`` declares
once for every consumer (unmatched-link detection, promotion cleanup, URL
rewriting).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, constr

from .enums import CharacterType, SlotName


class Character(BaseModel):
    """Read model of a killer or survivor."""

    model_config = ConfigDict(extra="ignore")

    id: str
    character_type: CharacterType
    name: Optional[str] = None
    order: Optional[int] = None

    image_url: Optional[str] = None
    background_image_url: Optional[str] = None
    header_url: Optional[str] = None
    artist_urls: List[str] = Field(default_factory=list)
    legacy_header_urls: List[str] = Field(default_factory=list)

    updated_at: Optional[datetime] = None


class CharacterUpsert(BaseModel):
    """Full replacement of a character's embedded fields."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[constr(max_length=256)] = None
    order: Optional[int] = None
    image_url: Optional[constr(max_length=2000)] = None
    background_image_url: Optional[constr(max_length=2000)] = None
    header_url: Optional[constr(max_length=2000)] = None
    artist_urls: List[constr(min_length=1, max_length=2000)] = Field(default_factory=list)
    legacy_header_urls: List[constr(min_length=1, max_length=2000)] = Field(
        default_factory=list
    )


class SlotField(NamedTuple):
    """Binds a slot to the character field that embeds its URLs."""

    slot: SlotName
    field: str
    multiple: bool

    def urls(self, character: Any) -> List[str]:
        """Non-blank URLs held by ``character`` in this field, in order.

        Works on the pydantic ``Character`` and on ``CharacterModel`` rows.
        """
        value = getattr(character, self.field, None)
        if value is None:
            return []
        values = list(value) if self.multiple else [value]
        return [v.strip() for v in values if isinstance(v, str) and v.strip()]


# Enumeration order here is the field order of unmatched-link reports.
SLOT_FIELDS: tuple = (
    SlotField(SlotName.PORTRAIT, "image_url", multiple=False),
    SlotField(SlotName.BACKGROUND, "background_image_url", multiple=False),
    SlotField(SlotName.PRIMARY_HEADER, "header_url", multiple=False),
    SlotField(SlotName.GALLERY_LIST, "artist_urls", multiple=True),
    SlotField(SlotName.LEGACY_HEADER, "legacy_header_urls", multiple=True),
)

_BY_SLOT: Dict[SlotName, SlotField] = {sf.slot: sf for sf in SLOT_FIELDS}
_BY_FIELD: Dict[str, SlotField] = {sf.field: sf for sf in SLOT_FIELDS}

SINGLE_VALUED_SLOTS = frozenset(sf.slot for sf in SLOT_FIELDS if not sf.multiple)


def same_url(value: Any, url: str) -> bool:
    """Compare a stored field value to a stripped URL, ignoring padding."""
    return isinstance(value, str) and value.strip() == url


def slot_field(slot: SlotName) -> SlotField:
    return _BY_SLOT[SlotName(slot)]


def field_slot(field: str) -> Optional[SlotField]:
    return _BY_FIELD.get(field)
