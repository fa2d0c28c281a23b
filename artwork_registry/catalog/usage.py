"""
Usage Schema.

Represents one placement of an Artwork on one character slot.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, constr

from .enums import CharacterType, SlotName


class Usage(BaseModel):
    """A normalised (Artwork, Character, Slot) association.

    Invariants:
    - At most one Usage per (artwork_id, character_type, character_id, slot).
    - A Usage never outlives its Artwork.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    key: Optional[str] = Field(
        None, description="Composite key '<character_id>-<character_type>-<slot>'"
    )
    artwork_id: str
    character_type: CharacterType
    character_id: str
    slot: SlotName
    display_order: Optional[int] = None
    created_at: Optional[datetime] = None


class UsageCreate(BaseModel):
    """Schema for assigning an artwork to a character slot."""

    model_config = ConfigDict(extra="forbid")

    character_type: CharacterType
    character_id: constr(min_length=1, max_length=128)
    slot: SlotName
    display_order: Optional[int] = Field(None, ge=0)
    replace: bool = Field(
        True,
        description="For single-valued slots, drop other artworks in the same slot",
    )
