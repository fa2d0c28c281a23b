"""
Promotion Schemas.

A promotion registers a URL embedded on a character record as an Artwork and
records the matching Usage.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import CharacterType, SlotName


class PromotionRequest(BaseModel):
    """One URL to promote.

    ``url`` is checked by the promotion service, not here; an empty URL in a
    batch becomes a ``VALIDATION_ERROR`` outcome for that entry.
    """

    model_config = ConfigDict(extra="forbid")

    url: str
    character_type: CharacterType
    character_id: str
    slot: SlotName
    artist_id: Optional[str] = None
    display_order: Optional[int] = None


class PromotionOutcome(BaseModel):
    """Result of one entry of a batch promotion."""

    index: int
    ok: bool
    artwork_id: Optional[str] = None
    url: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


class BatchReport(BaseModel):
    """Aggregated batch promotion result. Never raised, always returned."""

    outcomes: List[PromotionOutcome] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def failures(self) -> List[PromotionOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "outcomes": [o.model_dump() for o in self.outcomes],
        }


class UnmatchedLink(BaseModel):
    """A character-embedded URL with no Artwork row yet."""

    model_config = ConfigDict(frozen=True)

    url: str
    character_type: CharacterType
    character_id: str
    character_name: Optional[str] = None
    field: str
    slot: SlotName
    display_order: Optional[int] = None

    def to_request(self, artist_id: Optional[str] = None) -> PromotionRequest:
        return PromotionRequest(
            url=self.url,
            character_type=self.character_type,
            character_id=self.character_id,
            slot=self.slot,
            artist_id=artist_id,
            display_order=self.display_order,
        )
