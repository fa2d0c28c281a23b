"""
Artwork Schema.

Represents one distinct visual asset by its canonical URL.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, constr

from .usage import Usage


class Artwork(BaseModel):
    """A registered artwork and its usages.

    Invariants:
    - No two Artworks share the same url.
    - Deleting an Artwork deletes its usages.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    url: str
    artist_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    usages: List[Usage] = Field(default_factory=list)


class ArtworkCreate(BaseModel):
    """Schema for registering an uploaded artwork."""

    model_config = ConfigDict(extra="forbid")

    url: constr(min_length=1, max_length=2000)
    artist_id: Optional[constr(min_length=1, max_length=128)] = None
    notes: Optional[constr(max_length=4000)] = None


class ArtworkArtistUpdate(BaseModel):
    """Set or clear the artist credited for an artwork."""

    model_config = ConfigDict(extra="forbid")

    artist_id: Optional[constr(min_length=1, max_length=128)] = None


class ArtworkNotesUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    notes: Optional[constr(max_length=4000)] = None


class ArtworkUrlUpdate(BaseModel):
    """Move an artwork to a new canonical URL (e.g. after a storage rename)."""

    model_config = ConfigDict(extra="forbid")

    url: constr(min_length=1, max_length=2000)
    rewrite_characters: bool = Field(
        False, description="Also replace the old URL on every character record"
    )
