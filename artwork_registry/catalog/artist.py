"""
Artist Schema.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, constr

from .enums import ArtistPlatform


class Artist(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    platform: ArtistPlatform
    url: str
    created_at: Optional[datetime] = None


class ArtistCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: constr(min_length=1, max_length=256)
    platform: ArtistPlatform
    url: constr(min_length=1, max_length=2000)


class ArtistUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[constr(min_length=1, max_length=256)] = None
    platform: Optional[ArtistPlatform] = None
    url: Optional[constr(min_length=1, max_length=2000)] = None
