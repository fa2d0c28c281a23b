"""
Artwork Registry SQLAlchemy Database Models.

- One row per distinct artwork URL (unique constraint is the dedup key)
- Usages are a join table keyed by (artwork, character type, character id, slot)
- Characters keep their embedded image fields; list fields stored as JSON
"""

from typing import Any, Dict, List

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..catalog.primitives import format_usage_key
from .base import Base


# =============================================================================
# Enums as Database Enums
# =============================================================================

# These mirror artwork_registry/catalog/enums.py
character_type_enum = Enum("killer", "survivor", name="character_type")

slot_name_enum = Enum(
    "portrait",
    "background",
    "primary_header",
    "gallery_list",
    "legacy_header",
    name="slot_name",
)

artist_platform_enum = Enum(
    "twitter", "instagram", "youtube", name="artist_platform"
)


def _iso(value) -> Any:
    return value.isoformat() if value else None


# =============================================================================
# Models
# =============================================================================


class ArtistModel(Base):
    """An artist credited for artworks."""

    __tablename__ = "artists"

    id = Column(String(128), primary_key=True)
    name = Column(String(256), nullable=False, index=True)
    platform = Column(artist_platform_enum, nullable=False)
    url = Column(String(2000), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    artworks = relationship("ArtworkModel", back_populates="artist")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "platform": self.platform,
            "url": self.url,
            "created_at": _iso(self.created_at),
        }


class ArtworkModel(Base):
    """One distinct visual asset, identified by its canonical URL."""

    __tablename__ = "artworks"

    id = Column(String(128), primary_key=True)
    url = Column(String(2000), nullable=False)
    artist_id = Column(
        String(128),
        ForeignKey("artists.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=func.now(),
        onupdate=func.now(),
    )

    artist = relationship("ArtistModel", back_populates="artworks")
    usages = relationship(
        "UsageModel",
        back_populates="artwork",
        cascade="all, delete-orphan",
        order_by="UsageModel.created_at",
    )

    __table_args__ = (
        UniqueConstraint("url", name="uq_artworks_url"),
        Index("ix_artworks_created_at", "created_at"),
    )

    def to_dict(self, include_usages: bool = True) -> Dict[str, Any]:
        """Convert model to dictionary matching the Artwork read schema."""
        data: Dict[str, Any] = {
            "id": self.id,
            "url": self.url,
            "artist_id": self.artist_id,
            "notes": self.notes,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
        if include_usages:
            data["usages"] = [u.to_dict() for u in self.usages]
        return data


class UsageModel(Base):
    """One placement of an artwork on one character slot."""

    __tablename__ = "artwork_usages"

    id = Column(String(128), primary_key=True)
    artwork_id = Column(
        String(128),
        ForeignKey("artworks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    character_type = Column(character_type_enum, nullable=False)
    character_id = Column(String(128), nullable=False)
    slot = Column(slot_name_enum, nullable=False)
    display_order = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=func.now())

    artwork = relationship("ArtworkModel", back_populates="usages")

    __table_args__ = (
        UniqueConstraint(
            "artwork_id",
            "character_type",
            "character_id",
            "slot",
            name="uq_artwork_usages_natural_key",
        ),
        Index("ix_artwork_usages_character", "character_type", "character_id"),
    )

    @property
    def key(self) -> str:
        return format_usage_key(self.character_id, self.character_type, self.slot)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "artwork_id": self.artwork_id,
            "character_type": self.character_type,
            "character_id": self.character_id,
            "slot": self.slot,
            "display_order": self.display_order,
            "created_at": _iso(self.created_at),
        }


class CharacterModel(Base):
    """A killer or survivor with its directly embedded image fields.

    Owned by the site's character admin; the catalog reads it and only
    writes when cleaning up or rewriting promoted URLs.
    """

    __tablename__ = "characters"

    character_type = Column(character_type_enum, primary_key=True)
    id = Column(String(128), primary_key=True)
    name = Column(String(256), nullable=True)
    order = Column(Integer, nullable=True)

    image_url = Column(String(2000), nullable=True)
    background_image_url = Column(String(2000), nullable=True)
    header_url = Column(String(2000), nullable=True)
    artist_urls = Column(JSON, nullable=False, default=list)
    legacy_header_urls = Column(JSON, nullable=False, default=list)

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=func.now(),
        onupdate=func.now(),
    )

    def to_dict(self) -> Dict[str, Any]:
        artist_urls: List[str] = list(self.artist_urls or [])
        legacy_header_urls: List[str] = list(self.legacy_header_urls or [])
        return {
            "id": self.id,
            "character_type": self.character_type,
            "name": self.name,
            "order": self.order,
            "image_url": self.image_url,
            "background_image_url": self.background_image_url,
            "header_url": self.header_url,
            "artist_urls": artist_urls,
            "legacy_header_urls": legacy_header_urls,
            "updated_at": _iso(self.updated_at),
        }
