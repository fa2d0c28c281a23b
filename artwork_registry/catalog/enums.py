"""
Canonical enums for the artwork catalog.

Database enum columns in ``artwork_registry.db.models`` mirror these values.
"""

from enum import Enum


class CharacterType(str, Enum):
    """The two character categories tracked by the site."""

    KILLER = "killer"
    SURVIVOR = "survivor"


class SlotName(str, Enum):
    """Named placements of an image on a character."""

    PORTRAIT = "portrait"
    BACKGROUND = "background"
    PRIMARY_HEADER = "primary_header"
    GALLERY_LIST = "gallery_list"
    LEGACY_HEADER = "legacy_header"


class ArtistPlatform(str, Enum):
    """Social platforms an artist can be credited on."""

    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    YOUTUBE = "youtube"


class ActorKind(str, Enum):
    """Who performed a mutating operation."""

    HUMAN = "human"
    SYSTEM = "system"
