"""
Database package for Artwork Registry.
"""

from .base import Base, create_tables, get_db, get_engine, get_session_local
from .models import ArtistModel, ArtworkModel, CharacterModel, UsageModel

__all__ = [
    "Base",
    "create_tables",
    "get_db",
    "get_engine",
    "get_session_local",
    "ArtistModel",
    "ArtworkModel",
    "CharacterModel",
    "UsageModel",
]
