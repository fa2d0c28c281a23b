"""
Artwork Registry

Artwork and usage catalog for a fan-made character gallery: one record per
distinct image URL, usages per character slot, and promotion of URLs still
embedded directly on character records.
"""

import importlib.metadata

__version__ = importlib.metadata.version("artwork-registry")

from .catalog import (
    CharacterType,
    ConflictError,
    NotFoundError,
    SlotName,
    StorageUnavailableError,
    ValidationError,
)

__all__ = [
    "CharacterType",
    "ConflictError",
    "NotFoundError",
    "SlotName",
    "StorageUnavailableError",
    "ValidationError",
]
