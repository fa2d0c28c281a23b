"""
Artwork catalog: schemas, enums, errors and read-side views.

The database-backed services live in ``artwork_registry.catalog.services``
and the HTTP routes in ``artwork_registry.catalog.routes``.
"""

from .enums import ActorKind, ArtistPlatform, CharacterType, SlotName
from .errors import (
    ArtworkRegistryError,
    ConflictError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from .primitives import (
    format_usage_key,
    generate_ulid,
    parse_usage_key,
    utc_now,
)
from .artist import Artist, ArtistCreate, ArtistUpdate
from .usage import Usage, UsageCreate
from .artwork import (
    Artwork,
    ArtworkArtistUpdate,
    ArtworkCreate,
    ArtworkNotesUpdate,
    ArtworkUrlUpdate,
)
from .character import (
    SINGLE_VALUED_SLOTS,
    SLOT_FIELDS,
    Character,
    CharacterUpsert,
    SlotField,
    field_slot,
    slot_field,
)
from .promotion import BatchReport, PromotionOutcome, PromotionRequest, UnmatchedLink
from .views import (
    UNASSIGNED,
    CharacterKey,
    find_unmatched_links,
    group_by_character,
    summarize,
)

__all__ = [
    # Enums
    "ActorKind",
    "ArtistPlatform",
    "CharacterType",
    "SlotName",
    # Errors
    "ArtworkRegistryError",
    "ConflictError",
    "NotFoundError",
    "StorageUnavailableError",
    "ValidationError",
    # Primitives
    "format_usage_key",
    "generate_ulid",
    "parse_usage_key",
    "utc_now",
    # Schemas
    "Artist",
    "ArtistCreate",
    "ArtistUpdate",
    "Artwork",
    "ArtworkArtistUpdate",
    "ArtworkCreate",
    "ArtworkNotesUpdate",
    "ArtworkUrlUpdate",
    "Character",
    "CharacterUpsert",
    "Usage",
    "UsageCreate",
    "BatchReport",
    "PromotionOutcome",
    "PromotionRequest",
    "UnmatchedLink",
    # Slot table
    "SINGLE_VALUED_SLOTS",
    "SLOT_FIELDS",
    "SlotField",
    "field_slot",
    "slot_field",
    # Views
    "UNASSIGNED",
    "CharacterKey",
    "find_unmatched_links",
    "group_by_character",
    "summarize",
]
