"""
Catalog API Routes.

Admin endpoints for artworks, usages, promotions, reports, artists and
characters. Catalog errors propagate to the handler registered in
``artwork_registry.api``, which maps them to HTTP status codes.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from ..db.audit_service import AuditService
from ..db.base import get_db
from .artist import ArtistCreate, ArtistUpdate
from .artwork import (
    Artwork,
    ArtworkArtistUpdate,
    ArtworkCreate,
    ArtworkNotesUpdate,
    ArtworkUrlUpdate,
)
from .character import CharacterUpsert
from .enums import ActorKind, CharacterType
from .promotion import PromotionRequest
from .services import (
    ArtistService,
    ArtworkStore,
    CharacterService,
    PromotionService,
    UsageIndex,
)
from .usage import UsageCreate
from .views import find_unmatched_links, group_by_character, summarize

router = APIRouter()

API_ACTOR = {"actor_kind": ActorKind.HUMAN.value, "actor_id": "admin-api"}


def _full_artwork_set(db: Session) -> List[Artwork]:
    return [
        Artwork.model_validate(a.to_dict()) for a in ArtworkStore(db, **API_ACTOR).list_all()
    ]


# =============================================================================
# Artwork Endpoints
# =============================================================================


@router.get("/artworks", tags=["artworks"])
async def list_artworks(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """List Artworks, newest first."""
    store = ArtworkStore(db, **API_ACTOR)
    return [a.to_dict() for a in store.list(offset=offset, limit=limit)]


@router.post("/artworks", status_code=201, tags=["artworks"])
async def create_artwork(
    artwork: ArtworkCreate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Register an uploaded artwork. 409 if the URL is already registered."""
    store = ArtworkStore(db, **API_ACTOR)
    db_artwork = store.create(artwork.url, artist_id=artwork.artist_id, notes=artwork.notes)
    return {
        "status": "success",
        "artwork": db_artwork.to_dict(),
    }


@router.get("/artworks/{artwork_id}", tags=["artworks"])
async def get_artwork(
    artwork_id: str,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    store = ArtworkStore(db, **API_ACTOR)
    return store.require(artwork_id).to_dict()


@router.patch("/artworks/{artwork_id}/artist", tags=["artworks"])
async def update_artwork_artist(
    artwork_id: str,
    update: ArtworkArtistUpdate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Set or clear the credited artist."""
    store = ArtworkStore(db, **API_ACTOR)
    artwork = store.update_artist(artwork_id, update.artist_id)
    return {
        "status": "success",
        "artwork": artwork.to_dict(),
    }


@router.patch("/artworks/{artwork_id}/notes", tags=["artworks"])
async def update_artwork_notes(
    artwork_id: str,
    update: ArtworkNotesUpdate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    store = ArtworkStore(db, **API_ACTOR)
    artwork = store.update_notes(artwork_id, update.notes)
    return {
        "status": "success",
        "artwork": artwork.to_dict(),
    }


@router.patch("/artworks/{artwork_id}/url", tags=["artworks"])
async def rename_artwork_url(
    artwork_id: str,
    update: ArtworkUrlUpdate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Move an artwork to a new URL, optionally rewriting character references."""
    store = ArtworkStore(db, **API_ACTOR)
    artwork = store.rename_url(
        artwork_id, update.url, rewrite_characters=update.rewrite_characters
    )
    return {
        "status": "success",
        "artwork": artwork.to_dict(),
    }


@router.delete("/artworks/{artwork_id}", tags=["artworks"])
async def delete_artwork(
    artwork_id: str,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Delete an artwork together with its usages."""
    ArtworkStore(db, **API_ACTOR).delete(artwork_id)
    return {"status": "success", "artwork_id": artwork_id}


# =============================================================================
# Usage Endpoints
# =============================================================================


@router.get("/artworks/{artwork_id}/usages", tags=["usages"])
async def list_artwork_usages(
    artwork_id: str,
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    index = UsageIndex(db, **API_ACTOR)
    return [u.to_dict() for u in index.list_by_artwork(artwork_id)]


@router.post("/artworks/{artwork_id}/usages", status_code=201, tags=["usages"])
async def assign_artwork(
    artwork_id: str,
    usage: UsageCreate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Assign an artwork to a character slot (idempotent)."""
    index = UsageIndex(db, **API_ACTOR)
    db_usage = index.assign(
        artwork_id,
        usage.character_type,
        usage.character_id,
        usage.slot,
        display_order=usage.display_order,
        replace=usage.replace,
    )
    return {
        "status": "success",
        "usage": db_usage.to_dict(),
    }


@router.delete("/artworks/{artwork_id}/usages/{usage_key}", tags=["usages"])
async def unassign_artwork(
    artwork_id: str,
    usage_key: str,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Remove a usage by its '<character_id>-<character_type>-<slot>' key."""
    removed = UsageIndex(db, **API_ACTOR).remove_by_key(artwork_id, usage_key)
    return {"status": "success", "removed": removed}


@router.delete("/usages/{usage_id}", tags=["usages"])
async def delete_usage(
    usage_id: str,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    UsageIndex(db, **API_ACTOR).remove(usage_id)
    return {"status": "success", "usage_id": usage_id}


# =============================================================================
# Promotion Endpoints
# =============================================================================


@router.post("/promotions", tags=["promotions"])
async def promote_url(
    request: PromotionRequest,
    detach: bool = Query(False, description="Remove the URL from the character afterwards"),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Promote one character-embedded URL."""
    service = PromotionService(db, **API_ACTOR)
    artwork_id = service.promote(
        request.url,
        request.character_type,
        request.character_id,
        request.slot,
        artist_id=request.artist_id,
        display_order=request.display_order,
        detach=detach,
    )
    return {"status": "success", "artwork_id": artwork_id}


@router.post("/promotions/batch", tags=["promotions"])
async def promote_batch(
    entries: List[Any] = Body(..., description="Promotion entries; malformed ones fail individually"),
    detach: bool = Query(False),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Promote many URLs. Always 200; failures are reported per entry."""
    report = PromotionService(db, **API_ACTOR).promote_batch(entries, detach=detach)
    return report.to_dict()


@router.post("/promotions/unmatched", tags=["promotions"])
async def promote_unmatched(
    character_type: Optional[CharacterType] = None,
    artist_id: Optional[str] = None,
    detach: bool = Query(False),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Promote every unmatched link found on character records."""
    report = PromotionService(db, **API_ACTOR).promote_unmatched(
        character_type=character_type, artist_id=artist_id, detach=detach
    )
    return report.to_dict()


# =============================================================================
# Report Endpoints
# =============================================================================


@router.get("/reports/by-character", tags=["reports"])
async def report_by_character(
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Artworks grouped by character; artworks with no usage last."""
    groups = group_by_character(_full_artwork_set(db))
    ordered = sorted(groups.items(), key=lambda item: item[0].is_unassigned)
    return [
        {
            "character_type": key.character_type.value if key.character_type else None,
            "character_id": key.character_id,
            "unassigned": key.is_unassigned,
            "artworks": [a.model_dump(mode="json") for a in artworks],
        }
        for key, artworks in ordered
    ]


@router.get("/reports/unmatched-links", tags=["reports"])
async def report_unmatched_links(
    character_type: Optional[CharacterType] = None,
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    links = find_unmatched_links(
        CharacterService(db, **API_ACTOR).list_read_models(character_type),
        ArtworkStore(db, **API_ACTOR).known_urls(),
    )
    return [link.model_dump(mode="json") for link in links]


@router.get("/reports/summary", tags=["reports"])
async def report_summary(db: Session = Depends(get_db)) -> Dict[str, Any]:
    return summarize(_full_artwork_set(db))


# =============================================================================
# Artist Endpoints
# =============================================================================


@router.get("/artists", tags=["artists"])
async def list_artists(db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    return [a.to_dict() for a in ArtistService(db, **API_ACTOR).list()]


@router.post("/artists", status_code=201, tags=["artists"])
async def create_artist(
    artist: ArtistCreate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    db_artist = ArtistService(db, **API_ACTOR).create(artist)
    return {"status": "success", "artist": db_artist.to_dict()}


@router.get("/artists/{artist_id}", tags=["artists"])
async def get_artist(artist_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    return ArtistService(db, **API_ACTOR).require(artist_id).to_dict()


@router.patch("/artists/{artist_id}", tags=["artists"])
async def update_artist(
    artist_id: str,
    changes: ArtistUpdate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    db_artist = ArtistService(db, **API_ACTOR).update(artist_id, changes)
    return {"status": "success", "artist": db_artist.to_dict()}


@router.delete("/artists/{artist_id}", tags=["artists"])
async def delete_artist(artist_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Delete an artist; their artworks stay, unattributed."""
    detached = ArtistService(db, **API_ACTOR).delete(artist_id)
    return {"status": "success", "artist_id": artist_id, "artworks_unattributed": detached}


# =============================================================================
# Character Endpoints
# =============================================================================


@router.get("/characters", tags=["characters"])
async def list_characters(
    character_type: Optional[CharacterType] = None,
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return [c.to_dict() for c in CharacterService(db, **API_ACTOR).list(character_type)]


@router.get("/characters/{character_type}/{character_id}", tags=["characters"])
async def get_character(
    character_type: CharacterType,
    character_id: str,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    return CharacterService(db, **API_ACTOR).require(character_type, character_id).to_dict()


@router.put("/characters/{character_type}/{character_id}", tags=["characters"])
async def upsert_character(
    character_type: CharacterType,
    character_id: str,
    data: CharacterUpsert,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    character = CharacterService(db, **API_ACTOR).upsert(character_type, character_id, data)
    return {"status": "success", "character": character.to_dict()}


@router.get("/characters/{character_type}/{character_id}/artworks", tags=["characters"])
async def list_character_artworks(
    character_type: CharacterType,
    character_id: str,
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Usages on a character, each with its artwork URL."""
    usages = UsageIndex(db, **API_ACTOR).list_by_character(character_type, character_id)
    return [{**u.to_dict(), "artwork_url": u.artwork.url} for u in usages]


# =============================================================================
# Audit Endpoints
# =============================================================================


@router.get("/artworks/{artwork_id}/history", tags=["audit"])
async def artwork_history(
    artwork_id: str,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Audit entries for one artwork, newest first. Kept after deletion."""
    entries = AuditService(db).query_by_entity("Artwork", artwork_id, limit=limit, offset=offset)
    return [e.to_dict() for e in entries]


@router.get("/audit", tags=["audit"])
async def recent_audit(
    entity_kind: Optional[str] = Query(None, description="Artwork, Artist or Character"),
    limit: int = Query(50, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return [e.to_dict() for e in AuditService(db).query_recent(limit=limit, entity_kind=entity_kind)]
