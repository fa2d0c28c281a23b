"""
Catalog Service Layer.

Database operations for artworks, usages, artists and characters, plus the
promotion of character-embedded URLs into the normalised model.

Every service receives its ``Session`` from the caller. Each operation
commits or rolls back before it returns. Uniqueness is enforced by database
constraints; an ``IntegrityError`` becomes ``ConflictError`` after rollback,
any other driver error becomes ``StorageUnavailableError``.

Audit logging is integrated into all state-changing operations.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Set, Union

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import desc
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..db.audit_service import AuditService
from ..db.models import ArtistModel, ArtworkModel, CharacterModel, UsageModel
from .artist import ArtistCreate, ArtistUpdate
from .character import (
    SINGLE_VALUED_SLOTS,
    SLOT_FIELDS,
    Character,
    CharacterUpsert,
    same_url,
    slot_field,
)
from .enums import ActorKind, CharacterType, SlotName
from .errors import (
    ArtworkRegistryError,
    ConflictError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from .primitives import (
    coerce_character_type,
    coerce_display_order,
    coerce_slot,
    generate_ulid,
    parse_usage_key,
    require_id,
    require_url,
    utc_now,
)
from .promotion import BatchReport, PromotionOutcome, PromotionRequest
from .views import find_unmatched_links

logger = structlog.get_logger(__name__)

MAX_PAGE_SIZE = 1000

CharacterTypeLike = Union[CharacterType, str]
SlotLike = Union[SlotName, str]


@contextmanager
def storage_errors(
    db: Session, operation: str, conflict: Optional[ConflictError] = None
) -> Iterator[None]:
    """Roll back and translate driver errors raised inside the block.

    An ``IntegrityError`` is re-raised as ``conflict`` when one is given.
    """
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        if conflict is None:
            raise StorageUnavailableError(operation, str(exc.orig)) from exc
        raise conflict from exc
    except DBAPIError as exc:
        db.rollback()
        logger.error("storage.error", operation=operation, error=str(exc.orig))
        raise StorageUnavailableError(operation, str(exc.orig)) from exc


def _validate_page(offset: int, limit: int) -> None:
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError("limit", f"must be an integer between 1 and {MAX_PAGE_SIZE}")
    if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
        raise ValidationError("offset", "must be an integer >= 0")


class _CatalogService:
    """Shared wiring: session, audit trail and acting identity."""

    def __init__(
        self,
        db: Session,
        audit: Optional[AuditService] = None,
        actor_kind: str = ActorKind.SYSTEM.value,
        actor_id: Optional[str] = None,
    ):
        self.db = db
        self.audit = audit or AuditService(db)
        self.actor_kind = actor_kind
        self.actor_id = actor_id or get_settings().default_actor_id

    def _audit(self, method: str, **kwargs: Any) -> None:
        with storage_errors(self.db, f"audit.{method}"):
            getattr(self.audit, method)(
                actor_kind=self.actor_kind, actor_id=self.actor_id, **kwargs
            )

    def _wiring(self) -> Dict[str, Any]:
        return {
            "audit": self.audit,
            "actor_kind": self.actor_kind,
            "actor_id": self.actor_id,
        }


class ArtistService(_CatalogService):
    """Service for managing artists.

    Deleting an artist keeps its artworks and clears their attribution.
    """

    def create(self, artist: ArtistCreate) -> ArtistModel:
        """Create a new Artist."""
        db_artist = ArtistModel(
            id=generate_ulid(),
            name=artist.name,
            platform=artist.platform.value,
            url=artist.url,
            created_at=utc_now(),
        )
        with storage_errors(self.db, "artist.create"):
            self.db.add(db_artist)
            self.db.commit()
            self.db.refresh(db_artist)

        self._audit(
            "log_create",
            entity_kind="Artist",
            entity_id=db_artist.id,
            after=db_artist.to_dict(),
        )
        return db_artist

    def get(self, artist_id: str) -> Optional[ArtistModel]:
        """Get an Artist by ID."""
        with storage_errors(self.db, "artist.get"):
            return self.db.query(ArtistModel).filter(ArtistModel.id == artist_id).first()

    def require(self, artist_id: str) -> ArtistModel:
        artist = self.get(artist_id)
        if artist is None:
            raise NotFoundError("Artist", artist_id)
        return artist

    def list(self) -> List[ArtistModel]:
        """List Artists alphabetically."""
        with storage_errors(self.db, "artist.list"):
            return self.db.query(ArtistModel).order_by(ArtistModel.name, ArtistModel.id).all()

    def display_name(self, artist_id: Optional[str]) -> Optional[str]:
        """Resolve an artist id to its display name (None when unknown)."""
        if not artist_id:
            return None
        artist = self.get(artist_id)
        return artist.name if artist else None

    def update(self, artist_id: str, changes: ArtistUpdate) -> ArtistModel:
        artist = self.require(artist_id)
        before = artist.to_dict()

        data = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "platform" in data:
            data["platform"] = changes.platform.value
        for field, value in data.items():
            setattr(artist, field, value)

        with storage_errors(self.db, "artist.update"):
            self.db.commit()
            self.db.refresh(artist)

        self._audit(
            "log_update",
            entity_kind="Artist",
            entity_id=artist.id,
            before=before,
            after=artist.to_dict(),
        )
        return artist

    def delete(self, artist_id: str) -> int:
        """Delete an Artist, returning how many artworks lost attribution."""
        artist = self.require(artist_id)
        before = artist.to_dict()

        with storage_errors(self.db, "artist.delete"):
            detached = (
                self.db.query(ArtworkModel)
                .filter(ArtworkModel.artist_id == artist_id)
                .update({ArtworkModel.artist_id: None}, synchronize_session="fetch")
            )
            self.db.delete(artist)
            self.db.commit()

        logger.info("artist.deleted", artist_id=artist_id, artworks_detached=detached)
        self._audit(
            "log_delete",
            entity_kind="Artist",
            entity_id=artist_id,
            before=before,
            note=f"{detached} artwork(s) unattributed",
        )
        return detached


class ArtworkStore(_CatalogService):
    """Canonical, deduplicated registry of artwork URLs."""

    def find_by_url(self, url: str) -> Optional[ArtworkModel]:
        """Look up an Artwork by URL. No side effects."""
        url = require_url(url)
        with storage_errors(self.db, "artwork.find_by_url"):
            return self.db.query(ArtworkModel).filter(ArtworkModel.url == url).first()

    def get(self, artwork_id: str) -> Optional[ArtworkModel]:
        """Get an Artwork by ID."""
        with storage_errors(self.db, "artwork.get"):
            return (
                self.db.query(ArtworkModel).filter(ArtworkModel.id == artwork_id).first()
            )

    def require(self, artwork_id: str) -> ArtworkModel:
        artwork = self.get(artwork_id)
        if artwork is None:
            raise NotFoundError("Artwork", artwork_id)
        return artwork

    def create(
        self,
        url: str,
        artist_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ArtworkModel:
        """Register a new Artwork.

        Raises ConflictError when the URL is already registered. The check is
        the database unique constraint, so two racing creates cannot both win.
        """
        url = require_url(url)
        if artist_id is not None:
            ArtistService(self.db, **self._wiring()).require(artist_id)

        now = utc_now()
        artwork = ArtworkModel(
            id=generate_ulid(),
            url=url,
            artist_id=artist_id,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        with storage_errors(
            self.db, "artwork.create", conflict=ConflictError("Artwork", "url", url)
        ):
            self.db.add(artwork)
            self.db.commit()
            self.db.refresh(artwork)

        logger.info("artwork.created", artwork_id=artwork.id, url=url, artist_id=artist_id)
        self._audit(
            "log_create",
            entity_kind="Artwork",
            entity_id=artwork.id,
            after=artwork.to_dict(include_usages=False),
        )
        return artwork

    def _update(self, artwork: ArtworkModel, operation: str, **changes: Any) -> ArtworkModel:
        before = artwork.to_dict(include_usages=False)
        for field, value in changes.items():
            setattr(artwork, field, value)
        artwork.updated_at = utc_now()

        conflict = ConflictError("Artwork", "url", changes["url"]) if "url" in changes else None
        with storage_errors(self.db, operation, conflict=conflict):
            self.db.commit()
            self.db.refresh(artwork)

        self._audit(
            "log_update",
            entity_kind="Artwork",
            entity_id=artwork.id,
            before=before,
            after=artwork.to_dict(include_usages=False),
        )
        return artwork

    def update_artist(self, artwork_id: str, artist_id: Optional[str]) -> ArtworkModel:
        """Set or clear the artist credited for an artwork."""
        artwork = self.require(artwork_id)
        if artist_id is not None:
            ArtistService(self.db, **self._wiring()).require(artist_id)
        return self._update(artwork, "artwork.update_artist", artist_id=artist_id)

    def update_notes(self, artwork_id: str, notes: Optional[str]) -> ArtworkModel:
        artwork = self.require(artwork_id)
        return self._update(artwork, "artwork.update_notes", notes=notes)

    def rename_url(
        self,
        artwork_id: str,
        new_url: str,
        rewrite_characters: bool = False,
    ) -> ArtworkModel:
        """Move an artwork to a new canonical URL.

        With ``rewrite_characters`` every character field still embedding the
        old URL is rewritten too.
        """
        new_url = require_url(new_url)
        artwork = self.require(artwork_id)
        old_url = artwork.url
        if new_url == old_url:
            return artwork

        owner = self.find_by_url(new_url)
        if owner is not None:
            raise ConflictError("Artwork", "url", new_url)

        artwork = self._update(artwork, "artwork.rename_url", url=new_url)
        logger.info("artwork.renamed", artwork_id=artwork.id, old_url=old_url, new_url=new_url)

        if rewrite_characters:
            CharacterService(self.db, **self._wiring()).replace_url(old_url, new_url)
        return artwork

    def delete(self, artwork_id: str) -> None:
        """Delete an Artwork and every Usage referencing it."""
        artwork = self.require(artwork_id)
        before = artwork.to_dict()
        usage_count = len(artwork.usages)

        with storage_errors(self.db, "artwork.delete"):
            self.db.delete(artwork)
            self.db.commit()

        logger.info("artwork.deleted", artwork_id=artwork_id, usages_deleted=usage_count)
        self._audit(
            "log_delete",
            entity_kind="Artwork",
            entity_id=artwork_id,
            before=before,
            note=f"{usage_count} usage(s) deleted",
        )

    def list(self, offset: int = 0, limit: int = 100) -> List[ArtworkModel]:
        """One page of Artworks, newest first."""
        _validate_page(offset, limit)
        with storage_errors(self.db, "artwork.list"):
            return (
                self.db.query(ArtworkModel)
                .order_by(desc(ArtworkModel.created_at), desc(ArtworkModel.id))
                .offset(offset)
                .limit(limit)
                .all()
            )

    def list_all(self, page_size: Optional[int] = None) -> List[ArtworkModel]:
        """Accumulate the full Artwork set page by page."""
        page_size = page_size or get_settings().page_size
        artworks: List[ArtworkModel] = []
        offset = 0
        while True:
            page = self.list(offset=offset, limit=page_size)
            artworks.extend(page)
            if len(page) < page_size:
                return artworks
            offset += page_size

    def known_urls(self) -> Set[str]:
        with storage_errors(self.db, "artwork.known_urls"):
            return {url for (url,) in self.db.query(ArtworkModel.url).all()}


class UsageIndex(_CatalogService):
    """Associations between artworks and character slots.

    At most one Usage exists per (artwork, character type, character id, slot).
    """

    def _require_artwork(self, artwork_id: str) -> None:
        with storage_errors(self.db, "usage.require_artwork"):
            exists = (
                self.db.query(ArtworkModel.id).filter(ArtworkModel.id == artwork_id).first()
            )
        if exists is None:
            raise NotFoundError("Artwork", artwork_id)

    def find(
        self,
        artwork_id: str,
        character_type: CharacterTypeLike,
        character_id: str,
        slot: SlotLike,
    ) -> Optional[UsageModel]:
        """Look up a Usage by its natural key."""
        artwork_id = require_id(artwork_id, "artwork_id")
        character_type = coerce_character_type(character_type)
        character_id = require_id(character_id, "character_id")
        slot = coerce_slot(slot)

        with storage_errors(self.db, "usage.find"):
            return (
                self.db.query(UsageModel)
                .filter(
                    UsageModel.artwork_id == artwork_id,
                    UsageModel.character_type == character_type.value,
                    UsageModel.character_id == character_id,
                    UsageModel.slot == slot.value,
                )
                .first()
            )

    def get(self, usage_id: str) -> Optional[UsageModel]:
        with storage_errors(self.db, "usage.get"):
            return self.db.query(UsageModel).filter(UsageModel.id == usage_id).first()

    def create(
        self,
        artwork_id: str,
        character_type: CharacterTypeLike,
        character_id: str,
        slot: SlotLike,
        display_order: Optional[int] = None,
    ) -> UsageModel:
        """Insert a Usage. Raises ConflictError if the natural key exists."""
        artwork_id = require_id(artwork_id, "artwork_id")
        character_type = coerce_character_type(character_type)
        character_id = require_id(character_id, "character_id")
        slot = coerce_slot(slot)
        display_order = coerce_display_order(display_order)
        self._require_artwork(artwork_id)

        usage = UsageModel(
            id=generate_ulid(),
            artwork_id=artwork_id,
            character_type=character_type.value,
            character_id=character_id,
            slot=slot.value,
            display_order=display_order,
            created_at=utc_now(),
        )
        conflict = ConflictError("Usage", "key", f"{artwork_id}:{usage.key}")
        with storage_errors(self.db, "usage.create", conflict=conflict):
            self.db.add(usage)
            self.db.commit()
            self.db.refresh(usage)

        logger.info("usage.created", usage_id=usage.id, artwork_id=artwork_id, key=usage.key)
        self._audit(
            "log_link",
            entity_kind="Artwork",
            entity_id=artwork_id,
            linked_kind="Character",
            linked_id=usage.key,
        )
        return usage

    def ensure(
        self,
        artwork_id: str,
        character_type: CharacterTypeLike,
        character_id: str,
        slot: SlotLike,
        display_order: Optional[int] = None,
    ) -> UsageModel:
        """Return the Usage for the natural key, creating it if missing.

        Repeated calls return the same row unchanged. An insert that loses a
        race to a concurrent ``ensure`` returns the winner's row.
        """
        display_order = coerce_display_order(display_order)
        existing = self.find(artwork_id, character_type, character_id, slot)
        if existing is not None:
            return existing

        try:
            return self.create(artwork_id, character_type, character_id, slot, display_order)
        except ConflictError:
            existing = self.find(artwork_id, character_type, character_id, slot)
            if existing is None:
                raise
            logger.info("usage.conflict_resolved", usage_id=existing.id, key=existing.key)
            return existing

    def assign(
        self,
        artwork_id: str,
        character_type: CharacterTypeLike,
        character_id: str,
        slot: SlotLike,
        display_order: Optional[int] = None,
        replace: bool = True,
    ) -> UsageModel:
        """Assign an artwork to a character slot.

        Single-valued slots hold one artwork per character: with ``replace``
        any other artwork's usage of that slot is removed first. List slots
        behave like ``ensure``.
        """
        artwork_id = require_id(artwork_id, "artwork_id")
        character_type = coerce_character_type(character_type)
        character_id = require_id(character_id, "character_id")
        slot = coerce_slot(slot)
        self._require_artwork(artwork_id)

        if replace and slot in SINGLE_VALUED_SLOTS:
            with storage_errors(self.db, "usage.assign"):
                displaced = (
                    self.db.query(UsageModel)
                    .filter(
                        UsageModel.character_type == character_type.value,
                        UsageModel.character_id == character_id,
                        UsageModel.slot == slot.value,
                        UsageModel.artwork_id != artwork_id,
                    )
                    .all()
                )
            for usage in displaced:
                self._delete(usage, note=f"Replaced by Artwork:{artwork_id}")

        return self.ensure(artwork_id, character_type, character_id, slot, display_order)

    def _delete(self, usage: UsageModel, note: Optional[str] = None) -> None:
        artwork_id, key, usage_id = usage.artwork_id, usage.key, usage.id
        with storage_errors(self.db, "usage.delete"):
            self.db.delete(usage)
            self.db.commit()

        logger.info("usage.deleted", usage_id=usage_id, artwork_id=artwork_id, key=key)
        self._audit(
            "log_unlink",
            entity_kind="Artwork",
            entity_id=artwork_id,
            unlinked_kind="Character",
            unlinked_id=key,
            note=note,
        )

    def remove(self, usage_id: str) -> None:
        """Delete a Usage by id. Raises NotFoundError if absent."""
        usage = self.get(usage_id)
        if usage is None:
            raise NotFoundError("Usage", usage_id)
        self._delete(usage)

    def remove_by_natural_key(
        self,
        artwork_id: str,
        character_type: CharacterTypeLike,
        character_id: str,
        slot: SlotLike,
    ) -> bool:
        """Delete the Usage for the natural key.

        Missing usages are a no-op: returns False, never raises NotFoundError.
        """
        usage = self.find(artwork_id, character_type, character_id, slot)
        if usage is None:
            return False
        self._delete(usage)
        return True

    def remove_by_key(self, artwork_id: str, key: str) -> bool:
        """Same as remove_by_natural_key, with the dashboard's composite key."""
        character_id, character_type, slot = parse_usage_key(key)
        return self.remove_by_natural_key(artwork_id, character_type, character_id, slot)

    def list_by_artwork(self, artwork_id: str) -> List[UsageModel]:
        """Usages of one artwork; empty for an unknown or deleted artwork."""
        with storage_errors(self.db, "usage.list_by_artwork"):
            return (
                self.db.query(UsageModel)
                .filter(UsageModel.artwork_id == artwork_id)
                .order_by(UsageModel.created_at, UsageModel.id)
                .all()
            )

    def list_by_character(
        self, character_type: CharacterTypeLike, character_id: str
    ) -> List[UsageModel]:
        """Usages on one character, by slot then display order."""
        character_type = coerce_character_type(character_type)
        character_id = require_id(character_id, "character_id")
        with storage_errors(self.db, "usage.list_by_character"):
            usages = (
                self.db.query(UsageModel)
                .filter(
                    UsageModel.character_type == character_type.value,
                    UsageModel.character_id == character_id,
                )
                .all()
            )

        slot_rank = {sf.slot.value: rank for rank, sf in enumerate(SLOT_FIELDS)}
        return sorted(
            usages,
            key=lambda u: (
                slot_rank[u.slot],
                u.display_order is None,
                u.display_order or 0,
                u.id,
            ),
        )

    def list_all(self) -> List[UsageModel]:
        with storage_errors(self.db, "usage.list_all"):
            return self.db.query(UsageModel).order_by(UsageModel.created_at, UsageModel.id).all()


class CharacterService(_CatalogService):
    """Read accessor for characters, plus the two writes the catalog needs.

    ``remove_url`` is the optional cleanup after a promotion; ``replace_url``
    follows an artwork to its new URL.
    """

    def get(self, character_type: CharacterTypeLike, character_id: str) -> Optional[CharacterModel]:
        character_type = coerce_character_type(character_type)
        with storage_errors(self.db, "character.get"):
            return (
                self.db.query(CharacterModel)
                .filter(
                    CharacterModel.character_type == character_type.value,
                    CharacterModel.id == character_id,
                )
                .first()
            )

    def require(self, character_type: CharacterTypeLike, character_id: str) -> CharacterModel:
        character = self.get(character_type, character_id)
        if character is None:
            raise NotFoundError("Character", f"{CharacterType(character_type).value}/{character_id}")
        return character

    def list(self, character_type: Optional[CharacterTypeLike] = None) -> List[CharacterModel]:
        query = self.db.query(CharacterModel)
        if character_type is not None:
            query = query.filter(
                CharacterModel.character_type == coerce_character_type(character_type).value
            )
        with storage_errors(self.db, "character.list"):
            return query.order_by(
                CharacterModel.character_type, CharacterModel.order, CharacterModel.id
            ).all()

    def list_read_models(
        self, character_type: Optional[CharacterTypeLike] = None
    ) -> List[Character]:
        return [Character.model_validate(c.to_dict()) for c in self.list(character_type)]

    def upsert(
        self,
        character_type: CharacterTypeLike,
        character_id: str,
        data: CharacterUpsert,
    ) -> CharacterModel:
        """Create a character or replace its embedded fields."""
        character_type = coerce_character_type(character_type)
        character_id = require_id(character_id, "character_id")
        character = self.get(character_type, character_id)
        before = character.to_dict() if character is not None else None

        if character is None:
            character = CharacterModel(character_type=character_type.value, id=character_id)
            self.db.add(character)
        for field, value in data.model_dump().items():
            setattr(character, field, value)
        character.updated_at = utc_now()

        with storage_errors(self.db, "character.upsert"):
            self.db.commit()
            self.db.refresh(character)

        entity_id = f"{character_type.value}/{character_id}"
        if before is None:
            self._audit(
                "log_create",
                entity_kind="Character",
                entity_id=entity_id,
                after=character.to_dict(),
            )
        else:
            self._audit(
                "log_update",
                entity_kind="Character",
                entity_id=entity_id,
                before=before,
                after=character.to_dict(),
            )
        return character

    def remove_url(
        self,
        character_type: CharacterTypeLike,
        character_id: str,
        slot: SlotLike,
        url: str,
    ) -> bool:
        """Drop ``url`` from the field bound to ``slot``. Returns True if changed."""
        url = require_url(url)
        character = self.require(character_type, character_id)
        sf = slot_field(coerce_slot(slot))
        before = character.to_dict()

        current = getattr(character, sf.field)
        if sf.multiple:
            remaining = [u for u in (current or []) if not same_url(u, url)]
            changed = len(remaining) != len(current or [])
            new_value: Any = remaining
        else:
            changed = same_url(current, url)
            new_value = None
        if not changed:
            return False

        # JSON columns only detect reassignment, not in-place mutation
        setattr(character, sf.field, new_value)
        character.updated_at = utc_now()
        with storage_errors(self.db, "character.remove_url"):
            self.db.commit()
            self.db.refresh(character)

        self._audit(
            "log_update",
            entity_kind="Character",
            entity_id=f"{character.character_type}/{character.id}",
            before=before,
            after=character.to_dict(),
            note=f"Removed {sf.field} URL after promotion",
        )
        return True

    def replace_url(self, old_url: str, new_url: str) -> int:
        """Rewrite ``old_url`` to ``new_url`` in every character field.

        Returns the number of characters touched.
        """
        old_url = require_url(old_url, "old_url")
        new_url = require_url(new_url, "new_url")
        touched: List[CharacterModel] = []

        for character in self.list():
            changed = False
            for sf in SLOT_FIELDS:
                current = getattr(character, sf.field)
                if sf.multiple:
                    values = list(current or [])
                    if any(same_url(u, old_url) for u in values):
                        setattr(
                            character,
                            sf.field,
                            [new_url if same_url(u, old_url) else u for u in values],
                        )
                        changed = True
                elif same_url(current, old_url):
                    setattr(character, sf.field, new_url)
                    changed = True
            if changed:
                character.updated_at = utc_now()
                touched.append(character)

        if not touched:
            return 0

        with storage_errors(self.db, "character.replace_url"):
            self.db.commit()

        for character in touched:
            self._audit(
                "log_update",
                entity_kind="Character",
                entity_id=f"{character.character_type}/{character.id}",
                before={"url": old_url},
                after={"url": new_url},
                note="Artwork URL rewritten",
            )
        logger.info("character.urls_rewritten", old_url=old_url, new_url=new_url, count=len(touched))
        return len(touched)


class PromotionService(_CatalogService):
    """Turns character-embedded URLs into (Artwork, Usage) pairs.

    ``promote`` is idempotent: repeating it with the same arguments returns
    the same artwork id and leaves exactly one Usage.
    """

    def __init__(
        self,
        db: Session,
        artworks: Optional[ArtworkStore] = None,
        usages: Optional[UsageIndex] = None,
        characters: Optional[CharacterService] = None,
        audit: Optional[AuditService] = None,
        actor_kind: str = ActorKind.SYSTEM.value,
        actor_id: Optional[str] = None,
    ):
        super().__init__(db, audit=audit, actor_kind=actor_kind, actor_id=actor_id)
        self.artworks = artworks or ArtworkStore(db, **self._wiring())
        self.usages = usages or UsageIndex(db, **self._wiring())
        self.characters = characters or CharacterService(db, **self._wiring())

    def promote(
        self,
        url: str,
        character_type: CharacterTypeLike,
        character_id: str,
        slot: SlotLike,
        artist_id: Optional[str] = None,
        display_order: Optional[int] = None,
        detach: bool = False,
    ) -> str:
        """Find-or-create the Artwork for ``url`` and ensure its Usage.

        With ``detach`` the URL is then removed from the character record.
        Returns the artwork id.
        """
        url = require_url(url)
        character_type = coerce_character_type(character_type)
        character_id = require_id(character_id, "character_id")
        slot = coerce_slot(slot)
        display_order = coerce_display_order(display_order)
        if artist_id is not None:
            artist_id = require_id(artist_id, "artist_id")

        artwork = self.artworks.find_by_url(url)
        if artwork is None:
            try:
                artwork = self.artworks.create(url, artist_id=artist_id)
            except ConflictError:
                artwork = self.artworks.find_by_url(url)
                if artwork is None:
                    raise
                logger.info("artwork.conflict_resolved", artwork_id=artwork.id, url=url)

        self.usages.ensure(artwork.id, character_type, character_id, slot, display_order)

        if detach:
            self.characters.remove_url(character_type, character_id, slot, url)

        return artwork.id

    def promote_batch(
        self,
        entries: Iterable[Union[PromotionRequest, Mapping[str, Any]]],
        detach: bool = False,
    ) -> BatchReport:
        """Attempt every entry; collect per-entry outcomes instead of raising."""
        report = BatchReport()

        for index, entry in enumerate(entries):
            url = entry.url if isinstance(entry, PromotionRequest) else None
            if isinstance(entry, Mapping):
                url = entry.get("url")
            try:
                request = (
                    entry
                    if isinstance(entry, PromotionRequest)
                    else PromotionRequest.model_validate(entry)
                )
                artwork_id = self.promote(
                    request.url,
                    request.character_type,
                    request.character_id,
                    request.slot,
                    artist_id=request.artist_id,
                    display_order=request.display_order,
                    detach=detach,
                )
                outcome = PromotionOutcome(index=index, ok=True, artwork_id=artwork_id, url=request.url)
            except ArtworkRegistryError as exc:
                outcome = PromotionOutcome(
                    index=index,
                    ok=False,
                    url=url if isinstance(url, str) else None,
                    error_code=exc.code,
                    error_message=exc.message,
                )
            except PydanticValidationError as exc:
                outcome = PromotionOutcome(
                    index=index,
                    ok=False,
                    url=url if isinstance(url, str) else None,
                    error_code=ValidationError.code,
                    error_message="; ".join(
                        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                        for err in exc.errors()
                    ),
                )
            except Exception as exc:
                self.db.rollback()
                logger.exception("promotion.entry_failed", index=index, url=url)
                outcome = PromotionOutcome(
                    index=index,
                    ok=False,
                    url=url if isinstance(url, str) else None,
                    error_code="INTERNAL_ERROR",
                    error_message=str(exc),
                )
            report.outcomes.append(outcome)

        logger.info(
            "promotion.batch_finished",
            total=report.total,
            succeeded=report.succeeded,
            failed=report.failed,
        )
        return report

    def promote_unmatched(
        self,
        character_type: Optional[CharacterTypeLike] = None,
        artist_id: Optional[str] = None,
        detach: bool = False,
    ) -> BatchReport:
        """Promote every character-embedded URL that has no Artwork yet."""
        links = find_unmatched_links(
            self.characters.list_read_models(character_type),
            self.artworks.known_urls(),
        )
        return self.promote_batch([link.to_request(artist_id) for link in links], detach=detach)
