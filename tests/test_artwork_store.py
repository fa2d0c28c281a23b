"""
Tests for ArtworkStore.

Verifies:
- URL uniqueness is enforced by the store, not by callers
- Validation happens before anything is written
- Delete cascades to usages
- Paging and full-set accumulation
"""

from datetime import datetime, timezone

import pytest

from artwork_registry.catalog.character import CharacterUpsert
from artwork_registry.catalog.enums import ArtistPlatform
from artwork_registry.catalog.artist import ArtistCreate
from artwork_registry.catalog.errors import ConflictError, NotFoundError, ValidationError
from artwork_registry.db.models import ArtworkModel, UsageModel


class TestArtworkCreate:
    """Tests for ArtworkStore.create()."""

    def test_create_basic(self, store):
        artwork = store.create("https://cdn.example/a.png", notes="first upload")

        assert artwork.id
        assert artwork.url == "https://cdn.example/a.png"
        assert artwork.artist_id is None
        assert artwork.notes == "first upload"
        assert artwork.usages == []

    def test_create_strips_url(self, store):
        artwork = store.create("  https://cdn.example/a.png  ")
        assert artwork.url == "https://cdn.example/a.png"

    def test_duplicate_url_is_conflict(self, store):
        first = store.create("https://cdn.example/a.png")

        with pytest.raises(ConflictError) as exc_info:
            store.create("https://cdn.example/a.png")

        assert exc_info.value.status_code == 409
        # Session is still usable after the rollback
        assert store.find_by_url("https://cdn.example/a.png").id == first.id

    @pytest.mark.parametrize("url", ["", "   ", None, "x" * 2001])
    def test_invalid_url_rejected(self, store, db_session, url):
        with pytest.raises(ValidationError):
            store.create(url)
        assert db_session.query(ArtworkModel).count() == 0

    def test_unknown_artist_rejected(self, store, db_session):
        with pytest.raises(NotFoundError):
            store.create("https://cdn.example/a.png", artist_id="nobody")
        assert db_session.query(ArtworkModel).count() == 0

    def test_create_with_artist(self, store, artists):
        artist = artists.create(
            ArtistCreate(name="Mira", platform=ArtistPlatform.TWITTER, url="https://x.com/mira")
        )
        artwork = store.create("https://cdn.example/a.png", artist_id=artist.id)

        assert artwork.artist_id == artist.id
        assert artwork.artist.name == "Mira"


class TestArtworkLookup:
    """Tests for find_by_url(), get() and require()."""

    def test_find_by_url_missing(self, store):
        assert store.find_by_url("https://cdn.example/missing.png") is None

    def test_find_by_url_validates(self, store):
        with pytest.raises(ValidationError):
            store.find_by_url("")

    def test_get_missing(self, store):
        assert store.get("missing") is None

    def test_require_missing(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            store.require("missing")
        assert exc_info.value.details == {"kind": "Artwork", "id": "missing"}


class TestArtworkUpdate:
    """Tests for attribute updates and URL renames."""

    def test_update_and_clear_artist(self, store, artists):
        artist = artists.create(
            ArtistCreate(name="Mira", platform=ArtistPlatform.INSTAGRAM, url="https://ig/mira")
        )
        artwork = store.create("https://cdn.example/a.png")

        assert store.update_artist(artwork.id, artist.id).artist_id == artist.id
        assert store.update_artist(artwork.id, None).artist_id is None

    def test_update_artist_unknown(self, store):
        artwork = store.create("https://cdn.example/a.png")
        with pytest.raises(NotFoundError):
            store.update_artist(artwork.id, "nobody")

    def test_update_notes(self, store):
        artwork = store.create("https://cdn.example/a.png")
        assert store.update_notes(artwork.id, "cropped").notes == "cropped"

    def test_rename_url(self, store):
        artwork = store.create("https://cdn.example/a.png")
        renamed = store.rename_url(artwork.id, "https://cdn.example/b.png")

        assert renamed.id == artwork.id
        assert store.find_by_url("https://cdn.example/a.png") is None
        assert store.find_by_url("https://cdn.example/b.png").id == artwork.id

    def test_rename_to_taken_url_is_conflict(self, store):
        store.create("https://cdn.example/a.png")
        other = store.create("https://cdn.example/b.png")

        with pytest.raises(ConflictError):
            store.rename_url(other.id, "https://cdn.example/a.png")

    def test_rename_rewrites_characters(self, store, characters):
        characters.upsert(
            "survivor",
            "meg",
            CharacterUpsert(
                image_url="https://cdn.example/a.png",
                artist_urls=["https://cdn.example/a.png", "https://cdn.example/c.png"],
            ),
        )
        artwork = store.create("https://cdn.example/a.png")

        store.rename_url(artwork.id, "https://cdn.example/b.png", rewrite_characters=True)

        meg = characters.require("survivor", "meg")
        assert meg.image_url == "https://cdn.example/b.png"
        assert meg.artist_urls == ["https://cdn.example/b.png", "https://cdn.example/c.png"]

    def test_rename_leaves_characters_by_default(self, store, characters):
        characters.upsert("survivor", "meg", CharacterUpsert(image_url="https://cdn.example/a.png"))
        artwork = store.create("https://cdn.example/a.png")

        store.rename_url(artwork.id, "https://cdn.example/b.png")

        assert characters.require("survivor", "meg").image_url == "https://cdn.example/a.png"


class TestArtworkDelete:
    """Tests for ArtworkStore.delete()."""

    def test_delete_cascades_to_usages(self, store, index, db_session):
        artwork = store.create("https://cdn.example/a.png")
        index.ensure(artwork.id, "killer", "trapper", "portrait")
        index.ensure(artwork.id, "survivor", "meg", "gallery_list", display_order=0)

        store.delete(artwork.id)

        assert store.get(artwork.id) is None
        assert index.list_by_artwork(artwork.id) == []
        assert db_session.query(UsageModel).count() == 0

    def test_delete_missing(self, store):
        with pytest.raises(NotFoundError):
            store.delete("missing")


class TestArtworkList:
    """Tests for paging and list_all()."""

    def _seed(self, store, db_session, count):
        ids = []
        for day in range(1, count + 1):
            artwork = store.create(f"https://cdn.example/{day}.png")
            artwork.created_at = datetime(2026, 1, day, tzinfo=timezone.utc)
            ids.append(artwork.id)
        db_session.commit()
        return ids

    def test_list_newest_first(self, store, db_session):
        ids = self._seed(store, db_session, 3)

        page = store.list(limit=2)

        assert [a.id for a in page] == [ids[2], ids[1]]
        assert [a.id for a in store.list(offset=2, limit=2)] == [ids[0]]

    @pytest.mark.parametrize(
        "offset,limit", [(0, 0), (0, 1001), (-1, 10), (0, True)]
    )
    def test_list_rejects_bad_page(self, store, offset, limit):
        with pytest.raises(ValidationError):
            store.list(offset=offset, limit=limit)

    def test_list_all_accumulates_pages(self, store, db_session):
        ids = self._seed(store, db_session, 5)

        everything = store.list_all(page_size=2)

        assert len(everything) == 5
        assert {a.id for a in everything} == set(ids)

    def test_known_urls(self, store):
        store.create("https://cdn.example/a.png")
        store.create("https://cdn.example/b.png")

        assert store.known_urls() == {"https://cdn.example/a.png", "https://cdn.example/b.png"}
