"""
Tests for UsageIndex.

Verifies:
- One usage per (artwork, character type, character id, slot)
- ensure() idempotence, including a lost insert race
- Removal by id, natural key and dashboard key
- Ordering of list_by_character()
- assign() replacement in single-valued slots
"""

import pytest

from artwork_registry.catalog.enums import CharacterType, SlotName
from artwork_registry.catalog.errors import ConflictError, NotFoundError, ValidationError
from artwork_registry.db.models import UsageModel


@pytest.fixture
def artwork(store):
    return store.create("https://cdn.example/a.png")


class TestUsageCreate:
    """Tests for create() and ensure()."""

    def test_create_basic(self, index, artwork):
        usage = index.create(artwork.id, "killer", "trapper", "portrait")

        assert usage.artwork_id == artwork.id
        assert usage.character_type == "killer"
        assert usage.slot == "portrait"
        assert usage.display_order is None
        assert usage.key == "trapper-killer-portrait"

    def test_create_accepts_enums(self, index, artwork):
        usage = index.create(
            artwork.id, CharacterType.SURVIVOR, "meg", SlotName.GALLERY_LIST, display_order=2
        )
        assert usage.character_type == "survivor"
        assert usage.display_order == 2

    def test_create_duplicate_is_conflict(self, index, artwork):
        index.create(artwork.id, "killer", "trapper", "portrait")
        with pytest.raises(ConflictError):
            index.create(artwork.id, "killer", "trapper", "portrait")

    def test_create_unknown_artwork(self, index):
        with pytest.raises(NotFoundError):
            index.create("missing", "killer", "trapper", "portrait")

    @pytest.mark.parametrize(
        "character_type,slot,display_order",
        [
            ("villain", "portrait", None),
            ("killer", "banner", None),
            ("killer", "gallery_list", -1),
            ("killer", "gallery_list", "2"),
        ],
    )
    def test_invalid_input_rejected(self, index, artwork, db_session, character_type, slot, display_order):
        with pytest.raises(ValidationError):
            index.create(artwork.id, character_type, "trapper", slot, display_order)
        assert db_session.query(UsageModel).count() == 0

    def test_ensure_is_idempotent(self, index, artwork, db_session):
        first = index.ensure(artwork.id, "killer", "trapper", "portrait")
        second = index.ensure(artwork.id, "killer", "trapper", "portrait")

        assert first.id == second.id
        assert db_session.query(UsageModel).count() == 1

    def test_ensure_keeps_existing_display_order(self, index, artwork):
        first = index.ensure(artwork.id, "killer", "trapper", "gallery_list", display_order=0)
        second = index.ensure(artwork.id, "killer", "trapper", "gallery_list", display_order=5)

        assert second.id == first.id
        assert second.display_order == 0

    def test_ensure_resolves_lost_race(self, index, artwork, monkeypatch):
        """An insert that hits the unique constraint returns the winner's row."""
        winner = index.create(artwork.id, "killer", "trapper", "portrait")

        real_find = index.find
        calls = []

        def stale_find(*args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                return None
            return real_find(*args, **kwargs)

        monkeypatch.setattr(index, "find", stale_find)

        usage = index.ensure(artwork.id, "killer", "trapper", "portrait")

        assert usage.id == winner.id
        assert len(calls) == 2


class TestUsageRemove:
    """Tests for remove(), remove_by_natural_key() and remove_by_key()."""

    def test_remove_by_id(self, index, artwork):
        usage = index.create(artwork.id, "killer", "trapper", "portrait")
        index.remove(usage.id)
        assert index.get(usage.id) is None

    def test_remove_missing_id(self, index):
        with pytest.raises(NotFoundError):
            index.remove("missing")

    def test_remove_by_natural_key(self, index, artwork):
        index.create(artwork.id, "killer", "trapper", "portrait")

        assert index.remove_by_natural_key(artwork.id, "killer", "trapper", "portrait") is True
        assert index.find(artwork.id, "killer", "trapper", "portrait") is None

    def test_remove_by_natural_key_missing_is_noop(self, index, artwork):
        assert index.remove_by_natural_key(artwork.id, "killer", "trapper", "portrait") is False

    def test_remove_by_key_with_dashed_character_id(self, index, artwork):
        index.create(artwork.id, "killer", "the-trapper", "background")

        assert index.remove_by_key(artwork.id, "the-trapper-killer-background") is True
        assert index.list_by_artwork(artwork.id) == []

    @pytest.mark.parametrize("key", ["trapper", "trapper-killer", "-killer-portrait", "trapper-villain-portrait"])
    def test_remove_by_key_malformed(self, index, artwork, key):
        with pytest.raises(ValidationError):
            index.remove_by_key(artwork.id, key)


class TestUsageListing:
    """Tests for list_by_artwork(), list_by_character() and list_all()."""

    def test_list_by_artwork(self, index, artwork):
        index.create(artwork.id, "killer", "trapper", "portrait")
        index.create(artwork.id, "survivor", "meg", "background")

        keys = {u.key for u in index.list_by_artwork(artwork.id)}
        assert keys == {"trapper-killer-portrait", "meg-survivor-background"}

    def test_list_by_artwork_after_delete(self, store, index, artwork):
        index.create(artwork.id, "killer", "trapper", "portrait")
        store.delete(artwork.id)

        assert index.list_by_artwork(artwork.id) == []

    def test_list_by_character_order(self, store, index):
        portrait = store.create("https://cdn.example/portrait.png")
        fan_1 = store.create("https://cdn.example/fan-1.png")
        fan_2 = store.create("https://cdn.example/fan-2.png")
        index.create(fan_2.id, "killer", "trapper", "gallery_list", display_order=1)
        index.create(fan_1.id, "killer", "trapper", "gallery_list", display_order=0)
        index.create(portrait.id, "killer", "trapper", "portrait")
        index.create(portrait.id, "killer", "nurse", "portrait")

        usages = index.list_by_character("killer", "trapper")

        assert [u.artwork_id for u in usages] == [portrait.id, fan_1.id, fan_2.id]

    def test_list_all(self, store, index):
        a = store.create("https://cdn.example/a.png")
        b = store.create("https://cdn.example/b.png")
        index.create(a.id, "killer", "trapper", "portrait")
        index.create(b.id, "killer", "nurse", "portrait")

        assert len(index.list_all()) == 2


class TestUsageAssign:
    """Tests for assign()."""

    def test_assign_replaces_single_valued_slot(self, store, index):
        old = store.create("https://cdn.example/old.png")
        new = store.create("https://cdn.example/new.png")
        index.assign(old.id, "killer", "trapper", "portrait")

        usage = index.assign(new.id, "killer", "trapper", "portrait")

        assert usage.artwork_id == new.id
        assert index.list_by_artwork(old.id) == []

    def test_assign_without_replace_keeps_both(self, store, index):
        old = store.create("https://cdn.example/old.png")
        new = store.create("https://cdn.example/new.png")
        index.assign(old.id, "killer", "trapper", "portrait")

        index.assign(new.id, "killer", "trapper", "portrait", replace=False)

        assert len(index.list_by_character("killer", "trapper")) == 2

    def test_assign_list_slot_accumulates(self, store, index):
        a = store.create("https://cdn.example/a.png")
        b = store.create("https://cdn.example/b.png")

        index.assign(a.id, "killer", "trapper", "gallery_list", display_order=0)
        index.assign(b.id, "killer", "trapper", "gallery_list", display_order=1)

        assert [u.artwork_id for u in index.list_by_character("killer", "trapper")] == [a.id, b.id]

    def test_assign_is_idempotent(self, index, artwork, db_session):
        first = index.assign(artwork.id, "killer", "trapper", "portrait")
        second = index.assign(artwork.id, "killer", "trapper", "portrait")

        assert first.id == second.id
        assert db_session.query(UsageModel).count() == 1
