"""Tests for CharacterService and the slot/field table."""

import pytest

from artwork_registry.catalog.character import (
    SINGLE_VALUED_SLOTS,
    SLOT_FIELDS,
    CharacterUpsert,
    field_slot,
    slot_field,
)
from artwork_registry.catalog.enums import SlotName
from artwork_registry.catalog.errors import NotFoundError, ValidationError

PORTRAIT = "https://cdn.example/trapper/portrait.png"
FAN_1 = "https://cdn.example/trapper/fan-1.png"
FAN_2 = "https://cdn.example/trapper/fan-2.png"


class TestSlotTable:
    def test_every_slot_has_one_field(self):
        assert {sf.slot for sf in SLOT_FIELDS} == set(SlotName)
        assert slot_field(SlotName.BACKGROUND).field == "background_image_url"
        assert field_slot("artist_urls").slot == SlotName.GALLERY_LIST
        assert field_slot("name") is None

    def test_single_valued_slots(self):
        assert SINGLE_VALUED_SLOTS == {
            SlotName.PORTRAIT,
            SlotName.BACKGROUND,
            SlotName.PRIMARY_HEADER,
        }


class TestCharacterService:
    def test_upsert_creates_then_replaces(self, characters):
        characters.upsert("killer", "nurse", CharacterUpsert(name="The Nurse", image_url=PORTRAIT))
        characters.upsert("killer", "nurse", CharacterUpsert(name="The Nurse"))

        nurse = characters.require("killer", "nurse")
        assert nurse.name == "The Nurse"
        assert nurse.image_url is None
        assert nurse.artist_urls == []

    def test_same_id_different_type(self, characters):
        characters.upsert("killer", "ghost", CharacterUpsert(name="Killer Ghost"))
        characters.upsert("survivor", "ghost", CharacterUpsert(name="Survivor Ghost"))

        assert characters.require("killer", "ghost").name == "Killer Ghost"
        assert characters.require("survivor", "ghost").name == "Survivor Ghost"

    def test_require_missing(self, characters):
        with pytest.raises(NotFoundError) as exc_info:
            characters.require("killer", "nobody")
        assert exc_info.value.identifier == "killer/nobody"

    def test_invalid_type(self, characters):
        with pytest.raises(ValidationError):
            characters.get("villain", "trapper")

    def test_list_filters_by_type(self, characters, trapper):
        characters.upsert("survivor", "meg", CharacterUpsert(name="Meg"))

        assert [c.id for c in characters.list("survivor")] == ["meg"]
        assert len(characters.list()) == 2


class TestRemoveUrl:
    def test_single_field(self, characters, trapper):
        assert characters.remove_url("killer", "trapper", "portrait", PORTRAIT) is True
        assert characters.require("killer", "trapper").image_url is None

    def test_list_field(self, characters, trapper):
        assert characters.remove_url("killer", "trapper", "gallery_list", FAN_1) is True
        assert characters.require("killer", "trapper").artist_urls == [FAN_2]

    def test_url_not_present(self, characters, trapper):
        assert characters.remove_url("killer", "trapper", "background", PORTRAIT) is False
        assert characters.remove_url("killer", "trapper", "gallery_list", PORTRAIT) is False


class TestReplaceUrl:
    def test_rewrites_every_field(self, characters, trapper):
        characters.upsert("survivor", "meg", CharacterUpsert(legacy_header_urls=[FAN_1]))

        touched = characters.replace_url(FAN_1, "https://cdn.example/moved.png")

        assert touched == 2
        assert characters.require("killer", "trapper").artist_urls == [
            "https://cdn.example/moved.png",
            FAN_2,
        ]
        assert characters.require("survivor", "meg").legacy_header_urls == [
            "https://cdn.example/moved.png"
        ]

    def test_no_match(self, characters, trapper):
        assert characters.replace_url("https://cdn.example/none.png", "https://cdn.example/x.png") == 0


class TestPaddedUrls:
    """Stored values with surrounding blanks match their stripped URL."""

    def test_remove_url_single_field(self, characters):
        characters.upsert("survivor", "nea", CharacterUpsert(image_url=" https://cdn.example/n.png "))

        assert characters.remove_url("survivor", "nea", "portrait", "https://cdn.example/n.png") is True
        assert characters.require("survivor", "nea").image_url is None

    def test_remove_url_list_field(self, characters):
        characters.upsert(
            "survivor",
            "nea",
            CharacterUpsert(artist_urls=["https://cdn.example/a.png ", "https://cdn.example/b.png"]),
        )

        assert characters.remove_url("survivor", "nea", "gallery_list", "https://cdn.example/a.png") is True
        assert characters.require("survivor", "nea").artist_urls == ["https://cdn.example/b.png"]

    def test_replace_url(self, characters):
        characters.upsert(
            "survivor",
            "nea",
            CharacterUpsert(
                header_url="  https://cdn.example/a.png",
                legacy_header_urls=["https://cdn.example/a.png\t"],
            ),
        )

        assert characters.replace_url("https://cdn.example/a.png", "https://cdn.example/z.png") == 1

        nea = characters.require("survivor", "nea")
        assert nea.header_url == "https://cdn.example/z.png"
        assert nea.legacy_header_urls == ["https://cdn.example/z.png"]
