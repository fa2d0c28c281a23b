"""
Read-side projections over the catalog. Nothing here touches the database.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from .character import SLOT_FIELDS
from .enums import CharacterType, SlotName
from .promotion import UnmatchedLink


class CharacterKey(NamedTuple):
    """Grouping key: (type, id). ``UNASSIGNED`` holds artworks with no usage."""

    character_type: Optional[CharacterType]
    character_id: Optional[str]

    @property
    def is_unassigned(self) -> bool:
        return self.character_type is None

    def label(self) -> str:
        if self.is_unassigned:
            return "unassigned"
        return f"{self.character_type.value}/{self.character_id}"


UNASSIGNED = CharacterKey(None, None)


def group_by_character(artworks: Iterable[Any]) -> Dict[CharacterKey, List[Any]]:
    """Bucket artworks by the characters that use them.

    An artwork lands once in each character's bucket however many slots it
    fills there. Accepts ``Artwork`` read models or ``ArtworkModel`` rows;
    buckets keep first-seen order.
    """
    groups: Dict[CharacterKey, List[Any]] = {}

    for artwork in artworks:
        usages = list(artwork.usages or [])
        if not usages:
            groups.setdefault(UNASSIGNED, []).append(artwork)
            continue

        seen = set()
        for usage in usages:
            key = CharacterKey(CharacterType(usage.character_type), usage.character_id)
            if key in seen:
                continue
            seen.add(key)
            groups.setdefault(key, []).append(artwork)

    return groups


def find_unmatched_links(
    characters: Iterable[Any], known_urls: Iterable[str]
) -> List[UnmatchedLink]:
    """Character-embedded URLs that have no Artwork yet.

    One entry per (character, field, URL), in character order, then
    ``SLOT_FIELDS`` order, then list order. Blank values are skipped.
    """
    known = set(known_urls)
    links: List[UnmatchedLink] = []

    for character in characters:
        character_type = CharacterType(character.character_type)
        for sf in SLOT_FIELDS:
            seen = set()
            for position, url in enumerate(sf.urls(character)):
                if url in known or url in seen:
                    continue
                seen.add(url)
                links.append(
                    UnmatchedLink(
                        url=url,
                        character_type=character_type,
                        character_id=character.id,
                        character_name=getattr(character, "name", None),
                        field=sf.field,
                        slot=sf.slot,
                        display_order=position if sf.multiple else None,
                    )
                )

    return links


def summarize(artworks: Iterable[Any]) -> Dict[str, Any]:
    """Dashboard counters for a full artwork set."""
    artworks = list(artworks)
    by_slot: Counter = Counter()
    characters = set()
    usage_count = 0
    unassigned = 0

    for artwork in artworks:
        usages = list(artwork.usages or [])
        if not usages:
            unassigned += 1
        for usage in usages:
            usage_count += 1
            by_slot[SlotName(usage.slot).value] += 1
            characters.add((CharacterType(usage.character_type), usage.character_id))

    return {
        "artworks": len(artworks),
        "usages": usage_count,
        "assigned": len(artworks) - unassigned,
        "unassigned": unassigned,
        "characters": len(characters),
        "by_slot": {sf.slot.value: by_slot.get(sf.slot.value, 0) for sf in SLOT_FIELDS},
    }
