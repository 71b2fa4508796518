"""Preference tags: the catalog and the user's selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from aeros.constants import TAG_CATEGORY_LABELS
from aeros.models import ProfileTag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreferenceTag:
    tag_id: int
    tag_name: str
    tag_type: str

    def to_dict(self) -> dict:
        return {"tagId": self.tag_id, "tagName": self.tag_name, "tagType": self.tag_type}

    @classmethod
    def from_dict(cls, data: dict) -> "PreferenceTag":
        tag_type = str(data.get("tagType", ""))
        return cls(int(data["tagId"]), str(data["tagName"]), TAG_CATEGORY_LABELS.get(tag_type, tag_type))


def as_preference_tag(tag: PreferenceTag | ProfileTag) -> PreferenceTag:
    """Profile tags arrive as wire models; the selection works on PreferenceTag."""
    if isinstance(tag, PreferenceTag):
        return tag
    return PreferenceTag.from_dict(tag.model_dump())


def tags_from_catalog(catalog: dict) -> list[PreferenceTag]:
    """Flatten ``{"Activity": [...], ...}`` into tags whose category comes from the catalog key.

    Plain string entries get sequential ids in catalog order; entries that
    already carry ``tagId``/``tagName`` keep their id.
    """
    if isinstance(catalog.get("tags"), list):
        return [PreferenceTag.from_dict(t) for t in catalog["tags"]]

    tags = []
    next_id = 1
    for category, entries in catalog.items():
        if not isinstance(entries, list):
            continue
        label = TAG_CATEGORY_LABELS.get(category, category)
        for entry in entries:
            if isinstance(entry, dict):
                tag = PreferenceTag(int(entry["tagId"]), str(entry["tagName"]), label)
                next_id = max(next_id, tag.tag_id + 1)
            else:
                tag = PreferenceTag(next_id, str(entry), label)
                next_id += 1
            tags.append(tag)
    return tags


class TagCatalog:
    def __init__(self, tags: Iterable[PreferenceTag] = ()):
        self.tags = list(tags)
        self._by_id = {t.tag_id: t for t in self.tags}
        self._by_name = {t.tag_name.casefold(): t for t in self.tags}

    @classmethod
    def from_payload(cls, payload: dict) -> "TagCatalog":
        return cls(tags_from_catalog(payload))

    def __len__(self) -> int:
        return len(self.tags)

    def __contains__(self, tag_id: int) -> bool:
        return tag_id in self._by_id

    def get(self, tag_id: int) -> PreferenceTag | None:
        return self._by_id.get(tag_id)

    def resolve(self, tag: PreferenceTag) -> PreferenceTag | None:
        return self._by_id.get(tag.tag_id) or self._by_name.get(tag.tag_name.casefold())

    def by_category(self) -> dict[str, list[PreferenceTag]]:
        grouped: dict[str, list[PreferenceTag]] = {}
        for tag in self.tags:
            grouped.setdefault(tag.tag_type, []).append(tag)
        return grouped


class TagSelection:
    """The set of selected tag ids. Toggling is the only way it changes after seeding."""

    def __init__(self, catalog: TagCatalog | None = None, selected: Iterable[int] = ()):
        self.catalog = catalog or TagCatalog()
        self._selected: dict[int, None] = dict.fromkeys(selected)

    @property
    def selected_ids(self) -> list[int]:
        return list(self._selected)

    def __len__(self) -> int:
        return len(self._selected)

    def is_selected(self, tag_id: int) -> bool:
        return tag_id in self._selected

    def toggle(self, tag_id: int) -> bool:
        if tag_id in self._selected:
            del self._selected[tag_id]
            return False
        self._selected[tag_id] = None
        return True

    def seed_from_profile(self, profile_tags: Iterable[PreferenceTag | ProfileTag] | None) -> list[int]:
        """Replace the selection with the profile's saved tags, or empty it when there are none."""
        self._selected = {}
        for tag in map(as_preference_tag, profile_tags or ()):
            resolved = self.catalog.resolve(tag) if len(self.catalog) else tag
            if resolved is None:
                logger.debug("Profile tag %r is not in the catalog", tag.tag_name)
                continue
            self._selected[resolved.tag_id] = None
        return self.selected_ids

    def selected_names(self) -> list[str]:
        names = []
        for tag_id in self._selected:
            tag = self.catalog.get(tag_id)
            if tag is None:
                logger.warning("Selected tag id %d is not in the catalog; sending its id only", tag_id)
                continue
            names.append(tag.tag_name)
        return names

    def counts_by_category(self) -> dict[str, tuple[int, int]]:
        return {
            category: (sum(1 for t in tags if t.tag_id in self._selected), len(tags))
            for category, tags in self.catalog.by_category().items()
        }
