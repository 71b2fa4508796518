"""
Tests for the tag catalog and the user's tag selection.
"""

import pytest

from aeros.models import ProfileTag
from aeros.tags import PreferenceTag, TagCatalog, TagSelection, as_preference_tag, tags_from_catalog


@pytest.fixture
def catalog(tags_catalog):
    return TagCatalog.from_payload(tags_catalog)


class TestCatalog:

    def test_category_comes_from_catalog_key(self, catalog):
        assert [(t.tag_id, t.tag_name, t.tag_type) for t in catalog.tags] == [
            (1, "Running", "Outdoor Activities"),
            (2, "Cycling", "Outdoor Activities"),
            (3, "Asthma", "Vulnerability and Health"),
            (4, "Outdoor worker", "Occupation and Lifestyle"),
        ]

    def test_name_does_not_decide_category(self):
        # "Outdoor" in the name must not pull the tag into the activity group
        tags = tags_from_catalog({"Lifestyle": ["Outdoor worker"]})
        assert tags[0].tag_type == "Occupation and Lifestyle"

    def test_explicit_tag_list_is_preferred(self):
        payload = {"Activity": ["Running"], "tags": [{"tagId": 7, "tagName": "Hiking", "tagType": "Activity"}]}
        assert tags_from_catalog(payload) == [PreferenceTag(7, "Hiking", "Outdoor Activities")]

    def test_dict_entries_keep_their_ids(self):
        tags = tags_from_catalog({"Activity": [{"tagId": 10, "tagName": "Running"}, "Cycling"]})
        assert [(t.tag_id, t.tag_name) for t in tags] == [(10, "Running"), (11, "Cycling")]

    def test_resolve_by_id_then_name(self, catalog):
        assert catalog.resolve(PreferenceTag(3, "whatever", "")).tag_name == "Asthma"
        assert catalog.resolve(PreferenceTag(99, "cycling", "")).tag_id == 2
        assert catalog.resolve(PreferenceTag(99, "Skiing", "")) is None

    def test_by_category_groups_tags(self, catalog):
        grouped = catalog.by_category()
        assert [t.tag_name for t in grouped["Outdoor Activities"]] == ["Running", "Cycling"]


class TestTagSelection:

    @pytest.fixture
    def selection(self, catalog):
        return TagSelection(catalog, selected=[3])

    @pytest.mark.parametrize("tag_id", [1, 3, 42])
    def test_double_toggle_restores_selection(self, selection, tag_id):
        before = selection.selected_ids
        selection.toggle(tag_id)
        selection.toggle(tag_id)
        assert selection.selected_ids == before

    def test_toggle_reports_new_state(self, selection):
        assert selection.toggle(1) is True
        assert selection.is_selected(1)
        assert selection.toggle(1) is False
        assert not selection.is_selected(1)

    def test_selected_names_follow_selection_order(self, selection):
        selection.toggle(1)
        assert selection.selected_names() == ["Asthma", "Running"]

    def test_seed_from_profile_replaces_selection(self, selection):
        seeded = selection.seed_from_profile([
            PreferenceTag(1, "Running", "Outdoor Activities"),
            PreferenceTag(50, "Outdoor Worker", "Occupation and Lifestyle"),
            PreferenceTag(60, "Skiing", "Outdoor Activities"),
        ])
        assert seeded == [1, 4]
        assert not selection.is_selected(3)

    def test_seed_with_no_profile_tags_clears(self, selection):
        assert selection.seed_from_profile(None) == []
        assert len(selection) == 0

    def test_counts_by_category(self, selection):
        selection.toggle(2)
        assert selection.counts_by_category() == {
            "Outdoor Activities": (1, 2),
            "Vulnerability and Health": (1, 1),
            "Occupation and Lifestyle": (0, 1),
        }

    def test_seed_accepts_profile_wire_tags(self, selection):
        profile_tags = [ProfileTag(tagId=4, tagName="Outdoor worker", tagType="Lifestyle")]
        assert selection.seed_from_profile(profile_tags) == [4]
        assert selection.selected_names() == ["Outdoor worker"]

    def test_unknown_ids_are_kept_in_selection(self, selection):
        selection.toggle(42)
        assert selection.selected_ids == [3, 42]
        assert selection.selected_names() == ["Asthma"]


def test_as_preference_tag_maps_category_label():
    tag = as_preference_tag(ProfileTag(tagId=1, tagName="Running", tagType="Activity"))
    assert tag == PreferenceTag(1, "Running", "Outdoor Activities")
