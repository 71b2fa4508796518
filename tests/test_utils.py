"""
Tests for small parsing helpers and AQI level lookup.
"""

import pytest

from aeros.llm import parse_model_json
from aeros.utils import aqi_level, build_point_geojson, normalize_tag_list, pad_fips, to_num


@pytest.mark.parametrize("value,expected", [(6, "06"), ("6", "06"), (" 48 ", "48"), ("06", "06")])
def test_pad_fips(value, expected):
    assert pad_fips(value) == expected


@pytest.mark.parametrize("value,expected", [
    ("12.5", 12.5), (" 3 ", 3.0), (7, 7.0), ("", None), (None, None), ("abc", None), ("nan", None), ("inf", None),
])
def test_to_num(value, expected):
    assert to_num(value) == expected


@pytest.mark.parametrize("value,label", [
    (0, "Good"), (50, "Good"), (51, "Moderate"), (150, "Unhealthy for Sensitive"),
    (200, "Unhealthy"), (300, "Very Unhealthy"), (301, "Hazardous"),
])
def test_aqi_level_boundaries(value, label):
    assert aqi_level(value)["label"] == label


def test_normalize_tag_list_flattens_and_dedupes(states_payload):
    assert normalize_tag_list(states_payload["tags"]) == ["Running", "Outdoor Activities", "Asthma"]
    assert normalize_tag_list("Running") == []


def test_point_geojson_drops_rows_without_coordinates():
    rows = [
        {"zip": "10001", "NO2": "12", "O3": "40", "PM": None, "CH2O": None, "AI": None, "lat": "40.75", "lon": "-73.99"},
        {"zip": "99999", "NO2": "1", "lat": "", "lon": "-70"},
    ]
    collection = build_point_geojson(rows)
    (feature,) = collection["features"]
    assert feature["geometry"]["coordinates"] == [-73.99, 40.75]
    assert feature["properties"]["AI"] == 40.0


class TestParseModelJson:

    def test_fenced_json_is_parsed(self):
        parsed, summary = parse_model_json('```json\n{"dominant_pollutant": "O3"}\n```')
        assert parsed == {"dominant_pollutant": "O3"}
        assert summary == "OK"

    def test_prose_is_returned_raw(self):
        assert parse_model_json("Air is fine today.") == (None, "Air is fine today.")

    def test_json_array_is_not_a_model(self):
        assert parse_model_json("[1, 2]") == (None, "[1, 2]")
