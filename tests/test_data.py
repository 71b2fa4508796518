"""
Tests for snapshot discovery and parsing.
"""

import json

import pytest

from aeros import data


def _touch(directory, *names):
    for name in names:
        (directory / name).write_text("{}", encoding="utf-8")


class TestFindLatest:

    def test_picks_newest_timestamped_snapshot(self, tmp_path):
        _touch(tmp_path, "20250101_0000.json", "20251005_1200.json", "20250930_2359.json", "notes.json")
        assert data.find_latest_json(tmp_path).name == "20251005_1200.json"

    def test_ignores_other_extensions(self, tmp_path):
        _touch(tmp_path, "20251005_1200.json")
        assert data.find_latest_csv(tmp_path) is None

    def test_missing_directory(self, tmp_path):
        assert data.find_latest_json(tmp_path / "nope") is None

    def test_default_directory_from_config(self, tmp_path, monkeypatch):
        _touch(tmp_path, "20251005_1200.csv")
        monkeypatch.setattr(data, "CSV_UPLOAD_DIR", str(tmp_path))
        assert data.find_latest_csv().name == "20251005_1200.csv"


class TestReadCsvRows:

    def test_rows_are_trimmed_and_padded_with_missing_columns(self, tmp_path):
        path = tmp_path / "20251005_1200.csv"
        path.write_text("zip,NO2,O3,PM,lat,lon\n 10001 ,12, 40 ,8,40.75,-73.99\n", encoding="utf-8")

        (row,) = data.read_csv_rows(path)
        assert row["zip"] == "10001"
        assert row["O3"] == "40"
        assert row["AI"] is None and row["CH2O"] is None
        assert list(row) == data.CSV_COLUMNS


class TestPayloadHelpers:

    def test_by_state_skips_states_without_readings(self, states_payload, by_state):
        assert data.by_state_from_payload(states_payload) == by_state

    def test_find_state_pads_fips(self, states_payload):
        assert data.find_state(states_payload, "06")["name"] == "California"
        assert data.find_state(states_payload, "99") is None

    def test_find_zip_row(self):
        rows = [{"zip": "10001"}, {"zip": "94105"}]
        assert data.find_zip_row(rows, " 94105 ") == {"zip": "94105"}
        assert data.find_zip_row(rows, "00000") is None


class TestTagsCatalog:

    def test_loads_known_categories(self, tmp_path):
        path = tmp_path / "tags_catalog.json"
        path.write_text(json.dumps({"Activity": ["Running"], "Other": ["x"], "Lifestyle": "bad"}), encoding="utf-8")
        assert data.load_tags_catalog(path) == {"Activity": ["Running"], "Vulnerability": [], "Lifestyle": []}

    def test_non_object_catalog_is_rejected(self, tmp_path):
        path = tmp_path / "tags_catalog.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            data.load_tags_catalog(path)

    def test_missing_catalog_raises_oserror(self, tmp_path):
        with pytest.raises(OSError):
            data.load_tags_catalog(tmp_path / "missing.json")
