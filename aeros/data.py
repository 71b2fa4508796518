import json
import logging
import os
import re
from pathlib import Path

import polars as pl

from aeros.constants import POLLUTANTS, SNAPSHOT_CSV_PATTERN, SNAPSHOT_JSON_PATTERN
from aeros.utils import aggregate_index, pad_fips, to_num

logger = logging.getLogger(__name__)

DATA_DIR = Path.cwd() / "data" / "uploads"

CSV_UPLOAD_DIR = os.environ.get("CSV_UPLOAD_DIR", str(DATA_DIR))
JSON_UPLOAD_DIR = os.environ.get("JSON_UPLOAD_DIR", CSV_UPLOAD_DIR)
TAGS_CATALOG_PATH = os.environ.get("TAGS_CATALOG_PATH", str(Path(JSON_UPLOAD_DIR) / "tags_catalog.json"))

CSV_COLUMNS = ["zip", "NO2", "O3", "AI", "CH2O", "PM", "lat", "lon"]
TAG_CATEGORIES = ["Activity", "Vulnerability", "Lifestyle"]


def find_latest(directory: str | Path, pattern: str) -> Path | None:
    """Newest snapshot named ``YYYYMMDD_hhmm.<ext>``; the names sort chronologically."""
    directory = Path(directory)
    if not directory.is_dir():
        return None
    regex = re.compile(pattern, re.IGNORECASE)
    names = sorted(p.name for p in directory.iterdir() if p.is_file() and regex.match(p.name))
    if not names:
        logger.debug("No snapshot matching %s in %s", pattern, directory)
        return None
    return directory / names[-1]


def find_latest_csv(directory: str | Path | None = None) -> Path | None:
    return find_latest(directory or CSV_UPLOAD_DIR, SNAPSHOT_CSV_PATTERN)


def find_latest_json(directory: str | Path | None = None) -> Path | None:
    return find_latest(directory or JSON_UPLOAD_DIR, SNAPSHOT_JSON_PATTERN)


def read_json(path: str | Path):
    return json.loads(Path(path).read_text(encoding="utf-8"))


def read_csv_rows(path: str | Path) -> list[dict]:
    df = pl.read_csv(path, infer_schema_length=0)
    missing = [c for c in CSV_COLUMNS if c not in df.columns]
    if missing:
        df = df.with_columns([pl.lit(None, dtype=pl.Utf8).alias(c) for c in missing])
    df = df.select(CSV_COLUMNS).with_columns(
        [pl.col(c).str.strip_chars() for c in CSV_COLUMNS]
    )
    return df.to_dicts()


def by_state_from_payload(payload: dict) -> dict:
    """Index snapshot states by padded FIPS; states without any reading are left out."""
    by_state = {}
    for item in payload.get("states") or []:
        if not item.get("fips"):
            continue
        readings = {p: to_num(item.get(p)) for p in POLLUTANTS}
        ai = aggregate_index(readings)
        if ai is None:
            continue
        by_state[pad_fips(item["fips"])] = {"name": item.get("name"), **readings, "ai": ai}
    return by_state


def find_state(payload: dict, fips: str) -> dict | None:
    target = pad_fips(fips)
    for item in payload.get("states") or []:
        if item.get("fips") is not None and pad_fips(item["fips"]) == target:
            return item
    return None


def find_zip_row(rows: list[dict], zip_code: str) -> dict | None:
    target = str(zip_code).strip()
    return next((r for r in rows if r.get("zip") == target), None)


def load_tags_catalog(path: str | Path | None = None) -> dict:
    """Category lists from the catalog file; raises OSError or ValueError when unreadable."""
    raw = read_json(path or TAGS_CATALOG_PATH)
    if not isinstance(raw, dict):
        raise ValueError("Tag catalog must be a JSON object")
    return {c: raw[c] if isinstance(raw.get(c), list) else [] for c in TAG_CATEGORIES}

us_states_features: list | None = None
