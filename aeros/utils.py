import math

from aeros.constants import AQI_LEVELS, POLLUTANTS


def pad_fips(value) -> str:
    return str(value).strip().zfill(2)


def to_num(value) -> float | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def aggregate_index(readings: dict) -> float | None:
    """Max of the pollutant readings that are present, None when all are missing."""
    vals = [to_num(readings.get(p)) for p in POLLUTANTS]
    vals = [v for v in vals if v is not None]
    return max(vals) if vals else None


def normalize_tag_list(raw_tags) -> list[str]:
    """Flatten ["Running,Outdoor Activities", ...] into unique tags, keeping first-seen order."""
    if not isinstance(raw_tags, list):
        return []
    seen = {}
    for raw in raw_tags:
        for part in str(raw).split(","):
            tag = part.strip()
            if tag:
                seen.setdefault(tag, None)
    return list(seen)


def aqi_level(value: float) -> dict:
    for level in AQI_LEVELS:
        if level["upper"] is None or value <= level["upper"]:
            return level
    return AQI_LEVELS[-1]


def build_point_geojson(rows: list[dict]) -> dict:
    features = []
    for row in rows:
        lat, lon = to_num(row.get("lat")), to_num(row.get("lon"))
        if lat is None or lon is None:
            continue
        props = {"zip": row.get("zip", "")}
        for p in POLLUTANTS:
            props[p] = to_num(row.get(p))
        props["AI"] = to_num(row.get("AI"))
        if props["AI"] is None:
            props["AI"] = aggregate_index(props)
        features.append({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [lon, lat]},
            "properties": props,
        })
    return {"type": "FeatureCollection", "features": features}


def strip_json_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()
