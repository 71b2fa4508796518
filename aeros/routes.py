import logging

import httpx
from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse, Response
from google.genai import errors as genai_errors

from aeros import data
from aeros.choropleth import ChoroplethMap, ChoroplethOptions
from aeros.constants import POLLUTANTS
from aeros.data import (
    by_state_from_payload, find_latest_csv, find_latest_json, find_state, find_zip_row,
    load_tags_catalog, read_csv_rows, read_json
)
from aeros.llm import MISSING_KEY_MESSAGE, LLMUnavailable, generate_text, parse_model_json, state_prompt, zip_prompt
from aeros.models import PollutantSnapshot, StateRecommendationRequest, ZipRecommendationRequest
from aeros.render import records_from_by_state
from aeros.tags import tags_from_catalog
from aeros.utils import aggregate_index, build_point_geojson, normalize_tag_list, pad_fips, to_num

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/map/api")


def _latest_states_payload():
    json_path = find_latest_json()
    if not json_path:
        raise HTTPException(404, "No JSON found")
    return json_path, read_json(json_path)


@router.get("/states")
def get_states():
    json_path, payload = _latest_states_payload()
    tags_raw = payload.get("tags") if isinstance(payload.get("tags"), list) else None
    return {
        "byState": by_state_from_payload(payload),
        "json": json_path.name,
        "tags_raw": tags_raw,
        "tags": normalize_tag_list(tags_raw),
    }


@router.get("/cities")
def get_cities():
    csv_path = find_latest_csv()
    if not csv_path:
        raise HTTPException(404, "No CSV found")
    collection = build_point_geojson(read_csv_rows(csv_path))
    collection["csv"] = csv_path.name
    return collection


@router.get("/tags-catalog")
def get_tags_catalog():
    try:
        catalog = load_tags_catalog()
    except (OSError, ValueError) as e:
        raise HTTPException(404, f"Catalog not found: {e}")
    return {**catalog, "tags": [t.to_dict() for t in tags_from_catalog(catalog)]}


@router.post("/state-recommendations")
def get_state_recommendations(req: StateRecommendationRequest):
    if not req.fips:
        raise HTTPException(400, "fips is required")

    _, payload = _latest_states_payload()
    state = find_state(payload, req.fips)
    if state is None:
        raise HTTPException(404, "FIPS not found in JSON")

    fips = pad_fips(state["fips"])
    sent = req.pollutants or PollutantSnapshot()
    pollutants = {}
    for p in POLLUTANTS:
        value = getattr(sent, p)
        pollutants[p] = value if value is not None else to_num(state.get(p))
    pollutants["AI"] = sent.AI if sent.AI is not None else aggregate_index(pollutants)
    state_name = req.state_name or state.get("name") or f"FIPS {fips}"

    model, summary = None, MISSING_KEY_MESSAGE
    try:
        raw = generate_text(state_prompt(state_name, fips, req.country, req.date, req.user_text,
                                         req.tags, pollutants))
        model, summary = parse_model_json(raw)
    except LLMUnavailable:
        logger.info("GOOGLE_API_KEY not set, returning placeholder summary")
    except (genai_errors.APIError, httpx.HTTPError) as e:
        logger.error("Gemini call failed for FIPS %s: %s", fips, e)
        return JSONResponse({"error": str(e) or "error"}, status_code=500)

    return {
        "input": {
            "fips": fips,
            "state": state_name,
            "country": req.country,
            "date": req.date,
            "user_text": req.user_text,
            "tags": req.tags,
            "tag_ids": req.tag_ids,
        },
        "pollutants": pollutants,
        "model": model,
        "summary": summary,
    }


@router.post("/recommendations")
def get_zip_recommendations(req: ZipRecommendationRequest):
    if not req.zip:
        raise HTTPException(400, "zip is required")

    csv_path = find_latest_csv()
    if not csv_path:
        raise HTTPException(404, "No CSV found")
    row = find_zip_row(read_csv_rows(csv_path), req.zip)
    if row is None:
        raise HTTPException(404, "ZIP not found in CSV")

    pollutants = {p: to_num(row.get(p)) for p in POLLUTANTS}
    ai = to_num(row.get("AI"))
    pollutants["AI"] = ai if ai is not None else aggregate_index(pollutants)

    summary = MISSING_KEY_MESSAGE
    try:
        summary = generate_text(zip_prompt(req.zip, req.user_text, pollutants))
    except LLMUnavailable:
        logger.info("GOOGLE_API_KEY not set, returning placeholder summary")
    except (genai_errors.APIError, httpx.HTTPError) as e:
        logger.error("Gemini call failed for ZIP %s: %s", req.zip, e)
        return JSONResponse({"error": str(e) or "error"}, status_code=500)

    return {"zip": row["zip"], **pollutants, "summary": summary}


@router.get("/choropleth.svg")
def get_choropleth_svg(
    width: int = Query(960, ge=200, le=4000),
    height: int = Query(600, ge=150, le=4000),
    padding: float = Query(20, ge=0),
    selected: str | None = None,
):
    if data.us_states_features is None:
        raise HTTPException(503, "Geography unavailable")
    if padding * 2 >= min(width, height):
        raise HTTPException(400, "padding leaves no room for the map")

    _, payload = _latest_states_payload()
    chart = ChoroplethMap(ChoroplethOptions(width=width, height=height, padding=padding))
    chart.set_data(data.us_states_features, records_from_by_state(by_state_from_payload(payload)))

    now = None
    if selected:
        transition = chart.select(selected)
        if transition is None:
            raise HTTPException(404, f"No rendered state with FIPS {selected}")
        now = transition.ends_at
    return Response(chart.to_svg(now), media_type="image/svg+xml")
