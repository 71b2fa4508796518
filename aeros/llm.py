"""Pass-through to the Gemini API for recommendation text."""

import json
import logging
import os

from google import genai

from aeros.utils import strip_json_fences

logger = logging.getLogger(__name__)

GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
MISSING_KEY_MESSAGE = "Set GOOGLE_API_KEY to use Gemini."

RESPONSE_SCHEMA = """{
  "state": { "name": string, "fips": string, "country": string, "date": string },
  "dominant_pollutant": "NO2" | "O3" | "PM" | "CH2O" | "Unknown",
  "risk_level_label": "Good" | "Moderate" | "USG" | "Unhealthy" | "Very Unhealthy" | "Hazardous" | "Unknown",
  "scores": { "outdoor_suitability": number, "health_risk": number, "confidence": number },
  "pollutants": { "NO2": number | null, "O3": number | null, "PM": number | null, "CH2O": number | null, "AI": number | null },
  "tailored_notes": string[],
  "recommendations": string[],
  "indoor_alternatives": string[],
  "disclaimer": string
}"""


class LLMUnavailable(Exception):
    pass


def generate_text(prompt: str, model: str | None = None) -> str:
    api_key = os.environ.get("GOOGLE_API_KEY")
    if not api_key:
        raise LLMUnavailable(MISSING_KEY_MESSAGE)
    client = genai.Client(api_key=api_key)
    resp = client.models.generate_content(model=model or GEMINI_MODEL, contents=prompt)
    return resp.text or ""


def _fmt(value) -> str:
    return "N/A" if value is None else f"{value:g}"


def state_prompt(state_name: str, fips: str, country: str, date: str | None,
                 user_text: str | None, tags: list[str], pollutants: dict) -> str:
    lines = [
        "You are an environmental health assistant. Using the air quality data and user context below,",
        "return only strict JSON that follows the schema. No commentary.",
        "",
        f"Country: {country}",
        f"State: {state_name} (FIPS {fips})",
        f"Date: {date or 'N/A'}",
        f"User intent: {user_text or 'N/A'}",
        f"User tags: {', '.join(tags) if tags else 'N/A'}",
        "",
    ]
    lines += [f"{key}: {_fmt(pollutants.get(key))}" for key in ("NO2", "O3", "PM", "CH2O", "AI")]
    lines += [
        "",
        "Scores are 0-100: outdoor_suitability (higher is safer), health_risk (higher is riskier), confidence.",
        "Offer indoor alternatives when outdoor air is unhealthy. Keep advice practical and non-prescriptive.",
        "",
        RESPONSE_SCHEMA,
    ]
    return "\n".join(lines)


def zip_prompt(zip_code: str, user_text: str | None, pollutants: dict) -> str:
    values = "\n".join(f"- {key}: {_fmt(pollutants.get(key))}" for key in ("NO2", "O3", "PM", "CH2O", "AI"))
    return (
        f"You are an environmental assistant. Use strictly these AQI values for ZIP {zip_code}:\n"
        f"{values}\n\n"
        f'User: "{user_text or "Give me activity recommendations"}"\n\n'
        "Answer with: overall risk (low/medium/high) and why; recommendations per activity "
        "(running, cycling, children, older adults); mitigation actions."
    )


def parse_model_json(raw: str) -> tuple[dict | None, str]:
    """Parsed object and ``"OK"``, or ``None`` and the raw text when it is not a JSON object."""
    try:
        parsed = json.loads(strip_json_fences(raw))
    except ValueError:
        logger.info("Model reply is not JSON, returning raw text")
        return None, raw
    if not isinstance(parsed, dict):
        return None, raw
    return parsed, "OK"
