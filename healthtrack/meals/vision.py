# -*- coding: utf-8 -*-
"""Meals — photo nutrition estimate via the Anthropic Messages API."""

from __future__ import annotations

import ast
import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..config import settings
from .models import Confidence, MealAnalysis

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"

_PROMPT = (
    "Analyze this food image and provide nutritional information. "
    "Return STRICT JSON only, no markdown, with this structure:\n"
    "{\n"
    '  "foodItems": ["item1", "item2"],\n'
    '  "mealName": "descriptive name",\n'
    '  "estimatedCalories": number,\n'
    '  "protein": number (grams),\n'
    '  "carbs": number (grams),\n'
    '  "fats": number (grams),\n'
    '  "fiber": number (grams),\n'
    '  "sugar": number (grams),\n'
    '  "servingSize": "description",\n'
    '  "confidence": "high/medium/low",\n'
    '  "notes": "any additional observations"\n'
    "}\n"
    "Be as accurate as possible with calorie and macro estimates based on visible portion sizes."
)


@dataclass(frozen=True)
class VisionSettings:
    base_url: str
    api_key: Optional[str]
    model: str
    timeout: float
    max_tokens: int


def resolve_vision_settings() -> VisionSettings:
    return VisionSettings(
        base_url=settings.anthropic_base_url.rstrip("/"),
        api_key=settings.anthropic_api_key,
        model=settings.vision_model,
        timeout=settings.vision_timeout,
        max_tokens=settings.vision_max_tokens,
    )


def fallback_analysis(reason: str) -> MealAnalysis:
    return MealAnalysis(
        food_items=["Unknown food"],
        meal_name="Unknown meal",
        calories=0,
        protein=0.0,
        carbs=0.0,
        fats=0.0,
        fiber=0.0,
        sugar=0.0,
        serving_size="Unknown",
        confidence=Confidence.low,
        notes="Could not analyze image",
        extra={"error": reason},
    )


def _remove_trailing_commas(text: str) -> str:
    """Remove trailing commas in JSON while preserving string literals."""
    out: list[str] = []
    in_str = False
    escaped = False
    i = 0
    while i < len(text):
        ch = text[i]
        if in_str:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            i += 1
            continue

        if ch == "\"":
            in_str = True
            out.append(ch)
            i += 1
            continue

        if ch == ",":
            j = i + 1
            while j < len(text) and text[j] in " \t\r\n":
                j += 1
            if j < len(text) and text[j] in "}]":
                i += 1
                continue

        out.append(ch)
        i += 1
    return "".join(out)


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    cleaned = re.sub(r"^```(?:json)?\s*", "", cleaned, flags=re.IGNORECASE)
    return re.sub(r"\s*```$", "", cleaned)


def _iter_json_object_candidates(text: str) -> list[str]:
    """Extract balanced {...} candidates from arbitrary text.

    Models sometimes wrap JSON with extra prose or a code fence.
    Braces are matched while respecting string literals.
    """
    cleaned = _strip_fences(text)

    candidates: list[str] = []
    in_str = False
    escaped = False
    depth = 0
    start_idx: int | None = None

    for i, ch in enumerate(cleaned):
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            continue

        if ch == "\"":
            in_str = True
            continue

        if ch == "{":
            if depth == 0:
                start_idx = i
            depth += 1
            continue

        if ch == "}":
            if depth > 0:
                depth -= 1
                if depth == 0 and start_idx is not None:
                    candidates.append(cleaned[start_idx : i + 1])
                    start_idx = None
            continue

    return candidates


def _sanitize_json_like(text: str) -> str:
    # Curly quotes, trailing commas and non-finite floats.
    cleaned = text
    cleaned = cleaned.replace("“", "\"").replace("”", "\"").replace("‘", "'").replace("’", "'")
    cleaned = _remove_trailing_commas(cleaned)
    cleaned = re.sub(r"\bNaN\b", "null", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\b-?Infinity\b", "null", cleaned, flags=re.IGNORECASE)
    return cleaned


def _parse_model_output_json(content: str) -> Dict[str, Any]:
    last_error: Exception | None = None

    for candidate in _iter_json_object_candidates(content):
        sanitized = _sanitize_json_like(candidate)
        for attempt in (candidate, sanitized):
            try:
                parsed = json.loads(attempt)
                if isinstance(parsed, dict):
                    return parsed
            except ValueError as exc:
                last_error = exc

        # Python-literal dicts (single quotes/None/True/False).
        for py_candidate in (candidate, sanitized):
            try:
                py = py_candidate
                py = re.sub(r"\bnull\b", "None", py, flags=re.IGNORECASE)
                py = re.sub(r"\btrue\b", "True", py, flags=re.IGNORECASE)
                py = re.sub(r"\bfalse\b", "False", py, flags=re.IGNORECASE)
                parsed = ast.literal_eval(py)
                if isinstance(parsed, dict):
                    return parsed
            except (ValueError, SyntaxError) as exc:
                last_error = exc

    raise ValueError(f"Failed to parse model JSON: {last_error or 'no JSON object found'}")


def _extract_text_from_response(data: object) -> str:
    """Concatenate the text blocks of a Messages API response."""
    if not isinstance(data, dict):
        return ""
    content = data.get("content")
    if not isinstance(content, list):
        return ""
    out: list[str] = []
    for block in content:
        if not isinstance(block, dict):
            continue
        if block.get("type") != "text":
            continue
        text = block.get("text")
        if isinstance(text, str) and text:
            out.append(text)
    return "".join(out)


def _extract_error_from_response(data: object) -> str | None:
    if not isinstance(data, dict):
        return None
    if data.get("type") != "error":
        return None
    err = data.get("error")
    if isinstance(err, dict):
        kind = err.get("type") or "api_error"
        message = err.get("message") or "unknown error"
        return f"{kind}: {message}"
    return "api_error"


_NUM_RE = re.compile(r"-?\d+(?:\.\d+)?")


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        m = _NUM_RE.search(s.replace(",", ""))
        if not m:
            return None
        return float(m.group(0))
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        # "rice, chicken" is a common shape for a single-string answer.
        return [s.strip() for s in value.split(",") if s.strip()]
    if isinstance(value, list):
        out: List[str] = []
        for x in value:
            if x is None:
                continue
            if isinstance(x, dict):
                x = x.get("name") or x.get("food") or x.get("item")
                if x is None:
                    continue
            s = str(x).strip()
            if s:
                out.append(s)
        return out
    s = str(value).strip()
    return [s] if s else []


def _first_present(obj: Dict[str, Any], keys: List[str]) -> Any:
    for k in keys:
        if k in obj:
            return obj.get(k)
    return None


def _coerce_confidence(value: Any) -> Confidence:
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"high", "medium", "low"}:
            return Confidence(v)
    num = _coerce_float(value)
    if num is None:
        return Confidence.low
    if num > 1 and num <= 100:
        num = num / 100.0
    if num >= 0.75:
        return Confidence.high
    if num >= 0.4:
        return Confidence.medium
    return Confidence.low


_KNOWN_KEYS = {
    "foodItems",
    "food_items",
    "items",
    "foods",
    "mealName",
    "meal_name",
    "name",
    "estimatedCalories",
    "calories",
    "calories_kcal",
    "kcal",
    "protein",
    "protein_g",
    "carbs",
    "carbs_g",
    "carbohydrates",
    "fats",
    "fat",
    "fat_g",
    "fiber",
    "fiber_g",
    "sugar",
    "sugar_g",
    "servingSize",
    "serving_size",
    "portion",
    "confidence",
    "notes",
}


def _normalize_analysis(parsed: Dict[str, Any]) -> Dict[str, Any]:
    """Map the model's keys onto ``MealAnalysis`` fields (best-effort)."""

    def pick_num(keys: List[str]) -> float:
        val = _coerce_float(_first_present(parsed, keys))
        return max(0.0, val) if val is not None else 0.0

    food_items = _as_str_list(_first_present(parsed, ["foodItems", "food_items", "items", "foods"]))
    meal_name = _first_present(parsed, ["mealName", "meal_name", "name"])
    if not isinstance(meal_name, str) or not meal_name.strip():
        meal_name = ", ".join(food_items) if food_items else "Unknown meal"
    serving = _first_present(parsed, ["servingSize", "serving_size", "portion"])
    notes = parsed.get("notes")

    return {
        "food_items": food_items,
        "meal_name": meal_name.strip(),
        "calories": int(round(pick_num(["estimatedCalories", "calories", "calories_kcal", "kcal"]))),
        "protein": pick_num(["protein", "protein_g"]),
        "carbs": pick_num(["carbs", "carbs_g", "carbohydrates"]),
        "fats": pick_num(["fats", "fat", "fat_g"]),
        "fiber": pick_num(["fiber", "fiber_g"]),
        "sugar": pick_num(["sugar", "sugar_g"]),
        "serving_size": serving.strip() if isinstance(serving, str) and serving.strip() else "Unknown",
        "confidence": _coerce_confidence(parsed.get("confidence")),
        "notes": notes.strip() if isinstance(notes, str) else "",
        "extra": {k: v for k, v in parsed.items() if k not in _KNOWN_KEYS},
    }


def _call_messages_api(cfg: VisionSettings, image_bytes: bytes, image_mime: str) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "model": cfg.model,
        "max_tokens": cfg.max_tokens,
        "messages": [
            {
                "role": "user",
                "content": [
                    {
                        "type": "image",
                        "source": {
                            "type": "base64",
                            "media_type": image_mime,
                            "data": base64.b64encode(image_bytes).decode("ascii"),
                        },
                    },
                    {"type": "text", "text": _PROMPT},
                ],
            }
        ],
    }
    headers = {
        "content-type": "application/json",
        "x-api-key": cfg.api_key or "",
        "anthropic-version": ANTHROPIC_VERSION,
    }
    with httpx.Client(timeout=cfg.timeout) as client:
        resp = client.post(f"{cfg.base_url}/v1/messages", headers=headers, json=payload)
    try:
        data = resp.json()
    except ValueError as exc:
        snippet = (resp.text or "").replace("\n", " ").strip()[:200]
        raise RuntimeError(f"Vision API returned non-JSON response ({resp.status_code}): {snippet}") from exc
    api_error = _extract_error_from_response(data)
    if api_error:
        raise RuntimeError(api_error)
    resp.raise_for_status()
    return data


def analyze_meal_image(*, image_bytes: bytes, image_mime: str) -> Tuple[MealAnalysis, bool]:
    """Estimate nutrition for a meal photo.

    Returns ``(analysis, analyzed)``. ``analyzed`` is False when the fallback
    estimate was returned; the call itself never raises, so a failed analysis
    still lets the user save and correct the meal manually.
    """
    cfg = resolve_vision_settings()
    if not cfg.api_key:
        logger.warning("meal vision skipped: ANTHROPIC_API_KEY is not set")
        return fallback_analysis("vision API key not configured"), False

    try:
        data = _call_messages_api(cfg, image_bytes, image_mime)
    except (httpx.HTTPError, RuntimeError) as exc:
        logger.warning("meal vision call failed: %s", exc, exc_info=True)
        return fallback_analysis(str(exc)), False

    content = _extract_text_from_response(data)
    try:
        parsed = _parse_model_output_json(content)
    except ValueError as exc:
        logger.warning("meal vision output parse failed: %s", exc, exc_info=True)
        return fallback_analysis(str(exc)), False

    return MealAnalysis.model_validate(_normalize_analysis(parsed)), True
