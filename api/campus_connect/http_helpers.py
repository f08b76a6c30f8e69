import re
from typing import Any

from fastapi import HTTPException

from .profiles import COMMUNICATION_STYLES, DATING_PREFERENCES, WAKE_CYCLES, normalize_communication

MAX_LIST_ITEMS = 20
MAX_PHOTOS = 6
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_TEXT_LIMITS = {
    "name": 80,
    "branch": 80,
    "bio": 500,
    "gender": 40,
    "instagram_handle": 64,
    "avatar_url": 500,
    "prompt_good_at": 200,
    "prompt_care_about": 200,
    "prompt_looking_for": 200,
    "college": 120,
}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_registration_input(email: str, password: str) -> tuple[str, str]:
    e = normalize_email(email)
    if len(e) > 254 or not _EMAIL_RE.match(e):
        raise HTTPException(status_code=400, detail="Invalid email format")
    if len(password) < 8:
        raise HTTPException(status_code=400, detail="Password must be at least 8 characters")
    return e, password


def clean_string_list(values: Any, field: str, max_items: int = MAX_LIST_ITEMS) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        values = values.split(",")
    if not isinstance(values, list):
        raise HTTPException(status_code=400, detail=f"{field} must be a list")
    out: list[str] = []
    for value in values:
        v = str(value or "").strip()
        if v and v not in out:
            out.append(v)
    if len(out) > max_items:
        raise HTTPException(status_code=400, detail=f"{field} allows at most {max_items} items")
    return out


def _level(value: Any, field: str) -> int:
    try:
        level = int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"{field} must be an integer")
    if level < 0 or level > 10:
        raise HTTPException(status_code=400, detail=f"{field} must be between 0 and 10")
    return level


def sanitize_profile_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Validate a partial profile update; only keys present are returned."""
    out: dict[str, Any] = {}
    for key, limit in _TEXT_LIMITS.items():
        if key not in payload:
            continue
        raw = payload.get(key)
        value = str(raw).strip() if raw is not None else None
        if value and len(value) > limit:
            raise HTTPException(status_code=400, detail=f"{key} must be {limit} characters or fewer")
        out[key] = value or None
    if "gender" in out and out["gender"]:
        out["gender"] = out["gender"].lower()
    if out.get("name") is None and "name" in out:
        raise HTTPException(status_code=400, detail="name cannot be empty")

    for key in ("interests", "hobbies", "goals"):
        if key in payload:
            out[key] = clean_string_list(payload.get(key), key)
    if "photos" in payload:
        photos = clean_string_list(payload.get("photos"), "photos", max_items=MAX_PHOTOS)
        if any(not p.startswith(("http://", "https://")) for p in photos):
            raise HTTPException(status_code=400, detail="photos must be http(s) URLs")
        out["photos"] = photos

    for key in ("personality_social_level", "personality_activity_level"):
        if key in payload:
            out[key] = _level(payload.get(key), key)

    if "personality_communication" in payload:
        raw = str(payload.get("personality_communication") or "").strip().lower()
        if raw not in COMMUNICATION_STYLES and raw != "vc":
            raise HTTPException(status_code=400, detail=f"personality_communication must be one of: {', '.join(COMMUNICATION_STYLES)}")
        out["personality_communication"] = normalize_communication(raw)
    if "personality_wake_cycle" in payload:
        value = str(payload.get("personality_wake_cycle") or "").strip().lower()
        if value not in WAKE_CYCLES:
            raise HTTPException(status_code=400, detail=f"personality_wake_cycle must be one of: {', '.join(WAKE_CYCLES)}")
        out["personality_wake_cycle"] = value

    if "dating_mode" in payload:
        out["dating_mode"] = bool(payload.get("dating_mode"))
    if "dating_preference" in payload:
        raw = payload.get("dating_preference")
        value = str(raw).strip().lower() if raw is not None else None
        if value and value not in DATING_PREFERENCES:
            raise HTTPException(status_code=400, detail=f"dating_preference must be one of: {', '.join(DATING_PREFERENCES)}")
        out["dating_preference"] = value or None

    for key in ("age", "year"):
        if key in payload:
            raw = payload.get(key)
            if raw is None or raw == "":
                out[key] = None
                continue
            try:
                out[key] = int(raw)
            except (TypeError, ValueError):
                raise HTTPException(status_code=400, detail=f"{key} must be an integer")
    if "onboarding_completed" in payload:
        out["onboarding_completed"] = bool(payload.get("onboarding_completed"))
    return out
