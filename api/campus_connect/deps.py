import uuid
from typing import Any

from fastapi import HTTPException


def parse_uuid(raw: Any, field: str) -> str:
    value = str(raw or "").strip()
    if not value:
        raise HTTPException(status_code=400, detail=f"{field} required")
    try:
        return str(uuid.UUID(value))
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{field} must be a valid UUID")


def user_id_from(current_user: dict[str, Any]) -> str:
    return str(current_user["id"])
