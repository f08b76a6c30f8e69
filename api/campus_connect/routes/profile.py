import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from .. import repo
from ..auth.deps import get_current_user
from ..deps import parse_uuid, user_id_from
from ..http_helpers import sanitize_profile_payload
from ..profiles import profile_from_row, public_profile
from ..services import events

logger = logging.getLogger(__name__)

router = APIRouter()
scaffold_router = APIRouter()


def _own_profile(row: dict[str, Any]) -> dict[str, Any]:
    profile = profile_from_row(row)
    return {
        **public_profile(profile),
        "dating_preference": profile.dating_preference,
        "college": row.get("college"),
        "verified": bool(row.get("verified")),
        "onboarding_completed": bool(row.get("onboarding_completed")),
    }


@scaffold_router.get("/health")
def profile_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "profile"}


@router.get("/profiles/me")
def get_my_profile(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    row = repo.get_profile_row(user_id_from(current_user))
    if not row:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {"profile": _own_profile(row)}


@router.put("/profiles/me")
def update_my_profile(payload: dict[str, Any], current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    uid = user_id_from(current_user)
    fields = sanitize_profile_payload(payload)
    existing = repo.get_profile_row(uid)
    if existing is None and not fields.get("name"):
        raise HTTPException(status_code=400, detail="name required")
    row = repo.upsert_profile(uid, fields)
    if not row:
        raise HTTPException(status_code=500, detail="Profile could not be saved")
    if fields.get("onboarding_completed") and not (existing or {}).get("onboarding_completed"):
        events.record_event("onboarding_completed", user_id=uid)
    logger.info("[profile] updated user_id=%s fields=%s", uid, sorted(fields.keys()))
    return {"profile": _own_profile(row)}


@router.get("/profiles/me/stats")
def get_my_stats(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, int]:
    return repo.match_stats(user_id_from(current_user))


@router.get("/profiles/{profile_id}")
def get_profile(profile_id: str, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    pid = parse_uuid(profile_id, "profile_id")
    uid = user_id_from(current_user)
    if pid != uid and repo.is_blocked_pair(uid, pid):
        raise HTTPException(status_code=404, detail="Profile not found")
    profile = repo.get_profile(pid)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {"profile": public_profile(profile)}
