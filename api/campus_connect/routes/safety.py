import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from .. import repo
from ..auth.deps import get_current_user
from ..deps import parse_uuid, user_id_from
from ..services import events

logger = logging.getLogger(__name__)

router = APIRouter()
scaffold_router = APIRouter()

REPORT_REASONS = ("harassment", "spam", "fake_profile", "inappropriate", "other")


@scaffold_router.get("/health")
def safety_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "safety"}


@router.post("/safety/block")
def safety_block(payload: dict[str, Any], current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    uid = user_id_from(current_user)
    blocked_id = parse_uuid(payload.get("blocked_user_id"), "blocked_user_id")
    if blocked_id == uid:
        raise HTTPException(status_code=400, detail="Cannot block yourself")
    if not repo.get_user_by_id(blocked_id):
        raise HTTPException(status_code=404, detail="User not found")
    repo.create_block(uid, blocked_id)
    logger.info("[SAFETY] block blocker=%s blocked=%s", uid, blocked_id)
    events.record_event("user_blocked", user_id=uid, properties={"blocked_user_id": blocked_id})
    return {"status": "blocked", "blocked_user_id": blocked_id}


@router.post("/safety/unblock")
def safety_unblock(payload: dict[str, Any], current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    uid = user_id_from(current_user)
    blocked_id = parse_uuid(payload.get("blocked_user_id"), "blocked_user_id")
    removed = repo.remove_block(uid, blocked_id)
    return {"status": "unblocked" if removed else "not_blocked", "blocked_user_id": blocked_id}


@router.get("/safety/blocks")
def safety_blocks(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    rows = repo.list_blocks(user_id_from(current_user))
    return {
        "blocks": [
            {
                "blocked_user_id": str(r["blocked_id"]),
                "name": r.get("blocked_name"),
                "avatar_url": r.get("blocked_avatar_url"),
                "created_at": r.get("created_at"),
            }
            for r in rows
        ]
    }


@router.post("/safety/report")
def safety_report(payload: dict[str, Any], current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    uid = user_id_from(current_user)
    reported_id = parse_uuid(payload.get("reported_user_id"), "reported_user_id")
    if reported_id == uid:
        raise HTTPException(status_code=400, detail="Cannot report yourself")
    reason = str(payload.get("reason") or "").strip().lower()
    if reason not in REPORT_REASONS:
        raise HTTPException(status_code=400, detail=f"reason must be one of: {', '.join(REPORT_REASONS)}")
    details = str(payload.get("details") or "").strip() or None
    if details and len(details) > 1000:
        raise HTTPException(status_code=400, detail="details must be 1000 characters or fewer")
    report = repo.create_report(uid, reported_id, reason, details)
    logger.warning("[SAFETY] report reporter=%s reported=%s reason=%s", uid, reported_id, reason)
    if payload.get("block"):
        repo.create_block(uid, reported_id)
    events.record_event("user_reported", user_id=uid, properties={"reported_user_id": reported_id, "reason": reason})
    return {"status": "reported", "report_id": report["id"]}
