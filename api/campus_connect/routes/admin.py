import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder

from .. import repo
from ..auth.admin_deps import get_current_admin
from ..deps import parse_uuid
from ..schemas import SuspendRequest
from ..services import events

logger = logging.getLogger(__name__)

router = APIRouter()
scaffold_router = APIRouter()


def _json(data: Any) -> Any:
    return jsonable_encoder(data)


def _audit(admin: dict[str, Any], action: str, **properties: Any) -> None:
    logger.info("[ADMIN] %s by=%s %s", action, admin.get("email"), properties)
    events.record_event(f"admin_{action}", user_id=admin.get("id"), properties=properties)


def _require_changed(rowcount: int, what: str) -> None:
    if not rowcount:
        raise HTTPException(status_code=404, detail=f"{what} not found")


@scaffold_router.get("/health")
def admin_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "admin"}


@router.get("/users")
def admin_users(admin: dict[str, Any] = Depends(get_current_admin)) -> dict[str, Any]:
    return {"users": _json(repo.admin_list_profiles())}


@router.post("/users/{user_id}/ban")
def admin_ban(user_id: str, admin: dict[str, Any] = Depends(get_current_admin)) -> dict[str, Any]:
    uid = parse_uuid(user_id, "user_id")
    _require_changed(repo.set_ban(uid, True), "User")
    _audit(admin, "ban", user_id=uid)
    return {"status": "banned", "user_id": uid}


@router.post("/users/{user_id}/unban")
def admin_unban(user_id: str, admin: dict[str, Any] = Depends(get_current_admin)) -> dict[str, Any]:
    uid = parse_uuid(user_id, "user_id")
    _require_changed(repo.set_ban(uid, False), "User")
    _audit(admin, "unban", user_id=uid)
    return {"status": "unbanned", "user_id": uid}


@router.post("/users/{user_id}/suspend")
def admin_suspend(user_id: str, payload: SuspendRequest, admin: dict[str, Any] = Depends(get_current_admin)) -> dict[str, Any]:
    uid = parse_uuid(user_id, "user_id")
    until = payload.until if payload.until.tzinfo else payload.until.replace(tzinfo=timezone.utc)
    if until <= datetime.now(timezone.utc):
        raise HTTPException(status_code=400, detail="until must be in the future")
    _require_changed(repo.set_suspension(uid, until), "User")
    _audit(admin, "suspend", user_id=uid, until=until.isoformat())
    return {"status": "suspended", "user_id": uid, "suspension_until": until.isoformat()}


@router.post("/users/{user_id}/unsuspend")
def admin_unsuspend(user_id: str, admin: dict[str, Any] = Depends(get_current_admin)) -> dict[str, Any]:
    uid = parse_uuid(user_id, "user_id")
    _require_changed(repo.set_suspension(uid, None), "User")
    _audit(admin, "unsuspend", user_id=uid)
    return {"status": "unsuspended", "user_id": uid}


@router.delete("/users/{user_id}")
def admin_delete_user(user_id: str, admin: dict[str, Any] = Depends(get_current_admin)) -> dict[str, Any]:
    uid = parse_uuid(user_id, "user_id")
    if admin.get("id") and str(admin["id"]) == uid:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")
    _require_changed(repo.delete_user(uid), "User")
    _audit(admin, "delete_user", user_id=uid)
    return {"status": "deleted", "user_id": uid}


@router.get("/reports")
def admin_reports(admin: dict[str, Any] = Depends(get_current_admin)) -> dict[str, Any]:
    rows = repo.admin_list_reports()
    return {
        "reports": _json(
            [
                {
                    "id": str(r["id"]),
                    "reason": r.get("reason"),
                    "details": r.get("details"),
                    "created_at": r.get("created_at"),
                    "reporter": {"id": str(r["reporter_id"]), "name": r.get("reporter_name"), "avatar_url": r.get("reporter_avatar_url")},
                    "reported": {"id": str(r["reported_id"]), "name": r.get("reported_name"), "avatar_url": r.get("reported_avatar_url")},
                }
                for r in rows
            ]
        )
    }


@router.delete("/reports/{report_id}")
def admin_delete_report(report_id: str, admin: dict[str, Any] = Depends(get_current_admin)) -> dict[str, Any]:
    rid = parse_uuid(report_id, "report_id")
    _require_changed(repo.delete_report(rid), "Report")
    _audit(admin, "delete_report", report_id=rid)
    return {"status": "deleted", "report_id": rid}


@router.get("/requests")
def admin_requests(admin: dict[str, Any] = Depends(get_current_admin)) -> dict[str, Any]:
    rows = repo.admin_list_requests()
    return {
        "requests": _json(
            [
                {
                    **r,
                    "owner": {"id": str(r["user_id"]), "name": r.get("owner_name"), "avatar_url": r.get("owner_avatar_url")},
                }
                for r in rows
            ]
        )
    }


@router.delete("/requests/{request_id}")
def admin_delete_request(request_id: str, admin: dict[str, Any] = Depends(get_current_admin)) -> dict[str, Any]:
    rid = parse_uuid(request_id, "request_id")
    _require_changed(repo.delete_request(rid), "Request")
    _audit(admin, "delete_request", request_id=rid)
    return {"status": "deleted", "request_id": rid}
