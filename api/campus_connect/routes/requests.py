from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from .. import repo
from ..auth.deps import get_current_user, require_active_user
from ..config import RL_REQUEST_JOIN_LIMIT, RL_WINDOW_SECONDS
from ..deps import parse_uuid, user_id_from
from ..http_helpers import clean_string_list
from ..schemas import JoinResponse, RequestCreate, RequestUpdate
from ..services import events
from ..services.discovery import rank_requests
from ..services.likes import BlockedPair, RequestClosed, RequestNotFound, join_request
from ..services.rate_limit import user_rate_limit_dependency

router = APIRouter()
scaffold_router = APIRouter()

RL_REQUEST_JOIN = user_rate_limit_dependency("request_join", RL_REQUEST_JOIN_LIMIT, RL_WINDOW_SECONDS)


def _request_out(r: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": str(r["id"]),
        "user_id": str(r["user_id"]),
        "title": r["title"],
        "description": r.get("description"),
        "category": r["category"],
        "related_interests": list(r.get("related_interests") or []),
        "status": r.get("status") or "open",
        "max_participants": r.get("max_participants"),
        "member_count": int(r.get("member_count") or 0),
        "owner_name": r.get("owner_name"),
        "created_at": r.get("created_at"),
    }


def _owned_request(request_id: str, uid: str) -> dict[str, Any]:
    row = repo.get_request(request_id)
    if not row:
        raise HTTPException(status_code=404, detail="Request not found")
    if str(row["user_id"]) != uid:
        raise HTTPException(status_code=403, detail="Only the owner can change this request")
    return row


@scaffold_router.get("/health")
def requests_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "requests"}


@router.get("/requests")
def list_requests(
    category: str | None = Query(default=None),
    current_user: dict[str, Any] = Depends(require_active_user),
) -> dict[str, Any]:
    uid = user_id_from(current_user)
    rows = repo.list_open_requests((category or "").strip() or None)
    ranked = rank_requests(current_user["profile"], rows, blocked_ids=repo.list_blocked_ids(uid))
    joined = set(repo.list_joined_request_ids(uid))
    return {"requests": [{**_request_out(r), "has_joined": str(r["id"]) in joined} for r in ranked]}


@router.get("/requests/mine")
def list_my_requests(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    rows = repo.list_requests_for_owner(user_id_from(current_user))
    out = []
    for r in rows:
        members = repo.list_request_members(str(r["id"]))
        out.append(
            {
                **_request_out(r),
                "members": [
                    {"user_id": str(m["user_id"]), "name": m.get("name"), "avatar_url": m.get("avatar_url"), "joined_at": m.get("created_at")}
                    for m in members
                ],
            }
        )
    return {"requests": out}


@router.post("/requests", status_code=201)
def create_request(payload: RequestCreate, current_user: dict[str, Any] = Depends(require_active_user)) -> dict[str, Any]:
    uid = user_id_from(current_user)
    fields = payload.model_dump()
    fields["related_interests"] = clean_string_list(fields.get("related_interests"), "related_interests")
    row = repo.create_request(uid, fields)
    if not row:
        raise HTTPException(status_code=500, detail="Request could not be created")
    events.record_event("request_created", user_id=uid, properties={"request_id": str(row["id"]), "category": row["category"]})
    return {"request": _request_out(row)}


@router.patch("/requests/{request_id}")
def update_request(request_id: str, payload: RequestUpdate, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    rid = parse_uuid(request_id, "request_id")
    _owned_request(rid, user_id_from(current_user))
    fields = payload.model_dump(exclude_unset=True)
    if "related_interests" in fields:
        fields["related_interests"] = clean_string_list(fields["related_interests"], "related_interests")
    row = repo.update_request(rid, fields)
    if not row:
        raise HTTPException(status_code=404, detail="Request not found")
    return {"request": _request_out(row)}


@router.delete("/requests/{request_id}")
def delete_request(request_id: str, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    rid = parse_uuid(request_id, "request_id")
    _owned_request(rid, user_id_from(current_user))
    repo.delete_request(rid)
    return {"status": "deleted", "request_id": rid}


@router.post("/requests/{request_id}/join", response_model=JoinResponse)
def join(request_id: str, current_user: dict[str, Any] = Depends(require_active_user), _: None = RL_REQUEST_JOIN) -> dict[str, Any]:
    rid = parse_uuid(request_id, "request_id")
    uid = user_id_from(current_user)
    try:
        result = join_request(repo, rid, uid)
    except BlockedPair:
        raise HTTPException(status_code=403, detail="Cannot join a request from a blocked user")
    except RequestNotFound:
        raise HTTPException(status_code=404, detail="Request not found")
    except RequestClosed:
        raise HTTPException(status_code=409, detail="Request is closed")
    events.record_event(
        "request_joined",
        user_id=uid,
        properties={"request_id": rid, "match_created": result.match_created},
    )
    return {
        "member": {k: str(v) if v is not None else None for k, v in result.member.items()},
        "match_created": result.match_created,
        "existing_match": result.existing_match,
        "match_id": result.match_id,
    }


@router.post("/requests/{request_id}/leave")
def leave(request_id: str, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    rid = parse_uuid(request_id, "request_id")
    removed = repo.remove_request_member(rid, user_id_from(current_user))
    return {"status": "left" if removed else "not_member", "request_id": rid}
