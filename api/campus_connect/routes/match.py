from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from .. import repo
from ..auth.deps import get_current_user
from ..deps import parse_uuid, user_id_from
from ..profiles import public_profile
from ..services import events
from ..services.compatibility import compatibility_breakdown, shared_goals, shared_hobbies, shared_interests
from ..services.likes import MatchNotFound, unmatch

router = APIRouter()
scaffold_router = APIRouter()


def _participant_match(match_id: str, uid: str) -> dict[str, Any]:
    match = repo.get_match(match_id)
    if not match or uid not in {str(match["user_a"]), str(match["user_b"])}:
        raise HTTPException(status_code=404, detail="Match not found")
    return match


@scaffold_router.get("/health")
def match_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "match"}


@router.get("/matches")
def list_matches(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    rows = repo.list_matches_for_user(user_id_from(current_user))
    matches = []
    for r in rows:
        matches.append(
            {
                "id": str(r["id"]),
                "chat_id": str(r["chat_id"]) if r.get("chat_id") else None,
                "compatibility_score": r["compatibility_score"],
                "is_dating_match": bool(r.get("is_dating_match")),
                "created_at": r.get("created_at"),
                "other_profile": {
                    "id": str(r["other_user_id"]),
                    "name": r.get("other_name"),
                    "avatar_url": r.get("other_avatar_url"),
                    "branch": r.get("other_branch"),
                    "year": r.get("other_year"),
                },
                "latest_message": {
                    "content": r.get("latest_message_content"),
                    "created_at": r.get("latest_message_at"),
                },
            }
        )
    return {"matches": matches}


@router.get("/matches/{match_id}")
def get_match(match_id: str, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    mid = parse_uuid(match_id, "match_id")
    uid = user_id_from(current_user)
    match = _participant_match(mid, uid)
    if match.get("unmatched_at"):
        raise HTTPException(status_code=404, detail="Match not found")
    other_id = str(match["user_b"]) if str(match["user_a"]) == uid else str(match["user_a"])
    me = repo.get_profile(uid)
    other = repo.get_profile(other_id)
    if me is None or other is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {
        "match": {
            "id": str(match["id"]),
            "chat_id": str(match["chat_id"]) if match.get("chat_id") else None,
            "compatibility_score": match["compatibility_score"],
            "is_dating_match": bool(match.get("is_dating_match")),
            "created_at": match.get("created_at"),
            "other_profile": public_profile(other),
            "breakdown": compatibility_breakdown(me, other),
            "shared": {
                "interests": shared_interests(me, other),
                "hobbies": shared_hobbies(me, other),
                "goals": shared_goals(me, other),
            },
        }
    }


@router.delete("/matches/{match_id}")
def delete_match(match_id: str, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    mid = parse_uuid(match_id, "match_id")
    uid = user_id_from(current_user)
    try:
        row = unmatch(repo, mid, uid)
    except MatchNotFound:
        raise HTTPException(status_code=404, detail="Match not found")
    events.record_event("match_unmatched", user_id=uid, properties={"match_id": mid})
    return {"status": "unmatched", "match_id": mid, "unmatched_at": row.get("unmatched_at")}
