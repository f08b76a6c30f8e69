from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from .. import repo
from ..auth.deps import require_active_user
from ..config import RL_LIKE_LIMIT, RL_WINDOW_SECONDS
from ..deps import parse_uuid, user_id_from
from ..schemas import LikeRequest, LikeResponse
from ..services import events
from ..services.likes import InvalidLike, ProfileNotFound, register_like
from ..services.rate_limit import user_rate_limit_dependency

router = APIRouter()
scaffold_router = APIRouter()

RL_LIKE = user_rate_limit_dependency("like_create", RL_LIKE_LIMIT, RL_WINDOW_SECONDS)


@scaffold_router.get("/health")
def likes_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "likes"}


@router.post("/likes", response_model=LikeResponse)
def create_like(payload: LikeRequest, current_user: dict[str, Any] = Depends(require_active_user), _: None = RL_LIKE) -> dict[str, Any]:
    uid = user_id_from(current_user)
    to_user_id = parse_uuid(payload.to_user_id, "to_user_id")
    try:
        result = register_like(repo, uid, to_user_id, payload.kind)
    except InvalidLike as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ProfileNotFound:
        raise HTTPException(status_code=404, detail="Profile not found")

    events.record_event("like_sent", user_id=uid, properties={"to_user_id": to_user_id, "kind": payload.kind})
    if result.matched and not result.existing_match:
        events.record_event("match_created", user_id=uid, properties={"match_id": result.match_id, "kind": payload.kind})
    return result.as_dict()
