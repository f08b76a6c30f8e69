from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from .. import repo
from ..auth.deps import get_current_user
from ..config import MESSAGE_MAX_LENGTH, RL_MESSAGE_LIMIT, RL_WINDOW_SECONDS
from ..deps import parse_uuid, user_id_from
from ..services import events
from ..services.rate_limit import user_rate_limit_dependency

router = APIRouter()
scaffold_router = APIRouter()

RL_MESSAGE = user_rate_limit_dependency("chat_message", RL_MESSAGE_LIMIT, RL_WINDOW_SECONDS)


def _participant_chat(chat_id: str, uid: str) -> dict[str, Any]:
    chat = repo.get_chat(chat_id)
    if not chat:
        raise HTTPException(status_code=404, detail="Chat not found")
    if uid not in {str(chat["user_a"]), str(chat["user_b"])}:
        raise HTTPException(status_code=403, detail="Forbidden")
    return chat


def _message_out(m: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": str(m["id"]),
        "sender_id": str(m["sender_id"]),
        "content": m["content"],
        "created_at": m.get("created_at"),
        "read_at": m.get("read_at"),
    }


@scaffold_router.get("/health")
def chat_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "chat"}


@router.get("/chats/{chat_id}/messages")
def list_messages(chat_id: str, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    cid = parse_uuid(chat_id, "chat_id")
    _participant_chat(cid, user_id_from(current_user))
    return {"messages": [_message_out(m) for m in repo.get_messages(cid)]}


@router.post("/chats/{chat_id}/messages", status_code=201)
def send_message(
    chat_id: str,
    payload: dict[str, Any],
    current_user: dict[str, Any] = Depends(get_current_user),
    _: None = RL_MESSAGE,
) -> dict[str, Any]:
    cid = parse_uuid(chat_id, "chat_id")
    uid = user_id_from(current_user)
    chat = _participant_chat(cid, uid)
    if chat.get("unmatched_at"):
        raise HTTPException(status_code=409, detail="This match has ended")
    content = str(payload.get("content") or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="content required")
    if len(content) > MESSAGE_MAX_LENGTH:
        raise HTTPException(status_code=400, detail=f"content must be {MESSAGE_MAX_LENGTH} characters or fewer")
    other_id = str(chat["user_b"]) if str(chat["user_a"]) == uid else str(chat["user_a"])
    if repo.is_blocked_pair(uid, other_id):
        raise HTTPException(status_code=403, detail="Messaging is not available")
    message = repo.create_message(cid, uid, content)
    events.record_event("message_sent", user_id=uid, properties={"chat_id": cid})
    return {"message": _message_out(message)}


@router.post("/chats/{chat_id}/read")
def mark_read(chat_id: str, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    cid = parse_uuid(chat_id, "chat_id")
    uid = user_id_from(current_user)
    _participant_chat(cid, uid)
    return {"updated": repo.mark_messages_read(cid, uid)}
