"""
Authentication dependencies for FastAPI.

Web clients carry the access token in an httpOnly cookie; API clients send
``Authorization: Bearer <token>``. The cookie wins when both are present.
"""

import logging
import uuid
from typing import Any

from fastapi import Cookie, Depends, Header, HTTPException

from campus_connect import repo
from campus_connect.auth.security import decode_access_token
from campus_connect.config import DEV_MODE
from campus_connect.profiles import profile_from_row

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "campus_session"


def _unauthorized(reason: str, trace_id: str, status_code: int = 401, message: str = "unauthorized") -> HTTPException:
    detail: dict[str, Any] = {"message": message, "trace_id": trace_id}
    if DEV_MODE:
        detail["reason"] = reason
    return HTTPException(status_code=status_code, detail=detail)


def _log_auth_failure(reason: str, trace_id: str, auth_source: str, user_id: str | None = None) -> None:
    logger.warning("[AUTH_FAILURE] reason=%s trace_id=%s source=%s user_id=%s", reason, trace_id, auth_source, user_id)


def _extract_bearer(authorization: str) -> str | None:
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        return None
    return parts[1].strip()


def _user_from_token(token: str, trace_id: str, auth_source: str) -> dict[str, Any]:
    try:
        payload = decode_access_token(token)
    except HTTPException as exc:
        reason = "token_expired" if "expired" in str(exc.detail).lower() else "signature_invalid"
        _log_auth_failure(reason, trace_id, auth_source)
        raise _unauthorized(reason, trace_id) from exc

    user_id = str(payload.get("sub") or "")
    if not user_id:
        _log_auth_failure("token_missing_subject", trace_id, auth_source)
        raise _unauthorized("token_missing_subject", trace_id)

    user = repo.get_user_by_id(user_id)
    if not user:
        _log_auth_failure("token_user_not_found", trace_id, auth_source, user_id)
        raise _unauthorized("token_user_not_found", trace_id)
    if user.get("disabled_at"):
        _log_auth_failure("account_disabled", trace_id, auth_source, user_id)
        raise _unauthorized("account_disabled", trace_id, status_code=403, message="Account disabled")

    logger.debug("[auth] ok user_id=%s source=%s", user_id, auth_source)
    return {"id": str(user["id"]), "email": user["email"]}


def get_current_user(
    session_token: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    trace_id = str(uuid.uuid4())
    if session_token:
        return _user_from_token(session_token, trace_id, "cookie")
    if authorization:
        token = _extract_bearer(authorization)
        if not token:
            _log_auth_failure("malformed_token", trace_id, "bearer")
            raise _unauthorized("malformed_token", trace_id)
        return _user_from_token(token, trace_id, "bearer")
    _log_auth_failure("missing_token", trace_id, "none")
    raise _unauthorized("missing_token", trace_id, message="Authentication required")


def require_active_user(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    """Reject banned or currently suspended accounts from matching actions."""
    row = repo.get_profile_row(str(current_user["id"]))
    if row is None:
        raise HTTPException(status_code=409, detail="Complete your profile first")
    profile = profile_from_row(row)
    if profile.is_restricted():
        raise HTTPException(status_code=403, detail="Account restricted")
    return {**current_user, "profile": profile}
