from __future__ import annotations

import logging
import secrets
from typing import Any

from fastapi import Cookie, Header, HTTPException

from campus_connect import config, repo
from campus_connect.auth.deps import SESSION_COOKIE_NAME, get_current_user

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def get_current_admin(
    session_token: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    authorization: str | None = Header(default=None, alias="Authorization"),
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
) -> dict[str, Any]:
    """Resolve the caller of an admin route.

    A configured ``ADMIN_TOKEN`` sent as ``X-Admin-Token`` is accepted for
    operators. Otherwise the regular session must belong to a user holding the
    ``admin`` role in ``user_role``.
    """
    runtime_admin_token = str(config.ADMIN_TOKEN or "")
    if runtime_admin_token and x_admin_token and secrets.compare_digest(x_admin_token, runtime_admin_token):
        return {"id": None, "email": "admin-token", "auth_mode": "token"}

    if not session_token and not authorization:
        raise HTTPException(status_code=401, detail="Admin authentication required")

    user = get_current_user(session_token=session_token, authorization=authorization)
    if not repo.has_role(str(user["id"]), ADMIN_ROLE):
        logger.warning("[ADMIN] denied user_id=%s", user["id"])
        raise HTTPException(status_code=403, detail="Admin role required")
    return {**user, "auth_mode": "session"}
