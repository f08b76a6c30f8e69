import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from .. import repo
from ..auth.deps import SESSION_COOKIE_NAME, get_current_user
from ..auth.security import create_access_token, hash_password, verify_password
from ..config import ACCESS_TOKEN_TTL_MINUTES, RL_AUTH_LOGIN_LIMIT, RL_AUTH_REGISTER_LIMIT, RL_WINDOW_SECONDS
from ..http_helpers import normalize_email, validate_registration_input
from ..services import events
from ..services.rate_limit import rate_limit_dependency

logger = logging.getLogger(__name__)

router = APIRouter()
scaffold_router = APIRouter()

RL_AUTH_REGISTER = rate_limit_dependency("auth_register", RL_AUTH_REGISTER_LIMIT, RL_WINDOW_SECONDS)
RL_AUTH_LOGIN = rate_limit_dependency("auth_login", RL_AUTH_LOGIN_LIMIT, RL_WINDOW_SECONDS)


def _issue_token(user: dict[str, Any]) -> dict[str, Any]:
    access_token = create_access_token(user_id=str(user["id"]), email=str(user["email"]), ttl_minutes=ACCESS_TOKEN_TTL_MINUTES)
    logger.info("[auth] issued token user_id=%s", user["id"])
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": ACCESS_TOKEN_TTL_MINUTES * 60,
    }


def _is_bearer_mode(request: Request) -> bool:
    return str(request.headers.get("X-Auth-Mode") or "").strip().lower() == "bearer"


def _set_session_cookie(response: Response, access_token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=False,
        samesite="lax",
        path="/",
        max_age=ACCESS_TOKEN_TTL_MINUTES * 60,
    )


def _session_response(request: Request, response: Response, user: dict[str, Any]) -> dict[str, Any]:
    tokens = _issue_token(user)
    _set_session_cookie(response, tokens["access_token"])
    if _is_bearer_mode(request):
        return tokens
    return {"id": str(user["id"]), "email": str(user["email"])}


@scaffold_router.get("/health")
def auth_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "auth"}


@router.post("/register", status_code=201)
def auth_register(payload: dict[str, Any], request: Request, response: Response, _: None = RL_AUTH_REGISTER) -> dict[str, Any]:
    email, password = validate_registration_input(str(payload.get("email", "")), str(payload.get("password", "")))
    if repo.get_user_by_email(email):
        raise HTTPException(status_code=409, detail="Email already registered")
    created = repo.create_user(email=email, password_hash=hash_password(password))
    if not created:
        raise HTTPException(status_code=409, detail="Email already registered")
    events.record_event("auth_registered", user_id=str(created["id"]), properties={"method": "password"})
    return _session_response(request, response, created)


@router.post("/login")
def auth_login(payload: dict[str, Any], request: Request, response: Response, _: None = RL_AUTH_LOGIN) -> dict[str, Any]:
    email = normalize_email(str(payload.get("email") or ""))
    password = str(payload.get("password") or "")
    if not email:
        raise HTTPException(status_code=400, detail="email required")
    user = repo.get_user_by_email(email)
    if not user or not verify_password(password, str(user["password_hash"])):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if user.get("disabled_at"):
        raise HTTPException(status_code=403, detail="Account disabled")
    repo.update_last_login(str(user["id"]))
    events.record_event("login_success", user_id=str(user["id"]))
    return _session_response(request, response, user)


@router.post("/logout")
def auth_logout(response: Response) -> dict[str, str]:
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
    return {"status": "logged_out"}


@router.get("/me")
def auth_me(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    profile = repo.get_profile_row(str(current_user["id"]))
    return {
        "id": str(current_user["id"]),
        "email": current_user["email"],
        "has_profile": profile is not None,
        "onboarding_completed": bool((profile or {}).get("onboarding_completed")),
    }
