from fastapi import APIRouter, FastAPI

from .admin import router as admin_router, scaffold_router as admin_scaffold_router
from .auth import router as auth_router, scaffold_router as auth_scaffold_router
from .chat import router as chat_router, scaffold_router as chat_scaffold_router
from .discover import router as discover_router, scaffold_router as discover_scaffold_router
from .likes import router as likes_router, scaffold_router as likes_scaffold_router
from .match import router as match_router, scaffold_router as match_scaffold_router
from .profile import router as profile_router, scaffold_router as profile_scaffold_router
from .requests import router as requests_router, scaffold_router as requests_scaffold_router
from .safety import router as safety_router, scaffold_router as safety_scaffold_router


def include_modular_routers(app: FastAPI) -> None:
    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(profile_router, tags=["profiles"])
    app.include_router(discover_router, tags=["discover"])
    app.include_router(likes_router, tags=["likes"])
    app.include_router(match_router, tags=["matches"])
    app.include_router(chat_router, tags=["chat"])
    app.include_router(safety_router, tags=["safety"])
    app.include_router(requests_router, tags=["requests"])
    app.include_router(admin_router, prefix="/admin", tags=["admin"])

    app.include_router(auth_scaffold_router, prefix="/_scaffold/auth", tags=["scaffold-auth"])
    app.include_router(profile_scaffold_router, prefix="/_scaffold/profile", tags=["scaffold-profile"])
    app.include_router(discover_scaffold_router, prefix="/_scaffold/discover", tags=["scaffold-discover"])
    app.include_router(likes_scaffold_router, prefix="/_scaffold/likes", tags=["scaffold-likes"])
    app.include_router(match_scaffold_router, prefix="/_scaffold/match", tags=["scaffold-match"])
    app.include_router(chat_scaffold_router, prefix="/_scaffold/chat", tags=["scaffold-chat"])
    app.include_router(safety_scaffold_router, prefix="/_scaffold/safety", tags=["scaffold-safety"])
    app.include_router(requests_scaffold_router, prefix="/_scaffold/requests", tags=["scaffold-requests"])
    app.include_router(admin_scaffold_router, prefix="/_scaffold/admin", tags=["scaffold-admin"])


__all__ = ["include_modular_routers", "APIRouter"]
