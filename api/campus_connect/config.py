import os
from pathlib import Path

_default_migrations = Path(__file__).resolve().parents[1] / "migrations"
MIGRATIONS_DIR = Path(os.getenv("MIGRATIONS_DIR", str(_default_migrations)))

DISCOVER_DEFAULT_LIMIT = int(os.getenv("DISCOVER_DEFAULT_LIMIT", "20"))
DISCOVER_PREFETCH_LIMIT = int(os.getenv("DISCOVER_PREFETCH_LIMIT", "100"))
MESSAGE_MAX_LENGTH = int(os.getenv("MESSAGE_MAX_LENGTH", "2000"))
REQUEST_JOIN_FALLBACK_SCORE = int(os.getenv("REQUEST_JOIN_FALLBACK_SCORE", "50"))

JWT_SECRET = os.getenv("JWT_SECRET", "")
ACCESS_TOKEN_TTL_MINUTES = int(os.getenv("ACCESS_TOKEN_TTL_MINUTES", "60"))
DEV_MODE = os.getenv("DEV_MODE", "false").lower() == "true"
# Static operator token accepted in X-Admin-Token; empty disables it.
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "")

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000").split(",")
    if o.strip()
]

RL_AUTH_REGISTER_LIMIT = int(os.getenv("RL_AUTH_REGISTER_LIMIT", "100"))
RL_AUTH_LOGIN_LIMIT = int(os.getenv("RL_AUTH_LOGIN_LIMIT", "100"))
RL_LIKE_LIMIT = int(os.getenv("RL_LIKE_LIMIT", "120"))
RL_MESSAGE_LIMIT = int(os.getenv("RL_MESSAGE_LIMIT", "120"))
RL_REQUEST_JOIN_LIMIT = int(os.getenv("RL_REQUEST_JOIN_LIMIT", "60"))
RL_WINDOW_SECONDS = int(os.getenv("RL_WINDOW_SECONDS", "60"))
