import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from .. import repo
from ..auth.deps import require_active_user
from ..config import DISCOVER_DEFAULT_LIMIT, DISCOVER_PREFETCH_LIMIT
from ..deps import user_id_from
from ..http_helpers import clean_string_list
from ..profiles import public_profile
from ..services.discovery import DISCOVERY_MODES, DiscoverFilters, build_exclusion_set, discover, pool_query_filters

logger = logging.getLogger(__name__)

router = APIRouter()
scaffold_router = APIRouter()


def _parse_range(raw: str | None, field: str) -> tuple[int, int] | None:
    if not raw:
        return None
    parts = [p.strip() for p in raw.split("-", 1)]
    try:
        low, high = int(parts[0]), int(parts[-1])
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{field} must look like 3-7")
    if low > high:
        low, high = high, low
    return low, high


@scaffold_router.get("/health")
def discover_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "discover"}


@router.get("/discover")
def discover_profiles(
    mode: str = Query(default="general"),
    limit: int = Query(default=DISCOVER_DEFAULT_LIMIT, ge=1, le=100),
    branch: str | None = Query(default=None),
    year: int | None = Query(default=None),
    dating_only: bool = Query(default=False),
    interests: str | None = Query(default=None),
    hobbies: str | None = Query(default=None),
    goals: str | None = Query(default=None),
    social_range: str | None = Query(default=None),
    activity_range: str | None = Query(default=None),
    current_user: dict[str, Any] = Depends(require_active_user),
) -> dict[str, Any]:
    if mode not in DISCOVERY_MODES:
        raise HTTPException(status_code=400, detail=f"mode must be one of: {', '.join(DISCOVERY_MODES)}")
    viewer = current_user["profile"]
    uid = user_id_from(current_user)
    filters = DiscoverFilters(
        branch=(branch or "").strip() or None,
        year=year,
        dating_only=dating_only,
        interests=clean_string_list(interests, "interests"),
        hobbies=clean_string_list(hobbies, "hobbies"),
        goals=clean_string_list(goals, "goals"),
        social_range=_parse_range(social_range, "social_range"),
        activity_range=_parse_range(activity_range, "activity_range"),
    )

    exclusions = build_exclusion_set(repo, uid)
    pool = repo.list_discoverable_profiles(uid, limit=DISCOVER_PREFETCH_LIMIT, **pool_query_filters(viewer, mode, filters))
    results = discover(viewer, pool, exclusions=exclusions, mode=mode, limit=limit, filters=filters)
    logger.debug("[discover] user_id=%s mode=%s pool=%s results=%s", uid, mode, len(pool), len(results))
    return {
        "mode": mode,
        "profiles": [
            {
                **public_profile(r.profile),
                "compatibility_score": r.score,
                "shared_interests": r.shared_interests,
            }
            for r in results
        ],
    }
