from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence, Union

from ..profiles import Profile, normalize_gender
from .compatibility import compute_compatibility, shared_interests

MODE_GENERAL = "general"
MODE_DATING = "dating"
DISCOVERY_MODES = (MODE_GENERAL, MODE_DATING)


@dataclass(frozen=True)
class Everyone:
    pass


@dataclass(frozen=True)
class SpecificGender:
    gender: str


DatingPreference = Union[Everyone, SpecificGender]

EVERYONE = Everyone()


def parse_preference(value: Any) -> DatingPreference:
    g = normalize_gender(value)
    if g is None or g == "everyone":
        return EVERYONE
    return SpecificGender(g)


def accepts(pref: DatingPreference, observed_gender: str | None) -> bool:
    """True when someone holding ``pref`` is open to ``observed_gender``.

    A specific preference never accepts an unknown gender.
    """
    if isinstance(pref, Everyone):
        return True
    return observed_gender is not None and observed_gender == pref.gender


def mutually_acceptable(viewer: Profile, candidate: Profile) -> bool:
    viewer_pref = parse_preference(viewer.dating_preference)
    candidate_pref = parse_preference(candidate.dating_preference)
    return accepts(viewer_pref, candidate.gender) and accepts(candidate_pref, viewer.gender)


@dataclass
class DiscoverFilters:
    branch: str | None = None
    year: int | None = None
    dating_only: bool = False
    interests: list[str] = field(default_factory=list)
    hobbies: list[str] = field(default_factory=list)
    goals: list[str] = field(default_factory=list)
    social_range: tuple[int, int] | None = None
    activity_range: tuple[int, int] | None = None


@dataclass
class DiscoveryResult:
    profile: Profile
    score: int
    shared_interests: list[str]


def _overlaps(candidate_items: tuple[str, ...], wanted: list[str]) -> bool:
    return bool(set(candidate_items) & set(wanted))


def _in_range(value: int, bounds: tuple[int, int] | None) -> bool:
    if bounds is None:
        return True
    low, high = bounds
    return low <= value <= high


def passes_filters(viewer: Profile, candidate: Profile, filters: DiscoverFilters | None) -> bool:
    if filters is None:
        return True
    if filters.branch and candidate.branch != filters.branch:
        return False
    if filters.year is not None and candidate.year != filters.year:
        return False
    # The dating flag only narrows the pool for viewers who opted into dating.
    if filters.dating_only and viewer.dating_enabled and not candidate.dating_enabled:
        return False
    if filters.interests and not _overlaps(candidate.interests, filters.interests):
        return False
    if filters.hobbies and not _overlaps(candidate.hobbies, filters.hobbies):
        return False
    if filters.goals and not _overlaps(candidate.goals, filters.goals):
        return False
    if not _in_range(candidate.personality_social_level, filters.social_range):
        return False
    if not _in_range(candidate.personality_activity_level, filters.activity_range):
        return False
    return True


def _dating_shared_items(viewer: Profile, candidate: Profile) -> list[str]:
    theirs = set(candidate.interests) | set(candidate.hobbies)
    out: list[str] = []
    for item in viewer.interests + viewer.hobbies:
        if item in theirs and item not in out:
            out.append(item)
    return out


def discover(
    viewer: Profile,
    pool: Sequence[Profile],
    exclusions: Iterable[str] = (),
    mode: str = MODE_GENERAL,
    limit: int = 20,
    filters: DiscoverFilters | None = None,
) -> list[DiscoveryResult]:
    """Filter and rank ``pool`` for ``viewer``.

    Excluded ids and the viewer never appear. Dating mode keeps only
    dating-enabled candidates that pass the preference check in both
    directions; general mode applies the optional ``filters``. Results are
    ordered by score, highest first, keeping pool order on ties.
    """
    if mode not in DISCOVERY_MODES:
        raise ValueError(f"unknown discovery mode: {mode}")
    excluded = set(exclusions)
    excluded.add(viewer.id)

    if mode == MODE_DATING and not viewer.dating_enabled:
        return []

    results: list[DiscoveryResult] = []
    for candidate in pool:
        if candidate.id in excluded:
            continue
        if mode == MODE_DATING:
            if not candidate.dating_enabled:
                continue
            if not mutually_acceptable(viewer, candidate):
                continue
            shared = _dating_shared_items(viewer, candidate)
        else:
            if not passes_filters(viewer, candidate, filters):
                continue
            shared = shared_interests(viewer, candidate)
        results.append(
            DiscoveryResult(
                profile=candidate,
                score=compute_compatibility(viewer, candidate),
                shared_interests=shared,
            )
        )

    # sort() is stable, so equal scores keep pool order.
    results.sort(key=lambda r: r.score, reverse=True)
    return results[: max(0, int(limit))]


def pool_query_filters(viewer: Profile, mode: str, filters: DiscoverFilters | None) -> dict[str, Any]:
    """Keyword arguments for ``repo.list_discoverable_profiles``.

    Mirrors the candidate predicates ``discover`` applies so the capped pool is
    already narrowed in SQL. Preference checks stay in Python.
    """
    if mode == MODE_DATING:
        return {"dating_only": True}
    if filters is None:
        return {"dating_only": False}
    return {
        "dating_only": bool(filters.dating_only and viewer.dating_enabled),
        "branch": filters.branch,
        "year": filters.year,
        "interests": list(filters.interests) or None,
        "hobbies": list(filters.hobbies) or None,
        "goals": list(filters.goals) or None,
        "social_range": filters.social_range,
        "activity_range": filters.activity_range,
    }


def build_exclusion_set(store, viewer_id: str) -> frozenset[str]:
    ids = {str(viewer_id)}
    ids.update(str(i) for i in store.list_blocked_ids(viewer_id))
    ids.update(str(i) for i in store.list_matched_ids(viewer_id))
    ids.update(str(i) for i in store.list_liked_ids(viewer_id))
    return frozenset(ids)


def rank_requests(viewer: Profile, requests: Sequence[dict[str, Any]], blocked_ids: Iterable[str] = ()) -> list[dict[str, Any]]:
    blocked = {str(b) for b in blocked_ids}
    mine = set(viewer.interests) | set(viewer.hobbies)
    visible = [r for r in requests if str(r.get("user_id")) not in blocked]

    def _relevance(req: dict[str, Any]) -> int:
        related = req.get("related_interests") or []
        return sum(1 for item in related if item in mine)

    return sorted(visible, key=_relevance, reverse=True)
