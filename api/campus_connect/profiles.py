from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

COMMUNICATION_STYLES = ("text", "voice-call", "in-person")
WAKE_CYCLES = ("early-bird", "night-owl", "flexible")
DATING_PREFERENCES = ("male", "female", "everyone")
LIKE_KINDS = ("friend", "project", "study", "dating")

_COMMUNICATION_ALIASES = {"vc": "voice-call", "voice": "voice-call", "call": "voice-call", "inperson": "in-person"}

PERSONALITY_MIN = 0
PERSONALITY_MAX = 10


def _clean_items(values: Any) -> tuple[str, ...]:
    if not isinstance(values, (list, tuple, set, frozenset)):
        return ()
    out: list[str] = []
    for value in values:
        v = str(value or "").strip()
        if v and v not in out:
            out.append(v)
    return tuple(out)


def _clamp_level(value: Any, default: int = 5) -> int:
    try:
        level = int(value)
    except (TypeError, ValueError):
        level = default
    return max(PERSONALITY_MIN, min(PERSONALITY_MAX, level))


def normalize_gender(value: Any) -> str | None:
    if value is None:
        return None
    v = str(value).strip().lower()
    return v or None


def normalize_communication(value: Any) -> str:
    v = str(value or "").strip().lower()
    v = _COMMUNICATION_ALIASES.get(v, v)
    return v if v in COMMUNICATION_STYLES else "text"


def normalize_wake_cycle(value: Any) -> str:
    v = str(value or "").strip().lower()
    return v if v in WAKE_CYCLES else "flexible"


@dataclass(frozen=True)
class Profile:
    """Attributes of a participant that matching and discovery read.

    Interest, hobby and goal collections are de-duplicated tuples so that
    "shared" helpers can report items in this profile's order.
    """

    id: str
    name: str = ""
    interests: tuple[str, ...] = ()
    hobbies: tuple[str, ...] = ()
    goals: tuple[str, ...] = ()
    personality_social_level: int = 5
    personality_activity_level: int = 5
    personality_communication: str = "text"
    personality_wake_cycle: str = "flexible"
    dating_enabled: bool = False
    dating_preference: str | None = None
    gender: str | None = None
    branch: str | None = None
    year: int | None = None
    is_banned: bool = False
    is_suspended: bool = False
    suspension_until: datetime | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "interests", _clean_items(self.interests))
        object.__setattr__(self, "hobbies", _clean_items(self.hobbies))
        object.__setattr__(self, "goals", _clean_items(self.goals))
        object.__setattr__(self, "personality_social_level", _clamp_level(self.personality_social_level))
        object.__setattr__(self, "personality_activity_level", _clamp_level(self.personality_activity_level))
        object.__setattr__(self, "personality_communication", normalize_communication(self.personality_communication))
        object.__setattr__(self, "personality_wake_cycle", normalize_wake_cycle(self.personality_wake_cycle))
        object.__setattr__(self, "gender", normalize_gender(self.gender))
        object.__setattr__(self, "dating_preference", normalize_gender(self.dating_preference))

    def is_restricted(self, now: datetime | None = None) -> bool:
        if self.is_banned:
            return True
        if not self.is_suspended:
            return False
        if self.suspension_until is None:
            return True
        return self.suspension_until > (now or datetime.now(timezone.utc))


_PROFILE_COLUMNS = {
    "id",
    "name",
    "interests",
    "hobbies",
    "goals",
    "personality_social_level",
    "personality_activity_level",
    "personality_communication",
    "personality_wake_cycle",
    "dating_mode",
    "dating_enabled",
    "dating_preference",
    "gender",
    "branch",
    "year",
    "is_banned",
    "is_suspended",
    "suspension_until",
}


def profile_from_row(row: dict[str, Any]) -> Profile:
    year = row.get("year")
    return Profile(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        interests=row.get("interests") or (),
        hobbies=row.get("hobbies") or (),
        goals=row.get("goals") or (),
        personality_social_level=row.get("personality_social_level", 5),
        personality_activity_level=row.get("personality_activity_level", 5),
        personality_communication=row.get("personality_communication") or "text",
        personality_wake_cycle=row.get("personality_wake_cycle") or "flexible",
        dating_enabled=bool(row.get("dating_mode", row.get("dating_enabled", False))),
        dating_preference=row.get("dating_preference"),
        gender=row.get("gender"),
        branch=row.get("branch"),
        year=int(year) if year is not None else None,
        is_banned=bool(row.get("is_banned")),
        is_suspended=bool(row.get("is_suspended")),
        suspension_until=row.get("suspension_until"),
        extra={k: v for k, v in row.items() if k not in _PROFILE_COLUMNS},
    )


def profiles_from_rows(rows: Iterable[dict[str, Any]]) -> list[Profile]:
    return [profile_from_row(r) for r in rows]


def public_profile(profile: Profile) -> dict[str, Any]:
    return {
        "id": profile.id,
        "name": profile.name,
        "branch": profile.branch,
        "year": profile.year,
        "gender": profile.gender,
        "interests": list(profile.interests),
        "hobbies": list(profile.hobbies),
        "goals": list(profile.goals),
        "personality_social_level": profile.personality_social_level,
        "personality_activity_level": profile.personality_activity_level,
        "personality_communication": profile.personality_communication,
        "personality_wake_cycle": profile.personality_wake_cycle,
        "dating_mode": profile.dating_enabled,
        "bio": profile.extra.get("bio"),
        "age": profile.extra.get("age"),
        "avatar_url": profile.extra.get("avatar_url"),
        "photos": profile.extra.get("photos") if isinstance(profile.extra.get("photos"), list) else [],
        "instagram_handle": profile.extra.get("instagram_handle"),
        "prompt_good_at": profile.extra.get("prompt_good_at"),
        "prompt_care_about": profile.extra.get("prompt_care_about"),
        "prompt_looking_for": profile.extra.get("prompt_looking_for"),
    }
