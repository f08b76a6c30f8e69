from __future__ import annotations

import math
from typing import Any

from ..profiles import Profile

COMPATIBILITY_WEIGHTS: dict[str, float] = {
    "interests": 25.0,
    "hobbies": 20.0,
    "goals": 20.0,
    "social": 10.0,
    "activity": 10.0,
    "communication": 8.0,
    "wake_cycle": 7.0,
}

COMMUNICATION_MISMATCH_CREDIT = 0.5
WAKE_CYCLE_FLEXIBLE_CREDIT = 5.0 / 7.0
WAKE_CYCLE_MISMATCH_CREDIT = 2.0 / 7.0


def round_half_up(value: float) -> int:
    # Trim float noise first so 47.4999999 does not round down.
    return int(math.floor(round(value, 6) + 0.5))


def _overlap(a: tuple[str, ...], b: tuple[str, ...]) -> float:
    shared = len(set(a) & set(b))
    return shared / max(len(a), len(b), 1)


def _closeness(a: int, b: int) -> float:
    return (10 - abs(a - b)) / 10


def _communication_match(a: str, b: str) -> float:
    if a == b:
        return 1.0
    return COMMUNICATION_MISMATCH_CREDIT


def _wake_cycle_match(a: str, b: str) -> float:
    if a == b:
        return 1.0
    if a == "flexible" or b == "flexible":
        return WAKE_CYCLE_FLEXIBLE_CREDIT
    return WAKE_CYCLE_MISMATCH_CREDIT


def factor_subscores(a: Profile, b: Profile) -> dict[str, float]:
    return {
        "interests": _overlap(a.interests, b.interests),
        "hobbies": _overlap(a.hobbies, b.hobbies),
        "goals": _overlap(a.goals, b.goals),
        "social": _closeness(a.personality_social_level, b.personality_social_level),
        "activity": _closeness(a.personality_activity_level, b.personality_activity_level),
        "communication": _communication_match(a.personality_communication, b.personality_communication),
        "wake_cycle": _wake_cycle_match(a.personality_wake_cycle, b.personality_wake_cycle),
    }


def compatibility_breakdown(a: Profile, b: Profile, weights: dict[str, float] | None = None) -> dict[str, Any]:
    weights = weights or COMPATIBILITY_WEIGHTS
    subscores = factor_subscores(a, b)
    total_weight = sum(float(weights.get(k, 0.0)) for k in subscores)
    contributions = {k: subscores[k] * float(weights.get(k, 0.0)) for k in subscores}
    raw = 100.0 * sum(contributions.values()) / total_weight if total_weight > 0 else 0.0
    return {
        "score": max(0, min(100, round_half_up(raw))),
        "raw_score": round(raw, 6),
        "factors": {
            k: {"subscore": round(subscores[k], 6), "contribution": round(contributions[k], 6)}
            for k in subscores
        },
    }


def compute_compatibility(a: Profile, b: Profile, weights: dict[str, float] | None = None) -> int:
    """Weighted 0-100 similarity of two profiles.

    Each factor is normalized to [0, 1] and scaled by its weight; the weighted
    sum is divided by the total weight and rounded half up.
    """
    return int(compatibility_breakdown(a, b, weights)["score"])


def _shared(a_items: tuple[str, ...], b_items: tuple[str, ...]) -> list[str]:
    other = set(b_items)
    return [item for item in a_items if item in other]


def shared_interests(a: Profile, b: Profile) -> list[str]:
    return _shared(a.interests, b.interests)


def shared_hobbies(a: Profile, b: Profile) -> list[str]:
    return _shared(a.hobbies, b.hobbies)


def shared_goals(a: Profile, b: Profile) -> list[str]:
    return _shared(a.goals, b.goals)


def is_dating_compatible(a: Profile, b: Profile) -> bool:
    return a.dating_enabled and b.dating_enabled
