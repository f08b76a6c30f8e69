from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..config import REQUEST_JOIN_FALLBACK_SCORE
from ..profiles import LIKE_KINDS
from .compatibility import compute_compatibility, is_dating_compatible

logger = logging.getLogger(__name__)


class MatchingError(Exception):
    """Base class for domain errors raised by the like/match protocol."""


class InvalidLike(MatchingError):
    pass


class BlockedPair(InvalidLike):
    pass


class ProfileNotFound(MatchingError):
    pass


class MatchNotFound(MatchingError):
    pass


class RequestNotFound(MatchingError):
    pass


class RequestClosed(MatchingError):
    pass


@dataclass
class LikeResult:
    matched: bool
    match_id: str | None = None
    existing_match: bool = False
    chat_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "matched": self.matched,
            "match_id": self.match_id,
            "existing_match": self.existing_match,
            "chat_id": self.chat_id,
        }


@dataclass
class JoinResult:
    member: dict[str, Any]
    match_created: bool
    existing_match: bool
    match_id: str | None = None


def canonical_pair(user_a: str, user_b: str) -> tuple[str, str]:
    return tuple(sorted((str(user_a), str(user_b))))


def _with_chat(store, match: dict[str, Any]) -> dict[str, Any]:
    """Backfill the chat of a match row read without one."""
    if match.get("chat_id"):
        return match
    chat = store.insert_chat(str(match["id"]))
    if chat is None:
        return match
    logger.warning("[MATCH] backfilled chat for match_id=%s", match["id"])
    return {**match, "chat_id": str(chat["id"])}


def _existing_match(store, user_a: str, user_b: str) -> dict[str, Any] | None:
    low, high = canonical_pair(user_a, user_b)
    existing = store.get_match_for_pair(low, high)
    return _with_chat(store, existing) if existing is not None else None


def _create_or_reuse_match(store, user_a: str, user_b: str, score: int, is_dating: bool) -> tuple[dict[str, Any], bool]:
    """Insert the canonical match row together with its chat.

    Returns ``(match, created)``. A uniqueness conflict means another writer
    won; its row is returned with ``created=False``.
    """
    low, high = canonical_pair(user_a, user_b)
    row = store.create_match_with_chat(low, high, score, is_dating)
    if row is None:
        existing = _existing_match(store, low, high)
        if existing is None:
            raise MatchNotFound(f"match for {low}/{high} conflicted but could not be read back")
        logger.info("[MATCH] conflict on pair=%s/%s resolved to existing match_id=%s", low, high, existing["id"])
        return existing, False
    logger.info("[MATCH] created match_id=%s pair=%s/%s score=%s dating=%s", row["id"], low, high, score, is_dating)
    return row, True


def _chat_id(match: dict[str, Any]) -> str | None:
    return str(match["chat_id"]) if match.get("chat_id") else None


def register_like(store, from_id: str, to_id: str, kind: str = "friend") -> LikeResult:
    """Record ``from_id`` liking ``to_id`` and match the pair on reciprocity.

    The like row is upserted, so repeated likes are no-ops. When the reverse
    like already exists a single canonical match and its chat are created.
    Pairs that already have a match row, including unmatched ones, are left
    untouched.
    """
    from_id = str(from_id)
    to_id = str(to_id)
    if from_id == to_id:
        raise InvalidLike("cannot like yourself")
    if kind not in LIKE_KINDS:
        raise InvalidLike(f"unknown like kind: {kind}")
    if store.is_blocked_pair(from_id, to_id):
        raise BlockedPair("cannot like a blocked user")

    existing = _existing_match(store, from_id, to_id)
    if existing is not None:
        return LikeResult(matched=False, match_id=str(existing["id"]), existing_match=True, chat_id=_chat_id(existing))

    if store.get_profile(to_id) is None:
        raise ProfileNotFound("profile not found")

    reciprocal = store.find_reciprocal_like(from_id, to_id)
    store.insert_like(from_id, to_id, kind)
    if reciprocal is None:
        return LikeResult(matched=False)

    profile_a = store.get_profile(from_id)
    profile_b = store.get_profile(to_id)
    if profile_a is None or profile_b is None:
        raise ProfileNotFound("profiles not found")

    score = compute_compatibility(profile_a, profile_b)
    is_dating = is_dating_compatible(profile_a, profile_b) and (
        kind == "dating" or reciprocal.get("kind") == "dating"
    )
    match, created = _create_or_reuse_match(store, from_id, to_id, score, is_dating)
    return LikeResult(
        matched=True,
        match_id=str(match["id"]),
        existing_match=not created,
        chat_id=_chat_id(match),
    )


def join_request(store, request_id: str, user_id: str) -> JoinResult:
    request = store.get_request(request_id)
    if request is None:
        raise RequestNotFound("request not found")
    if str(request.get("status") or "open") != "open":
        raise RequestClosed("request is closed")

    owner_id = str(request["user_id"])
    user_id = str(user_id)
    match_created = False
    existing_match = False
    match_id: str | None = None

    if owner_id != user_id:
        if store.is_blocked_pair(user_id, owner_id):
            raise BlockedPair("cannot join a request from a blocked user")
        existing = _existing_match(store, user_id, owner_id)
        if existing is not None:
            existing_match = True
            match_id = str(existing["id"])
        else:
            joiner = store.get_profile(user_id)
            owner = store.get_profile(owner_id)
            score = compute_compatibility(joiner, owner) if joiner and owner else REQUEST_JOIN_FALLBACK_SCORE
            match, created = _create_or_reuse_match(store, user_id, owner_id, score, False)
            match_id = str(match["id"])
            match_created = created
            existing_match = not created

    member = store.add_request_member(str(request_id), user_id)
    return JoinResult(member=member, match_created=match_created, existing_match=existing_match, match_id=match_id)


def unmatch(store, match_id: str, user_id: str) -> dict[str, Any]:
    match = store.get_match(match_id)
    if match is None or str(user_id) not in {str(match["user_a"]), str(match["user_b"])}:
        raise MatchNotFound("match not found")
    if match.get("unmatched_at"):
        return match
    logger.info("[MATCH] unmatch match_id=%s by user_id=%s", match_id, user_id)
    return store.mark_unmatched(match_id) or match
