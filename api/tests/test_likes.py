import pytest

from campus_connect.profiles import Profile
from campus_connect.services.likes import (
    BlockedPair,
    InvalidLike,
    MatchingError,
    MatchNotFound,
    ProfileNotFound,
    RequestClosed,
    RequestNotFound,
    canonical_pair,
    join_request,
    register_like,
    unmatch,
)

ALICE = "11111111-1111-1111-1111-111111111111"
BOB = "22222222-2222-2222-2222-222222222222"
CARA = "33333333-3333-3333-3333-333333333333"


def _seed(store, dating: bool = False):
    for uid in (ALICE, BOB, CARA):
        store.add_profile(Profile(id=uid, name=uid[:4], interests=("ml",), hobbies=("chess",), goals=("research",), dating_enabled=dating))


def test_canonical_pair_orders_ids():
    assert canonical_pair(BOB, ALICE) == (ALICE, BOB)
    assert canonical_pair(ALICE, BOB) == (ALICE, BOB)


def test_one_sided_like_does_not_match(store):
    _seed(store)
    result = register_like(store, ALICE, BOB)
    assert result.matched is False
    assert result.match_id is None
    assert store.matches == {}


def test_repeated_like_is_idempotent(store):
    _seed(store)
    register_like(store, ALICE, BOB)
    result = register_like(store, ALICE, BOB, kind="project")
    assert result.matched is False
    assert len(store.likes) == 1
    assert store.likes[(ALICE, BOB)]["kind"] == "friend"


def test_reciprocal_like_creates_single_canonical_match_and_chat(store):
    _seed(store)
    register_like(store, BOB, ALICE)
    result = register_like(store, ALICE, BOB)
    assert result.matched is True
    assert result.existing_match is False
    assert len(store.matches) == 1
    match = store.matches[result.match_id]
    assert (match["user_a"], match["user_b"]) == (ALICE, BOB)
    assert match["compatibility_score"] == 100
    assert result.chat_id == store.chats[result.match_id]["id"]


def test_like_after_match_reports_existing_match(store):
    _seed(store)
    register_like(store, ALICE, BOB)
    first = register_like(store, BOB, ALICE)
    again = register_like(store, ALICE, BOB)
    assert again.matched is False
    assert again.existing_match is True
    assert again.match_id == first.match_id
    assert len(store.matches) == 1


def test_concurrent_writer_conflict_resolves_to_existing_match(store):
    _seed(store)
    register_like(store, BOB, ALICE)
    original_create = store.create_match_with_chat

    def racing_create(low, high, score, is_dating):
        # Another request commits the same pair first.
        original_create(low, high, 77, False)
        return original_create(low, high, score, is_dating)

    store.create_match_with_chat = racing_create
    result = register_like(store, ALICE, BOB)
    assert result.matched is True
    assert result.existing_match is True
    assert len(store.matches) == 1
    assert store.matches[result.match_id]["compatibility_score"] == 77
    assert result.chat_id == store.chats[result.match_id]["id"]


def test_conflict_loser_backfills_missing_chat(store):
    _seed(store)
    register_like(store, BOB, ALICE)

    def racing_create(low, high, score, is_dating):
        store.seed_match(low, high, 77, False)
        return None

    store.create_match_with_chat = racing_create
    result = register_like(store, ALICE, BOB)
    assert result.existing_match is True
    assert result.chat_id is not None
    assert store.chats[result.match_id]["id"] == result.chat_id


def test_like_on_match_without_chat_backfills_chat(store):
    _seed(store)
    match = store.seed_match(ALICE, BOB)
    assert store.chats == {}

    result = register_like(store, BOB, ALICE)
    assert result.existing_match is True
    assert result.match_id == match["id"]
    assert result.chat_id == store.chats[match["id"]]["id"]

    again = register_like(store, ALICE, BOB)
    assert again.chat_id == result.chat_id
    assert len(store.chats) == 1


def test_dating_flag_needs_both_opted_in_and_a_dating_like(store):
    _seed(store, dating=True)
    register_like(store, BOB, ALICE, kind="dating")
    result = register_like(store, ALICE, BOB, kind="friend")
    assert store.matches[result.match_id]["is_dating_match"] is True

    register_like(store, CARA, ALICE, kind="study")
    result = register_like(store, ALICE, CARA, kind="project")
    assert store.matches[result.match_id]["is_dating_match"] is False


def test_dating_like_without_opt_in_is_not_a_dating_match(store):
    _seed(store, dating=False)
    register_like(store, BOB, ALICE, kind="dating")
    result = register_like(store, ALICE, BOB, kind="dating")
    assert store.matches[result.match_id]["is_dating_match"] is False


def test_invalid_likes_are_rejected(store):
    _seed(store)
    with pytest.raises(InvalidLike):
        register_like(store, ALICE, ALICE)
    with pytest.raises(InvalidLike):
        register_like(store, ALICE, BOB, kind="crush")
    store.blocks.add((BOB, ALICE))
    with pytest.raises(InvalidLike):
        register_like(store, ALICE, BOB)
    assert store.likes == {}


def test_reciprocal_like_with_missing_profile_raises(store):
    store.add_profile(Profile(id=ALICE))
    register_like(store, BOB, ALICE)
    with pytest.raises(ProfileNotFound):
        register_like(store, ALICE, BOB)


def test_unmatch_is_terminal(store):
    _seed(store)
    register_like(store, ALICE, BOB)
    match_id = register_like(store, BOB, ALICE).match_id

    row = unmatch(store, match_id, BOB)
    assert row["unmatched_at"] is not None

    register_like(store, ALICE, BOB)
    result = register_like(store, BOB, ALICE)
    assert result.matched is False
    assert result.existing_match is True
    assert store.create_match_calls == 1


def test_unmatch_requires_participant(store):
    _seed(store)
    register_like(store, ALICE, BOB)
    match_id = register_like(store, BOB, ALICE).match_id
    with pytest.raises(MatchNotFound):
        unmatch(store, match_id, CARA)
    with pytest.raises(MatchNotFound):
        unmatch(store, "00000000-0000-0000-0000-000000000000", ALICE)


def test_join_request_creates_match_with_owner_once(store):
    _seed(store)
    store.requests["r1"] = {"id": "r1", "user_id": ALICE, "status": "open"}
    first = join_request(store, "r1", BOB)
    assert first.match_created is True
    assert first.existing_match is False
    assert store.matches[first.match_id]["is_dating_match"] is False

    second = join_request(store, "r1", BOB)
    assert second.match_created is False
    assert second.existing_match is True
    assert second.match_id == first.match_id
    assert second.member["id"] == first.member["id"]
    assert len(store.members) == 1


def test_join_request_without_profiles_uses_fallback_score(store):
    store.requests["r1"] = {"id": "r1", "user_id": ALICE, "status": "open"}
    result = join_request(store, "r1", BOB)
    assert store.matches[result.match_id]["compatibility_score"] == 50


def test_owner_joining_own_request_creates_no_match(store):
    _seed(store)
    store.requests["r1"] = {"id": "r1", "user_id": ALICE, "status": "open"}
    result = join_request(store, "r1", ALICE)
    assert result.match_id is None
    assert store.matches == {}


def test_join_request_errors(store):
    with pytest.raises(RequestNotFound):
        join_request(store, "missing", BOB)
    store.requests["r1"] = {"id": "r1", "user_id": ALICE, "status": "closed"}
    with pytest.raises(RequestClosed):
        join_request(store, "r1", BOB)


def test_like_to_unknown_profile_raises_and_stores_nothing(store):
    store.add_profile(Profile(id=ALICE))
    with pytest.raises(ProfileNotFound):
        register_like(store, ALICE, BOB)
    assert store.likes == {}


def test_blocked_like_raises_blocked_pair(store):
    _seed(store)
    store.blocks.add((ALICE, BOB))
    with pytest.raises(BlockedPair):
        register_like(store, BOB, ALICE)


def test_join_request_from_blocked_user_is_rejected(store):
    _seed(store)
    store.requests["r1"] = {"id": "r1", "user_id": ALICE, "status": "open"}
    store.blocks.add((ALICE, BOB))
    with pytest.raises(BlockedPair):
        join_request(store, "r1", BOB)
    assert store.matches == {}
    assert store.members == {}


def test_join_request_backfills_chat_of_existing_match(store):
    _seed(store)
    match = store.seed_match(ALICE, BOB)
    store.requests["r1"] = {"id": "r1", "user_id": ALICE, "status": "open"}
    result = join_request(store, "r1", BOB)
    assert result.existing_match is True
    assert result.match_id == match["id"]
    assert match["id"] in store.chats


def test_request_closed_is_not_an_invalid_like():
    assert issubclass(RequestClosed, MatchingError)
    assert not issubclass(RequestClosed, InvalidLike)
