import pytest

from campus_connect.profiles import Profile
from campus_connect.services.discovery import (
    EVERYONE,
    DiscoverFilters,
    SpecificGender,
    accepts,
    build_exclusion_set,
    discover,
    parse_preference,
    pool_query_filters,
    rank_requests,
)


def _p(user_id: str, **overrides) -> Profile:
    base = {
        "id": user_id,
        "name": user_id,
        "interests": ["ml", "design"],
        "hobbies": ["chess"],
        "goals": ["hackathon team"],
    }
    base.update(overrides)
    return Profile(**base)


def _ids(results):
    return [r.profile.id for r in results]


def test_parse_preference_defaults_to_everyone():
    assert parse_preference(None) == EVERYONE
    assert parse_preference("Everyone") == EVERYONE
    assert parse_preference("Female") == SpecificGender("female")


def test_specific_preference_rejects_unknown_gender():
    assert accepts(EVERYONE, None)
    assert accepts(SpecificGender("female"), "female")
    assert not accepts(SpecificGender("female"), None)
    assert not accepts(SpecificGender("female"), "male")


def test_general_mode_excludes_viewer_and_exclusions():
    viewer = _p("v")
    pool = [_p("v"), _p("a"), _p("b"), _p("c")]
    results = discover(viewer, pool, exclusions={"b"})
    assert _ids(results) == ["a", "c"]


def test_results_sorted_by_score_with_stable_ties():
    viewer = _p("v", interests=["ml", "design", "music"])
    pool = [
        _p("low", interests=["film"]),
        _p("tie1", interests=["ml"]),
        _p("high", interests=["ml", "design", "music"]),
        _p("tie2", interests=["design"]),
    ]
    results = discover(viewer, pool)
    assert _ids(results) == ["high", "tie1", "tie2", "low"]
    assert results[1].score == results[2].score
    assert results[0].shared_interests == ["ml", "design", "music"]


def test_limit_truncates_after_ranking():
    viewer = _p("v", interests=["ml", "design"])
    pool = [_p("a", interests=["film"]), _p("b", interests=["ml", "design"]), _p("c", interests=["ml"])]
    assert _ids(discover(viewer, pool, limit=2)) == ["b", "c"]
    assert discover(viewer, pool, limit=0) == []


def test_empty_pool_returns_empty_list():
    assert discover(_p("v"), []) == []


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        discover(_p("v"), [_p("a")], mode="romance")


def test_dating_mode_requires_viewer_opt_in():
    viewer = _p("v", dating_enabled=False, gender="male", dating_preference="female")
    pool = [_p("a", dating_enabled=True, gender="female", dating_preference="male")]
    assert discover(viewer, pool, mode="dating") == []


def test_dating_mode_applies_preferences_in_both_directions():
    viewer = _p("v", dating_enabled=True, gender="male", dating_preference="female")
    pool = [
        _p("match", dating_enabled=True, gender="female", dating_preference="male"),
        _p("wants_women", dating_enabled=True, gender="female", dating_preference="female"),
        _p("open", dating_enabled=True, gender="female", dating_preference="everyone"),
        _p("unknown", dating_enabled=True, gender=None, dating_preference="everyone"),
        _p("not_dating", dating_enabled=False, gender="female", dating_preference="male"),
        _p("male", dating_enabled=True, gender="male", dating_preference="male"),
    ]
    assert sorted(_ids(discover(viewer, pool, mode="dating"))) == ["match", "open"]


def test_dating_mode_with_open_preferences_accepts_unknown_gender():
    viewer = _p("v", dating_enabled=True)
    pool = [_p("a", dating_enabled=True)]
    assert _ids(discover(viewer, pool, mode="dating")) == ["a"]


def test_dating_shared_items_merge_interests_and_hobbies():
    viewer = _p("v", dating_enabled=True, interests=["ml", "film"], hobbies=["chess", "hiking"])
    pool = [_p("a", dating_enabled=True, interests=["chess"], hobbies=["film", "ml"])]
    results = discover(viewer, pool, mode="dating")
    assert results[0].shared_interests == ["ml", "film", "chess"]


def test_general_filters():
    viewer = _p("v", dating_enabled=True)
    pool = [
        _p("cs2", branch="CS", year=2, personality_social_level=7),
        _p("cs3", branch="CS", year=3, personality_social_level=7),
        _p("ee2", branch="EE", year=2),
        _p("cs2_quiet", branch="CS", year=2, personality_social_level=1),
    ]
    filters = DiscoverFilters(branch="CS", year=2, social_range=(5, 10))
    assert _ids(discover(viewer, pool, filters=filters)) == ["cs2"]


def test_overlap_filters_require_one_shared_item():
    viewer = _p("v")
    pool = [_p("a", hobbies=["guitar"]), _p("b", hobbies=["chess", "dance"])]
    filters = DiscoverFilters(hobbies=["dance", "football"])
    assert _ids(discover(viewer, pool, filters=filters)) == ["b"]


def test_dating_only_filter_ignored_for_viewers_without_dating():
    pool = [_p("a", dating_enabled=True), _p("b", dating_enabled=False)]
    filters = DiscoverFilters(dating_only=True)
    assert sorted(_ids(discover(_p("v"), pool, filters=filters))) == ["a", "b"]
    assert _ids(discover(_p("v", dating_enabled=True), pool, filters=filters)) == ["a"]


def test_build_exclusion_set_unions_blocks_matches_and_likes(store):
    store.blocks.add(("x", "v"))
    store.insert_like("v", "liked", "friend")
    store.create_match_with_chat("m", "v", 80, False)
    assert build_exclusion_set(store, "v") == frozenset({"v", "x", "liked", "m"})


def test_rank_requests_orders_by_relevance_and_drops_blocked():
    viewer = _p("v", interests=["ml", "design"], hobbies=["chess"])
    requests = [
        {"id": "r1", "user_id": "o1", "related_interests": ["film"]},
        {"id": "r2", "user_id": "o2", "related_interests": ["ml", "chess"]},
        {"id": "r3", "user_id": "blocked", "related_interests": ["ml", "design", "chess"]},
        {"id": "r4", "user_id": "o3", "related_interests": ["design"]},
    ]
    ranked = rank_requests(viewer, requests, blocked_ids=["blocked"])
    assert [r["id"] for r in ranked] == ["r2", "r4", "r1"]


def test_pool_query_filters_carry_general_mode_filters():
    filters = DiscoverFilters(branch="CSE", interests=["ml"], goals=["research"], social_range=(3, 7), dating_only=True)
    kwargs = pool_query_filters(_p("v", dating_enabled=True), "general", filters)
    assert kwargs == {
        "dating_only": True,
        "branch": "CSE",
        "year": None,
        "interests": ["ml"],
        "hobbies": None,
        "goals": ["research"],
        "social_range": (3, 7),
        "activity_range": None,
    }
    assert pool_query_filters(_p("v"), "general", filters)["dating_only"] is False


def test_pool_query_filters_dating_mode_only_restricts_to_dating_profiles():
    filters = DiscoverFilters(branch="CSE", interests=["ml"])
    assert pool_query_filters(_p("v", dating_enabled=True), "dating", filters) == {"dating_only": True}
