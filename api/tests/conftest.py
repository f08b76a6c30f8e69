import uuid
from datetime import datetime, timezone

import pytest

from campus_connect.profiles import Profile


class FakeStore:
    """In-memory stand-in for ``campus_connect.repo`` used by protocol tests."""

    def __init__(self):
        self.profiles: dict[str, Profile] = {}
        self.likes: dict[tuple[str, str], dict] = {}
        self.matches: dict[str, dict] = {}
        self.chats: dict[str, dict] = {}
        self.blocks: set[tuple[str, str]] = set()
        self.requests: dict[str, dict] = {}
        self.members: dict[tuple[str, str], dict] = {}
        self.create_match_calls = 0

    def add_profile(self, profile: Profile) -> Profile:
        self.profiles[profile.id] = profile
        return profile

    def get_profile(self, user_id):
        return self.profiles.get(str(user_id))

    def is_blocked_pair(self, user_a, user_b):
        return (str(user_a), str(user_b)) in self.blocks or (str(user_b), str(user_a)) in self.blocks

    def list_blocked_ids(self, user_id):
        out = []
        for blocker, blocked in self.blocks:
            if blocker == user_id:
                out.append(blocked)
            elif blocked == user_id:
                out.append(blocker)
        return out

    def list_matched_ids(self, user_id):
        out = []
        for m in self.matches.values():
            if m["user_a"] == user_id:
                out.append(m["user_b"])
            elif m["user_b"] == user_id:
                out.append(m["user_a"])
        return out

    def list_liked_ids(self, user_id):
        return [to_id for (from_id, to_id) in self.likes if from_id == user_id]

    def find_reciprocal_like(self, from_id, to_id):
        row = self.likes.get((str(to_id), str(from_id)))
        return dict(row) if row else None

    def insert_like(self, from_id, to_id, kind):
        key = (str(from_id), str(to_id))
        if key in self.likes:
            return False
        self.likes[key] = {"from_user": key[0], "to_user": key[1], "kind": kind}
        return True

    def _with_chat(self, match):
        chat = self.chats.get(match["id"])
        return {**match, "chat_id": chat["id"] if chat else None}

    def get_match(self, match_id):
        match = self.matches.get(str(match_id))
        return self._with_chat(match) if match else None

    def get_match_for_pair(self, user_low, user_high):
        for m in self.matches.values():
            if m["user_a"] == user_low and m["user_b"] == user_high:
                return self._with_chat(m)
        return None

    def seed_match(self, user_low, user_high, compatibility_score=50, is_dating_match=False):
        """Insert a match row without its chat."""
        match_id = str(uuid.uuid4())
        self.matches[match_id] = {
            "id": match_id,
            "user_a": user_low,
            "user_b": user_high,
            "compatibility_score": compatibility_score,
            "is_dating_match": is_dating_match,
            "unmatched_at": None,
        }
        return dict(self.matches[match_id])

    def create_match_with_chat(self, user_low, user_high, compatibility_score, is_dating_match):
        self.create_match_calls += 1
        assert user_low < user_high
        if any(m["user_a"] == user_low and m["user_b"] == user_high for m in self.matches.values()):
            return None
        match = self.seed_match(user_low, user_high, compatibility_score, is_dating_match)
        self.insert_chat(match["id"])
        return self.get_match(match["id"])

    def insert_chat(self, match_id):
        if match_id not in self.chats:
            self.chats[match_id] = {"id": str(uuid.uuid4()), "match_id": match_id}
        return self.chats[match_id]

    def mark_unmatched(self, match_id):
        match = self.matches[str(match_id)]
        if match["unmatched_at"] is None:
            match["unmatched_at"] = datetime.now(timezone.utc)
        return self.get_match(match_id)

    def get_request(self, request_id):
        return self.requests.get(str(request_id))

    def add_request_member(self, request_id, user_id):
        key = (str(request_id), str(user_id))
        if key not in self.members:
            self.members[key] = {"id": str(uuid.uuid4()), "request_id": key[0], "user_id": key[1], "status": "accepted"}
        return self.members[key]


@pytest.fixture
def store():
    return FakeStore()
