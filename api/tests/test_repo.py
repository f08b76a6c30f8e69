from sqlalchemy.exc import IntegrityError

from campus_connect import repo


class FakeResult:
    def __init__(self, rows=None):
        self.rows = rows or []

    def mappings(self):
        return self

    def all(self):
        return self.rows

    def first(self):
        return self.rows[0] if self.rows else None


class FakeDB:
    def __init__(self, fail_on: str | None = None, rows=None):
        self.calls = []
        self.commits = 0
        self.rollbacks = 0
        self.fail_on = fail_on
        self.rows = rows

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, stmt, params=None):
        sql = str(stmt)
        self.calls.append((sql, params))
        if self.fail_on and self.fail_on in sql:
            raise IntegrityError(sql, params, Exception("duplicate key value"))
        return FakeResult(self.rows)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


def test_create_match_with_chat_writes_both_rows_in_one_commit(monkeypatch):
    db = FakeDB()
    monkeypatch.setattr(repo, "SessionLocal", lambda: db)
    monkeypatch.setattr(repo, "get_match", lambda match_id: {"id": match_id, "chat_id": "c1"})

    row = repo.create_match_with_chat("a", "b", 80, False)
    assert [sql.split()[2] for sql, _ in db.calls] == ["user_match", "chat"]
    match_params, chat_params = db.calls[0][1], db.calls[1][1]
    assert chat_params["match_id"] == match_params["id"]
    assert db.commits == 1
    assert row == {"id": match_params["id"], "chat_id": "c1"}


def test_create_match_with_chat_conflict_rolls_back_everything(monkeypatch):
    db = FakeDB(fail_on="INSERT INTO user_match")
    monkeypatch.setattr(repo, "SessionLocal", lambda: db)
    assert repo.create_match_with_chat("a", "b", 80, False) is None
    assert db.commits == 0
    assert db.rollbacks == 1
    assert len(db.calls) == 1


def test_create_match_with_chat_chat_failure_leaves_no_match(monkeypatch):
    db = FakeDB(fail_on="INSERT INTO chat")
    monkeypatch.setattr(repo, "SessionLocal", lambda: db)
    assert repo.create_match_with_chat("a", "b", 80, False) is None
    assert db.commits == 0
    assert db.rollbacks == 1


def test_discoverable_pool_pushes_filters_into_sql(monkeypatch):
    db = FakeDB(rows=[])
    monkeypatch.setattr(repo, "SessionLocal", lambda: db)
    repo.list_discoverable_profiles(
        "v",
        dating_only=True,
        interests=["ml"],
        hobbies=[],
        social_range=(3, 7),
        limit=100,
    )
    sql, params = db.calls[0]
    assert "interests && CAST(:interests AS text[])" in sql
    assert "personality_social_level BETWEEN :social_min AND :social_max" in sql
    assert params["dating_only"] is True
    assert params["interests"] == ["ml"]
    assert params["hobbies"] is None
    assert params["goals"] is None
    assert (params["social_min"], params["social_max"]) == (3, 7)
    assert params["activity_min"] is None
