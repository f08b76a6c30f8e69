import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

import campus_connect.main as m
from campus_connect import repo
from campus_connect.auth.deps import get_current_user
from campus_connect.services import events

USER = "11111111-1111-1111-1111-111111111111"
OTHER = "22222222-2222-2222-2222-222222222222"


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(events, "record_event", lambda *args, **kwargs: None)
    m.app.dependency_overrides[get_current_user] = lambda: {"id": USER, "email": "u@campus.edu"}
    yield TestClient(m.app)
    m.app.dependency_overrides = {}


def test_block_records_pair(client, monkeypatch):
    captured = {}
    monkeypatch.setattr(repo, "get_user_by_id", lambda user_id: {"id": user_id})
    monkeypatch.setattr(repo, "create_block", lambda blocker, blocked: captured.update(blocker=blocker, blocked=blocked) or True)
    res = client.post("/safety/block", json={"blocked_user_id": OTHER})
    assert res.status_code == 200
    assert captured == {"blocker": USER, "blocked": OTHER}


def test_cannot_block_or_report_self(client):
    assert client.post("/safety/block", json={"blocked_user_id": USER}).status_code == 400
    assert client.post("/safety/report", json={"reported_user_id": USER, "reason": "spam"}).status_code == 400


def test_block_unknown_user_is_404(client, monkeypatch):
    monkeypatch.setattr(repo, "get_user_by_id", lambda user_id: None)
    assert client.post("/safety/block", json={"blocked_user_id": OTHER}).status_code == 404


def test_unblock_reports_whether_anything_changed(client, monkeypatch):
    monkeypatch.setattr(repo, "remove_block", lambda blocker, blocked: 0)
    assert client.post("/safety/unblock", json={"blocked_user_id": OTHER}).json()["status"] == "not_blocked"


def test_report_validates_reason_and_can_block(client, monkeypatch):
    blocks = []
    monkeypatch.setattr(
        repo,
        "create_report",
        lambda reporter, reported, reason, details: {"id": "r1", "reporter_id": reporter, "reported_id": reported, "reason": reason, "details": details},
    )
    monkeypatch.setattr(repo, "create_block", lambda blocker, blocked: blocks.append((blocker, blocked)) or True)

    assert client.post("/safety/report", json={"reported_user_id": OTHER, "reason": "weird vibes"}).status_code == 400

    res = client.post("/safety/report", json={"reported_user_id": OTHER, "reason": "Harassment", "details": "rude", "block": True})
    assert res.status_code == 200
    assert res.json() == {"status": "reported", "report_id": "r1"}
    assert blocks == [(USER, OTHER)]


def test_blocks_listing_shape(client, monkeypatch):
    monkeypatch.setattr(repo, "list_blocks", lambda blocker: [{"blocked_id": OTHER, "blocked_name": "Rohan", "blocked_avatar_url": None, "created_at": None}])
    res = client.get("/safety/blocks")
    assert res.json()["blocks"][0]["blocked_user_id"] == OTHER
