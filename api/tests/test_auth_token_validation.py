"""
Tests for access token handling.

These tests verify that:
1. Tokens round-trip through create/decode
2. Expired and tampered tokens are rejected with 401
3. Auth failures expose a trace_id, and a reason only in dev mode
"""

import pytest

pytest.importorskip("fastapi")
from fastapi import HTTPException
from fastapi.testclient import TestClient

import campus_connect.main as m
from campus_connect import repo
from campus_connect.auth import deps as auth_deps
from campus_connect.auth import security


@pytest.fixture(autouse=True)
def _secret(monkeypatch):
    monkeypatch.setattr(security, "JWT_SECRET", "test-secret")


class TestTokens:
    def test_round_trip(self):
        token = security.create_access_token("u1", "u1@campus.edu")
        payload = security.decode_access_token(token)
        assert payload["sub"] == "u1"
        assert payload["email"] == "u1@campus.edu"

    def test_expired_token_rejected(self):
        token = security.create_access_token("u1", "u1@campus.edu", ttl_minutes=-5)
        with pytest.raises(HTTPException) as exc:
            security.decode_access_token(token)
        assert exc.value.status_code == 401
        assert exc.value.detail == "Token expired"

    def test_tampered_token_rejected(self):
        token = security.create_access_token("u1", "u1@campus.edu")
        with pytest.raises(HTTPException) as exc:
            security.decode_access_token(token[:-2] + "xx")
        assert exc.value.status_code == 401

    def test_missing_secret_is_server_error(self, monkeypatch):
        monkeypatch.setattr(security, "JWT_SECRET", "")
        with pytest.raises(HTTPException) as exc:
            security.create_access_token("u1", "u1@campus.edu")
        assert exc.value.status_code == 500


class TestAuthErrors:
    def test_dev_mode_includes_reason(self, monkeypatch):
        monkeypatch.setattr(auth_deps, "DEV_MODE", True)
        res = TestClient(m.app).get("/auth/me", headers={"Authorization": "Token abc"})
        assert res.status_code == 401
        detail = res.json()["detail"]
        assert detail["reason"] == "malformed_token"
        assert detail["trace_id"]

    def test_prod_mode_hides_reason(self, monkeypatch):
        monkeypatch.setattr(auth_deps, "DEV_MODE", False)
        res = TestClient(m.app).get("/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert res.status_code == 401
        assert "reason" not in res.json()["detail"]

    def test_disabled_account_is_forbidden(self, monkeypatch):
        monkeypatch.setattr(repo, "get_user_by_id", lambda user_id: {"id": "u1", "email": "u1@campus.edu", "disabled_at": "2026-01-01"})
        token = security.create_access_token("u1", "u1@campus.edu")
        res = TestClient(m.app).get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 403
