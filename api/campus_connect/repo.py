import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from campus_connect.database import SessionLocal
from campus_connect.profiles import Profile, profile_from_row, profiles_from_rows

PROFILE_UPDATABLE_COLUMNS = (
    "name",
    "age",
    "branch",
    "year",
    "bio",
    "interests",
    "hobbies",
    "goals",
    "personality_social_level",
    "personality_activity_level",
    "personality_communication",
    "personality_wake_cycle",
    "dating_mode",
    "dating_preference",
    "gender",
    "instagram_handle",
    "avatar_url",
    "photos",
    "prompt_good_at",
    "prompt_care_about",
    "prompt_looking_for",
    "college",
    "onboarding_completed",
)

REQUEST_UPDATABLE_COLUMNS = ("title", "description", "category", "related_interests", "status", "max_participants")


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


# Accounts


def create_user(email: str, password_hash: str) -> dict[str, Any] | None:
    user_id = str(uuid.uuid4())
    try:
        with SessionLocal() as db:
            db.execute(
                text(
                    """
                    INSERT INTO user_account (id, email, password_hash)
                    VALUES (:id, :email, :password_hash)
                    """
                ),
                {"id": user_id, "email": email, "password_hash": password_hash},
            )
            db.commit()
    except IntegrityError:
        return None
    return get_user_by_id(user_id)


def get_user_by_email(email: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(text("SELECT * FROM user_account WHERE email=:email"), {"email": email}).mappings().first()
    return dict(row) if row else None


def get_user_by_id(user_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(text("SELECT * FROM user_account WHERE id=CAST(:id AS uuid)"), {"id": user_id}).mappings().first()
    return dict(row) if row else None


def update_last_login(user_id: str) -> None:
    with SessionLocal() as db:
        db.execute(
            text("UPDATE user_account SET last_login_at=:now WHERE id=CAST(:id AS uuid)"),
            {"id": user_id, "now": _now_utc()},
        )
        db.commit()


# Profiles


def get_profile_row(user_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(text("SELECT * FROM profile WHERE id=CAST(:id AS uuid)"), {"id": user_id}).mappings().first()
    return dict(row) if row else None


def get_profile(user_id: str) -> Profile | None:
    row = get_profile_row(user_id)
    return profile_from_row(row) if row else None


def upsert_profile(user_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    values = {k: v for k, v in fields.items() if k in PROFILE_UPDATABLE_COLUMNS}
    columns = ["id", *values.keys()]
    placeholders = ["CAST(:id AS uuid)", *[f":{k}" for k in values.keys()]]
    assignments = [f"{k}=EXCLUDED.{k}" for k in values.keys()]
    assignments.append("updated_at=now()")
    with SessionLocal() as db:
        db.execute(
            text(
                f"""
                INSERT INTO profile ({", ".join(columns)})
                VALUES ({", ".join(placeholders)})
                ON CONFLICT (id) DO UPDATE SET {", ".join(assignments)}
                """
            ),
            {"id": user_id, **values},
        )
        db.commit()
    return get_profile_row(user_id)


def list_discoverable_profiles(
    viewer_id: str,
    *,
    dating_only: bool = False,
    branch: str | None = None,
    year: int | None = None,
    interests: list[str] | None = None,
    hobbies: list[str] | None = None,
    goals: list[str] | None = None,
    social_range: tuple[int, int] | None = None,
    activity_range: tuple[int, int] | None = None,
    limit: int = 100,
) -> list[Profile]:
    """Candidate pool for discovery.

    List filters match on any overlap; ranges are inclusive. ``None`` skips a
    filter.
    """
    social_min, social_max = social_range or (None, None)
    activity_min, activity_max = activity_range or (None, None)
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT *
                FROM profile
                WHERE onboarding_completed = true
                  AND is_banned = false
                  AND id <> CAST(:viewer_id AS uuid)
                  AND (:dating_only = false OR dating_mode = true)
                  AND (:branch IS NULL OR branch = :branch)
                  AND (:year IS NULL OR year = :year)
                  AND (CAST(:interests AS text[]) IS NULL OR interests && CAST(:interests AS text[]))
                  AND (CAST(:hobbies AS text[]) IS NULL OR hobbies && CAST(:hobbies AS text[]))
                  AND (CAST(:goals AS text[]) IS NULL OR goals && CAST(:goals AS text[]))
                  AND (CAST(:social_min AS integer) IS NULL
                       OR personality_social_level BETWEEN :social_min AND :social_max)
                  AND (CAST(:activity_min AS integer) IS NULL
                       OR personality_activity_level BETWEEN :activity_min AND :activity_max)
                ORDER BY updated_at DESC
                LIMIT :limit
                """
            ),
            {
                "viewer_id": viewer_id,
                "dating_only": dating_only,
                "branch": branch,
                "year": year,
                "interests": interests or None,
                "hobbies": hobbies or None,
                "goals": goals or None,
                "social_min": social_min,
                "social_max": social_max,
                "activity_min": activity_min,
                "activity_max": activity_max,
                "limit": limit,
            },
        ).mappings().all()
    return profiles_from_rows(dict(r) for r in rows)


# Exclusion lookups


def list_blocked_ids(user_id: str) -> list[str]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT blocked_id AS other_id FROM block WHERE blocker_id=CAST(:user_id AS uuid)
                UNION
                SELECT blocker_id AS other_id FROM block WHERE blocked_id=CAST(:user_id AS uuid)
                """
            ),
            {"user_id": user_id},
        ).mappings().all()
    return [str(r["other_id"]) for r in rows]


def list_matched_ids(user_id: str) -> list[str]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT CASE WHEN user_a = CAST(:user_id AS uuid) THEN user_b ELSE user_a END AS other_id
                FROM user_match
                WHERE user_a = CAST(:user_id AS uuid) OR user_b = CAST(:user_id AS uuid)
                """
            ),
            {"user_id": user_id},
        ).mappings().all()
    return [str(r["other_id"]) for r in rows]


def list_liked_ids(user_id: str) -> list[str]:
    with SessionLocal() as db:
        rows = db.execute(
            text("SELECT to_user FROM user_like WHERE from_user=CAST(:user_id AS uuid)"),
            {"user_id": user_id},
        ).mappings().all()
    return [str(r["to_user"]) for r in rows]


def is_blocked_pair(user_a: str, user_b: str) -> bool:
    with SessionLocal() as db:
        row = db.execute(
            text(
                """
                SELECT 1
                FROM block
                WHERE (blocker_id=CAST(:a AS uuid) AND blocked_id=CAST(:b AS uuid))
                   OR (blocker_id=CAST(:b AS uuid) AND blocked_id=CAST(:a AS uuid))
                LIMIT 1
                """
            ),
            {"a": user_a, "b": user_b},
        ).first()
    return bool(row)


# Likes and matches


def find_reciprocal_like(from_id: str, to_id: str) -> dict[str, Any] | None:
    """Return the like ``to_id`` already sent to ``from_id``, if any."""
    with SessionLocal() as db:
        row = db.execute(
            text(
                """
                SELECT id, from_user, to_user, kind, created_at
                FROM user_like
                WHERE from_user=CAST(:to_id AS uuid) AND to_user=CAST(:from_id AS uuid)
                """
            ),
            {"from_id": from_id, "to_id": to_id},
        ).mappings().first()
    return dict(row) if row else None


def insert_like(from_id: str, to_id: str, kind: str) -> bool:
    with SessionLocal() as db:
        res = db.execute(
            text(
                """
                INSERT INTO user_like (id, from_user, to_user, kind)
                VALUES (:id, CAST(:from_id AS uuid), CAST(:to_id AS uuid), :kind)
                ON CONFLICT (from_user, to_user) DO NOTHING
                """
            ),
            {"id": str(uuid.uuid4()), "from_id": from_id, "to_id": to_id, "kind": kind},
        )
        db.commit()
        return bool(res.rowcount)


def get_match(match_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(
            text(
                """
                SELECT m.*, c.id AS chat_id
                FROM user_match m
                LEFT JOIN chat c ON c.match_id = m.id
                WHERE m.id=CAST(:id AS uuid)
                """
            ),
            {"id": match_id},
        ).mappings().first()
    return dict(row) if row else None


def get_match_for_pair(user_low: str, user_high: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(
            text(
                """
                SELECT m.*, c.id AS chat_id
                FROM user_match m
                LEFT JOIN chat c ON c.match_id = m.id
                WHERE m.user_a=CAST(:a AS uuid) AND m.user_b=CAST(:b AS uuid)
                """
            ),
            {"a": user_low, "b": user_high},
        ).mappings().first()
    return dict(row) if row else None


def create_match_with_chat(user_low: str, user_high: str, compatibility_score: int, is_dating_match: bool) -> dict[str, Any] | None:
    """Insert the canonical match row and its chat in one transaction.

    Returns ``None`` when the pair already has a match; nothing is written then.
    """
    match_id = str(uuid.uuid4())
    with SessionLocal() as db:
        try:
            db.execute(
                text(
                    """
                    INSERT INTO user_match (id, user_a, user_b, compatibility_score, is_dating_match)
                    VALUES (:id, CAST(:a AS uuid), CAST(:b AS uuid), :score, :is_dating)
                    """
                ),
                {"id": match_id, "a": user_low, "b": user_high, "score": int(compatibility_score), "is_dating": bool(is_dating_match)},
            )
            db.execute(
                text("INSERT INTO chat (id, match_id) VALUES (:id, CAST(:match_id AS uuid))"),
                {"id": str(uuid.uuid4()), "match_id": match_id},
            )
            db.commit()
        except IntegrityError:
            db.rollback()
            return None
    return get_match(match_id)


def insert_chat(match_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        db.execute(
            text(
                """
                INSERT INTO chat (id, match_id)
                VALUES (:id, CAST(:match_id AS uuid))
                ON CONFLICT (match_id) DO NOTHING
                """
            ),
            {"id": str(uuid.uuid4()), "match_id": match_id},
        )
        db.commit()
        row = db.execute(
            text("SELECT * FROM chat WHERE match_id=CAST(:match_id AS uuid)"),
            {"match_id": match_id},
        ).mappings().first()
    return dict(row) if row else None


def mark_unmatched(match_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        db.execute(
            text(
                """
                UPDATE user_match
                SET unmatched_at = COALESCE(unmatched_at, :now)
                WHERE id=CAST(:id AS uuid)
                """
            ),
            {"id": match_id, "now": _now_utc()},
        )
        db.commit()
    return get_match(match_id)


def list_matches_for_user(user_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT
                  m.id,
                  m.user_a,
                  m.user_b,
                  m.compatibility_score,
                  m.is_dating_match,
                  m.created_at,
                  c.id AS chat_id,
                  c.last_message_at,
                  CASE WHEN m.user_a = CAST(:user_id AS uuid) THEN m.user_b ELSE m.user_a END AS other_user_id,
                  p.name AS other_name,
                  p.avatar_url AS other_avatar_url,
                  p.branch AS other_branch,
                  p.year AS other_year,
                  lm.content AS latest_message_content,
                  lm.created_at AS latest_message_at
                FROM user_match m
                LEFT JOIN chat c ON c.match_id = m.id
                JOIN profile p
                  ON p.id = (CASE WHEN m.user_a = CAST(:user_id AS uuid) THEN m.user_b ELSE m.user_a END)
                LEFT JOIN LATERAL (
                  SELECT msg.content, msg.created_at
                  FROM message msg
                  WHERE msg.chat_id = c.id
                  ORDER BY msg.created_at DESC
                  LIMIT 1
                ) lm ON TRUE
                WHERE m.unmatched_at IS NULL
                  AND (m.user_a = CAST(:user_id AS uuid) OR m.user_b = CAST(:user_id AS uuid))
                ORDER BY m.created_at DESC
                """
            ),
            {"user_id": user_id},
        ).mappings().all()
    return [dict(r) for r in rows]


def match_stats(user_id: str) -> dict[str, int]:
    with SessionLocal() as db:
        row = db.execute(
            text(
                """
                SELECT
                  COUNT(*) AS total_matches,
                  COUNT(*) FILTER (WHERE is_dating_match) AS dating_matches
                FROM user_match
                WHERE unmatched_at IS NULL
                  AND (user_a = CAST(:user_id AS uuid) OR user_b = CAST(:user_id AS uuid))
                """
            ),
            {"user_id": user_id},
        ).mappings().first()
    return {
        "total_matches": int((row or {}).get("total_matches") or 0),
        "dating_matches": int((row or {}).get("dating_matches") or 0),
    }


# Chat


def get_chat(chat_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(
            text(
                """
                SELECT c.*, m.user_a, m.user_b, m.unmatched_at
                FROM chat c
                JOIN user_match m ON m.id = c.match_id
                WHERE c.id=CAST(:id AS uuid)
                """
            ),
            {"id": chat_id},
        ).mappings().first()
    return dict(row) if row else None


def get_messages(chat_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT id, chat_id, sender_id, content, created_at, read_at
                FROM message
                WHERE chat_id=CAST(:chat_id AS uuid)
                ORDER BY created_at ASC
                """
            ),
            {"chat_id": chat_id},
        ).mappings().all()
    return [dict(r) for r in rows]


def create_message(chat_id: str, sender_id: str, content: str) -> dict[str, Any]:
    message_id = str(uuid.uuid4())
    with SessionLocal() as db:
        db.execute(
            text(
                """
                INSERT INTO message (id, chat_id, sender_id, content)
                VALUES (:id, CAST(:chat_id AS uuid), CAST(:sender_id AS uuid), :content)
                """
            ),
            {"id": message_id, "chat_id": chat_id, "sender_id": sender_id, "content": content},
        )
        db.execute(
            text("UPDATE chat SET last_message_at=now() WHERE id=CAST(:chat_id AS uuid)"),
            {"chat_id": chat_id},
        )
        db.commit()
        row = db.execute(
            text("SELECT id, chat_id, sender_id, content, created_at, read_at FROM message WHERE id=CAST(:id AS uuid)"),
            {"id": message_id},
        ).mappings().first()
    return dict(row) if row else {"id": message_id, "chat_id": chat_id, "sender_id": sender_id, "content": content}


def mark_messages_read(chat_id: str, reader_id: str) -> int:
    with SessionLocal() as db:
        res = db.execute(
            text(
                """
                UPDATE message
                SET read_at=:now
                WHERE chat_id=CAST(:chat_id AS uuid)
                  AND sender_id <> CAST(:reader_id AS uuid)
                  AND read_at IS NULL
                """
            ),
            {"chat_id": chat_id, "reader_id": reader_id, "now": _now_utc()},
        )
        db.commit()
        return int(res.rowcount or 0)


# Safety


def create_block(blocker_id: str, blocked_id: str) -> bool:
    if str(blocker_id) == str(blocked_id):
        return False
    with SessionLocal() as db:
        db.execute(
            text(
                """
                INSERT INTO block (id, blocker_id, blocked_id)
                VALUES (:id, CAST(:blocker_id AS uuid), CAST(:blocked_id AS uuid))
                ON CONFLICT (blocker_id, blocked_id) DO NOTHING
                """
            ),
            {"id": str(uuid.uuid4()), "blocker_id": blocker_id, "blocked_id": blocked_id},
        )
        db.commit()
    return True


def remove_block(blocker_id: str, blocked_id: str) -> int:
    with SessionLocal() as db:
        res = db.execute(
            text(
                """
                DELETE FROM block
                WHERE blocker_id=CAST(:blocker_id AS uuid)
                  AND blocked_id=CAST(:blocked_id AS uuid)
                """
            ),
            {"blocker_id": blocker_id, "blocked_id": blocked_id},
        )
        db.commit()
        return int(res.rowcount or 0)


def list_blocks(blocker_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT b.blocked_id, b.created_at, p.name AS blocked_name, p.avatar_url AS blocked_avatar_url
                FROM block b
                LEFT JOIN profile p ON p.id = b.blocked_id
                WHERE b.blocker_id=CAST(:blocker_id AS uuid)
                ORDER BY b.created_at DESC
                """
            ),
            {"blocker_id": blocker_id},
        ).mappings().all()
    return [dict(r) for r in rows]


def create_report(reporter_id: str, reported_id: str, reason: str, details: str | None) -> dict[str, Any]:
    report_id = str(uuid.uuid4())
    with SessionLocal() as db:
        db.execute(
            text(
                """
                INSERT INTO report (id, reporter_id, reported_id, reason, details)
                VALUES (:id, CAST(:reporter_id AS uuid), CAST(:reported_id AS uuid), :reason, :details)
                """
            ),
            {"id": report_id, "reporter_id": reporter_id, "reported_id": reported_id, "reason": reason, "details": details},
        )
        db.commit()
    return {"id": report_id, "reporter_id": reporter_id, "reported_id": reported_id, "reason": reason, "details": details}


# Requests


def list_open_requests(category: str | None = None) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT
                  r.*,
                  p.name AS owner_name,
                  p.avatar_url AS owner_avatar_url,
                  (SELECT COUNT(*) FROM request_member rm WHERE rm.request_id = r.id AND rm.status = 'accepted') AS member_count
                FROM request r
                JOIN profile p ON p.id = r.user_id
                WHERE r.status = 'open'
                  AND (:category IS NULL OR r.category = :category)
                ORDER BY r.created_at DESC
                """
            ),
            {"category": category},
        ).mappings().all()
    return [dict(r) for r in rows]


def list_requests_for_owner(user_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT
                  r.*,
                  (SELECT COUNT(*) FROM request_member rm WHERE rm.request_id = r.id AND rm.status = 'accepted') AS member_count
                FROM request r
                WHERE r.user_id = CAST(:user_id AS uuid)
                ORDER BY r.created_at DESC
                """
            ),
            {"user_id": user_id},
        ).mappings().all()
    return [dict(r) for r in rows]


def list_joined_request_ids(user_id: str) -> list[str]:
    with SessionLocal() as db:
        rows = db.execute(
            text("SELECT request_id FROM request_member WHERE user_id=CAST(:user_id AS uuid)"),
            {"user_id": user_id},
        ).mappings().all()
    return [str(r["request_id"]) for r in rows]


def list_request_members(request_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT rm.user_id, rm.status, rm.created_at, p.name, p.avatar_url
                FROM request_member rm
                JOIN profile p ON p.id = rm.user_id
                WHERE rm.request_id = CAST(:request_id AS uuid)
                  AND rm.status = 'accepted'
                ORDER BY rm.created_at ASC
                """
            ),
            {"request_id": request_id},
        ).mappings().all()
    return [dict(r) for r in rows]


def get_request(request_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(text("SELECT * FROM request WHERE id=CAST(:id AS uuid)"), {"id": request_id}).mappings().first()
    return dict(row) if row else None


def create_request(user_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    request_id = str(uuid.uuid4())
    with SessionLocal() as db:
        db.execute(
            text(
                """
                INSERT INTO request (id, user_id, title, description, category, related_interests, max_participants, status)
                VALUES (:id, CAST(:user_id AS uuid), :title, :description, :category, :related_interests, :max_participants, 'open')
                """
            ),
            {
                "id": request_id,
                "user_id": user_id,
                "title": fields.get("title"),
                "description": fields.get("description"),
                "category": fields.get("category"),
                "related_interests": list(fields.get("related_interests") or []),
                "max_participants": fields.get("max_participants"),
            },
        )
        db.commit()
    return get_request(request_id)


def update_request(request_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    values = {k: v for k, v in fields.items() if k in REQUEST_UPDATABLE_COLUMNS}
    if values:
        assignments = [f"{k}=:{k}" for k in values.keys()]
        assignments.append("updated_at=now()")
        with SessionLocal() as db:
            db.execute(
                text(f"UPDATE request SET {', '.join(assignments)} WHERE id=CAST(:id AS uuid)"),
                {"id": request_id, **values},
            )
            db.commit()
    return get_request(request_id)


def delete_request(request_id: str) -> int:
    with SessionLocal() as db:
        res = db.execute(text("DELETE FROM request WHERE id=CAST(:id AS uuid)"), {"id": request_id})
        db.commit()
        return int(res.rowcount or 0)


def add_request_member(request_id: str, user_id: str) -> dict[str, Any]:
    with SessionLocal() as db:
        db.execute(
            text(
                """
                INSERT INTO request_member (id, request_id, user_id, status)
                VALUES (:id, CAST(:request_id AS uuid), CAST(:user_id AS uuid), 'accepted')
                ON CONFLICT (request_id, user_id) DO NOTHING
                """
            ),
            {"id": str(uuid.uuid4()), "request_id": request_id, "user_id": user_id},
        )
        db.commit()
        row = db.execute(
            text(
                """
                SELECT id, request_id, user_id, status, created_at
                FROM request_member
                WHERE request_id=CAST(:request_id AS uuid) AND user_id=CAST(:user_id AS uuid)
                """
            ),
            {"request_id": request_id, "user_id": user_id},
        ).mappings().first()
    return dict(row) if row else {"request_id": request_id, "user_id": user_id, "status": "accepted"}


def remove_request_member(request_id: str, user_id: str) -> int:
    with SessionLocal() as db:
        res = db.execute(
            text(
                """
                DELETE FROM request_member
                WHERE request_id=CAST(:request_id AS uuid) AND user_id=CAST(:user_id AS uuid)
                """
            ),
            {"request_id": request_id, "user_id": user_id},
        )
        db.commit()
        return int(res.rowcount or 0)


# Admin


def has_role(user_id: str, role: str) -> bool:
    with SessionLocal() as db:
        row = db.execute(
            text("SELECT 1 FROM user_role WHERE user_id=CAST(:user_id AS uuid) AND role=:role"),
            {"user_id": user_id, "role": role},
        ).first()
    return row is not None


def grant_role(user_id: str, role: str) -> None:
    with SessionLocal() as db:
        db.execute(
            text(
                """
                INSERT INTO user_role (user_id, role)
                VALUES (CAST(:user_id AS uuid), :role)
                ON CONFLICT (user_id, role) DO NOTHING
                """
            ),
            {"user_id": user_id, "role": role},
        )
        db.commit()


def admin_list_profiles() -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT p.id, u.email, p.name, p.avatar_url, p.branch, p.year,
                       p.is_banned, p.is_suspended, p.suspension_until, p.created_at
                FROM profile p
                JOIN user_account u ON u.id = p.id
                ORDER BY p.created_at DESC
                """
            )
        ).mappings().all()
    return [dict(r) for r in rows]


def set_ban(user_id: str, banned: bool) -> int:
    with SessionLocal() as db:
        res = db.execute(
            text("UPDATE profile SET is_banned=:banned, updated_at=now() WHERE id=CAST(:id AS uuid)"),
            {"id": user_id, "banned": bool(banned)},
        )
        db.commit()
        return int(res.rowcount or 0)


def set_suspension(user_id: str, until: datetime | None) -> int:
    """Suspend until ``until``; ``None`` lifts the suspension."""
    with SessionLocal() as db:
        res = db.execute(
            text(
                """
                UPDATE profile
                SET is_suspended=:suspended, suspension_until=:until, updated_at=now()
                WHERE id=CAST(:id AS uuid)
                """
            ),
            {"id": user_id, "suspended": until is not None, "until": until},
        )
        db.commit()
        return int(res.rowcount or 0)


def delete_user(user_id: str) -> int:
    with SessionLocal() as db:
        res = db.execute(text("DELETE FROM user_account WHERE id=CAST(:id AS uuid)"), {"id": user_id})
        db.commit()
        return int(res.rowcount or 0)


def admin_list_reports() -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT
                  r.id, r.reason, r.details, r.created_at,
                  r.reporter_id, rp.name AS reporter_name, rp.avatar_url AS reporter_avatar_url,
                  r.reported_id, dp.name AS reported_name, dp.avatar_url AS reported_avatar_url
                FROM report r
                LEFT JOIN profile rp ON rp.id = r.reporter_id
                LEFT JOIN profile dp ON dp.id = r.reported_id
                ORDER BY r.created_at DESC
                """
            )
        ).mappings().all()
    return [dict(r) for r in rows]


def delete_report(report_id: str) -> int:
    with SessionLocal() as db:
        res = db.execute(text("DELETE FROM report WHERE id=CAST(:id AS uuid)"), {"id": report_id})
        db.commit()
        return int(res.rowcount or 0)


def admin_list_requests() -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT r.*, p.name AS owner_name, p.avatar_url AS owner_avatar_url
                FROM request r
                LEFT JOIN profile p ON p.id = r.user_id
                ORDER BY r.created_at DESC
                """
            )
        ).mappings().all()
    return [dict(r) for r in rows]
