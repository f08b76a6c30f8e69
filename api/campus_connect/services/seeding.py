import logging
import random
import uuid
from collections import Counter
from typing import Any

from sqlalchemy import text

from campus_connect.auth.security import hash_password
from campus_connect.profiles import COMMUNICATION_STYLES, WAKE_CYCLES

logger = logging.getLogger(__name__)

SEED_EMAIL_PREFIX = "seed_"

FIRST_NAMES = [
    "Aarav", "Maya", "Rohan", "Isha", "Kabir", "Zara", "Arjun", "Anaya", "Vihaan", "Diya",
    "Leo", "Nora", "Sam", "Priya", "Dev", "Meera", "Omar", "Lena", "Yash", "Tara",
]
BRANCHES = ["Computer Science", "Electrical", "Mechanical", "Civil", "Biotech", "Design", "Economics"]
INTERESTS = [
    "machine learning", "web dev", "robotics", "startups", "design", "finance", "open source",
    "photography", "music production", "competitive programming", "climate", "writing",
]
HOBBIES = [
    "football", "chess", "guitar", "hiking", "gaming", "cooking", "reading", "dance",
    "badminton", "sketching", "cycling", "anime",
]
GOALS = ["hackathon team", "study group", "cofounder", "gym buddy", "research", "friends", "internship prep"]

GENDER_OPTIONS = ["male", "female"]
PREFERENCE_OPTIONS = ["male", "female", "everyone"]


def _sample(rng: random.Random, pool: list[str], low: int, high: int) -> list[str]:
    return rng.sample(pool, k=rng.randint(low, high))


def _generate_dating_fields(index: int, rng: random.Random) -> tuple[str, str | None, bool]:
    """Mostly reciprocal male<->female preferences so dating discovery has data."""
    gender = GENDER_OPTIONS[index % 2]
    if index % 3 == 0:
        return gender, None, False
    if index % 5 == 0:
        return gender, rng.choice(PREFERENCE_OPTIONS), True
    return gender, ("female" if gender == "male" else "male"), True


def _generate_profile(index: int, rng: random.Random) -> dict[str, Any]:
    gender, preference, dating_mode = _generate_dating_fields(index, rng)
    return {
        "name": f"{rng.choice(FIRST_NAMES)} {index:03d}",
        "age": rng.randint(18, 24),
        "branch": rng.choice(BRANCHES),
        "year": rng.randint(1, 4),
        "interests": _sample(rng, INTERESTS, 2, 5),
        "hobbies": _sample(rng, HOBBIES, 1, 4),
        "goals": _sample(rng, GOALS, 1, 3),
        "personality_social_level": rng.randint(0, 10),
        "personality_activity_level": rng.randint(0, 10),
        "personality_communication": rng.choice(COMMUNICATION_STYLES),
        "personality_wake_cycle": rng.choice(WAKE_CYCLES),
        "dating_mode": dating_mode,
        "dating_preference": preference,
        "gender": gender,
    }


def seed_dummy_data(
    db,
    n_users: int = 100,
    reset: bool = False,
    seed: int = 42,
    email_domain: str = "campus.example.edu",
    password: str = "campus123",
) -> dict[str, Any]:
    rng = random.Random(seed)
    email_pattern = f"{SEED_EMAIL_PREFIX}%@{email_domain}"

    removed = 0
    if reset:
        res = db.execute(text("DELETE FROM user_account WHERE email LIKE :pattern"), {"pattern": email_pattern})
        removed = int(res.rowcount or 0)
        db.commit()

    password_hash = hash_password(password)
    created = 0
    skipped = 0
    branch_counter: Counter[str] = Counter()
    dating_enabled = 0
    for idx in range(n_users):
        email = f"{SEED_EMAIL_PREFIX}{idx:04d}@{email_domain}"
        profile = _generate_profile(idx, rng)
        user_id = str(uuid.uuid4())
        inserted = db.execute(
            text(
                """
                INSERT INTO user_account (id, email, password_hash)
                VALUES (:id, :email, :password_hash)
                ON CONFLICT (email) DO NOTHING
                RETURNING id
                """
            ),
            {"id": user_id, "email": email, "password_hash": password_hash},
        ).first()
        if not inserted:
            skipped += 1
            continue
        db.execute(
            text(
                """
                INSERT INTO profile (
                  id, name, age, branch, year, interests, hobbies, goals,
                  personality_social_level, personality_activity_level,
                  personality_communication, personality_wake_cycle,
                  dating_mode, dating_preference, gender, onboarding_completed
                )
                VALUES (
                  :id, :name, :age, :branch, :year, :interests, :hobbies, :goals,
                  :personality_social_level, :personality_activity_level,
                  :personality_communication, :personality_wake_cycle,
                  :dating_mode, :dating_preference, :gender, true
                )
                """
            ),
            {"id": user_id, **profile},
        )
        created += 1
        branch_counter[profile["branch"]] += 1
        if profile["dating_mode"]:
            dating_enabled += 1

    db.commit()
    logger.info("[seed] created=%s skipped=%s removed=%s seed=%s", created, skipped, removed, seed)
    return {
        "users_created": created,
        "users_skipped_existing": skipped,
        "users_removed": removed,
        "dating_enabled": dating_enabled,
        "branches": dict(branch_counter),
        "password": password,
    }
