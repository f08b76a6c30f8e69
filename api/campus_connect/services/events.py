import json
import logging
import uuid
from typing import Any

from sqlalchemy import text

from ..database import SessionLocal

logger = logging.getLogger(__name__)


def log_product_event(
    db,
    *,
    event_name: str,
    user_id: str | None = None,
    properties: dict[str, Any] | None = None,
) -> None:
    properties = properties or {}
    logger.debug("[EVENT] %s user_id=%s properties=%s", event_name, user_id, properties)
    db.execute(
        text(
            """
            INSERT INTO product_event (id, user_id, event_name, properties)
            VALUES (
              :id,
              CAST(NULLIF(:user_id, '') AS uuid),
              :event_name,
              CAST(:properties AS jsonb)
            )
            """
        ),
        {
            "id": str(uuid.uuid4()),
            "user_id": user_id or "",
            "event_name": event_name,
            "properties": json.dumps(properties, default=str),
        },
    )


def record_event(event_name: str, *, user_id: str | None = None, properties: dict[str, Any] | None = None) -> None:
    with SessionLocal() as db:
        log_product_event(db, event_name=event_name, user_id=user_id, properties=properties)
        db.commit()
