from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class LikeRequest(BaseModel):
    to_user_id: str
    kind: Literal["friend", "project", "study", "dating"] = "friend"


class LikeResponse(BaseModel):
    matched: bool
    match_id: str | None = None
    existing_match: bool = False
    chat_id: str | None = None


class RequestCreate(BaseModel):
    title: str = Field(min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=1000)
    category: str = Field(min_length=1, max_length=40)
    related_interests: list[str] = Field(default_factory=list, max_length=20)
    max_participants: int | None = Field(default=None, ge=1, le=100)


class RequestUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=1000)
    category: str | None = Field(default=None, min_length=1, max_length=40)
    related_interests: list[str] | None = Field(default=None, max_length=20)
    status: Literal["open", "closed"] | None = None
    max_participants: int | None = Field(default=None, ge=1, le=100)


class JoinResponse(BaseModel):
    member: dict
    match_created: bool
    existing_match: bool
    match_id: str | None = None


class SuspendRequest(BaseModel):
    until: datetime
