"""
Entity schemas

Pydantic models for everything the store holds. Instances handed out by the
store are fresh copies built from its tables, so callers can't mutate state
through them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from vidcube.settings import DEFAULT_UPLOAD_TITLE


class Role(str, Enum):
    CONSUMER = "CONSUMER"
    CREATOR = "CREATOR"
    ADMIN = "ADMIN"


class AgeRating(str, Enum):
    PG = "PG"
    TWELVE = "12"
    FIFTEEN = "15"
    EIGHTEEN = "18"


class Session(BaseModel):
    """The locally held identity of the current user (not authenticated)."""

    email: str = Field(..., description="Email typed into the login form")
    role: Role = Field(Role.CONSUMER, description="Role picked at login")


class VideoFields(BaseModel):
    """Upload form fields; the store fills in id, src, media type and time."""

    title: str = Field(DEFAULT_UPLOAD_TITLE, description="Video title")
    genre: str = Field("", description="Free-form genre")
    age_rating: AgeRating = Field(AgeRating.PG, description="Age classification")
    publisher: str = Field("", description="Publisher name")
    producer: str = Field("", description="Producer name")


class Video(VideoFields):
    id: str = Field(..., description="Allocated video id")
    src: str = Field(..., description="Media source reference: URL or /api/media/<id>")
    media_type: str = Field(..., description="MIME type of the media")
    created_at: int = Field(..., ge=0, description="Creation time, epoch ms")


class Comment(BaseModel):
    id: str = Field(..., description="Allocated comment id")
    video_id: str = Field(..., description="Video the comment belongs to")
    author_email: str = Field(..., description="Email of the session that posted it")
    text: str = Field(..., description="Comment body")
    posted_at: int = Field(..., ge=0, description="Post time, epoch ms")


class RatingSummary(BaseModel):
    video_id: str
    average_rating: float
    count: int


@dataclass(frozen=True)
class MediaBlob:
    """Uploaded file kept in memory for the life of the process."""

    data: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None
