from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile
from pydantic import BaseModel, Field, field_validator

from vidcube.models import AgeRating, Comment, MediaBlob, RatingSummary, Role, Session, Video, VideoFields
from vidcube.settings import ACCEPTED_MEDIA_PREFIXES, DEFAULT_UPLOAD_TITLE, GENRES
from vidcube.store import VideoStore, media_type_for, require_role
from vidcube.utils import time_ago

router = APIRouter()


class Credentials(BaseModel):
    email: str = Field(..., min_length=1)
    role: Role = Role.CONSUMER


class CommentIn(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("comment text is empty")
        return v


class RatingIn(BaseModel):
    value: int = Field(..., ge=1, le=5)


def get_store(request: Request) -> VideoStore:
    return request.app.state.store


def feed_item(video: Video, now: int) -> Dict:
    return {**video.model_dump(mode="json"), "age": time_ago(video.created_at, now)}


def rating_summary(store: VideoStore, video_id: str) -> RatingSummary:
    summary = store.rating_summary(video_id)
    return RatingSummary(video_id=video_id, average_rating=summary["average"], count=summary["count"])


@router.get("/api/health")
def api_health():
    return {"status": "ok"}


@router.get("/api/filters")
def api_filters():
    return {"genres": list(GENRES), "age_ratings": [a.value for a in AgeRating]}


@router.get("/api/videos")
def api_feed(store: VideoStore = Depends(get_store)):
    now = store.clock()
    return [feed_item(v, now) for v in store.list_videos_by_recency()]


@router.get("/api/search")
def api_search(q: str = "", genre: str = "", age: str = "", store: VideoStore = Depends(get_store)):
    now = store.clock()
    return [feed_item(v, now) for v in store.search(q, genre, age)]


@router.post("/api/videos", response_model=Video, status_code=201)
async def api_upload(
    file: UploadFile = File(...),
    title: str = Form(DEFAULT_UPLOAD_TITLE),
    genre: str = Form(""),
    age_rating: AgeRating = Form(AgeRating.PG),
    publisher: str = Form(""),
    producer: str = Form(""),
    store: VideoStore = Depends(get_store),
):
    require_role(store.session, Role.CREATOR)
    blob = MediaBlob(data=await file.read(), content_type=file.content_type, filename=file.filename)
    if not media_type_for(blob).startswith(ACCEPTED_MEDIA_PREFIXES):
        raise HTTPException(status_code=415, detail="Only video or image files are allowed")

    fields = VideoFields(
        title=title, genre=genre, age_rating=age_rating, publisher=publisher, producer=producer
    )
    return store.create_video(fields, blob)


@router.get("/api/videos/{video_id}")
def api_watch(video_id: str, store: VideoStore = Depends(get_store)):
    video = store.get_video(video_id)
    return {
        "video": video.model_dump(mode="json"),
        "average_rating": store.average_rating(video_id),
        "comments": [c.model_dump() for c in store.comments_for(video_id)],
    }


@router.get("/api/videos/{video_id}/comments", response_model=List[Comment])
def api_comments(video_id: str, store: VideoStore = Depends(get_store)):
    return store.comments_for(video_id)


@router.post("/api/videos/{video_id}/comments", response_model=Comment, status_code=201)
def api_post_comment(video_id: str, payload: CommentIn, store: VideoStore = Depends(get_store)):
    return store.post_comment(video_id, payload.text)


@router.get("/api/videos/{video_id}/rating", response_model=RatingSummary)
def api_rating(video_id: str, store: VideoStore = Depends(get_store)):
    return rating_summary(store, video_id)


@router.post("/api/videos/{video_id}/ratings", response_model=RatingSummary, status_code=201)
def api_rate(video_id: str, payload: RatingIn, store: VideoStore = Depends(get_store)):
    store.submit_rating(video_id, payload.value)
    return rating_summary(store, video_id)


@router.get("/api/media/{video_id}")
def api_media(video_id: str, store: VideoStore = Depends(get_store)):
    video = store.get_video(video_id)
    blob = store.media_blob(video_id)
    return Response(content=blob.data, media_type=video.media_type)


# --- mock session ---

@router.get("/api/session", response_model=Optional[Session])
def api_session(store: VideoStore = Depends(get_store)):
    return store.session


@router.post("/api/session", response_model=Session)
def api_login(payload: Credentials, store: VideoStore = Depends(get_store)):
    return store.login(payload.email, payload.role)


@router.post("/api/register", response_model=Session, status_code=201)
def api_register(payload: Credentials, store: VideoStore = Depends(get_store)):
    return store.register(payload.email, payload.role)


@router.delete("/api/session", status_code=204)
def api_logout(store: VideoStore = Depends(get_store)):
    store.logout()
    return Response(status_code=204)
