from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Optional

from vidcube import db
from vidcube.errors import LoginRequired, MediaNotFound, PermissionDenied, VideoNotFound
from vidcube.models import Comment, MediaBlob, Role, Session, Video, VideoFields
from vidcube.settings import DEFAULT_MEDIA_TYPE, SAMPLE_VIDEO
from vidcube.utils import IdAllocator, now_ms

logger = logging.getLogger(__name__)

# Browsers and multipart clients report these when they don't know the type
UNKNOWN_MEDIA_TYPES = ("", "application/octet-stream")

MINUTE_MS = 60 * 1000


def seed_videos(now: int) -> List[Dict]:
    base = {"src": SAMPLE_VIDEO, "media_type": DEFAULT_MEDIA_TYPE, "age_rating": "PG"}
    return [
        {**base, "title": "Sunset Skate Line", "genre": "Sports", "created_at": now - 3 * MINUTE_MS,
         "publisher": "City Film", "producer": "A. Nolan"},
        {**base, "title": "Latte Art 101", "genre": "Food", "created_at": now - 30 * MINUTE_MS,
         "publisher": "CafeCo", "producer": "B. Cruz"},
        {**base, "title": "Mini Synth Jam", "genre": "Music", "created_at": now - 90 * MINUTE_MS,
         "publisher": "RoomLab", "producer": "C. Lee"},
    ]


def media_type_for(blob: MediaBlob) -> str:
    content_type = (blob.content_type or "").strip()
    if content_type in UNKNOWN_MEDIA_TYPES:
        return DEFAULT_MEDIA_TYPE
    return content_type


def require_session(session: Optional[Session]) -> Session:
    if session is None:
        raise LoginRequired()
    return session


def require_role(session: Optional[Session], role: Role) -> Session:
    session = require_session(session)
    if session.role != role:
        raise PermissionDenied(f"Only {role.value.lower()}s can do this")
    return session


class VideoStore:
    """
    In-memory holder of the session, videos, comments and ratings.

    One instance is built at startup and handed to the routes; nothing here
    touches the network or disk. Tables live in a private DuckDB
    connection, uploaded media in a dict keyed by video id.
    """

    def __init__(self, clock: Callable[[], int] = now_ms, seed: bool = True) -> None:
        self.clock = clock
        self.session: Optional[Session] = None
        self._con = db.connect()
        self._blobs: Dict[str, MediaBlob] = {}
        self._video_ids = IdAllocator("v")
        self._comment_ids = IdAllocator("c")
        # DuckDB connections aren't safe to share across threadpool workers
        self._lock = threading.RLock()
        if seed:
            for fields in seed_videos(self.clock()):
                db.insert_video(self._con, {**fields, "id": self._video_ids.allocate()}, at_head=False)

    # --- reads ---

    def list_videos(self) -> List[Video]:
        with self._lock:
            return [Video(**row) for row in db.query_videos(self._con)]

    def list_videos_by_recency(self) -> List[Video]:
        """Newest first; equal timestamps keep list order."""
        with self._lock:
            return [Video(**row) for row in db.query_videos_by_recency(self._con)]

    def get_video(self, video_id: str) -> Video:
        with self._lock:
            row = db.query_video(self._con, video_id)
        if row is None:
            raise VideoNotFound(video_id)
        return Video(**row)

    def search(self, query: str = "", genre: str = "", age_rating: str = "") -> List[Video]:
        """
        Videos whose title contains ``query`` (case-insensitive) and whose
        genre / age rating match when given. Empty arguments don't filter.
        """
        with self._lock:
            rows = db.query_search(self._con, query, genre, age_rating)
        logger.debug("search q=%r genre=%r age=%r -> %d hits", query, genre, age_rating, len(rows))
        return [Video(**row) for row in rows]

    def average_rating(self, video_id: str) -> float:
        return self.rating_summary(video_id)["average"]

    def rating_summary(self, video_id: str) -> Dict:
        with self._lock:
            self._ensure_video(video_id)
            return db.query_rating_summary(self._con, video_id)

    def comments_for(self, video_id: str) -> List[Comment]:
        with self._lock:
            self._ensure_video(video_id)
            return [Comment(**row) for row in db.query_comments(self._con, video_id)]

    def media_blob(self, video_id: str) -> MediaBlob:
        with self._lock:
            self._ensure_video(video_id)
            blob = self._blobs.get(video_id)
        if blob is None:
            raise MediaNotFound(video_id)
        return blob

    # --- writes ---

    def submit_rating(self, video_id: str, value: float) -> None:
        with self._lock:
            self._ensure_video(video_id)
            db.insert_rating(self._con, video_id, value)
        logger.debug("rating %s for %s", value, video_id)

    def post_comment(self, video_id: str, text: str) -> Comment:
        with self._lock:
            self._ensure_video(video_id)
            if self.session is None:
                logger.info("comment on %s rejected: not logged in", video_id)
                raise LoginRequired()
            session = self.session
            comment = Comment(
                id=self._comment_ids.allocate(),
                video_id=video_id,
                author_email=session.email,
                text=text,
                posted_at=self.clock(),
            )
            db.insert_comment(self._con, comment.model_dump())
        logger.info("comment %s on %s by %s", comment.id, video_id, session.email)
        return comment

    def login(self, email: str, role: Role) -> Session:
        with self._lock:
            self.session = Session(email=email, role=role)
        logger.info("session started for %s (%s)", email, self.session.role.value)
        return self.session

    # No account list exists, so registering is just logging in
    register = login

    def logout(self) -> None:
        with self._lock:
            previous, self.session = self.session, None
        if previous is not None:
            logger.info("session ended for %s", previous.email)

    def create_video(self, fields: VideoFields, blob: MediaBlob) -> Video:
        with self._lock:
            session = require_role(self.session, Role.CREATOR)
            video_id = self._video_ids.allocate()
            video = Video(
                **fields.model_dump(),
                id=video_id,
                src=f"/api/media/{video_id}",
                media_type=media_type_for(blob),
                created_at=self.clock(),
            )
            row = video.model_dump()
            row["age_rating"] = video.age_rating.value
            db.insert_video(self._con, row, at_head=True)
            self._blobs[video_id] = blob
        logger.info(
            "video %s uploaded by %s (%s, %d bytes)", video_id, session.email, video.media_type, len(blob.data)
        )
        return video

    def _ensure_video(self, video_id: str) -> None:
        if db.query_video(self._con, video_id) is None:
            raise VideoNotFound(video_id)
