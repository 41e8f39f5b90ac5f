from __future__ import annotations


class StoreError(Exception):
    """Base for rejected store operations. Carries the HTTP status it maps to."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class VideoNotFound(StoreError):
    status_code = 404

    def __init__(self, video_id: str) -> None:
        super().__init__(f"Video not found: {video_id}")
        self.video_id = video_id


class LoginRequired(StoreError):
    status_code = 401

    def __init__(self, message: str = "Login first") -> None:
        super().__init__(message)


class PermissionDenied(StoreError):
    status_code = 403


class MediaNotFound(StoreError):
    status_code = 404

    def __init__(self, video_id: str) -> None:
        super().__init__(f"No uploaded media for video: {video_id}")
        self.video_id = video_id
