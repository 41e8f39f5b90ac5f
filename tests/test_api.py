"""
HTTP API tests against an isolated app and store.
"""

import pytest


def login(client, email="viewer@example.com", role="CONSUMER"):
    response = client.post("/api/session", json={"email": email, "role": role})
    assert response.status_code == 200
    return response.json()


def upload(client, **form):
    data = {"title": "My clip", "genre": "Music", "age_rating": "12", "publisher": "Me", "producer": "Also me"}
    data.update(form)
    return client.post(
        "/api/videos", data=data, files={"file": ("clip.mp4", b"fake-mp4-bytes", "video/mp4")}
    )


class TestFeedAndSearch:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_feed_by_recency(self, client):
        response = client.get("/api/videos")
        assert response.status_code == 200
        items = response.json()
        assert [v["id"] for v in items] == ["v1", "v2", "v3"]
        assert [v["age"] for v in items] == ["3m ago", "30m ago", "1h ago"]
        assert items[0]["age_rating"] == "PG"
        assert items[0]["media_type"] == "video/mp4"

    def test_search(self, client):
        response = client.get("/api/search", params={"q": "latte"})
        assert [v["title"] for v in response.json()] == ["Latte Art 101"]

        response = client.get("/api/search", params={"genre": "Music"})
        assert [v["title"] for v in response.json()] == ["Mini Synth Jam"]

        response = client.get("/api/search", params={"q": "zzz"})
        assert response.status_code == 200
        assert response.json() == []

    def test_filters(self, client):
        body = client.get("/api/filters").json()
        assert body["genres"] == ["Sports", "Food", "Music"]
        assert body["age_ratings"] == ["PG", "12", "15", "18"]


class TestWatch:
    def test_watch_page(self, client):
        body = client.get("/api/videos/v2").json()
        assert body["video"]["title"] == "Latte Art 101"
        assert body["average_rating"] == 0
        assert body["comments"] == []

    def test_unknown_video(self, client):
        response = client.get("/api/videos/nope")
        assert response.status_code == 404
        assert response.json() == {"detail": "Video not found: nope"}

        response = client.post("/api/videos/nope/ratings", json={"value": 3})
        assert response.status_code == 404

    def test_rating(self, client):
        assert client.post("/api/videos/v1/ratings", json={"value": 2}).status_code == 201
        response = client.post("/api/videos/v1/ratings", json={"value": 4})
        assert response.json() == {"video_id": "v1", "average_rating": 3.0, "count": 2}
        assert client.get("/api/videos/v1/rating").json()["average_rating"] == 3.0

    @pytest.mark.parametrize("value", [0, 6, "five"])
    def test_rating_outside_range(self, client, value):
        response = client.post("/api/videos/v1/ratings", json={"value": value})
        assert response.status_code == 422
        assert client.get("/api/videos/v1/rating").json()["count"] == 0

    def test_comment_requires_login(self, client):
        response = client.post("/api/videos/v1/comments", json={"text": "hi"})
        assert response.status_code == 401
        assert response.json() == {"detail": "Login first"}
        assert client.get("/api/videos/v1/comments").json() == []

    def test_blank_comment_rejected(self, client):
        login(client)
        response = client.post("/api/videos/v1/comments", json={"text": "   "})
        assert response.status_code == 422
        assert client.get("/api/videos/v1/comments").json() == []

    def test_comment(self, client, clock):
        login(client)
        response = client.post("/api/videos/v1/comments", json={"text": "  nice line  "})
        assert response.status_code == 201
        comment = response.json()
        assert comment["text"] == "nice line"
        assert comment["author_email"] == "viewer@example.com"
        assert comment["posted_at"] == clock()

        clock.tick()
        client.post("/api/videos/v1/comments", json={"text": "second"})
        texts = [c["text"] for c in client.get("/api/videos/v1").json()["comments"]]
        assert texts == ["second", "nice line"]


class TestSession:
    def test_login_and_logout(self, client):
        assert client.get("/api/session").json() is None

        assert login(client, "a@example.com", "ADMIN") == {"email": "a@example.com", "role": "ADMIN"}
        assert client.get("/api/session").json()["email"] == "a@example.com"

        response = client.post("/api/register", json={"email": "b@example.com", "role": "CREATOR"})
        assert response.status_code == 201
        assert client.get("/api/session").json() == {"email": "b@example.com", "role": "CREATOR"}

        assert client.delete("/api/session").status_code == 204
        assert client.get("/api/session").json() is None

    def test_login_validation(self, client):
        assert client.post("/api/session", json={"email": "", "role": "CONSUMER"}).status_code == 422
        assert client.post("/api/session", json={"email": "a@b.c", "role": "ROOT"}).status_code == 422


class TestUpload:
    def test_upload_requires_login(self, client):
        assert upload(client).status_code == 401

    def test_upload_requires_creator(self, client):
        login(client, role="CONSUMER")
        response = upload(client)
        assert response.status_code == 403
        assert len(client.get("/api/videos").json()) == 3

    def test_upload(self, client, clock):
        login(client, "maker@example.com", "CREATOR")
        response = upload(client)
        assert response.status_code == 201
        video = response.json()
        assert video["id"] == "v4"
        assert video["title"] == "My clip"
        assert video["age_rating"] == "12"
        assert video["media_type"] == "video/mp4"
        assert video["created_at"] == clock()

        feed = client.get("/api/videos").json()
        assert feed[0]["id"] == "v4"
        assert feed[0]["age"] == "0s ago"

        media = client.get(video["src"])
        assert media.status_code == 200
        assert media.content == b"fake-mp4-bytes"
        assert media.headers["content-type"].startswith("video/mp4")

    def test_upload_image(self, client):
        login(client, role="CREATOR")
        response = client.post(
            "/api/videos", data={"title": "Poster"}, files={"file": ("poster.png", b"png", "image/png")}
        )
        assert response.status_code == 201
        assert response.json()["media_type"] == "image/png"
        assert response.json()["age_rating"] == "PG"

    def test_upload_rejects_other_types(self, client):
        login(client, role="CREATOR")
        response = client.post(
            "/api/videos", files={"file": ("notes.pdf", b"%PDF", "application/pdf")}
        )
        assert response.status_code == 415

    def test_upload_requires_file(self, client):
        login(client, role="CREATOR")
        assert client.post("/api/videos", data={"title": "No file"}).status_code == 422

    def test_seed_video_has_no_media(self, client):
        assert client.get("/api/media/v1").status_code == 404
