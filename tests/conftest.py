import pytest
from fastapi.testclient import TestClient

from vidcube.app import create_app
from vidcube.store import VideoStore

NOW = 1_700_000_000_000


class FakeClock:
    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def tick(self, ms: int = 1000) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return VideoStore(clock=clock)


@pytest.fixture
def public_dir(tmp_path):
    (tmp_path / "index.html").write_text("<!doctype html><title>VidCube</title>")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "app.js").write_text("console.log('vidcube');")
    return tmp_path


@pytest.fixture
def client(store, public_dir):
    return TestClient(create_app(public_dir=public_dir, store=store, debug_listing=True))
