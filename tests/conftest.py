import json
import os
from datetime import datetime, timezone

import httpx
import pytest

from parking_watch.config import Settings

FEED_URL = "https://data.example.org/parkings.json"
WEBHOOK_URL = "https://chat.example.org/api/webhooks/1/token"
NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.upper().startswith("PARKING_WATCH_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class FakeServer:
    """Serves the feed on GET and records webhook POSTs."""

    def __init__(self, feed=None, feed_status=200, webhook_status=204):
        self.feed = feed if feed is not None else {"parking": []}
        self.feed_status = feed_status
        self.webhook_status = webhook_status
        self.posts = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            body = self.feed if isinstance(self.feed, (bytes, str)) else json.dumps(self.feed)
            return httpx.Response(self.feed_status, content=body)
        self.posts.append(json.loads(request.content))
        return httpx.Response(self.webhook_status)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        webhook_url=WEBHOOK_URL,
        titles="Bouillon",
        data_url=FEED_URL,
        status_file=tmp_path / "status.json",
    )
