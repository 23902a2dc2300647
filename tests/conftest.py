import json
from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

from bitly_shorten.services.bitly_client import BitlyClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def isolated_token_sources(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep the real environment and ~/.bitly out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("BITLY_ACCESS_TOKEN", raising=False)
    return home


class FakeBitly:
    """In-memory stand-in for the shorten/expand endpoints."""

    def __init__(self) -> None:
        self.links: dict[str, str] = {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        payload = json.loads(request.content or b"{}")
        if request.url.path == "/v4/shorten":
            bitlink_id = f"bit.ly/{len(self.links) + 1:05d}"
            self.links[bitlink_id] = payload["long_url"]
            return httpx.Response(
                200,
                json={"id": bitlink_id, "link": f"https://{bitlink_id}", "long_url": payload["long_url"]},
            )
        if request.url.path == "/v4/expand":
            long_url = self.links.get(payload["bitlink_id"])
            if long_url is None:
                return httpx.Response(404, json={"message": "NOT_FOUND", "description": "What you are looking for cannot be found."})
            return httpx.Response(200, json={"id": payload["bitlink_id"], "long_url": long_url})
        return httpx.Response(404, json={"message": "NOT_FOUND"})


@pytest.fixture
def fake_bitly() -> FakeBitly:
    return FakeBitly()


@pytest.fixture
def make_client() -> Iterator[Callable[..., BitlyClient]]:
    clients: list[BitlyClient] = []

    def factory(handler: Handler, token: str | None = "test-token", **kwargs) -> BitlyClient:
        client = BitlyClient(token=token, transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
