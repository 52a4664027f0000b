"""Test configuration and fixtures"""

import json
from concurrent.futures import Future
from pathlib import Path

import pytest

from hatchet_resolver.api.auth import StaticTokenProvider
from hatchet_resolver.core.account_store import MemoryAccountStore
from hatchet_resolver.core.exceptions import TransportError
from hatchet_resolver.infosystem.dispatcher import InfoDispatcher
from hatchet_resolver.infosystem.executor import Priority
from hatchet_resolver.infosystem.identity import IdentityService
from hatchet_resolver.infosystem.pipeline import FetchContext
from hatchet_resolver.infosystem.results import CompletedRequests


API = "https://api.hatchet.is/v1/"


def api_url(path: str) -> str:
    """Full URL of an endpoint path on the default API location."""
    return API + path


def body(**tables) -> str:
    """JSON response body, e.g. body(artists=[{"id": "A1"}])."""
    return json.dumps(tables)


class FakeTransport:
    """
    Transport replying from a url -> body table.

    Unknown URLs fail like a 404. A table value that is an exception is
    raised instead of returned.
    """

    def __init__(self, responses: dict | None = None, post_response: str = "{}") -> None:
        self.responses = dict(responses or {})
        self.post_response = post_response
        self.get_urls: list[str] = []
        self.posts: list[tuple[str, tuple, str]] = []

    def get(self, url: str) -> str:
        self.get_urls.append(url)
        if url not in self.responses:
            raise TransportError(f"HTTP 404 for {url}", details={"url": url}, status_code=404)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response

    def post(self, url: str, header_params, body: str) -> str:
        self.posts.append((url, tuple(header_params), body))
        return self.post_response

    def close(self) -> None:
        pass


class InlineExecutor:
    """Executor running every unit on the submitting thread."""

    def __init__(self) -> None:
        self.priorities: list[Priority] = []

    def submit(self, fn, priority: Priority = Priority.LOW) -> Future:
        self.priorities.append(priority)
        future: Future = Future()
        try:
            future.set_result(fn())
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait: bool = True) -> None:
        pass


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Temporary directory for tests"""
    return tmp_path


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def account_store():
    return MemoryAccountStore()


@pytest.fixture
def identity(account_store, transport):
    return IdentityService(account_store, transport)


@pytest.fixture
def context(transport, identity):
    return FetchContext(transport=transport, identity=identity)


@pytest.fixture
def sink():
    return CompletedRequests()


@pytest.fixture
def executor():
    return InlineExecutor()


@pytest.fixture
def dispatcher(context, executor, sink):
    """Dispatcher with inline execution and a valid access token"""
    return InfoDispatcher(context, executor, sink, token_provider=StaticTokenProvider("tok-123"))


@pytest.fixture
def artist_albums_responses():
    """Artist 'X' (A1) with one album referencing T1, T2 and image I1"""
    return {
        api_url("artists/?name=X"): body(artists=[{"id": "A1", "name": "X"}]),
        api_url("artists/A1/albums/"): body(
            albums=[{
                "id": "AL1",
                "name": "First Album",
                "artist": "A1",
                "releaseDate": "2002-02-18",
                "images": ["I1"],
                "tracks": ["T1", "T2"],
            }],
            images=[{"id": "I1", "url": "https://img.example/I1.jpg", "width": 300, "height": 300}],
        ),
        api_url("tracks/?ids[]=T1&ids[]=T2"): body(
            tracks=[
                {"id": "T1", "name": "Opening", "artist": "A1", "album": "AL1", "duration": 185},
                {"id": "T2", "name": "Closing", "artist": "A1", "album": "AL1", "duration": 245},
            ],
            artists=[{"id": "A1", "name": "X"}],
        ),
    }


@pytest.fixture
def top_hits_responses():
    """Artist 'X' (A1) whose top hits chart lists T3, T1, T2 in that order"""
    return {
        api_url("artists/?name=X"): body(artists=[{"id": "A1", "name": "X"}]),
        api_url("artists/A1/topHits/"): body(
            chartItems=[
                {"id": "C1", "track": "T3", "rank": 1, "plays": 900},
                {"track": "T1", "rank": 2, "plays": 500},
                {"id": "C3", "track": "T2", "rank": 3, "plays": 100},
            ],
            tracks=[
                {"id": "T1", "name": "One", "artist": "A1"},
                {"id": "T2", "name": "Two", "artist": "A1"},
                {"id": "T3", "name": "Three", "artist": "A1"},
            ],
        ),
    }
