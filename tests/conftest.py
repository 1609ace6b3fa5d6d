"""Shared test fixtures — a controllable clock, a fresh store, mocked upstream HTTP."""

import os

import httpx
import pytest

# Set env vars before any portfolio imports
os.environ.setdefault("PORTFOLIO_API_URL", "http://portfolio.test/api")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from portfolio.core.cache import MemoryCache  # noqa: E402


class FakeClock:
    """Stands in for time.time so tests can move time forward."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MemoryCache(clock=clock)


SKILLS = [
    {"id": "s1", "name": "Python", "category": "BACKEND", "level": "EXPERT", "yearsOfExperience": 6},
    {"id": "s2", "name": "React", "category": "FRONTEND", "level": "ADVANCED"},
    {"id": "s3", "name": "PostgreSQL", "category": "DATABASE", "level": "INTERMEDIATE"},
]

PROFILE = {
    "id": "p1",
    "name": "John Doe",
    "email": ["john.doe@example.com"],
    "bio": "Software Developer",
    "CV": "https://johndoe.com/cv.pdf",
}


def make_transport(routes: dict[str, tuple[int, object]], calls: list | None = None) -> httpx.MockTransport:
    """MockTransport answering GET <path> with (status, json body); unknown paths 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request.url.path)
        status, body = routes.get(request.url.path, (404, {"error": "Not found"}))
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)
