import json

import pytest
import requests

from client.api import TeammateAPI
from client.models import Session, TeamRequest
from client.session_store import SessionStore

BASE_URL = "http://backend.test/api"


def make_response(status: int = 200, body=None, url: str = BASE_URL) -> requests.Response:
    """Build a real requests.Response carrying `body` as JSON (or raw text if str)."""
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    if isinstance(body, str):
        resp._content = body.encode("utf-8")
    else:
        resp._content = json.dumps(body).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    return resp


class FakeHTTP:
    """
    Stand-in for requests.Session.

    Queue replies with `reply(method, path, status, body)` or
    `fail(method, path, exc)`; every call is recorded in `calls`.
    """

    def __init__(self):
        self.headers: dict[str, str] = {}
        self.calls: list[dict] = []
        self._replies: dict[tuple[str, str], list] = {}

    def reply(self, method: str, path: str, status: int = 200, body=None) -> None:
        self._replies.setdefault((method, path), []).append(make_response(status, body, BASE_URL + path))

    def fail(self, method: str, path: str, exc: Exception | None = None) -> None:
        self._replies.setdefault((method, path), []).append(exc or requests.ConnectionError("refused"))

    def request(self, method, url, json=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append({
            "method": method,
            "path": path,
            "json": json,
            "timeout": timeout,
            "headers": dict(self.headers),
        })
        queue = self._replies.get((method, path))
        if not queue:
            raise AssertionError(f"unexpected {method} {path}")
        outcome = queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def count(self, method: str, path: str | None = None) -> int:
        return sum(
            1 for c in self.calls
            if c["method"] == method and (path is None or c["path"] == path)
        )


@pytest.fixture
def http():
    return FakeHTTP()


@pytest.fixture
def api(http):
    return TeammateAPI(base_url=BASE_URL, timeout=5, session=http)


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def session():
    return Session(user_id="u1", user_name="Ada", token="tok-123")


@pytest.fixture
def sample_requests():
    """Raw backend records: two owned by u1, one by u2."""
    return [
        {
            "_id": "r1",
            "userId": "u1",
            "userName": "Ada",
            "projectName": "Alpha",
            "courseName": "CSCI 0320",
            "semester": "Fall 2024",
            "description": "Looking for a frontend developer",
            "endTime": "2024-12-01",
        },
        {
            "_id": "r2",
            "userId": "u2",
            "userName": "Grace",
            "projectName": "Beta",
            "courseName": "MATH 0520",
            "semester": "Spring 2025",
            "description": "Linear algebra study group",
            "endTime": "2025-04-15T00:00:00.000Z",
        },
        {
            "_id": "r3",
            "userId": "u1",
            "userName": "Ada",
            "projectName": "Gamma Robotics",
            "courseName": "ENGN 0030",
            "semester": "Fall 2024",
            "description": "Need someone with CAD experience",
            "endTime": "",
        },
    ]


@pytest.fixture
def team_requests(sample_requests):
    return [TeamRequest.model_validate(r) for r in sample_requests]
