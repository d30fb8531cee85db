"""Shared fixtures: a fake aiohttp session and deterministic random sources."""

from __future__ import annotations

import json

import aiohttp
import pytest

from fuelmap.core.config import settings


class FakeResponse:
    def __init__(self, status: int = 200, payload: object = None, text: str | None = None) -> None:
        self.status = status
        self._payload = payload
        self._text = text

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None

    async def json(self, content_type: str | None = "application/json") -> object:
        if self._text is not None:
            return json.loads(self._text)
        return self._payload

    async def text(self) -> str:
        return self._text if self._text is not None else json.dumps(self._payload)


class FakeSession:
    """Stands in for aiohttp.ClientSession; replays one queued outcome per call."""

    def __init__(self, outcomes: list, calls: list) -> None:
        self._outcomes = outcomes
        self.calls = calls

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None

    def _request(self, method: str, url: str, **kwargs: object) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def get(self, url: str, **kwargs: object) -> FakeResponse:
        return self._request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: object) -> FakeResponse:
        return self._request("POST", url, **kwargs)


class FakeHttp:
    def __init__(self) -> None:
        self.outcomes: list = []
        self.calls: list = []

    def queue(self, *outcomes: object) -> "FakeHttp":
        self.outcomes.extend(outcomes)
        return self

    def session(self, *args: object, **kwargs: object) -> FakeSession:
        return FakeSession(self.outcomes, self.calls)


class ZeroRandom:
    """Random source whose variance is always zero."""

    def random(self) -> float:
        return 0.0


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHttp:
    http = FakeHttp()
    monkeypatch.setattr(aiohttp, "ClientSession", http.session)
    return http


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setattr(settings, "SERVO_SAVER_API_KEY", "test-consumer-id")
    return "test-consumer-id"


@pytest.fixture
def no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "SERVO_SAVER_API_KEY", None)


@pytest.fixture
def zero_random() -> ZeroRandom:
    return ZeroRandom()
