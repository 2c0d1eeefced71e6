"""
Pytest configuration for wallet_api tests.
Route handlers are captured through a recording fake app so they can be awaited directly.
"""
from __future__ import annotations

import json
from typing import Any

import pytest

from wallet_api.config import Settings


class FakeApp:
    """Records handlers registered through @app.get / @app.post."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}

    def _register(self, method: str, path: str):
        def decorator(handler):
            self.routes[(method, path)] = handler
            return handler

        return decorator

    def get(self, path: str):
        return self._register("GET", path)

    def post(self, path: str):
        return self._register("POST", path)

    def handler(self, method: str, path: str):
        return self.routes[(method, path)]


class FakeRequest:
    def __init__(self, body: Any = None, query_params=None, path_params=None, raw_error: Exception | None = None):
        self._body = body
        self._raw_error = raw_error
        self.query_params = query_params or {}
        self.path_params = path_params or {}

    def json(self):
        if self._raw_error is not None:
            raise self._raw_error
        return self._body


class FakePayloadService:
    def __init__(self, descriptor=None, status=None, error: Exception | None = None) -> None:
        self.descriptor = descriptor if descriptor is not None else {"uuid": "payload-1"}
        self.status = status if status is not None else {"meta": {"resolved": False}}
        self.error = error
        self.created: list[dict] = []
        self.looked_up: list[str] = []

    async def create_payload(self, spec):
        self.created.append(spec)
        if self.error is not None:
            raise self.error
        return self.descriptor

    async def get_payload_status(self, uuid):
        self.looked_up.append(uuid)
        if self.error is not None:
            raise self.error
        return self.status


def response_json(response) -> dict:
    body = response.description
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    return json.loads(body)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        xaman_api_key="test-key",
        xaman_api_secret="test-secret",
        app_url="https://subs.example.com",
        xaman_force_network="DEVNET",
        xaman_payload_expire=300,
    )


@pytest.fixture
def app() -> FakeApp:
    return FakeApp()
