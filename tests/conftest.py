"""Shared fixtures for the proxy tests."""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests
from flask import Flask
from flask.testing import FlaskClient

from sheets_proxy import Config, create_app

API_KEY = "test-key"


def fake_response(status_code: int = 200, body: Any = None) -> MagicMock:
    """Stand-in for ``requests.Response``; non-string bodies are JSON-encoded."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.text = body if isinstance(body, str) else json.dumps(body)
    resp.json.side_effect = lambda **kwargs: json.loads(resp.text, **kwargs)
    return resp


@pytest.fixture
def config() -> Config:
    return Config(api_key=API_KEY)


@pytest.fixture
def app(config: Config) -> Flask:
    app = create_app(config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def mock_get() -> Iterator[MagicMock]:
    with patch("sheets_proxy.sheets_client.requests.get") as mocked:
        yield mocked
