"""Pytest fixtures for chat relay tests."""

from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from chat_relay.api import create_app
from chat_relay.config import GeminiConfig, RelayConfig


def gemini_response(text=None, *, status_code=200, body=None):
    """Build a fake ``requests.Response`` for the generateContent endpoint."""
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    if body is None:
        body = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    response.json.return_value = body
    response.text = str(body)
    return response


def prompt_of(mock_post, call_index=-1):
    """Return the prompt text sent in one recorded upstream call."""
    call = mock_post.call_args_list[call_index]
    return call.kwargs["json"]["contents"][0]["parts"][0]["text"]


@pytest.fixture
def relay_config():
    return RelayConfig(llm=GeminiConfig(api_key="test-key"))


@pytest.fixture
def mock_post():
    with patch("chat_relay.llm_client.requests.post") as post:
        post.return_value = gemini_response("Hello from Medinova")
        yield post


@pytest.fixture
def client(relay_config, mock_post):
    with TestClient(create_app(relay_config)) as test_client:
        yield test_client
