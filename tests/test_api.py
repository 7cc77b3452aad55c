"""HTTP-level tests for the /chat endpoint."""

import pytest
import requests

from chat_relay.config import NEW_CONVERSATION_PROMPT, ONGOING_CONVERSATION_PROMPT

from conftest import gemini_response, prompt_of


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_chat_returns_upstream_text(client, mock_post):
    response = client.post("/chat", json={"message": "I have a headache", "userId": "u1"})

    assert response.status_code == 200
    assert response.json() == {"reply": "Hello from Medinova"}
    mock_post.assert_called_once()


def test_missing_message_is_rejected_without_upstream_call(client, mock_post):
    response = client.post("/chat", json={"userId": "u1"})

    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}
    mock_post.assert_not_called()


def test_empty_message_is_rejected(client, mock_post):
    response = client.post("/chat", json={"message": ""})

    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}
    mock_post.assert_not_called()


def test_whitespace_message_is_relayed(client, mock_post):
    response = client.post("/chat", json={"message": "   ", "userId": "w"})

    assert response.status_code == 200
    assert response.json() == {"reply": "Hello from Medinova"}
    mock_post.assert_called_once()
    assert prompt_of(mock_post).endswith("User:    \n")


def test_non_string_message_is_a_bad_request(client, mock_post):
    response = client.post("/chat", json={"message": ["secret", "text"]})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}
    assert "secret" not in response.text
    mock_post.assert_not_called()


def test_rejected_request_does_not_mark_user_seen(client, mock_post):
    client.post("/chat", json={"message": "", "userId": "u1"})
    client.post("/chat", json={"message": "hello", "userId": "u1"})

    assert NEW_CONVERSATION_PROMPT in prompt_of(mock_post)


def test_conversation_round_trip(client, mock_post):
    client.post("/chat", json={"message": "I have a headache", "userId": "u1"})
    first = prompt_of(mock_post)
    client.post("/chat", json={"message": "It's worse now", "userId": "u1"})
    second = prompt_of(mock_post)
    client.post("/chat", json={"message": "Hi", "userId": "u2"})
    other_user = prompt_of(mock_post)

    assert NEW_CONVERSATION_PROMPT in first
    assert ONGOING_CONVERSATION_PROMPT not in first
    assert first.rstrip().endswith("User: I have a headache")

    assert ONGOING_CONVERSATION_PROMPT in second
    assert NEW_CONVERSATION_PROMPT not in second
    assert second.rstrip().endswith("User: It's worse now")

    assert NEW_CONVERSATION_PROMPT in other_user


def test_missing_user_id_is_tracked_as_anonymous(client, mock_post):
    client.post("/chat", json={"message": "first"})
    client.post("/chat", json={"message": "second", "userId": "anonymous"})
    client.post("/chat", json={"message": "third", "userId": "  "})

    assert NEW_CONVERSATION_PROMPT in prompt_of(mock_post, 0)
    assert ONGOING_CONVERSATION_PROMPT in prompt_of(mock_post, 1)
    assert ONGOING_CONVERSATION_PROMPT in prompt_of(mock_post, 2)
    assert "anonymous" in client.app.state.service.tracker


@pytest.mark.parametrize(
    "status_code,body",
    [
        (429, {"error": {"message": "quota exceeded for key test-key"}}),
        (302, {"candidates": [{"content": {"parts": [{"text": "redirected"}]}}]}),
        (500, {"error": "internal"}),
    ],
)
def test_upstream_error_status_returns_generic_apology(client, mock_post, status_code, body):
    mock_post.return_value = gemini_response(status_code=status_code, body=body)

    response = client.post("/chat", json={"message": "hello", "userId": "u1"})

    assert response.status_code == 500
    assert response.json() == {"reply": "Sorry, something went wrong!"}


def test_transport_failure_returns_generic_apology(client, mock_post):
    mock_post.side_effect = requests.ConnectionError("connection refused")

    response = client.post("/chat", json={"message": "hello"})

    assert response.status_code == 500
    assert response.json() == {"reply": "Sorry, something went wrong!"}
    assert "refused" not in response.text


def test_unparseable_body_returns_generic_apology(client, mock_post):
    bad = gemini_response("unused")
    bad.json.side_effect = ValueError("Expecting value")
    mock_post.return_value = bad

    response = client.post("/chat", json={"message": "hello"})

    assert response.status_code == 500
    assert response.json() == {"reply": "Sorry, something went wrong!"}


def test_user_still_marked_seen_after_upstream_failure(client, mock_post):
    mock_post.side_effect = requests.Timeout("read timed out")
    client.post("/chat", json={"message": "hello", "userId": "u1"})

    mock_post.side_effect = None
    mock_post.return_value = gemini_response("Welcome back")
    response = client.post("/chat", json={"message": "hello again", "userId": "u1"})

    assert response.json() == {"reply": "Welcome back"}
    assert ONGOING_CONVERSATION_PROMPT in prompt_of(mock_post)


def test_malformed_upstream_payload_uses_fallback(client, mock_post):
    for body in ({}, {"candidates": []}, {"candidates": [{"content": {"parts": []}}]}):
        mock_post.return_value = gemini_response(body=body)

        response = client.post("/chat", json={"message": "hello"})

        assert response.status_code == 200
        assert response.json() == {"reply": "I'm not sure."}


def test_empty_upstream_text_uses_fallback(client, mock_post):
    mock_post.return_value = gemini_response("")

    response = client.post("/chat", json={"message": "hello"})

    assert response.status_code == 200
    assert response.json() == {"reply": "I'm not sure."}


def test_cors_headers_present(client):
    response = client.post(
        "/chat",
        json={"message": "hello"},
        headers={"Origin": "http://localhost:5173"},
    )

    assert response.headers["access-control-allow-origin"] == "*"
