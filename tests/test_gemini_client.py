"""
Tests for the Gemini REST client.
Requests go through a fake session; nothing touches the network.
"""

import dataclasses

import pytest
import requests

from conftest import FakeResponse, FakeSession, candidate_payload
from sahayak.llm.errors import HttpStatusFailure, MalformedResponse, TransportFailure
from sahayak.llm.gemini_client import GeminiClient, GeminiConfig, extract_text, history_to_contents
from sahayak.schemas.chat import Message, Role


def test_request_carries_only_prompt_and_generation_config(gemini_client, fake_session):
    """Body holds the literal prompt, temperature and output cap."""
    assert gemini_client.generate("Hello") == "Hi there"

    call = fake_session.calls[0]
    assert call["json"] == {
        "contents": [{"parts": [{"text": "Hello"}]}],
        "generationConfig": {"temperature": 0.7, "maxOutputTokens": 2048},
    }
    assert call["params"] == {"key": "test-key"}
    assert call["url"].endswith("/models/gemini-1.5-pro:generateContent")
    assert call["timeout"] == 60


def test_exactly_one_request_per_call(gemini_client, fake_session):
    gemini_client.generate("Hello")
    assert len(fake_session.calls) == 1


def test_transport_error_becomes_transport_failure():
    session = FakeSession(error=requests.exceptions.ConnectionError("network down"))
    client = GeminiClient(GeminiConfig(api_key="k"), session=session)

    with pytest.raises(TransportFailure, match="network down"):
        client.generate("Hello")


def test_timeout_becomes_transport_failure():
    session = FakeSession(error=requests.exceptions.Timeout("read timed out"))
    client = GeminiClient(GeminiConfig(api_key="k", timeout=5), session=session)

    with pytest.raises(TransportFailure):
        client.generate("Hello")
    assert session.calls[0]["timeout"] == 5


def test_non_success_status_carries_code():
    session = FakeSession(response=FakeResponse(429, {"error": {"message": "quota"}}))
    client = GeminiClient(GeminiConfig(api_key="k"), session=session)

    with pytest.raises(HttpStatusFailure) as exc_info:
        client.generate("Hello")
    assert exc_info.value.status_code == 429
    assert "status: 429" in str(exc_info.value)


def test_non_json_success_body_is_malformed():
    session = FakeSession(response=FakeResponse(200, None, text="<html>"))
    client = GeminiClient(GeminiConfig(api_key="k"), session=session)

    with pytest.raises(MalformedResponse):
        client.generate("Hello")


def test_extract_text_reads_first_candidate():
    data = {"candidates": [
        {"content": {"parts": [{"text": "first"}, {"text": "ignored"}]}},
        {"content": {"parts": [{"text": "second"}]}},
    ]}
    assert extract_text(data) == "first"


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"candidates": []},
        {"candidates": [{"finishReason": "SAFETY"}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{}]}}]},
        {"candidates": "nope"},
    ],
)
def test_extract_text_rejects_missing_fields(data):
    with pytest.raises(MalformedResponse):
        extract_text(data)


def test_history_uses_model_role_for_assistant():
    contents = history_to_contents([
        Message(role=Role.USER, text="Hello"),
        Message(role=Role.ASSISTANT, text="Hi"),
    ])
    assert [c.role for c in contents] == ["user", "model"]
    assert contents[1].parts[0].text == "Hi"


def test_generate_from_history_sends_every_turn():
    session = FakeSession(response=FakeResponse(200, candidate_payload("ok")))
    client = GeminiClient(GeminiConfig(api_key="k"), session=session)

    client.generate_from_history([
        Message(role=Role.USER, text="Hello"),
        Message(role=Role.ASSISTANT, text="Hi"),
        Message(role=Role.USER, text="Again"),
    ])
    sent = session.calls[0]["json"]["contents"]
    assert [turn["role"] for turn in sent] == ["user", "model", "user"]


def test_redirect_status_is_a_status_failure():
    session = FakeSession(response=FakeResponse(302, None, text=""))
    client = GeminiClient(GeminiConfig(api_key="k"), session=session)

    with pytest.raises(HttpStatusFailure) as exc_info:
        client.generate("Hello")
    assert exc_info.value.status_code == 302


def test_config_is_frozen():
    config = GeminiConfig(api_key="k")
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.temperature = 0.1
