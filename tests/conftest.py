"""Pytest configuration and shared fixtures."""
import json

import pytest
import requests

from sahayak.config_manager import ConfigManager
from sahayak.llm.gemini_client import GeminiClient, GeminiConfig


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Records POSTs and replays a canned response or exception."""

    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, params=None, json=None, timeout=None):
        self.calls.append({"url": url, "params": params, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class FakeClient:
    """Collaborator double for ExchangeClient tests.

    `on_call` runs inside the call so tests can observe the session while the
    reply is still pending.
    """

    def __init__(self, reply="Hi there", error=None, on_call=None):
        self.reply = reply
        self.error = error
        self.on_call = on_call
        self.prompts = []
        self.histories = []

    def _respond(self):
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return self.reply

    def generate(self, prompt):
        self.prompts.append(prompt)
        return self._respond()

    def generate_from_history(self, messages):
        self.histories.append(list(messages))
        return self._respond()


def candidate_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def fake_session():
    return FakeSession(response=FakeResponse(200, candidate_payload("Hi there")))


@pytest.fixture
def gemini_client(fake_session):
    config = GeminiConfig(api_key="test-key", model_name="gemini-1.5-pro")
    return GeminiClient(config, session=fake_session)


@pytest.fixture
def config_file(tmp_path):
    """Write a complete config.json to a temp dir and return its path."""
    config = {
        "llm_settings": {
            "provider": "google",
            "model_name": "gemini-1.5-pro",
            "temperature": 0.7,
            "max_output_tokens": 2048,
            "timeout": 30,
            "send_history": False,
        },
        "request_policy": {"enabled": True, "max_turns_per_window": 20, "cooldown_hours": 2},
        "ui": {"title": "SAHAYAK.AI"},
        "logging": {"log_dir": str(tmp_path / "logs"), "log_file": "test.log"},
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """ConfigManager caches at class level; isolate every test."""
    monkeypatch.setattr(ConfigManager, "_config", None)
    monkeypatch.setattr(ConfigManager, "_config_path", None)


@pytest.fixture
def connection_error():
    return requests.exceptions.ConnectionError("network down")
