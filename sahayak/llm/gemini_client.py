import logging
from typing import Iterable, List, Optional
from dataclasses import dataclass

import requests
from pydantic import ValidationError

from sahayak.llm.errors import HttpStatusFailure, MalformedResponse, TransportFailure
from sahayak.schemas.chat import (
    Content,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    Message,
    Part,
    Role,
)

logger = logging.getLogger("GeminiClient")

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass(frozen=True)
class GeminiConfig:
    """Immutable settings for one Gemini model endpoint"""
    api_key: str
    model_name: str = "gemini-1.5-pro"
    base_url: str = DEFAULT_BASE_URL
    temperature: float = 0.7
    max_output_tokens: int = 2048
    timeout: Optional[float] = 60


def build_request(contents: List[Content], config: GeminiConfig) -> GenerateContentRequest:
    """Assemble the generateContent body for the given turns."""
    return GenerateContentRequest(
        contents=contents,
        generation_config=GenerationConfig(
            temperature=config.temperature,
            max_output_tokens=config.max_output_tokens,
        ),
    )


def history_to_contents(messages: Iterable[Message]) -> List[Content]:
    """Serialize a conversation into Gemini turns (assistant -> "model")."""
    contents = []
    for message in messages:
        role = "user" if message.role == Role.USER else "model"
        contents.append(Content(role=role, parts=[Part(text=message.text)]))
    return contents


def extract_text(data) -> str:
    """Return the text of the first candidate's first part.

    Raises:
        MalformedResponse: If the payload has no candidate, content, part or text.
    """
    try:
        parsed = GenerateContentResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedResponse(f"Malformed response: {e.error_count()} validation error(s)") from e

    if not parsed.candidates:
        raise MalformedResponse("Malformed response: no candidates returned")
    candidate = parsed.candidates[0]
    if candidate.content is None or not candidate.content.parts:
        reason = candidate.finish_reason or "unknown"
        raise MalformedResponse(f"Malformed response: candidate has no content (finish reason: {reason})")
    text = candidate.content.parts[0].text
    if text is None:
        raise MalformedResponse("Malformed response: candidate part has no text")
    return text


class GeminiClient:
    """Thin wrapper over the Generative Language REST endpoint.

    Each call issues exactly one POST; retries, backoff and streaming are left
    out on purpose so that the caller sees every failure once.
    """

    def __init__(self, config: GeminiConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/models/{self.config.model_name}:generateContent"

    def generate(self, prompt: str) -> str:
        """Send a single user prompt and return the model's reply text."""
        return self.generate_from_contents([Content(parts=[Part(text=prompt)])])

    def generate_from_history(self, messages: Iterable[Message]) -> str:
        """Send a whole conversation as context and return the reply text."""
        return self.generate_from_contents(history_to_contents(messages))

    def generate_from_contents(self, contents: List[Content]) -> str:
        body = build_request(contents, self.config).to_payload()
        logger.debug(f"Making API request to {self.config.model_name} with body: {body}")

        try:
            response = self.session.post(
                self.endpoint,
                params={"key": self.config.api_key},
                json=body,
                timeout=self.config.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Request to {self.config.model_name} failed: {e}")
            raise TransportFailure(str(e)) from e

        if not 200 <= response.status_code < 300:
            detail = _safe_body(response)
            logger.error(f"API Error ({response.status_code}): {detail}")
            raise HttpStatusFailure(response.status_code, detail)

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse("Malformed response: body is not valid JSON") from e

        logger.debug(f"API Response: {data}")
        return extract_text(data)


def _safe_body(response) -> str:
    try:
        return str(response.json())
    except ValueError:
        return response.text
