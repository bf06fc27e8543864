"""Pydantic models for chat messages and the Gemini generateContent payloads."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
	"""Author of a message."""
	USER = "user"
	ASSISTANT = "assistant"


class Message(BaseModel):
	"""Single exchanged utterance. Immutable once created."""
	model_config = ConfigDict(frozen=True)

	role: Role
	text: str


# --- Gemini wire format ---

class Part(BaseModel):
	text: Optional[str] = None


class Content(BaseModel):
	"""One turn in the request `contents` list (or a candidate's content)."""
	role: Optional[str] = None
	parts: List[Part] = Field(default_factory=list)


class GenerationConfig(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	temperature: float = 0.7
	max_output_tokens: int = Field(2048, alias="maxOutputTokens")


class GenerateContentRequest(BaseModel):
	"""Body of a `models/<model>:generateContent` call."""
	model_config = ConfigDict(populate_by_name=True)

	contents: List[Content]
	generation_config: GenerationConfig = Field(alias="generationConfig")

	def to_payload(self) -> dict:
		"""Serialize with the camelCase keys the API expects, dropping unset roles."""
		return self.model_dump(by_alias=True, exclude_none=True)


class Candidate(BaseModel):
	content: Optional[Content] = None
	finish_reason: Optional[str] = Field(None, alias="finishReason")


class GenerateContentResponse(BaseModel):
	"""Subset of the generateContent response the chat needs."""
	candidates: List[Candidate] = Field(default_factory=list)
