import logging
from enum import Enum
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from sahayak.chat.conversation import ChatSession, Conversation
from sahayak.chat.policy import RequestPolicy
from sahayak.config_manager import ConfigManager
from sahayak.llm.errors import ExchangeError
from sahayak.llm.gemini_client import GeminiClient
from sahayak.schemas.chat import Role
from sahayak.utils.llm_factory import LLMFactory

logger = logging.getLogger("ExchangeClient")

ERROR_PREFIX = "Sorry, I encountered an error: "
REQUIRED_KEYS = ["llm_settings.provider", "llm_settings.model_name"]


class SubmitStatus(Enum):
    IGNORED = "ignored"
    QUOTA_EXCEEDED = "quota_exceeded"
    ANSWERED = "answered"
    FAILED = "failed"


class SubmitResult(NamedTuple):
    conversation: Conversation
    pending: bool
    status: SubmitStatus


class ExchangeClient:
    """Turn-taking glue between a ChatSession and the text-generation API.

    One accepted submission appends the user's message, flips the session to
    pending, performs one call and appends either the reply or an error
    surrogate. The conversation is the only error channel: API failures never
    propagate out of `submit`.
    """

    def __init__(
        self,
        client: GeminiClient,
        policy: Optional[RequestPolicy] = None,
        send_history: bool = False,
    ):
        """Initialize the exchange.

        Args:
            client: Anything exposing `generate(prompt)` (and
                `generate_from_history(messages)` when `send_history` is set).
            policy: Optional quota gate; None disables it.
            send_history: Send the whole conversation instead of the latest turn.
        """
        self.client = client
        self.policy = policy
        self.send_history = send_history

    @classmethod
    def from_config(cls, config_path: str = "cfg/config.json") -> "ExchangeClient":
        """Build the client, policy and history mode from the config file."""
        load_dotenv()

        config_manager = ConfigManager()
        config_manager.load(config_path)
        if not config_manager.validate_required_keys(REQUIRED_KEYS):
            raise ValueError(f"Configuration {config_path} must define: {', '.join(REQUIRED_KEYS)}")
        llm_config = config_manager.get_llm_config()

        provider = llm_config.get("provider", "google")
        client = LLMFactory.create_client(llm_config, provider=provider)
        policy = RequestPolicy.from_config(config_manager.get_policy_config())

        logger.info(f"💬 Exchange ready (quota: {'on' if policy else 'off'}, history: {llm_config.get('send_history', False)})")
        return cls(client, policy=policy, send_history=bool(llm_config.get("send_history", False)))

    def remaining(self, session: ChatSession) -> Optional[int]:
        """Quota left for the session, or None when no policy is active."""
        if self.policy is None:
            return None
        return self.policy.remaining(session.size())

    def accept(self, session: ChatSession, user_text: str) -> bool:
        """Validate, gate, record the user's turn and mark the session pending.

        Returns False (leaving the session untouched) for blank text or an
        exhausted quota.
        """
        return self._accept(session, user_text) is None

    def complete(self, session: ChatSession, user_text: str) -> SubmitStatus:
        """Call the API for an accepted turn and record the outcome.

        The pending flag is cleared whatever happens.
        """
        try:
            if self.send_history:
                reply = self.client.generate_from_history(session.conversation)
            else:
                reply = self.client.generate(user_text)
        except ExchangeError as e:
            logger.warning(f"Exchange failed: {e}")
            session.add(Role.ASSISTANT, f"{ERROR_PREFIX}{e}")
            return SubmitStatus.FAILED
        finally:
            session.pending = False

        session.add(Role.ASSISTANT, reply)
        logger.info(f"Reply received ({len(reply)} chars)")
        return SubmitStatus.ANSWERED

    def submit(self, session: ChatSession, user_text: str) -> SubmitResult:
        """Run one full turn and report the resulting state."""
        rejected = self._accept(session, user_text)
        if rejected is not None:
            return SubmitResult(session.conversation, session.pending, rejected)

        status = self.complete(session, user_text)
        return SubmitResult(session.conversation, session.pending, status)

    def _accept(self, session: ChatSession, user_text: str) -> Optional[SubmitStatus]:
        if not user_text or not user_text.strip():
            return SubmitStatus.IGNORED

        if self.policy is not None and self.policy.is_exhausted(session.size()):
            logger.info(f"Quota exhausted ({session.size()}/{self.policy.max_turns_per_window}), submission rejected")
            return SubmitStatus.QUOTA_EXCEEDED

        session.add(Role.USER, user_text)
        session.pending = True
        logger.debug(f"Accepted user turn #{session.size()}")
        return None
