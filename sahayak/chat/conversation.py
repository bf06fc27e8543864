"""Conversation state for one chat session.

`Conversation` is an immutable, append-only sequence of messages: `append`
hands back a new instance and callers must drop the old reference.
`ChatSession` bundles the current conversation with the "awaiting reply" flag
so the UI layers (Streamlit, console) keep a single explicit state object
instead of loose globals.
"""

from typing import Iterator, Optional, Tuple

from sahayak.chat.policy import RequestPolicy
from sahayak.schemas.chat import Message, Role


class Conversation:
    """Ordered, append-only list of exchanged messages."""

    __slots__ = ("_messages",)

    def __init__(self, messages: Tuple[Message, ...] = ()):
        self._messages = tuple(messages)

    def append(self, message: Message) -> "Conversation":
        """Return a new conversation with `message` at the end."""
        return Conversation(self._messages + (message,))

    def size(self) -> int:
        return len(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Conversation):
            return NotImplemented
        return self._messages == other._messages

    def __hash__(self) -> int:
        return hash(self._messages)

    def __repr__(self) -> str:
        turns = ", ".join(f"{m.role.value}:{m.text!r}" for m in self._messages)
        return f"Conversation([{turns}])"

    @property
    def messages(self) -> Tuple[Message, ...]:
        return self._messages

    def last(self) -> Optional[Message]:
        return self._messages[-1] if self._messages else None


class ChatSession:
    """Mutable holder for the session's conversation and pending flag."""

    def __init__(self, conversation: Optional[Conversation] = None):
        self.conversation = conversation if conversation is not None else Conversation()
        self.pending = False

    def add(self, role: Role, text: str) -> Conversation:
        """Append a message and swap in the resulting conversation."""
        self.conversation = self.conversation.append(Message(role=role, text=text))
        return self.conversation

    def size(self) -> int:
        return self.conversation.size()

    def is_input_enabled(self, policy: Optional[RequestPolicy] = None) -> bool:
        """Whether the UI should accept a new submission right now."""
        if self.pending:
            return False
        if policy is not None and policy.is_exhausted(self.size()):
            return False
        return True
