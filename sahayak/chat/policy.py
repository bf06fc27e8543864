from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RequestPolicy:
    """Client-side cap on how many messages a session may hold.

    The cooldown is only shown to the user; nothing resets the window on a
    clock, so a session that hits the cap stays capped until it ends.
    """
    max_turns_per_window: int = 20
    cooldown_hours: int = 2

    def remaining(self, size: int) -> int:
        """Quota left for a conversation holding `size` messages."""
        return max(0, self.max_turns_per_window - size)

    def is_exhausted(self, size: int) -> bool:
        return size >= self.max_turns_per_window

    @classmethod
    def from_config(cls, section: Dict[str, Any]) -> Optional["RequestPolicy"]:
        """Build a policy from the `request_policy` config section.

        Returns None when the section is missing or disabled, which turns the
        quota gate and its display off.
        """
        if not section or not section.get("enabled", False):
            return None
        return cls(
            max_turns_per_window=int(section.get("max_turns_per_window", 20)),
            cooldown_hours=int(section.get("cooldown_hours", 2)),
        )
