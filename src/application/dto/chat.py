"""Data transfer objects for the chat assistant."""

from dataclasses import dataclass, field
from typing import Dict, List

MAX_MESSAGE_LENGTH = 2000
CHAT_ROLES = ("user", "assistant")


@dataclass(frozen=True)
class ChatRequest:
    message: str
    history: List[Dict[str, str]] = field(default_factory=list)

    def validate(self) -> List[str]:
        errors = []

        if not self.message.strip():
            errors.append("message is required")
        elif len(self.message) > MAX_MESSAGE_LENGTH:
            errors.append(f"message must be at most {MAX_MESSAGE_LENGTH} characters")

        for turn in self.history:
            if turn.get("role") not in CHAT_ROLES:
                errors.append("history roles must be 'user' or 'assistant'")
                break

        return errors


@dataclass(frozen=True)
class ChatResponse:
    reply: str
    demo_mode: bool
