import time
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


def now_ms() -> int:
    return int(time.time() * 1000)


class ChatMessage(BaseModel):
    """
    Message stored in a session's chat history.
    Messages are only ever appended or cleared in bulk, never edited.
    """
    role: Literal["user", "assistant"]
    content: str
    timestamp: int = Field(default_factory=now_ms)


class ResponseLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ResponseLength":
        """Resolve a client supplied value, falling back to medium for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MEDIUM
