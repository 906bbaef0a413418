from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .data_store import Link


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


@dataclass(frozen=True)
class Exchange:
    """Single message in a session history."""
    sender: Sender
    message: str
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        # accept plain "user"/"bot" strings from callers
        object.__setattr__(self, "sender", Sender(self.sender))

    @classmethod
    def user(cls, message: str) -> "Exchange":
        return cls(Sender.USER, message, datetime.now())

    @classmethod
    def bot(cls, message: str) -> "Exchange":
        return cls(Sender.BOT, message, datetime.now())


@dataclass(frozen=True)
class ChatResponse:
    """The one reply shape the engine returns for every branch."""
    text: str
    links: Tuple[Link, ...] = ()
    is_follow_up: bool = False
    intent: Optional[str] = None
    score: Optional[float] = None
    corrected: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return {
            "response": self.text,
            "links": [link.to_dict() for link in self.links],
            "isFollowUp": self.is_follow_up,
            "intent": self.intent,
        }
