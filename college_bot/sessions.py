"""In-memory session store.

History lives only for the life of the process: there is no eviction, expiry
or persistence, and a restart starts every session from scratch.
"""

import uuid
from collections import defaultdict
from typing import Dict, List

from .models import ChatResponse, Exchange


class SessionStore:

    def __init__(self):
        self._sessions: Dict[str, List[Exchange]] = defaultdict(list)

    @staticmethod
    def new_session_id() -> str:
        return uuid.uuid4().hex

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def history(self, session_id: str) -> List[Exchange]:
        """Return the live history list for a session, creating it if needed."""
        return self._sessions[session_id]

    def append(self, session_id: str, exchange: Exchange) -> None:
        self._sessions[session_id].append(exchange)

    def record_turn(self, session_id: str, user_message: str, reply: ChatResponse) -> None:
        history = self._sessions[session_id]
        history.append(Exchange.user(user_message))
        history.append(Exchange.bot(reply.text))

    def clear(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
