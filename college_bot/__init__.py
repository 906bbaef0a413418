# Makes the folder importable as a package.
# Exports the engine entry points for convenience.

from .data_store import IntentStoreError, load_data
from .engine import ChatContext, ConversationEngine, create_engine
from .models import ChatResponse, Exchange, Sender

__all__ = [
    "ChatContext",
    "ChatResponse",
    "ConversationEngine",
    "Exchange",
    "IntentStoreError",
    "Sender",
    "create_engine",
    "load_data",
]
