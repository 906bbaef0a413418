from typing import Optional

from .config import SMALL_TALK_PHRASES
from .data_store import IntentStore
from .nlp_utils import tokenize


def contains_phrase(text: str, phrase: str) -> bool:
    # word-bounded containment so "hi" does not fire inside "this"
    padded = f" {' '.join(tokenize(text))} "
    return f" {' '.join(tokenize(phrase))} " in padded


def detect_small_talk(text: str, store: IntentStore, phrases=None) -> Optional[str]:
    """Return the tag of the first conversational intent whose phrase list matches."""
    phrases = SMALL_TALK_PHRASES if phrases is None else phrases
    for tag, tag_phrases in phrases.items():
        if store.get(tag) is None:
            continue
        if any(contains_phrase(text, p) for p in tag_phrases):
            return tag
    return None
