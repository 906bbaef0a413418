"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path

import pytest
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

# Make project root importable
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from college_bot.config import Settings
from college_bot.data_store import load_data
from college_bot.engine import ChatContext, ConversationEngine
from college_bot.nlp_utils import Lexicon, Normalizer

# fixed stopword list so tests never need the nltk download
STOP_WORDS = frozenset(ENGLISH_STOP_WORDS)

SMALL_INTENTS = {
    "intents": [
        {
            "tag": "greetings",
            "keywords": ["good morning"],
            "response": "Hi! Ask me anything about the campus.",
        },
        {
            "tag": "library",
            "keywords": ["studying"],
            "response": "The library is open from 8 AM to 8 PM.",
            "sentiment": "positive",
            "links": [{"url": "https://example.edu/library", "text": "Library"}],
        },
        {
            "tag": "sports",
            "keywords": ["football", "cricket ground"],
            "response": "We have football and cricket grounds.",
        },
    ],
    "follow_ups": [
        {"topic": "library", "triggers": ["timings"], "response": "Timings change during exams."},
    ],
}


def build_engine(store, config=None):
    config = config or Settings(_env_file=None)
    return ConversationEngine(ChatContext.build(store, config, stop_words=STOP_WORDS))


@pytest.fixture(scope="session")
def config():
    return Settings(_env_file=None)


@pytest.fixture(scope="session")
def store():
    """The intents shipped with the package."""
    return load_data()


@pytest.fixture(scope="session")
def engine(store, config):
    return build_engine(store, config)


@pytest.fixture(scope="session")
def normalizer(store):
    return Normalizer(Lexicon.from_phrases(store.all_keywords()), stop_words=STOP_WORDS)


@pytest.fixture
def write_intents(tmp_path):
    """Write an intents document to a temp file and return its path."""
    def _write(data, name="intents.json"):
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def small_store(write_intents):
    return load_data(write_intents(SMALL_INTENTS))
