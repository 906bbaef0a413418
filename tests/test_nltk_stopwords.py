"""Engine behaviour with the nltk stopword list the app runs with.

Skipped when the corpus is not installed; nothing here downloads it.
"""

import nltk
import pytest
from nltk.corpus import stopwords

from college_bot.config import settings
from college_bot.engine import ChatContext, ConversationEngine
from college_bot.eval_utils import run_offline_eval
from college_bot.models import Exchange

if settings.NLTK_DATA_DIR not in nltk.data.path:
    nltk.data.path.append(settings.NLTK_DATA_DIR)

try:
    NLTK_STOP_WORDS = frozenset(stopwords.words("english"))
except LookupError:
    NLTK_STOP_WORDS = None

pytestmark = pytest.mark.skipif(NLTK_STOP_WORDS is None, reason="nltk stopwords corpus not installed")


@pytest.fixture(scope="module")
def nltk_engine(store, config):
    return ConversationEngine(ChatContext.build(store, config, stop_words=NLTK_STOP_WORDS))


def test_shipped_intents_score_perfectly(nltk_engine):
    accuracy, results = run_offline_eval(nltk_engine)
    assert [r for r in results if not r["ok"]] == []
    assert accuracy == 1.0


def test_admission_date_follow_up(nltk_engine, store):
    history = [Exchange.user("admissions"), Exchange.bot(store.get("admissions").response)]
    reply = nltk_engine.handle("what is the last date", history)
    assert reply.is_follow_up is True
    assert reply.intent == "follow_up:admission"


def test_generic_question_falls_back(nltk_engine):
    assert nltk_engine.handle("what is the syllabus", []).intent is None


@pytest.mark.parametrize("text", ["hostal fees", "How are the placemnts?", "computer science and engineering"])
def test_normalizing_twice_changes_nothing(nltk_engine, text):
    normalizer = nltk_engine.context.normalizer
    once = normalizer.normalize(text)
    assert normalizer.normalize(once) == once
