"""Conversation engine: the single entry point the chat UI calls.

``ChatContext`` bundles everything built from the intents file (store,
lexicon-backed normalizer, scorers, follow-up table). It is immutable once
built, so one instance can serve every session; tests build their own.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .config import CLARIFICATION_RESPONSE, FALLBACK_RESPONSE, SMALL_TALK_PHRASES, Settings, settings
from .data_store import IntentStore, load_data
from .detectors import detect_small_talk
from .followup import FollowUpResolver
from .logging import get_logger
from .matcher import KeywordScorer, MatchResult, NGramScorer, Query, TfidfScorer, select_best
from .models import ChatResponse, Exchange
from .nlp_utils import Lexicon, Normalizer, tokenize

logger = get_logger(__name__)


def _build_scorer(strategy: str, store: IntentStore, normalizer: Normalizer):
    if strategy == "tfidf":
        return TfidfScorer(store, normalizer)
    if strategy == "ngram":
        return NGramScorer(store, normalizer)
    return KeywordScorer(store)


@dataclass(frozen=True)
class ChatContext:
    store: IntentStore
    normalizer: Normalizer
    scorers: Tuple[Tuple[object, float], ...]
    resolver: FollowUpResolver
    spell_correction: bool = True

    @classmethod
    def build(cls, store: IntentStore, config: Settings = None, stop_words=None) -> "ChatContext":
        config = config or settings
        # trigger words are known words too, or correction would rewrite them
        lexicon = Lexicon.from_phrases(store.all_keywords() + store.all_triggers())
        normalizer = Normalizer(lexicon, stop_words=stop_words)

        strategies = [config.PRIMARY_STRATEGY]
        if config.FALLBACK_STRATEGY and config.FALLBACK_STRATEGY != config.PRIMARY_STRATEGY:
            strategies.append(config.FALLBACK_STRATEGY)
        scorers = tuple(
            (_build_scorer(s, store, normalizer), config.threshold_for(s)) for s in strategies
        )
        return cls(
            store=store,
            normalizer=normalizer,
            scorers=scorers,
            resolver=FollowUpResolver(store, normalizer),
            spell_correction=config.SPELL_CORRECTION,
        )

    @property
    def topics(self) -> list:
        return [name for name in self.store.names if name not in SMALL_TALK_PHRASES]


class ConversationEngine:

    def __init__(self, context: ChatContext):
        self.context = context

    def fallback_response(self) -> str:
        topics = ", ".join(t.replace("_", " ") for t in self.context.topics)
        return FALLBACK_RESPONSE.format(topics=topics)

    def _reply(self, match: MatchResult, query: Query, is_follow_up: bool = False) -> ChatResponse:
        return ChatResponse(
            text=match.response,
            links=match.links,
            is_follow_up=is_follow_up,
            intent=match.intent,
            score=match.score,
            corrected=query.corrected,
        )

    def build_query(self, message: str) -> Query:
        normalizer = self.context.normalizer
        plain = " ".join(tokenize(message))
        corrected = plain
        if self.context.spell_correction and normalizer.lexicon:
            corrected = normalizer.correct(message)
            if corrected != plain:
                logger.info("spelling_corrected", original=plain, corrected=corrected)
        return Query(
            text=message,
            corrected=corrected,
            normalized=normalizer.normalize(corrected, spell_check=False),
            uncorrected=normalizer.normalize(message, spell_check=False),
        )

    def match(self, query: Query) -> Optional[MatchResult]:
        for scorer, threshold in self.context.scorers:
            best = select_best(scorer.score(query), threshold)
            if best is not None:
                logger.info("intent_matched", intent=best.intent, score=round(best.score, 3), strategy=scorer.name)
                return best
        return None

    def handle(self, message: Optional[str], history: Sequence[Exchange] = ()) -> ChatResponse:
        if not message or not message.strip():
            return ChatResponse(text=CLARIFICATION_RESPONSE)

        query = self.build_query(message)
        store = self.context.store

        # phrase lists are matched against what the user typed, not the corrected text
        small_talk = detect_small_talk(query.text, store)
        if small_talk:
            logger.info("small_talk_matched", intent=small_talk)
            return self._reply(MatchResult.from_intent(store.get(small_talk), 1.0), query)

        if history:
            follow_up = self.context.resolver.resolve(query.normalized, history, query.uncorrected)
            if follow_up is not None:
                logger.info("follow_up_matched", intent=follow_up.intent)
                return self._reply(follow_up, query, is_follow_up=True)

        best = self.match(query)
        if best is not None:
            return self._reply(best, query)

        logger.info("no_intent_matched", message=message)
        return ChatResponse(text=self.fallback_response(), corrected=query.corrected)


def create_engine(config: Settings = None) -> ConversationEngine:
    """Load the intents (fatal on failure) and build a ready engine."""
    config = config or settings
    store = load_data(config.INTENTS_PATH)
    return ConversationEngine(ChatContext.build(store, config))
