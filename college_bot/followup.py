"""Follow-up resolution.

A short message such as "what about cse?" only makes sense next to the bot's
previous answer. The resolver keeps a small hand-written table of
(topic in the last bot message, trigger in the current message) transitions
loaded with the intents, and turns a hit into a canned reply. Anything else is
left to the regular scorers.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .data_store import FollowUpRule, IntentStore
from .matcher import MatchResult
from .models import Exchange, Sender
from .nlp_utils import Normalizer


def last_bot_message(history: Sequence[Exchange]) -> Optional[str]:
    for exchange in reversed(history):
        if exchange.sender == Sender.BOT:
            return exchange.message
    return None


@dataclass(frozen=True)
class _CompiledRule:
    rule: FollowUpRule
    stemmed_triggers: frozenset
    result: MatchResult


class FollowUpResolver:

    def __init__(self, store: IntentStore, normalizer: Normalizer):
        self.rules: Tuple[_CompiledRule, ...] = tuple(
            self._compile(rule, store, normalizer) for rule in store.follow_ups
        )

    @staticmethod
    def _compile(rule: FollowUpRule, store: IntentStore, normalizer: Normalizer) -> _CompiledRule:
        triggers = frozenset(
            token
            for trigger in rule.triggers
            for token in normalizer.normalize(trigger, spell_check=False).split()
        )
        if rule.intent is not None:
            intent = store.get(rule.intent)
            result = MatchResult(
                intent=intent.name,
                response=rule.response or intent.response,
                sentiment=intent.sentiment,
                links=rule.links or intent.links,
                score=1.0,
            )
        else:
            result = MatchResult(
                intent=f"follow_up:{rule.topic}",
                response=rule.response,
                sentiment="neutral",
                links=rule.links,
                score=1.0,
            )
        return _CompiledRule(rule=rule, stemmed_triggers=triggers, result=result)

    def resolve(self, normalized_message: str, history: Sequence[Exchange],
                uncorrected: str = "") -> Optional[MatchResult]:
        """Match triggers against the normalized message.

        ``uncorrected`` is the same message normalized without spelling
        correction; its tokens count too, so a trigger the corrector rewrote
        still fires.
        """
        if not history or not (normalized_message or uncorrected):
            return None
        last_bot = last_bot_message(history)
        if not last_bot:
            return None

        last_bot = last_bot.lower()
        tokens = set(normalized_message.split()) | set(uncorrected.split())
        for compiled in self.rules:
            if compiled.rule.topic in last_bot and tokens & compiled.stemmed_triggers:
                return compiled.result
        return None
