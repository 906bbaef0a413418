import json
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import settings
from .logging import get_logger

logger = get_logger(__name__)


class IntentStoreError(RuntimeError):
    """The intents file is missing or malformed; the bot must not start."""


@dataclass(frozen=True)
class Link:
    url: str
    text: str

    def to_dict(self) -> dict:
        return {"url": self.url, "text": self.text}


@dataclass(frozen=True)
class Intent:
    name: str
    keywords: Tuple[str, ...]
    response: str
    sentiment: str = "neutral"
    links: Tuple[Link, ...] = ()


@dataclass(frozen=True)
class FollowUpRule:
    """(topic in last bot message, trigger in current message) -> canned reply."""
    topic: str
    triggers: Tuple[str, ...]
    intent: Optional[str] = None
    response: Optional[str] = None
    links: Tuple[Link, ...] = ()


@dataclass(frozen=True)
class IntentStore:
    intents: Tuple[Intent, ...]
    follow_ups: Tuple[FollowUpRule, ...] = ()

    def __iter__(self):
        return iter(self.intents)

    def __len__(self) -> int:
        return len(self.intents)

    @property
    def names(self) -> list:
        return [intent.name for intent in self.intents]

    def get(self, name: str) -> Optional[Intent]:
        return next((i for i in self.intents if i.name == name), None)

    def all_keywords(self) -> list:
        return [kw for intent in self.intents for kw in intent.keywords]

    def all_triggers(self) -> list:
        return [trigger for rule in self.follow_ups for trigger in rule.triggers]


# --------------------------
# --- Parsing -------------
# --------------------------
def _parse_links(raw, where: str) -> Tuple[Link, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise IntentStoreError(f"{where}: 'links' must be a list")
    links = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("url"):
            raise IntentStoreError(f"{where}: every link needs a 'url'")
        links.append(Link(url=item["url"], text=item.get("text") or item["url"]))
    return tuple(links)


def _parse_intent(raw, position: int) -> Intent:
    if not isinstance(raw, dict):
        raise IntentStoreError(f"intent #{position} is not an object")
    tag = raw.get("tag")
    if not tag or not isinstance(tag, str):
        raise IntentStoreError(f"intent #{position} has no 'tag'")
    response = raw.get("response")
    if not isinstance(response, str) or not response.strip():
        raise IntentStoreError(f"intent '{tag}' has an empty 'response'")
    keywords = raw.get("keywords")
    if not isinstance(keywords, list) or not any(isinstance(k, str) and k.strip() for k in keywords):
        raise IntentStoreError(f"intent '{tag}' has no keywords")
    return Intent(
        name=tag,
        keywords=tuple(k.strip() for k in keywords if isinstance(k, str) and k.strip()),
        response=response.strip(),
        sentiment=raw.get("sentiment") or "neutral",
        links=_parse_links(raw.get("links"), f"intent '{tag}'"),
    )


def _parse_follow_up(raw, position: int, known: set) -> FollowUpRule:
    where = f"follow-up #{position}"
    if not isinstance(raw, dict):
        raise IntentStoreError(f"{where} is not an object")
    topic = raw.get("topic")
    triggers = raw.get("triggers")
    if not topic or not isinstance(triggers, list) or not triggers:
        raise IntentStoreError(f"{where} needs a 'topic' and a non-empty 'triggers' list")
    intent = raw.get("intent")
    response = raw.get("response")
    if intent is None and not response:
        raise IntentStoreError(f"{where} needs either an 'intent' or a 'response'")
    if intent is not None and intent not in known:
        raise IntentStoreError(f"{where} references unknown intent '{intent}'")
    return FollowUpRule(
        topic=topic.lower(),
        triggers=tuple(t.lower() for t in triggers),
        intent=intent,
        response=response,
        links=_parse_links(raw.get("links"), where),
    )


def parse_intents(data) -> IntentStore:
    if not isinstance(data, dict) or not isinstance(data.get("intents"), list) or not data["intents"]:
        raise IntentStoreError("intents data must be an object with a non-empty 'intents' list")

    intents = [_parse_intent(raw, i) for i, raw in enumerate(data["intents"])]
    seen = set()
    for intent in intents:
        if intent.name in seen:
            raise IntentStoreError(f"duplicate intent tag '{intent.name}'")
        seen.add(intent.name)

    follow_ups = [_parse_follow_up(raw, i, seen) for i, raw in enumerate(data.get("follow_ups") or [])]
    return IntentStore(intents=tuple(intents), follow_ups=tuple(follow_ups))


# --------------------------
# --- Load intents.json ----
# --------------------------
def load_data(filepath: str = None) -> IntentStore:
    filepath = filepath or settings.INTENTS_PATH
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise IntentStoreError(f"cannot read intents file {filepath}: {e}") from e
    except json.JSONDecodeError as e:
        raise IntentStoreError(f"intents file {filepath} is not valid JSON: {e}") from e

    try:
        store = parse_intents(data)
    except IntentStoreError as e:
        raise IntentStoreError(f"intents file {filepath}: {e}") from e
    logger.info("intents_loaded", path=filepath, intents=len(store), follow_ups=len(store.follow_ups))
    return store
