from dataclasses import dataclass
from typing import List, Optional, Tuple

from nltk.util import ngrams
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from .config import (
    EXACT_MATCH_SCORE,
    MAX_PHRASE_LENGTH,
    MIN_PARTIAL_WORD_LENGTH,
    NGRAM_WEIGHTS,
    PARTIAL_SCORE_CAP,
    PARTIAL_WORD_SCORE,
)
from .data_store import Intent, IntentStore, Link
from .nlp_utils import Normalizer, tokenize


@dataclass(frozen=True)
class Query:
    """One user message in the forms the scorers need."""
    text: str
    corrected: str
    normalized: str
    # normalized without spelling correction
    uncorrected: str = ""


@dataclass(frozen=True)
class MatchResult:
    intent: str
    response: str
    sentiment: str
    links: Tuple[Link, ...]
    score: float

    @classmethod
    def from_intent(cls, intent: Intent, score: float) -> "MatchResult":
        return cls(intent.name, intent.response, intent.sentiment, intent.links, score)


ScoredIntent = Tuple[Intent, float]


def rank(intents, scores) -> List[ScoredIntent]:
    """Sort by score, highest first; equal scores keep declaration order."""
    paired = list(zip(intents, scores))
    order = sorted(range(len(paired)), key=lambda i: (-paired[i][1], i))
    return [paired[i] for i in order]


def select_best(ranked: List[ScoredIntent], threshold: float) -> Optional[MatchResult]:
    if not ranked:
        return None
    intent, score = ranked[0]
    if score > threshold:
        return MatchResult.from_intent(intent, score)
    return None


# --------------------------
# --- Keyword overlap -----
# --------------------------
def keyword_similarity(message: str, keywords) -> float:
    message_lower = message.lower()

    for keyword in keywords:
        if keyword and keyword in message_lower:
            return EXACT_MATCH_SCORE

    match_score = 0.0
    for keyword in keywords:
        for word in keyword.split(' '):
            if len(word) > MIN_PARTIAL_WORD_LENGTH and word in message_lower:
                match_score += PARTIAL_WORD_SCORE

    return min(match_score, PARTIAL_SCORE_CAP)


class KeywordScorer:
    name = "keyword"

    def __init__(self, store: IntentStore):
        self.store = store
        # keywords go through the same tokenizer as the corrected message
        self._keywords = [
            [" ".join(tokenize(kw)) for kw in intent.keywords]
            for intent in store
        ]

    def score(self, query: Query) -> List[ScoredIntent]:
        message = query.corrected or query.text
        scores = [keyword_similarity(message, kws) for kws in self._keywords]
        return rank(self.store.intents, scores)


# --------------------------
# --- Corpus TF-IDF -------
# --------------------------
class TfidfScorer:
    """Cosine similarity between the query and one keyword document per intent."""
    name = "tfidf"

    def __init__(self, store: IntentStore, normalizer: Normalizer):
        self.store = store
        self.documents = [
            normalizer.normalize(" ".join(intent.keywords), spell_check=False)
            for intent in store
        ]
        self.vectorizer = TfidfVectorizer(tokenizer=str.split, token_pattern=None, lowercase=False)
        self.matrix = self.vectorizer.fit_transform(self.documents)

    @property
    def vocabulary(self) -> set:
        return set(self.vectorizer.vocabulary_)

    def score(self, query: Query) -> List[ScoredIntent]:
        if not query.normalized.strip():
            return rank(self.store.intents, [0.0] * len(self.store))
        vector = self.vectorizer.transform([query.normalized])
        similarities = cosine_similarity(vector, self.matrix)[0]
        scores = [min(max(float(s), 0.0), 1.0) for s in similarities]
        return rank(self.store.intents, scores)


# --------------------------
# --- N-gram overlap ------
# --------------------------
def merge_phrases(tokens, phrases, max_length: int = MAX_PHRASE_LENGTH) -> list:
    """Join runs of tokens that spell a known multi-word phrase, longest first."""
    merged = []
    i = 0
    while i < len(tokens):
        for size in range(min(max_length, len(tokens) - i), 1, -1):
            candidate = " ".join(tokens[i:i + size])
            if candidate in phrases:
                merged.append(candidate)
                i += size
                break
        else:
            merged.append(tokens[i])
            i += 1
    return merged


def jaccard(a, b) -> float:
    a, b = set(a), set(b)
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


@dataclass(frozen=True)
class Analysis:
    tokens: Tuple[str, ...]
    stems: Tuple[str, ...]
    bigrams: Tuple[Tuple[str, str], ...]


class NGramScorer:
    """Weighted Jaccard overlap of tokens, stems and bigrams against each keyword.

    Multi-word keywords ("fee structure") are merged into single tokens on both
    sides, so a phrase counts as one unit instead of two loose words. An intent
    scores as well as its best keyword.
    """
    name = "ngram"

    def __init__(self, store: IntentStore, normalizer: Normalizer, weights=NGRAM_WEIGHTS):
        self.store = store
        self.normalizer = normalizer
        self.weights = weights
        self.phrases = frozenset(
            " ".join(tokens) for tokens in (tokenize(kw) for kw in store.all_keywords()) if len(tokens) > 1
        )
        self._keywords = [[self.analyze(kw) for kw in intent.keywords] for intent in store]

    def analyze(self, text: str) -> Analysis:
        tokens = [
            t for t in merge_phrases(tokenize(text), self.phrases)
            if t not in self.normalizer.removable
        ]
        stems = [" ".join(self.normalizer.stem(w) for w in t.split()) for t in tokens]
        return Analysis(tuple(tokens), tuple(stems), tuple(ngrams(tokens, 2)))

    def similarity(self, query: Analysis, keyword: Analysis) -> float:
        token_weight, stem_weight, bigram_weight = self.weights
        return (
            token_weight * jaccard(query.tokens, keyword.tokens)
            + stem_weight * jaccard(query.stems, keyword.stems)
            + bigram_weight * jaccard(query.bigrams, keyword.bigrams)
        )

    def score(self, query: Query) -> List[ScoredIntent]:
        analysis = self.analyze(query.corrected or query.text)
        if not analysis.tokens:
            return rank(self.store.intents, [0.0] * len(self.store))
        scores = [
            max(self.similarity(analysis, keyword) for keyword in keywords)
            for keywords in self._keywords
        ]
        return rank(self.store.intents, scores)
