import os
from functools import lru_cache

import nltk
from nltk.corpus import stopwords
from nltk.metrics.distance import edit_distance
from nltk.stem import PorterStemmer
from nltk.tokenize import RegexpTokenizer
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from .config import MAX_STEM_PASSES, MIN_CORRECTABLE_LENGTH, PRESERVED_WORDS, max_correction_distance, settings
from .logging import get_logger

logger = get_logger(__name__)

regexp_word_tokenizer = RegexpTokenizer(r'\w+')
stemmer = PorterStemmer()

# --------------------------
# --- NLTK Initialization ---
# --------------------------
@lru_cache(maxsize=None)
def initialize_nltk_data(data_dir: str = None) -> frozenset:
    """Make sure the nltk stopword corpus is available and return the English list."""
    if data_dir:
        if data_dir not in nltk.data.path:
            nltk.data.path.insert(0, data_dir)
        try:
            os.makedirs(data_dir, exist_ok=True)
        except OSError as e:
            logger.warning("nltk_data_dir_unwritable", data_dir=data_dir, error=str(e))
            data_dir = None

    try:
        nltk.data.find('corpora/stopwords')
    except LookupError:
        nltk.download('stopwords', download_dir=data_dir, quiet=True)

    try:
        return frozenset(stopwords.words('english'))
    except LookupError:
        # offline and no local corpus
        logger.warning("nltk_stopwords_unavailable", fallback="sklearn", data_dir=data_dir)
        return frozenset(ENGLISH_STOP_WORDS)


def tokenize(text: str) -> list:
    if not text:
        return []
    return regexp_word_tokenizer.tokenize(text.lower())


def stem(token: str) -> str:
    """Porter stem, repeated until it stops changing.

    A single Porter pass is not a fixed point ("agreed" -> "agre" -> "agr"),
    so stemming an already-stemmed word could shorten it again.
    """
    for _ in range(MAX_STEM_PASSES):
        stemmed = stemmer.stem(token)
        if stemmed == token:
            break
        token = stemmed
    return token


# --------------------------
# --- Lexicon -------------
# --------------------------
class Lexicon:
    """Known-correct words taken from the intent keywords.

    Words are kept sorted so that nearest-neighbour ties always resolve to the
    alphabetically first candidate.
    """

    def __init__(self, words=()):
        self._words = tuple(sorted({w for w in words if w}))
        self._lookup = frozenset(self._words)
        self._stems = frozenset(stem(w) for w in self._words)

    @classmethod
    def from_phrases(cls, phrases):
        return cls(token for phrase in phrases for token in tokenize(phrase))

    def __contains__(self, word) -> bool:
        return word in self._lookup

    def knows(self, token: str) -> bool:
        """True for lexicon words and for their stems."""
        return token in self._lookup or token in self._stems

    def __iter__(self):
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def closest(self, token: str):
        """Return ``(word, distance)`` for the nearest lexicon word, or ``(None, None)``."""
        best_word, best_distance = None, None
        for word in self._words:
            # edit distance is at least the length difference
            if best_distance is not None and abs(len(word) - len(token)) >= best_distance:
                continue
            distance = edit_distance(token, word)
            if best_distance is None or distance < best_distance:
                best_word, best_distance = word, distance
        return best_word, best_distance


# --------------------------
# --- Preprocessing -------
# --------------------------
class Normalizer:
    """Tokenize, spell-correct, drop stopwords (keeping question words) and stem."""

    def __init__(self, lexicon: Lexicon = None, stop_words=None, preserved_words=PRESERVED_WORDS):
        self.lexicon = lexicon if lexicon is not None else Lexicon()
        if stop_words is None:
            stop_words = initialize_nltk_data(settings.NLTK_DATA_DIR)
        self.stop_words = frozenset(stop_words)
        self.preserved_words = frozenset(preserved_words)
        self.removable = self.stop_words - self.preserved_words

    def correct_token(self, token: str) -> str:
        # stems count as known so that normalized text survives a second pass
        if len(token) <= MIN_CORRECTABLE_LENGTH or self.lexicon.knows(token):
            return token
        # narrower than "every unknown token": stopwords are never rewritten into keywords
        if token in self.stop_words or not self.lexicon:
            return token
        candidate, distance = self.lexicon.closest(token)
        if candidate is not None and distance <= max_correction_distance(token):
            return candidate
        return token

    def correct(self, text: str) -> str:
        return " ".join(self.correct_token(t) for t in tokenize(text))

    def stem(self, token: str) -> str:
        return stem(token)

    def normalize(self, text: str, spell_check: bool = True) -> str:
        tokens = tokenize(text)
        if spell_check and self.lexicon:
            tokens = [self.correct_token(t) for t in tokens]
        return " ".join(self.stem(t) for t in tokens if t not in self.removable)
