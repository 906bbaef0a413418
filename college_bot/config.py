# college_bot/config.py
import os
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Settings(BaseSettings):
    # data
    INTENTS_PATH: str = Field(default=os.path.join(BASE_DIR, "intents.json"))
    NLTK_DATA_DIR: str = Field(default=os.path.join(BASE_DIR, ".nltk_data"))

    # matching
    PRIMARY_STRATEGY: Literal["keyword", "tfidf", "ngram"] = "keyword"
    FALLBACK_STRATEGY: Optional[Literal["keyword", "tfidf", "ngram"]] = "tfidf"
    KEYWORD_THRESHOLD: float = Field(default=0.4, ge=0.0, le=1.0)
    TFIDF_THRESHOLD: float = Field(default=0.3, ge=0.0, le=1.0)
    NGRAM_THRESHOLD: float = Field(default=0.2, ge=0.0, le=1.0)
    SPELL_CORRECTION: bool = True

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(
        env_prefix="COLLEGE_BOT_",
        env_file=".env",
        extra="ignore",
    )

    def threshold_for(self, strategy: str) -> float:
        if strategy == "tfidf":
            return self.TFIDF_THRESHOLD
        if strategy == "ngram":
            return self.NGRAM_THRESHOLD
        return self.KEYWORD_THRESHOLD


settings = Settings()

# --------------------------
# --- Normalizer ----------
# --------------------------
# Question words carry intent signal ("placements" vs "how are placements")
PRESERVED_WORDS = frozenset({
    "how", "what", "when", "where", "why", "who", "which",
    "can", "do", "does", "is", "are", "will", "should",
})

# Tokens of this length or shorter are never spell-corrected
MIN_CORRECTABLE_LENGTH = 3

# Porter is re-applied until stable, within this many passes
MAX_STEM_PASSES = 4


def max_correction_distance(token: str) -> int:
    return max(2, len(token) // 3)


# --------------------------
# --- Keyword scoring -----
# --------------------------
EXACT_MATCH_SCORE = 1.0
PARTIAL_WORD_SCORE = 0.5
PARTIAL_SCORE_CAP = 0.9
MIN_PARTIAL_WORD_LENGTH = 3

# --------------------------
# --- N-gram overlap ------
# --------------------------
# token, stem and bigram Jaccard weights
NGRAM_WEIGHTS = (0.4, 0.3, 0.3)
# longest keyword phrase merged into a single token
MAX_PHRASE_LENGTH = 4

# --------------------------
# --- Small talk ----------
# --------------------------
# intent tag -> phrases, checked in this order before any scoring
SMALL_TALK_PHRASES = {
    "greetings": ("hello", "hi", "hey", "greetings", "good morning", "good afternoon", "good evening"),
    "how_are_you": ("how are you", "how r you", "how do you do"),
    "bot_name": ("your name", "who are you", "what are you called"),
    "thanks": ("thanks", "thank you", "thx"),
}

# --------------------------
# --- Canned replies ------
# --------------------------
CLARIFICATION_RESPONSE = "I didn't receive a message. How can I help you?"
FALLBACK_RESPONSE = (
    "I'm not sure I understand your question. Could you rephrase it? "
    "You can ask me about: {topics}."
)
