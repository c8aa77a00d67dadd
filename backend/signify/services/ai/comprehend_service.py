"""
Comprehend Service (simulated)

Sentiment, entity and key-phrase detection over case notes. Simulated with
keyword heuristics; there is no live AWS connection in this build.
"""
import logging
import os
import random
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

NEGATIVE_TERMS = ("homeless", "evict", "crisis", "abuse", "risk", "danger")
POSITIVE_TERMS = ("help", "support", "improve", "success", "progress")

SENTIMENT_SCORES = {
    "NEGATIVE": {"positive": 0.1, "negative": 0.7, "neutral": 0.15, "mixed": 0.05},
    "POSITIVE": {"positive": 0.65, "negative": 0.1, "neutral": 0.2, "mixed": 0.05},
    "NEUTRAL": {"positive": 0.25, "negative": 0.25, "neutral": 0.4, "mixed": 0.1},
}

ORGANIZATION_HINTS = ("council", "nhs", "school")
LOCATION_HINTS = ("london", "street", "road")
MAX_ENTITIES = 10

KEY_PHRASES = (
    "housing support", "mental health", "family breakdown", "social services",
    "care placement", "youth worker", "housing officer", "risk assessment",
    "early intervention", "support network",
)
FALLBACK_KEY_PHRASES = [("case information", 0.88), ("support services", 0.85)]

_WORD_SPLIT = re.compile(r"[\s.,!?]+")


@dataclass
class EntityResult:
    text: str
    type: str
    score: float


@dataclass
class KeyPhraseResult:
    text: str
    score: float


@dataclass
class AnalysisResult:
    sentiment: str
    scores: Dict[str, float]
    entities: List[EntityResult] = field(default_factory=list)
    key_phrases: List[KeyPhraseResult] = field(default_factory=list)
    is_simulated: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sentiment": {"sentiment": self.sentiment, "scores": dict(self.scores)},
            "entities": [vars(e) for e in self.entities],
            "key_phrases": [vars(k) for k in self.key_phrases],
            "is_simulated": self.is_simulated,
        }


class ComprehendService:
    """Simulated AWS Comprehend text analysis."""

    def __init__(self, region: str = None, rng: Optional[random.Random] = None):
        self.region = region or os.getenv("AWS_REGION", "eu-west-2")
        self.rng = rng or random.Random()
        logger.info("Using simulated AWS Comprehend service (demo mode, region %s)", self.region)

    @property
    def is_connected(self) -> bool:
        return False

    def analyze(self, text: str, language_code: str = "en") -> AnalysisResult:
        lowered = text.lower()
        sentiment = self._detect_sentiment(lowered)
        return AnalysisResult(
            sentiment=sentiment,
            scores=dict(SENTIMENT_SCORES[sentiment]),
            entities=self._detect_entities(text),
            key_phrases=self._detect_key_phrases(lowered),
        )

    def status(self) -> Dict[str, object]:
        return {
            "connected": self.is_connected,
            "mode": "Simulated",
            "message": "Running in simulation mode - responses are pre-configured for demo purposes",
        }

    # =========================================================================
    # HEURISTICS
    # =========================================================================

    @staticmethod
    def _detect_sentiment(lowered: str) -> str:
        if any(term in lowered for term in NEGATIVE_TERMS):
            return "NEGATIVE"
        if any(term in lowered for term in POSITIVE_TERMS):
            return "POSITIVE"
        return "NEUTRAL"

    def _detect_entities(self, text: str) -> List[EntityResult]:
        """Capitalised words longer than two characters, first ten unique."""
        entities: List[EntityResult] = []
        seen = set()
        for word in _WORD_SPLIT.split(text):
            if len(word) <= 2 or not word[0].isupper():
                continue
            key = word.lower()
            if key in seen:
                continue
            seen.add(key)
            entities.append(EntityResult(
                text=word,
                type=self._entity_type(key),
                score=round(0.85 + self.rng.random() * 0.1, 4),
            ))
        return entities[:MAX_ENTITIES]

    @staticmethod
    def _entity_type(lowered_word: str) -> str:
        if any(hint in lowered_word for hint in ORGANIZATION_HINTS):
            return "ORGANIZATION"
        if any(hint in lowered_word for hint in LOCATION_HINTS):
            return "LOCATION"
        return "PERSON"

    def _detect_key_phrases(self, lowered: str) -> List[KeyPhraseResult]:
        found = [
            KeyPhraseResult(text=phrase, score=round(0.9 + self.rng.random() * 0.08, 4))
            for phrase in KEY_PHRASES
            if phrase in lowered
        ]
        if not found:
            found = [KeyPhraseResult(text=t, score=s) for t, s in FALLBACK_KEY_PHRASES]
        return found
