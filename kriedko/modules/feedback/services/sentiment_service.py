# kriedko/modules/feedback/services/sentiment_service.py

import re
import logging
from typing import FrozenSet, List, Optional

from kriedko.modules.feedback.models.feedback_models import SentimentLabel
from kriedko.modules.feedback.schemas.feedback_schemas import SentimentResult

logger = logging.getLogger(__name__)


POSITIVE_WORDS: FrozenSet[str] = frozenset({
    "good", "great", "amazing", "awesome", "fantastic", "delicious", "tasty",
    "yummy", "love", "loved", "fresh", "friendly", "fast", "perfect", "best",
    "wow", "nice", "excellent", "incredible", "divine", "heavenly", "juicy",
    "crispy", "tender", "savory", "sweet", "spicy", "rich", "flavourful",
    "flavorful", "balanced", "satisfying", "quick", "warm", "cozy", "clean",
    "recommend", "recommended",
})

NEGATIVE_WORDS: FrozenSet[str] = frozenset({
    "bad", "terrible", "awful", "disappointing", "slow", "cold", "stale",
    "bland", "salty", "soggy", "greasy", "burnt", "overcooked", "undercooked",
    "rude", "expensive", "dirty", "worst", "meh", "okay", "ok", "average",
    "late", "wait", "delay", "noise", "noisy", "crowded", "hard", "raw", "dry",
    "tough", "chewy", "boring", "weak", "watery", "too", "less", "under",
    "over", "issue", "problem", "complaint",
})

POSITIVE_THRESHOLD = 0.15
NEGATIVE_THRESHOLD = -0.15
NORMALIZATION_DIVISOR = 10

_NON_LETTER = re.compile(r"[^a-z\s]")


def tokenize(text: Optional[str]) -> List[str]:
    """Lowercase, blank out everything but a-z and whitespace, split."""
    if not text:
        return []
    return _NON_LETTER.sub(" ", str(text).lower()).split()


def label_for(score: float) -> SentimentLabel:
    """Threshold rule mapping a normalized score to its label."""
    if score > POSITIVE_THRESHOLD:
        return SentimentLabel.POSITIVE
    if score < NEGATIVE_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def score(*texts: Optional[str]) -> SentimentResult:
    """
    Score free text against the fixed restaurant lexicon.

    Every positive token adds one and every negative token subtracts one;
    the tally is divided by ten and clamped into [-1, 1]. Deterministic and
    free of I/O, so it is safe to call inline on the request path.
    """
    tally = 0
    for text in texts:
        for token in tokenize(text):
            if token in POSITIVE_WORDS:
                tally += 1
            elif token in NEGATIVE_WORDS:
                tally -= 1

    normalized = max(-1.0, min(1.0, tally / NORMALIZATION_DIVISOR))
    return SentimentResult(score=normalized, label=label_for(normalized))
