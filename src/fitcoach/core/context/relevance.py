import math
import re

from .models import Intent
from .similarity import jaccard_similarity
from .stopwords import remove_stopwords

# Unicode-aware: accented letters such as the "é" in "café" are kept.
_PUNCTUATION_RE = re.compile(r"[^\w\s]")

INTENT_BOOST = 1.5
SIGMOID_STEEPNESS = 10.0
SIGMOID_MIDPOINT = 0.5


def _prepare(text: str) -> str:
    cleaned = _PUNCTUATION_RE.sub("", text.lower())
    return " ".join(remove_stopwords(cleaned.split()))


def sigmoid(value: float) -> float:
    return 1.0 / (1.0 + math.exp(-SIGMOID_STEEPNESS * (value - SIGMOID_MIDPOINT)))


def calculate_relevance_score(
    message_a: str, message_b: str, intent: Intent | None = None
) -> float:
    """Score how related two messages are, squashed into ``(0, 1)``.

    Word overlap (after punctuation and stopword removal) is boosted
    when *intent* says the user refers back to earlier output, then
    passed through a sigmoid centred at 0.5 to separate related from
    unrelated pairs.
    """
    score = jaccard_similarity(_prepare(message_a), _prepare(message_b))
    if intent is not None and intent.references_previous:
        score *= INTENT_BOOST
    return sigmoid(score)
