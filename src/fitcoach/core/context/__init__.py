"""Conversation context selection for the coach chat."""

from .context_filter import (  # noqa: F401
    filter_relevant_context,
    find_conversation_breaks,
    rank_messages,
)
from .intent import analyze_intent  # noqa: F401
from .models import (  # noqa: F401
    NEUTRAL_INTENT,
    SENDER_AI,
    SENDER_USER,
    ContextMessage,
    Intent,
    RequestType,
    ScoredMessage,
)
from .relevance import calculate_relevance_score  # noqa: F401
from .similarity import jaccard_similarity  # noqa: F401
from .stopwords import remove_stopwords  # noqa: F401
