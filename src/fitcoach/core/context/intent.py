"""Follow-up detection for short chat messages.

"give me another one" shares no vocabulary with the workout it refers
to, so lexical relevance alone would drop the previous turn.  The
analyzer flags such messages so the relevance scorer can boost them.

Phrase matching is substring containment of every word of a phrase,
not whole-word matching: "moreover" matches "more".
"""

import logging

from .models import NEUTRAL_INTENT, Intent, RequestType

logger = logging.getLogger(__name__)

SHORT_MESSAGE_MAX_WORDS = 4

REFERENCE_PHRASES = (
    "another",
    "one more",
    "different",
    "similar",
    "like that",
    "same",
    "again",
    "more",
    "another one",
)

ANOTHER_PHRASES = (
    "another",
    "one more",
    "another one",
    "different one",
    "new one",
)


def _contains_phrase(message: str, phrases: tuple[str, ...]) -> bool:
    return any(
        all(word in message for word in phrase.split(" ")) for phrase in phrases
    )


def analyze_intent(
    current_message: str,
    last_user_message: str | None = None,
    last_ai_response: str | None = None,
) -> Intent:
    """Classify whether *current_message* asks for a variation of the last reply.

    The previous user and AI messages are accepted for future heuristics
    but do not influence the result today.  Never raises: any failure
    yields a neutral intent so chat is not blocked.
    """
    try:
        message = current_message.lower()
        is_short = len(message.split()) <= SHORT_MESSAGE_MAX_WORDS
        has_reference_phrase = _contains_phrase(message, REFERENCE_PHRASES)
        requests_another = _contains_phrase(message, ANOTHER_PHRASES)
        is_requesting_variation = is_short and (
            has_reference_phrase or requests_another
        )

        intent = Intent(
            references_previous=has_reference_phrase or is_requesting_variation,
            request_type=(
                RequestType.ANOTHER
                if requests_another or is_requesting_variation
                else None
            ),
        )
        logger.debug(
            "Analyzed message intent: %s (short=%s, reference=%s, another=%s)",
            intent,
            is_short,
            has_reference_phrase,
            requests_another,
        )
        return intent
    except Exception:
        logger.warning("Failed to analyze message intent", exc_info=True)
        return NEUTRAL_INTENT
