from typing import Tuple

from health_voice.utils.models import Intent

# Checked in order; the first intent with a matching phrase wins
INTENT_PHRASES: Tuple[Tuple[Intent, Tuple[str, ...]], ...] = (
    (Intent.HEART_RATE, ("heart rate", "pulse", "measure heart")),
    (Intent.OXYGEN, ("blood oxygen", "oxygen", "spo2")),
    (Intent.TRENDS, ("trends", "history", "previous")),
)


def classify(text: str) -> Intent:
    query = text.lower()
    for intent, phrases in INTENT_PHRASES:
        if any(phrase in query for phrase in phrases):
            return intent
    return Intent.UNKNOWN
