import pytest

from health_voice.utils.intent import classify
from health_voice.utils.models import Intent


@pytest.mark.parametrize(
    "text, expected",
    [
        ("What is my heart rate?", Intent.HEART_RATE),
        ("Check my PULSE please", Intent.HEART_RATE),
        ("measure heart now", Intent.HEART_RATE),
        ("What is my blood oxygen?", Intent.OXYGEN),
        ("oxygen", Intent.OXYGEN),
        ("SpO2 reading", Intent.OXYGEN),
        ("show me my trends", Intent.TRENDS),
        ("my measurement history", Intent.TRENDS),
        ("previous results", Intent.TRENDS),
        ("hello", Intent.UNKNOWN),
        ("", Intent.UNKNOWN),
    ],
)
def test_classify(text, expected):
    assert classify(text) == expected


def test_heart_rate_wins_over_later_intents():
    """Tie-break order is heart rate, then oxygen, then trends."""
    assert classify("pulse and oxygen history") == Intent.HEART_RATE
    assert classify("oxygen history") == Intent.OXYGEN


def test_classify_is_pure():
    text = "Show my heart rate history"
    assert {classify(text) for _ in range(20)} == {Intent.HEART_RATE}
