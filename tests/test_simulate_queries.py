import json
import logging

import requests

from tools.simulate_queries import load_conversation, replay


class _FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.text = json.dumps(body)

    def json(self):
        return self._body


class _FakeSession:
    """Answers like the relay: English passes through, other languages get tagged."""

    def __init__(self, fail_on=None):
        self.bodies = []
        self.fail_on = fail_on

    def post(self, url, json=None, timeout=None):
        self.bodies.append(json)
        if json["query"] == self.fail_on:
            raise requests.exceptions.ConnectionError("connection refused")
        if not json["query"]:
            return _FakeResponse(400, {"error": "Query is required"})
        language = json["userLanguage"]
        english = "Your heart rate is 72 beats per minute. This appears to be within normal range."
        return _FakeResponse(200, {
            "originalQuery": json["query"],
            "englishQuery": json["query"] if language == "en" else f"[en] {json['query']}",
            "englishResponse": english,
            "translatedResponse": english if language == "en" else f"[{language}] {english}",
            "language": language,
        })


def test_load_conversation_applies_overrides(tmp_path):
    path = tmp_path / "queries.json"
    path.write_text(json.dumps([{"query": "pulse", "userLanguage": "en"}, {"query": "oxygen"}]))

    bodies = load_conversation(str(path), language="zu", user_id="user-9")

    assert [body["userLanguage"] for body in bodies] == ["zu", "zu"]
    assert [body["userId"] for body in bodies] == ["user-9", "user-9"]


def test_replay_shows_heard_and_spoken_text(caplog):
    session = _FakeSession()

    with caplog.at_level(logging.INFO):
        totals = replay(session, "http://relay.test/process-health-query", [{"query": "pulse", "userLanguage": "zu"}])

    assert totals == {"answered": 1, "failed": 0}
    messages = [record.getMessage() for record in caplog.records]
    assert any("heard:   [en] pulse" in message for message in messages)
    assert any(message.strip().startswith("spoken:  [zu] Your heart rate is 72") for message in messages)


def test_replay_counts_rejected_and_unreachable_queries():
    session = _FakeSession(fail_on="oxygen")
    bodies = [
        {"query": "pulse", "userLanguage": "en"},
        {"query": "", "userLanguage": "en"},
        {"query": "oxygen", "userLanguage": "en"},
    ]

    totals = replay(session, "http://relay.test/process-health-query", bodies)

    assert totals == {"answered": 1, "failed": 2}
    assert len(session.bodies) == 3
