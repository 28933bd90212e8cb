import argparse
import json
from typing import Dict, List, Optional

import requests

from health_voice.logger import get_logger

logger = get_logger(__name__)

DEFAULT_URL = "http://127.0.0.1:8000/process-health-query"


def load_conversation(file_path: str, language: Optional[str] = None, user_id: Optional[str] = None) -> List[Dict]:
    """
    Loads request bodies from a JSON array. `language` and `user_id` override
    whatever each body carries, so one file can be replayed in any language.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        bodies = json.load(f)
    if not isinstance(bodies, list):
        raise ValueError(f"'{file_path}' must hold a JSON array of request bodies")

    for body in bodies:
        if language:
            body["userLanguage"] = language
        if user_id:
            body["userId"] = user_id
    return bodies


def ask(session: requests.Session, url: str, body: Dict) -> Dict:
    """Posts one query and returns the relay's answer, or an error entry."""
    try:
        response = session.post(url, json=body, timeout=30)
    except requests.exceptions.RequestException as e:
        return {"originalQuery": body.get("query"), "error": str(e)}

    if response.status_code != 200:
        try:
            detail = response.json().get("error", response.text)
        except ValueError:
            detail = response.text
        return {"originalQuery": body.get("query"), "error": f"HTTP {response.status_code}: {detail}"}
    return response.json()


def show_turn(turn: int, answer: Dict):
    logger.info(f"[{turn}] {answer.get('language', '??')} | {answer.get('originalQuery')!r}")
    if "error" in answer:
        logger.error(f"    !! {answer['error']}")
        return
    logger.info(f"    heard:   {answer['englishQuery']}")
    logger.info(f"    answer:  {answer['englishResponse']}")
    if answer["translatedResponse"] != answer["englishResponse"]:
        logger.info(f"    spoken:  {answer['translatedResponse']}")


def replay(session: requests.Session, url: str, bodies: List[Dict]) -> Dict[str, int]:
    """
    Sends each body in order and shows what the relay heard, what it answered
    in English and what the user would hear back. Returns answered/failed counts.
    """
    summary = {"answered": 0, "failed": 0}
    for turn, body in enumerate(bodies, start=1):
        answer = ask(session, url, body)
        show_turn(turn, answer)
        summary["failed" if "error" in answer else "answered"] += 1
    return summary


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Replay a conversation of health queries against a running relay.")
    parser.add_argument("--url", default=DEFAULT_URL, help="Query endpoint of the relay.")
    parser.add_argument("--file", default="tools/sample_queries.json", help="JSON array of request bodies.")
    parser.add_argument("--language", help="Ask every query in this language code (e.g. zu, en).")
    parser.add_argument("--user", help="Ask every query as this user id.")
    args = parser.parse_args()

    try:
        conversation = load_conversation(args.file, args.language, args.user)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load '{args.file}': {e}")
        raise SystemExit(1)

    logger.info(f"Replaying {len(conversation)} queries against {args.url}")
    with requests.Session() as session:
        totals = replay(session, args.url, conversation)
    logger.info(f"Answered {totals['answered']}, failed {totals['failed']}")
    if totals["failed"]:
        raise SystemExit(1)
