import json
import random
from typing import Any, Callable, Dict, List, Tuple
import httpx
import pytest
from fastapi.testclient import TestClient

# Import your FastAPI app
from main import app
from health_voice.adapters.base_adapter import Failed, MeasurementProvider
from health_voice.adapters.mock_ppg_adapter import MockPPGAdapter
from health_voice.adapters.translator_adapter import TranslationError
from health_voice.pipeline import QueryPipeline
from health_voice.routes.query_routes import get_query_pipeline

# ----------------------------- Test doubles ----------------------------------
class RecordingTranslator:
    """Translator double that tags text with the target language and records every call."""
    def __init__(self, fail: bool = False):
        self.calls: List[Tuple[str, str, str]] = []
        self.fail = fail

    async def translate(self, text: str, from_language: str, to_language: str) -> str:
        self.calls.append((text, from_language, to_language))
        if self.fail:
            raise TranslationError("Translation service unreachable")
        return f"[{to_language}] {text}"


class FailingProvider(MeasurementProvider):
    """Provider whose every call comes back Failed, like an unreachable PPG service."""
    name = "remote"

    def __init__(self, reason: str = "Timed out after 5.0s"):
        self.reason = reason
        self.calls = 0

    async def measure_heart_rate(self, user_id):
        self.calls += 1
        return Failed(self.reason)

    async def measure_oxygen(self, user_id):
        self.calls += 1
        return Failed(self.reason)

    async def get_trends(self, user_id):
        self.calls += 1
        return Failed(self.reason)

# ----------------------------- Pipeline fixtures -----------------------------
@pytest.fixture
def translator() -> RecordingTranslator:
    return RecordingTranslator()

@pytest.fixture
def synthetic_provider() -> MockPPGAdapter:
    return MockPPGAdapter(rng=random.Random(1234))

@pytest.fixture
def synthetic_pipeline(translator, synthetic_provider) -> QueryPipeline:
    """Pipeline in synthetic-only mode with a recording translator."""
    return QueryPipeline(translator, synthetic_provider, synthetic_only=True)

# ----------------------------- Core client ----------------------------------
@pytest.fixture
def client(synthetic_pipeline) -> TestClient:
    """Shared FastAPI TestClient wired to the synthetic pipeline."""
    app.dependency_overrides[get_query_pipeline] = lambda: synthetic_pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()

# ----------------------------- HTTP transport shim ---------------------------
@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    """
    Builds an httpx.MockTransport. `responder` gets the request and returns an
    httpx.Response (or raises); every request is appended to `seen`.
    """
    def _make(responder: Callable[[httpx.Request], httpx.Response], seen: List[httpx.Request] = None) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if seen is not None:
                seen.append(request)
            return responder(request)
        return httpx.MockTransport(handler)
    return _make

@pytest.fixture
def json_response() -> Callable[[int, Any], Callable[[httpx.Request], httpx.Response]]:
    def _make(status: int, body: Any) -> Callable[[httpx.Request], httpx.Response]:
        return lambda request: httpx.Response(status, json=body)
    return _make

# ----------------------------- PPG payloads ----------------------------------
@pytest.fixture
def heart_rate_payload() -> Dict[str, Any]:
    return {"heartRate": 81, "confidence": 0.97, "measurementId": "hr-remote-1", "timestamp": "2025-08-02T10:00:00Z", "status": "completed"}

@pytest.fixture
def oxygen_payload() -> Dict[str, Any]:
    return {"oxygenLevel": 93, "confidence": 0.9, "measurementId": "ox-remote-1", "timestamp": "2025-08-02T10:00:00Z", "status": "completed"}

@pytest.fixture
def trends_payload() -> List[Dict[str, Any]]:
    return [
        {"date": "2025-08-01", "avgHeartRate": 75, "avgOxygen": 97, "trend": "improving"},
        {"date": "2025-08-02", "avgHeartRate": 77, "avgOxygen": 96, "trend": "declining"},
    ]

@pytest.fixture
def translation_payload() -> Callable[[str], List[Dict[str, Any]]]:
    def _make(text: str) -> List[Dict[str, Any]]:
        return [{"translations": [{"text": text, "to": "en"}]}]
    return _make

def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)
