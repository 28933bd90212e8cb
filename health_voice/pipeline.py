from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Protocol, Union

from health_voice.adapters.base_adapter import Failed, MeasurementProvider, ProviderFailure, ProviderResult
from health_voice.adapters.mock_ppg_adapter import MockPPGAdapter
from health_voice.adapters.ppg_adapter import PPGServiceAdapter
from health_voice.adapters.translator_adapter import AzureTranslator
from health_voice.config import Settings
from health_voice.utils.intent import classify
from health_voice.utils.models import Intent, Measurement, PipelineResult, Query, TrendSeries
from health_voice.logger import get_logger

logger = get_logger(__name__)

ENGLISH = "en"

HEART_RATE_RESPONSE = "Your heart rate is {value} beats per minute. This appears to be within normal range."
HEART_RATE_PROMPT = "Please place your finger on the camera to measure your heart rate."
OXYGEN_RESPONSE = "Your blood oxygen level is {value} percent. This is {status}."
OXYGEN_PROMPT = "Please place your finger on the camera to measure your blood oxygen level."
OXYGEN_NORMAL_THRESHOLD = 95
TRENDS_RESPONSE = "Your recent average heart rate is {avg_heart_rate} BPM. Your readings have been {trend} over the past week."
NO_TRENDS_RESPONSE = "No previous measurements found. Take your first measurement using the camera feature."
HELP_RESPONSE = (
    "I can help you monitor your health using your phone camera. "
    "Try asking me to measure your heart rate, check your blood oxygen, or show your health trends."
)


class Translator(Protocol):
    async def translate(self, text: str, from_language: str, to_language: str) -> str: ...


def _format_number(value: Union[int, float]) -> str:
    # 72.0 from the remote service should read as "72"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _has_reading(measurement: Measurement) -> bool:
    return measurement.value is not None and measurement.value > 0


class QueryPipeline:
    """
    Runs a single health query end to end: translate to English, classify,
    fetch the measurement, format the answer and translate it back.

    When `synthetic_only` is False and a remote provider is configured, the
    remote provider is tried first and the synthetic one answers only if the
    remote call fails.
    """

    def __init__(
        self,
        translator: Translator,
        synthetic_provider: MeasurementProvider,
        remote_provider: Optional[MeasurementProvider] = None,
        synthetic_only: bool = False,
    ):
        self.translator = translator
        self.synthetic_provider = synthetic_provider
        self.remote_provider = remote_provider
        self.synthetic_only = synthetic_only or remote_provider is None

    async def handle(self, query: Query) -> PipelineResult:
        english_query = query.text
        if query.user_language != ENGLISH:
            english_query = await self.translator.translate(query.text, query.user_language, ENGLISH)
            logger.info(f"Translated to English: '{english_query}'")

        intent = classify(english_query)
        logger.info(f"Classified query as {intent.value}")
        english_response = await self.respond(intent, query.user_id)

        translated_response = english_response
        if query.user_language != ENGLISH:
            translated_response = await self.translator.translate(english_response, ENGLISH, query.user_language)
            logger.info(f"Translated response back to {query.user_language}")

        return PipelineResult(
            original_query=query.text,
            english_query=english_query,
            english_response=english_response,
            translated_response=translated_response,
            language=query.user_language,
            timestamp=datetime.now(timezone.utc),
        )

    async def respond(self, intent: Intent, user_id: str) -> str:
        """Builds the English answer for an already classified intent."""
        if intent is Intent.HEART_RATE:
            measurement = await self._obtain(lambda provider: provider.measure_heart_rate(user_id), "heart rate")
            if not _has_reading(measurement):
                return HEART_RATE_PROMPT
            return HEART_RATE_RESPONSE.format(value=_format_number(measurement.value))

        if intent is Intent.OXYGEN:
            measurement = await self._obtain(lambda provider: provider.measure_oxygen(user_id), "blood oxygen")
            if not _has_reading(measurement):
                return OXYGEN_PROMPT
            status = "normal" if measurement.value >= OXYGEN_NORMAL_THRESHOLD else "below normal range"
            return OXYGEN_RESPONSE.format(value=_format_number(measurement.value), status=status)

        if intent is Intent.TRENDS:
            trends: TrendSeries = await self._obtain(lambda provider: provider.get_trends(user_id), "trends")
            if not trends:
                return NO_TRENDS_RESPONSE
            latest = trends[-1]
            return TRENDS_RESPONSE.format(
                avg_heart_rate=_format_number(latest.avg_heart_rate),
                trend=latest.trend or "stable",
            )

        return HELP_RESPONSE

    async def _obtain(self, call: Callable[[MeasurementProvider], Awaitable[ProviderResult]], label: str):
        if not self.synthetic_only:
            result = await call(self.remote_provider)
            if not isinstance(result, Failed):
                logger.info(f"Served {label} from {self.remote_provider.name} provider")
                return result.value
            logger.warning(f"Measurement service degraded ({result.reason}); serving {label} from synthetic data")

        result = await call(self.synthetic_provider)
        if isinstance(result, Failed):
            raise ProviderFailure(f"No provider could serve {label}: {result.reason}")
        logger.info(f"Served {label} from {self.synthetic_provider.name} provider")
        return result.value


def build_pipeline(settings: Settings) -> QueryPipeline:
    """Wires the pipeline from settings; called once at start-up."""
    translator = AzureTranslator(
        key=settings.AZURE_TRANSLATOR_KEY,
        endpoint=settings.AZURE_TRANSLATOR_ENDPOINT,
        region=settings.AZURE_TRANSLATOR_REGION,
    )
    remote = None
    if settings.USE_MOCK_PPG:
        logger.info("Measurement mode: synthetic only")
    else:
        remote = PPGServiceAdapter(settings.PPG_SERVICE_URL, timeout=settings.PPG_TIMEOUT_SECONDS)
        logger.info(f"Measurement mode: remote ({settings.PPG_SERVICE_URL}) with synthetic fallback")
    return QueryPipeline(translator, MockPPGAdapter(), remote_provider=remote, synthetic_only=settings.USE_MOCK_PPG)
