import uuid
import httpx
from typing import Any, Dict, Optional
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_exception_type

from health_voice.logger import get_logger

logger = get_logger(__name__)

API_VERSION = "3.0"


# --- Custom Exception Classes ---
class TranslationError(Exception):
    """Custom exception for translation service failures."""
    pass


# --- Azure Translator Adapter Implementation ---
class AzureTranslator:
    """
    Adapter for the Azure Translator REST API (v3).
    Transport errors are retried here; anything else surfaces as TranslationError.
    """
    def __init__(self, key: str, endpoint: str, region: str = "global", transport: Optional[httpx.AsyncBaseTransport] = None):
        self.key = key
        self.endpoint = endpoint.rstrip("/")
        self.region = region
        self._transport = transport

    async def translate(self, text: str, from_language: str, to_language: str) -> str:
        """
        Translates text from one language tag to another. Callers are expected
        to skip this call when both tags are equal.
        """
        try:
            payload = await self._post_translate(text, from_language, to_language)
        except httpx.HTTPStatusError as e:
            logger.error(f"Translator returned HTTP {e.response.status_code} for {from_language}->{to_language}")
            raise TranslationError(f"Translation service returned HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Translator unreachable for {from_language}->{to_language}: {e}")
            raise TranslationError(f"Translation service unreachable: {e}") from e
        except ValueError as e:
            raise TranslationError("Translation service returned a non-JSON body") from e

        try:
            return payload[0]["translations"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected translator response shape: {payload}")
            raise TranslationError("Translation response is missing the translated text") from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True
    )
    async def _post_translate(self, text: str, from_language: str, to_language: str) -> Any:
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                f"{self.endpoint}/translate",
                params={"api-version": API_VERSION, "from": from_language, "to": to_language},
                headers=self._get_auth_headers(),
                json=[{"text": text}],
            )
            response.raise_for_status()
            return response.json()

    def _get_auth_headers(self) -> Dict[str, str]:
        """A private helper method to create the authorization headers."""
        return {
            "Ocp-Apim-Subscription-Key": self.key,
            "Ocp-Apim-Subscription-Region": self.region,
            "X-ClientTraceId": str(uuid.uuid4()),
        }
