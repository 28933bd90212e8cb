import httpx
from typing import Dict, Optional
from xml.sax.saxutils import escape, quoteattr
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_exception_type

from health_voice.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SPEECH_LANGUAGE = "zu-ZA"
DEFAULT_VOICE = "zu-ZA-ThandoNeural"
TTS_OUTPUT_FORMAT = "audio-16khz-128kbitrate-mono-mp3"


class SpeechServiceError(Exception):
    """Custom exception for speech-to-text / text-to-speech failures."""
    pass


class AzureSpeechClient:
    """
    Thin client for the Azure Speech REST endpoints. Audio is passed through
    untouched in both directions.
    """
    def __init__(self, key: str, region: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.key = key
        self.region = region
        self._transport = transport

    async def speech_to_text(self, audio: bytes, language: str = DEFAULT_SPEECH_LANGUAGE) -> str:
        url = f"https://{self.region}.stt.speech.microsoft.com/speech/recognition/conversation/cognitiveservices/v1"
        headers = {**self._get_auth_headers(), "Content-Type": "audio/wav", "Accept": "application/json"}
        try:
            response = await self._post(url, headers=headers, params={"language": language, "format": "detailed"}, content=audio)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Speech-to-text failed for language {language}: {e}")
            raise SpeechServiceError(f"Speech-to-text failed: {e}") from e

        # RecognitionStatus (e.g. "NoMatch") stands in when nothing was recognised
        transcript = (data.get("DisplayText") or data.get("RecognitionStatus")) if isinstance(data, dict) else None
        if transcript is None:
            raise SpeechServiceError("Speech-to-text response has neither DisplayText nor RecognitionStatus")
        logger.info(f"Transcribed {len(audio)} bytes of {language} audio.")
        return transcript

    async def text_to_speech(self, text: str, language: str = DEFAULT_SPEECH_LANGUAGE, voice: str = DEFAULT_VOICE) -> bytes:
        url = f"https://{self.region}.tts.speech.microsoft.com/cognitiveservices/v1"
        headers = {
            **self._get_auth_headers(),
            "Content-Type": "application/ssml+xml",
            "X-Microsoft-OutputFormat": TTS_OUTPUT_FORMAT,
        }
        try:
            response = await self._post(url, headers=headers, content=build_ssml(text, language, voice).encode("utf-8"))
        except httpx.HTTPError as e:
            logger.error(f"Text-to-speech failed for voice {voice}: {e}")
            raise SpeechServiceError(f"Text-to-speech failed: {e}") from e
        return response.content

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True
    )
    async def _post(self, url: str, **kwargs) -> httpx.Response:
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(url, **kwargs)
            response.raise_for_status()
            return response

    def _get_auth_headers(self) -> Dict[str, str]:
        return {"Ocp-Apim-Subscription-Key": self.key}


def build_ssml(text: str, language: str, voice: str) -> str:
    return (
        f"<speak version='1.0' xml:lang={quoteattr(language)}>"
        f"<voice xml:lang={quoteattr(language)} name={quoteattr(voice)}>{escape(text)}</voice>"
        "</speak>"
    )
