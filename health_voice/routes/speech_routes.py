from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import Response

from health_voice.adapters.speech_adapter import AzureSpeechClient, DEFAULT_SPEECH_LANGUAGE
from health_voice.utils.models import SynthesisRequest
from health_voice.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/speech", tags=["Speech"])

MAX_AUDIO_BYTES = 10 * 1024 * 1024


def get_speech_client(request: Request) -> AzureSpeechClient:
    return request.app.state.speech_client


@router.post("/transcribe")
async def transcribe_audio(
    file: UploadFile = File(...),
    language: str = Form(DEFAULT_SPEECH_LANGUAGE),
    speech_client: AzureSpeechClient = Depends(get_speech_client),
):
    """
    Accepts a WAV upload (multipart/form-data) and returns its transcript.
    """
    contents = await file.read()
    logger.info(f"Received audio upload. File: {file.filename}, size: {len(contents)} bytes")
    if not contents:
        raise HTTPException(status_code=400, detail="Uploaded audio file is empty.")
    if len(contents) > MAX_AUDIO_BYTES:
        raise HTTPException(status_code=413, detail="Audio file exceeds the 10 MB limit.")

    text = await speech_client.speech_to_text(contents, language=language)
    return {"text": text}


@router.post("/synthesize")
async def synthesize_speech(data: SynthesisRequest, speech_client: AzureSpeechClient = Depends(get_speech_client)):
    """
    Speaks the given text and returns MP3 audio.
    """
    audio = await speech_client.text_to_speech(data.text, language=data.language, voice=data.voice)
    return Response(content=audio, media_type="audio/mpeg")
