from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from health_voice.config import settings
from health_voice.pipeline import build_pipeline
from health_voice.adapters.base_adapter import ProviderFailure
from health_voice.adapters.speech_adapter import AzureSpeechClient, SpeechServiceError
from health_voice.adapters.translator_adapter import TranslationError
from health_voice.routes import query_routes, speech_routes
from health_voice.routes.query_routes import QueryValidationError
from health_voice.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(title="Health Voice Assistant")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Collaborators are built once from settings; routes reach them through app.state
app.state.pipeline = build_pipeline(settings)
app.state.speech_client = AzureSpeechClient(key=settings.AZURE_SPEECH_KEY, region=settings.AZURE_SPEECH_REGION)

# Include the health query and speech routes
app.include_router(query_routes.router)
app.include_router(speech_routes.router)


@app.exception_handler(QueryValidationError)
async def handle_validation_error(request: Request, exc: QueryValidationError):
    logger.warning(f"Rejected request to {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(SpeechServiceError)
async def handle_speech_error(request: Request, exc: SpeechServiceError):
    logger.error(f"Speech service error on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"error": "Speech service unavailable", "details": str(exc)})


@app.exception_handler(TranslationError)
@app.exception_handler(ProviderFailure)
async def handle_processing_error(request: Request, exc: Exception):
    logger.error(f"Processing error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Query processing failed", "details": str(exc)})


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Query processing failed", "details": str(exc)})


@app.get("/health")
def health_check():
    return {"status": "ok", "mockPpg": settings.USE_MOCK_PPG}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
