from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from health_voice.pipeline import QueryPipeline
from health_voice.utils.models import HealthQueryRequest, PipelineResult, Query
from health_voice.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Health Query"])


class QueryValidationError(Exception):
    """Raised when the request body does not carry a usable query."""
    pass


def get_query_pipeline(request: Request) -> QueryPipeline:
    """Dependency that provides the pipeline built at start-up."""
    return request.app.state.pipeline


@router.post("/process-health-query", response_model=PipelineResult)
async def process_health_query(request: Request, pipeline: QueryPipeline = Depends(get_query_pipeline)):
    """
    Answers a typed or transcribed health question in the user's language.
    Body: {"query": str, "userLanguage": str = "zu", "userId": str = "demo-user"}
    """
    # An empty or non-JSON body is treated the same as a missing query
    try:
        json_data = await request.json()
    except ValueError:
        json_data = None
    if not isinstance(json_data, dict):
        raise QueryValidationError("Query is required")

    try:
        data = HealthQueryRequest.model_validate(json_data)
    except ValidationError as e:
        logger.warning(f"Rejected malformed health query body: {e}")
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "body"
        raise QueryValidationError(f"Invalid '{field}': {error['msg']}")
    if not data.query:
        raise QueryValidationError("Query is required")

    logger.info(f"Received query: '{data.query}' in language: {data.user_language}")
    result = await pipeline.handle(Query(text=data.query, user_language=data.user_language, user_id=data.user_id))
    logger.info(f"Health response: '{result.english_response}'")
    return result
