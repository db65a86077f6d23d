"""FastAPI routes for product promo generation."""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import GenerationError
from app.core.logging_config import get_logger
from app.models.schemas import ErrorResponse, GenerateResponse, ProductRequest
from app.pipelines.generation_orchestrator import GenerationOrchestrator

router = APIRouter(prefix="/api", tags=["generate"])


def error_response(status_code: int, error: str, detail: Optional[str] = None) -> JSONResponse:
    """Build an {error, error_detail?} JSON response."""
    body = ErrorResponse(error=error, error_detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def get_orchestrator() -> GenerationOrchestrator:
    """Build an orchestrator from the process-wide settings."""
    return GenerationOrchestrator(settings, get_logger(__name__))


@router.post(
    "/generate",
    response_model=GenerateResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate(
    request: ProductRequest,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
):
    """
    Generate a product image and a four-scene promo script.

    Pipeline:
    PageMetadataExtractor → (image generation ‖ script generation) → SceneSegmenter
    """
    logger = get_logger(__name__, url=request.url)
    logger.info("=" * 60)
    logger.info("Starting promo generation")
    logger.info(f"URL: {request.url}")
    logger.info(f"Style: {request.style or 'default'}")
    logger.info("=" * 60)

    try:
        result = orchestrator.generate(request)
    except GenerationError as e:
        log = logger.warning if e.status_code < 500 else logger.error
        log(f"Generation failed: {type(e).__name__}: {e.message}")
        return error_response(e.status_code, e.message, e.detail)
    except Exception as e:
        logger.exception(f"Unexpected error generating promo: {e}")
        return error_response(500, "Server error", str(e))

    logger.info("Promo generation complete")
    return GenerateResponse.from_result(result)
