import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import get_settings
from app.models.import_request import ImportRequest
from app.models.import_response import ErrorResponse, ImportResponse
from app.services.errors import (
    AccessDeniedError,
    ExtractionFailedError,
    ImportFailure,
    InvalidInputError,
    ResourceLimitError,
)
from app.services.importer import import_article

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


@router.post(
    "/import-script",
    response_model=ImportResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
    summary="Import a web article as plain text",
)
@limiter.limit(get_settings().import_rate_limit)
async def import_script(request: Request, body: ImportRequest):
    """Fetch *url* under network and size limits and return its article.

    Private-network targets are refused, redirects are re-checked hop by hop,
    and the response body is capped in size and time.
    """
    url = body.url
    logger.info("Import request received", extra={"url": url})

    try:
        return await import_article(url, get_settings().fetch_limits())
    except ImportFailure as exc:
        _log_failure(url, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _log_failure(url: str, exc: ImportFailure) -> None:
    """Log the internal detail of *exc*; the caller only sees its public message."""
    cause = exc.__cause__
    if isinstance(exc, (InvalidInputError, AccessDeniedError)):
        logger.warning("Rejected URL %s – %s", url, exc)
    elif isinstance(exc, (ResourceLimitError, ExtractionFailedError)):
        logger.warning("Import of %s stopped – %s", url, exc)
    else:
        logger.error("Import of %s failed – %s (cause: %r)", url, exc, cause)
