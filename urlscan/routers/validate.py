import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, UploadFile
from slowapi import Limiter
from slowapi.util import get_remote_address

from urlscan.config import settings
from urlscan.models.response import UploadResponse
from urlscan.models.result import ValidationResult
from urlscan.services.upload import ALLOWED_EXTENSIONS, extract_urls
from urlscan.services.validator import UrlValidator, summarize

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/api/urlvalidation", tags=["URL validation"])


def get_validator(request: Request) -> UrlValidator:
    """Return the application-wide validator (and with it, the shared cache)."""
    return request.app.state.validator


@router.post(
    "/validate",
    response_model=List[ValidationResult],
    summary="Check a list of URLs for reachability and indexability",
    description=(
        "Accepts a JSON array of URL strings.  Blank and duplicate entries are "
        "dropped; every remaining URL gets exactly one result.  Results are "
        "ordered problems-first (noindex, invalid, 404, server error, indexed, "
        "empty page) and then alphabetically by URL."
    ),
)
@limiter.limit(settings.rate_limit)
async def validate_urls(
    request: Request,
    urls: List[Optional[str]] = Body(...),
    validator: UrlValidator = Depends(get_validator),
) -> List[ValidationResult]:
    if not urls:
        logger.warning("API called with an empty URL list.")
        raise HTTPException(status_code=400, detail="No URLs provided")

    logger.info("Received %d URLs for validation.", len(urls))
    results = await _run_validation(validator, urls)
    logger.info("Validation completed: %d results returned.", len(results))
    return results


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Validate the URLs listed in an uploaded .txt or .csv file",
    description=(
        "Text files are read one URL per line; CSV files contribute the first "
        "column of each row.  Only entries starting with `http` are kept.  The "
        "response carries the ordered results plus a per-status summary."
    ),
)
@limiter.limit(settings.rate_limit)
async def upload_urls(
    request: Request,
    file: UploadFile,
    validator: UrlValidator = Depends(get_validator),
) -> UploadResponse:
    filename = file.filename or ""
    if not filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise HTTPException(status_code=422, detail="Uploaded file must be a .txt or .csv file.")

    content = (await file.read()).decode("utf-8-sig", errors="replace")
    urls = extract_urls(filename, content)
    if not urls:
        logger.warning("Upload %s contained no URLs.", filename)
        raise HTTPException(status_code=400, detail="File is empty or contains no valid URLs.")

    logger.info("Received %d URLs from upload %s.", len(urls), filename)
    results = await _run_validation(validator, urls)
    return UploadResponse(
        filename=filename,
        urls_found=len(urls),
        results=results,
        summary=summarize(results),
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

async def _run_validation(validator: UrlValidator, urls: List[Optional[str]]) -> List[ValidationResult]:
    """Run *validator* under the batch limits and map overruns to HTTP errors."""
    if len(urls) > settings.max_urls:
        raise HTTPException(
            status_code=413,
            detail=f"Too many URLs: {len(urls)} submitted, the limit is {settings.max_urls}.",
        )

    try:
        return await asyncio.wait_for(validator.validate(urls), timeout=settings.batch_timeout)
    except asyncio.TimeoutError:
        logger.error("Validation request timed out.")
        raise HTTPException(
            status_code=504, detail="The request took too long and was canceled."
        )
