import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from urlscan.config import settings
from urlscan.routers.validate import limiter, router as validate_router
from urlscan.services.cache import ResultCache
from urlscan.services.validator import UrlValidator

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": settings.log_level, "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="URLScan – Bulk Indexability Checker",
    description=(
        "Checks a list of URLs for reachability and search-engine indexability "
        "(HTTP status, X-Robots-Tag and robots meta tags) and reports problems first."
    ),
    version="1.0.0",
)

# One validator (and therefore one result cache) for the whole process
app.state.validator = UrlValidator(
    cache=ResultCache(ttl=settings.cache_ttl),
    timeout=settings.request_timeout,
    max_concurrency=settings.max_concurrency,
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(validate_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from URLScan", "cached_results": len(app.state.validator.cache)}
