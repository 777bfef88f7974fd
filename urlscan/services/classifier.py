"""Per-URL classification state machine.

The checks run in a fixed order and the first one that produces a verdict
ends the run:

1. fetch failure (timeout, connection error, anything else httpx reports)
2. HTTP status (404, 5xx, other non-success codes)
3. ``X-Robots-Tag`` header
4. body readability / emptiness
5. robots/googlebot ``<meta>`` tags

A page that clears every check is :attr:`ValidationStatus.INDEXED`.
"""

import logging
from typing import Dict, NamedTuple, Optional

from urlscan.models.result import Category, ValidationResult, ValidationStatus
from urlscan.services.fetcher import FailureKind, FetchFailure, FetchSuccess, PageFetcher
from urlscan.services.robots import (
    ROBOTS_HEADER,
    extract_meta_tags,
    has_noindex_header,
    has_noindex_meta,
    parse_html,
)

logger = logging.getLogger(__name__)


class Verdict(NamedTuple):
    status: ValidationStatus
    details: str


MALFORMED = Verdict(ValidationStatus.INVALID, "Malformed URL")
NOT_PROCESSED = Verdict(ValidationStatus.INVALID, "URL was not processed")
TIMED_OUT = Verdict(ValidationStatus.SERVER_ERROR, "Request timed out")
NOT_FOUND = Verdict(ValidationStatus.NOT_FOUND, "Page does not exist")
NOINDEX_HEADER = Verdict(ValidationStatus.NO_INDEX, "Page is marked 'noindex' via HTTP headers")
READ_ERROR = Verdict(ValidationStatus.EMPTY_PAGE, "Error reading content")
NO_CONTENT = Verdict(ValidationStatus.EMPTY_PAGE, "No content found")
NOINDEX_META = Verdict(ValidationStatus.NO_INDEX, "Page contains 'noindex' meta tag")
INDEXED = Verdict(ValidationStatus.INDEXED, "Page is NOT noindexed")


def classify_failure(failure: FetchFailure) -> Verdict:
    if failure.kind is FailureKind.TIMEOUT:
        return TIMED_OUT
    return Verdict(ValidationStatus.INVALID, f"Connection failed: {failure.message}")


def classify_status_code(status_code: int) -> Optional[Verdict]:
    """Return a verdict for a non-success *status_code*, or None to continue."""
    if status_code == 404:
        return NOT_FOUND
    if status_code >= 500:
        return Verdict(ValidationStatus.SERVER_ERROR, f"HTTP {status_code} - Server issue")
    if not 200 <= status_code < 400:
        return Verdict(ValidationStatus.INVALID, f"HTTP {status_code} - Request failed")
    return None


def classify_body(text: Optional[str]) -> tuple[Verdict, Dict[str, str]]:
    """Classify a downloaded body and return the verdict with its meta tags.

    *text* is None when the body could not be read or decoded.
    """
    if text is None:
        return READ_ERROR, {}
    if not text.strip():
        return NO_CONTENT, {}

    soup = parse_html(text)
    meta_tags = extract_meta_tags(soup)
    if has_noindex_meta(soup):
        return NOINDEX_META, meta_tags
    return INDEXED, meta_tags


async def classify_url(url: str, category: Category, fetcher: PageFetcher) -> ValidationResult:
    """Fetch *url* and run it through the classification checks."""
    outcome = await fetcher.fetch(url)
    if isinstance(outcome, FetchFailure):
        return _build(url, classify_failure(outcome), category)

    try:
        return await _classify_response(url, category, outcome)
    finally:
        await outcome.aclose()


async def _classify_response(
    url: str, category: Category, response: FetchSuccess
) -> ValidationResult:
    verdict = classify_status_code(response.status_code)
    if verdict is not None:
        return _build(url, verdict, category)

    if has_noindex_header(response.header_values(ROBOTS_HEADER)):
        return _build(url, NOINDEX_HEADER, category)

    text = await response.read_text()
    verdict, meta_tags = classify_body(text)
    return _build(url, verdict, category, meta_tags)


def _build(
    url: str,
    verdict: Verdict,
    category: Category,
    meta_tags: Optional[Dict[str, str]] = None,
) -> ValidationResult:
    logger.debug("Classified %s as %s (%s)", url, verdict.status.value, verdict.details)
    return ValidationResult(
        url=url,
        status=verdict.status,
        details=verdict.details,
        category=category,
        meta_tags=meta_tags or {},
    )
