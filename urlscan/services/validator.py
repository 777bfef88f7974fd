"""Bulk URL validation engine.

:class:`UrlValidator` turns a raw list of strings into one
:class:`ValidationResult` per distinct URL:

* the list is trimmed and deduplicated (:mod:`urlscan.services.normalizer`);
* malformed entries are rejected without touching the network;
* live cache entries are reused;
* everything else is fetched and classified with at most ``max_concurrency``
  requests in flight;
* URLs that end up without a result (e.g. a crashed worker) are backfilled;
* the list is sorted problems-first, then by URL.

Per-URL problems never raise; they are reported through the result's
``status`` and ``details``.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Sequence

import httpx

from urlscan.models.response import ValidationSummary
from urlscan.models.result import ValidationResult, ValidationStatus
from urlscan.services.cache import ResultCache
from urlscan.services.categorizer import categorize
from urlscan.services.classifier import MALFORMED, NOT_PROCESSED, classify_url
from urlscan.services.fetcher import TIMEOUT, PageFetcher, create_client
from urlscan.services.normalizer import is_well_formed, normalize_urls, url_key

logger = logging.getLogger(__name__)

MAX_CONCURRENCY = 8

# Reported first → reported last
STATUS_PRIORITY: Dict[ValidationStatus, int] = {
    ValidationStatus.NO_INDEX: 0,
    ValidationStatus.INVALID: 1,
    ValidationStatus.NOT_FOUND: 2,
    ValidationStatus.SERVER_ERROR: 3,
    ValidationStatus.INDEXED: 4,
    ValidationStatus.EMPTY_PAGE: 5,
}


def order_results(results: Iterable[ValidationResult]) -> List[ValidationResult]:
    """Sort by status priority, then by URL (ordinal, case-sensitive)."""
    return sorted(results, key=lambda r: (STATUS_PRIORITY[r.status], r.url))


def reconcile(urls: Sequence[str], results: Iterable[ValidationResult]) -> List[ValidationResult]:
    """Return exactly one result per entry of *urls*, in the order of *urls*.

    *urls* must already be deduplicated.  Results are matched by
    :func:`url_key`; the first result for a key wins and extra ones are
    dropped.  A URL without any result is reported as not processed.
    """
    by_key: Dict[str, ValidationResult] = {}
    for result in results:
        by_key.setdefault(url_key(result.url), result)

    reconciled: List[ValidationResult] = []
    for url in urls:
        result = by_key.get(url_key(url))
        if result is None:
            logger.warning("URL was not processed: %s", url)
            result = ValidationResult(
                url=url,
                status=NOT_PROCESSED.status,
                details=NOT_PROCESSED.details,
                category=categorize(url),
            )
        reconciled.append(result)
    return reconciled


def summarize(results: Iterable[ValidationResult]) -> ValidationSummary:
    """Tally *results* the way the report header shows them."""
    total = indexed = no_index = not_found = 0
    for result in results:
        total += 1
        if result.status is ValidationStatus.INDEXED:
            indexed += 1
        elif result.status is ValidationStatus.NO_INDEX:
            no_index += 1
        elif result.status is ValidationStatus.NOT_FOUND:
            not_found += 1
    return ValidationSummary(
        total=total,
        indexed=indexed,
        no_index=no_index,
        not_found=not_found,
        errors=total - indexed - no_index - not_found,
    )


class UrlValidator:
    """Validates URL batches against a shared :class:`ResultCache`.

    Args:
        cache:           Result cache; a private one is created when omitted.
        timeout:         Per-request timeout in seconds.
        max_concurrency: Maximum number of fetches in flight at once.
        transport:       Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        cache: Optional[ResultCache] = None,
        timeout: float = TIMEOUT,
        max_concurrency: int = MAX_CONCURRENCY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1.")
        self.cache = cache if cache is not None else ResultCache()
        self.timeout = timeout
        self.max_concurrency = max_concurrency
        self._transport = transport

    async def validate(self, raw_urls: Sequence[str]) -> List[ValidationResult]:
        """Validate *raw_urls* and return the ordered report."""
        urls = normalize_urls(raw_urls)
        logger.info("Processing %d distinct URLs from %d total URLs", len(urls), len(raw_urls))

        results: List[ValidationResult] = []
        pending: List[str] = []
        for url in urls:
            if not is_well_formed(url):
                logger.debug("Invalid URL format: %s", url)
                results.append(
                    ValidationResult(
                        url=url,
                        status=MALFORMED.status,
                        details=MALFORMED.details,
                        category=categorize(url),
                    )
                )
                continue

            cached = self.cache.get(url_key(url))
            if cached is not None:
                logger.debug("Cache hit for URL: %s", url)
                results.append(cached)
                continue

            pending.append(url)

        logger.info("Found %d URLs to fetch", len(pending))
        if pending:
            results.extend(await self._dispatch(pending))

        final = order_results(reconcile(urls, results))
        logger.info("Returning %d results", len(final))
        return final

    async def _dispatch(self, urls: List[str]) -> List[ValidationResult]:
        """Classify *urls* concurrently; completion order is not preserved."""
        semaphore = asyncio.Semaphore(self.max_concurrency)
        collected: List[ValidationResult] = []

        async with create_client(self.timeout, self._transport) as client:
            fetcher = PageFetcher(client, self.timeout)

            async def worker(url: str) -> None:
                async with semaphore:
                    result = await classify_url(url, categorize(url), fetcher)
                self.cache.put(url_key(url), result)
                collected.append(result)

            outcomes = await asyncio.gather(
                *(worker(url) for url in urls), return_exceptions=True
            )

        for url, outcome in zip(urls, outcomes):
            if isinstance(outcome, Exception):
                logger.error(
                    "Validation of %s failed unexpectedly: %s", url, outcome, exc_info=outcome
                )
        return collected
