"""URL normalisation utilities: trimming, deduplication, well-formedness.

Every place that compares URLs (input deduplication, cache keys, and the
reconciliation pass) goes through :func:`url_key`, so two spellings are the
same URL if and only if their keys match.  Scheme and host are compared
case-insensitively; path, query and fragment are compared as written.
"""

import re
from typing import Iterable, List
from urllib.parse import urlsplit

ALLOWED_SCHEMES = {"http", "https"}

# Whitespace or ASCII control characters anywhere in the URL
_ILLEGAL_CHARS_RE = re.compile(r"[\s\x00-\x1f\x7f]")


def url_key(url: str) -> str:
    """Return the comparison key for *url*.

    Strings that cannot be split into scheme and host are returned unchanged.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url
    # Userinfo before "@" is case-sensitive; only the host[:port] part is folded
    userinfo, at, hostport = parts.netloc.rpartition("@")
    netloc = userinfo + at + hostport.lower()
    return parts._replace(scheme=parts.scheme.lower(), netloc=netloc).geturl()


def is_well_formed(url: str) -> bool:
    """Return True when *url* is an absolute http(s) URI with a host."""
    if not url or _ILLEGAL_CHARS_RE.search(url):
        return False
    try:
        parts = urlsplit(url)
        # Accessing .port validates it and raises ValueError when out of range
        parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return False
    return bool(parts.hostname)


def normalize_urls(raw_urls: Iterable[str]) -> List[str]:
    """Trim *raw_urls*, drop blanks and duplicates, and keep first-seen order.

    When two entries share a :func:`url_key`, the first spelling is kept.
    """
    seen: set = set()
    urls: List[str] = []
    for raw in raw_urls:
        if raw is None:
            continue
        url = raw.strip()
        if not url:
            continue
        key = url_key(url)
        if key in seen:
            continue
        seen.add(key)
        urls.append(url)
    return urls
