"""Noindex directive detection and ``<meta>`` tag extraction.

A page opts out of search indexing either with an ``X-Robots-Tag`` response
header or with a ``<meta name="robots">`` / ``<meta name="googlebot">`` tag.
Both are checked with the same :func:`contains_noindex` predicate so the two
paths can never disagree about what counts as a directive.
"""

from typing import Dict, Iterable

from bs4 import BeautifulSoup

ROBOTS_HEADER = "x-robots-tag"

# Meta names that carry crawler directives (compared lower-cased)
_ROBOTS_META_NAMES = {"robots", "googlebot"}

# Attributes tried in order for the key of an extracted meta tag
_META_KEY_ATTRS = ("name", "property", "http-equiv")


def contains_noindex(value: str) -> bool:
    """Return True when *value* contains ``noindex`` in any letter case."""
    return "noindex" in value.lower()


def has_noindex_header(header_values: Iterable[str]) -> bool:
    """Return True if any ``X-Robots-Tag`` value carries a noindex directive."""
    return any(contains_noindex(value) for value in header_values)


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def has_noindex_meta(soup: BeautifulSoup) -> bool:
    """Return True if a robots/googlebot meta tag carries a noindex directive."""
    for meta in soup.find_all("meta", attrs={"name": True}):
        name = str(meta.get("name", "")).strip().lower()
        if name in _ROBOTS_META_NAMES and contains_noindex(str(meta.get("content", ""))):
            return True
    return False


def extract_meta_tags(soup: BeautifulSoup) -> Dict[str, str]:
    """Collect ``key → content`` for every ``<meta>`` element in *soup*.

    The key is the ``name`` attribute, falling back to ``property`` (Open
    Graph) and then ``http-equiv``.  A tag with ``content`` but no key is
    recorded under the empty key; a tag with neither (e.g. ``<meta charset>``)
    is skipped.  When a key repeats, the first occurrence wins.
    """
    tags: Dict[str, str] = {}
    for meta in soup.find_all("meta"):
        key = ""
        for attr in _META_KEY_ATTRS:
            key = str(meta.get(attr, "")).strip()
            if key:
                break
        content = meta.get("content")
        if (not key and not content) or key in tags:
            continue
        tags[key] = str(content or "").strip()
    return tags
