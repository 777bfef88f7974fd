"""Content categorisation from URL path substrings."""

from typing import Tuple
from urllib.parse import urlsplit

from urlscan.models.result import Category

# Evaluated top to bottom; the first substring found in the path wins.
CATEGORY_RULES: Tuple[Tuple[str, Category], ...] = (
    ("/jobs/", Category.JOB_LISTINGS),
    ("/careers/", Category.JOB_LISTINGS),
    ("/job-", Category.JOB_LISTINGS),
    ("/articles/", Category.ARTICLES),
    ("/blog/", Category.ARTICLES),
    ("/post/", Category.ARTICLES),
    ("/news/", Category.NEWS),
    ("/press/", Category.NEWS),
    ("/events/", Category.EVENTS),
    ("/webinars/", Category.EVENTS),
    ("/about/", Category.COMPANY),
    ("/company/", Category.COMPANY),
    ("/products/", Category.PRODUCTS),
    ("/services/", Category.PRODUCTS),
    ("/support/", Category.SUPPORT),
    ("/help/", Category.SUPPORT),
)


def categorize(url: str) -> Category:
    """Return the :class:`Category` for *url*.

    Matching is case-sensitive and looks only at the path component.  URLs
    that cannot be parsed are :attr:`Category.UNCATEGORIZED`.
    """
    try:
        path = urlsplit(url).path
    except ValueError:
        return Category.UNCATEGORIZED

    for needle, category in CATEGORY_RULES:
        if needle in path:
            return category
    return Category.UNCATEGORIZED
