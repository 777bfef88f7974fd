"""Tests for urlscan.services.categorizer.categorize."""

import pytest

from urlscan.models.result import Category
from urlscan.services.categorizer import CATEGORY_RULES, categorize


class TestCategorize:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://example.com/jobs/123", Category.JOB_LISTINGS),
            ("https://example.com/careers/engineer", Category.JOB_LISTINGS),
            ("https://example.com/job-python-dev", Category.JOB_LISTINGS),
            ("https://example.com/articles/seo", Category.ARTICLES),
            ("https://example.com/blog/hello", Category.ARTICLES),
            ("https://example.com/post/42", Category.ARTICLES),
            ("https://example.com/news/today", Category.NEWS),
            ("https://example.com/press/release", Category.NEWS),
            ("https://example.com/events/summit", Category.EVENTS),
            ("https://example.com/webinars/intro", Category.EVENTS),
            ("https://example.com/about/team", Category.COMPANY),
            ("https://example.com/company/history", Category.COMPANY),
            ("https://example.com/products/widget", Category.PRODUCTS),
            ("https://example.com/services/consulting", Category.PRODUCTS),
            ("https://example.com/support/faq", Category.SUPPORT),
            ("https://example.com/help/contact", Category.SUPPORT),
            ("https://example.com/", Category.UNCATEGORIZED),
            ("https://example.com/contact", Category.UNCATEGORIZED),
        ],
    )
    def test_rule_table(self, url, expected):
        assert categorize(url) == expected

    def test_first_matching_rule_wins(self):
        # "/blog/" appears after "/jobs/" in the table
        assert categorize("https://example.com/blog/jobs/hiring") == Category.JOB_LISTINGS

    def test_matching_is_case_sensitive(self):
        assert categorize("https://example.com/Jobs/123") == Category.UNCATEGORIZED

    def test_only_path_is_considered(self):
        assert categorize("https://example.com/search?next=/jobs/1") == Category.UNCATEGORIZED

    def test_directory_needs_trailing_slash(self):
        assert categorize("https://example.com/jobs") == Category.UNCATEGORIZED

    def test_unparseable_url_is_uncategorized(self):
        assert categorize("http://[::1") == Category.UNCATEGORIZED

    def test_rules_cover_every_category_but_uncategorized(self):
        covered = {category for _, category in CATEGORY_RULES}
        assert covered == set(Category) - {Category.UNCATEGORIZED}
