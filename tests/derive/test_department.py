"""Tests for department resolution from document URLs."""

import pytest

from derive.department import UNRESOLVED_DEPARTMENT, DepartmentResolver
from derive.text import StringNormalizer

FINANCE_URL = "https://x/sites/Finance/Shared Documents/a/b.pdf"


class TestWhitelistVariant:
    """Resolver with a department whitelist."""

    def test_whitelisted_department_resolves(self):
        """Test a whitelisted site within the depth limit."""
        resolver = DepartmentResolver({"/Finance/"})
        assert resolver.resolve(FINANCE_URL) == "Finance"

    def test_empty_whitelist_rejects(self):
        """Test that an empty whitelist rejects everything."""
        resolver = DepartmentResolver(set())
        resolution = resolver.explain(FINANCE_URL)
        assert resolution.department == UNRESOLVED_DEPARTMENT
        assert resolution.reason == "whitelist"

    def test_archive_always_rejected(self):
        """Test that archived locations are rejected regardless of whitelist."""
        url = "https://x/sites/Finance/Shared Documents/Archive/b.pdf"
        assert DepartmentResolver({"/Finance/"}).resolve(url) == UNRESOLVED_DEPARTMENT
        assert DepartmentResolver(None).resolve(url) == UNRESOLVED_DEPARTMENT
        assert DepartmentResolver({"/Finance/"}).explain(url).reason == "archived"

    def test_whitelist_is_substring_scan(self):
        """Test that an entry containing the wrapped segment matches."""
        resolver = DepartmentResolver({"/sites/Finance/"})
        assert resolver.resolve(FINANCE_URL) == "Finance"

    def test_whitelist_requires_full_segment(self):
        """Test that a partial segment name does not match."""
        resolver = DepartmentResolver({"/FinanceOps/"})
        assert resolver.resolve(FINANCE_URL) == UNRESOLVED_DEPARTMENT

    def test_depth_limit_six(self):
        """Test the stricter depth limit with a whitelist."""
        resolver = DepartmentResolver({"/Finance/"})
        at_limit = "https://x/sites/Finance/Shared Documents/a/b/c.pdf"
        too_deep = "https://x/sites/Finance/Shared Documents/a/b/c/d.pdf"
        assert resolver.resolve(at_limit) == "Finance"
        assert resolver.explain(too_deep).reason == "depth"


class TestHeuristicVariant:
    """Resolver without a whitelist."""

    def test_normalizes_department(self):
        """Test that the site segment is split into words."""
        resolver = DepartmentResolver()
        url = "https://tenant.sharepoint.com/sites/HumanResources/Shared Documents/Leave.pdf"
        assert resolver.resolve(url) == "Human Resources"

    def test_depth_limit_seven(self):
        """Test the looser depth limit without a whitelist."""
        resolver = DepartmentResolver()
        at_limit = "https://x/sites/Finance/Shared Documents/a/b/c/d.pdf"
        too_deep = "https://x/sites/Finance/Shared Documents/a/b/c/d/e.pdf"
        assert resolver.resolve(at_limit) == "Finance"
        assert resolver.explain(too_deep).reason == "depth"

    def test_percent_encoded_url(self):
        """Test that encoded library names are recognized."""
        resolver = DepartmentResolver()
        url = "https://x/sites/ITServices/Shared%20Documents/Password%20Policy.docx"
        assert resolver.resolve(url) == "IT Services"

    @pytest.mark.parametrize(
        "url",
        [
            "https://x/teams/Finance/Shared Documents/b.pdf",
            "https://x/sites/Finance/Documents/b.pdf",
            "https://x/sites/Finance/Archived Policies/Shared Documents/b.pdf",
            "",
            None,
        ],
    )
    def test_structural_rejections(self, url):
        """Test URLs outside a site's Shared Documents library."""
        resolution = DepartmentResolver().explain(url)
        assert not resolution.resolved
        assert resolution.department == UNRESOLVED_DEPARTMENT

    def test_markers_case_insensitive(self):
        """Test that marker matching ignores case."""
        url = "https://x/SITES/Finance/shared documents/b.pdf"
        assert DepartmentResolver().resolve(url) == "Finance"


def test_shared_normalizer_cache():
    """Test that a shared normalizer accumulates resolved segments."""
    normalizer = StringNormalizer()
    resolver = DepartmentResolver(normalizer=normalizer)
    resolver.resolve("https://x/sites/HumanResources/Shared Documents/a.pdf")
    resolver.resolve("https://x/sites/HumanResources/Shared Documents/b.pdf")
    assert normalizer.get_cache_size() == 1


def test_max_depth_per_variant():
    """Test the configured depth limits."""
    assert DepartmentResolver().max_depth == 7
    assert DepartmentResolver(set()).max_depth == 6
    assert not DepartmentResolver().whitelist_enabled
    assert DepartmentResolver(set()).whitelist_enabled
