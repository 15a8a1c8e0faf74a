"""Department resolution from document URLs.

A document's department is the site it lives in:

    https://tenant/sites/HumanResources/Shared Documents/Leave Policy.pdf
                         ^^^^^^^^^^^^^^ -> "Human Resources"

A URL is accepted only when it passes, in order:

1. structure: it is inside a site's "Shared Documents" library and nothing
   in it mentions an archive,
2. whitelist: the site segment is an approved department (only when a
   whitelist is configured),
3. depth: its path is not nested deeper than the variant allows.

Anything else resolves to UNRESOLVED_DEPARTMENT, which callers must treat as
"leave this document out of the list".
"""

from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import unquote, urlparse

from common.constants import (
    ARCHIVE_MARKER,
    LIBRARY_MARKER,
    MAX_DEPTH_WITH_WHITELIST,
    MAX_DEPTH_WITHOUT_WHITELIST,
    SITE_MARKER,
)

from .text import StringNormalizer

UNRESOLVED_DEPARTMENT = "Unknown"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one URL.

    Attributes:
        department: Normalized department name, or UNRESOLVED_DEPARTMENT
        reason: Why the URL was rejected ('structure', 'archived', 'whitelist',
                'depth'), or None when resolved
    """

    department: str
    reason: str | None = None

    @property
    def resolved(self) -> bool:
        return self.reason is None


class DepartmentResolver:
    """Validate document URLs and extract their department.

    Passing a whitelist (even an empty one) selects the whitelist variant with
    the stricter depth limit. Passing None selects the heuristic variant that
    relies on structure and depth alone.
    """

    def __init__(
        self,
        whitelist: Iterable[str] | None = None,
        normalizer: StringNormalizer | None = None,
    ):
        """Initialize resolver.

        Args:
            whitelist: Approved site segments wrapped in slashes (e.g. '/Finance/'),
                       or None to disable whitelisting
            normalizer: Shared normalizer (a private one is created if None)
        """
        self.whitelist: frozenset[str] | None = (
            frozenset(whitelist) if whitelist is not None else None
        )
        self.normalizer = normalizer or StringNormalizer()

    @property
    def whitelist_enabled(self) -> bool:
        return self.whitelist is not None

    @property
    def max_depth(self) -> int:
        if self.whitelist_enabled:
            return MAX_DEPTH_WITH_WHITELIST
        return MAX_DEPTH_WITHOUT_WHITELIST

    def resolve(self, url: str | None) -> str:
        """Resolve a URL to a department name or UNRESOLVED_DEPARTMENT."""
        return self.explain(url).department

    def explain(self, url: str | None) -> Resolution:
        """Resolve a URL and report which check rejected it, if any.

        Args:
            url: Document URL as reported by search

        Returns:
            Resolution with the department name or the rejection reason
        """
        if not url:
            return Resolution(UNRESOLVED_DEPARTMENT, "structure")

        decoded = unquote(url)
        lowered = decoded.lower()

        if SITE_MARKER not in lowered or LIBRARY_MARKER not in lowered:
            return Resolution(UNRESOLVED_DEPARTMENT, "structure")
        if ARCHIVE_MARKER in lowered:
            return Resolution(UNRESOLVED_DEPARTMENT, "archived")

        segment = self._site_segment(decoded, lowered)
        if not segment:
            return Resolution(UNRESOLVED_DEPARTMENT, "structure")

        if self.whitelist is not None and not self._is_whitelisted(segment):
            return Resolution(UNRESOLVED_DEPARTMENT, "whitelist")

        if self._depth(url) > self.max_depth:
            return Resolution(UNRESOLVED_DEPARTMENT, "depth")

        return Resolution(self.normalizer.normalize(segment))

    def _site_segment(self, decoded: str, lowered: str) -> str:
        start = lowered.index(SITE_MARKER) + len(SITE_MARKER)
        return decoded[start:].split("/", 1)[0]

    def _is_whitelisted(self, segment: str) -> bool:
        wrapped = f"/{segment}/"
        return any(wrapped in entry for entry in self.whitelist)

    @staticmethod
    def _depth(url: str) -> int:
        # Only the path counts; the scheme and host separators are ignored
        return unquote(urlparse(url).path).count("/")
