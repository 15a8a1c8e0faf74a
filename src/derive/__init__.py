"""Derive normalized list metadata from search result fields."""

from .authors import format_authors
from .category import classify_category
from .department import UNRESOLVED_DEPARTMENT, DepartmentResolver, Resolution
from .text import StringNormalizer

__all__ = [
    "format_authors",
    "classify_category",
    "DepartmentResolver",
    "Resolution",
    "UNRESOLVED_DEPARTMENT",
    "StringNormalizer",
]
