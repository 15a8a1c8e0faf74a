"""Shared records and exceptions for the remote collaborator layer."""

from dataclasses import dataclass, replace
from typing import Any

from common.constants import LIST_FIELDS


@dataclass(frozen=True)
class SearchResultRow:
    """One document reported by the search service."""

    title: str
    path: str
    last_modified_time: str
    author: str = ""
    category: str = ""


@dataclass
class ListItem:
    """One entry of the tracking list.

    title is the only identity key; item_id is assigned by the store and is
    None until the item has been inserted.
    """

    title: str
    document_link: str
    category: str
    department: str
    last_modified: str
    document_author: str
    item_id: int | None = None

    def to_fields(self) -> dict[str, str]:
        """Map to the list's internal column names (item_id excluded)."""
        return {column: getattr(self, attr) for attr, column in LIST_FIELDS.items()}

    @classmethod
    def from_fields(cls, fields: dict[str, Any], item_id: int | None = None) -> "ListItem":
        """Build an item from a row keyed by internal column names."""
        values = {attr: fields.get(column) or "" for attr, column in LIST_FIELDS.items()}
        return cls(item_id=item_id, **values)

    def with_id(self, item_id: int) -> "ListItem":
        return replace(self, item_id=item_id)


class SyncError(Exception):
    """Base exception for collaborator failures."""

    pass


class ConnectionError(SyncError):
    """Session could not be established."""

    pass


class RequestError(SyncError):
    """A REST call failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ThrottledError(RequestError):
    """Still throttled after all retries."""

    pass


class SearchError(SyncError):
    """Search query failed (transport, auth or query syntax)."""

    pass


class StoreError(SyncError):
    """A list read or write failed."""

    pass
