"""Remote collaborators: session, search service and list stores.

Example:
    >>> from sharepoint import SharePointSession, SharePointSearchService
    >>>
    >>> with SharePointSession(site_url, token) as session:
    ...     search = SharePointSearchService(session)
    ...     for row in search.query("Title:policy"):
    ...         print(row.title)
"""

from .factory import StoreConfig, StoreType, create_list_store
from .interface import ListStore, SearchService
from .list_client import SharePointListStore
from .search_client import SharePointSearchService
from .session import SharePointSession
from .sqlite_store import SQLiteListStore
from .types import (
    ConnectionError,
    ListItem,
    RequestError,
    SearchError,
    SearchResultRow,
    StoreError,
    SyncError,
    ThrottledError,
)

__all__ = [
    # Factory
    "StoreConfig",
    "StoreType",
    "create_list_store",
    # Interfaces
    "ListStore",
    "SearchService",
    # Implementations
    "SharePointListStore",
    "SharePointSearchService",
    "SharePointSession",
    "SQLiteListStore",
    # Records and exceptions
    "ListItem",
    "SearchResultRow",
    "SyncError",
    "ConnectionError",
    "RequestError",
    "ThrottledError",
    "SearchError",
    "StoreError",
]
