"""Abstract collaborator interfaces used by the reconciler.

The reconciler only talks to these two interfaces, so any search backend or
list backend can be plugged in without touching reconciliation logic.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any

from .types import ListItem, SearchResultRow


class SearchService(ABC):
    """Query executor for the document search index."""

    @abstractmethod
    def query(
        self, query_text: str, options: dict[str, Any] | None = None
    ) -> Iterator[SearchResultRow]:
        """Run a query and yield result rows in ranking order.

        Args:
            query_text: Query string in the backend's query language
            options: Extra backend-specific query parameters

        Returns:
            Iterator of result rows, duplicates trimmed

        Raises:
            SearchError: If the query cannot be executed
        """
        pass


class ListStore(ABC):
    """CRUD access to a list of tracked documents."""

    @abstractmethod
    def find_by_title(self, list_id: str, title: str) -> ListItem | None:
        """Find an item by exact title.

        Args:
            list_id: List identifier (title of the list)
            title: Exact item title

        Returns:
            Matching item, or None if not found

        Raises:
            StoreError: If the lookup fails
        """
        pass

    @abstractmethod
    def upsert(self, list_id: str, item: ListItem) -> ListItem:
        """Insert item when item_id is None, otherwise update it in place.

        Returns:
            The stored item, with item_id set

        Raises:
            StoreError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, list_id: str, item_id: int) -> None:
        """Delete an item.

        Raises:
            StoreError: If the delete fails
        """
        pass

    @abstractmethod
    def enumerate_all(self, list_id: str) -> Iterator[ListItem]:
        """Yield every item in the list.

        Raises:
            StoreError: If the list cannot be read
        """
        pass

    def close(self) -> None:
        """Release resources held by the store (no-op by default)."""
        pass
