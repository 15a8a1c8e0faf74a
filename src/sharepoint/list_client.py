"""SharePoint list REST client."""

from collections.abc import Iterator
from typing import Any

from rich.markup import escape

from common.constants import LIST_FIELDS
from common.logger import get_logger

from .interface import ListStore
from .session import SharePointSession
from .types import ListItem, RequestError, StoreError

logger = get_logger(__name__)


def _odata_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class SharePointListStore(ListStore):
    """List CRUD through /_api/web/lists/getbytitle('...')/items.

    Updates use MERGE so columns outside LIST_FIELDS are left alone.
    """

    def __init__(self, session: SharePointSession, page_size: int = 2000):
        """Initialize list client.

        Args:
            session: Connected site session
            page_size: $top used when enumerating the list
        """
        self.session = session
        self.page_size = page_size
        self._select = ",".join(["Id", *LIST_FIELDS.values()])

    def _items_path(self, list_id: str) -> str:
        return f"/_api/web/lists/getbytitle({_odata_literal(list_id)})/items"

    def _item_path(self, list_id: str, item_id: int) -> str:
        return f"{self._items_path(list_id)}({item_id})"

    @staticmethod
    def _to_item(data: dict[str, Any]) -> ListItem:
        return ListItem.from_fields(data, item_id=data.get("Id"))

    def find_by_title(self, list_id: str, title: str) -> ListItem | None:
        # OData eq on text ignores case, so candidates are re-checked exactly
        params = {
            "$select": self._select,
            "$filter": f"Title eq {_odata_literal(title)}",
        }
        try:
            data = self.session.request("GET", self._items_path(list_id), params=params)
        except RequestError as e:
            raise StoreError(f"Lookup of '{title}' in '{list_id}' failed: {e}") from e

        for entry in (data or {}).get("value", []):
            if entry.get("Title") == title:
                return self._to_item(entry)
        return None

    def upsert(self, list_id: str, item: ListItem) -> ListItem:
        fields = item.to_fields()
        try:
            if item.item_id is None:
                data = self.session.request("POST", self._items_path(list_id), json=fields)
                created_id = (data or {}).get("Id")
                if created_id is None:
                    raise StoreError(f"Insert of '{item.title}' returned no item id")
                logger.debug(f"Inserted '{escape(item.title)}' as item {created_id}")
                return item.with_id(created_id)

            self.session.request(
                "POST",
                self._item_path(list_id, item.item_id),
                json=fields,
                headers={"X-HTTP-Method": "MERGE", "IF-MATCH": "*"},
            )
            logger.debug(f"Updated item {item.item_id} ('{escape(item.title)}')")
            return item
        except RequestError as e:
            raise StoreError(f"Write of '{item.title}' to '{list_id}' failed: {e}") from e

    def delete(self, list_id: str, item_id: int) -> None:
        try:
            self.session.request(
                "POST",
                self._item_path(list_id, item_id),
                headers={"X-HTTP-Method": "DELETE", "IF-MATCH": "*"},
            )
        except RequestError as e:
            raise StoreError(f"Delete of item {item_id} from '{list_id}' failed: {e}") from e

    def enumerate_all(self, list_id: str) -> Iterator[ListItem]:
        path: str | None = self._items_path(list_id)
        params: dict[str, Any] | None = {"$select": self._select, "$top": self.page_size}

        while path:
            try:
                data = self.session.request("GET", path, params=params) or {}
            except RequestError as e:
                raise StoreError(f"Reading list '{list_id}' failed: {e}") from e

            for entry in data.get("value", []):
                yield self._to_item(entry)

            # Paging links already carry the query string
            path = data.get("odata.nextLink")
            params = None
