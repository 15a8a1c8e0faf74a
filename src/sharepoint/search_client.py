"""SharePoint search REST client."""

from collections.abc import Iterator
from datetime import datetime
from typing import Any

from common.constants import DEFAULT_SEARCH_ROW_LIMIT, SEARCH_SELECT_PROPERTIES, TIMESTAMP_FORMAT
from common.logger import get_logger

from .interface import SearchService
from .session import SharePointSession
from .types import RequestError, SearchError, SearchResultRow

logger = get_logger(__name__)


def _quote(value: str) -> str:
    """Wrap a value in single quotes for a REST query parameter."""
    return "'" + value.replace("'", "''") + "'"


def format_search_timestamp(value: str | None) -> str:
    """Convert a search LastModifiedTime into the list timestamp format.

    Search returns ISO-8601 with up to seven fractional digits and a 'Z'
    suffix (e.g. '2024-01-02T08:30:00.0000000Z'). Values that cannot be
    parsed are returned unchanged so the change check can report them.

    Example:
        >>> format_search_timestamp("2024-01-02T08:30:00.0000000Z")
        '01/02/2024 08:30:00'
    """
    if not value:
        return ""
    main = value.rstrip("Z").split(".", 1)[0]
    try:
        return datetime.fromisoformat(main).strftime(TIMESTAMP_FORMAT)
    except ValueError:
        logger.debug(f"Unrecognized search timestamp: {value!r}")
        return value


class SharePointSearchService(SearchService):
    """Search index client using the /_api/search/query endpoint.

    Results are paged with startrow/rowlimit until TotalRows is reached;
    callers see one flat sequence.

    API Documentation:
        https://learn.microsoft.com/sharepoint/dev/general-development/sharepoint-search-rest-api-overview
    """

    SEARCH_PATH = "/_api/search/query"

    def __init__(
        self,
        session: SharePointSession,
        row_limit: int = DEFAULT_SEARCH_ROW_LIMIT,
        select_properties: tuple[str, ...] = SEARCH_SELECT_PROPERTIES,
    ):
        """Initialize search client.

        Args:
            session: Connected site session
            row_limit: Rows requested per page (search caps this at 500)
            select_properties: Managed properties to return
        """
        self.session = session
        self.row_limit = row_limit
        self.select_properties = select_properties

    def query(
        self, query_text: str, options: dict[str, Any] | None = None
    ) -> Iterator[SearchResultRow]:
        """Yield every row matching query_text, duplicates trimmed.

        Args:
            query_text: KQL query
            options: Extra query parameters (e.g. {'sourceid': "'...'"})

        Raises:
            SearchError: If any page request fails or the response is malformed
        """
        start_row = 0
        page = 0
        while True:
            params: dict[str, Any] = {
                "querytext": _quote(query_text),
                "selectproperties": _quote(",".join(self.select_properties)),
                "rowlimit": self.row_limit,
                "startrow": start_row,
                "trimduplicates": "true",
            }
            if options:
                params.update(options)

            try:
                data = self.session.request("GET", self.SEARCH_PATH, params=params)
            except RequestError as e:
                raise SearchError(f"Search query failed: {e}") from e

            try:
                relevant = data["PrimaryQueryResult"]["RelevantResults"]
                rows = relevant["Table"]["Rows"]
                total_rows = int(relevant.get("TotalRows", 0))
            except (KeyError, TypeError, ValueError) as e:
                raise SearchError(f"Unexpected search response shape: {e}") from e

            page += 1
            logger.debug(f"Search page {page}: {len(rows)} row(s), {total_rows} total")

            for row in rows:
                yield self._to_row(row)

            start_row += len(rows)
            if not rows or start_row >= total_rows:
                break

    @staticmethod
    def _to_row(row: dict[str, Any]) -> SearchResultRow:
        cells = {cell.get("Key"): cell.get("Value") for cell in row.get("Cells", [])}
        return SearchResultRow(
            title=cells.get("Title") or "",
            path=cells.get("Path") or "",
            last_modified_time=format_search_timestamp(cells.get("LastModifiedTime")),
            author=cells.get("Author") or "",
            category=cells.get("Category") or "",
        )
