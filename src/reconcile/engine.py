"""Reconciliation of the tracking list against the search index.

One run:

1. query search and materialize every result row,
2. keep rows whose URL has an allowed document extension,
3. derive category, department and author for each row; rows whose
   department cannot be resolved are skipped,
4. upsert each remaining row by title,
5. delete list items whose title was not produced by step 4.

Step 5 only trusts titles that made it through steps 2-4, so a skipped row
never keeps a stale list item of the same title alive.
"""

from collections.abc import Iterable

from rich.markup import escape

from common.logger import get_logger
from derive import (
    DepartmentResolver,
    StringNormalizer,
    classify_category,
    format_authors,
)
from sharepoint.interface import ListStore, SearchService
from sharepoint.types import ListItem, SearchResultRow, StoreError

from .models import (
    MalformedTimestamp,
    SyncMode,
    SyncOptions,
    SyncReport,
    UpsertPolicy,
    parse_timestamp,
)

logger = get_logger(__name__)

CREATED = "created"
UPDATED = "updated"
UNCHANGED = "unchanged"


class Reconciler:
    """Bring one list in line with the current search results.

    The reconciler owns the per-run caches (normalizer memo, whitelist), so
    build a fresh instance for every run. Runs against the same list must not
    overlap; nothing here locks the list.
    """

    def __init__(
        self,
        search_service: SearchService,
        list_store: ListStore,
        whitelist: Iterable[str] | None = None,
        options: SyncOptions | None = None,
    ):
        """Initialize reconciler.

        Args:
            search_service: Search index collaborator
            list_store: Target list collaborator
            whitelist: Approved department segments, or None for the heuristic variant
            options: Run options (defaults: change-gated patch run)
        """
        self.search_service = search_service
        self.list_store = list_store
        self.options = options or SyncOptions()
        self.normalizer = StringNormalizer()
        self.resolver = DepartmentResolver(whitelist, normalizer=self.normalizer)

    def reconcile(self, target_list: str, search_query: str) -> SyncReport:
        """Run one reconciliation.

        Args:
            target_list: List identifier passed to the store
            search_query: Query passed to the search service

        Returns:
            Report of created/updated/unchanged/deleted/skipped items and row errors

        Raises:
            SearchError: If the query fails (nothing is written)
            StoreError: If the list cannot be enumerated
        """
        options = self.options
        report = SyncReport(target_list=target_list, dry_run=options.dry_run)

        logger.info(
            f"Reconciling [bold]{escape(target_list)}[/bold] "
            f"(mode={options.mode.value}, policy={options.upsert_policy.value}, "
            f"whitelist={'on' if self.resolver.whitelist_enabled else 'off'}"
            f"{', dry run' if options.dry_run else ''})"
        )

        rows = list(self.search_service.query(search_query))
        report.results_seen = len(rows)
        logger.info(f"Search returned [bold]{len(rows)}[/bold] document(s)")

        if options.mode == SyncMode.REBUILD:
            surviving = self._clear_list(target_list, report)
            self._rebuild(target_list, rows, report, surviving)
        else:
            valid_titles = self._patch(target_list, rows, report)
            self._delete_obsolete(target_list, valid_titles, report)

        report.finish()
        return report

    def derive_item(
        self, row: SearchResultRow, report: SyncReport | None = None
    ) -> ListItem | None:
        """Turn a search row into a list item, or None if the row is excluded.

        Args:
            row: Search result row
            report: Report whose skip counters are incremented (optional)

        Returns:
            ListItem without item_id, or None for skipped rows
        """
        if not self._has_allowed_extension(row.path):
            logger.debug(
                f"Skipping '{escape(row.title)}': extension not allowed ({escape(row.path)})"
            )
            if report:
                report.skipped_extension += 1
            return None

        resolution = self.resolver.explain(row.path)
        if not resolution.resolved:
            logger.warning(
                f"Unresolved department ({resolution.reason}) for "
                f"'{escape(row.title)}': {escape(row.path)}"
            )
            if report:
                report.skipped_department += 1
            return None

        return ListItem(
            title=row.title,
            document_link=row.path,
            category=classify_category(row.title),
            department=resolution.department,
            last_modified=row.last_modified_time,
            document_author=format_authors(row.author),
        )

    def _has_allowed_extension(self, path: str) -> bool:
        return path.lower().endswith(self.options.allowed_extensions)

    def _patch(self, target_list: str, rows: list[SearchResultRow], report: SyncReport) -> set[str]:
        """Upsert every valid row; return the titles that protect list items."""
        valid_titles: set[str] = set()
        # Items a dry run would have written, so repeated titles see them
        pending: dict[str, ListItem] = {}

        for row in rows:
            item = self.derive_item(row, report)
            if item is None:
                continue

            # A row that fails here still names a live document, so its
            # list item is kept rather than deleted.
            valid_titles.add(item.title)

            try:
                outcome = self._upsert(target_list, item, pending)
            except MalformedTimestamp as e:
                logger.error(f"Timestamp check failed for '{escape(item.title)}': {escape(str(e))}")
                report.add_error(item.title, "timestamp", str(e))
                continue
            except StoreError as e:
                logger.error(f"Upsert failed for '{escape(item.title)}': {escape(str(e))}")
                report.add_error(item.title, "upsert", str(e))
                continue

            self._count(outcome, report)
            logger.debug(f"{outcome.capitalize()}: {escape(item.title)}")

        return valid_titles

    def _upsert(self, target_list: str, item: ListItem, pending: dict[str, ListItem]) -> str:
        existing = pending.get(item.title)
        if existing is None:
            existing = self.list_store.find_by_title(target_list, item.title)

        if existing is None:
            self._write(target_list, item, pending)
            return CREATED

        if self.options.upsert_policy == UpsertPolicy.CHANGE_GATED:
            incoming = parse_timestamp(item.last_modified, "incoming")
            current = parse_timestamp(existing.last_modified, "existing")
            if incoming <= current:
                return UNCHANGED

        self._write(target_list, item.with_id(existing.item_id), pending)
        return UPDATED

    def _write(self, target_list: str, item: ListItem, pending: dict[str, ListItem]) -> None:
        if self.options.dry_run:
            pending[item.title] = item
        else:
            self.list_store.upsert(target_list, item)

    def _delete_obsolete(
        self, target_list: str, valid_titles: set[str], report: SyncReport
    ) -> None:
        existing = list(self.list_store.enumerate_all(target_list))
        obsolete = [item for item in existing if item.title not in valid_titles]

        if obsolete:
            logger.info(f"Removing {len(obsolete)} obsolete item(s)")

        for item in obsolete:
            self._delete(target_list, item, report)

    def _clear_list(self, target_list: str, report: SyncReport) -> dict[str, int]:
        """Delete every item; return title -> item_id of items that survived."""
        existing = list(self.list_store.enumerate_all(target_list))
        logger.info(f"Clearing {len(existing)} item(s) before rebuild")
        surviving: dict[str, int] = {}
        for item in existing:
            if not self._delete(target_list, item, report):
                surviving.setdefault(item.title, item.item_id)
        return surviving

    def _delete(self, target_list: str, item: ListItem, report: SyncReport) -> bool:
        if not self.options.dry_run:
            try:
                self.list_store.delete(target_list, item.item_id)
            except StoreError as e:
                logger.error(f"Delete failed for '{escape(item.title)}': {escape(str(e))}")
                report.add_error(item.title, "delete", str(e))
                return False

        report.deleted += 1
        report.deleted_titles.append(item.title)
        logger.debug(f"Deleted: {escape(item.title)}")
        return True

    def _rebuild(
        self,
        target_list: str,
        rows: list[SearchResultRow],
        report: SyncReport,
        surviving: dict[str, int],
    ) -> None:
        """Insert every valid row into the cleared list.

        Titles stay unique: a title seen twice overwrites the item inserted
        earlier in this run, and a title whose item survived the clear
        updates that item.
        """
        inserted: dict[str, int | None] = dict(surviving)

        for row in rows:
            item = self.derive_item(row, report)
            if item is None:
                continue

            if item.title in inserted:
                item = item.with_id(inserted[item.title])
                outcome = UPDATED
            else:
                outcome = CREATED

            if not self.options.dry_run:
                try:
                    stored = self.list_store.upsert(target_list, item)
                except StoreError as e:
                    logger.error(f"Insert failed for '{escape(item.title)}': {escape(str(e))}")
                    report.add_error(item.title, "upsert", str(e))
                    continue
                inserted[item.title] = stored.item_id
            else:
                inserted[item.title] = None

            self._count(outcome, report)

    @staticmethod
    def _count(outcome: str, report: SyncReport) -> None:
        if outcome == CREATED:
            report.created += 1
        elif outcome == UPDATED:
            report.updated += 1
        else:
            report.unchanged += 1
