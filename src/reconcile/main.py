"""Wire collaborators together and run one reconciliation.

run_sync() is the single place that opens the site session; the session is
a context manager, so it is closed whether the run succeeds or aborts.
"""

from dataclasses import dataclass, field
from pathlib import Path

from common.env import env
from common.logger import get_logger
from sharepoint import (
    SharePointSearchService,
    SharePointSession,
    StoreConfig,
    create_list_store,
)

from .engine import Reconciler
from .models import SyncOptions, SyncReport
from .whitelist import DepartmentWhitelist

logger = get_logger(__name__)


@dataclass
class RunConfig:
    """Everything a run needs, already resolved from env and CLI flags."""

    site_url: str
    access_token: str
    list_name: str
    search_query: str
    whitelist_path: Path | None = None
    options: SyncOptions = field(default_factory=SyncOptions)
    store: StoreConfig = field(default_factory=lambda: StoreConfig(store_type="sharepoint"))
    row_limit: int = 500
    requests_per_minute: int = 600

    @classmethod
    def from_env(cls) -> "RunConfig":
        """Build a configuration from environment variables."""
        return cls(
            site_url=env.site_url(),
            access_token=env.access_token(),
            list_name=env.list_name(),
            search_query=env.search_query(),
            whitelist_path=env.whitelist_path(),
            options=SyncOptions(
                upsert_policy=env.upsert_policy(),
                mode=env.sync_mode(),
                allowed_extensions=env.allowed_extensions(),
            ),
            store=StoreConfig(
                store_type=env.list_store_type(),
                db_path=env.list_store_path(),
            ),
            row_limit=env.search_row_limit(),
            requests_per_minute=env.requests_per_minute(),
        )


def load_whitelist(path: Path | None) -> set[str] | None:
    """Load the department whitelist, or None when whitelisting is disabled."""
    if path is None:
        logger.info("No department whitelist configured, using depth heuristics only")
        return None
    return DepartmentWhitelist(path).load()


def run_sync(config: RunConfig) -> SyncReport:
    """Connect, reconcile the configured list, and disconnect.

    Args:
        config: Resolved run configuration

    Returns:
        Report of the run

    Raises:
        ConnectionError: If the session cannot be established
        SearchError: If the search query fails
        StoreError: If the list cannot be enumerated
        FileNotFoundError: If the whitelist file is missing
    """
    whitelist = load_whitelist(config.whitelist_path)

    with SharePointSession(
        config.site_url,
        config.access_token,
        requests_per_minute=config.requests_per_minute,
    ) as session:
        search_service = SharePointSearchService(session, row_limit=config.row_limit)
        list_store = create_list_store(config.store, session)
        try:
            reconciler = Reconciler(search_service, list_store, whitelist, config.options)
            report = reconciler.reconcile(config.list_name, config.search_query)
        finally:
            list_store.close()

    report.log_summary(logger)
    return report
