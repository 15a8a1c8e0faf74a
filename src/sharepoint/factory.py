"""Factory for list store backends.

This module provides a configuration class and factory function for creating
the list store a run writes to: the live SharePoint list or a local SQLite file.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .interface import ListStore
from .list_client import SharePointListStore
from .session import SharePointSession
from .sqlite_store import SQLiteListStore


class StoreType(str, Enum):
    """Supported list store backends."""

    SHAREPOINT = "sharepoint"
    SQLITE = "sqlite"


@dataclass
class StoreConfig:
    """List store configuration container.

    Attributes:
        store_type: Backend ('sharepoint' or 'sqlite')
        db_path: Path to SQLite file (for SQLite only)
        page_size: Enumeration page size (for SharePoint only)
    """

    store_type: StoreType | str
    db_path: Path | None = None
    page_size: int = 2000

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.store_type, str):
            try:
                self.store_type = StoreType(self.store_type.lower())
            except ValueError as e:
                raise ValueError(
                    f"Unsupported list store type: {self.store_type}. "
                    f"Must be one of: {', '.join(t.value for t in StoreType)}"
                ) from e

        if self.store_type == StoreType.SQLITE:
            if self.db_path is None:
                raise ValueError("db_path is required for SQLite")
            if isinstance(self.db_path, str):
                self.db_path = Path(self.db_path)


def create_list_store(config: StoreConfig, session: SharePointSession | None = None) -> ListStore:
    """Create the list store described by config.

    SQLite stores are returned already connected; the caller closes them.

    Args:
        config: Store configuration
        session: Connected session (required for SharePoint)

    Returns:
        ListStore instance

    Raises:
        ValueError: If a SharePoint store is requested without a session
    """
    if config.store_type == StoreType.SQLITE:
        store = SQLiteListStore(config.db_path)
        store.connect()
        return store

    if session is None:
        raise ValueError("A connected session is required for the SharePoint list store")
    return SharePointListStore(session, page_size=config.page_size)
