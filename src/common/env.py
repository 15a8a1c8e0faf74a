"""Environment configuration interface for policy-list-sync.

All environment variable access goes through this module. Values can also be
supplied through a .env file in the working directory.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from .constants import (
    DEFAULT_ALLOWED_EXTENSIONS,
    DEFAULT_LIST_NAME,
    DEFAULT_SEARCH_QUERY,
    DEFAULT_SEARCH_ROW_LIMIT,
)

load_dotenv()


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def site_url() -> str:
        """Get the root site URL that hosts the target list and search endpoint.

        Returns:
            Site URL without trailing slash, defaults to empty string
        """
        return os.getenv("SHAREPOINT_SITE_URL", "").rstrip("/")

    @staticmethod
    def access_token() -> str:
        """Get the bearer token used for REST calls.

        Returns:
            Access token, defaults to empty string
        """
        return os.getenv("SHAREPOINT_ACCESS_TOKEN", "")

    @staticmethod
    def list_name() -> str:
        """Get the title of the list being reconciled.

        Returns:
            List title, defaults to 'Policies and Procedures'
        """
        return os.getenv("SYNC_LIST_NAME", DEFAULT_LIST_NAME)

    @staticmethod
    def search_query() -> str:
        """Get the search query text (KQL).

        Returns:
            Query text, defaults to the policy/procedure document query
        """
        return os.getenv("SYNC_SEARCH_QUERY", DEFAULT_SEARCH_QUERY)

    @staticmethod
    def whitelist_path() -> Path | None:
        """Get the department whitelist file path.

        Returns:
            Path to the whitelist file, or None when the whitelist is disabled
        """
        value = os.getenv("SYNC_WHITELIST_PATH", "")
        return Path(value) if value else None

    @staticmethod
    def upsert_policy() -> str:
        """Get the upsert policy (unconditional or change_gated).

        Returns:
            Upsert policy name, defaults to 'change_gated'
        """
        return os.getenv("SYNC_UPSERT_POLICY", "change_gated")

    @staticmethod
    def sync_mode() -> str:
        """Get the reconciliation mode (patch or rebuild).

        Returns:
            Mode name, defaults to 'patch'
        """
        return os.getenv("SYNC_MODE", "patch")

    @staticmethod
    def allowed_extensions() -> tuple[str, ...]:
        """Get the document extensions accepted from search results.

        Returns:
            Tuple of lowercase extensions with leading dot
        """
        raw = os.getenv("SYNC_ALLOWED_EXTENSIONS", "")
        if not raw:
            return DEFAULT_ALLOWED_EXTENSIONS
        extensions = []
        for ext in raw.split(","):
            ext = ext.strip().lower()
            if ext:
                extensions.append(ext if ext.startswith(".") else f".{ext}")
        return tuple(extensions)

    @staticmethod
    def search_row_limit() -> int:
        """Get the page size used when paging search results.

        Returns:
            Rows per page, defaults to 500
        """
        return int(os.getenv("SEARCH_ROW_LIMIT", str(DEFAULT_SEARCH_ROW_LIMIT)))

    @staticmethod
    def requests_per_minute() -> int:
        """Get the REST call budget per minute.

        Returns:
            Requests per minute, defaults to 600
        """
        return int(os.getenv("REQUESTS_PER_MINUTE", "600"))

    @staticmethod
    def list_store_type() -> str:
        """Get the list store backend (sharepoint or sqlite).

        Returns:
            Store type, defaults to 'sharepoint'
        """
        return os.getenv("LIST_STORE_TYPE", "sharepoint")

    @staticmethod
    def list_store_path() -> Path:
        """Get the SQLite list store file path.

        Returns:
            Path to SQLite file, defaults to ./data/policy_list.db
        """
        return Path(os.getenv("LIST_STORE_PATH", "./data/policy_list.db"))


# Singleton instance for convenient access
env = Environment()
