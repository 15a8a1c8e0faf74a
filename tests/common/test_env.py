"""Tests for environment configuration interface."""

from pathlib import Path

from common.env import Environment, env


class TestEnvironment:
    """Tests for Environment class."""

    def test_site_url_default(self, monkeypatch):
        """Test site_url returns empty string when unset."""
        monkeypatch.delenv("SHAREPOINT_SITE_URL", raising=False)
        assert Environment.site_url() == ""

    def test_site_url_strips_trailing_slash(self, monkeypatch):
        """Test site_url drops a trailing slash."""
        monkeypatch.setenv("SHAREPOINT_SITE_URL", "https://tenant.sharepoint.com/sites/hub/")
        assert Environment.site_url() == "https://tenant.sharepoint.com/sites/hub"

    def test_access_token_from_env(self, monkeypatch):
        """Test access_token reads from environment."""
        monkeypatch.setenv("SHAREPOINT_ACCESS_TOKEN", "secret")
        assert Environment.access_token() == "secret"

    def test_list_name_default(self, monkeypatch):
        """Test list_name returns default value."""
        monkeypatch.delenv("SYNC_LIST_NAME", raising=False)
        assert Environment.list_name() == "Policies and Procedures"

    def test_list_name_from_env(self, monkeypatch):
        """Test list_name reads from environment."""
        monkeypatch.setenv("SYNC_LIST_NAME", "Staff Policies")
        assert Environment.list_name() == "Staff Policies"

    def test_search_query_default_mentions_policy(self, monkeypatch):
        """Test default search query targets policy and procedure documents."""
        monkeypatch.delenv("SYNC_SEARCH_QUERY", raising=False)
        query = Environment.search_query()
        assert "policy" in query
        assert "procedure" in query

    def test_whitelist_path_default_is_none(self, monkeypatch):
        """Test whitelist is disabled when unset."""
        monkeypatch.delenv("SYNC_WHITELIST_PATH", raising=False)
        assert Environment.whitelist_path() is None

    def test_whitelist_path_from_env(self, monkeypatch):
        """Test whitelist_path reads from environment."""
        monkeypatch.setenv("SYNC_WHITELIST_PATH", "/etc/sync/departments.txt")
        assert Environment.whitelist_path() == Path("/etc/sync/departments.txt")

    def test_upsert_policy_default(self, monkeypatch):
        """Test upsert_policy defaults to change_gated."""
        monkeypatch.delenv("SYNC_UPSERT_POLICY", raising=False)
        assert Environment.upsert_policy() == "change_gated"

    def test_sync_mode_default(self, monkeypatch):
        """Test sync_mode defaults to patch."""
        monkeypatch.delenv("SYNC_MODE", raising=False)
        assert Environment.sync_mode() == "patch"

    def test_allowed_extensions_default(self, monkeypatch):
        """Test allowed_extensions default set."""
        monkeypatch.delenv("SYNC_ALLOWED_EXTENSIONS", raising=False)
        assert Environment.allowed_extensions() == (".pdf", ".doc", ".docx")

    def test_allowed_extensions_from_env(self, monkeypatch):
        """Test extensions are lowercased and dotted."""
        monkeypatch.setenv("SYNC_ALLOWED_EXTENSIONS", "PDF, .docx,,xlsx")
        assert Environment.allowed_extensions() == (".pdf", ".docx", ".xlsx")

    def test_search_row_limit_default(self, monkeypatch):
        """Test search_row_limit returns default value."""
        monkeypatch.delenv("SEARCH_ROW_LIMIT", raising=False)
        assert Environment.search_row_limit() == 500

    def test_search_row_limit_from_env(self, monkeypatch):
        """Test search_row_limit reads from environment."""
        monkeypatch.setenv("SEARCH_ROW_LIMIT", "100")
        assert Environment.search_row_limit() == 100

    def test_requests_per_minute_default(self, monkeypatch):
        """Test requests_per_minute returns default value."""
        monkeypatch.delenv("REQUESTS_PER_MINUTE", raising=False)
        assert Environment.requests_per_minute() == 600

    def test_list_store_type_default(self, monkeypatch):
        """Test list_store_type defaults to sharepoint."""
        monkeypatch.delenv("LIST_STORE_TYPE", raising=False)
        assert Environment.list_store_type() == "sharepoint"

    def test_list_store_path_default(self, monkeypatch):
        """Test list_store_path returns default value."""
        monkeypatch.delenv("LIST_STORE_PATH", raising=False)
        assert str(Environment.list_store_path()) == "data/policy_list.db"


class TestEnvSingleton:
    """Tests for env singleton instance."""

    def test_env_is_environment_instance(self):
        """Test that env is an instance of Environment."""
        assert isinstance(env, Environment)

    def test_env_singleton_methods_work(self, monkeypatch):
        """Test that env singleton methods work."""
        monkeypatch.setenv("SYNC_MODE", "rebuild")
        assert env.sync_mode() == "rebuild"
