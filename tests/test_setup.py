"""
Smoke tests to verify project setup
Tests configuration and database connectivity
"""

import pytest

from commentlens.app.config import (
    Config,
    get_config,
    reload_config,
    reset_config,
    validate_config,
)
from commentlens.app.database import DatabaseManager


class TestConfiguration:
    """Test configuration system"""

    def test_config_loads(self):
        config = get_config()
        assert config is not None
        assert config.api.port == 8000

    def test_config_is_singleton(self):
        assert get_config() is get_config()

    def test_reset_config_builds_new_instance(self):
        first = get_config()
        reset_config()
        assert get_config() is not first

    def test_defaults(self):
        config = get_config()

        assert config.analysis.max_comments == 200
        assert config.youtube_api.comments_page_size == 100
        assert config.youtube_api.comment_order == "relevance"
        assert config.youtube_api.text_format == "plainText"
        assert config.youtube_api.request_timeout is None
        assert config.accounts.starting_credits == 2
        assert config.gemini.model == "gemini-2.5-flash"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ANALYSIS_MAX_COMMENTS", "50")
        monkeypatch.setenv("ACCOUNT_STARTING_CREDITS", "5")

        config = reload_config()

        assert config.analysis.max_comments == 50
        assert config.accounts.starting_credits == 5

    def test_api_keys_from_env(self):
        config = get_config()
        assert config.youtube_api_key == "test-youtube-key"
        assert config.gemini_api_key == "test-gemini-key"

    def test_api_keys_from_yaml(self, monkeypatch, tmp_path):
        monkeypatch.delenv("YOUTUBE_API_KEY")
        monkeypatch.delenv("GEMINI_API_KEY")
        config_file = tmp_path / "app.yaml"
        config_file.write_text(
            "youtube:\n  api_key: yaml-yt\ngemini:\n  api_key: yaml-gem\n"
        )

        config = Config(str(config_file))

        assert config.youtube_api_key == "yaml-yt"
        assert config.gemini_api_key == "yaml-gem"
        assert config.get("youtube.api_key") == "yaml-yt"
        assert config.get("missing.key", "fallback") == "fallback"

    def test_invalid_page_size_rejected(self, monkeypatch):
        monkeypatch.setenv("YOUTUBE_COMMENTS_PAGE_SIZE", "500")
        with pytest.raises(ValueError):
            Config()

    def test_config_validation(self):
        result = validate_config()

        assert result["valid"] is True
        assert result["errors"] == []
        assert result["warnings"] == []

    def test_missing_keys_are_warnings(self, monkeypatch):
        monkeypatch.delenv("YOUTUBE_API_KEY")
        monkeypatch.delenv("GEMINI_API_KEY")
        reset_config()

        result = validate_config()

        assert result["valid"] is True
        assert len(result["warnings"]) == 2

    def test_config_summary_hides_keys(self):
        summary = get_config().get_summary()

        assert summary["youtube_api"]["api_key_set"] is True
        assert "test-youtube-key" not in str(summary)
        assert "test-gemini-key" not in str(get_config().to_dict())


class TestDatabase:
    """Test database connectivity"""

    @pytest.mark.asyncio
    async def test_database_ping(self):
        manager = DatabaseManager(url="sqlite+aiosqlite:///:memory:")
        try:
            assert await manager.ping() is True
        finally:
            await manager.close()

    @pytest.mark.asyncio
    async def test_tables_created(self, database):
        from sqlalchemy import inspect

        async with database.engine.connect() as conn:
            tables = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )

        assert {"users", "reports"} <= set(tables)
