"""Tests for settings and URL helpers."""

import json

from mcpsync.config import Settings, config_dir
from mcpsync.urls import bridge_root, catalog_url, tool_call_url


class TestUrls:
    """Tests for URL helpers."""

    def test_bridge_root(self):
        """Test scheme and trailing slash normalization."""
        assert bridge_root("http://localhost:8000/") == "http://localhost:8000"
        assert bridge_root("localhost:8000") == "http://localhost:8000"
        assert bridge_root("https://bridge.example.com/base/") == "https://bridge.example.com/base"

    def test_endpoints(self):
        """Test catalog and call endpoints."""
        assert catalog_url("http://b:8000") == "http://b:8000/mcp/tools"
        assert tool_call_url("http://b:8000/", "add") == "http://b:8000/mcp/tools/add/call"
        assert tool_call_url("http://b", "a b") == "http://b/mcp/tools/a%20b/call"


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, tmp_path, monkeypatch):
        """Test defaults when no config file exists."""
        for var in ("MCP_BRIDGE_URL", "MCPSYNC_STORE_PATH", "MCPSYNC_PLUGINS_KEY", "MCPSYNC_TIMEOUT"):
            monkeypatch.delenv(var, raising=False)

        s = Settings.load(tmp_path / "missing.json")
        assert s.bridge_url == "http://localhost:8000"
        assert s.plugins_key == "TM_useInstalledPlugins"
        assert s.key_prefix == "mcp_"
        assert s.timeout_s == 30.0
        assert s.status_key == "TM_useInstalledPlugins:sync"

    def test_save_and_load(self, tmp_path, monkeypatch):
        """Test saving and loading settings."""
        monkeypatch.delenv("MCP_BRIDGE_URL", raising=False)
        path = tmp_path / "config.json"
        Settings(bridge_url="http://bridge:9000", timeout_s=5).save(path)

        loaded = Settings.load(path)
        assert loaded.bridge_url == "http://bridge:9000"
        assert loaded.timeout_s == 5.0

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Test environment variables win over the file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"bridge_url": "http://file:1"}), encoding="utf-8")
        monkeypatch.setenv("MCP_BRIDGE_URL", "env-host:2/")
        monkeypatch.setenv("MCPSYNC_TIMEOUT", "7.5")
        monkeypatch.setenv("MCPSYNC_STORE_PATH", str(tmp_path / "s.json"))

        s = Settings.load(path)
        assert s.bridge_url == "http://env-host:2"
        assert s.timeout_s == 7.5
        assert s.resolved_store_path() == tmp_path / "s.json"

    def test_malformed_file(self, tmp_path, monkeypatch):
        """Test a broken config file falls back to defaults."""
        monkeypatch.delenv("MCP_BRIDGE_URL", raising=False)
        path = tmp_path / "config.json"
        path.write_text("{broken", encoding="utf-8")

        assert Settings.load(path).bridge_url == "http://localhost:8000"

    def test_default_store_path(self, tmp_path, monkeypatch):
        """Test the store lives in the config dir by default."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert config_dir() == tmp_path / "mcpsync"
        assert Settings().resolved_store_path() == tmp_path / "mcpsync" / "store.json"
