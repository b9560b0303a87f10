from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .urls import bridge_root

APP = "mcpsync"

logger = logging.getLogger(__name__)


def config_dir() -> Path:
    """
    Cross-platform config directory:
      - Windows: %APPDATA%\\mcpsync
      - macOS/Linux: $XDG_CONFIG_HOME/mcpsync or ~/.config/mcpsync
    """
    if os.name == "nt":
        base = os.environ.get("APPDATA") or str(Path.home())
        return Path(base) / APP
    return Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))) / APP


def config_path() -> Path:
    return config_dir() / "config.json"


def default_store_path() -> Path:
    return config_dir() / "store.json"


@dataclass
class Settings:
    bridge_url: str = "http://localhost:8000"
    store_path: str = ""                  # empty = <config_dir>/store.json
    plugins_key: str = "TM_useInstalledPlugins"
    key_prefix: str = "mcp_"
    timeout_s: float = 30.0
    emoji: str = "\U0001f527"

    @property
    def status_key(self) -> str:
        """Store key holding the last sync status."""
        return f"{self.plugins_key}:sync"

    def resolved_store_path(self) -> Path:
        return Path(self.store_path) if self.store_path else default_store_path()

    @staticmethod
    def load(path: Optional[Path] = None) -> "Settings":
        path = path or config_path()

        data: dict = {}

        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except Exception as e:
                logger.warning("Ignoring unreadable config %s: %s", path, e)
                data = {}
        if not isinstance(data, dict):
            data = {}

        s = Settings(
            bridge_url=str(data.get("bridge_url", Settings.bridge_url)),
            store_path=str(data.get("store_path", Settings.store_path)),
            plugins_key=str(data.get("plugins_key", Settings.plugins_key)),
            key_prefix=str(data.get("key_prefix", Settings.key_prefix)),
            timeout_s=float(data.get("timeout_s", Settings.timeout_s)),
            emoji=str(data.get("emoji", Settings.emoji)),
        )

        # Environment overrides (highest priority)
        s.bridge_url = os.environ.get("MCP_BRIDGE_URL", s.bridge_url)
        s.store_path = os.environ.get("MCPSYNC_STORE_PATH", s.store_path)
        s.plugins_key = os.environ.get("MCPSYNC_PLUGINS_KEY", s.plugins_key)
        timeout = os.environ.get("MCPSYNC_TIMEOUT")
        if timeout:
            try:
                s.timeout_s = float(timeout)
            except ValueError:
                logger.warning("Ignoring invalid MCPSYNC_TIMEOUT=%r", timeout)

        s.bridge_url = bridge_root(s.bridge_url)

        return s

    def save(self, path: Optional[Path] = None) -> Path:
        path = path or config_path()
        path.parent.mkdir(parents=True, exist_ok=True)

        payload = {
            "bridge_url": self.bridge_url,
            "store_path": self.store_path,
            "plugins_key": self.plugins_key,
            "key_prefix": self.key_prefix,
            "timeout_s": self.timeout_s,
            "emoji": self.emoji,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path
