"""Catalog Module for mcpsync.

Turns the MCP bridge tool catalog into stored plugins:
- Catalog fetching and validation
- Normalization into (source, tool) pairs
- Reconciliation against stored plugins
- Wrapper code generation
- Sync passes
"""

from .client import CatalogClient, decode_catalog
from .normalize import normalize
from .reconcile import ChangeSummary, build_record, reconcile
from .sync import SyncResult, get_all_plugins, get_sync_status, sync_plugins, unsync_plugins
from .wrapper import build_request_body, build_wrapper

__all__ = [
    "CatalogClient",
    "decode_catalog",
    "normalize",
    "ChangeSummary",
    "build_record",
    "reconcile",
    "SyncResult",
    "sync_plugins",
    "unsync_plugins",
    "get_sync_status",
    "get_all_plugins",
    "build_request_body",
    "build_wrapper",
]
