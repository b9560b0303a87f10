"""Catalog Sync Engine for mcpsync.

Runs one synchronization pass: fetch the bridge catalog, reconcile it
against the stored plugins, save the result and report what changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from ..config import Settings
from ..errors import MCPSyncError, StorageWriteError
from ..notify import Notifier, Severity
from ..plugins.models import PluginRecord, SyncStatus
from ..plugins.store import PluginStore
from .client import CatalogClient
from .normalize import normalize
from .reconcile import ChangeSummary, partition, reconcile

logger = logging.getLogger(__name__)


def _warn_key_collisions(records: List[PluginRecord]) -> None:
    managed_keys = {r.external_key for r in records if r.is_managed}
    clashes = sorted({r.external_key for r in records if not r.is_managed} & managed_keys)
    if clashes:
        logger.warning(
            "Unmanaged plugins share ids with synced plugins and are kept as separate entries: %s",
            ", ".join(clashes),
        )


@dataclass
class SyncResult:
    """Outcome of a successful sync pass."""
    merged: List[PluginRecord] = field(default_factory=list)
    summary: ChangeSummary = field(default_factory=ChangeSummary)
    foreign_count: int = 0


async def sync_plugins(
    client: CatalogClient,
    store: PluginStore,
    notifier: Notifier,
    settings: Optional[Settings] = None,
) -> Optional[SyncResult]:
    """Run one sync pass.

    Returns the result, or None when the pass failed. Every failure is
    reported as exactly one error notification. A catalog that cannot be
    fetched or decoded aborts the pass before the store is touched.
    """
    settings = settings or Settings()

    try:
        catalog = await client.fetch_catalog()
    except MCPSyncError as e:
        notifier.notify(str(e), Severity.ERROR)
        return None
    except Exception as e:
        logger.exception("Unexpected error fetching catalog")
        notifier.notify(f"Initialization failed: {e}", Severity.ERROR)
        return None

    try:
        async with store.transaction(settings.plugins_key) as txn:
            current = await txn.load()
            tools, categories = normalize(catalog)
            merged, summary = reconcile(
                tools,
                current,
                categories=categories,
                bridge_url=settings.bridge_url,
                prefix=settings.key_prefix,
                emoji=settings.emoji,
            )
            _warn_key_collisions(merged)
            await txn.save(merged)

            status = SyncStatus(
                last_sync_ts=datetime.now(timezone.utc).isoformat(),
                synced_plugin_ids=[r.external_key for r in merged if r.is_managed],
            )
            try:
                await txn.save_value(settings.status_key, status.to_dict())
            except StorageWriteError as e:
                logger.warning("Plugins saved but sync status was not: %s", e)
    except Exception as e:
        if not isinstance(e, MCPSyncError):
            logger.exception("Unexpected error updating plugins")
        notifier.notify(f"Failed to update plugins: {e}", Severity.ERROR)
        return None

    foreign_count = len(merged) - summary.total_managed
    notifier.notify(summary.message(), Severity.INFO)
    logger.info(
        "MCP plugins synchronized: total=%d mcp=%d other=%d added=%d removed=%d categories=%s",
        len(merged),
        summary.total_managed,
        foreign_count,
        summary.added_count,
        summary.removed_count,
        summary.categories,
    )
    return SyncResult(merged=merged, summary=summary, foreign_count=foreign_count)


async def unsync_plugins(store: PluginStore, settings: Optional[Settings] = None) -> List[str]:
    """Remove every managed plugin, keeping foreign ones.

    Returns the keys of the removed plugins.
    """
    settings = settings or Settings()
    async with store.transaction(settings.plugins_key) as txn:
        managed, foreign = partition(await txn.load())
        await txn.save(foreign)
        await txn.save_value(settings.status_key, SyncStatus().to_dict())
    return [r.external_key for r in managed]


async def get_sync_status(store: PluginStore, settings: Optional[Settings] = None) -> SyncStatus:
    settings = settings or Settings()
    data = await store.load(settings.status_key)
    return SyncStatus.from_dict(data if isinstance(data, dict) else {})


async def get_all_plugins(store: PluginStore, settings: Optional[Settings] = None) -> List[PluginRecord]:
    """Get all plugins (both managed and foreign)."""
    settings = settings or Settings()
    async with store.transaction(settings.plugins_key) as txn:
        return await txn.load()
