"""Plugin records and their local store."""

from .models import (
    Display,
    InvocationSpec,
    Origin,
    PluginRecord,
    SyncStatus,
    ToolDescriptor,
    external_key_for,
)
from .store import PluginStore, StoreTransaction

__all__ = [
    "Display",
    "InvocationSpec",
    "Origin",
    "PluginRecord",
    "SyncStatus",
    "ToolDescriptor",
    "external_key_for",
    "PluginStore",
    "StoreTransaction",
]
