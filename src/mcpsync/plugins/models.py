"""Plugin record models.

Defines the tool descriptors fetched from the bridge and the plugin records
persisted in the local store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Origin(str, Enum):
    """Who owns a stored plugin record."""
    MANAGED = "managed"     # Created by the sync, replaced every pass
    FOREIGN = "foreign"     # Created by anything else, passed through untouched


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool as advertised by the bridge catalog."""
    name: str
    description: str = ""
    input_schema: Dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def required(self) -> List[str]:
        """Required parameter names, in schema order."""
        return list(self.input_schema.get("required") or [])

    @classmethod
    def from_api(cls, data: dict) -> "ToolDescriptor":
        return cls(
            name=data.get("name", ""),
            description=data.get("description") or "",
            input_schema=data.get("inputSchema") or {},
        )


# Source name -> tools. None marks a source whose "tools" field was not a list.
SourceCatalog = Dict[str, Optional[List[ToolDescriptor]]]

NormalizedTools = List[Tuple[str, ToolDescriptor]]


_NO_RAW = object()


def _str(data: dict, key: str, default: str = "") -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


def _obj(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def external_key_for(tool_name: str, prefix: str = "mcp_") -> str:
    """Return the key that identifies a tool's plugin across syncs."""
    return f"{prefix}{tool_name}"


@dataclass
class Display:
    """Human-facing plugin metadata."""
    title: str
    overview: str
    emoji: str


@dataclass
class InvocationSpec:
    """Function-calling contract mirrored from a tool schema."""
    name: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "InvocationSpec":
        data = _obj(data)
        return cls(
            name=_str(data, "name"),
            description=_str(data, "description"),
            parameters=_obj(data.get("parameters")),
        )


@dataclass
class PluginRecord:
    """A persisted plugin.

    Foreign records keep the exact dict they were loaded from in ``raw`` and
    are written back from it, so fields this model does not know survive.
    """
    identity: str                               # UUID, stable across syncs
    external_key: str                           # e.g. "mcp_<tool name>"
    origin: Origin = Origin.FOREIGN
    display: Display = field(default_factory=lambda: Display("", "", ""))
    invocation_spec: InvocationSpec = field(default_factory=lambda: InvocationSpec("", ""))
    wrapper_body: str = ""
    implementation_type: str = "javascript"
    output_type: str = "respond_to_ai"
    source: str = ""                            # Catalog source name (managed only)

    raw: Any = field(default=_NO_RAW, repr=False, compare=False)

    @property
    def is_managed(self) -> bool:
        return self.origin == Origin.MANAGED

    def to_dict(self) -> Any:
        """Serialize to the stored plugin format."""
        if self.origin == Origin.FOREIGN and self.raw is not _NO_RAW:
            return self.raw
        data = {
            "uuid": self.identity,
            "id": self.external_key,
            "emoji": self.display.emoji,
            "title": self.display.title,
            "overviewMarkdown": self.display.overview,
            "openaiSpec": self.invocation_spec.to_dict(),
            "implementationType": self.implementation_type,
            "outputType": self.output_type,
            "code": self.wrapper_body,
            "origin": self.origin.value,
        }
        if self.source:
            data["source"] = self.source
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "PluginRecord":
        """Deserialize a stored plugin.

        Only an explicit ``"origin": "managed"`` tag makes a record managed;
        the id is never inspected for ownership. Fields of the wrong type load
        as empty; a managed record is rebuilt on the next sync anyway, and a
        missing identity is replaced then.
        """
        if not isinstance(data, dict):
            return cls(identity="", external_key="", origin=Origin.FOREIGN, raw=data)

        if data.get("origin") != Origin.MANAGED.value:
            return cls(
                identity=_str(data, "uuid"),
                external_key=_str(data, "id"),
                origin=Origin.FOREIGN,
                raw=data,
            )

        return cls(
            identity=_str(data, "uuid"),
            external_key=_str(data, "id"),
            origin=Origin.MANAGED,
            display=Display(
                title=_str(data, "title"),
                overview=_str(data, "overviewMarkdown"),
                emoji=_str(data, "emoji"),
            ),
            invocation_spec=InvocationSpec.from_dict(data.get("openaiSpec")),
            wrapper_body=_str(data, "code"),
            implementation_type=_str(data, "implementationType", "javascript"),
            output_type=_str(data, "outputType", "respond_to_ai"),
            source=_str(data, "source"),
        )


@dataclass
class SyncStatus:
    """Status of the last sync pass."""
    last_sync_ts: Optional[str] = None
    synced_plugin_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "last_sync_ts": self.last_sync_ts,
            "synced_plugin_ids": self.synced_plugin_ids,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SyncStatus":
        return cls(
            last_sync_ts=data.get("last_sync_ts"),
            synced_plugin_ids=list(data.get("synced_plugin_ids") or []),
        )
