"""Reconcile stored plugins against a fresh tool catalog.

Managed records are rebuilt from the catalog on every pass, keeping the
identity of any record whose key is still present. Foreign records are
never inspected and come out exactly as they went in.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..plugins.models import (
    Display,
    InvocationSpec,
    NormalizedTools,
    Origin,
    PluginRecord,
    ToolDescriptor,
    external_key_for,
)
from .wrapper import build_wrapper, function_name

DEFAULT_EMOJI = "\U0001f527"


def _plural(count: int, word: str) -> str:
    return f"{word}{'s' if count > 1 else ''}"


@dataclass
class ChangeSummary:
    """What a reconcile pass changed."""
    added: List[PluginRecord] = field(default_factory=list)
    removed: List[PluginRecord] = field(default_factory=list)
    unchanged_count: int = 0
    total_managed: int = 0
    categories: List[str] = field(default_factory=list)

    @property
    def added_count(self) -> int:
        return len(self.added)

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    @property
    def category_count(self) -> int:
        return len(self.categories)

    def message(self) -> str:
        """Render the summary as one sentence, skipping zero counts."""
        parts = []
        if self.added_count > 0:
            parts.append(f"Added {self.added_count} {_plural(self.added_count, 'plugin')}.")
        if self.removed_count > 0:
            parts.append(f"Removed {self.removed_count} {_plural(self.removed_count, 'plugin')}.")
        if self.unchanged_count > 0:
            parts.append(f"{self.unchanged_count} {_plural(self.unchanged_count, 'plugin')} unchanged.")
        suffix = "ies" if self.category_count > 1 else "y"
        parts.append(
            f"Total: {self.total_managed} plugins across {self.category_count} categor{suffix}."
        )
        return " ".join(parts)

    def to_dict(self) -> dict:
        return {
            "added": [r.external_key for r in self.added],
            "removed": [r.external_key for r in self.removed],
            "unchanged": self.unchanged_count,
            "total": self.total_managed,
            "categories": self.categories,
        }


def build_record(
    source: str,
    tool: ToolDescriptor,
    identity: str,
    bridge_url: str,
    prefix: str = "mcp_",
    emoji: str = DEFAULT_EMOJI,
) -> PluginRecord:
    """Build a managed record for one tool. Every field comes from the tool."""
    key = external_key_for(tool.name, prefix)
    return PluginRecord(
        identity=identity,
        external_key=key,
        origin=Origin.MANAGED,
        display=Display(
            title=f"MCP - {tool.name}",
            overview=f"## {tool.name}\n\n{tool.description}",
            emoji=emoji,
        ),
        invocation_spec=InvocationSpec(
            name=function_name(key),
            description=tool.description,
            parameters=tool.input_schema,
        ),
        wrapper_body=build_wrapper(key, tool, bridge_url),
        source=source,
    )


def partition(records: Sequence[PluginRecord]) -> Tuple[List[PluginRecord], List[PluginRecord]]:
    """Split records into (managed, foreign) by origin tag."""
    managed = [r for r in records if r.origin == Origin.MANAGED]
    foreign = [r for r in records if r.origin != Origin.MANAGED]
    return managed, foreign


def reconcile(
    tools: NormalizedTools,
    current_records: Sequence[PluginRecord],
    categories: Optional[Iterable[str]] = None,
    bridge_url: str = "http://localhost:8000",
    prefix: str = "mcp_",
    emoji: str = DEFAULT_EMOJI,
    new_id: Optional[Callable[[], str]] = None,
) -> Tuple[List[PluginRecord], ChangeSummary]:
    """Compute the merged record set and what changed.

    Returns (merged, summary) where merged is every foreign record in its
    original order followed by the managed records in catalog order. When
    two tools map to the same key the later one wins, keeping the position
    and identity of the first. Categories default to the sources seen in
    tools.
    """
    new_id = new_id or (lambda: str(uuid.uuid4()))
    managed_old, foreign = partition(current_records)

    old_by_key: Dict[str, PluginRecord] = {}
    for record in managed_old:
        old_by_key.setdefault(record.external_key, record)

    if categories is None:
        category_list = list(dict.fromkeys(source for source, _ in tools))
    else:
        category_list = sorted(categories)

    new_by_key: Dict[str, PluginRecord] = {}
    for source, tool in tools:
        key = external_key_for(tool.name, prefix)
        identity = ""
        if key in old_by_key:
            identity = old_by_key[key].identity
        elif key in new_by_key:
            identity = new_by_key[key].identity
        if not identity:
            identity = new_id()
        new_by_key[key] = build_record(source, tool, identity, bridge_url, prefix, emoji)

    managed_new = list(new_by_key.values())

    added = [r for r in managed_new if r.external_key not in old_by_key]
    removed = [r for r in managed_old if r.external_key not in new_by_key]

    summary = ChangeSummary(
        added=added,
        removed=removed,
        unchanged_count=len(managed_new) - len(added),
        total_managed=len(managed_new),
        categories=category_list,
    )
    return foreign + managed_new, summary
