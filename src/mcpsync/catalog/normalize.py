"""Flatten a source catalog into (source, tool) pairs."""

from __future__ import annotations

from typing import Set, Tuple

from ..plugins.models import NormalizedTools, SourceCatalog


def normalize(catalog: SourceCatalog) -> Tuple[NormalizedTools, Set[str]]:
    """Return tools in catalog order plus the names of contributing sources.

    Sources whose tools field is not a list are skipped, and only sources
    that contribute at least one tool count as categories. Tools with the same
    name in different sources are all emitted; the reconciler decides which
    one wins.
    """
    pairs: NormalizedTools = []
    categories: Set[str] = set()

    for source, tools in catalog.items():
        if not isinstance(tools, list) or not tools:
            continue
        categories.add(source)
        for tool in tools:
            pairs.append((source, tool))

    return pairs, categories
