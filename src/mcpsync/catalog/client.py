"""Catalog Client for the MCP bridge.

Fetches the bridge's tool catalog and validates it into a SourceCatalog.
Malformed catalogs are rejected here so nothing downstream has to guess.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional, Tuple

import requests

from ..errors import DecodeError, FetchError
from ..plugins.models import SourceCatalog, ToolDescriptor
from ..urls import bridge_root, catalog_url

logger = logging.getLogger(__name__)


def _decode_tool(source: str, index: int, data: Any) -> ToolDescriptor:
    where = f"{source}.tools[{index}]"
    if not isinstance(data, dict):
        raise DecodeError(f"Tool {where} is not an object")

    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise DecodeError(f"Tool {where} has no name")

    description = data.get("description")
    if description is not None and not isinstance(description, str):
        raise DecodeError(f"Tool {name!r} has a non-string description")

    schema = data.get("inputSchema")
    if schema is None:
        schema = {}
    if not isinstance(schema, dict):
        raise DecodeError(f"Tool {name!r} has a non-object inputSchema")

    required = schema.get("required")
    if required is not None and (
        not isinstance(required, list) or not all(isinstance(r, str) for r in required)
    ):
        raise DecodeError(f"Tool {name!r} has an invalid required list")

    return ToolDescriptor.from_api(data)


def decode_catalog(payload: Any) -> SourceCatalog:
    """Validate a parsed catalog payload.

    Sources whose ``tools`` field is not a list map to None; that is not an
    error, the source simply contributes nothing.
    """
    if not isinstance(payload, dict):
        raise DecodeError("Catalog is not a JSON object")

    catalog: SourceCatalog = {}
    for source, entry in payload.items():
        if not isinstance(entry, dict):
            raise DecodeError(f"Catalog entry {source!r} is not an object")
        tools = entry.get("tools")
        if not isinstance(tools, list):
            logger.debug("Source %r has no tools list", source)
            catalog[source] = None
            continue
        catalog[source] = [_decode_tool(source, i, t) for i, t in enumerate(tools)]
    return catalog


class CatalogClient:
    """Client for the bridge tool catalog."""

    def __init__(
        self,
        bridge_url: str = "http://localhost:8000",
        timeout_s: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.bridge_url = bridge_root(bridge_url)
        self.timeout_s = timeout_s
        self._session = session or requests.Session()
        self._session.headers["Accept"] = "application/json"

    def fetch_catalog_sync(self) -> SourceCatalog:
        """Fetch and validate the catalog.

        Raises:
            FetchError: transport failure or non-success status
            DecodeError: body is not JSON or not a catalog
        """
        url = catalog_url(self.bridge_url)
        try:
            response = self._session.get(url, timeout=self.timeout_s)
        except requests.exceptions.Timeout:
            raise FetchError(f"Failed to fetch MCP tools: timeout after {self.timeout_s}s")
        except requests.exceptions.ConnectionError:
            raise FetchError(f"Failed to fetch MCP tools: cannot connect to {self.bridge_url}")
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Failed to fetch MCP tools: {e}")

        if not response.ok:
            raise FetchError(f"Failed to fetch MCP tools: {response.reason or response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {url}: {e}")

        return decode_catalog(payload)

    async def fetch_catalog(self) -> SourceCatalog:
        return await asyncio.to_thread(self.fetch_catalog_sync)

    def list_tools(self) -> List[Tuple[str, ToolDescriptor]]:
        """Fetch the catalog and flatten it to (source, tool) pairs."""
        pairs = []
        for source, tools in self.fetch_catalog_sync().items():
            for tool in tools or []:
                pairs.append((source, tool))
        return pairs
