"""URL helpers for the MCP bridge.

The bridge serves its catalog at ``/mcp/tools`` and one call endpoint per
tool at ``/mcp/tools/<name>/call``. Users configure the bridge as either
``http://localhost:8000`` or ``localhost:8000/``; these helpers make both
produce the same endpoints.
"""

from __future__ import annotations

from urllib.parse import quote


def _ensure_scheme(url: str) -> str:
    url = (url or "").strip()
    if not url:
        return url
    # Allow "localhost:8000" style inputs.
    if "://" not in url:
        return "http://" + url
    return url


def bridge_root(url: str) -> str:
    """Return the bridge base URL without a trailing slash."""
    return _ensure_scheme(url).rstrip("/")


def catalog_url(bridge_url: str) -> str:
    return f"{bridge_root(bridge_url)}/mcp/tools"


def tool_call_url(bridge_url: str, tool_name: str) -> str:
    """Return the per-tool invocation endpoint."""
    return f"{catalog_url(bridge_url)}/{quote(tool_name, safe='')}/call"
