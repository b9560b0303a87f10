"""Catalog CLI Commands for mcpsync.

- sync/unsync
- status
- plugins
- tools
- call
"""

from __future__ import annotations

import argparse
import asyncio
import json
from datetime import datetime
from typing import Any

import requests
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..bridge import call_tool
from ..config import Settings
from ..errors import InvocationError, MCPSyncError
from ..notify import ConsoleNotifier
from ..plugins.models import external_key_for
from ..plugins.store import PluginStore
from .client import CatalogClient
from .sync import get_all_plugins, get_sync_status, sync_plugins, unsync_plugins

console = Console()


def load_settings(args: argparse.Namespace) -> Settings:
    """Load settings and apply command line overrides."""
    settings = Settings.load()
    if getattr(args, "url", None):
        settings.bridge_url = args.url
    if getattr(args, "store", None):
        settings.store_path = args.store
    return settings


def _store(settings: Settings) -> PluginStore:
    return PluginStore(settings.resolved_store_path())


# --- Sync Commands ---

def cmd_sync(args: argparse.Namespace) -> int:
    """Sync bridge tools to plugins."""
    settings = load_settings(args)
    client = CatalogClient(settings.bridge_url, timeout_s=settings.timeout_s)

    console.print(f"Syncing tools from {settings.bridge_url}...")
    result = asyncio.run(
        sync_plugins(client, _store(settings), ConsoleNotifier(console), settings)
    )
    if result is None:
        return 1

    summary = result.summary
    console.print("[green]Sync complete![/green]")
    console.print(f"  Added: {summary.added_count}")
    console.print(f"  Removed: {summary.removed_count}")
    console.print(f"  Unchanged: {summary.unchanged_count}")
    console.print(f"  Total synced: {summary.total_managed}")
    console.print(f"  Other plugins: {result.foreign_count}")
    return 0


def cmd_unsync(args: argparse.Namespace) -> int:
    """Remove all synced plugins."""
    if not args.force:
        answer = console.input("Remove all synced MCP plugins? [y/N] ").strip().lower()
        if answer not in ("y", "yes"):
            console.print("[yellow]Cancelled.[/yellow]")
            return 0

    settings = load_settings(args)
    try:
        removed = asyncio.run(unsync_plugins(_store(settings), settings))
    except MCPSyncError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    console.print(f"[green]Removed {len(removed)} plugin(s).[/green]")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show bridge and sync status."""
    settings = load_settings(args)
    store = _store(settings)
    sync_status = asyncio.run(get_sync_status(store, settings))
    plugins = asyncio.run(get_all_plugins(store, settings))

    lines = [f"[bold]Bridge:[/bold] {settings.bridge_url}"]
    client = CatalogClient(settings.bridge_url, timeout_s=settings.timeout_s)
    try:
        tools = client.list_tools()
        lines.append(f"  Status: [green]Reachable[/green] ({len(tools)} tools)")
    except MCPSyncError as e:
        lines.append(f"  Status: [red]Unreachable[/red] ({e})")

    lines.append("")
    lines.append(f"[bold]Store:[/bold] {store.path}")

    managed = [p for p in plugins if p.is_managed]
    lines.append(f"[bold]Synced Plugins:[/bold] {len(managed)}")
    if sync_status.last_sync_ts:
        try:
            ts = datetime.fromisoformat(sync_status.last_sync_ts.replace("Z", "+00:00"))
            lines.append(f"  Last sync: {ts.strftime('%Y-%m-%d %H:%M:%S')}")
        except ValueError:
            lines.append(f"  Last sync: {sync_status.last_sync_ts}")
    else:
        lines.append("  Last sync: [dim]Never[/dim]")
    lines.append(f"[bold]Other Plugins:[/bold] {len(plugins) - len(managed)}")

    console.print(Panel("\n".join(lines), title="mcpsync Status", border_style="cyan"))
    return 0


# --- Plugin Commands ---

def cmd_plugins(args: argparse.Namespace) -> int:
    """List all stored plugins."""
    settings = load_settings(args)
    plugins = asyncio.run(get_all_plugins(_store(settings), settings))

    if not plugins:
        console.print("[yellow]No plugins stored.[/yellow]")
        console.print("Run [bold]mcpsync sync[/bold] to sync from the bridge.")
        return 0

    table = Table(title="Plugins")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Source", style="magenta")
    table.add_column("Origin")
    table.add_column("UUID", style="dim")

    for p in plugins:
        if p.is_managed:
            table.add_row(p.external_key, p.display.title, p.source, "[cyan]managed[/cyan]", p.identity)
        else:
            title = p.raw.get("title", "") if isinstance(p.raw, dict) else ""
            table.add_row(p.external_key, str(title), "", "[dim]foreign[/dim]", p.identity)

    console.print(table)

    managed = len([p for p in plugins if p.is_managed])
    console.print(f"\n[bold]Total:[/bold] {len(plugins)} ({managed} synced, {len(plugins) - managed} other)")
    return 0


# --- Tool Commands ---

def cmd_tools(args: argparse.Namespace) -> int:
    """List tools advertised by the bridge."""
    settings = load_settings(args)
    client = CatalogClient(settings.bridge_url, timeout_s=settings.timeout_s)

    try:
        tools = client.list_tools()
    except MCPSyncError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    if not tools:
        console.print("[yellow]No tools found.[/yellow]")
        return 0

    by_source = {}
    for source, tool in tools:
        by_source.setdefault(source, []).append(tool)

    for source, source_tools in sorted(by_source.items()):
        console.print(f"\n[bold cyan]{source}[/bold cyan]")
        for tool in source_tools:
            desc = f" - {tool.description}" if tool.description else ""
            console.print(f"  {tool.name}{desc}")

    console.print(f"\n[bold]Total:[/bold] {len(tools)} tool(s) from {len(by_source)} source(s)")
    return 0


def _parse_data(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def cmd_call(args: argparse.Namespace) -> int:
    """Call a bridge tool the way its plugin wrapper would."""
    settings = load_settings(args)
    plugins = asyncio.run(get_all_plugins(_store(settings), settings))

    key = external_key_for(args.tool, settings.key_prefix)
    required = []
    for p in plugins:
        if p.is_managed and p.external_key == key:
            required = list(p.invocation_spec.parameters.get("required") or [])
            break

    data = _parse_data(args.data) if args.data is not None else {}
    try:
        result = call_tool(settings.bridge_url, args.tool, data, required)
    except InvocationError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    except requests.exceptions.RequestException as e:
        console.print(f"[red]Error:[/red] Cannot reach bridge: {e}")
        return 1

    console.print_json(json.dumps(result))
    return 0


# --- Parser Setup ---

def add_catalog_commands(subparsers: argparse._SubParsersAction) -> None:
    """Add catalog-related commands to the main parser."""

    p_sync = subparsers.add_parser("sync", help="Sync bridge tools to plugins")
    p_sync.set_defaults(func=cmd_sync)

    p_unsync = subparsers.add_parser("unsync", help="Remove synced plugins")
    p_unsync.add_argument("--force", "-f", action="store_true", help="Skip confirmation")
    p_unsync.set_defaults(func=cmd_unsync)

    p_status = subparsers.add_parser("status", help="Show bridge and sync status")
    p_status.set_defaults(func=cmd_status)

    p_plugins = subparsers.add_parser("plugins", help="List all stored plugins")
    p_plugins.set_defaults(func=cmd_plugins)

    p_tools = subparsers.add_parser("tools", help="List bridge tools")
    p_tools.set_defaults(func=cmd_tools)

    p_call = subparsers.add_parser("call", help="Call a bridge tool")
    p_call.add_argument("tool", help="Tool name")
    p_call.add_argument("--data", "-d", help="JSON body, or a plain string")
    p_call.set_defaults(func=cmd_call)


def run_catalog_command(args: argparse.Namespace) -> int:
    """Run a catalog command if func is set."""
    if hasattr(args, "func") and args.func:
        return args.func(args)
    return -1  # Not a catalog command
