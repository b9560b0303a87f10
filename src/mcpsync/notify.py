"""User-facing notifications.

The sync pass reports through a Notifier passed in by the caller; nothing
here keeps global display state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Tuple

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    INFO = "info"
    ERROR = "error"


class Notifier(Protocol):
    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        ...


class ConsoleNotifier:
    """Print notifications to a rich console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        if severity == Severity.ERROR:
            logger.error("MCP Extension Error: %s", message)
            self.console.print(f"[bold red]MCP Extension Error:[/bold red] {escape(message)}")
        else:
            logger.info("MCP Extension Info: %s", message)
            self.console.print(f"[bold blue]MCP Extension Info:[/bold blue] {escape(message)}")


@dataclass
class MemoryNotifier:
    """Collect notifications in a list."""
    messages: List[Tuple[Severity, str]] = field(default_factory=list)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.messages.append((severity, message))

    @property
    def errors(self) -> List[str]:
        return [m for s, m in self.messages if s == Severity.ERROR]

    @property
    def infos(self) -> List[str]:
        return [m for s, m in self.messages if s == Severity.INFO]
