"""mcpsync: keep local plugins in sync with an MCP bridge tool catalog."""

__version__ = "0.1.0"
