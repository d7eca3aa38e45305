"""Task tracking store exposed to conversational agents over MCP."""

__version__ = "0.1.0"
