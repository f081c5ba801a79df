"""MCP server for interacting with Saffron recipe management."""

__version__ = "0.0.1"
