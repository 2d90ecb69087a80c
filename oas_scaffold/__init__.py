"""Scaffold a versioned npm workspace from an OpenAPI spec file."""

__version__ = "0.1.0"
