"""Shared utilities: logging, HTTP, graceful degradation."""
