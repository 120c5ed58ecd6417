"""Shared helpers: money arithmetic and structured logging context."""
