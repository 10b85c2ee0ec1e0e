"""Inbound adapters - entry points driving the application."""

from flybook_db.adapters.inbound.cli import build_parser, main

__all__ = ["build_parser", "main"]
