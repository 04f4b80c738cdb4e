"""Command line interface."""

from __future__ import annotations

from bddbrowser.cli.main import BddBrowserCLI, format_summary, main

__all__ = [
    "BddBrowserCLI",
    "format_summary",
    "main",
]
