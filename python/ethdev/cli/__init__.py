"""Command line interface for ethdev.

The typer application lives in `ethdev.cli.main`; each module here holds one
command (or command group).
"""

from __future__ import annotations

__all__ = ["accounts", "devchain", "main", "project", "tx"]
