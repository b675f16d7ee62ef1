"""
ethdev.devchain
===============

Lifecycle of the local development node: classify the data directory, write
the files the node needs, and launch it.

Submodules are imported explicitly by callers; importing this package does
not pull in subprocess handling.
"""

from __future__ import annotations

__all__ = ["orchestrator", "preload", "process", "state", "static_nodes"]
