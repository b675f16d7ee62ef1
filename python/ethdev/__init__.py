"""
ethdev — local development chain tooling.

Prepares and launches a geth-compatible node for development: resolves
settings, provisions the genesis document, classifies the data directory,
writes the console preload script and static peers, then hands the terminal
to the node console.
"""
from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["config", "devchain", "errors", "genesis", "logging", "session", "tx"]
