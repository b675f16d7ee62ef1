"""Data directory classification for `ethdev devchain`."""

from __future__ import annotations

import shutil
from enum import Enum
from pathlib import Path

from ethdev.errors import filesystem_error
from ethdev.logging import get_logger

# Legacy geth kept chaindata at the datadir root; current releases nest it.
CHAINDATA_MARKERS = ("chaindata", "geth/chaindata")

log = get_logger(__name__)


class DataDirAction(str, Enum):
    EXPLICIT_RESET = "explicit-reset"
    NEEDS_INIT = "needs-init"
    READY = "ready"


def has_chaindata(datadir: Path) -> bool:
    """True once the node binary has initialized `datadir`."""
    return any((datadir / marker).exists() for marker in CHAINDATA_MARKERS)


def classify(datadir: str | Path, *, reset: bool) -> DataDirAction:
    """
    Pick the devchain action for `datadir`.

    | directory            | reset          | no reset   |
    |----------------------|----------------|------------|
    | missing              | needs-init     | needs-init |
    | present, no chaindata| explicit-reset | needs-init |
    | present, chaindata   | explicit-reset | ready      |
    """
    path = Path(datadir)
    if reset and path.exists():
        return DataDirAction.EXPLICIT_RESET
    if not has_chaindata(path):
        return DataDirAction.NEEDS_INIT
    return DataDirAction.READY


def remove_datadir(datadir: str | Path) -> None:
    path = Path(datadir)
    log.info("removing data directory", extra={"path": str(path)})
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return
    except OSError as e:
        raise filesystem_error(e, path=path) from e
