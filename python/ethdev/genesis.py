"""
ethdev.genesis
==============

Provisioning of the genesis document the node consumes on `init`.

The genesis file is opaque here: only its existence at a known path matters.
When it is missing, the bundled template is copied into place; an existing
file is never overwritten, so an operator's edits always survive.

Exports
-------
- RESOURCES_DIR: directory holding the bundled templates.
- GENESIS_TEMPLATE: path to the bundled genesis.json.
- ensure(path): copy the template to `path` if absent.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ethdev.errors import filesystem_error
from ethdev.logging import get_logger

RESOURCES_DIR: Path = Path(__file__).resolve().parent / "resources"
GENESIS_TEMPLATE: Path = RESOURCES_DIR / "genesis.json"

log = get_logger(__name__)


@dataclass(frozen=True)
class GenesisStatus:
    path: Path
    existed: bool


def ensure(path: str | Path, *, template: Optional[Path] = None) -> GenesisStatus:
    """
    Make sure a genesis document exists at `path`.

    Returns `existed=False` when the template had to be copied. Whether that
    should stop the current command is the caller's decision.
    """
    target = Path(path)
    if target.exists():
        return GenesisStatus(path=target, existed=True)

    source = template or GENESIS_TEMPLATE
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
    except OSError as e:
        raise filesystem_error(e, path=target) from e
    log.info("genesis created", extra={"path": str(target)})
    return GenesisStatus(path=target, existed=False)


__all__ = ["RESOURCES_DIR", "GENESIS_TEMPLATE", "GenesisStatus", "ensure"]
