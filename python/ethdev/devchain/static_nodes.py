"""static-nodes.json writer.

An empty peer list touches nothing: a file left by an earlier run with peers
is kept as-is.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Sequence

from ethdev.errors import filesystem_error
from ethdev.logging import get_logger

STATIC_NODES_FILENAME = "static-nodes.json"

log = get_logger(__name__)


def write_if_non_empty(peers: Sequence[str], datadir: str | Path) -> Optional[Path]:
    if not peers:
        return None
    target = Path(datadir) / STATIC_NODES_FILENAME
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(list(peers), indent=2), encoding="utf-8")
    except OSError as e:
        raise filesystem_error(e, path=target) from e
    log.info("static nodes written", extra={"path": str(target), "peers": len(peers)})
    return target
