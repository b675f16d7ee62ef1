"""
Console preload script.

The node's interactive console evaluates this file before handing the prompt
to the operator. It is the bundled template with one line prepended that
binds the effective settings to the global `CONFIG`:

    var CONFIG = {"accounts": 3, "datadir": "/work/devchain", ...};
    <template body>

The output depends only on the settings and the template bytes, so two runs
with the same inputs write byte-identical files.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from ethdev.config import EffectiveConfig
from ethdev.errors import filesystem_error
from ethdev.genesis import RESOURCES_DIR
from ethdev.logging import get_logger

PRELOAD_TEMPLATE: Path = RESOURCES_DIR / "preload.js"
# Regenerated on every start; the node is pointed at it with --preload.
PRELOAD_PATH: Path = RESOURCES_DIR / "console.preload.js"

CONFIG_BINDING = "CONFIG"

log = get_logger(__name__)


def config_statement(cfg: EffectiveConfig) -> bytes:
    # json.dumps escapes quotes, backslashes and control characters; U+2028/9
    # stay escaped because ensure_ascii is on.
    payload = json.dumps(cfg.to_dict(), sort_keys=True)
    return f"var {CONFIG_BINDING} = {payload};\n".encode("utf-8")


def build(cfg: EffectiveConfig, template: bytes) -> bytes:
    return config_statement(cfg) + template


def read_template(path: Optional[Path] = None) -> bytes:
    source = path or PRELOAD_TEMPLATE
    try:
        return source.read_bytes()
    except OSError as e:
        raise filesystem_error(e, path=source) from e


def write_preload(
    cfg: EffectiveConfig,
    path: Optional[Path] = None,
    template: Optional[bytes] = None,
) -> Path:
    """Write the preload script, replacing any previous content, and return its path."""
    target = Path(path or PRELOAD_PATH)
    body = build(cfg, read_template() if template is None else template)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(body)
    except OSError as e:
        raise filesystem_error(e, path=target) from e
    log.debug("preload script written", extra={"path": str(target), "bytes": len(body)})
    return target
