"""
Devchain lifecycle: decide, provision, launch.

    classify datadir
      ├─ explicit-reset → remove datadir, continue as needs-init
      ├─ needs-init     → ensure genesis
      │                    ├─ just created → raise GenesisCreated (nothing spawned)
      │                    └─ existed      → blocking `init`, then start
      └─ ready          → start

    start = write preload script → write static-nodes.json (if peers)
            → spawn console in the foreground

All file writes finish before the corresponding spawn.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

from ethdev import genesis
from ethdev.config import EffectiveConfig
from ethdev.devchain import preload, static_nodes
from ethdev.devchain.process import NodeLauncher, build_start_argv
from ethdev.devchain.state import DataDirAction, classify, remove_datadir
from ethdev.errors import GenesisCreated
from ethdev.logging import bind, get_logger

log = get_logger(__name__)


def prepare(cfg: EffectiveConfig, launcher: NodeLauncher) -> DataDirAction:
    """
    Bring the data directory to the "ready to start" state.

    Returns the action that was classified before any change was made.
    """
    action = classify(cfg.datadir, reset=cfg.reset)
    bind(datadir=cfg.datadir, action=action.value)
    log.info("devchain action")

    if action is DataDirAction.EXPLICIT_RESET:
        remove_datadir(cfg.datadir)

    if action in (DataDirAction.EXPLICIT_RESET, DataDirAction.NEEDS_INIT):
        status = genesis.ensure(cfg.genesis)
        if not status.existed:
            raise GenesisCreated(status.path)
        code = launcher.run_init_blocking(cfg.binary, cfg.datadir, cfg.genesis)
        if code != 0:
            log.warning("node init exited non-zero; starting anyway", extra={"exit_code": code})

    return action


def start(
    cfg: EffectiveConfig,
    launcher: NodeLauncher,
    *,
    preload_path: Optional[Path] = None,
    template: Optional[bytes] = None,
) -> subprocess.Popen:
    script = preload.write_preload(cfg, preload_path, template)
    static_nodes.write_if_non_empty(cfg.static_nodes, cfg.datadir)
    return launcher.run_foreground(cfg.binary, build_start_argv(cfg, script))


def run_devchain(
    cfg: EffectiveConfig,
    *,
    launcher: Optional[NodeLauncher] = None,
    preload_path: Optional[Path] = None,
    template: Optional[bytes] = None,
) -> subprocess.Popen:
    """Run the whole lifecycle and return the (still running) console process."""
    launcher = launcher or NodeLauncher()
    prepare(cfg, launcher)
    return start(cfg, launcher, preload_path=preload_path, template=template)


__all__ = ["prepare", "start", "run_devchain"]
