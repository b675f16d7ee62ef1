"""
ethdev.devchain.process — launching the node binary
===================================================

Two deliberately separate operations:

- `run_init_blocking` runs `<binary> --datadir <dir> init <genesis>` and only
  returns once the child has exited. The devchain start relies on that
  ordering.
- `run_foreground` starts the interactive console and returns as soon as the
  child exists. The child inherits stdin/stdout/stderr, so it owns the
  operator's terminal; nothing here reads or parses its output.

Neither retries. A missing binary or failed exec becomes ProcessSpawnError
with the OS message untouched.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from ethdev.config import EffectiveConfig
from ethdev.errors import ProcessSpawnError
from ethdev.logging import get_logger

PathLike = Union[str, os.PathLike]

log = get_logger(__name__)


def build_init_argv(binary: str, datadir: PathLike, genesis: PathLike) -> List[str]:
    return [binary, "--datadir", str(datadir), "init", str(genesis)]


def build_start_argv(cfg: EffectiveConfig, preload_path: PathLike) -> List[str]:
    return [
        cfg.binary,
        "--identity", cfg.identity,
        "--datadir", str(cfg.datadir),
        "--port", str(cfg.port),
        "--rpc",
        "--rpcaddr", cfg.rpchost,
        "--rpcport", str(cfg.rpcport),
        "--rpccorsdomain", cfg.cors,
        "--verbosity", str(cfg.verbosity),
        "--nodiscover",
        "--preload", str(preload_path),
        "console",
    ]


@dataclass
class NodeLauncher:
    """Spawns the node binary with the caller's standard streams."""

    cwd: Optional[PathLike] = None
    env: Optional[dict] = None

    def _build_env(self) -> Optional[dict]:
        if not self.env:
            return None
        env = os.environ.copy()
        env.update({str(k): str(v) for k, v in self.env.items()})
        return env

    def _spawn(self, argv: Sequence[PathLike]) -> subprocess.Popen:
        args = list(map(str, argv))
        log.info("spawning node", extra={"argv": " ".join(args)})
        try:
            return subprocess.Popen(
                args,
                cwd=str(self.cwd) if self.cwd else None,
                env=self._build_env(),
            )
        except OSError as e:
            raise ProcessSpawnError(str(e), binary=args[0]).with_cause(e) from e

    def run_init_blocking(self, binary: str, datadir: PathLike, genesis: PathLike) -> int:
        """Run `init` and wait for it. The exit code is returned, not judged."""
        proc = self._spawn(build_init_argv(binary, datadir, genesis))
        code = proc.wait()
        log.debug("init finished", extra={"returncode": code})
        return code

    def run_foreground(self, binary: str, argv: Sequence[PathLike]) -> subprocess.Popen:
        """
        Start the node and return immediately.

        `argv` is the full vector as produced by `build_start_argv`; its first
        element is replaced by `binary` so the caller's choice always wins.
        """
        args = [binary, *list(argv)[1:]] if argv else [binary]
        return self._spawn(args)


def wait_attached(proc: subprocess.Popen) -> int:
    """
    Keep this process alive while the node console owns the terminal.

    Ctrl-C reaches the whole foreground process group; the console handles it
    itself, so the interrupt is ignored here and the wait resumes.
    """
    while True:
        try:
            return proc.wait()
        except KeyboardInterrupt:
            continue


__all__ = [
    "NodeLauncher",
    "build_init_argv",
    "build_start_argv",
    "wait_attached",
]
