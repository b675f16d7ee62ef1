from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, List, Sequence

import pytest

PYTHON_ROOT = Path(__file__).resolve().parents[1]
if str(PYTHON_ROOT) not in sys.path:
    sys.path.insert(0, str(PYTHON_ROOT))

from ethdev import logging as elog  # noqa: E402
from ethdev.devchain import preload  # noqa: E402


class FakeProcess:
    def __init__(self, args: Sequence[str], returncode: int = 0) -> None:
        self.args = list(args)
        self.returncode = returncode

    def wait(self) -> int:
        return self.returncode


class FakeLauncher:
    """Records spawns instead of running a node; `init` creates chaindata like geth does."""

    def __init__(self, init_returncode: int = 0) -> None:
        self.calls: List[tuple] = []
        self.init_returncode = init_returncode

    def run_init_blocking(self, binary: str, datadir: Any, genesis: Any) -> int:
        self.calls.append(("init", binary, Path(datadir), Path(genesis)))
        if self.init_returncode == 0:
            (Path(datadir) / "geth" / "chaindata").mkdir(parents=True, exist_ok=True)
        return self.init_returncode

    def run_foreground(self, binary: str, argv: Sequence[str]) -> FakeProcess:
        self.calls.append(("start", binary, list(argv)))
        return FakeProcess(argv)

    def kinds(self) -> List[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty working directory; the generated preload script lands inside it too."""
    work = tmp_path / "project"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.delenv("ETHDEV_CONFIG", raising=False)
    monkeypatch.delenv("ETHDEV_GETH", raising=False)
    monkeypatch.setattr(preload, "PRELOAD_PATH", tmp_path / "resources" / "console.preload.js")
    return work


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger("ethdev")
    for h in list(root.handlers):
        root.removeHandler(h)
    root.propagate = True
    elog.clear_context()
