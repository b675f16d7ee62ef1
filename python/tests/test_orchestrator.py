from __future__ import annotations

import json
from pathlib import Path

import pytest

from ethdev.config import DevchainFlags, ProjectConfig, resolve_devchain
from ethdev.devchain import orchestrator, preload
from ethdev.devchain.state import DataDirAction
from ethdev.errors import GenesisCreated

TEMPLATE = b"// template\n"


def _cfg(work: Path, **flags):
    project = flags.pop("project", None)
    return resolve_devchain(DevchainFlags(**flags), project, cwd=work)


def test_first_run_creates_genesis_and_stops(project_dir: Path, launcher) -> None:
    cfg = _cfg(project_dir)
    with pytest.raises(GenesisCreated) as info:
        orchestrator.run_devchain(cfg, launcher=launcher, template=TEMPLATE)
    assert str(cfg.genesis) in str(info.value)
    assert cfg.genesis.exists()
    assert launcher.calls == []
    assert not preload.PRELOAD_PATH.exists()


def test_second_run_inits_then_starts(project_dir: Path, launcher) -> None:
    cfg = _cfg(project_dir)
    with pytest.raises(GenesisCreated):
        orchestrator.run_devchain(cfg, launcher=launcher, template=TEMPLATE)

    proc = orchestrator.run_devchain(cfg, launcher=launcher, template=TEMPLATE)

    assert launcher.kinds() == ["init", "start"]
    _, binary, datadir, genesis_path = launcher.calls[0]
    assert (binary, datadir, genesis_path) == ("geth", project_dir.resolve() / "devchain", project_dir.resolve() / "genesis.json")

    argv = proc.args
    for flag, value in [("--port", "30303"), ("--rpcport", "8545"), ("--verbosity", "3"), ("--rpccorsdomain", "*")]:
        assert argv[argv.index(flag) + 1] == value
    assert argv[argv.index("--preload") + 1] == str(preload.PRELOAD_PATH)
    assert preload.PRELOAD_PATH.read_bytes() == preload.build(cfg, TEMPLATE)


def test_ready_path_is_idempotent(project_dir: Path, launcher) -> None:
    cfg = _cfg(project_dir)
    cfg.genesis.write_text("{}", encoding="utf-8")
    (cfg.datadir / "geth" / "chaindata").mkdir(parents=True)
    before = cfg.genesis.stat().st_mtime_ns

    for _ in range(2):
        assert orchestrator.prepare(cfg, launcher) is DataDirAction.READY
        orchestrator.start(cfg, launcher, template=TEMPLATE)

    assert launcher.kinds() == ["start", "start"]
    assert cfg.genesis.read_text(encoding="utf-8") == "{}"
    assert cfg.genesis.stat().st_mtime_ns == before


def test_ready_path_without_genesis_does_not_create_one(project_dir: Path, launcher) -> None:
    cfg = _cfg(project_dir)
    (cfg.datadir / "chaindata").mkdir(parents=True)
    orchestrator.run_devchain(cfg, launcher=launcher, template=TEMPLATE)
    assert not cfg.genesis.exists()
    assert launcher.kinds() == ["start"]


def test_reset_removes_initialized_directory(project_dir: Path, launcher) -> None:
    cfg = _cfg(project_dir, reset=True)
    cfg.genesis.write_text("{}", encoding="utf-8")
    (cfg.datadir / "geth" / "chaindata").mkdir(parents=True)
    marker = cfg.datadir / "keystore" / "old-key"
    marker.parent.mkdir()
    marker.write_text("x", encoding="utf-8")

    assert orchestrator.prepare(cfg, launcher) is DataDirAction.EXPLICIT_RESET
    assert not marker.exists()
    assert launcher.kinds() == ["init"]


def test_reset_without_genesis_stops_after_removal(project_dir: Path, launcher) -> None:
    cfg = _cfg(project_dir, reset=True)
    (cfg.datadir / "geth" / "chaindata").mkdir(parents=True)
    with pytest.raises(GenesisCreated):
        orchestrator.run_devchain(cfg, launcher=launcher, template=TEMPLATE)
    assert not cfg.datadir.exists()
    assert cfg.genesis.exists()
    assert launcher.calls == []


def test_custom_datadir_uses_sibling_genesis(project_dir: Path, launcher) -> None:
    cfg = _cfg(project_dir, datadir="chains/dev")
    sibling = project_dir.resolve() / "chains" / "genesis.json"
    assert cfg.genesis == sibling
    with pytest.raises(GenesisCreated):
        orchestrator.run_devchain(cfg, launcher=launcher, template=TEMPLATE)
    assert sibling.exists()
    assert not (project_dir / "genesis.json").exists()


def test_static_nodes_written_before_start(project_dir: Path, launcher) -> None:
    peers = ["enode://aa@127.0.0.1:30304"]
    cfg = _cfg(project_dir, project=ProjectConfig(devchain={"static_nodes": peers}))
    (cfg.datadir / "chaindata").mkdir(parents=True)

    orchestrator.run_devchain(cfg, launcher=launcher, template=TEMPLATE)
    assert json.loads((cfg.datadir / "static-nodes.json").read_text(encoding="utf-8")) == peers


def test_failed_init_still_starts(project_dir: Path, launcher) -> None:
    launcher.init_returncode = 1
    cfg = _cfg(project_dir)
    cfg.genesis.write_text("{}", encoding="utf-8")
    orchestrator.run_devchain(cfg, launcher=launcher, template=TEMPLATE)
    assert launcher.kinds() == ["init", "start"]
