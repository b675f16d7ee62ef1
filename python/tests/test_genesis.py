from __future__ import annotations

import json
from pathlib import Path

import pytest

from ethdev import genesis
from ethdev.errors import FilesystemError


def test_bundled_template_is_json() -> None:
    doc = json.loads(genesis.GENESIS_TEMPLATE.read_text(encoding="utf-8"))
    assert "config" in doc and "alloc" in doc


def test_ensure_copies_template_when_missing(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "genesis.json"
    status = genesis.ensure(target)
    assert status.existed is False
    assert status.path == target
    assert target.read_bytes() == genesis.GENESIS_TEMPLATE.read_bytes()


def test_ensure_never_overwrites(tmp_path: Path) -> None:
    target = tmp_path / "genesis.json"
    target.write_text('{"custom": true}', encoding="utf-8")
    status = genesis.ensure(target)
    assert status.existed is True
    assert target.read_text(encoding="utf-8") == '{"custom": true}'


def test_ensure_surfaces_filesystem_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(FilesystemError) as info:
        genesis.ensure(blocker / "genesis.json")
    assert isinstance(info.value.cause, OSError)
    assert str(info.value) == str(info.value.cause)
