from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, Optional

import typer

from ethdev.config import ProjectConfig, load_project
from ethdev.errors import EthdevError, exit_code_for
from ethdev.logging import get_logger

log = get_logger("ethdev.cli")


@dataclass
class CliState:
    """Per-invocation options from the top-level callback, carried on `ctx.obj`."""

    config_path: Optional[Path] = None
    json_output: bool = False

    def project(self) -> ProjectConfig:
        return load_project(self.config_path)


def state_of(ctx: typer.Context) -> CliState:
    obj = ctx.find_object(CliState)
    return obj if obj is not None else CliState()


def fail(err: EthdevError) -> NoReturn:
    log.debug("command failed", extra={"error": err.to_dict(include_cause=True)})
    typer.echo(f"Error: {err}", err=True)
    raise typer.Exit(exit_code_for(err))
