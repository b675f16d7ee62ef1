"""Project setup and inspection: `ethdev init`, `ethdev config`."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from ethdev import genesis
from ethdev.cli._state import fail, state_of
from ethdev.config import PROJECT_FILENAMES, find_project_file, resolve_devchain
from ethdev.errors import EthdevError, filesystem_error
from ethdev.logging import bind

DEFAULT_PROJECT_TOML = """\
# ethdev project settings. Command-line flags take precedence over these.

[node]
binary = "geth"

[devchain]
datadir = "devchain"
identity = "ethdev"
port = 30303
rpchost = "localhost"
rpcport = 8545
rpccorsdomain = "*"
verbosity = 3
accounts = 3
password = "ethdev"
mine = true
static_nodes = []

[transaction]
gas = 3000000
"""


def _write_project_file(root: Path) -> Path:
    target = root / PROJECT_FILENAMES[0]
    try:
        target.write_text(DEFAULT_PROJECT_TOML, encoding="utf-8")
    except OSError as e:
        raise filesystem_error(e, path=target) from e
    return target


def init(ctx: typer.Context) -> None:
    """
    Prepare the current directory as an ethdev project.

    Writes ethdev.toml and genesis.json when they are missing; existing files
    are left alone.
    """
    bind(command="init")
    state = state_of(ctx)
    try:
        if state.config_path is None and find_project_file() is None:
            created = _write_project_file(Path.cwd())
            typer.echo(f"Created {created}")
            project = state.project()
        else:
            # an explicit --config that does not exist fails here, before any output
            project = state.project()
            typer.echo(f"Using existing {project.path}")

        cfg = resolve_devchain(project=project)
        status = genesis.ensure(cfg.genesis)
    except EthdevError as e:
        fail(e)

    if status.existed:
        typer.echo(f"Genesis already present at {status.path}")
    else:
        typer.echo(f"Created genesis at {status.path}")
    typer.echo("Run `ethdev devchain` to initialize and start the node.")


def show_config(ctx: typer.Context) -> None:
    """Print the effective devchain settings as JSON."""
    try:
        cfg = resolve_devchain(project=state_of(ctx).project())
    except EthdevError as e:
        fail(e)
    typer.echo(json.dumps(cfg.to_dict(), indent=2, sort_keys=True))
