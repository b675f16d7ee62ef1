"""`ethdev devchain`: initialize, reset or start the local development node."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ethdev.cli._state import fail, state_of
from ethdev.config import BINARY_ENV, DevchainFlags, resolve_devchain
from ethdev.devchain import orchestrator
from ethdev.devchain.process import NodeLauncher, wait_attached
from ethdev.errors import EthdevError, GenesisCreated, exit_code_for
from ethdev.logging import bind


def devchain(
    ctx: typer.Context,
    reset: bool = typer.Option(False, "--reset", help="Remove the data directory and initialize again"),
    off: bool = typer.Option(False, "--off", help="Disable auto-mining"),
    accounts: Optional[int] = typer.Option(None, "--accounts", help="Accounts to create on a fresh chain"),
    password: Optional[str] = typer.Option(None, "--password", help="Password for created accounts"),
    identity: Optional[str] = typer.Option(None, "--identity", help="Node identity [default: ethdev]"),
    datadir: Optional[Path] = typer.Option(None, "--datadir", help="Data directory [default: ./devchain]"),
    port: Optional[int] = typer.Option(None, "--port", help="P2P port [default: 30303]"),
    rpchost: Optional[str] = typer.Option(None, "--rpchost", help="RPC bind host [default: localhost]"),
    rpcport: Optional[int] = typer.Option(None, "--rpcport", help="RPC port [default: 8545]"),
    verbosity: Optional[int] = typer.Option(None, "--verbosity", help="Node log verbosity 0-6 [default: 3]"),
    rpccorsdomain: Optional[str] = typer.Option(None, "--rpccorsdomain", help="Allowed CORS origins [default: *]"),
    binary: Optional[str] = typer.Option(None, "--binary", help="Node binary [default: geth]", envvar=BINARY_ENV),
) -> None:
    """
    Start a local devchain, initializing it first when needed.

    The first run on an empty project only writes genesis.json and stops so it
    can be reviewed; the next run initializes the data directory and opens the
    node console.
    """
    bind(command="devchain")
    flags = DevchainFlags(
        binary=binary,
        datadir=datadir,
        identity=identity,
        port=port,
        rpchost=rpchost,
        rpcport=rpcport,
        rpccorsdomain=rpccorsdomain,
        verbosity=verbosity,
        accounts=accounts,
        password=password,
        mine=False if off else None,
        reset=reset,
    )
    try:
        cfg = resolve_devchain(flags, state_of(ctx).project())
        proc = orchestrator.run_devchain(cfg, launcher=NodeLauncher())
    except GenesisCreated as e:
        typer.echo(str(e))
        raise typer.Exit(exit_code_for(e))
    except EthdevError as e:
        fail(e)

    raise typer.Exit(wait_attached(proc))
