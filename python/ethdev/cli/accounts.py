"""`ethdev accounts`: list the node's accounts with the index `--from` accepts."""

from __future__ import annotations

import json
from typing import Optional

import typer

from ethdev.cli._state import fail, state_of
from ethdev.config import resolve_devchain
from ethdev.errors import EthdevError
from ethdev.session import open_session

RPC_ENV = "ETHDEV_RPC_URL"


def accounts(
    ctx: typer.Context,
    rpc_url: Optional[str] = typer.Option(None, "--rpc-url", help="JSON-RPC endpoint", envvar=RPC_ENV),
) -> None:
    """Show accounts known to the running devchain."""
    state = state_of(ctx)
    try:
        cfg = resolve_devchain(project=state.project())
        with open_session(cfg, rpc_url=rpc_url) as session:
            known = session.accounts()
    except EthdevError as e:
        fail(e)

    if state.json_output:
        typer.echo(json.dumps(known, indent=2))
        return
    if not known:
        typer.echo("No accounts.")
        return
    for index, address in enumerate(known):
        typer.echo(f"{index:>3}  {address}")
