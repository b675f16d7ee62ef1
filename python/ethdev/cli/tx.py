"""
ethdev.cli.tx — transaction option helpers.

Implements:
  - ethdev tx build     Format transaction options as the node expects them

Signing and broadcasting are left to the node console.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional

import typer

from ethdev.cli._state import fail, state_of
from ethdev.cli.accounts import RPC_ENV
from ethdev.config import resolve_devchain
from ethdev.errors import EthdevError
from ethdev.session import open_session
from ethdev.tx import account_index, format_options

app = typer.Typer(help="Transaction options (build)")


@app.command()
def build(
    ctx: typer.Context,
    from_addr: Optional[str] = typer.Option(None, "--from", help="Sender address or account index"),
    to_addr: Optional[str] = typer.Option(None, "--to", help="Recipient address"),
    value: Optional[str] = typer.Option(None, "--value", help="Amount to transfer (in ether)"),
    gas: Optional[int] = typer.Option(None, "--gas", help="Gas limit"),
    gas_price: Optional[int] = typer.Option(None, "--gas-price", help="Gas price (wei/gas)"),
    nonce: Optional[int] = typer.Option(None, "--nonce", help="Transaction nonce"),
    data: Optional[str] = typer.Option(None, "--data", help="Call data (hex, starts with 0x)"),
    rpc_url: Optional[str] = typer.Option(None, "--rpc-url", help="JSON-RPC endpoint", envvar=RPC_ENV),
) -> None:
    """
    Print transaction options as JSON.

    Examples:
      ethdev tx build --from 0 --to 0x... --value 1.5
      ethdev tx build --from 0x... --to 0x... --gas 21000
    """
    raw = {
        "from": from_addr,
        "to": to_addr,
        "value": value,
        "gas": gas,
        "gasPrice": gas_price,
        "nonce": nonce,
        "data": data,
    }
    try:
        project = state_of(ctx).project()
        cfg = resolve_devchain(project=project)
        defaults = project.transaction

        # Only talk to the node when --from actually names an index.
        session = None
        if account_index(from_addr if from_addr is not None else defaults.get("from")) is not None:
            session = open_session(cfg, rpc_url=rpc_url)

        def _accounts() -> List[Any]:
            return session.accounts() if session is not None else []

        try:
            options = format_options(raw, defaults, _accounts)
        finally:
            if session is not None:
                session.close()
    except EthdevError as e:
        fail(e)

    typer.echo(json.dumps(options, indent=2))
