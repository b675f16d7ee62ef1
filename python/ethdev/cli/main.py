"""
ethdev - command line control surface for a local development chain.

Commands:
  ethdev init          Create ethdev.toml and genesis.json in the current directory
  ethdev devchain      Initialize, reset or start the local node console
  ethdev config        Print the effective devchain settings
  ethdev accounts      List accounts of the running node
  ethdev tx build      Format transaction options

Global options:
  --config PATH          Project config file (env: ETHDEV_CONFIG)
  --json                 JSON output where a command supports it
  --log-format TEXT      text | json (env: ETHDEV_LOG_FORMAT)
  --verbose / -v         Debug logging
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ethdev import logging as elog
from ethdev.cli import accounts, devchain, project, tx
from ethdev.cli._state import CliState
from ethdev.config import CONFIG_ENV

app = typer.Typer(
    name="ethdev",
    help="Local development chain tooling",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to project config file",
        envvar=CONFIG_ENV,
    ),
    json_output: bool = typer.Option(False, "--json", help="Output JSON instead of human-readable text"),
    log_format: Optional[str] = typer.Option(
        None,
        "--log-format",
        help="Log format: text or json",
        envvar=elog.LOG_FORMAT_ENV,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Increase verbosity"),
) -> None:
    """
    ethdev — prepare and launch a local development node.

    Settings are resolved per field in this order (highest first):
      1. Command-line flags
      2. Project config file (ethdev.toml / ethdev.json, or --config)
      3. Built-in defaults
    """
    if log_format is not None and log_format not in ("text", "json"):
        raise typer.BadParameter("must be 'text' or 'json'", param_hint="--log-format")
    elog.configure(
        json=None if log_format is None else log_format == "json",
        level="DEBUG" if verbose else "INFO",
    )
    ctx.obj = CliState(config_path=config, json_output=json_output)


app.command("init")(project.init)
app.command("devchain")(devchain.devchain)
app.command("config")(project.show_config)
app.command("accounts")(accounts.accounts)
app.add_typer(tx.app, name="tx")


def main() -> None:
    """Entry point for the ethdev CLI."""
    app()


if __name__ == "__main__":
    main()
