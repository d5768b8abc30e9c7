"""Root CLI group for mktledger with global flags and command registration."""

from __future__ import annotations

import click

from mktledger import __version__
from mktledger.commands import register_commands
from mktledger.commands._context import AppContext
from mktledger.config.settings import LedgerSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mktledger")
@click.option("--as", "caller", default=None, help="Act as this user identity.")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    caller: str | None,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """mktledger — marketplace ledger for resource and currency balances."""
    ctx.ensure_object(dict)
    settings = LedgerSettings.from_cli(
        config_path=config_path,
        caller=caller,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    ctx.call_on_close(ctx.obj.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
