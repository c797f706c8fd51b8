"""CLI entrypoint for the seed farm dashboard."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Annotated, Awaitable, Callable

import typer
from rich.console import Console
from rich.live import Live

from .app import FarmApp
from .exceptions import FarmError
from .formatter import render_view
from .ledger.signer import SubmittedTransaction
from .logger import setup_logging
from .settings import FarmSettings
from .transactions.controller import TransactionController

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Live dashboard and transactions for the SEED staking farm.",
)


def _settings(ctx: typer.Context) -> FarmSettings:
    settings = ctx.obj
    if not isinstance(settings, FarmSettings):
        raise typer.BadParameter("settings were not initialised")
    return settings


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [seed_farm] table).",
        ),
    ] = None,
    rpc_url: Annotated[
        str | None,
        typer.Option("--rpc-url", help="JSON-RPC endpoint of the farm's chain."),
    ] = None,
    poll_interval: Annotated[
        float | None,
        typer.Option("--poll-interval", help="Seconds between two poll ticks."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config (with secrets redacted) and exit.",
        ),
    ] = False,
):
    """Load configuration shared by every command."""
    if config_path:
        os.environ["SEED_FARM_CONFIG"] = str(config_path)

    init_kwargs: dict[str, str | float] = {}
    if rpc_url is not None:
        init_kwargs["rpc_url"] = rpc_url
    if poll_interval is not None:
        init_kwargs["poll_interval"] = poll_interval
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    settings = FarmSettings(**init_kwargs)

    setup_logging(settings.log_level)
    ctx.obj = settings

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=2))
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


async def _watch(farm: FarmApp) -> None:
    console = Console()
    with Live(
        render_view(farm.farm_state.view), console=console, refresh_per_second=4
    ) as live:
        farm.farm_state.subscribe(lambda view: live.update(render_view(view)))
        await farm.start()
        try:
            await asyncio.Event().wait()
        finally:
            await farm.close()


@app.command()
def watch(ctx: typer.Context):
    """Show the live dashboard, refreshed on every poll tick."""
    farm = FarmApp.build(_settings(ctx))
    try:
        asyncio.run(_watch(farm))
    except KeyboardInterrupt:
        pass


async def _status(farm: FarmApp) -> None:
    await farm.session.restore()
    await farm.poller.tick(farm.session.account)


@app.command()
def status(ctx: typer.Context):
    """Poll the farm once and print the dashboard."""
    farm = FarmApp.build(_settings(ctx))
    asyncio.run(_status(farm))
    Console().print(render_view(farm.farm_state.view))


@app.command()
def connect(ctx: typer.Context):
    """Ask the wallet for permission and remember the connection."""
    farm = FarmApp.build(_settings(ctx))
    if not asyncio.run(farm.session.connect()):
        typer.echo("Wallet connection failed; see logs for details.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Connected: {farm.session.account}")


@app.command()
def disconnect(ctx: typer.Context):
    """Forget the remembered wallet connection."""
    farm = FarmApp.build(_settings(ctx))
    asyncio.run(farm.session.disconnect())
    typer.echo("Disconnected")


def _submit(
    ctx: typer.Context,
    action: Callable[[TransactionController], Awaitable[SubmittedTransaction]],
) -> None:
    farm = FarmApp.build(_settings(ctx))

    async def _run() -> SubmittedTransaction:
        await farm.session.restore()
        return await action(farm.controller)

    try:
        tx = asyncio.run(_run())
    except FarmError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"{tx.action} {tx.status.value}: {tx.tx_hash}")


@app.command()
def approve(ctx: typer.Context):
    """Approve the farm to spend the LP token."""
    _submit(ctx, lambda controller: controller.approve())


@app.command()
def stake(
    ctx: typer.Context,
    amount: Annotated[str, typer.Argument(help="Amount of LP tokens to stake.")],
):
    """Stake an amount of LP tokens."""
    _submit(ctx, lambda controller: controller.stake(amount))


@app.command(name="exit")
def exit_farm(ctx: typer.Context):
    """Withdraw the whole stake and claim rewards."""
    _submit(ctx, lambda controller: controller.exit())


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
