"""Rich console rendering of the farm view."""

from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .constants import LP_SYMBOL, QUOTE_SYMBOL, REWARD_SYMBOL
from .view import FarmView


def render_view(view: FarmView) -> Panel:
    """Build the dashboard panel for one view.

    Args:
        view: The view model to display

    Returns:
        A rich Panel ready for Console.print or Live.update
    """
    header = Text()
    header.append(f"1 {REWARD_SYMBOL} = {view.price_display} {QUOTE_SYMBOL}", style="bold")
    header.append("    ")
    header.append(
        view.account_label, style="cyan" if view.connected else "dim"
    )

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="dim")
    table.add_column("Value", style="green", justify="right")
    table.add_column("Unit", style="dim")
    table.add_row("Balance in your wallet", view.balance_display, LP_SYMBOL)
    table.add_row("Your Stake", view.stake_display, LP_SYMBOL)
    table.add_row("Your Reward", view.reward_display, REWARD_SYMBOL)
    table.add_row("Farm APY", view.apr_display, "%")

    actions = Text("Actions: ", style="dim")
    actions.append(" | ".join(action.value for action in view.actions), style="yellow")

    return Panel(
        Group(header, Text(), table, Text(), actions),
        title="[bold]Seed Farming[/]",
        border_style="blue",
    )
