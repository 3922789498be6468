"""Money and equity formatting for terminal output."""

from decimal import Decimal

from ..core.config import get_config


def money(amount: Decimal) -> str:
    symbol = get_config().currency_symbol
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def signed_money(amount: Decimal) -> str:
    """Like money() but always signed, colored green/red for rich."""
    if amount > 0:
        return f"[green]+{money(amount)}[/green]"
    if amount < 0:
        return f"[red]{money(amount)}[/red]"
    return f"[dim]{money(amount)}[/dim]"


def pct(equity: Decimal) -> str:
    return f"{equity * 100:.1f}%"
