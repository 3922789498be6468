"""Partner management commands."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import get_config
from ...core.exceptions import PartnerLedgerError
from ...core.rebalancer import (
    ZeroHintPolicy,
    add_partner,
    equity_total,
    equity_warning,
    remove_partner,
)
from ...data.repositories.partners_repo import PartnersRepository
from ..format import pct

app = typer.Typer(help="Manage partners and equity")
console = Console()
repo = PartnersRepository()


def _print_partners(partners) -> None:
    table = Table(title="Partners")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Equity", justify="right")
    table.add_column("Share", justify="right")

    for p in partners:
        table.add_row(p.id, p.name, f"{p.equity:.3f}", pct(p.equity))

    console.print(table)
    total = equity_total(partners)
    console.print(f"  Total equity: {pct(total)}")
    if equity_warning(partners, get_config().equity_tolerance):
        console.print("  [yellow]Warning: equity does not sum to 100%[/yellow]")


@app.command("list")
def list_partners():
    """List partners and their equity."""
    partners = repo.list_all()
    if not partners:
        console.print("[yellow]No partners yet. Add one with: pl partners add <name>[/yellow]")
        return
    _print_partners(partners)


@app.command("add")
def add(
    name: str = typer.Argument(..., help="Partner name"),
    equity: Optional[str] = typer.Option(
        None, "--equity", "-e", help="Equity fraction (0-1). Omit for an equal share."
    ),
    policy: Optional[ZeroHintPolicy] = typer.Option(
        None, "--policy", help="Without --equity: equalize everyone, or dilute existing partners"
    ),
):
    """Add a partner. Existing equity is adjusted so the total stays 100%."""
    cfg = get_config()
    try:
        updated = add_partner(
            repo.list_all(),
            name,
            equity,
            policy=policy or cfg.zero_hint_policy,
            tolerance=cfg.equity_tolerance,
        )
        partners = repo.replace_all(updated)
    except PartnerLedgerError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Partner '{name.strip()}' added. Equity has been adjusted.[/green]")
    _print_partners(partners)


@app.command("remove")
def remove(
    name: str = typer.Argument(..., help="Partner name or ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Remove a partner. Their equity is shared among the others pro rata."""
    partners = repo.list_all()
    target = repo.get_by_name(name) or repo.get_by_id(name)
    if not target:
        console.print(f"[red]Partner '{name}' not found[/red]")
        raise typer.Exit(1)

    if len(partners) <= 1:
        console.print("[red]Cannot delete the last partner[/red]")
        raise typer.Exit(1)

    if not force:
        confirm = typer.confirm(
            f"Remove '{target.name}'? Their equity will be redistributed among remaining partners."
        )
        if not confirm:
            console.print("Cancelled.")
            return

    try:
        remaining = repo.replace_all(remove_partner(partners, target.id))
    except PartnerLedgerError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Partner '{target.name}' removed.[/green]")
    _print_partners(remaining)
