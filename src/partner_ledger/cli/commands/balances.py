"""Balance commands: per-partner summary and settlement plan."""

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from ...core.config import get_config
from ...core.ledger import aggregate, settle, totals_by_type
from ...core.rebalancer import equity_warning
from ...data.repositories.partners_repo import PartnersRepository
from ...data.repositories.transactions_repo import TransactionsRepository
from ..format import money, pct, signed_money

app = typer.Typer(help="Partner balances and settlement")
console = Console()
partners_repo = PartnersRepository()
tx_repo = TransactionsRepository()


@app.command("show")
def show():
    """Show what each partner paid, owes and is owed."""
    partners = partners_repo.list_all()
    if not partners:
        console.print("[yellow]No partners yet. Add one with: pl partners add <name>[/yellow]")
        return

    txs = tx_repo.list_all()
    balances = aggregate(txs, partners)

    table = Table(title="Partner balances")
    table.add_column("Partner", style="bold")
    table.add_column("Equity", justify="right")
    table.add_column("Paid", justify="right")
    table.add_column("Liability", justify="right")
    table.add_column("Receivables", justify="right")
    table.add_column("Net", justify="right")
    table.add_column("")

    for p in partners:
        b = balances[p.id]
        table.add_row(
            p.name,
            pct(p.equity),
            money(b.paid),
            money(b.liability),
            money(b.receivables),
            signed_money(b.total_net),
            "[green]receives[/green]" if b.should_receive else "[red]pays[/red]",
        )

    console.print(table)

    totals = Table(box=box.SIMPLE, show_header=False, padding=(0, 1))
    totals.add_column("", style="dim")
    totals.add_column("", justify="right")
    for tx_type, amount in totals_by_type(txs).items():
        totals.add_row(f"Total {tx_type.value.lower()}s", money(amount))
    console.print(totals)

    if equity_warning(partners, get_config().equity_tolerance):
        console.print("[yellow]Warning: partner equity does not sum to 100%. Figures may be off.[/yellow]")


@app.command("settle")
def settle_cmd():
    """Suggest transfers that bring every partner's net to zero."""
    partners = partners_repo.list_all()
    if not partners:
        console.print("[yellow]No partners yet.[/yellow]")
        return

    names = {p.id: p.name for p in partners}
    transfers = settle(aggregate(tx_repo.list_all(), partners))
    if not transfers:
        console.print("[green]All settled. Nobody owes anything.[/green]")
        return

    table = Table(title="Settlement plan")
    table.add_column("From", style="red")
    table.add_column("To", style="green")
    table.add_column("Amount", justify="right")
    for t in transfers:
        table.add_row(names[t.debtor_id], names[t.creditor_id], money(t.amount))

    console.print(table)
