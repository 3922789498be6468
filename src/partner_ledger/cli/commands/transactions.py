"""Transaction commands: add, list, edit, delete."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import get_config
from ...core.exceptions import PartnerLedgerError
from ...core.ledger import allocate, filter_by_type
from ...core.models import Transaction, TransactionStatus, TransactionType
from ...core.parsing import (
    parse_amount,
    parse_settled,
    partner_label,
    payers_label,
    resolve_payers,
    resolve_recipient,
    status_label,
)
from ...data.repositories.partners_repo import PartnersRepository
from ...data.repositories.transactions_repo import TransactionsRepository
from ..format import money, signed_money

app = typer.Typer(help="Record ledger transactions")
console = Console()
partners_repo = PartnersRepository()
tx_repo = TransactionsRepository()

# CLI spellings accepted by `pl tx edit`
_FIELD_ALIASES = {
    "type": "transaction_type",
    "settled": "amount_settled",
    "paid-by": "paid_by",
    "received-by": "received_by",
}


def _resolve_payers_or_exit(text: str, partners) -> tuple[str, ...]:
    resolved = resolve_payers(text, partners)
    if resolved.unresolved:
        console.print(f"[red]Unknown partner(s): {', '.join(resolved.unresolved)}[/red]")
        raise typer.Exit(1)
    return resolved.ids


@app.command("add")
def add(
    description: str = typer.Argument(..., help="What the money was for"),
    amount: str = typer.Argument(..., help="Amount, e.g. 20626, 20,626 or ₹20,626"),
    tx_type: TransactionType = typer.Option(
        TransactionType.EXPENSE, "--type", "-t", case_sensitive=False, help="Transaction type"
    ),
    status: TransactionStatus = typer.Option(
        TransactionStatus.PENDING, "--status", "-s", case_sensitive=False, help="Status"
    ),
    settled: Optional[str] = typer.Option(None, "--settled", help="Amount settled so far (Partial)"),
    paid_by: str = typer.Option(
        "Pending", "--paid-by", "-p", help='Payer name(s): "Karan", "Karan + Prabee", "All Partners"'
    ),
    received_by: str = typer.Option(
        "", "--received-by", "-r", help='Recipient: partner name, "Business Account", or any label'
    ),
    notes: str = typer.Option("", "--notes", "-n", help="Notes"),
):
    """Record a transaction."""
    partners = partners_repo.list_all()
    payer_ids = _resolve_payers_or_exit(paid_by, partners)

    try:
        tx = tx_repo.create(Transaction(
            description=description,
            amount=parse_amount(amount),
            transaction_type=tx_type,
            status=status,
            amount_settled=parse_settled(settled),
            paid_by=payer_ids,
            received_by=resolve_recipient(received_by, partners),
            notes=notes,
        ))
    except PartnerLedgerError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]{tx.transaction_type.value} '{tx.description}' of {money(tx.amount)} "
        f"recorded (ID: {tx.id})[/green]"
    )


@app.command("list")
def list_transactions(
    tx_type: Optional[TransactionType] = typer.Option(
        None, "--type", "-t", case_sensitive=False, help="Only show one type"
    ),
):
    """List transactions with each partner's net effect."""
    partners = partners_repo.list_all()
    txs = tx_repo.list_all()
    if tx_type:
        txs = filter_by_type(txs, tx_type)
    if not txs:
        console.print("[yellow]No transactions yet. Record one with: pl tx add <description> <amount>[/yellow]")
        return

    symbol = get_config().currency_symbol
    title = f"{tx_type.value} transactions" if tx_type else "Transactions"
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Description", style="bold")
    table.add_column("Type")
    table.add_column("Amount", justify="right")
    table.add_column("Status")
    table.add_column("Paid By")
    table.add_column("Received By")
    for p in partners:
        table.add_column(f"{p.name} net", justify="right")

    for tx in txs:
        nets = [signed_money(allocate(tx, p.id, partners).net) for p in partners]
        table.add_row(
            tx.id,
            tx.description,
            tx.transaction_type.value,
            money(tx.amount),
            status_label(tx.status, tx.amount_settled, symbol),
            payers_label(tx.paid_by, partners),
            partner_label(tx.received_by, partners),
            *nets,
        )

    console.print(table)


@app.command("edit")
def edit(
    tx_id: str = typer.Argument(..., help="Transaction ID"),
    field: str = typer.Argument(..., help="description, amount, type, status, settled, paid-by, received-by, notes"),
    value: str = typer.Argument(..., help="New value (partner names for paid-by / received-by)"),
):
    """Change one field of a transaction."""
    field_name = _FIELD_ALIASES.get(field, field)
    partners = partners_repo.list_all()

    new_value = value
    if field_name == "paid_by":
        new_value = _resolve_payers_or_exit(value, partners)
    elif field_name == "received_by":
        new_value = resolve_recipient(value, partners)

    try:
        if field_name == "amount":
            new_value = parse_amount(value)
        elif field_name == "amount_settled":
            new_value = parse_settled(value)
        tx = tx_repo.update_field(tx_id, field_name, new_value)
    except PartnerLedgerError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Transaction '{tx.description}' updated ({field_name}).[/green]")


@app.command("delete")
def delete(
    tx_id: str = typer.Argument(..., help="Transaction ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a transaction."""
    tx = tx_repo.get_by_id(tx_id)
    if not tx:
        console.print(f"[red]Transaction {tx_id} not found[/red]")
        raise typer.Exit(1)

    if not force:
        confirm = typer.confirm(f"Delete transaction '{tx.description}'?")
        if not confirm:
            console.print("Cancelled.")
            return

    tx_repo.delete(tx_id)
    console.print(f"[green]Transaction '{tx.description}' deleted.[/green]")
