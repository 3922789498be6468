"""CLI commands for importing legacy spreadsheet exports."""

from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...core.exceptions import PartnerLedgerError

app = typer.Typer(help="Import transactions from spreadsheet exports")
console = Console()


@app.command("legacy")
def import_legacy(
    csv_path: Path = typer.Argument(..., help="Path to the exported transactions CSV"),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Validate without writing to DB"),
):
    """Import the legacy spreadsheet CSV. Re-running on the same file is safe; duplicates are skipped."""
    if not csv_path.exists():
        console.print(f"[red]Error:[/red] File not found: {csv_path}")
        raise typer.Exit(1)

    from ...importers.legacy import LegacyCsvImporter

    importer = LegacyCsvImporter(dry_run=dry_run)

    mode = "[yellow]DRY RUN[/yellow] — " if dry_run else ""
    console.print(f"\n{mode}Importing [bold]{csv_path.name}[/bold]…\n")

    try:
        result = importer.run(csv_path)
    except PartnerLedgerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _print_result(result)


def _print_result(result) -> None:
    dry_label = " [yellow](dry run — no changes written)[/yellow]" if result.dry_run else ""

    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 1))
    table.add_column("", style="dim")
    table.add_column("", justify="right")

    table.add_row("Source", f"[bold]{result.source}[/bold]")
    table.add_section()
    table.add_row("Transactions imported", str(result.transactions_imported))
    table.add_row("Transactions skipped (dup)", str(result.transactions_skipped))
    table.add_row("Rows rejected", str(result.rows_rejected))

    title = f"Import result{dry_label}"
    console.print(Panel(table, title=title, border_style="green" if not result.dry_run else "yellow"))

    if result.unresolved_names:
        console.print(f"\n[yellow]Unknown payers ignored:[/yellow] {', '.join(result.unresolved_names)}")
        console.print("  Add them with [bold]pl partners add[/bold] and re-import to credit their payments.")

    if result.warnings:
        console.print("\n[yellow]Warnings:[/yellow]")
        for w in result.warnings:
            console.print(f"  • {w}")

    if not result.dry_run:
        console.print("\n[green]Done.[/green] Run [bold]pl balances show[/bold] to verify.")
