"""Partner Ledger CLI entry point."""

import typer

from ..core.config import get_config
from ..core.log import configure_logging
from ..data.database import get_db
from .commands import balances, import_cmd, partners, transactions

app = typer.Typer(
    name="pl",
    help="Shared-expense ledger for business partners with equity-weighted splits",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(partners.app, name="partners", help="Manage partners and equity")
app.add_typer(transactions.app, name="tx", help="Record expenses, receivables and payables")
app.add_typer(balances.app, name="balances", help="Partner balances and settlement")
app.add_typer(import_cmd.app, name="import", help="Import spreadsheet exports")


@app.callback()
def startup():
    """Initialize logging and the database on first run."""
    configure_logging(get_config().log_level)
    get_db()


if __name__ == "__main__":
    app()
