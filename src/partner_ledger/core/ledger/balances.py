"""Per-partner balance totals and ledger summaries."""

from decimal import Decimal

from ..models import Partner, PersonBalance, Transaction, TransactionType
from .allocation import allocate


def aggregate(transactions: list[Transaction], partners: list[Partner]) -> dict[str, PersonBalance]:
    """Fold every (transaction, partner) allocation into per-partner totals.

    Each call starts from zero. Transactions are summed in id order, so the
    result does not depend on the order they are passed in.

    Args:
        transactions: Snapshot of ledger entries.
        partners: Snapshot of partners with their current equity.

    Returns:
        Dict mapping partner id to its PersonBalance.
    """
    balances = {p.id: PersonBalance() for p in partners}
    ordered = sorted(transactions, key=lambda t: t.id)

    for partner in partners:
        balance = balances[partner.id]
        for tx in ordered:
            calc = allocate(tx, partner.id, partners)
            balance.paid += calc.payment
            balance.liability += calc.liability
            balance.receivables += calc.receivable
            balance.total_net += calc.net

    return balances


def totals_by_type(transactions: list[Transaction]) -> dict[TransactionType, Decimal]:
    """Sum transaction amounts per type. Every type is present, zero if unused."""
    totals = {t: Decimal("0") for t in TransactionType}
    for tx in transactions:
        totals[tx.transaction_type] += tx.amount
    return totals


def filter_by_type(transactions: list[Transaction], transaction_type: TransactionType) -> list[Transaction]:
    return [tx for tx in transactions if tx.transaction_type == transaction_type]
