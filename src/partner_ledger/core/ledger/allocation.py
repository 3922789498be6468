"""Per-transaction, per-partner allocation.

All functions are pure: they take Transaction and Partner objects and
return Decimal values, with no database access or I/O.
"""

from decimal import Decimal

from ..models import (
    BUSINESS_ACCOUNT,
    Partner,
    PersonCalculation,
    Transaction,
    TransactionStatus,
    TransactionType,
)

ZERO = Decimal("0")

# A Partial settlement counts as paid: the liability for an expense accrues
# on the full amount as soon as any of it has been paid.
PAID_STATUSES = frozenset({TransactionStatus.PAID, TransactionStatus.PARTIAL})
RECEIVED_STATUSES = frozenset({
    TransactionStatus.PAID,
    TransactionStatus.PARTIAL,
    TransactionStatus.RECEIVED,
})


def credited_payers(tx: Transaction, partners: list[Partner]) -> set[str]:
    """Ids of the partners who share the payment credit for ``tx``.

    ALL_PARTNERS expands to every partner in the snapshot. Otherwise the
    distinct ids listed in paid_by are credited, including ids of partners
    who have since been removed, so their part of the payment is not
    reassigned to anyone else.
    """
    if tx.pays_everyone:
        return {p.id for p in partners}
    return set(tx.paid_by)


def payment_share(tx: Transaction, partner: Partner, partners: list[Partner]) -> Decimal:
    """Equal split of the amount among the credited payers.

    A single payer is credited with the full amount.
    """
    payers = credited_payers(tx, partners)
    if partner.id not in payers:
        return ZERO
    return tx.amount / max(1, len(payers))


def actual_received(tx: Transaction) -> Decimal:
    """Money actually received against a receivable.

    Nothing is received until the status is Paid, Partial or Received. A
    settled amount takes precedence; without one the full amount is assumed.

    Args:
        tx: A Receivable transaction.

    Returns:
        The received amount, or Decimal("0") if nothing is received yet.
    """
    if tx.status not in RECEIVED_STATUSES:
        return ZERO
    if tx.amount_settled is not None:
        return tx.amount_settled
    return tx.amount


def allocate(tx: Transaction, partner_id: str, partners: list[Partner]) -> PersonCalculation:
    """Compute one partner's liability, payment, receivable and net for ``tx``.

    Rules by type:
      Expense     liability = amount × equity once paid (Paid or Partial);
                  payment = equal share among the credited payers.
      Receivable  the received amount goes to the named partner in full, or
                  is split by equity when received by BUSINESS_ACCOUNT.
      Payable     liability = amount × equity regardless of status;
                  payment as for Expense, but only once paid.

    net = payment + receivable − liability. Positive means the partner
    should receive money, negative that they should pay.

    A partner_id that is not in ``partners`` yields an all-zero result.
    """
    partner = next((p for p in partners if p.id == partner_id), None)
    if partner is None:
        return PersonCalculation()

    liability = ZERO
    payment = ZERO
    receivable = ZERO
    is_paid = tx.status in PAID_STATUSES

    if tx.transaction_type == TransactionType.EXPENSE:
        if is_paid:
            liability = tx.amount * partner.equity
        payment = payment_share(tx, partner, partners)

    elif tx.transaction_type == TransactionType.RECEIVABLE:
        received = actual_received(tx)
        if tx.received_by == BUSINESS_ACCOUNT:
            receivable = received * partner.equity
        elif tx.received_by == partner.id:
            receivable = received

    elif tx.transaction_type == TransactionType.PAYABLE:
        liability = tx.amount * partner.equity
        if is_paid:
            payment = payment_share(tx, partner, partners)

    return PersonCalculation(
        liability=liability,
        payment=payment,
        receivable=receivable,
        net=payment + receivable - liability,
    )
