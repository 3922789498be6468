"""Turn net balances into a list of settling transfers."""

from decimal import Decimal

from ..models import SETTLEMENT_TOLERANCE, PersonBalance, Settlement


def settle(
    balances: dict[str, PersonBalance],
    tolerance: Decimal = SETTLEMENT_TOLERANCE,
) -> list[Settlement]:
    """Greedy settlement: the largest debtor pays the largest creditor first.

    net > 0 is a creditor, net < 0 a debtor. Balances within ``tolerance``
    of zero are treated as settled. Ties are broken by partner id so the
    plan is deterministic.
    """
    creditors = [(pid, b.total_net) for pid, b in balances.items() if b.total_net > tolerance]
    debtors = [(pid, -b.total_net) for pid, b in balances.items() if b.total_net < -tolerance]
    creditors.sort(key=lambda x: (-x[1], x[0]))
    debtors.sort(key=lambda x: (-x[1], x[0]))

    transfers: list[Settlement] = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        dname, damt = debtors[i]
        cname, camt = creditors[j]
        x = min(damt, camt)
        if x > tolerance:
            transfers.append(Settlement(debtor_id=dname, creditor_id=cname, amount=x))
        damt -= x
        camt -= x
        if damt <= tolerance:
            i += 1
        else:
            debtors[i] = (dname, damt)
        if camt <= tolerance:
            j += 1
        else:
            creditors[j] = (cname, camt)

    return transfers
