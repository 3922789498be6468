"""Equity rebalancing on partner add / remove.

These are the only operations that change a partner's equity. Both take a
snapshot of the current partners and return a new list; the input is never
mutated. Starting from a set whose equity sums to 1, the result sums to 1
within EQUITY_TOLERANCE.

Adding a partner:
  - no hint:   the new partner gets 1/(n+1). What happens to the others is
               decided by ZeroHintPolicy.
  - hint, books full (total >= 1):  existing partners shrink by
               (1 - hint) / total, new partner gets the hint.
  - hint fits in what is left:  existing partners untouched.
  - hint does not fit:  EquityBudgetError naming the remaining fraction.

Removing a partner hands its equity to the survivors pro rata.
"""

import dataclasses
from decimal import Decimal
from enum import Enum
from typing import Optional

import structlog

from .exceptions import (
    DuplicatePartnerError,
    EquityBudgetError,
    PartnerNotFoundError,
    ValidationError,
)
from .models import EQUITY_TOLERANCE, Partner, to_decimal

log = structlog.get_logger(__name__)

ONE = Decimal("1")


class ZeroHintPolicy(str, Enum):
    EQUALIZE = "equalize"  # everyone, old and new, is reset to 1/(n+1)
    DILUTE = "dilute"      # old partners scaled by n/(n+1), keeping their ratios


def equity_total(partners: list[Partner]) -> Decimal:
    return sum((p.equity for p in partners), Decimal("0"))


def equity_warning(partners: list[Partner], tolerance: Decimal = EQUITY_TOLERANCE) -> bool:
    """True when a non-empty partner set does not sum to 1."""
    if not partners:
        return False
    return abs(equity_total(partners) - ONE) > tolerance


def _scaled(partners: list[Partner], factor: Decimal) -> list[Partner]:
    return [dataclasses.replace(p, equity=p.equity * factor) for p in partners]


def add_partner(
    partners: list[Partner],
    name: str,
    equity_hint=None,
    policy: ZeroHintPolicy = ZeroHintPolicy.EQUALIZE,
    tolerance: Decimal = EQUITY_TOLERANCE,
) -> list[Partner]:
    """Return a new partner list with ``name`` added and equity rebalanced."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Partner name is required")
    if any(p.name.lower() == name.lower() for p in partners):
        raise DuplicatePartnerError(f"Partner with name {name!r} already exists")

    hint = to_decimal(equity_hint, "equity") if equity_hint not in (None, "") else Decimal("0")
    n = len(partners)

    if hint == 0:
        share = ONE / (n + 1)
        if policy == ZeroHintPolicy.EQUALIZE:
            existing = [dataclasses.replace(p, equity=share) for p in partners]
        else:
            total = equity_total(partners)
            existing = _scaled(partners, (ONE - share) / total) if partners else []
        new_partner = Partner(name=name, equity=share)
        log.info("partner_added", name=name, equity=str(share), policy=policy.value)
        return existing + [new_partner]

    if hint < 0 or hint > ONE:
        raise ValidationError(f"Equity must be between 0 and 1, got {hint}")

    total = equity_total(partners)
    if total >= ONE - tolerance:
        if hint >= ONE:
            raise ValidationError(
                "Equity of 1 would leave nothing for the existing partners"
            )
        factor = (ONE - hint) / total
        existing = _scaled(partners, factor)
        log.info("equity_rescaled", factor=str(factor), partners=n)
    elif total + hint <= ONE + tolerance:
        existing = list(partners)
    else:
        raise EquityBudgetError(requested=hint, remaining=ONE - total)

    new_partner = Partner(name=name, equity=hint)
    log.info("partner_added", name=name, equity=str(hint))
    return existing + [new_partner]


def remove_partner(partners: list[Partner], partner_id: str) -> list[Partner]:
    """Return the partner list without ``partner_id``, its equity spread pro rata."""
    removed: Optional[Partner] = next((p for p in partners if p.id == partner_id), None)
    if removed is None:
        raise PartnerNotFoundError(f"Partner {partner_id} not found")

    survivors = [p for p in partners if p.id != partner_id]
    if not survivors:
        log.info("partner_removed", name=removed.name, survivors=0)
        return []

    survivor_total = equity_total(survivors)
    # min() only binds for a lone survivor of an over-allocated set
    result = [
        dataclasses.replace(
            p, equity=min(ONE, p.equity + (p.equity / survivor_total) * removed.equity)
        )
        for p in survivors
    ]
    log.info(
        "partner_removed",
        name=removed.name,
        redistributed=str(removed.equity),
        survivors=len(result),
    )
    return result
