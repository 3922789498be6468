"""Translation between human labels and ledger references.

The ledger core works on partner ids and a status enum. People (and the
legacy spreadsheet export) write names and free-form labels such as
"Karan + Prabee" or "Partial (₹9,000 Paid)". This module converts in both
directions and is only used at the edges: CLI input/output and importers.
"""

import re
from decimal import Decimal
from typing import NamedTuple, Optional

import structlog

from .models import (
    ALL_PARTNERS,
    BUSINESS_ACCOUNT,
    Partner,
    TransactionStatus,
    clean_amount,
    clean_amount_settled,
)

log = structlog.get_logger(__name__)

ALL_PARTNERS_LABEL = "All Partners"
BUSINESS_ACCOUNT_LABEL = "Business Account"
NO_PAYER_LABEL = "Pending"

# Labels that name the business as a whole rather than one partner
COLLECTIVE_LABELS = frozenset({"team", "business account", "all partners"})
# paid_by labels meaning "no partner paid"
NO_PAYER_LABELS = frozenset({"", "pending", "business account", "external"})

_RUPEE_AMOUNT = re.compile(r"₹\s*(\d[\d,]*(?:\.\d+)?)")


class ParsedStatus(NamedTuple):
    status: TransactionStatus
    amount_settled: Optional[Decimal]
    fallback: bool  # Partial with no readable amount: full amount assumed


class ResolvedPayers(NamedTuple):
    ids: tuple[str, ...]
    unresolved: list[str]


def parse_status(text: str) -> ParsedStatus:
    """Read a legacy status label like "Partial (₹9,000 Paid)".

    An embedded rupee amount becomes amount_settled (thousands separators
    stripped). A Partial label without a readable amount is flagged as a
    fallback; the allocation then treats the full amount as received.
    """
    raw = (text or "").strip()
    lowered = raw.lower()

    if "unpaid" in lowered:
        status = TransactionStatus.PENDING
    elif "partial" in lowered:
        status = TransactionStatus.PARTIAL
    elif "paid" in lowered:
        status = TransactionStatus.PAID
    elif "received" in lowered:
        status = TransactionStatus.RECEIVED
    elif "overdue" in lowered:
        status = TransactionStatus.OVERDUE
    elif "due" in lowered:
        status = TransactionStatus.DUE
    elif "cancel" in lowered:
        status = TransactionStatus.CANCELLED
    else:
        status = TransactionStatus.PENDING

    match = _RUPEE_AMOUNT.search(raw)
    settled = Decimal(match.group(1).replace(",", "")) if match else None

    fallback = status == TransactionStatus.PARTIAL and settled is None
    if fallback:
        log.debug("legacy_status_fallback", status=raw)
    return ParsedStatus(status, settled, fallback)


def _strip_money(text):
    if isinstance(text, str):
        return text.replace("₹", "").replace(",", "").strip()
    return text


def parse_amount(text) -> Decimal:
    """Parse a user-typed amount such as "₹20,626" or "1500.50"."""
    return clean_amount(_strip_money(text))


def parse_settled(text) -> Optional[Decimal]:
    """Like parse_amount, for amount_settled: blank means none, zero is allowed."""
    return clean_amount_settled(_strip_money(text))


def _name_index(partners: list[Partner]) -> dict[str, str]:
    return {p.name.lower(): p.id for p in partners}


def resolve_payers(text: str, partners: list[Partner]) -> ResolvedPayers:
    """Resolve a payer label ("Karan", "Karan + Prabee", "All Partners") to ids.

    Each "+"-separated token must match a partner name exactly
    (case-insensitive). Tokens naming no partner are returned as
    unresolved and contribute nothing.
    """
    label = (text or "").strip()
    if label.lower() == ALL_PARTNERS_LABEL.lower():
        return ResolvedPayers((ALL_PARTNERS,), [])
    if label.lower() in NO_PAYER_LABELS:
        return ResolvedPayers((), [])

    index = _name_index(partners)
    ids: list[str] = []
    unresolved: list[str] = []
    for token in label.split("+"):
        token = token.strip()
        if not token:
            continue
        pid = index.get(token.lower())
        if pid is None:
            unresolved.append(token)
            log.debug("payer_unresolved", name=token)
        else:
            ids.append(pid)
    return ResolvedPayers(tuple(dict.fromkeys(ids)), unresolved)


def resolve_recipient(text: str, partners: list[Partner]) -> str:
    """Resolve a received_by label to a partner id, BUSINESS_ACCOUNT, or itself."""
    label = (text or "").strip()
    if label.lower() in COLLECTIVE_LABELS:
        return BUSINESS_ACCOUNT
    return _name_index(partners).get(label.lower(), label)


def partner_label(ref: str, partners: list[Partner]) -> str:
    """Display name for a partner id or sentinel. Unknown refs are shown as-is."""
    if ref == BUSINESS_ACCOUNT:
        return BUSINESS_ACCOUNT_LABEL
    if ref == ALL_PARTNERS:
        return ALL_PARTNERS_LABEL
    for p in partners:
        if p.id == ref:
            return p.name
    return ref


def payers_label(paid_by: tuple[str, ...], partners: list[Partner]) -> str:
    if not paid_by:
        return NO_PAYER_LABEL
    return " + ".join(partner_label(ref, partners) for ref in paid_by)


def status_label(status: TransactionStatus, amount_settled: Optional[Decimal], symbol: str = "₹") -> str:
    """Inverse of parse_status, e.g. "Partial (₹9,000 Paid)"."""
    if status == TransactionStatus.PARTIAL and amount_settled is not None:
        return f"Partial ({symbol}{amount_settled:,.0f} Paid)"
    return status.value
