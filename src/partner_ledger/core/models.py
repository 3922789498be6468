"""Data models for the partner ledger."""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional
from uuid import uuid4

from .exceptions import ValidationError

# Attribution sentinels. Partner ids are hex strings, so the "@" prefix
# never collides with a real id.
ALL_PARTNERS = "@all"          # paid_by: every partner paid an equal part
BUSINESS_ACCOUNT = "@business"  # received_by: collective sink, split by equity

EQUITY_TOLERANCE = Decimal("0.001")
# money below a paisa is not worth a transfer
SETTLEMENT_TOLERANCE = Decimal("0.01")


def new_id() -> str:
    return uuid4().hex[:12]


class TransactionType(str, Enum):
    EXPENSE = "Expense"
    RECEIVABLE = "Receivable"
    PAYABLE = "Payable"


class TransactionStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    PARTIAL = "Partial"    # part of the amount settled, see amount_settled
    RECEIVED = "Received"
    DUE = "Due"
    OVERDUE = "Overdue"
    CANCELLED = "Cancelled"


def to_decimal(value, field_name: str) -> Decimal:
    """Coerce user input to a finite Decimal or raise ValidationError."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"{field_name} must be a number, got {value!r}") from None
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a finite number, got {value!r}")
    return result


def _coerce_enum(enum_cls, value, label: str):
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip().lower()
    for member in enum_cls:
        if text in (member.value.lower(), member.name.lower()):
            return member
    choices = ", ".join(m.value for m in enum_cls)
    raise ValidationError(f"Invalid {label} {value!r} (choose from: {choices})")


# ---------------------------------------------------------------------------
# Single-field cleaners. Each validates one field in isolation; none of them
# looks at other fields of the record.
# ---------------------------------------------------------------------------

def clean_description(value) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError("Description is required")
    return text


def clean_amount(value) -> Decimal:
    amount = to_decimal(value, "amount")
    if amount <= 0:
        raise ValidationError(f"Amount must be greater than 0, got {amount}")
    return amount


def clean_amount_settled(value) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    settled = to_decimal(value, "amount_settled")
    if settled < 0:
        raise ValidationError(f"Settled amount cannot be negative, got {settled}")
    return settled


def clean_transaction_type(value) -> TransactionType:
    return _coerce_enum(TransactionType, value, "transaction type")


def clean_status(value) -> TransactionStatus:
    return _coerce_enum(TransactionStatus, value, "status")


def clean_paid_by(value) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    refs = (str(v).strip() for v in value)
    return tuple(dict.fromkeys(r for r in refs if r))


def clean_text(value) -> str:
    return str(value or "").strip()


@dataclass(frozen=True)
class Partner:
    """A business partner owning ``equity`` (a fraction in (0, 1]) of the business.

    Frozen: equity is only ever changed by ``core.rebalancer``, which returns
    new Partner values instead of mutating existing ones.
    """
    name: str
    equity: Decimal
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None

    def __post_init__(self):
        name = clean_text(self.name)
        if not name:
            raise ValidationError("Partner name is required")
        equity = to_decimal(self.equity, "equity")
        if equity <= 0 or equity > 1:
            raise ValidationError(f"Equity must be between 0 and 1, got {equity}")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "equity", equity)


@dataclass
class Transaction:
    """A ledger entry.

    paid_by holds partner ids (or ALL_PARTNERS); an empty tuple means no
    partner paid yet. received_by is a partner id, BUSINESS_ACCOUNT, or a
    free-text external counterparty such as "Upwork".
    """
    description: str
    amount: Decimal
    transaction_type: TransactionType
    status: TransactionStatus = TransactionStatus.PENDING
    paid_by: tuple[str, ...] = ()
    received_by: str = ""
    amount_settled: Optional[Decimal] = None
    notes: str = ""
    id: str = field(default_factory=new_id)
    created_at: Optional[datetime] = None

    def __post_init__(self):
        for name, cleaner in EDITABLE_FIELDS.items():
            setattr(self, name, cleaner(getattr(self, name)))

    @property
    def pays_everyone(self) -> bool:
        return ALL_PARTNERS in self.paid_by


EDITABLE_FIELDS = {
    "description": clean_description,
    "amount": clean_amount,
    "transaction_type": clean_transaction_type,
    "status": clean_status,
    "paid_by": clean_paid_by,
    "received_by": clean_text,
    "amount_settled": clean_amount_settled,
    "notes": clean_text,
}


def edit_transaction(tx: Transaction, field_name: str, value) -> Transaction:
    """Return a copy of ``tx`` with one field replaced.

    Only the edited field is validated; cross-field consistency (e.g. a
    settled amount above the total) is not re-checked.
    """
    cleaner = EDITABLE_FIELDS.get(field_name)
    if cleaner is None:
        editable = ", ".join(EDITABLE_FIELDS)
        raise ValidationError(f"Field {field_name!r} cannot be edited (editable: {editable})")
    return dataclasses.replace(tx, **{field_name: cleaner(value)})


@dataclass(frozen=True)
class PersonCalculation:
    """One partner's share of one transaction."""
    liability: Decimal = Decimal("0")
    payment: Decimal = Decimal("0")
    receivable: Decimal = Decimal("0")
    net: Decimal = Decimal("0")


@dataclass
class PersonBalance:
    """A partner's totals across a set of transactions."""
    paid: Decimal = Decimal("0")
    liability: Decimal = Decimal("0")
    receivables: Decimal = Decimal("0")
    total_net: Decimal = Decimal("0")

    @property
    def should_receive(self) -> bool:
        return self.total_net >= 0


@dataclass(frozen=True)
class Settlement:
    """A transfer that settles part of the ledger: debtor pays creditor."""
    debtor_id: str
    creditor_id: str
    amount: Decimal
