"""Custom exceptions for the partner ledger."""

from decimal import Decimal


class PartnerLedgerError(Exception):
    """Base exception."""
    pass


class ValidationError(PartnerLedgerError):
    """Rejected user input. Raised before any state is changed."""
    pass


class DuplicatePartnerError(ValidationError):
    pass


class EquityBudgetError(ValidationError):
    """Requested equity exceeds what is left to assign."""

    def __init__(self, requested: Decimal, remaining: Decimal):
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f"Only {remaining:.3f} equity left to assign (requested {requested})"
        )


class PartnerNotFoundError(PartnerLedgerError):
    pass


class TransactionNotFoundError(PartnerLedgerError):
    pass
