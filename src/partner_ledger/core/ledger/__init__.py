"""Ledger calculations.

Pure functions for per-partner allocation, balance totals and settlement.
No database access or I/O.

Usage:
    from partner_ledger.core.ledger import allocate, aggregate
"""

from .allocation import actual_received, allocate, credited_payers, payment_share
from .balances import aggregate, filter_by_type, totals_by_type
from .settlement import settle

__all__ = [
    "allocate",
    "actual_received",
    "credited_payers",
    "payment_share",
    "aggregate",
    "totals_by_type",
    "filter_by_type",
    "settle",
]
