#!/usr/bin/env python3
"""
Create a demo ledger to showcase the balance and settlement views.

Partners:  Karan / Prabee / Garvit (40/40/20%)
Ledger:    four paid expenses, two payables due, one partial and one
           pending receivable
"""

import sys
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from partner_ledger.core.models import Transaction
from partner_ledger.core.parsing import parse_status, resolve_payers, resolve_recipient
from partner_ledger.core.rebalancer import add_partner
from partner_ledger.data.database import get_db
from partner_ledger.data.repositories.partners_repo import PartnersRepository
from partner_ledger.data.repositories.transactions_repo import TransactionsRepository

db = get_db()

partners_repo = PartnersRepository()
tx_repo       = TransactionsRepository()

# ── Guard: don't create twice ────────────────────────────────────────────────
if partners_repo.list_all() or tx_repo.list_all():
    print("Ledger is not empty. Use a fresh database if you want the demo.")
    sys.exit(0)

# ── 1. Partners ───────────────────────────────────────────────────────────────
partners = []
for name, equity in [("Karan", "0.4"), ("Prabee", "0.4"), ("Garvit", "0.2")]:
    partners = add_partner(partners, name, equity)

# ── 2. Transactions ───────────────────────────────────────────────────────────
# (description, type, amount, status label, paid by, received by, notes)
LEDGER = [
    ("Justdial", "Expense", 20626, "Paid", "Karan + Prabee", "Justdial",
     "Split between all partners as per equity"),
    ("Domain+Hosting", "Expense", 1000, "Paid", "Karan + Prabee", "Company",
     "Split between all partners as per equity"),
    ("Upwork", "Expense", 3500, "Paid", "Karan", "Upwork", "Split as per equity"),
    ("Twitter", "Expense", 4300, "Paid", "Karan", "Twitter", "Split as per equity"),
    ("Solana Wallet - Priyank", "Payable", 15000, "Due 20 Aug", "Pending", "Priyank",
     "Future liability as per equity"),
    ("Designers - Kamya + Sarfaraz", "Payable", 20000, "Due 20 Aug", "Pending", "Designers",
     "10K each - Future liability as per equity"),
    ("Payment from Ankur", "Receivable", 37000, "Partial (₹15,000 Paid)", "Ankur",
     "Business Account", "₹22,000 pending - Distributed per equity"),
    ("Client Project Payment", "Receivable", 7500, "Pending", "Client", "Team",
     "Will be distributed as per equity when received"),
]

with db.transaction():
    partners = partners_repo.replace_all(partners)
    for p in partners:
        print(f"✓ Partner {p.name:<8} {p.equity * 100:.0f}%")

    for description, tx_type, amount, status_text, paid_by, received_by, notes in LEDGER:
        status = parse_status(status_text)
        tx_repo.create(Transaction(
            description=description,
            amount=Decimal(amount),
            transaction_type=tx_type,
            status=status.status,
            amount_settled=status.amount_settled,
            # Ankur and Client are counterparties, not partners
            paid_by=resolve_payers(paid_by, partners).ids,
            received_by=resolve_recipient(received_by, partners),
            notes=notes,
        ))
        print(f"✓ {tx_type:<10} {description}")

print("\nDone. Run `pl balances show` to see who owes what.")
