"""Tests for per-transaction allocation."""

from decimal import Decimal

import pytest

from partner_ledger.core.ledger import actual_received, allocate, credited_payers
from partner_ledger.core.models import (
    ALL_PARTNERS,
    BUSINESS_ACCOUNT,
    Partner,
    Transaction,
    TransactionStatus,
)


def _partners():
    return [
        Partner(name="Karan", equity=Decimal("0.4"), id="karan"),
        Partner(name="Prabee", equity=Decimal("0.4"), id="prabee"),
        Partner(name="Garvit", equity=Decimal("0.2"), id="garvit"),
    ]


def _tx(tx_type, amount, status="Pending", paid_by=(), received_by="", settled=None):
    return Transaction(
        description="test",
        amount=Decimal(str(amount)),
        transaction_type=tx_type,
        status=status,
        paid_by=paid_by,
        received_by=received_by,
        amount_settled=settled,
    )


def _nets(tx, partners):
    return {p.id: allocate(tx, p.id, partners).net for p in partners}


class TestExpense:
    def test_single_payer(self):
        """Karan pays a 1000 expense in full: he is owed what the others owe."""
        partners = _partners()
        tx = _tx("Expense", 1000, "Paid", paid_by=["karan"])
        assert _nets(tx, partners) == {
            "karan": Decimal("600"),
            "prabee": Decimal("-400"),
            "garvit": Decimal("-200"),
        }

    def test_single_payer_is_zero_sum(self):
        partners = _partners()
        tx = _tx("Expense", "1234.56", "Paid", paid_by=["garvit"])
        assert sum(_nets(tx, partners).values()) == 0

    def test_two_payers_split_equally(self):
        partners = _partners()
        tx = _tx("Expense", 20626, "Paid", paid_by=["karan", "prabee"])
        karan = allocate(tx, "karan", partners)
        garvit = allocate(tx, "garvit", partners)
        assert karan.payment == Decimal("10313")
        assert karan.liability == Decimal("8250.4")
        assert garvit.payment == Decimal("0")
        assert garvit.net == Decimal("-4125.2")

    def test_all_partners_divides_by_partner_count(self):
        partners = _partners()
        tx = _tx("Expense", 300, "Paid", paid_by=[ALL_PARTNERS])
        for p in partners:
            assert allocate(tx, p.id, partners).payment == Decimal("100")

    def test_unpaid_has_no_liability(self):
        partners = _partners()
        calc = allocate(_tx("Expense", 1000, "Pending", paid_by=["karan"]), "karan", partners)
        assert calc.liability == Decimal("0")
        assert calc.payment == Decimal("1000")

    def test_partial_counts_as_paid(self):
        partners = _partners()
        calc = allocate(_tx("Expense", 1000, "Partial", paid_by=["karan"]), "prabee", partners)
        assert calc.liability == Decimal("400")

    def test_removed_payer_still_counts_in_divisor(self):
        """A payer id with no matching partner still takes its share of the credit."""
        partners = _partners()
        tx = _tx("Expense", 1000, "Paid", paid_by=["karan", "gone"])
        assert allocate(tx, "karan", partners).payment == Decimal("500")


class TestReceivable:
    def test_business_account_split_by_equity(self):
        """A 10000 receivable with 4000 settled is shared by equity."""
        partners = _partners()
        tx = _tx("Receivable", 10000, "Partial", received_by=BUSINESS_ACCOUNT, settled="4000")
        assert actual_received(tx) == Decimal("4000")
        expected = {"karan": Decimal("1600"), "prabee": Decimal("1600"), "garvit": Decimal("800")}
        for p in partners:
            calc = allocate(tx, p.id, partners)
            assert calc.receivable == expected[p.id]
            assert calc.net == calc.receivable
            assert calc.liability == calc.payment == Decimal("0")

    def test_named_partner_gets_full_amount(self):
        partners = _partners()
        tx = _tx("Receivable", 5000, "Received", received_by="prabee")
        assert allocate(tx, "prabee", partners).receivable == Decimal("5000")
        assert allocate(tx, "karan", partners).receivable == Decimal("0")

    @pytest.mark.parametrize("status", ["Pending", "Due", "Overdue", "Cancelled"])
    def test_nothing_received_yet(self, status):
        tx = _tx("Receivable", 5000, status, received_by=BUSINESS_ACCOUNT)
        assert actual_received(tx) == Decimal("0")

    def test_partial_without_settled_amount_assumes_full(self):
        tx = _tx("Receivable", 5000, "Partial", received_by=BUSINESS_ACCOUNT)
        assert actual_received(tx) == Decimal("5000")

    def test_external_recipient_gives_nothing(self):
        partners = _partners()
        tx = _tx("Receivable", 5000, "Paid", received_by="Upwork")
        assert all(v == 0 for v in _nets(tx, partners).values())


class TestPayable:
    def test_liability_regardless_of_status(self):
        partners = _partners()
        tx = _tx("Payable", 20000, "Due")
        for p in partners:
            calc = allocate(tx, p.id, partners)
            assert calc.liability == Decimal("20000") * p.equity
            assert calc.payment == Decimal("0")
            assert calc.net == -calc.liability

    def test_payment_only_once_paid(self):
        partners = _partners()
        pending = _tx("Payable", 1000, "Pending", paid_by=["karan"])
        paid = _tx("Payable", 1000, "Paid", paid_by=["karan"])
        assert allocate(pending, "karan", partners).payment == Decimal("0")
        assert allocate(paid, "karan", partners).net == Decimal("600")


class TestEdgeCases:
    def test_unknown_partner_is_all_zero(self):
        calc = allocate(_tx("Expense", 1000, "Paid", paid_by=["karan"]), "nobody", _partners())
        assert calc.liability == calc.payment == calc.receivable == calc.net == Decimal("0")

    def test_credited_payers_deduplicated(self):
        tx = _tx("Expense", 100, "Paid", paid_by=["karan", "karan"])
        assert credited_payers(tx, _partners()) == {"karan"}

    def test_status_enum_accepted(self):
        tx = _tx("Expense", 100, TransactionStatus.PAID, paid_by=["karan"])
        assert allocate(tx, "karan", _partners()).net == Decimal("60")
