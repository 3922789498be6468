"""Integration tests for repository CRUD operations."""

from decimal import Decimal

import pytest

from partner_ledger.core.exceptions import TransactionNotFoundError, ValidationError
from partner_ledger.core.models import (
    BUSINESS_ACCOUNT,
    Partner,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from partner_ledger.core.rebalancer import add_partner, remove_partner
from partner_ledger.data.repositories.partners_repo import PartnersRepository
from partner_ledger.data.repositories.transactions_repo import TransactionsRepository


def _tx(description="Hosting", amount="1000", tx_type="Expense", **kwargs):
    return Transaction(description=description, amount=amount, transaction_type=tx_type, **kwargs)


class TestPartnersRepository:
    def test_save_and_get(self, isolated_db):
        repo = PartnersRepository()
        [p] = repo.replace_all([Partner(name="Karan", equity=Decimal("0.4"))])
        fetched = repo.get_by_id(p.id)
        assert fetched.name == "Karan"
        assert fetched.equity == Decimal("0.4")

    def test_get_by_name_case_insensitive(self, isolated_db):
        repo = PartnersRepository()
        repo.replace_all([Partner(name="Prabee", equity=Decimal("1"))])
        assert repo.get_by_name("prabee").name == "Prabee"
        assert repo.get_by_name("Nobody") is None

    def test_list_all_sorted_by_name(self, isolated_db):
        repo = PartnersRepository()
        repo.replace_all([Partner(name=name, equity=Decimal("0.2")) for name in ("garvit", "Karan", "Aman")])
        assert [p.name for p in repo.list_all()] == ["Aman", "garvit", "Karan"]

    def test_replace_all_after_add(self, isolated_db):
        repo = PartnersRepository()
        saved = repo.replace_all(add_partner([], "Karan"))
        saved = repo.replace_all(add_partner(saved, "Prabee"))
        assert {p.name: p.equity for p in saved} == {
            "Karan": Decimal("0.5"),
            "Prabee": Decimal("0.5"),
        }

    def test_replace_all_after_remove(self, isolated_db):
        repo = PartnersRepository()
        partners = repo.replace_all([
            Partner(name="A", equity=Decimal("0.4")),
            Partner(name="B", equity=Decimal("0.4")),
            Partner(name="C", equity=Decimal("0.2")),
        ])
        c = next(p for p in partners if p.name == "C")
        remaining = repo.replace_all(remove_partner(partners, c.id))
        assert [p.name for p in remaining] == ["A", "B"]
        assert all(p.equity == Decimal("0.5") for p in remaining)
        assert repo.get_by_id(c.id) is None

    def test_replace_all_keeps_ids(self, isolated_db):
        repo = PartnersRepository()
        first = repo.replace_all(add_partner([], "Karan"))
        second = repo.replace_all(add_partner(first, "Prabee", "0.3"))
        karan = next(p for p in second if p.name == "Karan")
        assert karan.id == first[0].id
        assert karan.equity == Decimal("0.7")


class TestTransactionsRepository:
    def test_create_round_trip(self, isolated_db):
        repo = TransactionsRepository()
        tx = repo.create(_tx(
            tx_type="Receivable", amount="37000", status="Partial",
            amount_settled="15000", received_by=BUSINESS_ACCOUNT, notes="client A",
        ))
        fetched = repo.get_by_id(tx.id)
        assert fetched.transaction_type == TransactionType.RECEIVABLE
        assert fetched.status == TransactionStatus.PARTIAL
        assert fetched.amount == Decimal("37000")
        assert fetched.amount_settled == Decimal("15000")
        assert fetched.received_by == BUSINESS_ACCOUNT
        assert fetched.notes == "client A"
        assert fetched.created_at is not None

    def test_paid_by_round_trip(self, isolated_db):
        repo = TransactionsRepository()
        tx = repo.create(_tx(paid_by=("karan", "prabee")))
        assert repo.get_by_id(tx.id).paid_by == ("karan", "prabee")

    def test_list_newest_first(self, isolated_db):
        repo = TransactionsRepository()
        for name in ("first", "second", "third"):
            repo.create(_tx(description=name))
        assert [t.description for t in repo.list_all()] == ["third", "second", "first"]

    def test_update_field(self, isolated_db):
        repo = TransactionsRepository()
        tx = repo.create(_tx(status="Pending"))
        updated = repo.update_field(tx.id, "status", "Paid")
        assert updated.status == TransactionStatus.PAID
        assert repo.get_by_id(tx.id).amount == Decimal("1000")

    def test_update_paid_by(self, isolated_db):
        repo = TransactionsRepository()
        tx = repo.create(_tx())
        updated = repo.update_field(tx.id, "paid_by", ("karan",))
        assert updated.paid_by == ("karan",)

    def test_update_invalid_value_leaves_row(self, isolated_db):
        repo = TransactionsRepository()
        tx = repo.create(_tx())
        with pytest.raises(ValidationError):
            repo.update_field(tx.id, "amount", "-5")
        assert repo.get_by_id(tx.id).amount == Decimal("1000")

    def test_update_unknown_field(self, isolated_db):
        repo = TransactionsRepository()
        tx = repo.create(_tx())
        with pytest.raises(ValidationError):
            repo.update_field(tx.id, "created_at", "2020-01-01")

    def test_update_missing_transaction(self, isolated_db):
        with pytest.raises(TransactionNotFoundError):
            TransactionsRepository().update_field("missing", "status", "Paid")
