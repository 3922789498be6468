"""Integration tests verifying atomic database operations."""

import sqlite3
import textwrap
from decimal import Decimal

import pytest

from partner_ledger.core.models import Partner, Transaction
from partner_ledger.core.rebalancer import add_partner
from partner_ledger.data.repositories.partners_repo import PartnersRepository
from partner_ledger.data.repositories.transactions_repo import TransactionsRepository
from partner_ledger.importers.legacy import LegacyCsvImporter


def _tx(description="Hosting"):
    return Transaction(description=description, amount="100", transaction_type="Expense")


class TestTransactionContextManager:
    def test_rollback_on_error(self, isolated_db):
        """db.transaction() rolls back all writes when an exception is raised."""
        repo = TransactionsRepository()

        with pytest.raises(RuntimeError):
            with isolated_db.transaction():
                repo.create(_tx("Should Be Rolled Back"))
                raise RuntimeError("Forced rollback")

        assert repo.list_all() == []

    def test_commit_on_success(self, isolated_db):
        partners_repo = PartnersRepository()
        tx_repo = TransactionsRepository()

        with isolated_db.transaction():
            partners_repo.replace_all([Partner(name="Karan", equity=Decimal("1"))])
            tx_repo.create(_tx())

        assert len(partners_repo.list_all()) == 1
        assert len(tx_repo.list_all()) == 1

    def test_in_transaction_flag_resets_after_error(self, isolated_db):
        with pytest.raises(RuntimeError):
            with isolated_db.transaction():
                assert isolated_db._in_transaction is True
                raise RuntimeError("error")
        assert isolated_db._in_transaction is False


class TestPartnerSetAtomicity:
    def test_failed_replace_keeps_previous_set(self, isolated_db):
        """A rebalanced set that cannot be written leaves the old equity in place."""
        repo = PartnersRepository()
        saved = repo.replace_all(add_partner(add_partner([], "Karan"), "Prabee"))

        # second "karan" violates the unique name column after the rescale is written
        broken = add_partner(saved, "Garvit", "0.2") + [Partner(name="KARAN", equity=Decimal("0.1"))]
        with pytest.raises(sqlite3.IntegrityError):
            repo.replace_all(broken)

        after = repo.list_all()
        assert [p.name for p in after] == ["Karan", "Prabee"]
        assert all(p.equity == Decimal("0.5") for p in after)

    def test_replace_joins_outer_transaction(self, isolated_db):
        repo = PartnersRepository()
        with pytest.raises(RuntimeError):
            with isolated_db.transaction():
                repo.replace_all(add_partner([], "Karan"))
                raise RuntimeError("abort")
        assert repo.list_all() == []


class TestImportAtomicity:
    def test_import_rolls_back_on_failure(self, isolated_db, tmp_path, monkeypatch):
        """If one row fails to write, no row of the file is kept."""
        csv_path = tmp_path / "ledger.csv"
        csv_path.write_text(textwrap.dedent("""\
            Description,Type,Amount,Status,Paid By,Received By,Notes
            Ads,Expense,100,Paid,,,
            Hosting,Expense,200,Paid,,,
        """), encoding="utf-8")

        call_count = [0]
        original_create = TransactionsRepository.create

        def failing_on_second_call(self, *args, **kwargs):
            call_count[0] += 1
            if call_count[0] >= 2:
                raise RuntimeError("Second row fails")
            return original_create(self, *args, **kwargs)

        monkeypatch.setattr(TransactionsRepository, "create", failing_on_second_call)

        with pytest.raises(RuntimeError):
            LegacyCsvImporter().run(csv_path)

        assert TransactionsRepository().list_all() == []
