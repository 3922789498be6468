"""Repository for ledger transactions."""

import structlog

from ...core.exceptions import TransactionNotFoundError
from ...core.models import Transaction, edit_transaction
from ..query import BaseRepository, RowMapper

log = structlog.get_logger(__name__)


class TransactionsRepository(BaseRepository[Transaction]):
    _table = "transactions"
    _mapper = RowMapper(Transaction)

    def create(self, tx: Transaction) -> Transaction:
        return self._insert(tx)

    def list_all(self) -> list[Transaction]:
        rows = (
            self._query()
            .order_by("created_at DESC, rowid DESC")
            .fetch_all(self._db().conn)
        )
        return self._mapper.map_all(rows)

    def update_field(self, tx_id: str, field_name: str, value) -> Transaction:
        """Change a single field in place. Only that field is validated."""
        tx = self.get_by_id(tx_id)
        if tx is None:
            raise TransactionNotFoundError(f"Transaction {tx_id} not found")

        # edit_transaction rejects field names outside EDITABLE_FIELDS
        updated = edit_transaction(tx, field_name, value)
        db = self._db()
        db.conn.execute(
            f"UPDATE transactions SET {field_name} = ? WHERE id = ?",
            (RowMapper._serialize(getattr(updated, field_name)), tx_id),
        )
        self._commit(db)
        log.info("transaction_updated", id=tx_id, field=field_name)
        return self.get_by_id(tx_id)
