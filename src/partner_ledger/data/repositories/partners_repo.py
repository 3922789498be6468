"""Repository for partners."""

from typing import Optional

import structlog

from ...core.models import Partner
from ..query import BaseRepository, RowMapper

log = structlog.get_logger(__name__)

_UPSERT = """INSERT INTO partners (id, name, equity) VALUES (?, ?, ?)
             ON CONFLICT(id) DO UPDATE SET name = excluded.name, equity = excluded.equity"""


class PartnersRepository(BaseRepository[Partner]):
    _table = "partners"
    _mapper = RowMapper(Partner)

    def get_by_name(self, name: str) -> Optional[Partner]:
        # name column is COLLATE NOCASE
        row = self._query().where("name = ?", name.strip()).fetch_one(self._db().conn)
        return self._mapper.map(row) if row else None

    def list_all(self) -> list[Partner]:
        rows = self._query().order_by("name COLLATE NOCASE").fetch_all(self._db().conn)
        return self._mapper.map_all(rows)

    def replace_all(self, partners: list[Partner]) -> list[Partner]:
        """Persist a rebalanced partner set.

        Partners in ``partners`` are inserted or updated; every other stored
        partner is deleted. Runs atomically, joining the caller's
        transaction when there is one.
        """
        db = self._db()
        keep = [p.id for p in partners]
        with db.transaction():
            db.conn.execute(
                f"DELETE FROM partners WHERE id NOT IN ({', '.join('?' * len(keep))})", keep
            )
            for p in partners:
                db.conn.execute(_UPSERT, (p.id, p.name, str(p.equity)))
        log.info("partners_saved", count=len(partners))
        return self.list_all()
