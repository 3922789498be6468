"""Row mapping, a small SELECT builder and the base repository."""

import dataclasses
import sqlite3
import typing
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

from .database import Database, get_db

T = TypeVar("T")

_SCALARS: dict[type, Callable] = {
    Decimal: lambda v: Decimal(str(v)),
    datetime: lambda v: datetime.fromisoformat(v) if isinstance(v, str) else v,
    str: str,
    int: int,
}


def _split_refs(value) -> tuple[str, ...]:
    return tuple(ref for ref in str(value).split(",") if ref)


class RowMapper(Generic[T]):
    """Builds model dataclasses from sqlite3.Row objects and back.

    Column values are converted according to the model's type hints:
    Decimal and datetime are stored as TEXT, enums by value and
    ``tuple[str, ...]`` as a comma-joined string. NULL columns fall back to
    the field default.
    """

    def __init__(self, model_class: type[T]):
        self._model_class = model_class
        self._fields = dataclasses.fields(model_class)  # type: ignore[arg-type]
        hints = typing.get_type_hints(model_class)
        self._converters = {f.name: self._converter_for(hints.get(f.name)) for f in self._fields}

    @staticmethod
    def _converter_for(hint) -> Optional[Callable]:
        args = typing.get_args(hint)
        if typing.get_origin(hint) is typing.Union:
            # Optional[X]: NULLs never reach the converter
            non_none = [a for a in args if a is not type(None)]
            hint = non_none[0] if len(non_none) == 1 else None
        if hint is None:
            return None
        if typing.get_origin(hint) is tuple:
            return _split_refs
        if isinstance(hint, type) and issubclass(hint, Enum):
            return hint
        return _SCALARS.get(hint)

    @staticmethod
    def _default(f: dataclasses.Field):
        if f.default is not dataclasses.MISSING:
            return f.default
        if f.default_factory is not dataclasses.MISSING:  # type: ignore[misc]
            return f.default_factory()  # type: ignore[misc]
        return dataclasses.MISSING

    def map(self, row: sqlite3.Row) -> T:
        kwargs: dict = {}
        columns = row.keys()
        for f in self._fields:
            raw = row[f.name] if f.name in columns else None
            if raw is None:
                default = self._default(f)
                # a missing required column surfaces as TypeError from the model
                if default is not dataclasses.MISSING:
                    kwargs[f.name] = default
                elif f.name in columns:
                    kwargs[f.name] = None
                continue
            conv = self._converters[f.name]
            kwargs[f.name] = conv(raw) if conv else raw
        return self._model_class(**kwargs)

    def map_all(self, rows) -> list[T]:
        return [self.map(r) for r in rows]

    @staticmethod
    def _serialize(val):
        """Convert a model value to what the column stores."""
        if isinstance(val, Decimal):
            return str(val)
        if isinstance(val, datetime):
            return val.isoformat()
        if isinstance(val, Enum):
            return val.value
        if isinstance(val, tuple):
            return ",".join(val)
        return val

    def to_db_dict(self, obj: T, skip: frozenset = frozenset()) -> dict:
        return {
            f.name: self._serialize(getattr(obj, f.name))
            for f in self._fields
            if f.name not in skip
        }


class QueryBuilder:
    """Fluent SELECT builder: ``QueryBuilder("t").where(...).order_by(...)``."""

    def __init__(self, table: str):
        self._table = table
        self._conditions: list[str] = []
        self._params: list = []
        self._order: Optional[str] = None

    def where(self, condition: str, *params) -> "QueryBuilder":
        self._conditions.append(condition)
        self._params.extend(params)
        return self

    def order_by(self, clause: str) -> "QueryBuilder":
        self._order = clause
        return self

    def build(self) -> tuple[str, list]:
        sql = f"SELECT * FROM {self._table}"
        if self._conditions:
            sql += " WHERE " + " AND ".join(self._conditions)
        if self._order:
            sql += f" ORDER BY {self._order}"
        return sql, list(self._params)

    def fetch_one(self, conn: sqlite3.Connection) -> Optional[sqlite3.Row]:
        return conn.execute(*self.build()).fetchone()

    def fetch_all(self, conn: sqlite3.Connection) -> list[sqlite3.Row]:
        return conn.execute(*self.build()).fetchall()


class BaseRepository(Generic[T]):
    """Shared get/insert/delete for repositories keyed by a string ``id``.

    Ids are generated by the models, so they are written on insert; only
    created_at is left to the database. Writes commit immediately unless a
    ``Database.transaction()`` is open.
    """

    _table: str
    _mapper: RowMapper  # type: ignore[type-arg]
    _insert_skip: frozenset = frozenset({"created_at"})

    def _db(self) -> Database:
        return get_db()

    def _commit(self, db: Database) -> None:
        if not db._in_transaction:
            db.conn.commit()

    def _query(self) -> QueryBuilder:
        return QueryBuilder(self._table)

    def get_by_id(self, id: str) -> Optional[T]:
        row = self._query().where("id = ?", id).fetch_one(self._db().conn)
        return self._mapper.map(row) if row else None

    def delete(self, id: str) -> bool:
        db = self._db()
        cursor = db.conn.execute(f"DELETE FROM {self._table} WHERE id = ?", (id,))
        self._commit(db)
        return cursor.rowcount > 0

    def _insert(self, obj: T) -> T:
        db = self._db()
        row = self._mapper.to_db_dict(obj, skip=self._insert_skip)
        db.conn.execute(
            f"INSERT INTO {self._table} ({', '.join(row)}) VALUES ({', '.join('?' * len(row))})",
            list(row.values()),
        )
        self._commit(db)
        return self.get_by_id(obj.id)
