"""Record store client over the SQLAlchemy engine.

Collections are addressed by table name. Every operation runs in its own
transaction and returns plain dicts; driver errors surface as ``StoreError``.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import Table, false, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .db import Base
from .errors import StoreError
from . import models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class RecordStore:
	def __init__(self, engine: Engine) -> None:
		self.engine = engine

	def create_schema(self) -> None:
		try:
			Base.metadata.create_all(bind=self.engine)
		except SQLAlchemyError as e:
			raise StoreError(f"Schema creation failed: {e}") from e

	def dispose(self) -> None:
		self.engine.dispose()

	def _table(self, collection: str) -> Table:
		table = Base.metadata.tables.get(collection)
		if table is None:
			raise StoreError(f"Unknown collection: {collection}")
		return table

	def _check_columns(self, table: Table, names: Iterable[str]) -> None:
		unknown = [n for n in names if n not in table.c]
		if unknown:
			raise StoreError(f"Unknown column(s) for {table.name}: {', '.join(sorted(unknown))}")

	def _where(self, table: Table, filters: Mapping[str, Any]) -> list:
		self._check_columns(table, filters)
		return [table.c[name] == value for name, value in filters.items()]

	@staticmethod
	def _fetch_by_pk(conn: Connection, table: Table, pk: Iterable[Any]) -> Optional[Record]:
		pk_cols = list(table.primary_key.columns)
		clauses = [col == value for col, value in zip(pk_cols, pk)]
		row = conn.execute(select(table).where(*clauses)).first()
		return dict(row._mapping) if row is not None else None

	def insert(self, collection: str, fields: Mapping[str, Any]) -> Record:
		table = self._table(collection)
		self._check_columns(table, fields)
		try:
			with self.engine.begin() as conn:
				result = conn.execute(insert(table).values(**fields))
				row = self._fetch_by_pk(conn, table, result.inserted_primary_key)
		except SQLAlchemyError as e:
			logger.error("insert into %s failed: %s", collection, e)
			raise StoreError(str(e)) from e
		if row is None:
			raise StoreError(f"Inserted row in {collection} could not be read back")
		return row

	def select(
		self,
		collection: str,
		filters: Mapping[str, Any],
		order_by: Optional[str] = None,
	) -> List[Record]:
		table = self._table(collection)
		stmt = select(table).where(*self._where(table, filters))
		if order_by is not None:
			self._check_columns(table, [order_by])
			# Primary key breaks ties between equal timestamps
			stmt = stmt.order_by(table.c[order_by].asc(), *[c.asc() for c in table.primary_key.columns])
		try:
			with self.engine.connect() as conn:
				rows = conn.execute(stmt).all()
		except SQLAlchemyError as e:
			logger.error("select from %s failed: %s", collection, e)
			raise StoreError(str(e)) from e
		return [dict(r._mapping) for r in rows]

	def select_one(self, collection: str, filters: Mapping[str, Any]) -> Optional[Record]:
		"""Return the single matching row, or ``None`` when nothing matches."""
		rows = self.select(collection, filters)
		if len(rows) > 1:
			raise StoreError(f"Expected at most one row in {collection}, found {len(rows)}")
		return rows[0] if rows else None

	def update(self, collection: str, id: Any, fields: Mapping[str, Any]) -> int:
		table = self._table(collection)
		self._check_columns(table, fields)
		stmt = update(table).where(table.c.id == id).values(**fields)
		try:
			with self.engine.begin() as conn:
				result = conn.execute(stmt)
		except SQLAlchemyError as e:
			logger.error("update of %s/%s failed: %s", collection, id, e)
			raise StoreError(str(e)) from e
		return result.rowcount or 0

	def upsert(self, collection: str, fields: Mapping[str, Any], conflict_keys: List[str]) -> Record:
		table = self._table(collection)
		self._check_columns(table, list(fields) + list(conflict_keys))
		missing = [k for k in conflict_keys if k not in fields]
		if missing:
			raise StoreError(f"Upsert on {collection} is missing key field(s): {', '.join(missing)}")
		changes = {k: v for k, v in fields.items() if k not in conflict_keys}
		dialect = self.engine.dialect.name
		try:
			with self.engine.begin() as conn:
				if dialect in ("sqlite", "postgresql"):
					if dialect == "sqlite":
						from sqlalchemy.dialects.sqlite import insert as dialect_insert
					else:
						from sqlalchemy.dialects.postgresql import insert as dialect_insert
					stmt = dialect_insert(table).values(**fields)
					stmt = stmt.on_conflict_do_update(
						index_elements=[table.c[k] for k in conflict_keys],
						set_={k: stmt.excluded[k] for k in changes},
					)
					conn.execute(stmt)
				else:
					key_where = [table.c[k] == fields[k] for k in conflict_keys]
					existing = conn.execute(select(table).where(*key_where)).first()
					if existing is None:
						conn.execute(insert(table).values(**fields))
					else:
						conn.execute(update(table).where(*key_where).values(**changes))
				row = conn.execute(
					select(table).where(*[table.c[k] == fields[k] for k in conflict_keys])
				).first()
		except SQLAlchemyError as e:
			logger.error("upsert into %s failed: %s", collection, e)
			raise StoreError(str(e)) from e
		if row is None:
			raise StoreError(f"Upserted row in {collection} could not be read back")
		return dict(row._mapping)

	def complete_session(self, session_id: str, fields: Mapping[str, Any]) -> bool:
		"""Mark a b1 session completed only if it is not completed yet.

		The check and the write are one statement; ``False`` means another
		submission got there first (or the row vanished).
		"""
		table = self._table("b1_sessions")
		self._check_columns(table, fields)
		stmt = (
			update(table)
			.where(table.c.id == session_id, table.c.completed == false())
			.values(**{**fields, "completed": True})
		)
		try:
			with self.engine.begin() as conn:
				result = conn.execute(stmt)
		except SQLAlchemyError as e:
			logger.error("completion of b1 session %s failed: %s", session_id, e)
			raise StoreError(str(e)) from e
		return (result.rowcount or 0) == 1
