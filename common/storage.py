"""Persistence utilities for the expense tracker core services."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    Numeric,
    Table,
    Text,
    create_engine,
    delete,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import PersistenceError

metadata = MetaData()

expenses_table = Table(
    "expenses",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("description", Text, nullable=False),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("category", Text, nullable=False),
    sqlite_autoincrement=True,
)

Row = Dict[str, Any]


def build_engine(url: URL | str, **kwargs: Any) -> Engine:
    return create_engine(url, pool_pre_ping=True, **kwargs)


class SQLStore:
    """Row-atomic access to the ``expenses`` table.

    Every method issues exactly one statement inside its own transaction, so a
    caller never observes a partially applied mutation. Updates and deletes are
    conditional on the id and report whether a row matched; nothing here reads
    a row before writing it.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_schema(self) -> None:
        try:
            metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise PersistenceError("Unable to create the expenses table") from exc

    def ping(self) -> Any:
        """Return the database clock; raises PersistenceError when unreachable."""
        try:
            with self._engine.connect() as conn:
                return conn.execute(select(func.current_timestamp())).scalar_one()
        except SQLAlchemyError as exc:
            raise PersistenceError("Database connection failed") from exc

    def insert(self, description: str, amount: Decimal, category: str) -> Row:
        stmt = (
            insert(expenses_table)
            .values(description=description, amount=amount, category=category)
            .returning(*expenses_table.c)
        )
        try:
            with self._engine.begin() as conn:
                return dict(conn.execute(stmt).mappings().one())
        except SQLAlchemyError as exc:
            raise PersistenceError("Unable to insert expense") from exc

    def update(self, expense_id: int, description: str, amount: Decimal, category: str) -> Optional[Row]:
        stmt = (
            update(expenses_table)
            .where(expenses_table.c.id == expense_id)
            .values(description=description, amount=amount, category=category)
            .returning(*expenses_table.c)
        )
        try:
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Unable to update expense {expense_id}") from exc
        return dict(row) if row is not None else None

    def delete(self, expense_id: int) -> int:
        stmt = delete(expenses_table).where(expenses_table.c.id == expense_id)
        try:
            with self._engine.begin() as conn:
                return conn.execute(stmt).rowcount
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Unable to delete expense {expense_id}") from exc

    def select_all(self) -> List[Row]:
        stmt = select(expenses_table).order_by(expenses_table.c.id.desc())
        try:
            with self._engine.connect() as conn:
                return [dict(row) for row in conn.execute(stmt).mappings()]
        except SQLAlchemyError as exc:
            raise PersistenceError("Unable to read expenses") from exc

    def select_one(self, expense_id: int) -> Optional[Row]:
        stmt = select(expenses_table).where(expenses_table.c.id == expense_id)
        try:
            with self._engine.connect() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Unable to read expense {expense_id}") from exc
        return dict(row) if row is not None else None
