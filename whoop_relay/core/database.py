"""Database configuration and datastore client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class DatastoreError(RuntimeError):
    """A datastore call failed or no datastore is configured."""


def _engine_for(url: str) -> Engine:
    if url.startswith("sqlite"):
        kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            # one shared connection, otherwise every session sees an empty db
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


class Datastore:
    """Thin insert/select client over a SQLModel engine.

    One instance lives for the whole process; sessions are opened per call.
    Every failure surfaces as ``DatastoreError``.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, url: str) -> "Datastore":
        return cls(_engine_for(url))

    def create_tables(self) -> None:
        SQLModel.metadata.create_all(self.engine)

    def insert(
        self, table: Type[ModelT], record: Union[ModelT, Mapping[str, Any]]
    ) -> ModelT:
        """Persist one row and return it with generated fields populated."""

        try:
            row = record if isinstance(record, table) else table.model_validate(record)
            with Session(self.engine) as session:
                session.add(row)
                session.commit()
                session.refresh(row)
        except (SQLAlchemyError, ValidationError) as exc:
            raise DatastoreError(f"insert into {table.__tablename__} failed: {exc}") from exc
        return row

    def select(self, table: Type[ModelT], limit: Optional[int] = None) -> List[ModelT]:
        statement = select(table)
        if limit is not None:
            statement = statement.limit(limit)
        try:
            with Session(self.engine) as session:
                return list(session.exec(statement).all())
        except SQLAlchemyError as exc:
            raise DatastoreError(f"select from {table.__tablename__} failed: {exc}") from exc

    def close(self) -> None:
        self.engine.dispose()


__all__ = ["Datastore", "DatastoreError"]
