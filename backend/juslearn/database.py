"""Database store and helpers.

This module wraps the SQLModel/SQLAlchemy engine in a small `Store`
object. The application builds one store at startup, keeps it on
`app.state.store` for the lifetime of the process and disposes it on
shutdown; request handlers receive sessions through `get_session`.
"""

import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import event
from sqlmodel import SQLModel, Session, create_engine

from . import models
from .seed import topic_rows

logger = logging.getLogger("juslearn.store")

# Children before parents so foreign keys never dangle mid-drop.
_DROP_ORDER = [models.Assignment.__table__, models.Topic.__table__, models.User.__table__]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cur = dbapi_connection.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


class Store:
    """Process-wide handle on the relational store."""

    def __init__(self, database_url: str, enforce_foreign_keys: bool = False):
        self.database_url = database_url
        is_sqlite = database_url.startswith("sqlite")
        connect_args = {"check_same_thread": False} if is_sqlite else {}
        self.engine = create_engine(database_url, echo=False, connect_args=connect_args)
        if is_sqlite and enforce_foreign_keys:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

    def initialize(self, reset: bool = True):
        """Create the schema and load the topic catalog.

        With `reset` every table is dropped and recreated first, which
        discards all registered users and submissions. Without it only
        missing tables are created and existing rows are kept; seed topics
        are merged so their ids and names are restored.
        """
        if reset:
            logger.warning("resetting store: dropping users, topics and assignments")
            SQLModel.metadata.drop_all(self.engine, tables=_DROP_ORDER)
        SQLModel.metadata.create_all(self.engine)
        rows = topic_rows()
        if reset:
            with self.engine.begin() as conn:
                conn.execute(models.Topic.__table__.delete())
                conn.execute(models.Topic.__table__.insert(), rows)
        else:
            with Session(self.engine) as session:
                for row in rows:
                    session.merge(models.Topic(**row))
                session.commit()
        logger.info("seeded %d topics into the database", len(rows))

    def session(self) -> Session:
        """Open a new `Session` bound to this store's engine."""
        return Session(self.engine)

    def dispose(self):
        """Release pooled connections."""
        self.engine.dispose()


def get_session(request: Request) -> Iterator[Session]:
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session from the application's store and
    ensures it is closed when the request scope finishes.
    """
    with request.app.state.store.session() as session:
        yield session
