import logging
import re
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

from donation_backend.errors import StoreError
from donation_backend.models import RecipientDB

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    url = make_url(database_url)
    kwargs = {}
    if url.drivername.startswith("sqlite"):
        # Requests are served from a thread pool
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=echo, **kwargs)


class RecipientStore:
    """Recipient records kept in a SQL database through SQLModel.

    One instance is shared by the whole process. ``connect`` is called once
    at startup; a failure there is logged and every later call retries
    against the database, raising ``StoreError`` if it is still unavailable.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._schema_ready = False

    def connect(self) -> bool:
        try:
            self.engine = build_engine(self.database_url, echo=self.echo)
            SQLModel.metadata.create_all(self.engine)
            self._schema_ready = True
        except SQLAlchemyError as exc:
            logger.error(f"Database connection error: {exc}")
            return False
        logger.info("Database connected")
        return True

    def dispose(self):
        if self.engine is not None:
            self.engine.dispose()

    @contextmanager
    def _session(self):
        if self.engine is None:
            raise StoreError("Store is not connected")
        try:
            if not self._schema_ready:
                SQLModel.metadata.create_all(self.engine)
                self._schema_ready = True
            # SQLite rejects integers outside the signed 64-bit range with OverflowError
            with Session(self.engine) as session:
                yield session
        except (SQLAlchemyError, OverflowError) as exc:
            raise StoreError(str(exc)) from exc

    @staticmethod
    def _check_identifier(recipient_id: str):
        if not isinstance(recipient_id, str) or not IDENTIFIER_PATTERN.match(recipient_id):
            raise StoreError(f"Malformed recipient identifier: {recipient_id!r}")

    def list(self) -> List[RecipientDB]:
        with self._session() as session:
            return list(session.exec(select(RecipientDB)).all())

    def get(self, recipient_id: str) -> Optional[RecipientDB]:
        self._check_identifier(recipient_id)
        with self._session() as session:
            return session.get(RecipientDB, recipient_id)

    def save(self, recipient: RecipientDB) -> RecipientDB:
        """Insert a new record or write back changes made to a fetched one."""
        with self._session() as session:
            session.add(recipient)
            session.commit()
            session.refresh(recipient)
            return recipient
