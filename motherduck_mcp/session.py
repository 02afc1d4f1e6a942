# motherduck_mcp/session.py

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, List, Optional, Union

import duckdb

from .config import get_motherduck_token
from .errors import MissingCredential, NoActiveSession, UnsupportedKind

logger = logging.getLogger(__name__)

LIST_DATABASES_SQL = """
    SELECT database_name
    FROM duckdb_databases()
    WHERE database_name NOT IN ('system', 'temp')
    ORDER BY database_name
"""

ATTACH_MOTHERDUCK_SQL = "ATTACH IF NOT EXISTS 'md:'"


class DatabaseKind(Enum):
    DUCKDB = "DUCKDB"
    MOTHERDUCK = "MOTHERDUCK"

    @classmethod
    def parse(cls, raw: Union[str, "DatabaseKind"]) -> "DatabaseKind":
        if isinstance(raw, cls):
            return raw
        normalized = str(raw).strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedKind('Only "DuckDB" or "MotherDuck" are supported') from None


@dataclass
class Session:
    """A live connection derived from the engine instance."""
    kind: DatabaseKind
    connection: duckdb.DuckDBPyConnection
    databases: List[str] = field(default_factory=list)


class SessionManager:
    """Owns the process-wide engine instance and the single active session.

    The engine is created lazily and never recreated. Opening a session
    replaces the previous one; replacement, lookup and every use of the
    session through `active_session()` are serialized by one lock, so a
    swap never overlaps an in-flight query.
    """

    def __init__(
        self,
        database: str = ':memory:',
        token_lookup: Callable[[], Optional[str]] = get_motherduck_token,
    ):
        self.database = database
        self._token_lookup = token_lookup
        self._lock = threading.RLock()
        self._engine: Optional[duckdb.DuckDBPyConnection] = None
        self._session: Optional[Session] = None
        self._motherduck_attached = False

    @property
    def has_engine(self) -> bool:
        return self._engine is not None

    def ensure_engine(self) -> duckdb.DuckDBPyConnection:
        with self._lock:
            if self._engine is None:
                logger.info("Creating DuckDB engine instance (database=%s, duckdb %s)", self.database, duckdb.__version__)
                self._engine = duckdb.connect(self.database)
            return self._engine

    def open_session(self, kind: Union[str, DatabaseKind]) -> Session:
        """Create a fresh session and install it as the active one.

        Precondition failures (UnsupportedKind, MissingCredential) are raised
        before the engine is touched. Engine failures propagate as duckdb.Error
        and leave the previous session in place.
        """
        kind = DatabaseKind.parse(kind)
        if kind is DatabaseKind.MOTHERDUCK and not self._token_lookup():
            raise MissingCredential('Please set the `motherduck_token` environment variable.')

        with self._lock:
            engine = self.ensure_engine()
            if kind is DatabaseKind.MOTHERDUCK and not self._motherduck_attached:
                engine.execute(ATTACH_MOTHERDUCK_SQL)
                self._motherduck_attached = True

            connection = engine.cursor()
            try:
                rows = connection.execute(LIST_DATABASES_SQL).fetchall()
            except duckdb.Error:
                connection.close()
                raise

            session = Session(kind=kind, connection=connection, databases=[r[0] for r in rows])
            previous, self._session = self._session, session

        if previous is not None:
            previous.connection.close()
            logger.info("Replaced %s session with %s session", previous.kind.value, kind.value)
        else:
            logger.info("Opened %s session", kind.value)
        return session

    def current_session(self) -> Optional[Session]:
        with self._lock:
            return self._session

    @contextmanager
    def active_session(self) -> Iterator[Session]:
        """Hold the session lock for the duration of the block.

        Raises NoActiveSession when nothing has been initialized yet; there is
        no implicit connect.
        """
        with self._lock:
            if self._session is None:
                raise NoActiveSession()
            yield self._session
