"""The only component that talks to the relational database.

Queries are plain SQL with bound parameters. Named binds (``:email``) take a
mapping; an ordered sequence of values is bound to ``?`` placeholders
positionally. Values are never formatted into the SQL text.

The shared handle is a SQLAlchemy ``Engine``: it is created lazily on first use
and every operation checks a connection out of its pool, so callers on
different threads never share a DBAPI connection. Each call runs in its own
transaction and is committed before returning, unless it is made through a
``transaction()`` scope, which commits all of its statements together.
"""

import threading
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Connection, Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError

from survey_platform.config import Settings
from survey_platform.infrastructure.logging import get_logger

logger = get_logger(__name__)

Row = RowMapping

_QUOTES = ("'", '"', "`")


@dataclass(frozen=True)
class Query:
    sql: str
    params: Mapping[str, Any] | Sequence[Any] = field(default_factory=dict)

    def bound(self) -> tuple[str, dict[str, Any]]:
        if isinstance(self.params, Mapping):
            return self.sql, dict(self.params)
        return _bind_positional(self.sql, list(self.params))


def _bind_positional(sql: str, values: list[Any]) -> tuple[str, dict[str, Any]]:
    """Rewrite ``?`` placeholders to ``:p0``, ``:p1``... skipping quoted literals and identifiers."""
    rendered: list[str] = []
    params: dict[str, Any] = {}
    quote: str | None = None
    placeholders = 0
    index = 0
    while index < len(sql):
        char = sql[index]
        if quote is not None:
            rendered.append(char)
            if char == quote:
                # A doubled quote is an escaped quote and keeps the literal open.
                if index + 1 < len(sql) and sql[index + 1] == quote:
                    rendered.append(sql[index + 1])
                    index += 1
                else:
                    quote = None
        elif char in _QUOTES:
            quote = char
            rendered.append(char)
        elif char == "?":
            name = f"p{placeholders}"
            if placeholders < len(values):
                params[name] = values[placeholders]
            placeholders += 1
            rendered.append(f":{name}")
        else:
            rendered.append(char)
        index += 1

    if placeholders != len(values):
        raise ValueError(f"Query expects {placeholders} positional values, got {len(values)}")
    return "".join(rendered), params


class TransactionScope:
    """Runs queries on one connection; nothing is committed until the scope exits cleanly."""

    def __init__(self, connection: Connection):
        self._connection = connection

    def _run(self, query: Query):
        sql, params = query.bound()
        return self._connection.execute(text(sql), params)

    def select_many(self, query: Query) -> list[Row]:
        return list(self._run(query).mappings().all())

    def select_one(self, query: Query) -> Row | None:
        return self._run(query).mappings().first()

    def insert(self, query: Query) -> int:
        result = self._run(query)
        if result.returns_rows:
            return int(result.scalar_one())
        return int(result.lastrowid)

    def execute(self, query: Query) -> int:
        return int(self._run(query).rowcount)


class DataStore:
    def __init__(self, url: str | URL, *, echo: bool = False, connect_args: Mapping[str, Any] | None = None):
        self._url = url
        self._echo = echo
        self._connect_args = dict(connect_args or {})
        self._engine: Engine | None = None
        self._init_lock = threading.Lock()

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "DataStore":
        url = app_settings.sqlalchemy_url()
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        return cls(url, connect_args=connect_args)

    def _open(self) -> Engine:
        with self._init_lock:
            if self._engine is None:
                engine = create_engine(self._url, echo=self._echo, connect_args=self._connect_args, future=True)
                try:
                    with engine.connect():
                        pass
                except SQLAlchemyError:
                    engine.dispose()
                    raise
                self._engine = engine
                logger.info("database_connected", dialect=engine.dialect.name)
        return self._engine

    def connect(self) -> Engine:
        """Return the shared engine, creating it on first call.

        An unreachable database at this point is unrecoverable: the failure is
        logged and the process exits.
        """
        if self._engine is not None:
            return self._engine
        try:
            return self._open()
        except SQLAlchemyError as exc:
            logger.critical("database_connection_failed", error=str(exc))
            raise SystemExit(1) from exc

    @contextmanager
    def transaction(self) -> Iterator[TransactionScope]:
        """Group several statements into one commit; any exception rolls all of them back."""
        with self.connect().begin() as connection:
            yield TransactionScope(connection)

    def select_many(self, query: Query) -> list[Row]:
        with self.transaction() as scope:
            return scope.select_many(query)

    def select_one(self, query: Query) -> Row | None:
        with self.transaction() as scope:
            return scope.select_one(query)

    def insert(self, query: Query) -> int:
        with self.transaction() as scope:
            return scope.insert(query)

    def execute(self, query: Query) -> int:
        with self.transaction() as scope:
            return scope.execute(query)

    def health_check(self) -> bool:
        try:
            engine = self._engine or self._open()
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    def close(self) -> None:
        with self._init_lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
