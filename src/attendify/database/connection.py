from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool


@dataclass
class DBConfig:
    url: str
    pool: dict[str, Any] = field(default_factory=dict)
    statement_timeout_ms: int = 0


class DatabaseConnection:
    """Owns the SQLAlchemy engine and its connection pool.

    One instance per process; repositories borrow connections per operation.
    """

    def __init__(self, config: DBConfig, engine: Optional[Engine] = None):
        self._config = config
        self._engine = engine or _build_engine(config)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def dialect(self) -> str:
        return self._engine.dialect.name

    def describe(self) -> str:
        """URL with the password masked, for log lines."""
        return self._engine.url.render_as_string(hide_password=True)

    def ping(self) -> None:
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self._engine.dispose()


def _build_engine(config: DBConfig) -> Engine:
    url = make_url(config.url)

    if url.get_backend_name() == "sqlite":
        # Single shared connection so an in-memory database survives across calls
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    engine = create_engine(url, pool_pre_ping=True, **config.pool)
    if url.get_backend_name() == "mysql" and config.statement_timeout_ms > 0:
        timeout_ms = int(config.statement_timeout_ms)

        @event.listens_for(engine, "connect")
        def _set_statement_timeout(dbapi_conn, _record):
            cur = dbapi_conn.cursor()
            try:
                cur.execute(f"SET SESSION MAX_EXECUTION_TIME={timeout_ms}")
            finally:
                cur.close()

    return engine


def _enable_sqlite_foreign_keys(dbapi_conn, _record) -> None:
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA foreign_keys=ON")
    finally:
        cur.close()
