from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional
from sqlalchemy import create_engine, event, func, select, text
from sqlalchemy.engine import Connection, Engine
from app.core.config import settings
from app.infra.schema import sales

# -----------------------------------------------------------------------------
# 1) Engine (connection pool)
# -----------------------------------------------------------------------------

_engine: Optional[Engine] = None

def _unicode_lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if isinstance(value, str) else value

def register_sqlite_functions(engine: Engine) -> Engine:
    """SQLite's built-in lower() only folds ASCII; replace it on every connection."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

    return engine

def build_engine(url: str, **overrides: Any) -> Engine:
    kwargs: Dict[str, Any] = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(pool_size=10, max_overflow=20)
    kwargs.update(overrides)
    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        register_sqlite_functions(engine)
    return engine

def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = build_engine(settings.DATABASE_URL)
    return _engine

# -----------------------------------------------------------------------------
# 2) Read transaction: one connection, one transaction, optional timeout
# -----------------------------------------------------------------------------

@contextmanager
def read_transaction(
    engine: Engine, timeout_ms: Optional[int] = None
) -> Generator[Connection, None, None]:
    """Run several reads against the same connection and transaction."""
    with engine.connect() as conn:
        with conn.begin():
            if timeout_ms and conn.dialect.name == "postgresql":
                conn.execute(text(f"SET LOCAL statement_timeout = {int(timeout_ms)}"))
            yield conn

# -----------------------------------------------------------------------------
# 3) Healthcheck (/readyz)
# -----------------------------------------------------------------------------

def health_check(engine: Optional[Engine] = None) -> Dict[str, Any]:
    eng = engine or get_engine()
    with eng.connect() as conn:
        conn.execute(text("SELECT 1"))
        records = conn.execute(select(func.count()).select_from(sales)).scalar_one()
        return {
            "ok": True,
            "dialect": conn.dialect.name,
            "database": eng.url.database,
            "records": records,
        }
