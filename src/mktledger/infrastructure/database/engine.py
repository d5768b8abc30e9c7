"""Database engine setup for SQLite with WAL mode and serialized writes.

SQLite is the persistence layer. Every transaction opens with
``BEGIN IMMEDIATE`` so the write lock is taken up front: concurrent
writers (threads or processes) queue on the busy timeout instead of
interleaving, which gives each ledger operation serial, all-or-nothing
commit semantics. Connections marked with :data:`READ_ONLY_OPTION` open a
deferred ``BEGIN`` instead and read a WAL snapshot without blocking
writers.

SQLAlchemy Core (not ORM) is used because each ledger operation is a
handful of row reads and updates inside one transaction.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, select
from sqlalchemy.engine import Engine

from mktledger.config.models import MarketConfig
from mktledger.infrastructure.database.schema import STATE_ROW_ID, market_state, metadata

BUSY_TIMEOUT_SECONDS = 30

# Connection execution option: open a deferred transaction that never
# takes the write lock.
READ_ONLY_OPTION = "ledger_read_only"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and ``BEGIN IMMEDIATE`` transactions."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"timeout": BUSY_TIMEOUT_SECONDS, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Hand transaction control to SQLAlchemy so the "begin" hook below
        # decides the locking mode.
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _do_begin(conn: Any) -> None:
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def init_database(db_path: Path, market: MarketConfig | None = None) -> Engine:
    """Initialize the ledger database at *db_path*.

    Creates the parent directory, all tables from :data:`schema.metadata`,
    and seeds the ``market_state`` singleton from *market* (code defaults
    when None).

    Idempotent: an existing singleton row is never overwritten, so
    config edits after the first run do not change live rates.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)

    metadata.create_all(engine)
    _seed_state(engine, market or MarketConfig())
    return engine


def _seed_state(engine: Engine, market: MarketConfig) -> None:
    """Insert the singleton state row if it doesn't exist."""
    with engine.begin() as conn:
        row = conn.execute(
            select(market_state.c.id).where(market_state.c.id == STATE_ROW_ID)
        ).first()
        if row is None:
            conn.execute(
                insert(market_state).values(
                    id=STATE_ROW_ID,
                    unit_price=market.unit_price,
                    fee_rate_percent=market.fee_rate_percent,
                    reimbursement_rate_percent=market.reimbursement_rate_percent,
                    per_user_cap=market.per_user_cap,
                    current_circulating=0,
                    circulating_ceiling=market.reserve_ceiling,
                )
            )
