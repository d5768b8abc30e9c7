"""Store — the ledger repository and its transaction boundary.

The Store is the single dependency injected into every service. It owns
the database engine. :meth:`Store.transaction` is the atomicity contract
for ledger operations: everything written inside the block commits
together on normal exit and rolls back together on any exception,
including a :class:`LedgerError` raised by a failed precondition.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mktledger.infrastructure.database import accounts as _accounts
from mktledger.infrastructure.database import listings as _listings
from mktledger.infrastructure.database import reserve as _reserve
from mktledger.infrastructure.database import state as _state
from mktledger.infrastructure.database.engine import READ_ONLY_OPTION, init_database

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from mktledger.config.settings import LedgerSettings
    from mktledger.domain.types import Account, Asset, Listing, MarketState

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# StoreTransaction — yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Active transaction context bound to one DB connection.

    Thin facade over the ledger modules so service code reads as a
    sequence of ledger steps rather than connection plumbing.
    """

    conn: Connection

    def account(self, user: str) -> Account:
        return _accounts.get_account(self.conn, user)

    def credit(self, user: str, asset: Asset, amount: int) -> int:
        return _accounts.credit(self.conn, user, asset, amount)

    def debit(self, user: str, asset: Asset, amount: int) -> int:
        return _accounts.debit(self.conn, user, asset, amount)

    def listing(self, owner: str) -> Listing:
        return _listings.get_listing(self.conn, owner)

    def set_listing(self, owner: str, quantity: int, price: int) -> Listing:
        return _listings.set_listing(self.conn, owner, quantity, price)

    def market_state(self) -> MarketState:
        return _state.get_market_state(self.conn)

    def adjust_reserve(self, delta: int) -> int:
        return _reserve.adjust_reserve(self.conn, delta)


# ---------------------------------------------------------------------------
# Store — the repository
# ---------------------------------------------------------------------------


class Store:
    """Repository encapsulating the ledger database.

    Constructed once at CLI startup from :class:`LedgerSettings` and held
    by the CLI context. Services receive the Store via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: LedgerSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(settings.db_path, settings.market)

    @property
    def root(self) -> Path:
        """The ledger root directory."""
        return self._settings.ledger_root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> LedgerSettings:
        """The resolved settings for this ledger."""
        return self._settings

    @property
    def admin(self) -> str:
        """Identity of the administrator, which is also the platform account."""
        return self._settings.market.admin

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """Run one ledger operation atomically.

        - The DB transaction is opened with ``BEGIN IMMEDIATE`` (see
          :mod:`mktledger.infrastructure.database.engine`), so concurrent
          operations are serialized.
        - On normal exit the transaction commits.
        - On any exception it rolls back and the exception propagates;
          no partial effects survive.

        Usage::

            with store.transaction() as txn:
                txn.debit(buyer, Asset.CURRENCY, total)
                txn.credit(provider, Asset.CURRENCY, cost)
                # Both commit on success, both roll back on failure.
        """
        with self._engine.begin() as conn:
            try:
                yield StoreTransaction(conn=conn)
            except BaseException:
                logger.debug("Rolling back ledger transaction", exc_info=True)
                raise

    @contextmanager
    def read(self) -> Iterator[StoreTransaction]:
        """Read ledger state without taking the write lock.

        The block sees one consistent snapshot. Writes made through the
        yielded transaction are rolled back when the block exits.
        """
        with self._engine.connect() as conn:
            conn.execution_options(**{READ_ONLY_OPTION: True})
            yield StoreTransaction(conn=conn)

    def close(self) -> None:
        """Dispose of the database engine."""
        self._engine.dispose()
