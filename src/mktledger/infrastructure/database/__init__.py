"""SQLite ledger database: schema, engine, accounts, listings, reserve."""

from mktledger.infrastructure.database.accounts import credit, debit, get_account
from mktledger.infrastructure.database.engine import create_db_engine, init_database
from mktledger.infrastructure.database.listings import get_listing, set_listing
from mktledger.infrastructure.database.reserve import (
    adjust_reserve,
    get_reserve,
    set_reserve_ceiling,
)
from mktledger.infrastructure.database.schema import market_state, metadata
from mktledger.infrastructure.database.state import get_market_state, update_rates

__all__ = [
    "adjust_reserve",
    "create_db_engine",
    "credit",
    "debit",
    "get_account",
    "get_listing",
    "get_market_state",
    "get_reserve",
    "init_database",
    "market_state",
    "metadata",
    "set_listing",
    "set_reserve_ceiling",
    "update_rates",
]
