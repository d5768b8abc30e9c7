"""SQLAlchemy Core table definitions for the ledger database.

Three tables: the ``market_state`` singleton (rates and reserve counter),
per-user ``accounts``, and per-owner ``listings``. Absent account and
listing rows read as zero; rows are created lazily on first write.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, Integer, MetaData, Table, Text

metadata = MetaData()

# Singleton row: id is always STATE_ROW_ID.
STATE_ROW_ID = 1

market_state = Table(
    "market_state",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("unit_price", Integer, nullable=False),
    Column("fee_rate_percent", Integer, nullable=False),
    Column("reimbursement_rate_percent", Integer, nullable=False),
    Column("per_user_cap", Integer, nullable=False),
    Column("current_circulating", Integer, nullable=False, default=0, server_default="0"),
    Column("circulating_ceiling", Integer, nullable=False),
    CheckConstraint("id = 1", name="ck_market_state_singleton"),
    CheckConstraint("unit_price > 0", name="ck_market_state_unit_price"),
    CheckConstraint(
        "fee_rate_percent BETWEEN 0 AND 100", name="ck_market_state_fee_rate"
    ),
    CheckConstraint(
        "reimbursement_rate_percent BETWEEN 0 AND 100",
        name="ck_market_state_reimbursement_rate",
    ),
    CheckConstraint(
        "current_circulating >= 0 AND current_circulating <= circulating_ceiling",
        name="ck_market_state_reserve",
    ),
)

accounts = Table(
    "accounts",
    metadata,
    Column("user_id", Text, primary_key=True),
    Column("resource_balance", Integer, nullable=False, default=0, server_default="0"),
    Column("currency_balance", Integer, nullable=False, default=0, server_default="0"),
    CheckConstraint("resource_balance >= 0", name="ck_accounts_resource"),
    CheckConstraint("currency_balance >= 0", name="ck_accounts_currency"),
)

listings = Table(
    "listings",
    metadata,
    Column("owner_id", Text, primary_key=True),
    Column("quantity", Integer, nullable=False, default=0, server_default="0"),
    Column("price", Integer, nullable=False, default=0, server_default="0"),
    CheckConstraint("quantity >= 0", name="ck_listings_quantity"),
    CheckConstraint("price >= 0", name="ck_listings_price"),
)
