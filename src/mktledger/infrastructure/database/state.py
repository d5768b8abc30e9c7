"""Access to the ``market_state`` singleton row."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update

from mktledger.domain.types import MarketState
from mktledger.infrastructure.database.schema import STATE_ROW_ID, market_state

if TYPE_CHECKING:
    from sqlalchemy import Connection

_RATE_FIELDS = frozenset(
    {"unit_price", "fee_rate_percent", "reimbursement_rate_percent", "per_user_cap"}
)


def get_market_state(conn: Connection) -> MarketState:
    """Read the singleton. It is seeded by ``init_database`` and always present."""
    row = conn.execute(select(market_state).where(market_state.c.id == STATE_ROW_ID)).one()
    return MarketState(
        unit_price=row.unit_price,
        fee_rate_percent=row.fee_rate_percent,
        reimbursement_rate_percent=row.reimbursement_rate_percent,
        per_user_cap=row.per_user_cap,
        current_circulating=row.current_circulating,
        circulating_ceiling=row.circulating_ceiling,
    )


def update_rates(conn: Connection, **values: Any) -> None:
    """Write rate-configuration fields. Callers validate the values.

    Raises:
        ValueError: If a field is not a rate-configuration column.
    """
    unknown = set(values) - _RATE_FIELDS
    if unknown:
        msg = f"Not rate fields: {sorted(unknown)}. Expected a subset of {sorted(_RATE_FIELDS)}"
        raise ValueError(msg)
    conn.execute(update(market_state).where(market_state.c.id == STATE_ROW_ID).values(**values))
