"""Reserve controller — bounds the resource supply in circulation.

INVARIANT: ``0 <= current_circulating <= circulating_ceiling`` after every
committed transaction.

The caller owns the transaction; a ``RESERVE_EXCEEDED`` rejection raised
here rolls back everything the operation wrote before it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import update

from mktledger.domain.arith import checked_add, require_uint
from mktledger.domain.errors import ErrorCode, LedgerError
from mktledger.infrastructure.database.schema import STATE_ROW_ID, market_state
from mktledger.infrastructure.database.state import get_market_state

if TYPE_CHECKING:
    from sqlalchemy import Connection

log = structlog.get_logger(__name__)


def _store_circulating(conn: Connection, value: int) -> None:
    conn.execute(
        update(market_state)
        .where(market_state.c.id == STATE_ROW_ID)
        .values(current_circulating=value)
    )


def adjust_reserve(conn: Connection, delta: int) -> int:
    """Move ``current_circulating`` by *delta* and return the new total.

    A negative *delta* larger than the current total clamps the counter to
    zero. The clamp hides an accounting mismatch in the caller instead of
    reporting it, so every clamp is logged as a ``reserve.clamped`` warning.

    Raises:
        LedgerError: ``RESERVE_EXCEEDED`` if the new total is above the ceiling.
    """
    state = get_market_state(conn)
    current = state.current_circulating

    if delta >= 0:
        new_total = checked_add(current, delta)
    elif -delta > current:
        log.warning(
            "reserve.clamped",
            current_circulating=current,
            delta=delta,
        )
        new_total = 0
    else:
        new_total = current + delta

    if new_total > state.circulating_ceiling:
        raise LedgerError(
            ErrorCode.RESERVE_EXCEEDED,
            (
                f"Reserve ceiling exceeded: {current} + {delta} > "
                f"{state.circulating_ceiling}"
            ),
            current_circulating=current,
            delta=delta,
            circulating_ceiling=state.circulating_ceiling,
        )

    _store_circulating(conn, new_total)
    return new_total


def get_reserve(conn: Connection) -> tuple[int, int]:
    """Return ``(current_circulating, circulating_ceiling)``."""
    state = get_market_state(conn)
    return state.current_circulating, state.circulating_ceiling


def set_reserve_ceiling(conn: Connection, limit: int) -> None:
    """Replace the circulating ceiling.

    Raises:
        LedgerError: ``INVALID_RESERVE`` if *limit* is below the units
            already circulating or negative.
        ArithmeticOverflowError: If *limit* is above ``UINT_MAX``.
    """
    current, _ = get_reserve(conn)
    if limit < current:
        raise LedgerError(
            ErrorCode.INVALID_RESERVE,
            f"Reserve ceiling {limit} is below current circulation {current}",
            limit=limit,
            current_circulating=current,
        )
    require_uint(limit, "circulating_ceiling")
    conn.execute(
        update(market_state)
        .where(market_state.c.id == STATE_ROW_ID)
        .values(circulating_ceiling=limit)
    )
