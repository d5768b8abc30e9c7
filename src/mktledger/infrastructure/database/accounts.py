"""Account ledger — per-user resource and currency balances.

The caller owns the transaction: pass a ``Connection`` obtained from
``engine.begin()`` (via :meth:`Store.transaction`) so every debit and
credit participates in the same atomic unit as the surrounding writes.

An account with no row reads as zero balances; the row is created on the
first credit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert

from mktledger.domain.arith import checked_add, checked_sub
from mktledger.domain.errors import ErrorCode, LedgerError
from mktledger.domain.types import Account, Asset
from mktledger.infrastructure.database.schema import accounts

if TYPE_CHECKING:
    from sqlalchemy import Connection

_COLUMNS = {
    Asset.RESOURCE: "resource_balance",
    Asset.CURRENCY: "currency_balance",
}


def get_account(conn: Connection, user: str) -> Account:
    """Return *user*'s balances, or a zero account if none exists yet."""
    row = conn.execute(select(accounts).where(accounts.c.user_id == user)).first()
    if row is None:
        return Account(user=user)
    return Account(
        user=user,
        resource_balance=row.resource_balance,
        currency_balance=row.currency_balance,
    )


def _store_balance(conn: Connection, user: str, asset: Asset, value: int) -> None:
    column = _COLUMNS[asset]
    stmt = insert(accounts).values(user_id=user, **{column: value})
    conn.execute(stmt.on_conflict_do_update(index_elements=["user_id"], set_={column: value}))


def credit(conn: Connection, user: str, asset: Asset, amount: int) -> int:
    """Add *amount* of *asset* to *user*'s balance and return the new balance.

    Raises:
        ArithmeticOverflowError: If the balance would exceed ``UINT_MAX``.
    """
    new_balance = checked_add(get_account(conn, user).balance(asset), amount)
    _store_balance(conn, user, asset, new_balance)
    return new_balance


def debit(conn: Connection, user: str, asset: Asset, amount: int) -> int:
    """Subtract *amount* of *asset* from *user*'s balance and return the new balance.

    Raises:
        LedgerError: ``INSUFFICIENT_BALANCE`` if *amount* exceeds the balance.
    """
    current = get_account(conn, user).balance(asset)
    if amount > current:
        raise LedgerError(
            ErrorCode.INSUFFICIENT_BALANCE,
            f"Insufficient {asset} balance for {user!r}: need {amount}, have {current}",
            account=user,
            asset=str(asset),
            requested=amount,
            available=current,
        )
    new_balance = checked_sub(current, amount)
    _store_balance(conn, user, asset, new_balance)
    return new_balance
