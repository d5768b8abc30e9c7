"""Listing registry — each owner's offered quantity and unit price.

One listing per owner. A listing is never deleted; selling or removing
units drives its quantity toward zero while the last price is kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert

from mktledger.domain.types import Listing
from mktledger.infrastructure.database.schema import listings

if TYPE_CHECKING:
    from sqlalchemy import Connection


def get_listing(conn: Connection, owner: str) -> Listing:
    """Return *owner*'s listing, or ``Listing(quantity=0, price=0)`` if absent."""
    row = conn.execute(select(listings).where(listings.c.owner_id == owner)).first()
    if row is None:
        return Listing(owner=owner)
    return Listing(owner=owner, quantity=row.quantity, price=row.price)


def set_listing(conn: Connection, owner: str, quantity: int, price: int) -> Listing:
    """Overwrite *owner*'s listing with ``(quantity, price)``."""
    stmt = insert(listings).values(owner_id=owner, quantity=quantity, price=price)
    conn.execute(
        stmt.on_conflict_do_update(
            index_elements=["owner_id"],
            set_={"quantity": quantity, "price": price},
        )
    )
    return Listing(owner=owner, quantity=quantity, price=price)
