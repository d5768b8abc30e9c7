"""Command group: read-only balance, listing, rate and reserve lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mktledger.commands._base import LedgerGroup

if TYPE_CHECKING:
    from mktledger.commands._context import AppContext


@click.group(
    cls=LedgerGroup,
    examples="""\
  mktledger --as alice query balance
  mktledger query balance bob
  mktledger query listing alice
  mktledger --json query rates
  mktledger query reserve""",
)
def query() -> None:
    """Read balances, listings, rates and reserve state."""


def _user_or_caller(app: AppContext, user: str | None) -> str:
    return user if user is not None else app.caller


@query.command()
@click.argument("user", required=False)
@click.pass_obj
def balance(app: AppContext, user: str | None) -> None:
    """Show USER's balances (default: the caller)."""
    from mktledger.services.query import QueryService

    app.emit(QueryService(app.store).balance(_user_or_caller(app, user)))


@query.command()
@click.argument("user", required=False)
@click.pass_obj
def listing(app: AppContext, user: str | None) -> None:
    """Show USER's listing (default: the caller)."""
    from mktledger.services.query import QueryService

    app.emit(QueryService(app.store).get_listing(_user_or_caller(app, user)))


@query.command()
@click.pass_obj
def rates(app: AppContext) -> None:
    """Show unit price, fee and reimbursement rates, and the purchase cap."""
    from mktledger.services.query import QueryService

    app.emit(QueryService(app.store).get_rates())


@query.command()
@click.pass_obj
def reserve(app: AppContext) -> None:
    """Show units in circulation against the ceiling."""
    from mktledger.services.query import QueryService

    app.emit(QueryService(app.store).get_reserve())
