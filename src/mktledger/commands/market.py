"""Commands: list, remove, acquire, reimburse.

All four act on behalf of the caller given by ``--as``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mktledger.commands._base import AMOUNT, LedgerCommand

if TYPE_CHECKING:
    from mktledger.commands._context import AppContext


@click.command(
    "list",
    cls=LedgerCommand,
    examples="""\
  mktledger --as alice list 100 5
  mktledger --as alice list 20 7      # relists everything at 7""",
)
@click.argument("quantity", type=AMOUNT)
@click.argument("price", type=AMOUNT)
@click.pass_obj
def list_cmd(app: AppContext, quantity: int, price: int) -> None:
    """Offer QUANTITY resource units for sale at PRICE each."""
    from mktledger.services.market import MarketService

    app.emit(MarketService(app.store).list_resources(app.caller, quantity, price))


@click.command(
    cls=LedgerCommand,
    examples="""\
  mktledger --as alice remove 30""",
)
@click.argument("quantity", type=AMOUNT)
@click.pass_obj
def remove(app: AppContext, quantity: int) -> None:
    """Withdraw QUANTITY units from your listing."""
    from mktledger.services.market import MarketService

    app.emit(MarketService(app.store).remove_resources(app.caller, quantity))


@click.command(
    cls=LedgerCommand,
    examples="""\
  mktledger --as bob acquire alice 20
  mktledger --as bob --json acquire alice 20""",
)
@click.argument("provider")
@click.argument("quantity", type=AMOUNT)
@click.pass_obj
def acquire(app: AppContext, provider: str, quantity: int) -> None:
    """Buy QUANTITY listed units from PROVIDER, paying price plus platform fee."""
    from mktledger.services.market import MarketService

    app.emit(MarketService(app.store).acquire_resources(app.caller, provider, quantity))


@click.command(
    cls=LedgerCommand,
    examples="""\
  mktledger --as alice reimburse 10""",
)
@click.argument("quantity", type=AMOUNT)
@click.pass_obj
def reimburse(app: AppContext, quantity: int) -> None:
    """Return QUANTITY unlisted units to the platform for currency."""
    from mktledger.services.market import MarketService

    app.emit(MarketService(app.store).request_reimbursement(app.caller, quantity))
