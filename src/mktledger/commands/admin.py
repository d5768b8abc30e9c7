"""Command group: administrator rate settings and balance provisioning."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mktledger.commands._base import AMOUNT, LedgerGroup
from mktledger.domain.types import Asset

if TYPE_CHECKING:
    from mktledger.commands._context import AppContext


@click.group(
    cls=LedgerGroup,
    examples="""\
  mktledger --as platform admin set-price 50
  mktledger --as platform admin set-fee 10
  mktledger --as platform admin set-reimbursement 80
  mktledger --as platform admin set-reserve-ceiling 500000
  mktledger --as platform admin deposit alice resource 100""",
)
def admin() -> None:
    """Administrator operations (caller must be the configured admin)."""


@admin.command("set-price")
@click.argument("price", type=AMOUNT)
@click.pass_obj
def set_price(app: AppContext, price: int) -> None:
    """Set the nominal unit price used for reimbursement."""
    from mktledger.services.admin import AdminService

    app.emit(AdminService(app.store).set_unit_price(app.caller, price))


@admin.command("set-fee")
@click.argument("rate", type=AMOUNT)
@click.pass_obj
def set_fee(app: AppContext, rate: int) -> None:
    """Set the platform fee percentage (0-100)."""
    from mktledger.services.admin import AdminService

    app.emit(AdminService(app.store).set_fee_rate(app.caller, rate))


@admin.command("set-reimbursement")
@click.argument("rate", type=AMOUNT)
@click.pass_obj
def set_reimbursement(app: AppContext, rate: int) -> None:
    """Set the reimbursement percentage of nominal value (0-100)."""
    from mktledger.services.admin import AdminService

    app.emit(AdminService(app.store).set_reimbursement_rate(app.caller, rate))


@admin.command("set-reserve-ceiling")
@click.argument("limit", type=AMOUNT)
@click.pass_obj
def set_reserve_ceiling(app: AppContext, limit: int) -> None:
    """Set the maximum number of units in circulation."""
    from mktledger.services.admin import AdminService

    app.emit(AdminService(app.store).set_reserve_ceiling(app.caller, limit))


@admin.command("set-purchase-limit")
@click.argument("limit", type=AMOUNT)
@click.pass_obj
def set_purchase_limit(app: AppContext, limit: int) -> None:
    """Record the per-user purchase cap (stored, not enforced)."""
    from mktledger.services.admin import AdminService

    app.emit(AdminService(app.store).set_purchase_limit(app.caller, limit))


@admin.command(
    examples="""\
  mktledger --as platform admin deposit alice resource 100
  mktledger --as platform admin deposit platform currency 10_000""",
)
@click.argument("account")
@click.argument("asset", type=click.Choice([a.value for a in Asset]))
@click.argument("amount", type=AMOUNT)
@click.pass_obj
def deposit(app: AppContext, account: str, asset: str, amount: int) -> None:
    """Credit AMOUNT of ASSET to ACCOUNT."""
    from mktledger.services.admin import AdminService

    app.emit(AdminService(app.store).deposit(app.caller, account, Asset(asset), amount))
