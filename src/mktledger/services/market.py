"""MarketService — listing, acquisition, removal, and reimbursement.

Each operation follows VALIDATE → APPLY inside one store transaction.
Every precondition is checked before the first write, and the store
rolls back on any error, so a rejected call leaves balances, listings
and the reserve counter untouched.

Listing is a reservation out of the owner's resource balance, not a
transfer: listed units stay in the owner's account until sold.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mktledger.domain.arith import checked_add, checked_sub, require_uint
from mktledger.domain.errors import ErrorCode, LedgerError
from mktledger.domain.fees import acquisition_cost, reimbursement_amount
from mktledger.domain.types import Asset
from mktledger.services.base import BaseService
from mktledger.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from mktledger.infrastructure.store import StoreTransaction
    from mktledger.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _require_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise LedgerError(
            ErrorCode.INVALID_QUANTITY,
            f"Quantity must be positive, got {quantity}",
            quantity=quantity,
        )


def _insufficient(check: str, message: str, **detail: Any) -> LedgerError:
    return LedgerError(ErrorCode.INSUFFICIENT_BALANCE, message, check=check, **detail)


class MarketService(BaseService):
    """Handles the user-facing marketplace operations."""

    @traced
    def list_resources(self, lister: str, quantity: int, price: int) -> ServiceResult:
        """Offer *quantity* more units at *price* each.

        The new price applies to the whole listing, including units listed
        earlier and not yet sold.
        """

        def apply(txn: StoreTransaction) -> dict[str, Any]:
            _require_quantity(quantity)
            if price <= 0:
                raise LedgerError(
                    ErrorCode.INVALID_PRICE,
                    f"Price must be positive, got {price}",
                    price=price,
                )
            require_uint(price, "price")

            account = txn.account(lister)
            listing = txn.listing(lister)
            listed = checked_add(listing.quantity, quantity)
            if account.resource_balance < listed:
                raise _insufficient(
                    "resource_balance",
                    (
                        f"Cannot list {quantity} units: {listing.quantity} already listed, "
                        f"resource balance is {account.resource_balance}"
                    ),
                    requested=listed,
                    available=account.resource_balance,
                )

            circulating = txn.adjust_reserve(quantity)
            txn.set_listing(lister, listed, price)
            logger.debug("Listed %d units for %s at %d", quantity, lister, price)
            return {
                "lister": lister,
                "quantity": quantity,
                "listed_quantity": listed,
                "price": price,
                "current_circulating": circulating,
            }

        return self._run("list_resources", lister, apply)

    @traced
    def remove_resources(self, lister: str, quantity: int) -> ServiceResult:
        """Withdraw *quantity* units from the listing. The price is kept."""

        def apply(txn: StoreTransaction) -> dict[str, Any]:
            _require_quantity(quantity)
            listing = txn.listing(lister)
            if listing.quantity < quantity:
                raise _insufficient(
                    "listed_quantity",
                    f"Cannot remove {quantity} units: only {listing.quantity} listed",
                    requested=quantity,
                    available=listing.quantity,
                )

            circulating = txn.adjust_reserve(-quantity)
            remaining = checked_sub(listing.quantity, quantity)
            txn.set_listing(lister, remaining, listing.price)
            return {
                "lister": lister,
                "quantity": quantity,
                "listed_quantity": remaining,
                "price": listing.price,
                "current_circulating": circulating,
            }

        return self._run("remove_resources", lister, apply)

    @traced
    def acquire_resources(self, buyer: str, provider: str, quantity: int) -> ServiceResult:
        """Buy *quantity* listed units from *provider*.

        The buyer pays ``cost + fee`` where ``cost = quantity * price``.
        The provider receives ``cost`` and the platform receives ``fee``.
        The reserve counter does not move: the units change hands inside
        circulation.
        """

        def apply(txn: StoreTransaction) -> dict[str, Any]:
            if buyer == provider:
                raise LedgerError(
                    ErrorCode.SAME_USER_TRANSACTION,
                    f"{buyer!r} cannot acquire from their own listing",
                    user=buyer,
                )
            _require_quantity(quantity)

            with trace_span("validate") as span:
                listing = txn.listing(provider)
                if listing.quantity < quantity:
                    raise _insufficient(
                        "listed_quantity",
                        f"{provider!r} lists {listing.quantity} units, {quantity} requested",
                        requested=quantity,
                        available=listing.quantity,
                    )

                provider_account = txn.account(provider)
                if provider_account.resource_balance < quantity:
                    raise _insufficient(
                        "provider_resource",
                        (
                            f"{provider!r} holds {provider_account.resource_balance} units, "
                            f"{quantity} requested"
                        ),
                        requested=quantity,
                        available=provider_account.resource_balance,
                    )

                fee_rate = txn.market_state().fee_rate_percent
                cost, fee = acquisition_cost(quantity, listing.price, fee_rate)
                total = checked_add(cost, fee)
                if span is not None:
                    span.annotate("cost", cost)
                    span.annotate("fee", fee)
                buyer_currency = txn.account(buyer).currency_balance
                if buyer_currency < total:
                    raise _insufficient(
                        "buyer_currency",
                        f"{buyer!r} has {buyer_currency} currency, {total} required",
                        requested=total,
                        available=buyer_currency,
                    )

            with trace_span("settle"):
                txn.debit(provider, Asset.RESOURCE, quantity)
                remaining = checked_sub(listing.quantity, quantity)
                txn.set_listing(provider, remaining, listing.price)
                txn.debit(buyer, Asset.CURRENCY, total)
                txn.credit(buyer, Asset.RESOURCE, quantity)
                txn.credit(provider, Asset.CURRENCY, cost)
                txn.credit(self._store.admin, Asset.CURRENCY, fee)

            logger.debug(
                "%s acquired %d units from %s (cost=%d fee=%d)",
                buyer,
                quantity,
                provider,
                cost,
                fee,
            )
            after = txn.account(buyer)
            return {
                "buyer": buyer,
                "provider": provider,
                "quantity": quantity,
                "price": listing.price,
                "cost": cost,
                "fee": fee,
                "total": total,
                "provider_listed_quantity": remaining,
                "buyer_resource_balance": after.resource_balance,
                "buyer_currency_balance": after.currency_balance,
            }

        return self._run("acquire_resources", buyer, apply)

    @traced
    def request_reimbursement(self, requester: str, quantity: int) -> ServiceResult:
        """Return *quantity* units to the platform for currency.

        Pays ``reimbursement_amount(quantity)`` out of the platform's
        currency balance. The units move to the platform's resource
        balance and leave circulation.

        Units reserved by the requester's listing cannot be reimbursed;
        they must be removed from the listing first.
        """
        platform = self._store.admin

        def apply(txn: StoreTransaction) -> dict[str, Any]:
            _require_quantity(quantity)

            account = txn.account(requester)
            listed = txn.listing(requester).quantity
            unlisted = max(0, account.resource_balance - listed)
            if unlisted < quantity:
                raise _insufficient(
                    "unlisted_resource",
                    (
                        f"{requester!r} holds {account.resource_balance} units with "
                        f"{listed} listed; {quantity} requested"
                    ),
                    requested=quantity,
                    available=unlisted,
                )

            state = txn.market_state()
            amount = reimbursement_amount(
                quantity, state.unit_price, state.reimbursement_rate_percent
            )
            platform_currency = txn.account(platform).currency_balance
            if platform_currency < amount:
                raise LedgerError(
                    ErrorCode.REFUND_UNAVAILABLE,
                    f"Platform holds {platform_currency} currency, reimbursement needs {amount}",
                    requested=amount,
                    available=platform_currency,
                )

            txn.debit(requester, Asset.RESOURCE, quantity)
            txn.debit(platform, Asset.CURRENCY, amount)
            txn.credit(requester, Asset.CURRENCY, amount)
            txn.credit(platform, Asset.RESOURCE, quantity)
            circulating = txn.adjust_reserve(-quantity)

            after = txn.account(requester)
            return {
                "requester": requester,
                "quantity": quantity,
                "amount": amount,
                "resource_balance": after.resource_balance,
                "currency_balance": after.currency_balance,
                "current_circulating": circulating,
            }

        return self._run("request_reimbursement", requester, apply)
