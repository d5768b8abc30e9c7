"""QueryService — read-only accessors for balances, listings, and rates.

Reads never fail: unknown users read as zero balances and empty listings.
They go through :meth:`Store.read`, so a query never waits on a writer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mktledger.services.base import BaseService
from mktledger.services.result import ServiceResult
from mktledger.services.telemetry import traced

if TYPE_CHECKING:
    from mktledger.domain.types import MarketState


class QueryService(BaseService):
    """Read access to ledger state."""

    def _state(self) -> MarketState:
        with self._store.read() as txn:
            return txn.market_state()

    def _value(self, op: str, **data: Any) -> ServiceResult:
        return ServiceResult(ok=True, op=op, data=data)

    def get_unit_price(self) -> ServiceResult:
        return self._value("get_unit_price", unit_price=self._state().unit_price)

    def get_fee_rate(self) -> ServiceResult:
        return self._value("get_fee_rate", fee_rate_percent=self._state().fee_rate_percent)

    def get_reimbursement_rate(self) -> ServiceResult:
        state = self._state()
        return self._value(
            "get_reimbursement_rate",
            reimbursement_rate_percent=state.reimbursement_rate_percent,
        )

    def get_resource_balance(self, user: str) -> ServiceResult:
        with self._store.read() as txn:
            account = txn.account(user)
        return self._value("get_resource_balance", user=user, balance=account.resource_balance)

    def get_currency_balance(self, user: str) -> ServiceResult:
        with self._store.read() as txn:
            account = txn.account(user)
        return self._value("get_currency_balance", user=user, balance=account.currency_balance)

    @traced
    def balance(self, user: str) -> ServiceResult:
        """Both balances for *user*, plus how much of the resource is listed."""
        with self._store.read() as txn:
            account = txn.account(user)
            listing = txn.listing(user)
        return self._value(
            "balance",
            user=user,
            resource_balance=account.resource_balance,
            currency_balance=account.currency_balance,
            listed_quantity=listing.quantity,
        )

    @traced
    def get_listing(self, owner: str) -> ServiceResult:
        with self._store.read() as txn:
            listing = txn.listing(owner)
        return self._value(
            "get_listing", owner=owner, quantity=listing.quantity, price=listing.price
        )

    @traced
    def get_rates(self) -> ServiceResult:
        state = self._state()
        return self._value(
            "get_rates",
            unit_price=state.unit_price,
            fee_rate_percent=state.fee_rate_percent,
            reimbursement_rate_percent=state.reimbursement_rate_percent,
            per_user_cap=state.per_user_cap,
            admin=self._store.admin,
        )

    @traced
    def get_reserve(self) -> ServiceResult:
        state = self._state()
        return self._value(
            "get_reserve",
            current_circulating=state.current_circulating,
            circulating_ceiling=state.circulating_ceiling,
            headroom=state.reserve_headroom,
        )
