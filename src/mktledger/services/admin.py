"""AdminService — rate configuration, reserve ceiling, and provisioning.

Every operation is restricted to the administrator configured as
``[market] admin``; any other caller gets ``ADMIN_ONLY`` and nothing is
written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mktledger.domain.arith import require_uint
from mktledger.domain.errors import ErrorCode, LedgerError
from mktledger.domain.fees import PERCENT
from mktledger.domain.types import Asset
from mktledger.infrastructure.database.reserve import set_reserve_ceiling
from mktledger.infrastructure.database.state import update_rates
from mktledger.services.base import BaseService
from mktledger.services.telemetry import traced

if TYPE_CHECKING:
    from collections.abc import Callable

    from mktledger.infrastructure.store import StoreTransaction
    from mktledger.services.result import ServiceResult


def _require_rate(rate: int) -> None:
    if not 0 <= rate <= PERCENT:
        raise LedgerError(
            ErrorCode.INVALID_FEE,
            f"Rate must be between 0 and {PERCENT} percent, got {rate}",
            rate=rate,
        )


class AdminService(BaseService):
    """Handles administrator-only writes."""

    def _set_rate_field(
        self,
        op: str,
        caller: str,
        field: str,
        value: int,
        validate: Callable[[int], None],
    ) -> ServiceResult:
        def apply(txn: StoreTransaction) -> dict[str, Any]:
            self._require_admin(caller)
            validate(value)
            require_uint(value, field)
            previous = getattr(txn.market_state(), field)
            update_rates(txn.conn, **{field: value})
            return {field: value, "previous": previous}

        return self._run(op, caller, apply)

    @traced
    def set_unit_price(self, caller: str, price: int) -> ServiceResult:
        """Set the nominal unit price used for reimbursements."""

        def validate(value: int) -> None:
            if value <= 0:
                raise LedgerError(
                    ErrorCode.INVALID_PRICE,
                    f"Unit price must be positive, got {value}",
                    price=value,
                )

        return self._set_rate_field("set_unit_price", caller, "unit_price", price, validate)

    @traced
    def set_fee_rate(self, caller: str, rate: int) -> ServiceResult:
        """Set the platform fee percentage charged on acquisitions."""
        return self._set_rate_field(
            "set_fee_rate", caller, "fee_rate_percent", rate, _require_rate
        )

    @traced
    def set_reimbursement_rate(self, caller: str, rate: int) -> ServiceResult:
        """Set the percentage of nominal value paid out on reimbursement."""
        return self._set_rate_field(
            "set_reimbursement_rate",
            caller,
            "reimbursement_rate_percent",
            rate,
            _require_rate,
        )

    @traced
    def set_purchase_limit(self, caller: str, limit: int) -> ServiceResult:
        """Set ``per_user_cap``.

        Stored only: no marketplace operation consults it yet.
        """

        def validate(value: int) -> None:
            if value < 0:
                raise LedgerError(
                    ErrorCode.INVALID_QUANTITY,
                    f"Purchase limit cannot be negative, got {value}",
                    limit=value,
                )

        return self._set_rate_field(
            "set_purchase_limit", caller, "per_user_cap", limit, validate
        )

    @traced
    def set_reserve_ceiling(self, caller: str, limit: int) -> ServiceResult:
        """Set the circulating ceiling; it may not drop below current circulation."""

        def apply(txn: StoreTransaction) -> dict[str, Any]:
            self._require_admin(caller)
            previous = txn.market_state().circulating_ceiling
            set_reserve_ceiling(txn.conn, limit)
            return {
                "circulating_ceiling": limit,
                "previous": previous,
                "current_circulating": txn.market_state().current_circulating,
            }

        return self._run("set_reserve_ceiling", caller, apply)

    @traced
    def deposit(self, caller: str, account: str, asset: Asset, amount: int) -> ServiceResult:
        """Credit *amount* of *asset* to *account*.

        Provisioning bypasses the reserve counter and listings.
        """

        def apply(txn: StoreTransaction) -> dict[str, Any]:
            self._require_admin(caller)
            if amount <= 0:
                raise LedgerError(
                    ErrorCode.INVALID_QUANTITY,
                    f"Deposit amount must be positive, got {amount}",
                    amount=amount,
                )
            balance = txn.credit(account, asset, amount)
            return {"account": account, "asset": str(asset), "amount": amount, "balance": balance}

        return self._run("deposit", caller, apply)
