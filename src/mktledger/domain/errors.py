"""Ledger error taxonomy.

Two kinds of failure exist:

- :class:`LedgerError` — an expected, user-triggerable rejection. Raised
  inside a store transaction so the transaction rolls back, then caught by
  the service and surfaced as ``ServiceResult(ok=False)``.
- :class:`ArithmeticOverflowError` — fatal. Never converted into a
  result; it propagates to the caller after the rollback.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Codes carried in ``ServiceError.code``."""

    ADMIN_ONLY = "ADMIN_ONLY"
    INVALID_PRICE = "INVALID_PRICE"
    INVALID_FEE = "INVALID_FEE"
    INVALID_RESERVE = "INVALID_RESERVE"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    REFUND_UNAVAILABLE = "REFUND_UNAVAILABLE"
    SAME_USER_TRANSACTION = "SAME_USER_TRANSACTION"
    RESERVE_EXCEEDED = "RESERVE_EXCEEDED"


class LedgerError(Exception):
    """A rejected ledger operation. Leaves no partial effects."""

    def __init__(self, code: ErrorCode, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail

    def __repr__(self) -> str:
        return f"LedgerError({self.code.value!r}, {self.message!r})"


class ArithmeticOverflowError(ArithmeticError):
    """Unsigned arithmetic left the ``0..UINT_MAX`` range."""
