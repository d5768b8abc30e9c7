"""Checked unsigned integer arithmetic.

Ledger quantities are unsigned integers stored in SQLite ``INTEGER``
columns, so the representable range is ``0..UINT_MAX``. Every helper
traps instead of wrapping or going negative.
"""

from __future__ import annotations

from mktledger.domain.errors import ArithmeticOverflowError

UINT_MAX = 2**63 - 1


def _check(value: int, op: str, a: int, b: int) -> int:
    if value < 0 or value > UINT_MAX:
        msg = f"{op}({a}, {b}) = {value} is outside 0..{UINT_MAX}"
        raise ArithmeticOverflowError(msg)
    return value


def checked_add(a: int, b: int) -> int:
    """Return ``a + b``, raising :class:`ArithmeticOverflowError` above ``UINT_MAX``."""
    return _check(a + b, "add", a, b)


def checked_sub(a: int, b: int) -> int:
    """Return ``a - b``, raising :class:`ArithmeticOverflowError` below zero."""
    return _check(a - b, "sub", a, b)


def checked_mul(a: int, b: int) -> int:
    """Return ``a * b``, raising :class:`ArithmeticOverflowError` above ``UINT_MAX``."""
    return _check(a * b, "mul", a, b)


def require_uint(value: int, name: str) -> int:
    """Return *value* unchanged if it fits a ledger column.

    Raises:
        ArithmeticOverflowError: If *value* is outside ``0..UINT_MAX``.
    """
    if value < 0 or value > UINT_MAX:
        msg = f"{name}={value} is outside 0..{UINT_MAX}"
        raise ArithmeticOverflowError(msg)
    return value
