"""Platform fee and reimbursement calculations.

Pure functions over the configured rates. Division truncates (floor for
unsigned operands), so fractional currency always stays with the payer.
"""

from __future__ import annotations

from mktledger.domain.arith import checked_mul

PERCENT = 100


def platform_fee(amount: int, fee_rate_percent: int) -> int:
    """Fee charged to a buyer on top of *amount*.

    Examples:
        >>> platform_fee(100, 10)
        10
        >>> platform_fee(19, 10)
        1
    """
    return checked_mul(amount, fee_rate_percent) // PERCENT


def reimbursement_amount(quantity: int, unit_price: int, reimbursement_rate_percent: int) -> int:
    """Currency paid out for *quantity* resource units returned to the platform.

    Examples:
        >>> reimbursement_amount(10, 50, 80)
        400
    """
    nominal = checked_mul(quantity, unit_price)
    return checked_mul(nominal, reimbursement_rate_percent) // PERCENT


def acquisition_cost(quantity: int, price: int, fee_rate_percent: int) -> tuple[int, int]:
    """Return ``(cost, fee)`` for buying *quantity* units at *price* each."""
    cost = checked_mul(quantity, price)
    return cost, platform_fee(cost, fee_rate_percent)
