"""Asset kinds and ledger record models.

Two fixed asset kinds are held per account: a fungible resource unit and
a currency unit. Records are frozen snapshots read out of the store;
mutation happens only through the ledger functions in the
infrastructure layer.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class Asset(StrEnum):
    """The two balance kinds an account holds."""

    RESOURCE = "resource"
    CURRENCY = "currency"


class Account(BaseModel):
    """Per-user balances. An absent account reads as all zeros."""

    model_config = {"frozen": True}

    user: str
    resource_balance: int = Field(default=0, ge=0)
    currency_balance: int = Field(default=0, ge=0)

    def balance(self, asset: Asset) -> int:
        if asset is Asset.RESOURCE:
            return self.resource_balance
        return self.currency_balance


class Listing(BaseModel):
    """A standing sell offer. ``price`` is meaningful only while ``quantity > 0``."""

    model_config = {"frozen": True}

    owner: str
    quantity: int = Field(default=0, ge=0)
    price: int = Field(default=0, ge=0)


class MarketState(BaseModel):
    """Singleton rate configuration and reserve counter."""

    model_config = {"frozen": True}

    unit_price: int = Field(gt=0)
    fee_rate_percent: int = Field(ge=0, le=100)
    reimbursement_rate_percent: int = Field(ge=0, le=100)
    per_user_cap: int = Field(ge=0)
    current_circulating: int = Field(ge=0)
    circulating_ceiling: int = Field(ge=0)

    @property
    def reserve_headroom(self) -> int:
        """Units that may still enter circulation before the ceiling."""
        return max(0, self.circulating_ceiling - self.current_circulating)
