"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, mktledger.toml only contains
overrides. The [market] values seed the singleton state row the first
time a ledger database is created; later edits go through the admin
commands.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LedgerConfig(BaseModel):
    """[ledger] section."""

    model_config = {"frozen": True}

    name: str = "my-ledger"
    db_dir: str = ".mktledger"


class MarketConfig(BaseModel):
    """[market] section."""

    model_config = {"frozen": True}

    admin: str = Field(default="platform", min_length=1)
    unit_price: int = Field(default=50, gt=0)
    fee_rate_percent: int = Field(default=10, ge=0, le=100)
    reimbursement_rate_percent: int = Field(default=80, ge=0, le=100)
    reserve_ceiling: int = Field(default=1_000_000, ge=0)
    per_user_cap: int = Field(default=10_000, ge=0)
