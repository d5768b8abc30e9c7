"""Shared pytest fixtures and test helpers for mktledger tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from mktledger.config.models import MarketConfig
from mktledger.config.settings import LedgerSettings
from mktledger.domain.types import Asset
from mktledger.infrastructure.database.engine import init_database
from mktledger.infrastructure.store import Store
from mktledger.services.telemetry import disable_telemetry

ADMIN = "platform"


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """`-v` enables telemetry in the test thread's context; switch it off again."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables and the seeded state row."""
    engine = init_database(tmp_path / "ledger.db", MarketConfig())
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Store:
    """Store on a fresh ledger with code-default market settings.

    unit_price=50, fee_rate=10%, reimbursement_rate=80%,
    reserve_ceiling=1_000_000, admin="platform".
    """
    monkeypatch.delenv("MKTLEDGER_CONFIG", raising=False)
    settings = LedgerSettings.from_cli(ledger_root=tmp_path)
    s = Store(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_ledger(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated ledger.

    Use via ``@pytest.mark.usefixtures("_isolated_ledger")`` on command test
    classes.
    """
    monkeypatch.delenv("MKTLEDGER_CONFIG", raising=False)
    monkeypatch.delenv("MKTLEDGER_CALLER", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service and command test modules)
# ---------------------------------------------------------------------------


def fund(store: Store, user: str, *, resource: int = 0, currency: int = 0) -> None:
    """Provision balances via AdminService, asserting success."""
    from mktledger.services.admin import AdminService

    svc = AdminService(store)
    if resource:
        result = svc.deposit(ADMIN, user, Asset.RESOURCE, resource)
        assert result.ok, result.error
    if currency:
        result = svc.deposit(ADMIN, user, Asset.CURRENCY, currency)
        assert result.ok, result.error


def list_units(store: Store, user: str, quantity: int, price: int) -> dict[str, Any]:
    """List resources via MarketService, asserting success."""
    from mktledger.services.market import MarketService

    result = MarketService(store).list_resources(user, quantity, price)
    assert result.ok, result.error
    return result.data


def snapshot(store: Store, *users: str) -> dict[str, Any]:
    """Every balance, listing and the reserve state, for before/after comparison."""
    with store.transaction() as txn:
        state = txn.market_state()
        return {
            "state": state.model_dump(),
            "accounts": {u: txn.account(u).model_dump() for u in users},
            "listings": {u: txn.listing(u).model_dump() for u in users},
        }
