"""Tests for Store and its transaction boundary."""

import inspect
import threading
from pathlib import Path

import pytest

from mktledger.config.settings import LedgerSettings
from mktledger.domain.errors import ErrorCode, LedgerError
from mktledger.domain.types import Asset
from mktledger.infrastructure import database
from mktledger.infrastructure.store import Store, StoreTransaction


class TestStore:
    def test_creates_database_under_ledger_root(self, tmp_path: Path) -> None:
        store = Store(LedgerSettings.from_cli(ledger_root=tmp_path))
        try:
            assert store.root == tmp_path
            assert (tmp_path / ".mktledger" / "ledger.db").exists()
        finally:
            store.close()

    def test_admin_from_settings(self, store: Store) -> None:
        assert store.admin == "platform"

    def test_yields_transaction(self, store: Store) -> None:
        with store.transaction() as txn:
            assert isinstance(txn, StoreTransaction)


class TestTransaction:
    def test_commit_on_success(self, store: Store) -> None:
        with store.transaction() as txn:
            txn.credit("alice", Asset.CURRENCY, 10)
            txn.set_listing("alice", 0, 3)
        with store.transaction() as txn:
            assert txn.account("alice").currency_balance == 10
            assert txn.listing("alice").price == 3

    def test_rollback_on_ledger_error(self, store: Store) -> None:
        with pytest.raises(LedgerError):
            with store.transaction() as txn:
                txn.credit("alice", Asset.CURRENCY, 10)
                txn.adjust_reserve(5)
                txn.debit("bob", Asset.CURRENCY, 1)
        with store.transaction() as txn:
            assert txn.account("alice").currency_balance == 0
            assert txn.market_state().current_circulating == 0

    def test_rollback_on_any_exception(self, store: Store) -> None:
        with pytest.raises(RuntimeError):
            with store.transaction() as txn:
                txn.credit("alice", Asset.RESOURCE, 10)
                raise RuntimeError("boom")
        with store.transaction() as txn:
            assert txn.account("alice").resource_balance == 0

    def test_concurrent_writers_serialize(self, store: Store) -> None:
        """Read-modify-write credits from many threads lose no updates."""
        errors: list[BaseException] = []

        def worker() -> None:
            try:
                for _ in range(10):
                    with store.transaction() as txn:
                        txn.credit("alice", Asset.CURRENCY, 1)
            except BaseException as exc:  # pragma: no cover - surfaced below
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        with store.transaction() as txn:
            assert txn.account("alice").currency_balance == 40

    def test_reserve_exceeded_inside_transaction(self, store: Store) -> None:
        with pytest.raises(LedgerError) as excinfo:
            with store.transaction() as txn:
                txn.adjust_reserve(store.settings.market.reserve_ceiling + 1)
        assert excinfo.value.code is ErrorCode.RESERVE_EXCEEDED


class TestLedgerModules:
    @pytest.mark.parametrize("name", ["accounts", "listings", "reserve", "state"])
    def test_package_attribute_is_module(self, name: str) -> None:
        assert inspect.ismodule(getattr(database, name))

    def test_transaction_reaches_every_ledger_module(self, store: Store) -> None:
        with store.transaction() as txn:
            assert txn.credit("alice", Asset.RESOURCE, 7) == 7
            assert txn.debit("alice", Asset.RESOURCE, 2) == 5
            txn.set_listing("alice", 5, 4)
            assert txn.adjust_reserve(5) == 5
        with store.read() as txn:
            assert txn.account("alice").resource_balance == 5
            assert txn.listing("alice").quantity == 5
            assert txn.market_state().current_circulating == 5


class TestRead:
    def test_sees_committed_state(self, store: Store) -> None:
        with store.transaction() as txn:
            txn.credit("alice", Asset.CURRENCY, 10)
        with store.read() as txn:
            assert txn.account("alice").currency_balance == 10

    def test_does_not_wait_for_open_writer(self, store: Store) -> None:
        with store.transaction() as writer:
            writer.credit("alice", Asset.CURRENCY, 10)
            with store.read() as reader:
                assert reader.account("alice").currency_balance == 0
        with store.read() as reader:
            assert reader.account("alice").currency_balance == 10

    def test_writes_are_discarded(self, store: Store) -> None:
        with store.read() as txn:
            txn.credit("alice", Asset.CURRENCY, 10)
        with store.read() as txn:
            assert txn.account("alice").currency_balance == 0
