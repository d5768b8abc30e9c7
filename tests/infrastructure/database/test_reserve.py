"""Tests for the reserve controller and market state row."""

import pytest
import structlog
from sqlalchemy.engine import Engine

from mktledger.domain.errors import ErrorCode, LedgerError
from mktledger.infrastructure.database.reserve import (
    adjust_reserve,
    get_reserve,
    set_reserve_ceiling,
)
from mktledger.infrastructure.database.state import get_market_state, update_rates


def _circulating(engine: Engine) -> int:
    with engine.begin() as conn:
        return get_market_state(conn).current_circulating


class TestAdjustReserve:
    def test_increment(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            assert adjust_reserve(conn, 25) == 25
            assert adjust_reserve(conn, 5) == 30
        assert _circulating(db_engine) == 30

    def test_decrement(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            adjust_reserve(conn, 25)
            assert adjust_reserve(conn, -10) == 15

    def test_reaching_ceiling_allowed(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            set_reserve_ceiling(conn, 40)
            assert adjust_reserve(conn, 40) == 40

    def test_exceeding_ceiling_rejected(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            set_reserve_ceiling(conn, 40)
            adjust_reserve(conn, 30)
        with pytest.raises(LedgerError) as excinfo:
            with db_engine.begin() as conn:
                adjust_reserve(conn, 11)
        assert excinfo.value.code is ErrorCode.RESERVE_EXCEEDED
        assert excinfo.value.detail["circulating_ceiling"] == 40
        assert _circulating(db_engine) == 30

    def test_underflow_clamps_to_zero_and_warns(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            adjust_reserve(conn, 5)
        with structlog.testing.capture_logs() as logs:
            with db_engine.begin() as conn:
                assert adjust_reserve(conn, -8) == 0
        assert _circulating(db_engine) == 0
        clamped = [e for e in logs if e["event"] == "reserve.clamped"]
        assert clamped
        assert clamped[0]["log_level"] == "warning"
        assert clamped[0]["current_circulating"] == 5
        assert clamped[0]["delta"] == -8

    def test_exact_decrement_does_not_warn(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            adjust_reserve(conn, 5)
        with structlog.testing.capture_logs() as logs:
            with db_engine.begin() as conn:
                assert adjust_reserve(conn, -5) == 0
        assert not [e for e in logs if e["event"] == "reserve.clamped"]


class TestSetReserveCeiling:
    def test_get_reserve_pair(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            adjust_reserve(conn, 7)
            assert get_reserve(conn) == (7, 1_000_000)

    def test_raise_and_lower(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            set_reserve_ceiling(conn, 10)
            assert get_market_state(conn).circulating_ceiling == 10

    def test_below_circulating_rejected(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            adjust_reserve(conn, 20)
            with pytest.raises(LedgerError) as excinfo:
                set_reserve_ceiling(conn, 19)
        assert excinfo.value.code is ErrorCode.INVALID_RESERVE

    def test_equal_to_circulating_allowed(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            adjust_reserve(conn, 20)
            set_reserve_ceiling(conn, 20)
            assert get_market_state(conn).circulating_ceiling == 20


class TestUpdateRates:
    def test_updates_named_fields(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            update_rates(conn, fee_rate_percent=25, per_user_cap=3)
            state = get_market_state(conn)
        assert state.fee_rate_percent == 25
        assert state.per_user_cap == 3

    def test_reserve_fields_not_writable(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            with pytest.raises(ValueError, match="Not rate fields"):
                update_rates(conn, current_circulating=0)
