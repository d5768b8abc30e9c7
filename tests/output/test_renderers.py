"""Tests for the Rich renderers."""

from __future__ import annotations

from mktledger.output.renderers import render_quiet, render_result
from mktledger.services.result import ServiceError, ServiceResult


def _error(op: str = "acquire_resources", **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="INSUFFICIENT_BALANCE", message="not enough", detail=detail),
    )


class TestGeneric:
    def test_status_line_and_fields(self) -> None:
        result = ServiceResult(
            ok=True, op="acquire_resources", data={"buyer": "y", "cost": 100, "fee": 10}
        )
        out = render_result(result)
        lines = out.splitlines()
        assert lines[0] == "OK  acquire_resources"
        assert "  buyer: y" in lines
        assert "  cost: 100" in lines
        assert "  fee: 10" in lines

    def test_markup_in_values_is_literal(self) -> None:
        result = ServiceResult(ok=True, op="balance", data={"user": "[bold]eve[/bold]"})
        assert "[bold]eve[/bold]" in render_result(result)

    def test_meta_only_when_verbose(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_resources",
            data={"quantity": 1},
            meta={"telemetry": {"name": "MarketService.list_resources", "duration_ms": 1.5}},
        )
        assert "meta" not in render_result(result)
        verbose = render_result(result, verbose=True)
        assert "MarketService.list_resources  1.5ms" in verbose


class TestError:
    def test_error_line(self) -> None:
        out = render_result(_error(check="buyer_currency"))
        assert out.splitlines()[0] == "ERROR  acquire_resources [INSUFFICIENT_BALANCE] not enough"
        assert "detail" not in out

    def test_detail_when_verbose(self) -> None:
        out = render_result(_error(check="buyer_currency", requested=110), verbose=True)
        assert "    check: buyer_currency" in out
        assert "    requested: 110" in out


class TestSettingAndTables:
    def test_setting_shows_transition(self) -> None:
        result = ServiceResult(
            ok=True, op="set_fee_rate", data={"fee_rate_percent": 25, "previous": 10}
        )
        out = render_result(result)
        assert "  fee_rate_percent: 10 -> 25" in out
        assert "previous:" not in out

    def test_reserve_ceiling_hides_circulating(self) -> None:
        result = ServiceResult(
            ok=True,
            op="set_reserve_ceiling",
            data={"circulating_ceiling": 500, "previous": 1000, "current_circulating": 3},
        )
        out = render_result(result)
        assert "circulating_ceiling: 1000 -> 500" in out
        assert "current_circulating" not in out

    def test_rates_table(self) -> None:
        result = ServiceResult(
            ok=True, op="get_rates", data={"unit_price": 50, "fee_rate_percent": 10}
        )
        out = render_result(result)
        assert "Rates" in out
        assert "unit_price" in out
        assert "50" in out

    def test_reserve_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="get_reserve",
            data={"current_circulating": 4, "circulating_ceiling": 9, "headroom": 5},
        )
        out = render_result(result)
        assert "Reserve" in out
        assert "headroom" in out


class TestQuiet:
    def test_ok(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="deposit")) == "OK: deposit"

    def test_error(self) -> None:
        assert render_quiet(_error()) == "ERROR: acquire_resources INSUFFICIENT_BALANCE"
