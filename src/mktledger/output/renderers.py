"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from mktledger.output.console import create_console, get_output, style_for_key

if TYPE_CHECKING:
    from rich.console import Console

    from mktledger.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        code = result.error.code if result.error else "UNKNOWN"
        return f"ERROR: {result.op} {code}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text.assemble(("OK", "mkt.ok"), ("  " + result.op, "mkt.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}:", style="mkt.key")
    if key in ("user", "lister", "buyer", "provider", "requester", "owner", "account", "admin"):
        v = Text(str(value), style="mkt.user")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value), style=style_for_key(key))
    console.print(k, v)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_span(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    console.print(f"{' ' * indent}{span.get('name', '?')}  {span.get('duration_ms', 0.0)}ms")
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


def _key_value_table(title: str, rows: list[tuple[str, Any]]) -> Table:
    table = Table(title=title, show_header=True, pad_edge=False, expand=False)
    table.add_column("Field", style="mkt.key")
    table.add_column("Value", style="mkt.amount", justify="right")
    for key, value in rows:
        table.add_row(key, str(value))
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = err.code if err else "UNKNOWN"
    console.print(
        Text.assemble(
            ("ERROR", "mkt.error"),
            ("  " + result.op, "mkt.op"),
            f" [{code}] ",
            msg,
        )
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_setting(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render admin setter results as ``field: previous -> new``."""
    _status_line(console, result)
    previous = result.data.get("previous")
    for key, value in result.data.items():
        if key in ("previous", "current_circulating"):
            continue
        _field(console, key, f"{previous} -> {value}")
    if verbose:
        _render_meta(console, result)


def _render_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render rates and reserve snapshots as a two-column table."""
    titles = {"get_rates": "Rates", "get_reserve": "Reserve"}
    table = _key_value_table(titles.get(result.op, result.op), list(result.data.items()))
    console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Admin
    "set_unit_price": _render_setting,
    "set_fee_rate": _render_setting,
    "set_reimbursement_rate": _render_setting,
    "set_purchase_limit": _render_setting,
    "set_reserve_ceiling": _render_setting,
    # Query
    "get_rates": _render_table,
    "get_reserve": _render_table,
}
