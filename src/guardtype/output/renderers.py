"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from guardtype.output.console import create_console, get_output, style_for_family

if TYPE_CHECKING:
    from rich.console import Console

    from guardtype.services.result import ServiceResult


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
        return f"ERROR: {result.op} — {_error_text(result)}"

    # Generated source is the payload of a stdout generate run.
    if result.op == "generate" and result.data.get("path") is None:
        return str(result.data.get("source", "")).rstrip("\n")

    types = result.data.get("types")
    if types and isinstance(types, list):
        return "\n".join(_type_name(item) for item in types)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _type_name(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get("name", ""))
    return str(item)


def _error_text(result: ServiceResult) -> str:
    """Error message prefixed with ``source:line:column`` when known."""
    err = result.error
    if err is None:
        return "Unknown error"
    detail = err.detail
    if "line" in detail and "column" in detail:
        return f"{detail.get('source', '?')}:{detail['line']}:{detail['column']}: {err.message}"
    return err.message


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text.assemble(("OK", "gt.ok"), (f"  {result.op}", "gt.op")))


_FIELD_STYLES = {"path": "gt.path", "name": "gt.name"}


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    style = _FIELD_STYLES.get(key, "")
    console.print(Text.assemble((f"  {key}: ", "gt.key"), (str(value), style)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the run settings block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  settings:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {'-' if v is None else v}", style="dim"))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    label = Text("ERROR", style="gt.error")
    op = Text(f"  {result.op}", style="gt.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(_error_text(result)))

    if verbose and err:
        console.print(Text("  detail:", style="dim"))
        console.print(f"    code: {err.code}")
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_generate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Print generated source for stdout runs, a summary when written to a file."""
    path = result.data.get("path")
    if path is None:
        console.out(str(result.data.get("source", "")).rstrip("\n"), highlight=False)
        return
    _status_line(console, result)
    _field(console, "path", path)
    _field(console, "count", result.data.get("count", 0))
    if verbose:
        _field(console, "types", ", ".join(result.data.get("types", [])))
        _render_meta(console, result)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render one row per declared type."""
    types = result.data.get("types", [])
    if not types:
        console.print("[gt.ok]OK[/gt.ok]  No types declared.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Type", style="gt.name", no_wrap=True)
    table.add_column("Inner")
    table.add_column("Traits", style="gt.trait")
    if verbose:
        table.add_column("Visibility", style="dim")
        table.add_column("Exports", style="dim")

    for item in types:
        inner = Text(str(item.get("inner", "")), style=style_for_family(item.get("family", "")))
        row: list[Any] = [str(item.get("name", "")), inner, ", ".join(item.get("traits", []))]
        if verbose:
            row.append(str(item.get("visibility", "")))
            row.append(", ".join(item.get("exports", [])))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n[gt.ok]OK[/gt.ok]  {len(types)} types valid")
    if verbose:
        _render_meta(console, result)


def _render_traits(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render one policy table per family."""
    families: dict[str, list[dict[str, str]]] = result.data.get("families", {})
    for index, (family, rows) in enumerate(families.items()):
        if index:
            console.print()
        table = Table(
            title=family,
            title_style=style_for_family(family),
            show_header=True,
            pad_edge=False,
            expand=False,
        )
        table.add_column("Trait", style="gt.trait", no_wrap=True)
        table.add_column("Rule")
        for row in rows:
            table.add_row(row["trait"], row["rule"])
        console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "generate": _render_generate,
    "check": _render_check,
    "traits": _render_traits,
}
