"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers
are dispatched by ``result.op`` in :func:`render_result`; unknown ops
fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from stargate.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from stargate.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: ids, one per line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    for key in ("duty", "person"):
        record = result.data.get(key)
        if isinstance(record, dict):
            return _extract_id(record)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("id", "person_id"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="sg.ok")
    op = Text(f"  {result.op}", style="sg.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}:", style="sg.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="sg.id")
    elif key == "name":
        v = Text(str(value), style="sg.name")
    else:
        v = Text("-" if value is None else str(value))
    console.print(k, v)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    console.print(f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {span_data.get('name', '?')}")
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _person_lines(person: dict[str, Any]) -> list[str]:
    lines = [f"id: {person.get('person_id')}"]
    for key in ("current_rank", "current_duty_title", "career_start_date", "career_end_date"):
        val = person.get(key)
        if val is not None:
            lines.append(f"{key}: {val}")
    return lines


def _duty_status(duty: dict[str, Any]) -> Text:
    if duty.get("duty_end_date") is None:
        return Text("current", style="sg.current")
    return Text("closed", style="sg.closed")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f"[{err.code}] " if err else ""
    label = Text("ERROR", style="sg.error")
    op = Text(f"  {result.op}", style="sg.op")
    console.print(label, op, Text(f"— {code}{msg}"))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Person renderers ──────────────────────────────────────────────────


def _render_person(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    person = result.data.get("person")
    if person is None:
        _field(console, "person", "not found")
        return
    _field(console, "id", person.get("person_id"))
    _field(console, "name", person.get("name"))
    if "previous_name" in result.data:
        _field(console, "previous_name", result.data["previous_name"])
    if verbose or person.get("current_rank") is not None:
        for key in ("current_rank", "current_duty_title", "career_start_date", "career_end_date"):
            _field(console, key, person.get(key))


def _render_people(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="sg.id", no_wrap=True)
    table.add_column("Name", style="sg.name")
    table.add_column("Rank")
    table.add_column("Duty Title")
    table.add_column("Career Start")
    table.add_column("Career End")

    for item in items:
        title = item.get("current_duty_title") or ""
        table.add_row(
            str(item.get("person_id", "")),
            Text(str(item.get("name", ""))),
            str(item.get("current_rank") or ""),
            Text(title, style="sg.retired" if title == "RETIRED" else ""),
            str(item.get("career_start_date") or ""),
            str(item.get("career_end_date") or ""),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} people")


# ── Duty renderers ────────────────────────────────────────────────────


def _duty_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    if verbose:
        table.add_column("ID", style="sg.id", no_wrap=True)
    table.add_column("Rank")
    table.add_column("Duty Title")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Status")

    for item in items:
        row: list[Any] = []
        if verbose:
            row.append(str(item.get("id", "")))
        row.extend(
            [
                str(item.get("rank", "")),
                Text(str(item.get("duty_title", ""))),
                str(item.get("duty_start_date", "")),
                str(item.get("duty_end_date") or ""),
                _duty_status(item),
            ]
        )
        table.add_row(*row)
    return table


def _render_duties(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    person = result.data.get("person")
    if person is None:
        _status_line(console, result)
        _field(console, "person", "not found")
        return

    console.print(
        Panel(
            Text("\n".join(_person_lines(person))),
            title=Text(str(person.get("name"))),
            expand=False,
        )
    )
    items = result.data.get("items", [])
    if items:
        console.print(_duty_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} duties")


def _render_create_duty(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    duty = result.data.get("duty") or {}
    for key in ("id", "person_id", "rank", "duty_title", "duty_start_date"):
        _field(console, key, duty.get(key))

    closed = result.data.get("closed_duty")
    if closed is not None:
        _field(console, "closed_duty_id", closed.get("id"))
        _field(console, "closed_on", closed.get("duty_end_date"))

    detail = result.data.get("detail") or {}
    if detail.get("career_end_date") is not None:
        _field(console, "career_end_date", detail["career_end_date"])
    if verbose:
        for key in ("current_rank", "current_duty_title", "career_start_date"):
            _field(console, key, detail.get(key))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "get_person": _render_person,
    "create_person": _render_person,
    "update_person": _render_person,
    "list_people": _render_people,
    "list_duties": _render_duties,
    "create_duty": _render_create_duty,
}
