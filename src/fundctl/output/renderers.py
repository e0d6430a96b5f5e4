"""Operation-specific Rich renderers for ServiceResult.

Each renderer draws onto the Console handed to it by
:func:`render_text`, which returns the captured text.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from fundctl.output.console import render_text, style_for_amount

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from fundctl.services.result import ServiceResult

_AMOUNT_KEYS = frozenset({"amount", "total_raised", "goal_amount", "fee", "donated", "count"})
_IDENTITY_KEYS = frozenset({"authority", "organizer", "donor", "source", "destination"})


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
    else:
        renderer = _render_error
    return render_text(lambda console: renderer(result, console, verbose=verbose))


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        code = result.error.code if result.error else "error"
        return f"ERROR: {result.op} {code}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("id", item.get("seq", ""))) for item in items)
    for key in ("id", "count", "authority", "height"):
        if key in result.data:
            return str(result.data[key])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="fund.ok")
    op = Text(f"  {result.op}", style="fund.op")
    console.print(label, op)


def _value_text(key: str, value: Any) -> Text:
    if key == "id" or key.endswith("_id"):
        return Text(str(value), style="fund.id")
    if key == "title":
        return Text(str(value), style="fund.title")
    if key in _IDENTITY_KEYS:
        return Text(str(value), style="fund.identity")
    if key in _AMOUNT_KEYS and isinstance(value, int) and not isinstance(value, bool):
        return Text(str(value), style=style_for_amount(value))
    return Text(str(value))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    console.print(Text(f"  {key}: ", style="fund.key"), _value_text(key, value), sep="")


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(Text("  warning: ", style="fund.warning"), warning, sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the telemetry span tree (verbose only)."""
    if not result.meta:
        return
    telemetry = result.meta.get("telemetry")
    if telemetry:
        console.print(Text("  telemetry:", style="dim"))
        _render_span(console, telemetry, indent=4)


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    prefix = " " * indent
    tags = span.get("tags", {})
    context = "  ".join(f"{k}={tags[k]}" for k in ("campaign_id", "caller", "code") if k in tags)
    line = f"{prefix}[dim]{span.get('elapsed_ms', 0.0):>8.2f}ms[/dim]  {span.get('name')}"
    console.print(f"{line}  [dim]{context}[/dim]" if context else line)
    for stage in span.get("stages", []):
        _render_span(console, stage, indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="fund.error"),
        Text(f"  {result.op}{code}", style="fund.op"),
        Text(": "),
        msg,
        sep="",
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Success renderers ─────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    _render_warnings(console, result)
    if verbose:
        _render_meta(console, result)


def _render_campaign(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single campaign as a panel with funding progress."""
    d = result.data
    goal = d.get("goal_amount", 0)
    raised = d.get("total_raised", 0)
    pct = (raised / goal * 100) if goal else 0.0

    body = Text()
    body.append("organizer: ", style="fund.key")
    body.append(f"{d.get('organizer')}\n", style="fund.identity")
    body.append("raised: ", style="fund.key")
    body.append(f"{raised}", style=style_for_amount(raised))
    body.append(f" / {goal} ({pct:.1f}%)\n")
    body.append("deadline: ", style="fund.key")
    body.append(f"{d.get('deadline')} (created at {d.get('created_at')})\n")
    body.append("active: ", style="fund.key")
    body.append("yes" if d.get("is_active") else "no")

    title = Text.assemble((f"#{d.get('id')} ", "fund.id"), (str(d.get("title")), "fund.title"))
    console.print(Panel(body, title=title, title_align="left", expand=False))
    if verbose:
        _render_meta(console, result)


def _render_campaign_list(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items: list[dict[str, Any]] = result.data.get("items", [])
    if not items:
        console.print(Text("No campaigns.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="fund.id", justify="right")
    table.add_column("Title", style="fund.title")
    table.add_column("Raised", justify="right")
    table.add_column("Goal", justify="right")
    table.add_column("Deadline", justify="right")
    table.add_column("Organizer", style="fund.identity")

    for item in items:
        raised = item.get("total_raised", 0)
        table.add_row(
            str(item.get("id")),
            str(item.get("title")),
            Text(str(raised), style=style_for_amount(raised)),
            str(item.get("goal_amount")),
            str(item.get("deadline")),
            str(item.get("organizer")),
        )
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_transfers(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items: list[dict[str, Any]] = result.data.get("items", [])
    if not items:
        console.print(Text("No transfers.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind")
    table.add_column("Campaign", style="fund.id", justify="right")
    table.add_column("Amount", style="fund.amount", justify="right")
    table.add_column("From", style="fund.identity")
    table.add_column("To", style="fund.identity")
    table.add_column("Height", justify="right")

    for item in items:
        campaign_id = item.get("campaign_id")
        table.add_row(
            str(item.get("seq")),
            str(item.get("kind")),
            "" if campaign_id is None else str(campaign_id),
            str(item.get("amount")),
            str(item.get("source")),
            str(item.get("destination")),
            str(item.get("height")),
        )
    console.print(table)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "get_campaign": _render_campaign,
    "list_campaigns": _render_campaign_list,
    "list_transfers": _render_transfers,
}
