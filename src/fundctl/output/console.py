"""Rich theme and off-screen rendering for ledger output.

Renderers draw onto a themed Console whose output is captured and
returned as text, so ``format_result`` stays a pure ``-> str`` function
and the CLI decides where the text goes. A console that is not attached
to a terminal emits no ANSI codes, which covers pipes and CliRunner.
"""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO

from rich.console import Console
from rich.theme import Theme

FUND_THEME = Theme(
    {
        "fund.ok": "bold green",
        "fund.error": "bold red",
        "fund.warning": "bold yellow",
        "fund.op": "bold cyan",
        "fund.key": "dim",
        "fund.id": "bold blue",
        "fund.title": "bold",
        "fund.identity": "magenta",
        "fund.amount": "green",
        "fund.negative": "bold red",
    }
)

DEFAULT_WIDTH = 120


def render_text(
    draw: Callable[[Console], None], *, width: int = DEFAULT_WIDTH, no_color: bool = False
) -> str:
    """Run *draw* against a fresh themed console and return what it printed."""
    console = Console(
        file=StringIO(),
        theme=FUND_THEME,
        width=width,
        no_color=no_color,
        highlight=False,
    )
    with console.capture() as captured:
        draw(console)
    return captured.get().rstrip("\n")


def style_for_amount(amount: int) -> str:
    return "fund.negative" if amount < 0 else "fund.amount"
