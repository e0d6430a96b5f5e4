"""Tests for the themed off-screen console."""

from __future__ import annotations

import pytest
from rich.console import Console
from rich.text import Text

from fundctl.output.console import FUND_THEME, render_text, style_for_amount


class TestRenderText:
    def test_returns_printed_text(self) -> None:
        assert render_text(lambda c: c.print("Raised 500 of 10000")) == "Raised 500 of 10000"

    def test_trailing_newlines_trimmed(self) -> None:
        def draw(console: Console) -> None:
            console.print("one")
            console.print("two")
            console.print()

        assert render_text(draw) == "one\ntwo"

    def test_theme_styles_resolve_without_ansi(self) -> None:
        output = render_text(lambda c: c.print(Text("ST3DONOR", style="fund.identity")))
        assert output == "ST3DONOR"
        assert "\x1b" not in output

    def test_numbers_not_highlighted(self) -> None:
        assert "\x1b" not in render_text(lambda c: c.print("campaign_id=42"))

    def test_width_wraps_long_lines(self) -> None:
        output = render_text(lambda c: c.print("donor " * 10), width=20)
        assert max(len(line) for line in output.splitlines()) <= 20

    def test_nothing_drawn(self) -> None:
        assert render_text(lambda c: None) == ""


class TestAmountStyle:
    @pytest.mark.parametrize(
        ("amount", "style"), [(0, "fund.amount"), (500, "fund.amount"), (-1, "fund.negative")]
    )
    def test_style(self, amount: int, style: str) -> None:
        assert style_for_amount(amount) == style

    def test_styles_defined_in_theme(self) -> None:
        assert {"fund.amount", "fund.negative"} <= set(FUND_THEME.styles)


def test_renderer_styles_defined_in_theme() -> None:
    used = {"fund.ok", "fund.error", "fund.warning", "fund.op", "fund.key", "fund.id"}
    assert used <= set(FUND_THEME.styles)
