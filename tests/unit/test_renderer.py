"""Unit tests for segment rendering and the math engine adapter."""

import pytest
import pytest_check as check

from spark_chat.rendering.renderer import (
    RenderFailure,
    render_latex2mathml,
    render_message,
    render_plain,
    render_segments,
)
from spark_chat.rendering.segmenter import DisplayMath, InlineMath, LineBreak, PlainText


class StubEngine:
    """Math engine that records calls and wraps expressions in tags."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, bool]] = []

    def __call__(self, expression: str, display_mode: bool) -> str:
        self.calls.append((expression, display_mode))
        return f"<m display={display_mode}>{expression}</m>"


def failing_engine(expression: str, display_mode: bool) -> str:
    raise RenderFailure(f"cannot parse {expression}")


class TestRenderSegments:
    """Tests for HTML output and engine dispatch."""

    def test_dispatches_display_mode_flag(self) -> None:
        """Inline math renders with display_mode=False, display with True."""
        engine = StubEngine()

        render_segments(
            [InlineMath(expression="a"), DisplayMath(expression="b")], engine
        )

        assert engine.calls == [("a", False), ("b", True)]

    def test_wraps_math_by_mode(self) -> None:
        """Display math is a block, inline math is a span."""
        html = render_segments(
            [DisplayMath(expression="x"), InlineMath(expression="y")], StubEngine()
        )

        check.is_in('<div class="math-display"><m display=True>x</m></div>', html)
        check.is_in('<span class="math-inline"><m display=False>y</m></span>', html)

    def test_plain_text_is_escaped(self) -> None:
        """Plain text cannot inject markup."""
        html = render_segments([PlainText(text="<script>&")], StubEngine())

        assert html == "&lt;script&gt;&amp;"

    def test_line_break_renders_br(self) -> None:
        """Line breaks become <br>."""
        html = render_segments(
            [PlainText(text="a"), LineBreak(), PlainText(text="b")], StubEngine()
        )

        assert html == "a<br>b"

    def test_render_failure_falls_back_to_source(self) -> None:
        """Rejected expressions show their escaped delimited source."""
        html = render_segments(
            [PlainText(text="see "), InlineMath(expression="a<b")], failing_engine
        )

        assert html == "see $a&lt;b$"

    def test_blank_markup_falls_back_to_source(self) -> None:
        """An engine returning nothing never produces blank output."""
        html = render_segments([DisplayMath(expression="x")], lambda e, d: "  ")

        assert html == "$$x$$"


class TestRenderMessage:
    """Tests for the segment-then-render convenience function."""

    def test_renders_mixed_content(self) -> None:
        """Text, breaks and math are rendered in order."""
        engine = StubEngine()

        html = render_message("Energy:\n$E = mc^2$", engine)

        assert html == (
            'Energy:<br><span class="math-inline"><m display=False>E = mc^2</m></span>'
        )

    def test_malformed_math_renders_as_text(self) -> None:
        """Unbalanced dollars never reach the engine."""
        engine = StubEngine()

        html = render_message("cost is $5 and $10", engine)

        check.equal(html, "cost is $5 and $10")
        check.equal(engine.calls, [])


class TestLatex2MathmlEngine:
    """Tests for the default latex2mathml engine."""

    def test_inline_expression_produces_mathml(self) -> None:
        """A simple expression converts to inline MathML."""
        markup = render_latex2mathml("x^2", display_mode=False)

        check.is_in("<math", markup)
        check.is_in("<msup>", markup)
        check.is_in('display="inline"', markup)

    def test_display_expression_produces_block_mathml(self) -> None:
        """Display mode requests block MathML."""
        markup = render_latex2mathml("\\frac{1}{2}", display_mode=True)

        check.is_in('display="block"', markup)
        check.is_in("<mfrac>", markup)

    def test_engine_errors_become_render_failure(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """latex2mathml exceptions are wrapped in RenderFailure."""

        def broken_convert(latex: str, display: str) -> str:
            raise ValueError("bad token")

        monkeypatch.setattr("spark_chat.rendering.renderer.convert", broken_convert)

        with pytest.raises(RenderFailure, match="bad token"):
            render_latex2mathml("\\oops", display_mode=False)

    def test_engine_failure_in_message_shows_source(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A message whose math the engine rejects still shows the expression."""

        def broken_convert(latex: str, display: str) -> str:
            raise ValueError("bad token")

        monkeypatch.setattr("spark_chat.rendering.renderer.convert", broken_convert)

        assert render_message("try $\\oops$") == "try $\\oops$"

    def test_default_engine_used_by_render_message(self) -> None:
        """render_message uses latex2mathml when no engine is injected."""
        html = render_message("$$x$$")

        check.is_true(html.startswith('<div class="math-display"><math'))


class TestRenderPlain:
    """Tests for user message rendering."""

    def test_keeps_dollars_literal(self) -> None:
        """User messages are not parsed for math."""
        assert render_plain("$x$ <b>\nnext") == "$x$ &lt;b&gt;<br>next"
