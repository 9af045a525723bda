"""Turn message segments into HTML for the chat view.

The math engine is injected as a plain callable taking the expression and
a display-mode flag. The default engine converts LaTeX to MathML with
latex2mathml. Expressions the engine rejects are shown as their original
delimited source, never as blank output.
"""

import html
import logging
from collections.abc import Iterable
from typing import Protocol

from latex2mathml.converter import convert

from spark_chat.rendering.segmenter import (
    DisplayMath,
    InlineMath,
    LineBreak,
    PlainText,
    Segment,
    segment_markup,
)

logger = logging.getLogger(__name__)


class RenderFailure(Exception):
    """Raised by a math engine that cannot render an expression."""

    pass


class ExpressionRenderer(Protocol):
    def __call__(self, expression: str, display_mode: bool) -> str: ...


def render_latex2mathml(expression: str, display_mode: bool) -> str:
    """Render a LaTeX expression to MathML.

    Args:
        expression: LaTeX source without delimiters.
        display_mode: True for block math, False for inline math.

    Returns:
        MathML markup.

    Raises:
        RenderFailure: If latex2mathml rejects the expression.
    """
    try:
        return convert(expression, display="block" if display_mode else "inline")
    except Exception as e:
        raise RenderFailure(f"Cannot render {expression!r}: {e}") from e


def _render_math(
    segment: InlineMath | DisplayMath, render_expression: ExpressionRenderer
) -> str:
    try:
        markup = render_expression(segment.expression, segment.display_mode)
    except RenderFailure as e:
        logger.warning(f"Math render failed, showing source instead: {e}")
        return html.escape(segment.to_source())

    if not markup or not markup.strip():
        logger.warning(f"Math engine returned no markup for {segment.to_source()!r}")
        return html.escape(segment.to_source())

    if segment.display_mode:
        return f'<div class="math-display">{markup}</div>'
    return f'<span class="math-inline">{markup}</span>'


def render_segments(
    segments: Iterable[Segment],
    render_expression: ExpressionRenderer = render_latex2mathml,
) -> str:
    """Render segments to HTML.

    Plain text is escaped, line breaks become ``<br>`` and math goes
    through ``render_expression``.
    """
    parts: list[str] = []
    for segment in segments:
        if isinstance(segment, PlainText):
            parts.append(html.escape(segment.text))
        elif isinstance(segment, LineBreak):
            parts.append("<br>")
        else:
            parts.append(_render_math(segment, render_expression))
    return "".join(parts)


def render_message(
    content: str,
    render_expression: ExpressionRenderer = render_latex2mathml,
) -> str:
    """Segment and render an assistant message."""
    return render_segments(segment_markup(content), render_expression)


def render_plain(content: str) -> str:
    """Render a user message verbatim: escaped text with ``<br>`` line breaks."""
    return html.escape(content).replace("\n", "<br>")
