"""Mixed text and LaTeX rendering for chat messages.

Responsibilities:
    - Segmentation of message text into plain text, line breaks and math
    - Dispatch of math segments to an injectable math engine
    - Literal fallback for expressions the engine rejects

The segmenter is pure and engine-agnostic; the renderer owns HTML output.
"""

from spark_chat.rendering.renderer import (
    ExpressionRenderer,
    RenderFailure,
    render_latex2mathml,
    render_message,
    render_plain,
    render_segments,
)
from spark_chat.rendering.segmenter import (
    DisplayMath,
    InlineMath,
    LineBreak,
    MathDelimiter,
    PlainText,
    Segment,
    join_segments,
    segment_markup,
)

__all__ = [
    "DisplayMath",
    "ExpressionRenderer",
    "InlineMath",
    "LineBreak",
    "MathDelimiter",
    "PlainText",
    "RenderFailure",
    "Segment",
    "join_segments",
    "render_latex2mathml",
    "render_message",
    "render_plain",
    "render_segments",
    "segment_markup",
]
