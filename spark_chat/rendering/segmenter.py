r"""Split message text into plain text, line breaks and LaTeX math.

Delimiter grammars run as successive passes, each one only scanning text
that earlier passes left unclaimed:

    1. ```latex ... ```   display (fenced block, body kept verbatim)
    2. $$ ... $$          display
    3. \[ ... \]          display
    4. \( ... \)          inline
    5. $ ... $            inline, single line
    6. newline            line break

Unmatched delimiters stay in the surrounding plain text. Joining the
``to_source()`` of every segment reproduces the input exactly.
"""

import re
from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MathDelimiter(str, Enum):
    """Opening marker of a math segment."""

    FENCE = "```latex"
    DOUBLE_DOLLAR = "$$"
    BRACKET = "\\["
    PAREN = "\\("
    DOLLAR = "$"

    @property
    def closer(self) -> str:
        return _CLOSERS[self]


_CLOSERS = {
    MathDelimiter.FENCE: "```",
    MathDelimiter.DOUBLE_DOLLAR: "$$",
    MathDelimiter.BRACKET: "\\]",
    MathDelimiter.PAREN: "\\)",
    MathDelimiter.DOLLAR: "$",
}
_INLINE_DELIMITERS = frozenset({MathDelimiter.DOLLAR, MathDelimiter.PAREN})


class PlainText(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["plain_text"] = "plain_text"
    text: str

    def to_source(self) -> str:
        return self.text


class LineBreak(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["line_break"] = "line_break"

    def to_source(self) -> str:
        return "\n"


class InlineMath(BaseModel):
    """Math rendered within a line of text."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["inline_math"] = "inline_math"
    expression: str
    delimiter: MathDelimiter = MathDelimiter.DOLLAR

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: MathDelimiter) -> MathDelimiter:
        if v not in _INLINE_DELIMITERS:
            raise ValueError(f"{v.value!r} is not an inline math delimiter")
        return v

    @property
    def display_mode(self) -> bool:
        return False

    def to_source(self) -> str:
        return f"{self.delimiter.value}{self.expression}{self.delimiter.closer}"


class DisplayMath(BaseModel):
    """Math rendered on its own block."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["display_math"] = "display_math"
    expression: str
    delimiter: MathDelimiter = MathDelimiter.DOUBLE_DOLLAR

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: MathDelimiter) -> MathDelimiter:
        if v in _INLINE_DELIMITERS:
            raise ValueError(f"{v.value!r} is not a display math delimiter")
        return v

    @property
    def display_mode(self) -> bool:
        return True

    def to_source(self) -> str:
        return f"{self.delimiter.value}{self.expression}{self.delimiter.closer}"


Segment = Annotated[
    PlainText | LineBreak | InlineMath | DisplayMath,
    Field(discriminator="kind"),
]
MathSegment = InlineMath | DisplayMath

# (pattern, segment type, delimiter) in precedence order
_GRAMMARS: list[tuple[re.Pattern[str], type[MathSegment], MathDelimiter]] = [
    (re.compile(r"```latex(.*?)```", re.DOTALL), DisplayMath, MathDelimiter.FENCE),
    (re.compile(r"\$\$(.+?)\$\$", re.DOTALL), DisplayMath, MathDelimiter.DOUBLE_DOLLAR),
    (re.compile(r"\\\[(.+?)\\\]", re.DOTALL), DisplayMath, MathDelimiter.BRACKET),
    (re.compile(r"\\\((.+?)\\\)", re.DOTALL), InlineMath, MathDelimiter.PAREN),
    # Opener: unescaped, followed by non-space. Closer: preceded by non-space,
    # not followed by a digit. So "$5 and $10" is not math.
    (
        re.compile(r"(?<!\\)\$(?![\s$])([^$\n]*?[^\s$\\])\$(?!\d)"),
        InlineMath,
        MathDelimiter.DOLLAR,
    ),
]


def _claim(
    pieces: Iterable[str | MathSegment],
    pattern: re.Pattern[str],
    segment_type: type[MathSegment],
    delimiter: MathDelimiter,
) -> Iterator[str | MathSegment]:
    for piece in pieces:
        if not isinstance(piece, str):
            yield piece
            continue

        position = 0
        for match in pattern.finditer(piece):
            if match.start() > position:
                yield piece[position : match.start()]
            yield segment_type(expression=match.group(1), delimiter=delimiter)
            position = match.end()
        if position < len(piece):
            yield piece[position:]


def _split_lines(text: str) -> Iterator[PlainText | LineBreak]:
    lines = text.split("\n")
    for index, line in enumerate(lines):
        if index:
            yield LineBreak()
        if line:
            yield PlainText(text=line)


def segment_markup(text: str) -> list[Segment]:
    """Parse message text into an ordered list of segments.

    Never raises on malformed markup; unmatched delimiters are kept as
    plain text.

    Args:
        text: Raw message content.

    Returns:
        Segments in source order. Adjacent plain text is merged.
    """
    pieces: list[str | MathSegment] = [text]
    for pattern, segment_type, delimiter in _GRAMMARS:
        pieces = list(_claim(pieces, pattern, segment_type, delimiter))

    segments: list[Segment] = []
    for piece in pieces:
        if isinstance(piece, str):
            for segment in _split_lines(piece):
                if (
                    isinstance(segment, PlainText)
                    and segments
                    and isinstance(segments[-1], PlainText)
                ):
                    segments[-1] = PlainText(text=segments[-1].text + segment.text)
                else:
                    segments.append(segment)
        else:
            segments.append(piece)
    return segments


def join_segments(segments: Iterable[Segment]) -> str:
    """Rebuild the source text from segments."""
    return "".join(segment.to_source() for segment in segments)
