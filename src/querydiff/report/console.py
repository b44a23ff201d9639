"""
Console rendering.

render_console() turns a DiffResult into lines of styled segments without
touching the terminal; to_ansi() turns those lines into text. Entries are
ordered by ascending row number:

      row 3: 3	Bob	bob@old.example	    matched pair, differing cells in yellow
    - row 5: 5	Eve	null	            left only, red
    + row 6: 6	Mallory	m@example	    right only, green
"""

from dataclasses import dataclass
from enum import Enum

from ..result import DiffResult
from ..rowset import Row, Schema


class Style(str, Enum):
    PLAIN = "plain"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"


ANSI_CODES = {
    Style.RED: "\033[31m",
    Style.GREEN: "\033[32m",
    Style.YELLOW: "\033[33m",
}
ANSI_RESET = "\033[0m"


@dataclass(frozen=True)
class Segment:
    text: str
    style: Style = Style.PLAIN


Line = tuple[Segment, ...]

# Within one row number: matched left row, matched right row, left only, right only
_MISMATCH_LEFT, _MISMATCH_RIGHT, _MISSING_LEFT, _MISSING_RIGHT = range(4)


def _row_segments(prefix: str, row: Row, style: Style, marked: frozenset[int] = frozenset()) -> Line:
    segments = [Segment(prefix, style)]
    for index, cell in enumerate(row):
        cell_style = Style.YELLOW if index in marked else style
        segments.append(Segment(f"{cell}\t", cell_style))
    return tuple(segments)


def _header_segments(name: str, schema: Schema) -> Line:
    return (Segment(f"  {name}: "),) + tuple(Segment(f"{column}\t") for column in schema)


def render_console(
    result: DiffResult,
    left_schema: Schema | None = None,
    right_schema: Schema | None = None,
) -> list[Line]:
    """
    Render the differences of a result as styled lines.

    When schemas are given and the result has differences, a header line of
    column names comes first (both sides when their names differ). Equal
    results render as no lines.
    """
    entries = []
    for pair in result.mismatched:
        entries.append((
            pair.left_row_number,
            _MISMATCH_LEFT,
            _row_segments(f"  row {pair.left_row_number}: ", pair.left_row, Style.PLAIN, pair.columns),
        ))
        entries.append((
            pair.right_row_number,
            _MISMATCH_RIGHT,
            _row_segments(f"  row {pair.right_row_number}: ", pair.right_row, Style.PLAIN, pair.columns),
        ))
    for missing in result.missing_left:
        entries.append((
            missing.row_number,
            _MISSING_LEFT,
            _row_segments(f"- row {missing.row_number}: ", missing.row, Style.RED),
        ))
    for missing in result.missing_right:
        entries.append((
            missing.row_number,
            _MISSING_RIGHT,
            _row_segments(f"+ row {missing.row_number}: ", missing.row, Style.GREEN),
        ))

    entries.sort(key=lambda entry: (entry[0], entry[1]))
    lines = [line for _, _, line in entries]

    if lines and left_schema is not None:
        header = [_header_segments("columns", left_schema)]
        if right_schema is not None and right_schema.columns != left_schema.columns:
            header = [
                _header_segments("left", left_schema),
                _header_segments("right", right_schema),
            ]
        lines = header + lines
    return lines


def to_ansi(lines: list[Line], use_colors: bool = True) -> str:
    """Join styled lines into terminal text, with or without ANSI colors."""
    rendered = []
    for line in lines:
        parts = []
        for segment in line:
            if use_colors and segment.style is not Style.PLAIN:
                parts.append(f"{ANSI_CODES[segment.style]}{segment.text}{ANSI_RESET}")
            else:
                parts.append(segment.text)
        rendered.append("".join(parts))
    return "\n".join(rendered)
