"""ASCII guitar tab parser.

This module provides the main parse() function that turns pasted tab text
into one chord event per timeline step. Two encodings are understood:

- fixed-width, where every step is exactly two characters (``--``, ``d-``
  or ``dd``), which is what the editor writes;
- legacy variable-width, where each character column is a step and
  multi-digit frets are read greedily.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from tab_piano.pitch import MAX_FRET, STRING_NAMES
from tab_piano.tab.lines import (
    classify_layout,
    normalize_lines,
    select_tab_lines,
    split_lines,
)
from tab_piano.tab.models import Encoding, ParsedNote, ParseResult, TabEvent

logger = logging.getLogger(__name__)

# One fixed-width cell: empty, single digit + filler, or two digits
FIXED_CELL_RE = re.compile(r"^(?:--|[0-9]-|[0-9]{2})$")

CELL_WIDTH = 2

# Longest fret token read by the legacy decoder
MAX_LEGACY_DIGITS = 3

DIGITS = frozenset("0123456789")


def is_fixed_width(line: str) -> bool:
    """Check whether a padded body is a sequence of fixed-width cells.

    Examples
    --------
    >>> is_fixed_width("--0-12--")
    True
    >>> is_fixed_width("--0--2--")
    False
    """
    if len(line) % CELL_WIDTH:
        return False
    return all(
        FIXED_CELL_RE.match(line[i : i + CELL_WIDTH])
        for i in range(0, len(line), CELL_WIDTH)
    )


def detect_encoding(padded: Sequence[str]) -> Encoding:
    """Choose the decoder for six equal-length bodies."""
    if all(is_fixed_width(line) for line in padded):
        return "fixed"
    return "legacy"


def decode_cell(cell: str) -> int | None:
    """Decode one fixed-width cell into a fret, or None for an empty cell.

    Examples
    --------
    >>> decode_cell("7-")
    7
    >>> decode_cell("12")
    12
    >>> decode_cell("--") is None
    True
    """
    if cell[0] in DIGITS and cell[1] == "-":
        return int(cell[0])
    if cell[0] in DIGITS and cell[1] in DIGITS:
        return int(cell)
    return None


def decode_fixed_width(padded: Sequence[str]) -> ParseResult:
    """Decode fixed-width bodies, two characters per step.

    Frets above 24 are skipped, as are notes outside the piano range.
    """
    max_len = len(padded[0]) if padded else 0
    steps = max_len // CELL_WIDTH

    events: list[TabEvent] = []
    for step in range(steps):
        offset = step * CELL_WIDTH
        notes: list[ParsedNote] = []
        for row, line in enumerate(padded):
            fret = decode_cell(line[offset : offset + CELL_WIDTH])
            if fret is None or fret > MAX_FRET:
                continue
            note = ParsedNote.from_fret(STRING_NAMES[row], fret)
            if note is not None:
                notes.append(note)
        events.append(TabEvent(step=step, notes=tuple(notes)))

    return ParseResult(events=tuple(events), steps=steps, encoding="fixed")


def read_fret_token(line: str, start: int) -> tuple[int, int]:
    """Read a run of up to three digits starting at ``start``.

    Parameters
    ----------
    line : str
        The padded body of one string.
    start : int
        Column of the first digit.

    Returns
    -------
    tuple[int, int]
        The fret (clamped to 24) and the number of characters consumed.

    Examples
    --------
    >>> read_fret_token("--12--", 2)
    (12, 2)
    >>> read_fret_token("-199-", 1)
    (24, 3)
    """
    end = start + 1
    limit = min(len(line), start + MAX_LEGACY_DIGITS)
    while end < limit and line[end] in DIGITS:
        end += 1
    fret = min(int(line[start:end]), MAX_FRET)
    return fret, end - start


def decode_variable_width(padded: Sequence[str]) -> ParseResult:
    """Decode legacy variable-width bodies, one step per character column.

    Each row keeps a cursor past the last digit it consumed, so the second
    digit of ``12`` is not read again as a new note.
    """
    max_len = len(padded[0]) if padded else 0
    next_free = [0] * len(padded)

    events: list[TabEvent] = []
    for col in range(max_len):
        notes: list[ParsedNote] = []
        for row, line in enumerate(padded):
            if col < next_free[row] or line[col] not in DIGITS:
                continue
            fret, consumed = read_fret_token(line, col)
            next_free[row] = col + consumed
            note = ParsedNote.from_fret(STRING_NAMES[row], fret)
            if note is not None:
                notes.append(note)
        events.append(TabEvent(step=col, notes=tuple(notes)))

    return ParseResult(events=tuple(events), steps=max_len, encoding="legacy")


def parse(text: str) -> ParseResult:
    """Parse ASCII guitar tab text into timed chord events.

    This is the main entry point for tab parsing.

    Parameters
    ----------
    text : str
        Raw text containing a six-string tab, possibly surrounded by
        titles, chord names or other noise.

    Returns
    -------
    ParseResult
        One event per step with the notes mapped onto the piano.

    Raises
    ------
    InsufficientLinesError
        If six string lines cannot be found.

    Examples
    --------
    >>> text = '''e|--------|
    ... B|--------|
    ... G|--------|
    ... D|--------|
    ... A|0-2-3-5-|
    ... E|--------|'''
    >>> result = parse(text)
    >>> result.steps
    4
    >>> [n.piano_key for e in result.events for n in e.notes]
    [25, 27, 28, 30]
    """
    tab_lines = select_tab_lines(split_lines(text))
    layout = classify_layout(tab_lines[0])
    padded = normalize_lines(tab_lines, layout)
    encoding = detect_encoding(padded)

    if encoding == "fixed":
        result = decode_fixed_width(padded)
    else:
        result = decode_variable_width(padded)

    logger.debug(
        "Parsed %s/%s tab: %d steps, %d with notes",
        layout,
        encoding,
        result.steps,
        sum(1 for event in result.events if event.notes),
    )
    return result
