"""Fixed-width tab encoder.

This module serializes editor placements into the canonical fixed-width
tab text, where each step occupies exactly two characters:

- ``--`` for an empty cell
- ``d-`` for frets 0-9
- ``dd`` for frets 10-24
"""

from __future__ import annotations

from collections.abc import Iterable

from tab_piano.pitch import STRING_NAMES
from tab_piano.tab.models import ParseResult, Placement
from tab_piano.tab.parser import parse

EMPTY_CELL = "--"


def encode_cell(fret: int | None) -> str:
    """Render one step of one string.

    Examples
    --------
    >>> encode_cell(None)
    '--'
    >>> encode_cell(3)
    '3-'
    >>> encode_cell(12)
    '12'
    """
    if fret is None:
        return EMPTY_CELL
    if fret < 10:
        return f"{fret}-"
    return str(fret)


def encode(
    placements: Iterable[Placement],
    total_steps: int,
    string_count: int = 6,
) -> str:
    """Encode placements as fixed-width tab text.

    Parameters
    ----------
    placements : Iterable[Placement]
        Frets on the grid. A later placement at the same string and step
        replaces an earlier one.
    total_steps : int
        Number of steps per line.
    string_count : int, optional
        Number of strings to write, top to bottom. Default is 6. Values
        below 1 write no lines.

    Returns
    -------
    str
        One ``name|...|`` line per string, joined with newlines.

    Examples
    --------
    >>> print(encode([Placement(string=4, step=1, fret=12)], 3))
    e|------|
    B|------|
    G|------|
    D|------|
    A|--12--|
    E|------|
    """
    names = STRING_NAMES[: max(string_count, 0)]
    cells: dict[tuple[int, int], int] = {}
    for placement in placements:
        if 0 <= placement.step < total_steps and 0 <= placement.string < len(names):
            cells[(placement.string, placement.step)] = placement.fret

    lines = []
    for row, name in enumerate(names):
        body = "".join(
            encode_cell(cells.get((row, step))) for step in range(total_steps)
        )
        lines.append(f"{name}|{body}|")
    return "\n".join(lines)


def placements_from_result(result: ParseResult) -> tuple[Placement, ...]:
    """List the placements of a parsed tab, ordered by step then string."""
    rows = {name: row for row, name in enumerate(STRING_NAMES)}
    return tuple(
        Placement(string=rows[note.string], step=event.step, fret=note.fret)
        for event in result.events
        for note in event.notes
    )


def normalize(text: str) -> str:
    """Rewrite any accepted tab text in the canonical fixed-width form.

    Notes dropped by the parser (outside the piano range) are not written.

    Raises
    ------
    InsufficientLinesError
        If six string lines cannot be found.
    """
    result = parse(text)
    return encode(placements_from_result(result), result.steps)
