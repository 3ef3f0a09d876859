"""Editable tab grid.

This module holds the working state of the visual tab editor: a sparse
grid of frets keyed by string and step, edited cell by cell and written
back out through :func:`tab_piano.tab.encoder.encode`.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from tab_piano.errors import InsufficientLinesError
from tab_piano.pitch import MAX_FRET, STRING_NAMES
from tab_piano.tab.encoder import encode
from tab_piano.tab.models import Placement

if TYPE_CHECKING:
    from tab_piano.config import Settings

DEFAULT_STEPS = 24
MIN_STEPS = 8
MAX_STEPS = 124

# Editor lines start with a bare string label and a bar
STRING_LINE_RE = re.compile(r"^(e|B|G|D|A|E)\|")

DIGITS = frozenset("0123456789")


def read_fixed_width_body(body: str) -> tuple[list[tuple[int, int]], int]:
    """Walk a fixed-width body and collect its frets.

    Unrecognized characters advance by one position but still count as a
    step, so a stray character shifts later cells rather than failing.

    Parameters
    ----------
    body : str
        Text between the first and last bar of one string line.

    Returns
    -------
    tuple[list[tuple[int, int]], int]
        ``(step, fret)`` pairs with frets clamped to 24, and the number of
        steps walked.

    Examples
    --------
    >>> read_fixed_width_body("--3-12--")
    ([(1, 3), (2, 12)], 4)
    """
    notes: list[tuple[int, int]] = []
    step = 0
    i = 0
    n = len(body)

    while i < n:
        first = body[i]
        second = body[i + 1] if i + 1 < n else ""

        if first in DIGITS and second in DIGITS:
            notes.append((step, min(int(first + second), MAX_FRET)))
            i += 2
        elif first in DIGITS and second == "-":
            notes.append((step, int(first)))
            i += 2
        elif first == "-" and second == "-":
            i += 2
        else:
            i += 1
        step += 1

    return notes, step


class TabGrid:
    """Sparse fret grid edited one cell at a time.

    Parameters
    ----------
    total_steps : int, optional
        Number of steps, clamped to ``[min_steps, max_steps]``. Default 24.
    min_steps : int, optional
        Smallest allowed grid. Default 8.
    max_steps : int, optional
        Largest allowed grid. Default 124.

    Examples
    --------
    >>> grid = TabGrid(total_steps=8)
    >>> grid.increase(4, 0)
    >>> grid.increase(4, 0)
    >>> grid.get(4, 0)
    1
    >>> grid.to_text().splitlines()[4]
    'A|1---------------|'
    """

    def __init__(
        self,
        total_steps: int = DEFAULT_STEPS,
        *,
        min_steps: int = MIN_STEPS,
        max_steps: int = MAX_STEPS,
    ) -> None:
        if min_steps > max_steps:
            msg = f"min_steps ({min_steps}) exceeds max_steps ({max_steps})"
            raise ValueError(msg)
        self.min_steps = min_steps
        self.max_steps = max_steps
        self.total_steps = self.clamp_steps(total_steps)
        self._cells: dict[tuple[int, int], int] = {}

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        default_steps: int = DEFAULT_STEPS,
        min_steps: int = MIN_STEPS,
        max_steps: int = MAX_STEPS,
    ) -> TabGrid:
        """Load a grid from fixed-width tab text.

        Only lines starting with a string label and ``|`` are read; the
        first six are mapped to strings top to bottom. The grid is sized to
        the longest line, but never smaller than ``default_steps``.

        Raises
        ------
        InsufficientLinesError
            If fewer than six labelled string lines are present.
        """
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        lines = [line for line in text.split("\n") if STRING_LINE_RE.match(line)]
        if len(lines) < len(STRING_NAMES):
            msg = f"Need 6 labelled string lines (e|, B|, ...), found {len(lines)}"
            raise InsufficientLinesError(msg)

        grid = cls(default_steps, min_steps=min_steps, max_steps=max_steps)
        inferred = 0
        for row, line in enumerate(lines[: len(STRING_NAMES)]):
            parts = line.split("|")
            body = "|".join(parts[1:-1])
            notes, steps = read_fixed_width_body(body)
            inferred = max(inferred, steps)
            for step, fret in notes:
                grid._cells[(row, step)] = fret

        grid.resize(max(default_steps, inferred))
        return grid

    @classmethod
    def from_settings(cls, settings: Settings, text: str | None = None) -> TabGrid:
        """Create a grid sized by the editor settings.

        Parameters
        ----------
        settings : Settings
            Supplies ``default_steps``, ``min_steps`` and ``max_steps``.
        text : str | None, optional
            Fixed-width tab text to load. An empty grid is created when
            omitted.
        """
        bounds = {"min_steps": settings.min_steps, "max_steps": settings.max_steps}
        if text is None:
            return cls(settings.default_steps, **bounds)
        return cls.from_text(text, default_steps=settings.default_steps, **bounds)

    def clamp_steps(self, total_steps: int) -> int:
        return min(self.max_steps, max(self.min_steps, total_steps))

    def _check_cell(self, string: int, step: int) -> None:
        if not 0 <= string < len(STRING_NAMES):
            msg = f"String index out of range: {string}"
            raise ValueError(msg)
        if not 0 <= step < self.total_steps:
            msg = f"Step out of range: {step} (grid has {self.total_steps} steps)"
            raise ValueError(msg)

    def get(self, string: int, step: int) -> int | None:
        """Return the fret at a cell, or None if the cell is empty."""
        return self._cells.get((string, step))

    def set(self, string: int, step: int, fret: int) -> None:
        """Place a fret, replacing whatever the cell held."""
        self._check_cell(string, step)
        if not 0 <= fret <= MAX_FRET:
            msg = f"Fret out of range: {fret} (expected 0-{MAX_FRET})"
            raise ValueError(msg)
        self._cells[(string, step)] = fret

    def remove(self, string: int, step: int) -> None:
        self._cells.pop((string, step), None)

    def increase(self, string: int, step: int) -> None:
        """Add an open-string note to an empty cell, else raise its fret by one.

        Frets stop at 24.
        """
        self._check_cell(string, step)
        fret = self._cells.get((string, step))
        if fret is None:
            self._cells[(string, step)] = 0
        elif fret < MAX_FRET:
            self._cells[(string, step)] = fret + 1

    def decrease(self, string: int, step: int) -> None:
        """Lower a cell's fret by one, removing the note below fret 0."""
        self._check_cell(string, step)
        fret = self._cells.get((string, step))
        if fret is None:
            return
        if fret > 0:
            self._cells[(string, step)] = fret - 1
        else:
            del self._cells[(string, step)]

    def clear(self) -> None:
        self._cells.clear()

    def resize(self, total_steps: int) -> None:
        """Change the grid length, dropping notes past the new end."""
        self.total_steps = self.clamp_steps(total_steps)
        self._cells = {
            key: fret for key, fret in self._cells.items() if key[1] < self.total_steps
        }

    @property
    def placements(self) -> tuple[Placement, ...]:
        """All placed frets, ordered by step then string."""
        return tuple(
            Placement(string=string, step=step, fret=fret)
            for (string, step), fret in sorted(
                self._cells.items(), key=lambda item: (item[0][1], item[0][0])
            )
        )

    def __len__(self) -> int:
        return len(self._cells)

    def to_text(self) -> str:
        """Encode the grid as fixed-width tab text."""
        return encode(self.placements, self.total_steps)
