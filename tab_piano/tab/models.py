"""Data models for parsed guitar tabs.

This module defines the note, event and result structures produced by the
tab parser, plus the editor-side placement consumed by the encoder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from tab_piano.pitch import (
    in_piano_range,
    midi_to_note_name,
    midi_to_piano_key,
    open_midi,
)

# Fixed-width (2 chars per step) or legacy variable-width tab text
Encoding = Literal["fixed", "legacy"]

# Bar-delimited segments per string, or a single body per string
Layout = Literal["sectioned", "flat"]


@dataclass(frozen=True)
class ParsedNote:
    """A single fretted note mapped onto the piano.

    Parameters
    ----------
    string : str
        String identifier (``e, B, G, D, A, E``).
    fret : int
        Fret number (0-24), 0 is the open string.
    midi : int
        MIDI pitch, ``open_midi(string) + fret``.
    piano_key : int
        Piano key number (1-88), ``midi - 20``.
    note_name : str
        Note name with octave (e.g., "C#4").

    Examples
    --------
    >>> ParsedNote.from_fret("A", 2)
    ParsedNote(string='A', fret=2, midi=47, piano_key=27, note_name='B2')
    """

    string: str
    fret: int
    midi: int
    piano_key: int
    note_name: str

    @classmethod
    def from_fret(cls, string: str, fret: int) -> ParsedNote | None:
        """Build a note from a string and fret.

        Returns None when the resulting pitch is outside the piano range.
        """
        midi = open_midi(string) + fret
        if not in_piano_range(midi):
            return None
        return cls(
            string=string,
            fret=fret,
            midi=midi,
            piano_key=midi_to_piano_key(midi),
            note_name=midi_to_note_name(midi),
        )


@dataclass(frozen=True)
class TabEvent:
    """All notes sounding at one timeline step.

    Parameters
    ----------
    step : int
        Timeline column index (0-based).
    notes : tuple[ParsedNote, ...]
        Notes at this step, in string row order (e, B, G, D, A, E).
        Empty for rests.
    """

    step: int
    notes: tuple[ParsedNote, ...] = ()

    @property
    def midis(self) -> tuple[int, ...]:
        return tuple(note.midi for note in self.notes)

    @property
    def is_empty(self) -> bool:
        return not self.notes


@dataclass(frozen=True)
class ParseResult:
    """Complete parsed tab.

    Parameters
    ----------
    events : tuple[TabEvent, ...]
        One event per step, in ascending step order.
    steps : int
        Total number of logical steps.
    encoding : Encoding
        Which decoder produced the events.
    """

    events: tuple[TabEvent, ...]
    steps: int
    encoding: Encoding = "fixed"

    def event_at(self, step: int) -> TabEvent | None:
        """Return the event at a step, or None if the step is out of range."""
        if 0 <= step < len(self.events):
            return self.events[step]
        return None


@dataclass(frozen=True)
class Placement:
    """A fret placed on the editor grid.

    Parameters
    ----------
    string : int
        String row index, 0 (high e) to 5 (low E).
    step : int
        Timeline step index.
    fret : int
        Fret number (0-24).
    """

    string: int
    step: int
    fret: int
