"""Pitch model for standard-tuned guitar strings and the 88-key piano.

This module maps guitar strings to their open MIDI pitches and converts
MIDI numbers to piano key numbers and note names.
"""

from __future__ import annotations

from types import MappingProxyType

from tab_piano.errors import UnknownStringError

# String identifiers in row order, high to low (standard tuning)
STRING_NAMES: tuple[str, ...] = ("e", "B", "G", "D", "A", "E")

# Open string MIDI pitches: e4 B3 G3 D3 A2 E2
STRING_OPEN_MIDI = MappingProxyType(
    {
        "e": 64,
        "B": 59,
        "G": 55,
        "D": 50,
        "A": 45,
        "E": 40,
    }
)

# Pitch class names (0-11, where C=0)
NOTE_NAMES: tuple[str, ...] = (
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
)

BLACK_KEY_PCS: frozenset[int] = frozenset({1, 3, 6, 8, 10})

A0_MIDI = 21  # lowest piano key
C8_MIDI = 108  # highest piano key
MAX_FRET = 24


def open_midi(string_id: str) -> int:
    """Return the open-string MIDI pitch of a string.

    Parameters
    ----------
    string_id : str
        One of ``e, B, G, D, A, E`` (case-sensitive).

    Returns
    -------
    int
        The MIDI number of the unfretted string.

    Raises
    ------
    UnknownStringError
        If the identifier is not one of the six strings.

    Examples
    --------
    >>> open_midi("e")
    64
    >>> open_midi("E")
    40
    """
    if string_id in STRING_OPEN_MIDI:
        return STRING_OPEN_MIDI[string_id]
    msg = f"Unknown string: {string_id!r}"
    raise UnknownStringError(msg)


def string_name(row: int) -> str:
    """Return the string identifier for a row index (0 = high e).

    Raises
    ------
    UnknownStringError
        If the row is outside 0-5.
    """
    if 0 <= row < len(STRING_NAMES):
        return STRING_NAMES[row]
    msg = f"No string at row {row}"
    raise UnknownStringError(msg)


def midi_to_piano_key(midi: int) -> int:
    """Convert a MIDI number to a piano key number (A0 = 1).

    No bounds checking is done; see :func:`in_piano_range`.

    Examples
    --------
    >>> midi_to_piano_key(21)
    1
    >>> midi_to_piano_key(108)
    88
    """
    return midi - 20


def pitch_class_name(midi: int) -> str:
    """Return the sharp pitch class name of a MIDI number (e.g. ``"C#"``)."""
    return NOTE_NAMES[midi % 12]


def midi_to_note_name(midi: int) -> str:
    """Convert a MIDI number to a note name with octave.

    Uses the MIDI convention where 60 is C4.

    Examples
    --------
    >>> midi_to_note_name(60)
    'C4'
    >>> midi_to_note_name(52)
    'E3'
    """
    octave = midi // 12 - 1
    return f"{pitch_class_name(midi)}{octave}"


def is_black_key(midi: int) -> bool:
    """Check whether a MIDI pitch falls on a black piano key.

    Examples
    --------
    >>> is_black_key(61)
    True
    >>> is_black_key(60)
    False
    """
    return midi % 12 in BLACK_KEY_PCS


def in_piano_range(midi: int) -> bool:
    """Check whether a MIDI pitch is on the 88-key piano (A0 to C8)."""
    return A0_MIDI <= midi <= C8_MIDI
