"""Guitar tab to piano key conversion.

This library parses ASCII guitar tablature into timed chord events mapped
onto the 88-key piano, and writes edited tabs back out in a fixed-width
form that keeps multi-digit frets aligned.

Examples
--------
>>> from tab_piano import parse, encode, Placement

>>> result = parse('''e|--------|
... B|--------|
... G|--------|
... D|--------|
... A|--------|
... E|----12--|''')
>>> note = result.events[2].notes[0]
>>> note.midi, note.piano_key, note.note_name
(52, 32, 'E3')

>>> print(encode([Placement(string=0, step=0, fret=3)], 2))
e|3---|
B|----|
G|----|
D|----|
A|----|
E|----|
"""

from tab_piano.errors import InsufficientLinesError, TabPianoError, UnknownStringError
from tab_piano.pitch import (
    STRING_NAMES,
    STRING_OPEN_MIDI,
    is_black_key,
    midi_to_note_name,
    midi_to_piano_key,
    open_midi,
)
from tab_piano.tab import (
    ParsedNote,
    ParseResult,
    Placement,
    TabEvent,
    TabGrid,
    encode,
    normalize,
    parse,
    placements_from_result,
)

__all__ = [
    "STRING_NAMES",
    "STRING_OPEN_MIDI",
    "InsufficientLinesError",
    "ParseResult",
    "ParsedNote",
    "Placement",
    "TabEvent",
    "TabGrid",
    "TabPianoError",
    "UnknownStringError",
    "encode",
    "is_black_key",
    "midi_to_note_name",
    "midi_to_piano_key",
    "normalize",
    "open_midi",
    "parse",
    "placements_from_result",
]
