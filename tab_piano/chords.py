"""Chord names for tab events.

Uses pychord to name the chord formed by the notes stacked at a step.
"""

from __future__ import annotations

from pychord import find_chords_from_notes

from tab_piano.pitch import pitch_class_name
from tab_piano.tab.models import TabEvent


def event_pitch_classes(event: TabEvent) -> list[str]:
    """Return the event's distinct pitch classes as a closed voicing.

    The lowest sounding note comes first, followed by the other pitch
    classes in ascending interval above it.

    Examples
    --------
    >>> from tab_piano.tab.models import ParsedNote
    >>> frets = [("e", 0), ("B", 1), ("G", 2), ("D", 2), ("A", 0)]
    >>> notes = tuple(ParsedNote.from_fret(s, f) for s, f in frets)
    >>> event_pitch_classes(TabEvent(step=0, notes=notes))
    ['A', 'C', 'E']
    """
    if not event.notes:
        return []
    bass = min(note.midi for note in event.notes)
    intervals = sorted({(note.midi - bass) % 12 for note in event.notes})
    return [pitch_class_name(bass + interval) for interval in intervals]


def chord_names(event: TabEvent) -> list[str]:
    """Name the chords matching an event's notes.

    The lowest note is taken as the bass, so inversions come back as slash
    chords. Events with fewer than two distinct pitch classes have no
    chord.

    Parameters
    ----------
    event : TabEvent
        The event to name.

    Returns
    -------
    list[str]
        Chord names in pychord notation (e.g., "Am7", "C/E"), root
        position first.
    """
    pitch_classes = event_pitch_classes(event)
    if len(pitch_classes) < 2:
        return []
    return [chord.chord for chord in find_chords_from_notes(pitch_classes)]


def identify_chord(event: TabEvent) -> str | None:
    """Return the best chord name for an event, or None."""
    names = chord_names(event)
    return names[0] if names else None
