"""Playback cursor helpers.

Steps are played back at a uniform rate; these helpers do the step and
timing arithmetic for schedulers and highlighters without keeping any
clock themselves.
"""

from __future__ import annotations

from collections.abc import Iterator

from tab_piano.tab.models import ParsedNote, ParseResult, TabEvent

MS_PER_MINUTE = 60_000

# Each step is an eighth note
DEFAULT_STEPS_PER_BEAT = 2

# Fraction of a step a note sounds for
DEFAULT_GATE = 0.9


def ms_per_step(bpm: float, steps_per_beat: int = DEFAULT_STEPS_PER_BEAT) -> float:
    """Return the duration of one step in milliseconds.

    Examples
    --------
    >>> ms_per_step(80)
    375.0
    """
    if bpm <= 0:
        msg = f"BPM must be positive, got {bpm}"
        raise ValueError(msg)
    return MS_PER_MINUTE / bpm / steps_per_beat


def note_duration(
    bpm: float,
    gate: float = DEFAULT_GATE,
    steps_per_beat: int = DEFAULT_STEPS_PER_BEAT,
) -> float:
    """Return how long a note sounds, in seconds.

    Examples
    --------
    >>> note_duration(120)
    0.225
    """
    return ms_per_step(bpm, steps_per_beat) / 1000 * gate


def active_notes(result: ParseResult, cursor: int) -> tuple[ParsedNote, ...]:
    """Return the notes sounding at the cursor, empty if out of range."""
    event = result.event_at(cursor)
    return event.notes if event is not None else ()


def note_steps(result: ParseResult) -> list[int]:
    """Return the steps that have at least one note, ascending."""
    return [event.step for event in result.events if event.notes]


def next_note_step(result: ParseResult, cursor: int) -> int | None:
    """Return the first step after the cursor with notes, or None."""
    for step in note_steps(result):
        if step > cursor:
            return step
    return None


def previous_note_step(result: ParseResult, cursor: int) -> int | None:
    """Return the last step before the cursor with notes.

    Wraps around to the last note step when nothing precedes the cursor,
    and returns None when the tab has no notes at all.
    """
    steps = note_steps(result)
    if not steps:
        return None
    earlier = [step for step in steps if step < cursor]
    return earlier[-1] if earlier else steps[-1]


def iter_playback(result: ParseResult, start: int = 0) -> Iterator[TabEvent]:
    """Yield events from ``start`` to the end, rests included."""
    yield from result.events[max(start, 0) :]
