"""Line extraction and normalization for ASCII tabs.

This module locates the six string lines inside arbitrary pasted text and
flattens them into equal-length per-string bodies, which is what both
decoders in :mod:`tab_piano.tab.parser` operate on.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from tab_piano.errors import InsufficientLinesError
from tab_piano.tab.models import Layout

logger = logging.getLogger(__name__)

STRING_COUNT = 6

# Characters allowed in a tab body: dashes, digits, bars, whitespace and
# technique marks (hammer-on, pull-off, slides, vibrato, ghost, muted, harmonics)
TAB_BODY_RE = re.compile(r"^[-0-9\s|hHpP/\\~()*xX<>]+$")

# Window anchor: the top two strings in standard tuning
HIGH_E_RE = re.compile(r"^\s*[eE]")
B_STRING_RE = re.compile(r"^\s*B")

WHITESPACE_RE = re.compile(r"\s+")

PAD_CHAR = "-"


def split_lines(text: str) -> list[str]:
    """Split text into non-blank lines.

    Normalizes line endings and drops whitespace-only lines.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return [line for line in text.split("\n") if line.strip()]


def line_body(line: str) -> str:
    """Return the text after the first ``|``, or the whole line if none.

    Examples
    --------
    >>> line_body("e|--0--|")
    '--0--|'
    >>> line_body("--0--")
    '--0--'
    """
    idx = line.find("|")
    return line[idx + 1 :] if idx >= 0 else line


def is_candidate(line: str) -> bool:
    """Check whether a line looks like a tab string line."""
    return TAB_BODY_RE.match(line_body(line)) is not None


def extract_candidates(lines: Sequence[str]) -> list[str]:
    """Filter lines down to tab string candidates, keeping their order."""
    return [line for line in lines if is_candidate(line)]


def find_anchored_window(candidates: Sequence[str]) -> list[str] | None:
    """Find the first six consecutive candidates starting with an e and B line.

    Parameters
    ----------
    candidates : Sequence[str]
        Candidate tab lines in document order.

    Returns
    -------
    list[str] | None
        The first matching window, or None if no window is anchored.
    """
    for start in range(len(candidates) - STRING_COUNT + 1):
        window = candidates[start : start + STRING_COUNT]
        if HIGH_E_RE.match(window[0]) and B_STRING_RE.match(window[1]):
            return list(window)
    return None


def select_tab_lines(lines: Sequence[str]) -> list[str]:
    """Select the six string lines of a tab.

    Prefers the first window of six candidates anchored on an ``e``/``E``
    line followed by a ``B`` line, then the first six candidates. With
    fewer than six candidates the first six non-blank lines are used as-is.

    Parameters
    ----------
    lines : Sequence[str]
        Non-blank lines of the input, in document order.

    Returns
    -------
    list[str]
        Exactly six lines, high e first.

    Raises
    ------
    InsufficientLinesError
        If fewer than six lines are available.
    """
    candidates = extract_candidates(lines)

    if len(candidates) >= STRING_COUNT:
        window = find_anchored_window(candidates)
        if window is not None:
            return window
        logger.debug("No e/B anchored window, using first six candidates")
        return list(candidates[:STRING_COUNT])

    logger.debug("Only %d candidate lines, using raw lines", len(candidates))
    selected = list(lines[:STRING_COUNT])
    if len(selected) < STRING_COUNT:
        msg = (
            "Need 6 tab lines (e, B, G, D, A, E), found "
            f"{len(selected)}. Paste a standard ASCII guitar tab."
        )
        raise InsufficientLinesError(msg)
    return selected


def classify_layout(first_line: str) -> Layout:
    """Classify a tab as sectioned or flat from its first string line.

    Any ``|`` after the string label's bar marks the line as sectioned,
    including a lone closing bar.

    Examples
    --------
    >>> classify_layout("e|----|----|")
    'sectioned'
    >>> classify_layout("e|--------")
    'flat'
    """
    return "sectioned" if "|" in line_body(first_line) else "flat"


def flatten_sectioned(line: str) -> str:
    """Join the bar segments of a sectioned line into one body.

    Drops the string label before the first bar and any trailing blank
    segments.

    Examples
    --------
    >>> flatten_sectioned("e|--0-|-2--|")
    '--0--2--'
    """
    segments = line.split("|")[1:]
    while segments and not segments[-1].strip():
        segments.pop()
    return "".join(segments)


def flatten_flat(line: str) -> str:
    """Strip the label, all whitespace and trailing bars from a flat line.

    Examples
    --------
    >>> flatten_flat("e| --0 -- ")
    '--0--'
    """
    body = WHITESPACE_RE.sub("", line_body(line))
    return body.rstrip("|")


def normalize_lines(tab_lines: Sequence[str], layout: Layout) -> list[str]:
    """Flatten six string lines and right-pad them to equal length.

    Parameters
    ----------
    tab_lines : Sequence[str]
        The six selected string lines.
    layout : Layout
        Layout returned by :func:`classify_layout`.

    Returns
    -------
    list[str]
        Six bodies of identical length, padded with ``-``.
    """
    flatten = flatten_sectioned if layout == "sectioned" else flatten_flat
    bodies = [flatten(line) for line in tab_lines]
    max_len = max((len(body) for body in bodies), default=0)
    return [body.ljust(max_len, PAD_CHAR) for body in bodies]
