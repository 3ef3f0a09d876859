"""ASCII guitar tab parsing and encoding.

This module provides the parser that turns pasted tab text into timed
chord events, and the encoder and editor grid that write tabs back out in
the fixed-width form.
"""

from tab_piano.tab.encoder import encode, normalize, placements_from_result
from tab_piano.tab.grid import TabGrid
from tab_piano.tab.models import (
    Encoding,
    Layout,
    ParsedNote,
    ParseResult,
    Placement,
    TabEvent,
)
from tab_piano.tab.parser import parse

__all__ = [
    "Encoding",
    "Layout",
    "ParseResult",
    "ParsedNote",
    "Placement",
    "TabEvent",
    "TabGrid",
    "encode",
    "normalize",
    "parse",
    "placements_from_result",
]
