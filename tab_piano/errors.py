"""Exception types raised by tab-piano."""


class TabPianoError(Exception):
    """Base class for all tab-piano errors."""


class InsufficientLinesError(TabPianoError, ValueError):
    """Raised when fewer than six usable string lines are found in a tab."""


class UnknownStringError(TabPianoError, KeyError):
    """Raised when a string identifier or row index has no open-string pitch."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead
        return str(self.args[0]) if self.args else ""
