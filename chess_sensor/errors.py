"""
Exceptions raised by the move tracker.

Only malformed input is an error. Ambiguous or unfinished piece movement on
the board is a tracker state, never an exception.
"""


class ChessSensorError(Exception):
    """Base class for all chess_sensor errors."""


class InvalidFrame(ChessSensorError, ValueError):
    """A snapshot frame has the wrong length or holds an unknown piece code."""


class InvalidSquareName(ChessSensorError, ValueError):
    """A square name is not a file letter a-h followed by a rank digit 1-8."""
