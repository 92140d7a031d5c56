"""
Events emitted by the move tracker.

Events are delivered in the order they happen, both through
MoveTracker.poll_events() and to subscribed callbacks.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from chess_sensor.board.representation import PieceCode


@dataclass(frozen=True)
class MoveDetected:
    """A move was resolved and the baseline advanced."""

    move: str
    """Coordinate move, e.g. 'e2e4'"""

    from_square: int
    to_square: int
    piece: PieceCode
    captured: Optional[PieceCode] = None


@dataclass(frozen=True)
class HighlightSquares:
    """
    Squares to light on the board.

    An empty tuple means all lights off (sent when a lift is first seen),
    otherwise the from and to squares of the resolved move.
    """

    squares: Tuple[str, ...] = ()


Event = Union[MoveDetected, HighlightSquares]
