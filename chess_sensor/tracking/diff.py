"""
Difference engine between the stable baseline and the latest snapshot.
"""

from typing import List, NamedTuple, Tuple

import numpy as np

from chess_sensor.board.representation import PieceCode


class Difference(NamedTuple):
    """One square whose piece code differs between two boards."""

    square: int
    old: int
    new: int

    @property
    def is_missing(self) -> bool:
        """A piece was taken off the square."""
        return self.old != PieceCode.EMPTY and self.new == PieceCode.EMPTY

    @property
    def is_appeared(self) -> bool:
        """
        A piece was put on the square.

        Covers both an empty square being filled and an occupied square
        now holding a different piece (a capture landing on its victim).
        """
        return self.new != PieceCode.EMPTY


def find_differences(old: np.ndarray, new: np.ndarray) -> List[Difference]:
    """
    Compare two boards square by square.

    Args:
        old: Baseline board
        new: Latest board

    Returns:
        Differences in ascending square order, empty when the boards match
    """
    changed = np.flatnonzero(old != new)
    return [Difference(int(sq), int(old[sq]), int(new[sq])) for sq in changed]


def split_differences(differences: List[Difference]) -> Tuple[List[int], List[int]]:
    """Squares that lost a piece and squares that received one, both ascending."""
    missing = [d.square for d in differences if d.is_missing]
    appeared = [d.square for d in differences if d.is_appeared]
    return missing, appeared
