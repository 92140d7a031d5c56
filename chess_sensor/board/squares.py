"""
Square names and coordinate moves.

Square indices follow python-chess (0 = a1, 63 = h8), so names come
straight from chess.SQUARE_NAMES. Parsing is strict: anything that is not
a lowercase file a-h followed by a rank 1-8 raises InvalidSquareName.
"""

from typing import Tuple

import chess

from chess_sensor.errors import InvalidSquareName

_NAME_TO_SQUARE = {name: square for square, name in enumerate(chess.SQUARE_NAMES)}


def square_name(square: int) -> str:
    """
    Convert a square index to its name.

    Args:
        square: Square index (0-63) where 0=a1, 63=h8

    Returns:
        Two character name such as 'e4'

    Raises:
        InvalidSquareName: If the index is outside 0-63
    """
    if not 0 <= square < 64:
        raise InvalidSquareName(f"Square index out of range: {square}")
    return chess.SQUARE_NAMES[square]


def parse_square(name: str) -> int:
    """
    Convert a square name to its index.

    Args:
        name: Square name such as 'e4'

    Returns:
        Square index (0-63)

    Raises:
        InvalidSquareName: If the name is malformed
    """
    try:
        return _NAME_TO_SQUARE[name]
    except (KeyError, TypeError):
        raise InvalidSquareName(f"Invalid square name: {name!r}") from None


def coordinate_move(from_square: int, to_square: int) -> str:
    """
    Four character coordinate move, e.g. coordinate_move(12, 28) == 'e2e4'.

    Promotions are never suffixed; the board cannot tell which piece was
    placed on the last rank apart from its sensor code.
    """
    return square_name(from_square) + square_name(to_square)


def parse_coordinate_move(text: str) -> Tuple[int, int]:
    """Split a four character coordinate move into (from_square, to_square)."""
    if not isinstance(text, str) or len(text) != 4:
        raise InvalidSquareName(f"Invalid coordinate move: {text!r}")
    return parse_square(text[:2]), parse_square(text[2:])
