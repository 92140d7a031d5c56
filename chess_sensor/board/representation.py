"""
Board Representation for Sensor Snapshots

The ChessNut Air reports every square as a 4-bit piece code. This module
fixes that code table and stores a board as a flat numpy array of 64 codes,
indexed the same way python-chess numbers squares.

Piece Codes (hardware encoding):
     0: empty
     1: Black Queen     7: White Pawn
     2: Black King      8: Black Rook
     3: Black Bishop    9: White Bishop
     4: Black Pawn     10: White Knight
     5: Black Knight   11: White Queen
     6: White Rook     12: White King

Board Layout:
    - Index 0 = A1, index 7 = H1, index 63 = H8
    - index = rank * 8 + file
"""

from enum import IntEnum
from typing import Dict, Optional, Tuple

import chess
import numpy as np

BOARD_SQUARES = 64
BOARD_DTYPE = np.uint8


class PieceCode(IntEnum):
    """Piece codes as sent by the board, one nibble per square."""

    EMPTY = 0
    BLACK_QUEEN = 1
    BLACK_KING = 2
    BLACK_BISHOP = 3
    BLACK_PAWN = 4
    BLACK_KNIGHT = 5
    WHITE_ROOK = 6
    WHITE_PAWN = 7
    BLACK_ROOK = 8
    WHITE_BISHOP = 9
    WHITE_KNIGHT = 10
    WHITE_QUEEN = 11
    WHITE_KING = 12

    @property
    def symbol(self) -> str:
        """FEN letter for the piece, a single space for an empty square."""
        return _CODE_TO_SYMBOL[self]

    @property
    def piece(self) -> Optional[chess.Piece]:
        """python-chess piece for this code, None for an empty square."""
        if self is PieceCode.EMPTY:
            return None
        return chess.Piece.from_symbol(self.symbol)

    @property
    def is_king(self) -> bool:
        return self in (PieceCode.WHITE_KING, PieceCode.BLACK_KING)

    @classmethod
    def from_piece(cls, piece: Optional[chess.Piece]) -> "PieceCode":
        """Hardware code for a python-chess piece (None maps to EMPTY)."""
        if piece is None:
            return cls.EMPTY
        return _SYMBOL_TO_CODE[piece.symbol()]


_CODE_TO_SYMBOL: Dict[PieceCode, str] = {
    PieceCode.EMPTY: " ",
    PieceCode.BLACK_QUEEN: "q",
    PieceCode.BLACK_KING: "k",
    PieceCode.BLACK_BISHOP: "b",
    PieceCode.BLACK_PAWN: "p",
    PieceCode.BLACK_KNIGHT: "n",
    PieceCode.WHITE_ROOK: "R",
    PieceCode.WHITE_PAWN: "P",
    PieceCode.BLACK_ROOK: "r",
    PieceCode.WHITE_BISHOP: "B",
    PieceCode.WHITE_KNIGHT: "N",
    PieceCode.WHITE_QUEEN: "Q",
    PieceCode.WHITE_KING: "K",
}

_SYMBOL_TO_CODE: Dict[str, PieceCode] = {
    symbol: code for code, symbol in _CODE_TO_SYMBOL.items() if code != PieceCode.EMPTY
}

MAX_PIECE_CODE = int(max(PieceCode))


def empty_board() -> np.ndarray:
    """Board with every square empty."""
    return np.zeros(BOARD_SQUARES, dtype=BOARD_DTYPE)


def validate_board(board: np.ndarray) -> np.ndarray:
    """
    Check the board invariants and return the board as a uint8 array.

    Args:
        board: Array-like of 64 piece codes

    Returns:
        numpy array of shape (64,) with dtype uint8

    Raises:
        ValueError: If the shape is wrong, the values are not integers or a
            code is outside 0-12
    """
    array = np.asarray(board)
    if array.shape != (BOARD_SQUARES,):
        raise ValueError(f"Invalid board shape: {array.shape}. Expected ({BOARD_SQUARES},)")

    if not np.issubdtype(array.dtype, np.integer):
        raise ValueError(f"Invalid board dtype: {array.dtype}. Expected integer piece codes")

    if array.size and (array.min() < 0 or array.max() > MAX_PIECE_CODE):
        bad = [chess.square_name(int(sq)) for sq in np.flatnonzero((array < 0) | (array > MAX_PIECE_CODE))]
        raise ValueError(f"Invalid piece codes on squares: {bad}")

    return array.astype(BOARD_DTYPE, copy=False)


def board_from_chess(board: chess.BaseBoard) -> np.ndarray:
    """
    Convert a python-chess board to a sensor board array.

    Args:
        board: python-chess Board or BaseBoard

    Returns:
        numpy array of shape (64,) with hardware piece codes
    """
    array = empty_board()
    for square, piece in board.piece_map().items():
        array[square] = PieceCode.from_piece(piece)
    return array


def board_to_chess(board: np.ndarray) -> chess.BaseBoard:
    """
    Convert a sensor board array to a python-chess BaseBoard.

    This is the inverse of board_from_chess().
    """
    base = chess.BaseBoard(None)
    for square in np.flatnonzero(board):
        base.set_piece_at(int(square), PieceCode(int(board[square])).piece)
    return base


def starting_board() -> np.ndarray:
    """Sensor board for the standard starting arrangement."""
    return board_from_chess(chess.BaseBoard())


def piece_counts(board: np.ndarray) -> Tuple[int, int]:
    """Number of (white, black) pieces on the board."""
    white = 0
    black = 0
    for code in board[np.flatnonzero(board)]:
        if PieceCode(int(code)).piece.color == chess.WHITE:
            white += 1
        else:
            black += 1
    return white, black


def render_ascii(board: np.ndarray) -> str:
    """
    Render the board as text, rank 8 at the top, with file and rank labels.

    Empty squares are shown as '.'.
    """
    lines = ["  a b c d e f g h"]
    for rank in range(7, -1, -1):
        row = [str(rank + 1)]
        for file in range(8):
            code = PieceCode(int(board[rank * 8 + file]))
            row.append("." if code is PieceCode.EMPTY else code.symbol)
        row.append(str(rank + 1))
        lines.append(" ".join(row))
    lines.append("  a b c d e f g h")
    return "\n".join(lines)
