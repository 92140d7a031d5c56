"""
Position metadata and FEN export.

A Position is a sensor board plus the game state the board itself cannot
report: side to move, ply counter, en passant target, castling rights and
the rook origins used for castling in Fischer random setups.

The tracker never checks legality. Metadata is advanced from the squares a
move touched, which is enough to keep the exported FEN consistent for an
engine reading it.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

import chess
import numpy as np

from chess_sensor.board.representation import PieceCode, board_to_chess, empty_board


@dataclass
class Position:
    """A sensor board with its game-state metadata."""

    board: np.ndarray = field(default_factory=empty_board)
    turn: bool = chess.WHITE
    halfmoves: int = 0
    """Plies completed since tracking started"""

    ep_square: Optional[int] = None

    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True

    white_castled: bool = False
    black_castled: bool = False

    # Fischer random bookkeeping, filled in by TrackerConfig.starting_position()
    fischer: bool = False
    kingside_rook_file: int = 7
    queenside_rook_file: int = 0

    def copy(self) -> "Position":
        """Independent copy, including the board array."""
        return replace(self, board=self.board.copy())

    def with_board(self, board: np.ndarray) -> "Position":
        """Same metadata on a different board."""
        return replace(self, board=board)

    def piece_at(self, square: int) -> PieceCode:
        return PieceCode(int(self.board[square]))

    def castling_fen(self) -> str:
        """
        Castling field of a FEN string, '-' when no right is held.

        Fischer random positions use Shredder-FEN rook file letters
        ('HAha') instead of 'KQkq'.
        """
        if self.fischer:
            kingside = chess.FILE_NAMES[self.kingside_rook_file]
            queenside = chess.FILE_NAMES[self.queenside_rook_file]
        else:
            kingside, queenside = "k", "q"

        rights = ""
        if self.white_kingside:
            rights += kingside.upper()
        if self.white_queenside:
            rights += queenside.upper()
        if self.black_kingside:
            rights += kingside
        if self.black_queenside:
            rights += queenside
        return rights or "-"

    @property
    def fullmove_number(self) -> int:
        return self.halfmoves // 2 + 1

    def advance(self, from_square: int, to_square: int, moving: PieceCode) -> "Position":
        """
        Metadata after a move from from_square to to_square.

        The board is left as is; the caller pairs the result with the board
        observed after the move.

        Args:
            from_square: Origin square index
            to_square: Destination square index
            moving: Code of the piece that moved

        Returns:
            New Position with side to move toggled and the ply counter,
            en passant target and castling rights updated
        """
        after = self.copy()
        after.turn = not self.turn
        after.halfmoves = self.halfmoves + 1

        piece = moving.piece
        distance = abs(to_square - from_square)

        after.ep_square = None
        if piece is not None and piece.piece_type == chess.PAWN and distance == 16:
            after.ep_square = (from_square + to_square) // 2

        if piece is not None and piece.piece_type == chess.KING:
            if piece.color == chess.WHITE:
                after.white_kingside = after.white_queenside = False
                after.white_castled = after.white_castled or distance == 2
            else:
                after.black_kingside = after.black_queenside = False
                after.black_castled = after.black_castled or distance == 2

        # A rook leaving or being captured on its origin square
        touched = (from_square, to_square)
        if chess.square(self.kingside_rook_file, 0) in touched:
            after.white_kingside = False
        if chess.square(self.queenside_rook_file, 0) in touched:
            after.white_queenside = False
        if chess.square(self.kingside_rook_file, 7) in touched:
            after.black_kingside = False
        if chess.square(self.queenside_rook_file, 7) in touched:
            after.black_queenside = False

        return after


def export_fen(position: Position) -> str:
    """
    Render a position as a FEN string.

    Placement comes from python-chess (ranks 8 to 1, files a to h, runs of
    empty squares as digits). The half-move clock is always 0 because the
    tracker does not know which moves were captures or pawn moves.

    Args:
        position: Position to export

    Returns:
        FEN string, e.g. "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    """
    placement = board_to_chess(position.board).board_fen()
    turn = "w" if position.turn == chess.WHITE else "b"
    ep = chess.square_name(position.ep_square) if position.ep_square is not None else "-"
    return f"{placement} {turn} {position.castling_fen()} {ep} 0 {position.fullmove_number}"

