"""
Tests for position metadata and FEN export.
"""

import pytest
import chess
import numpy as np

from chess_sensor.board.position import Position, export_fen
from chess_sensor.board.representation import PieceCode, board_from_chess, empty_board, starting_board


def position_from_placement(placement: str, **kwargs) -> Position:
    return Position(board=board_from_chess(chess.BaseBoard(placement)), **kwargs)


class TestExportFen:
    """Test suite for export_fen()."""

    def test_starting_position(self):
        position = Position(board=starting_board())
        assert export_fen(position) == chess.STARTING_FEN

    def test_empty_board(self):
        position = Position(
            board=empty_board(),
            white_kingside=False,
            white_queenside=False,
            black_kingside=False,
            black_queenside=False,
        )
        assert export_fen(position) == "8/8/8/8/8/8/8/8 w - - 0 1"

    def test_run_length_encoding(self):
        """Empty squares collapse into digits within each rank."""
        placement = "r3k2r/pp1n1ppp/8/3Pp3/8/5N2/PPP2PPP/R2QK2R"
        fen = export_fen(position_from_placement(placement))
        assert fen.split()[0] == placement

    def test_black_to_move_and_counters(self):
        position = Position(board=starting_board(), turn=chess.BLACK, halfmoves=3)
        fields = export_fen(position).split()

        assert fields[1] == "b"
        assert fields[4] == "0"
        assert fields[5] == "2"

    def test_en_passant_field(self):
        position = position_from_placement(
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR",
            turn=chess.BLACK,
            ep_square=chess.E3,
        )
        assert export_fen(position) == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"

    def test_partial_castling_rights(self):
        position = Position(board=starting_board(), white_queenside=False, black_kingside=False)
        assert export_fen(position).split()[2] == "Kq"

    def test_parses_with_python_chess(self):
        """Exported FEN is accepted by python-chess unchanged."""
        position = position_from_placement(
            "r1bqk2r/pppp1ppp/2n2n2/2b1p3/2B1P3/5N2/PPPP1PPP/RNBQK2R",
            halfmoves=7,
            turn=chess.BLACK,
        )
        fen = export_fen(position)
        board = chess.Board(fen)

        assert board.fen() == fen


class TestCastlingFen:
    """Test suite for the castling field."""

    def test_standard_letters(self):
        assert Position().castling_fen() == "KQkq"

    def test_fischer_letters(self):
        """Fischer random rights use the rook files."""
        position = Position(fischer=True, kingside_rook_file=6, queenside_rook_file=1)
        assert position.castling_fen() == "GBgb"

    def test_no_rights(self):
        position = Position(white_kingside=False, white_queenside=False, black_kingside=False, black_queenside=False)
        assert position.castling_fen() == "-"


class TestAdvance:
    """Test suite for Position.advance()."""

    def test_toggles_turn_and_counts_plies(self):
        after = Position().advance(chess.G1, chess.F3, PieceCode.WHITE_KNIGHT)

        assert after.turn == chess.BLACK
        assert after.halfmoves == 1
        assert after.advance(chess.G8, chess.F6, PieceCode.BLACK_KNIGHT).turn == chess.WHITE

    def test_double_pawn_push_sets_en_passant(self):
        after = Position().advance(chess.E2, chess.E4, PieceCode.WHITE_PAWN)
        assert after.ep_square == chess.E3

        black = after.advance(chess.D7, chess.D5, PieceCode.BLACK_PAWN)
        assert black.ep_square == chess.D6

    def test_en_passant_cleared_by_next_move(self):
        after = Position().advance(chess.E2, chess.E4, PieceCode.WHITE_PAWN)
        after = after.advance(chess.G8, chess.F6, PieceCode.BLACK_KNIGHT)
        assert after.ep_square is None

    def test_king_move_revokes_both_rights(self):
        after = Position().advance(chess.E1, chess.E2, PieceCode.WHITE_KING)

        assert not after.white_kingside
        assert not after.white_queenside
        assert after.black_kingside and after.black_queenside
        assert not after.white_castled

    def test_castling_marks_castled(self):
        after = Position().advance(chess.E8, chess.C8, PieceCode.BLACK_KING)

        assert after.black_castled
        assert not after.black_kingside
        assert not after.black_queenside
        assert after.castling_fen() == "KQ"

    def test_rook_leaving_origin(self):
        after = Position().advance(chess.H1, chess.H3, PieceCode.WHITE_ROOK)
        assert after.castling_fen() == "Qkq"

    def test_rook_captured_on_origin(self):
        after = Position().advance(chess.B7, chess.A8, PieceCode.WHITE_BISHOP)
        assert after.castling_fen() == "KQk"

    def test_original_unchanged(self):
        """advance() returns a new position."""
        before = Position(board=starting_board())
        before.advance(chess.E1, chess.G1, PieceCode.WHITE_KING)

        assert before.turn == chess.WHITE
        assert before.halfmoves == 0
        assert before.castling_fen() == "KQkq"

    def test_copy_is_independent(self):
        position = Position(board=starting_board())
        clone = position.copy()
        clone.board[0] = 0

        assert position.board[0] == PieceCode.WHITE_ROOK
        assert np.count_nonzero(clone.board) == 31
