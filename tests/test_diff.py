"""
Tests for the difference engine.
"""

import chess

from chess_sensor.board.representation import PieceCode, starting_board
from chess_sensor.tracking.diff import Difference, find_differences, split_differences


class TestFindDifferences:
    """Test suite for find_differences()."""

    def test_identical_boards(self):
        assert find_differences(starting_board(), starting_board()) == []

    def test_ascending_order(self):
        old = starting_board()
        new = old.copy()
        new[chess.E2] = PieceCode.EMPTY
        new[chess.E4] = PieceCode.WHITE_PAWN
        new[chess.A1] = PieceCode.EMPTY

        differences = find_differences(old, new)

        assert [d.square for d in differences] == [chess.A1, chess.E2, chess.E4]
        assert differences[1] == Difference(chess.E2, PieceCode.WHITE_PAWN, PieceCode.EMPTY)

    def test_plain_ints(self):
        """Records hold Python ints, not numpy scalars."""
        new = starting_board()
        new[chess.E2] = 0
        difference = find_differences(starting_board(), new)[0]

        assert type(difference.square) is int
        assert type(difference.old) is int


class TestSplitDifferences:
    """Test suite for missing/appeared classification."""

    def test_missing_and_appeared(self):
        differences = [
            Difference(chess.D4, PieceCode.WHITE_KNIGHT, PieceCode.EMPTY),
            Difference(chess.F3, PieceCode.EMPTY, PieceCode.WHITE_KNIGHT),
        ]
        assert split_differences(differences) == ([chess.D4], [chess.F3])

    def test_replaced_piece_counts_as_appeared(self):
        """A capture landing on its victim is a square that received a piece."""
        replaced = Difference(chess.E6, PieceCode.BLACK_PAWN, PieceCode.WHITE_KNIGHT)

        assert replaced.is_appeared
        assert not replaced.is_missing
        assert split_differences([replaced]) == ([], [chess.E6])

    def test_empty(self):
        assert split_differences([]) == ([], [])
