"""
Tests for snapshot frame decoding.
"""

import pytest
import chess
import numpy as np

from chess_sensor.board.representation import PieceCode, board_from_chess, empty_board, starting_board
from chess_sensor.errors import InvalidFrame
from chess_sensor.sensor.decoder import FRAME_SIZE, decode_frame, encode_frame

# Standard starting arrangement as sent by the board
START_FRAME = bytes.fromhex(
    "58233185"      # h8 g8 f8 e8 d8 c8 b8 a8
    + "44" * 4      # rank 7
    + "00" * 16     # ranks 6-3
    + "77" * 4      # rank 2
    + "a6c99b6a"    # h1 g1 f1 e1 d1 c1 b1 a1
)


class TestDecodeFrame:
    """Test suite for decode_frame()."""

    def test_frame_size(self):
        assert FRAME_SIZE == 32
        assert len(START_FRAME) == FRAME_SIZE

    def test_empty_frame(self):
        board = decode_frame(bytes(32))

        assert board.shape == (64,)
        assert board.dtype == np.uint8
        assert not board.any()

    def test_first_byte_is_h8_g8(self):
        """Byte 0 holds square 63 in its low nibble and 62 in its high nibble."""
        data = bytes([0x5A]) + bytes(31)
        board = decode_frame(data)

        assert board[63] == PieceCode.WHITE_KNIGHT
        assert board[62] == PieceCode.BLACK_KNIGHT
        assert np.count_nonzero(board) == 2

    def test_last_byte_is_b1_a1(self):
        """Byte 31 holds square 1 in its low nibble and 0 in its high nibble."""
        data = bytes(31) + bytes([0x6C])
        board = decode_frame(data)

        assert board[chess.B1] == PieceCode.WHITE_KING
        assert board[chess.A1] == PieceCode.WHITE_ROOK

    def test_starting_position(self):
        np.testing.assert_array_equal(decode_frame(START_FRAME), starting_board())

    def test_accepts_bytearray_and_memoryview(self):
        expected = starting_board()
        np.testing.assert_array_equal(decode_frame(bytearray(START_FRAME)), expected)
        np.testing.assert_array_equal(decode_frame(memoryview(START_FRAME)), expected)

    def test_short_frame_rejected(self):
        with pytest.raises(InvalidFrame, match="20 bytes"):
            decode_frame(bytes(20))

    def test_trailing_bytes_ignored(self):
        np.testing.assert_array_equal(decode_frame(START_FRAME + b"\xff\xff"), starting_board())

    def test_unknown_nibble_rejected(self):
        """Nibbles 13-15 are not piece codes."""
        data = bytes(31) + bytes([0x0F])

        with pytest.raises(InvalidFrame, match="b1"):
            decode_frame(data)

    def test_returns_fresh_array(self):
        """Decoded boards are writable and independent of the input."""
        board = decode_frame(START_FRAME)
        board[0] = 0
        assert decode_frame(START_FRAME)[0] == PieceCode.WHITE_ROOK


class TestEncodeFrame:
    """Test suite for encode_frame()."""

    def test_starting_position(self):
        assert encode_frame(starting_board()) == START_FRAME

    def test_inverse_of_decode(self):
        board = board_from_chess(chess.BaseBoard("r1bqk2r/pppp1ppp/2n2n2/2b1p3/2B1P3/5N2/PPPP1PPP/RNBQ1RK1"))
        np.testing.assert_array_equal(decode_frame(encode_frame(board)), board)

    def test_empty_board(self):
        assert encode_frame(empty_board()) == bytes(32)

    def test_invalid_board_rejected(self):
        with pytest.raises(ValueError):
            encode_frame(np.zeros(32, dtype=np.uint8))
