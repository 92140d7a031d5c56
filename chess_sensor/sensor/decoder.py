"""
Snapshot frame decoding.

The board sends its occupancy as 32 bytes, one nibble per square, in
reverse square order:

    byte i, low nibble  -> square 63 - 2i
    byte i, high nibble -> square 63 - 2i - 1

So byte 0 holds h8 (low) and g8 (high), byte 31 holds b1 (low) and a1
(high). Decoding interleaves the nibbles and reverses the result.
"""

from typing import Union

import chess
import numpy as np

from chess_sensor.board.representation import BOARD_DTYPE, BOARD_SQUARES, MAX_PIECE_CODE, validate_board
from chess_sensor.errors import InvalidFrame

FRAME_SIZE = BOARD_SQUARES // 2

Buffer = Union[bytes, bytearray, memoryview]


def decode_frame(data: Buffer) -> np.ndarray:
    """
    Decode a snapshot frame into a board array.

    Only the first FRAME_SIZE bytes are read.

    Args:
        data: Raw frame bytes

    Returns:
        numpy array of shape (64,) with hardware piece codes

    Raises:
        InvalidFrame: If the frame is shorter than 32 bytes or a nibble is
            not a known piece code
    """
    if len(data) < FRAME_SIZE:
        raise InvalidFrame(f"Invalid frame size: {len(data)} bytes. Expected {FRAME_SIZE}")

    packed = np.frombuffer(bytes(data[:FRAME_SIZE]), dtype=np.uint8)

    reversed_squares = np.empty(BOARD_SQUARES, dtype=BOARD_DTYPE)
    reversed_squares[0::2] = packed & 0x0F
    reversed_squares[1::2] = packed >> 4
    board = reversed_squares[::-1].copy()

    invalid = np.flatnonzero(board > MAX_PIECE_CODE)
    if invalid.size:
        names = [chess.square_name(int(sq)) for sq in invalid]
        raise InvalidFrame(f"Unknown piece codes on squares: {names}")

    return board


def encode_frame(board: np.ndarray) -> bytes:
    """
    Pack a board array into a snapshot frame.

    This is the inverse of decode_frame(). Used to replay positions and to
    build frames in tests.
    """
    board = validate_board(board)
    reversed_squares = board[::-1]
    packed = (reversed_squares[0::2] & 0x0F) | (reversed_squares[1::2] << 4)
    return packed.astype(np.uint8).tobytes()
