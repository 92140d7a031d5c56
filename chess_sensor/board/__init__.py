"""
Board Representation Module

Piece codes, board arrays, square names and FEN export for sensor snapshots.

Key Components:
    - PieceCode: Hardware piece codes 0-12 with their FEN symbols
    - square_name / parse_square: Square index <-> name conversion
    - coordinate_move: From/to squares to a 'e2e4' style move
    - Position / export_fen: Board plus game state rendered as FEN

Data Flow:
    32-byte frame -> decode_frame() -> (64,) uint8 array -> Position -> FEN
"""

from chess_sensor.board.representation import (
    PieceCode,
    empty_board,
    starting_board,
    validate_board,
    board_from_chess,
    board_to_chess,
    render_ascii,
)
from chess_sensor.board.squares import (
    square_name,
    parse_square,
    coordinate_move,
    parse_coordinate_move,
)
from chess_sensor.board.position import Position, export_fen

__all__ = [
    'PieceCode',
    'empty_board',
    'starting_board',
    'validate_board',
    'board_from_chess',
    'board_to_chess',
    'render_ascii',
    'square_name',
    'parse_square',
    'coordinate_move',
    'parse_coordinate_move',
    'Position',
    'export_fen',
]
