"""
Host Interface

Line protocol for feeding frames from a board transport into the tracker
and reading moves back.

Protocol Flow:
    Transport -> "frame 58 23 31 85 ..."     (first frame: baseline)
    Transport -> "frame ..."                 (piece lifted)
    Host      -> "highlight"
    Transport -> "frame ..."                 (piece placed)
    Host      -> "move e2e4"
    Host      -> "highlight e2 e4"
    Transport -> "fen"
    Host      -> "fen rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
"""

from chess_sensor.host.interface import BoardHost, main

__all__ = ['BoardHost', 'main']
