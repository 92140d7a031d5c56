"""
Configuration for the move tracker.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import chess
import numpy as np

from chess_sensor.board.position import Position


@dataclass
class TrackerConfig:
    """Thresholds and policies of MoveTracker."""

    bulk_reset_threshold: int = 10
    """More changed squares than this is a re-rack or sensor fault, not a move"""

    capture_completion_max_diffs: int = 3
    """Largest difference set checked against a pending two-step capture"""

    history_size: int = 10
    """Number of recent boards kept for diagnostics"""

    rebaseline_on_unresolved: bool = False
    """Rebaseline when a capture or castle shape cannot be resolved instead of waiting"""

    event_queue_size: int = 256
    """Events kept for poll_events(); the oldest are dropped when nobody polls"""

    fischer: bool = False
    """Fischer random game: castling rights are exported as rook file letters"""

    kingside_rook_file: int = 7
    queenside_rook_file: int = 0

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not 2 <= self.bulk_reset_threshold < 64:
            raise ValueError(
                f"bulk_reset_threshold must be between 2 and 63, got {self.bulk_reset_threshold}"
            )

        if self.capture_completion_max_diffs < 1:
            raise ValueError(
                f"capture_completion_max_diffs must be positive, got {self.capture_completion_max_diffs}"
            )

        if self.history_size <= 0:
            raise ValueError(f"history_size must be positive, got {self.history_size}")

        if self.event_queue_size <= 0:
            raise ValueError(f"event_queue_size must be positive, got {self.event_queue_size}")

        if not 0 <= self.queenside_rook_file < self.kingside_rook_file <= 7:
            raise ValueError(
                f"Rook files must satisfy 0 <= queenside < kingside <= 7, "
                f"got {self.queenside_rook_file} and {self.kingside_rook_file}"
            )

    def starting_position(self, board: Optional[np.ndarray] = None) -> Position:
        """Fresh game metadata (white to move, all castling rights) for this setup."""
        position = Position(
            fischer=self.fischer,
            kingside_rook_file=self.kingside_rook_file,
            queenside_rook_file=self.queenside_rook_file,
        )
        if board is not None:
            position = position.with_board(board)
        return position


def parse_rook_files(text: str) -> Tuple[int, int]:
    """
    Parse Fischer random rook files given as two letters, queen side first.

    parse_rook_files("bg") == (1, 6)

    Raises:
        ValueError: If the text is not two file letters in a-h
    """
    text = text.strip().lower()
    if len(text) != 2 or any(letter not in chess.FILE_NAMES for letter in text):
        raise ValueError(f"Invalid rook files: {text!r}. Expected two letters such as 'ah'")
    return chess.FILE_NAMES.index(text[0]), chess.FILE_NAMES.index(text[1])


def fischer_options(rook_files: Optional[Tuple[int, int]]) -> Dict[str, object]:
    """TrackerConfig keyword arguments for parsed rook files, none for a standard game."""
    if rook_files is None:
        return {}
    queenside, kingside = rook_files
    return {"fischer": True, "queenside_rook_file": queenside, "kingside_rook_file": kingside}
