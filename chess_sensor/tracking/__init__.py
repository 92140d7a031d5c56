"""
Move tracking module.

Key Components:
    - MoveTracker: State machine turning snapshots into moves
    - TrackerConfig: Thresholds and policies
    - classify / DiffShape / Outcome: The decision table, usable on its own
    - find_differences: Square-by-square board comparison
    - MoveDetected / HighlightSquares: Emitted events
"""

from chess_sensor.tracking.config import TrackerConfig
from chess_sensor.tracking.diff import Difference, find_differences, split_differences
from chess_sensor.tracking.events import Event, HighlightSquares, MoveDetected
from chess_sensor.tracking.classifier import (
    DiffShape,
    MoveTracker,
    Outcome,
    PendingMove,
    TrackerState,
    classify,
)

__all__ = [
    'TrackerConfig',
    'Difference',
    'find_differences',
    'split_differences',
    'Event',
    'HighlightSquares',
    'MoveDetected',
    'DiffShape',
    'MoveTracker',
    'Outcome',
    'PendingMove',
    'TrackerState',
    'classify',
]
