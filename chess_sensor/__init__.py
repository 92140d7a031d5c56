"""
BlueNut Move Tracker

Infers chess moves from the occupancy snapshots streamed by a sensor
chessboard (ChessNut Air). The board only reports what every square holds
right now, many times per move, including the half-finished states while a
hand lifts and places pieces. This package turns that stream into moves.

## Architecture

1. **board**: Piece codes, board arrays, square names and FEN export
   - 64-entry numpy board of hardware piece codes
   - Square name / coordinate move conversion (python-chess numbering)
   - Position metadata and FEN rendering

2. **sensor**: Snapshot frames
   - Decode the 32-byte nibble-packed frame into a board
   - Replay recorded sessions from hex files

3. **tracking**: Move inference
   - Difference engine between stable baseline and latest snapshot
   - MoveTracker state machine (lift, capture, castle, bulk reset)
   - MoveDetected / HighlightSquares events

4. **host**: Line-oriented interface for feeding frames from a transport

## Quick Start

```python
from chess_sensor.tracking import MoveTracker

tracker = MoveTracker()
tracker.submit_snapshot(first_frame)      # becomes the stable baseline
for event in tracker.submit_snapshot(frame):
    print(event)
print(tracker.export_position())
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from chess_sensor.errors import ChessSensorError, InvalidFrame, InvalidSquareName
from chess_sensor.tracking import MoveTracker, MoveDetected, HighlightSquares

__all__ = [
    'ChessSensorError',
    'InvalidFrame',
    'InvalidSquareName',
    'MoveTracker',
    'MoveDetected',
    'HighlightSquares',
]
