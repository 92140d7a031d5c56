"""
Move Tracker

This module turns the stream of board snapshots into moves. The board gives
no "move made" signal; it reports every sensor change, so a single move is
usually seen as several snapshots (piece lifted, piece carried, piece
placed). The tracker keeps the last settled board as its stable baseline and
classifies each new snapshot by how it differs from that baseline.

Classification:
    The difference set is reduced to a DiffShape (total changed squares,
    squares that lost a piece, squares that received one, whether a
    two-step capture is pending) and matched against a fixed decision
    table, first match wins:

    | # | Shape                                   | Outcome             |
    |---|-----------------------------------------|---------------------|
    | 1 | no differences                          | SETTLED             |
    | 2 | total > bulk_reset_threshold            | BULK_RESET          |
    | 3 | 1 changed, 1 missing                    | PIECE_LIFTED        |
    | 4 | 2 changed, 2 missing                    | PARTIAL_CAPTURE     |
    | 5 | capture pending, total <= max           | CAPTURE_COMPLETION  |
    | 6 | 1 missing, 1 appeared                   | SIMPLE_MOVE         |
    | 7 | 2 missing, 1 appeared                   | CAPTURE             |
    | 8 | 2 missing, 2 appeared                   | CASTLING            |
    | 9 | capture pending, total >= 3             | MOVE_DURING_CAPTURE |
    |10 | anything else                           | UNMATCHED           |

    A CAPTURE_COMPLETION that does not resolve falls through to rows 6-10.

States:
    IDLE: no interaction in progress
    IN_PROGRESS: a lift or half-finished capture has been seen

Nothing here checks chess rules: a reported move is the physical change
that best explains the sensors, not necessarily a legal one.
"""

import logging
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Deque, List, NamedTuple, Optional, Tuple

import numpy as np

from chess_sensor.board.position import Position, export_fen
from chess_sensor.board.representation import (
    PieceCode,
    piece_counts,
    starting_board,
    validate_board,
)
from chess_sensor.board.squares import coordinate_move, square_name
from chess_sensor.errors import InvalidFrame
from chess_sensor.sensor.decoder import FRAME_SIZE, Buffer, decode_frame
from chess_sensor.tracking.config import TrackerConfig
from chess_sensor.tracking.diff import find_differences, split_differences
from chess_sensor.tracking.events import Event, HighlightSquares, MoveDetected

logger = logging.getLogger(__name__)

_STARTING_BOARD = starting_board()


class TrackerState(Enum):
    """Whether a physical interaction is under way."""

    IDLE = 0
    IN_PROGRESS = 1


class Outcome(Enum):
    """Result of matching a difference set against the decision table."""

    SETTLED = "settled"
    BULK_RESET = "bulk_reset"
    PIECE_LIFTED = "piece_lifted"
    PARTIAL_CAPTURE = "partial_capture"
    CAPTURE_COMPLETION = "capture_completion"
    SIMPLE_MOVE = "simple_move"
    CAPTURE = "capture"
    CASTLING = "castling"
    MOVE_DURING_CAPTURE = "move_during_capture"
    UNMATCHED = "unmatched"


class DiffShape(NamedTuple):
    """Counts the decision table looks at."""

    total: int
    missing: int
    appeared: int
    capture_pending: bool


def classify(
    shape: DiffShape,
    config: TrackerConfig,
    completion_failed: bool = False,
) -> Outcome:
    """
    Match a difference shape against the decision table.

    Args:
        shape: Counts of the current difference set
        config: Tracker thresholds
        completion_failed: Skip CAPTURE_COMPLETION (it was tried and did not
            resolve for this snapshot)

    Returns:
        The first matching Outcome
    """
    total, missing, appeared, capture_pending = shape

    if total == 0:
        return Outcome.SETTLED
    if total > config.bulk_reset_threshold:
        return Outcome.BULK_RESET
    if total == 1 and missing == 1:
        return Outcome.PIECE_LIFTED
    if total == 2 and missing == 2:
        return Outcome.PARTIAL_CAPTURE
    if capture_pending and total <= config.capture_completion_max_diffs and not completion_failed:
        return Outcome.CAPTURE_COMPLETION
    if missing == 1 and appeared == 1:
        return Outcome.SIMPLE_MOVE
    if missing == 2 and appeared == 1:
        return Outcome.CAPTURE
    if missing == 2 and appeared == 2:
        return Outcome.CASTLING
    if capture_pending and total >= 3:
        return Outcome.MOVE_DURING_CAPTURE
    return Outcome.UNMATCHED


@dataclass
class PendingMove:
    """Partially resolved move of the interaction in progress."""

    from_square: Optional[int] = None
    to_square: Optional[int] = None
    captured: Optional[PieceCode] = None
    moving: Optional[PieceCode] = None

    @property
    def is_resolved(self) -> bool:
        return self.from_square is not None and self.to_square is not None


def _names(squares) -> List[str]:
    return [square_name(sq) for sq in squares]


class MoveTracker:
    """
    Stateful move inference over board snapshots.

    Attributes:
        config: Thresholds and policies
        state: IDLE or IN_PROGRESS
        stable: Last settled position, the baseline every snapshot is diffed against
        current: Latest snapshot with the game metadata
        previous: Snapshot before current (diagnostics)
        history: Last config.history_size boards (diagnostics)

    Methods:
        submit_snapshot: Decode and process a 32-byte frame
        submit_board: Process an already decoded board
        force_stable_baseline: Accept the current board as settled
        reset: Forget everything, next snapshot becomes the baseline
        poll_events: Drain emitted events
        subscribe: Register an event callback
        export_position: FEN of the current board
    """

    def __init__(self, config: Optional[TrackerConfig] = None):
        """
        Initialize the tracker.

        Args:
            config: Tracker configuration (default: TrackerConfig())
        """
        self.config = config if config else TrackerConfig()

        self._listeners: List[Callable[[Event], None]] = []
        self._events: Deque[Event] = deque(maxlen=self.config.event_queue_size)
        self._emitted: List[Event] = []

        self._handlers = {
            Outcome.SETTLED: self._on_settled,
            Outcome.BULK_RESET: self._on_bulk_reset,
            Outcome.PIECE_LIFTED: self._on_piece_lifted,
            Outcome.PARTIAL_CAPTURE: self._on_partial_capture,
            Outcome.SIMPLE_MOVE: self._on_simple_move,
            Outcome.CAPTURE: self._on_capture,
            Outcome.CASTLING: self._on_castling,
            Outcome.MOVE_DURING_CAPTURE: self._on_move_during_capture,
            Outcome.UNMATCHED: self._on_unmatched,
        }

        self.reset()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def reset(self):
        """Forget all boards and metadata; the next snapshot becomes the baseline."""
        self._current = self.config.starting_position()
        self._stable = self._current.copy()
        self._previous = self._current.copy()
        self._has_baseline = False
        self._history: Deque[np.ndarray] = deque(maxlen=self.config.history_size)
        self._clear_pending()
        logger.debug("Tracker reset")

    def submit_snapshot(self, data: Buffer) -> List[Event]:
        """
        Decode a raw frame and process it.

        Args:
            data: Frame of exactly FRAME_SIZE bytes

        Returns:
            Events emitted while processing this frame, oldest first

        Raises:
            InvalidFrame: If the frame length is wrong or a piece code is
                unknown. Tracker state is unchanged.
        """
        if len(data) != FRAME_SIZE:
            logger.warning(f"Rejected frame of {len(data)} bytes")
            raise InvalidFrame(f"Invalid frame size: {len(data)} bytes. Expected {FRAME_SIZE}")

        return self.submit_board(decode_frame(data))

    def submit_board(self, board: np.ndarray) -> List[Event]:
        """
        Process a decoded board.

        Args:
            board: Array of 64 piece codes

        Returns:
            Events emitted while processing this board, oldest first. The
            same events are queued for poll_events() and sent to subscribers.

        Raises:
            ValueError: If the board has the wrong shape or invalid codes
        """
        board = validate_board(board).copy()
        self._emitted = []

        if not self._has_baseline:
            self._current = self._current.with_board(board)
            self._history.append(board)
            self._has_baseline = True
            self._set_stable_baseline("first snapshot")
            return []

        if np.array_equal(board, self._current.board):
            logger.debug("Duplicate snapshot ignored")
            return []

        self._previous = self._current
        self._current = self._current.with_board(board)
        self._history.append(board)

        self._analyze()
        return list(self._emitted)

    def force_stable_baseline(self):
        """Accept the current board as settled and drop any interaction in progress."""
        self._set_stable_baseline("forced")

    def poll_events(self) -> List[Event]:
        """
        Return and clear the events emitted since the last poll, oldest first.

        At most config.event_queue_size events are kept between polls.
        """
        events = list(self._events)
        self._events.clear()
        return events

    def subscribe(self, callback: Callable[[Event], None]):
        """Call callback synchronously with every event, in emission order."""
        self._listeners.append(callback)

    def export_position(self) -> str:
        """FEN of the current board (not the stable one) with the game metadata."""
        return export_fen(self._current)

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def stable(self) -> Position:
        return self._stable.copy()

    @property
    def current(self) -> Position:
        return self._current.copy()

    @property
    def previous(self) -> Position:
        return self._previous.copy()

    @property
    def history(self) -> List[np.ndarray]:
        return [board.copy() for board in self._history]

    @property
    def pending_move(self) -> PendingMove:
        return replace(self._pending)

    @property
    def pending_capture_squares(self) -> Tuple[int, ...]:
        return tuple(self._pending_capture)

    @property
    def first_removed_piece(self) -> Optional[Tuple[int, PieceCode]]:
        return self._first_removed

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def _analyze(self):
        differences = find_differences(self._stable.board, self._current.board)
        missing, appeared = split_differences(differences)

        if differences:
            logger.debug(f"Detected {len(differences)} square changes")
            logger.debug(f"Missing pieces at squares: {_names(missing)}")
            logger.debug(f"Appeared pieces at squares: {_names(appeared)}")

        shape = DiffShape(len(differences), len(missing), len(appeared), bool(self._pending_capture))
        outcome = classify(shape, self.config)

        if outcome is Outcome.CAPTURE_COMPLETION:
            if self._check_capture_completion():
                self._complete_move()
                return
            outcome = classify(shape, self.config, completion_failed=True)

        self._handlers[outcome](missing, appeared)

    def _on_settled(self, missing: List[int], appeared: List[int]):
        if self._state is TrackerState.IN_PROGRESS:
            self._complete_move()

    def _on_bulk_reset(self, missing: List[int], appeared: List[int]):
        if np.array_equal(self._current.board, _STARTING_BOARD):
            self._current = self.config.starting_position(self._current.board)
            self._set_stable_baseline("board set up in starting position")
        else:
            self._set_stable_baseline("too many changes")

    def _on_piece_lifted(self, missing: List[int], appeared: List[int]):
        if self._state is TrackerState.IDLE:
            self._begin_interaction(missing[0])

    def _on_partial_capture(self, missing: List[int], appeared: List[int]):
        if self._state is TrackerState.IDLE:
            self._begin_interaction(missing[0])

        self._pending_capture = list(missing)
        self._pending.moving = self._first_removed[1]
        logger.debug(f"Detected partial capture at squares: {_names(missing)}")

    def _on_simple_move(self, missing: List[int], appeared: List[int]):
        self._resolve_simple(missing[0], appeared[0])
        self._complete_move()

    def _on_capture(self, missing: List[int], appeared: List[int]):
        to_square = appeared[0]
        moving = self._current.piece_at(to_square)
        from_square = next((sq for sq in missing if self._stable.piece_at(sq) == moving), None)

        if from_square is None:
            logger.warning(f"No source square for capture onto {square_name(to_square)} ({moving.symbol})")
            self._unresolved()
            return

        captured = self._stable.piece_at(to_square)
        if captured is PieceCode.EMPTY:
            # En passant: the victim is on the other vacated square
            victim = next(sq for sq in missing if sq != from_square)
            captured = self._stable.piece_at(victim)

        self._pending.from_square = from_square
        self._pending.to_square = to_square
        self._pending.moving = moving
        self._pending.captured = captured
        logger.debug(f"Detected capture move from {square_name(from_square)} to {square_name(to_square)}")
        self._complete_move()

    def _on_castling(self, missing: List[int], appeared: List[int]):
        king_squares = [sq for sq in missing if self._stable.piece_at(sq).is_king]

        if len(king_squares) == 1:
            king_from = king_squares[0]
            king = self._stable.piece_at(king_from)
            for square in appeared:
                if self._current.piece_at(square) == king and abs(square - king_from) == 2:
                    self._pending.from_square = king_from
                    self._pending.to_square = square
                    self._pending.moving = king
                    logger.debug(f"Detected castling move from {square_name(king_from)} to {square_name(square)}")
                    self._complete_move()
                    return

        logger.warning(f"Two pieces moved but not a castling shape: {_names(missing)} -> {_names(appeared)}")
        self._unresolved()

    def _on_move_during_capture(self, missing: List[int], appeared: List[int]):
        outside_missing = [sq for sq in missing if sq not in self._pending_capture]
        outside_appeared = [sq for sq in appeared if sq not in self._pending_capture]

        if len(outside_missing) == 1 and len(outside_appeared) == 1:
            logger.debug("New move started while waiting for capture, dropping pending capture")
            self._pending_capture = []
            self._first_removed = None
            self._resolve_simple(outside_missing[0], outside_appeared[0])
            self._complete_move()
        else:
            logger.debug("No move resolved while waiting for capture")

    def _on_unmatched(self, missing: List[int], appeared: List[int]):
        logger.debug(f"No move pattern matched ({len(missing)} missing, {len(appeared)} appeared)")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _begin_interaction(self, square: int):
        piece = self._stable.piece_at(square)
        self._state = TrackerState.IN_PROGRESS
        self._first_removed = (square, piece)
        self._pending.moving = piece
        logger.debug(f"First piece removed: {square_name(square)} ({piece.symbol})")
        self._emit(HighlightSquares(()))

    def _resolve_simple(self, from_square: int, to_square: int):
        self._pending.from_square = from_square
        self._pending.to_square = to_square
        self._pending.moving = self._stable.piece_at(from_square)

        captured = self._stable.piece_at(to_square)
        if captured is not PieceCode.EMPTY:
            self._pending.captured = captured
            logger.debug(f"Detected possible capture move from {square_name(from_square)} to {square_name(to_square)}")
        else:
            logger.debug(f"Detected simple move from {square_name(from_square)} to {square_name(to_square)}")

    def _check_capture_completion(self) -> bool:
        """Resolve a two-step capture once the lifted piece lands on a pending square."""
        if not self._pending_capture or self._first_removed is None:
            logger.debug("Failed to confirm capture: no pending squares or first removed piece")
            return False

        piece = self._first_removed[1]
        to_square = next(
            (sq for sq in self._pending_capture if self._current.piece_at(sq) == piece),
            None,
        )
        from_square = next(
            (
                sq for sq in self._pending_capture
                if self._current.piece_at(sq) is PieceCode.EMPTY and self._stable.piece_at(sq) == piece
            ),
            None,
        )

        if to_square is None or from_square is None or to_square == from_square:
            logger.debug("Failed to confirm capture: piece mismatch or invalid board state")
            return False

        self._pending.from_square = from_square
        self._pending.to_square = to_square
        self._pending.moving = piece
        self._pending.captured = self._stable.piece_at(to_square)
        logger.debug(f"Detected capture move from {square_name(from_square)} to {square_name(to_square)}")
        return True

    def _complete_move(self):
        pending = self._pending

        if pending.is_resolved:
            move = coordinate_move(pending.from_square, pending.to_square)
            moving = pending.moving if pending.moving is not None else self._stable.piece_at(pending.from_square)
            captured = pending.captured if pending.captured not in (None, PieceCode.EMPTY) else None

            logger.info(
                f"Move {move} detected ({moving.symbol}"
                f"{'x' + captured.symbol if captured else ''})"
            )

            advanced = self._stable.advance(pending.from_square, pending.to_square, moving)
            self._stable = advanced.with_board(self._current.board.copy())
            self._current = advanced.with_board(self._current.board)

            self._clear_pending()
            self._emit(MoveDetected(move, pending.from_square, pending.to_square, moving, captured))
            self._emit(HighlightSquares(tuple(_names((pending.from_square, pending.to_square)))))
            return

        if self._pending_capture:
            logger.debug("Partial capture detected, waiting for next update")
            return

        logger.info("No valid move detected, resetting state")
        self._clear_pending()

    def _unresolved(self):
        if self.config.rebaseline_on_unresolved:
            self._set_stable_baseline("unresolved interaction")

    def _set_stable_baseline(self, reason: str):
        self._stable = self._current.copy()
        self._clear_pending()
        white, black = piece_counts(self._stable.board)
        logger.info(f"Set current board as stable baseline ({reason}): {white} white, {black} black pieces")

    def _clear_pending(self):
        self._state = TrackerState.IDLE
        self._pending = PendingMove()
        self._pending_capture: List[int] = []
        self._first_removed: Optional[Tuple[int, PieceCode]] = None

    def _emit(self, event: Event):
        self._emitted.append(event)
        self._events.append(event)
        for callback in self._listeners:
            callback(event)
