"""
Board Host Protocol

Line-oriented interface between a board transport and the move tracker.
A transport (Bluetooth bridge, serial reader, recorded session) writes
frames to stdin as hex; the host answers with moves and LED hints on
stdout, one per line.

Commands:
    - frame <hex>: Submit a 32-byte snapshot (64 hex digits, spaces allowed)
    - baseline: Accept the current board as settled
    - newgame: Forget everything, next frame becomes the baseline
    - fen: Print the current position
    - board: Print the current board as text
    - state: Print tracker state and pending squares
    - isready: Synchronization check
    - quit: Exit

Output:
    move e2e4
    highlight e2 e4
    highlight            (all lights off)
    fen <FEN>

Errors are reported on stderr as '# ...' and never stop the loop; a bad
frame is dropped and the tracker keeps its state.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from chess_sensor.board.representation import render_ascii
from chess_sensor.board.squares import square_name
from chess_sensor.errors import ChessSensorError
from chess_sensor.tracking.classifier import MoveTracker
from chess_sensor.tracking.config import TrackerConfig, fischer_options, parse_rook_files
from chess_sensor.tracking.events import Event, HighlightSquares, MoveDetected

DEFAULT_LOG_DIR = Path.home() / ".bluenut"


def setup_logger(debug=True, log_dir: Optional[Path] = None):
    """
    Setup file-based logger for host debugging.

    Args:
        debug: If True, log at DEBUG level; otherwise INFO level
        log_dir: Directory for tracker.log (default: ~/.bluenut)

    Returns:
        Configured logger instance
    """
    log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "tracker.log"

    logger = logging.getLogger("chess_sensor")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    logger.handlers.clear()

    handler = logging.FileHandler(log_file, mode='w')
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


class BoardHost:
    """
    Command loop feeding frames into a MoveTracker.

    Attributes:
        tracker: Move tracker receiving the frames
        frames_received: Number of frames accepted
        frames_rejected: Number of malformed frames dropped

    Methods:
        run: Main command loop
        handle_frame: Submit a hex frame
        handle_baseline: Force a stable baseline
        handle_newgame: Reset the tracker
        handle_fen: Print the current FEN
        handle_board: Print the current board
        handle_state: Print the tracker state
        handle_isready: Respond to 'isready'
    """

    def __init__(self, tracker: Optional[MoveTracker] = None, debug=True, log_dir: Optional[Path] = None):
        """
        Initialize the host.

        Args:
            tracker: Move tracker (default: MoveTracker with default config)
            debug: Enable debug logging (default: True)
            log_dir: Directory for the log file (default: ~/.bluenut)
        """
        self.tracker = tracker if tracker else MoveTracker()
        self.tracker.subscribe(self._on_event)

        self.frames_received = 0
        self.frames_rejected = 0

        self.logger = setup_logger(debug=debug, log_dir=log_dir)
        self.logger.info("=== BlueNut Host Started ===")

    def run(self):
        """
        Main command loop.

        Reads commands from stdin until 'quit' or EOF.
        """
        while True:
            try:
                command = input().strip()
            except EOFError:
                self.logger.info("EOF received, shutting down")
                break

            if not command:
                continue

            if not self.handle_command(command):
                break

        self.logger.info(
            f"=== BlueNut Host Stopped: {self.frames_received} frames, "
            f"{self.frames_rejected} rejected ==="
        )

    def handle_command(self, command: str) -> bool:
        """
        Dispatch a single command line.

        Returns:
            False when the loop should stop, True otherwise
        """
        self.logger.debug(f">>> {command[:80]}")

        tokens = command.split()
        cmd = tokens[0].lower()

        if cmd == "frame":
            self.handle_frame(tokens)
        elif cmd == "baseline":
            self.handle_baseline()
        elif cmd == "newgame":
            self.handle_newgame()
        elif cmd == "fen":
            self.handle_fen()
        elif cmd == "board":
            self.handle_board()
        elif cmd == "state":
            self.handle_state()
        elif cmd == "isready":
            self.handle_isready()
        elif cmd == "quit":
            self.logger.info("Handling: quit")
            return False
        else:
            self.logger.debug(f"Unknown command ignored: {command}")

        return True

    def handle_frame(self, tokens: List[str]):
        """
        Handle 'frame <hex>' - decode and submit a snapshot.

        Args:
            tokens: Command tokens (e.g., ['frame', '58', '23', ...])
        """
        hex_text = "".join(tokens[1:])
        try:
            data = bytes.fromhex(hex_text)
            self.tracker.submit_snapshot(data)
        except (ValueError, ChessSensorError) as e:
            self.frames_rejected += 1
            self.logger.warning(f"Frame rejected: {e}")
            print(f"# Invalid frame: {e}", file=sys.stderr)
            return

        self.frames_received += 1

        # Events were already printed by the subscriber
        self.tracker.poll_events()

    def handle_baseline(self):
        """Handle 'baseline' - accept the current board as settled."""
        self.logger.info("Handling: baseline")
        self.tracker.force_stable_baseline()

    def handle_newgame(self):
        """Handle 'newgame' - forget all state."""
        self.logger.info("Handling: newgame - resetting tracker")
        self.tracker.reset()

    def handle_fen(self):
        """Handle 'fen' - print the current position."""
        fen = self.tracker.export_position()
        self._send(f"fen {fen}")

    def handle_board(self):
        """Handle 'board' - print the current board as text."""
        for line in render_ascii(self.tracker.current.board).splitlines():
            self._send(line)

    def handle_state(self):
        """Handle 'state' - print tracker state and pending squares."""
        pending = self.tracker.pending_capture_squares
        parts = [f"state {self.tracker.state.name.lower()}"]
        if pending:
            parts.append("pending " + " ".join(square_name(sq) for sq in pending))
        self._send(" ".join(parts))

    def handle_isready(self):
        """Handle 'isready' - synchronization."""
        self._send("readyok")

    def _on_event(self, event: Event):
        if isinstance(event, MoveDetected):
            self._send(f"move {event.move}")
        elif isinstance(event, HighlightSquares):
            self._send(" ".join(("highlight",) + event.squares))

    def _send(self, line: str):
        print(line)
        sys.stdout.flush()
        self.logger.debug(f"<<< {line}")


def main(argv: Optional[List[str]] = None):
    """Entry point for 'python -m chess_sensor.host'."""
    parser = argparse.ArgumentParser(description="Feed sensor board frames to the move tracker")
    parser.add_argument("--quiet", action="store_true", help="Log at INFO instead of DEBUG")
    parser.add_argument("--log-dir", type=str, default=None, help="Directory for tracker.log")
    parser.add_argument(
        "--rebaseline-on-unresolved",
        action="store_true",
        help="Rebaseline when a capture or castle cannot be resolved",
    )
    parser.add_argument(
        "--chess960",
        type=parse_rook_files,
        default=None,
        metavar="FILES",
        help="Fischer random game with rooks on these files, queen side first (e.g. bg)",
    )
    args = parser.parse_args(argv)

    config = TrackerConfig(
        rebaseline_on_unresolved=args.rebaseline_on_unresolved,
        **fischer_options(args.chess960),
    )
    tracker = MoveTracker(config)
    host = BoardHost(tracker=tracker, debug=not args.quiet, log_dir=args.log_dir)
    host.run()
