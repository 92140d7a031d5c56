#!/usr/bin/env python3
"""
CLI tool for replaying recorded board sessions through the move tracker.

Usage:
    python tools/replay_session.py session.hex

    python tools/replay_session.py session.hex \\
        --rebaseline-on-unresolved \\
        --output moves.txt \\
        --verbose

A recording holds one 32-byte frame per line as hex. Prints the detected
moves and the final position.
"""

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_sensor.errors import InvalidFrame
from chess_sensor.sensor.source import HexFileSource
from chess_sensor.tracking import MoveDetected, MoveTracker, TrackerConfig
from chess_sensor.tracking.config import fischer_options, parse_rook_files


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def replay(args):
    """Run a recording through a fresh tracker."""
    recording = Path(args.recording)
    if not recording.exists():
        print(f"Error: Recording not found: {recording}")
        sys.exit(1)

    source = HexFileSource(recording)
    tracker = MoveTracker(
        TrackerConfig(
            bulk_reset_threshold=args.bulk_reset_threshold,
            rebaseline_on_unresolved=args.rebaseline_on_unresolved,
            **fischer_options(args.chess960),
        )
    )

    moves = []
    rejected = 0

    for frame in tqdm(source.frames(), total=source.count_frames(), desc="Replaying", unit="frame"):
        try:
            events = tracker.submit_snapshot(frame)
        except InvalidFrame as e:
            rejected += 1
            logging.getLogger(__name__).warning(f"Dropped frame: {e}")
            continue

        for event in events:
            if isinstance(event, MoveDetected):
                moves.append(event.move)

    print(f"\nMoves ({len(moves)}): {' '.join(moves)}")
    print(f"Rejected frames: {rejected}")
    print(f"Final position: {tracker.export_position()}")

    if args.output:
        output_path = Path(args.output)
        output_path.write_text("\n".join(moves) + "\n")
        print(f"Moves written to: {output_path}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Replay a recorded sensor board session and print detected moves",
    )
    parser.add_argument("recording", type=str, help="Hex recording, one frame per line")
    parser.add_argument("--output", type=str, default=None, help="Write moves to this file")
    parser.add_argument(
        "--bulk-reset-threshold",
        type=int,
        default=10,
        help="Changed squares above which a snapshot rebaselines (default: 10)",
    )
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
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args()
    setup_logging(args.verbose)
    replay(args)


if __name__ == "__main__":
    main()
