"""
Snapshot sources.

A source yields raw frames in arrival order. Live transports (Bluetooth,
serial) live outside this package and only need to implement frames();
HexFileSource replays a recorded session.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class SnapshotSource(ABC):
    """
    Abstract base class for anything that produces snapshot frames.

    Frames are yielded unvalidated; MoveTracker.submit_snapshot() rejects
    malformed ones.
    """

    @abstractmethod
    def frames(self) -> Iterator[bytes]:
        """
        Yield raw snapshot frames in arrival order.

        Raises:
            NotImplementedError: If subclass doesn't implement this method
        """
        pass

    def __iter__(self) -> Iterator[bytes]:
        return self.frames()


class HexFileSource(SnapshotSource):
    """
    Recorded session: one frame per line, hex encoded.

    Whitespace inside a line is ignored, so both "01ab..." and "01 ab ..."
    are accepted. Blank lines and lines starting with '#' are skipped.
    """

    def __init__(self, path: Path):
        """
        Args:
            path: Path to the recording

        Raises:
            FileNotFoundError: If the recording doesn't exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Recording not found: {path}")
        self.path = path

    def frames(self) -> Iterator[bytes]:
        """
        Yield decoded frame bytes line by line.

        Raises:
            ValueError: If a line is not valid hex
        """
        logger.info(f"Replaying recording: {self.path}")
        count = 0

        with open(self.path, "r", encoding="utf-8") as recording:
            for line_number, line in enumerate(recording, start=1):
                text = line.strip()
                if not text or text.startswith("#"):
                    continue

                try:
                    frame = bytes.fromhex(text)
                except ValueError as e:
                    raise ValueError(f"{self.path}:{line_number}: invalid hex frame ({e})") from e

                count += 1
                yield frame

        logger.info(f"Read {count} frames from {self.path}")

    def count_frames(self) -> int:
        """Number of frame lines in the recording, without decoding them."""
        with open(self.path, "r", encoding="utf-8") as recording:
            return sum(1 for line in recording if line.strip() and not line.strip().startswith("#"))
