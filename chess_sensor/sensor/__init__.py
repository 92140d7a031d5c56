"""
Sensor frame module: decoding raw snapshots and replaying recorded sessions.
"""

from chess_sensor.sensor.decoder import FRAME_SIZE, decode_frame, encode_frame
from chess_sensor.sensor.source import SnapshotSource, HexFileSource

__all__ = [
    'FRAME_SIZE',
    'decode_frame',
    'encode_frame',
    'SnapshotSource',
    'HexFileSource',
]
