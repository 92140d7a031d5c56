"""
Main entry point for running the board host.

Usage:
    python -m chess_sensor.host
"""

from chess_sensor.host.interface import main

if __name__ == "__main__":
    main()
