"""
Unit Tests for the Move Tracker

This package contains unit tests for all chess_sensor components.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_classifier.py

    # Run with coverage
    pytest tests/ --cov=chess_sensor --cov-report=html

    # Run specific test
    pytest tests/test_classifier.py::TestMoveTracker::test_simple_move

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
