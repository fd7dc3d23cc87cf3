"""Adaptive 30-day workout planner with carry-over and cycle-level difficulty adaptation."""

__version__ = "0.1.0"
