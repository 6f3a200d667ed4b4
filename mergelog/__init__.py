"""Merge per-change markdown fragments into a single changelog."""

__version__ = "0.1.0"
