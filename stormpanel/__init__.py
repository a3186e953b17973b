"""
stormpanel package
==================

This package turns the NOAA HURDAT2 best-track archive into two analysis
panels: one row per observation, and one row per storm and calendar month.

- The CLI entry point is in `stormpanel/cli.py`.
- The pipeline (source -> headers -> tagger -> decoder -> metrics -> monthly)
  is wired together in `stormpanel/engine.py`.
- Code tables (status, record identifier, category) are in `stormpanel/codes.py`.
"""

__version__ = '0.1.0'
