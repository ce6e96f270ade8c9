"""
Shared utilities for the payload domain model.

Modules
-------
timestamps
    Seconds-or-milliseconds timestamp resolution, interval durations and
    injectable clocks
"""

__all__ = []
