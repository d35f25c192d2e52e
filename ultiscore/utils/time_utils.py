"""
Utility functions for the Ultimate sideline scorekeeper.

This module contains common time helpers used throughout the application.
"""
import time
from datetime import datetime


def fmt_mmss(seconds: int) -> str:
    """
    Format seconds as MM:SS string.

    Negative values are rendered with a leading minus sign so an overrun
    clock can still be displayed.

    Args:
        seconds: Number of seconds to format

    Returns:
        Formatted time string in MM:SS format

    Example:
        >>> fmt_mmss(90)
        '01:30'
        >>> fmt_mmss(-75)
        '-01:15'
    """
    sign = "-" if seconds < 0 else ""
    seconds = abs(int(seconds))
    m = seconds // 60
    s = seconds % 60
    return f"{sign}{m:02d}:{s:02d}"


def now_ts() -> float:
    """
    Get current timestamp in epoch seconds.

    Returns:
        Current time as floating point epoch seconds
    """
    return time.time()


def fmt_timestamp(ts: float) -> str:
    """Format an epoch timestamp as local ``YYYY-MM-DD HH:MM:SS``."""
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def fmt_date(ts: float) -> str:
    """Format an epoch timestamp as a local ``YYYY-MM-DD`` date."""
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d")
