"""
Formatting utilities for DupeScan.

Provides human-readable formatting for counts and durations.
"""

from __future__ import annotations


def format_number(n: int) -> str:
    """
    Format large numbers with commas for readability.

    Examples:
        >>> format_number(1000)
        '1,000'
        >>> format_number(1234567)
        '1,234,567'
    """
    return f"{n:,}"


def format_duration(seconds: float) -> str:
    """
    Format seconds into a short human-readable duration.

    Examples:
        >>> format_duration(0.25)
        '0.25s'
        >>> format_duration(150)
        '2m 30s'
        >>> format_duration(3665)
        '1h 1m'
    """
    if seconds < 60:
        return f"{seconds:.2f}s"
    elif seconds < 3600:
        return f"{int(seconds / 60)}m {int(seconds % 60)}s"
    else:
        hours = int(seconds / 3600)
        minutes = int((seconds % 3600) / 60)
        return f"{hours}h {minutes}m"


def parse_grid(value: str) -> tuple[int, int]:
    """
    Parse a ``WIDTHxHEIGHT`` grid string.

    Raises:
        ValueError: If the value is malformed or out of range

    Examples:
        >>> parse_grid('9x8')
        (9, 8)
    """
    parts = value.lower().split('x')
    if len(parts) != 2:
        raise ValueError(f"Expected WIDTHxHEIGHT, got {value!r}")
    width, height = (int(p) for p in parts)
    if width < 2 or height < 1:
        raise ValueError(f"Grid must be at least 2x1, got {value!r}")
    return width, height


__all__ = ['format_number', 'format_duration', 'parse_grid']
