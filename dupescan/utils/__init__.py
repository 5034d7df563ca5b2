"""
Utilities package for DupeScan.

Provides:
- formatters: Human-readable formatting and grid parsing
- exporters: Export duplicate groups to files
"""

from __future__ import annotations

from . import formatters
from . import exporters

from .formatters import format_number, format_duration, parse_grid
from .exporters import export_results

__all__ = [
    # Submodules
    'formatters',
    'exporters',
    # Formatters
    'format_number',
    'format_duration',
    'parse_grid',
    # Exporters
    'export_results',
]
