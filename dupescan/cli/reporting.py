"""
Report formatting and display for the CLI interface.
"""

from __future__ import annotations

import logging

from ..config import REPORT_HEADER
from ..models import DuplicateGroup, ScanResult
from ..utils.formatters import format_number, format_duration


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def print_duplicate_report(
    result: ScanResult,
    groups: list[DuplicateGroup],
    logger: logging.Logger,
    show_failures: bool = False,
) -> None:
    """
    Print duplicate groups and a scan summary.

    Args:
        result: The finished scan
        groups: Duplicate groups extracted from ``result``
        logger: Logger for summary lines
        show_failures: Also list every failed path
    """
    if groups:
        _print_section_header(f"DUPLICATES ({format_number(len(groups))} groups)")
        for group in groups:
            print(REPORT_HEADER)
            for path in group.paths:
                print(path)
            print()
    else:
        logger.info("No duplicate images found.")

    if result.failures:
        logger.warning(f"{format_number(len(result.failures))} path(s) could not be processed")
        if show_failures:
            _print_section_header("FAILURES")
            for failure in result.failures:
                print(f"  [{failure.kind}] {failure.path}: {failure.reason}")

    logger.info(
        f"Scanned {format_number(result.total_files)} images in "
        f"{format_duration(result.elapsed_seconds)}; "
        f"{format_number(sum(g.image_count for g in groups))} files in "
        f"{format_number(len(groups))} duplicate groups"
    )


__all__ = ['print_duplicate_report']
