"""
Export functionality for DupeScan.

Writes duplicate groups to TXT (the plain block report) or CSV.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TextIO

from ..config import REPORT_HEADER
from ..models import DuplicateGroup


def _export_txt(groups: list[DuplicateGroup], file_handle: TextIO) -> None:
    """
    Write one block per group.

    Each block is a ``Duplicate images:`` header line, one path per line,
    then a blank separator line.
    """
    for group in groups:
        file_handle.write(f"{REPORT_HEADER}\n")
        for path in group.paths:
            file_handle.write(f"{path}\n")
        file_handle.write("\n")


def _export_csv(groups: list[DuplicateGroup], file_handle: TextIO) -> None:
    """
    Write one row per group member.

    Columns: group_id, fingerprint, path
    """
    writer = csv.writer(file_handle, lineterminator="\n")
    writer.writerow(['group_id', 'fingerprint', 'path'])
    for group in groups:
        for path in group.paths:
            writer.writerow([group.id, group.fingerprint, path])


def export_results(
    groups: list[DuplicateGroup],
    output_path: str | Path,
    export_format: str = 'txt',
) -> None:
    """
    Export duplicate groups to a file.

    Args:
        groups: Duplicate groups, in report order
        output_path: Path to output file
        export_format: Export format ('txt' or 'csv'). Default: 'txt'

    Raises:
        ValueError: If export_format is not 'txt' or 'csv'
        OSError: If file cannot be written
    """
    if export_format not in ('txt', 'csv'):
        raise ValueError(f"Unsupported export format: {export_format}. Use 'txt' or 'csv'.")

    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        if export_format == 'txt':
            _export_txt(groups, f)
        else:
            _export_csv(groups, f)


__all__ = ['export_results']
