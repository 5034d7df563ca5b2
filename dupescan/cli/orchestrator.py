"""
CLI workflow orchestration for DupeScan.

Provides the CLIOrchestrator class that coordinates the CLI workflow from
argument parsing through scanning, reporting and export.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..models import ScanResult
from ..progress import ScanProgress, ProgressSnapshot
from ..scanner import find_duplicates, extract_duplicate_groups, has_tqdm
from ..scanner.dependencies import _tqdm_class
from ..user_config import UserConfig
from ..utils.exporters import export_results
from .arg_parser import parse_arguments
from .reporting import print_duplicate_report


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class ProgressBar:
    """tqdm bar fed by ScanProgress notifications."""

    def __init__(self):
        self._pbar: Optional[Any] = None

    def __call__(self, snapshot: ProgressSnapshot) -> None:
        if snapshot.total is None or _tqdm_class is None:
            return
        if self._pbar is None:
            self._pbar = _tqdm_class(
                total=snapshot.total,
                desc="Fingerprinting",
                unit="img",
                ncols=80,
            )
        self._pbar.n = snapshot.completed
        self._pbar.refresh()

    def close(self) -> None:
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None


class CLIOrchestrator:
    """
    Orchestrates the CLI scanning workflow.

    Manages the lifecycle from argument parsing through scanning,
    reporting and export.
    """

    def __init__(self, argv=None):
        """Initialize the orchestrator."""
        self.argv = argv
        self.logger: Optional[logging.Logger] = None
        self.args = None
        self.user_config: Optional[UserConfig] = None
        self.progress = ScanProgress()
        self.result: Optional[ScanResult] = None
        self.groups = []

    def run(self) -> int:
        """
        Execute the complete CLI workflow.

        Returns:
            Exit code (0 for success, 1 for error)
        """
        self._setup_phase()

        exit_code = self._validate_phase()
        if exit_code != 0:
            return exit_code

        self._configure_phase()

        exit_code = self._scan_phase()
        if exit_code != 0:
            return exit_code

        self._report_phase()
        return self._export_phase()

    def _setup_phase(self) -> None:
        """Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

    def _validate_phase(self) -> int:
        """Check that the target is an existing directory."""
        if not self.args.directory.exists():
            self.logger.error(f"Directory not found: {self.args.directory}")
            return 1
        if not self.args.directory.is_dir():
            self.logger.error(f"Not a directory: {self.args.directory}")
            return 1
        return 0

    def _configure_phase(self) -> None:
        """Load user config and decide whether to show a progress bar."""
        self.user_config = UserConfig(self.args.config_dir)

        self.show_progress = not self.args.no_progress
        if self.show_progress and not has_tqdm():
            self.logger.debug("tqdm not installed - progress bar disabled")
            self.show_progress = False

    def _scan_phase(self) -> int:
        """Run the scan, with a progress bar if enabled."""
        grid_width, grid_height = self.args.grid or (None, None)
        bar = ProgressBar() if self.show_progress else None
        if bar is not None:
            self.progress.subscribe(bar)

        try:
            self.result = find_duplicates(
                self.args.directory,
                workers=self.args.workers,
                max_concurrent_dirs=self.args.max_open_dirs,
                grid_width=grid_width,
                grid_height=grid_height,
                follow_symlinks=self.args.follow_symlinks,
                progress=self.progress,
                user_config=self.user_config,
            )
        except ValueError as e:
            self.logger.error(f"Invalid scan settings: {e}")
            return 1
        finally:
            if bar is not None:
                self.progress.unsubscribe(bar)
                bar.close()

        self.groups = extract_duplicate_groups(self.result.buckets)
        return 0

    def _report_phase(self) -> None:
        """Print the duplicate report."""
        print_duplicate_report(
            self.result,
            self.groups,
            self.logger,
            show_failures=self.args.verbose,
        )

    def _export_phase(self) -> int:
        """Write the report file if requested."""
        if not self.args.output:
            return 0
        try:
            export_results(self.groups, self.args.output, self.args.export_format)
        except OSError as e:
            self.logger.error(f"Cannot write report to {self.args.output}: {e}")
            return 1
        self.logger.info(f"Results exported to: {self.args.output}")
        return 0


__all__ = ['CLIOrchestrator', 'ProgressBar', 'setup_logging']
