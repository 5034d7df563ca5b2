"""
Pipeline orchestration for the scanner package.

Ties discovery, fingerprinting and aggregation together into a single
scan of one directory tree.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Optional, Callable

from ..models import ScanResult
from ..progress import ScanProgress
from ..user_config import UserConfig, get_user_config
from .file_discovery import find_image_files
from .dependencies import set_max_image_pixels
from .hashing import Decoder, load_image, validate_grid
from .parallel import fingerprint_images_parallel

logger = logging.getLogger(__name__)


def find_duplicates(
    root: str | Path,
    workers: Optional[int] = None,
    max_concurrent_dirs: Optional[int] = None,
    grid_width: Optional[int] = None,
    grid_height: Optional[int] = None,
    follow_symlinks: Optional[bool] = None,
    max_image_pixels: Optional[int] = None,
    decoder: Decoder = load_image,
    progress: Optional[ScanProgress] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    stop_event: Optional[threading.Event] = None,
    user_config: Optional[UserConfig] = None,
) -> ScanResult:
    """
    Scan a directory tree and bucket its images by fingerprint.

    Discovery runs to completion first so the progress denominator is
    known before any fingerprinting starts. Directory and per-file errors
    are collected into ``ScanResult.failures``; nothing aborts the scan,
    including an unreadable root (empty result plus one failure).

    Settings left as None come from the user config file, then from the
    defaults in dupescan.config.

    Args:
        root: Directory to scan
        workers: Fingerprinting worker count
        max_concurrent_dirs: Directories listed at the same time
        grid_width: Fingerprint grid width
        grid_height: Fingerprint grid height
        follow_symlinks: Descend into symlinked directories
        max_image_pixels: Pillow decompression bomb limit applied for the
            scan (0 disables the check)
        decoder: Callable turning a path into a decoded PIL image
        progress: Optional ScanProgress shared with a display
        progress_callback: Optional callback(completed, total)
        stop_event: Optional cooperative stop signal
        user_config: Config source (defaults to the global instance)

    Returns:
        ScanResult with buckets, final progress and failures

    Raises:
        ValueError: If a setting is out of range
    """
    config = user_config or get_user_config()
    workers = workers if workers is not None else config.workers
    max_concurrent_dirs = max_concurrent_dirs if max_concurrent_dirs is not None else config.max_concurrent_dirs
    grid_width = grid_width if grid_width is not None else config.grid_width
    grid_height = grid_height if grid_height is not None else config.grid_height
    follow_symlinks = follow_symlinks if follow_symlinks is not None else config.follow_symlinks
    max_image_pixels = max_image_pixels if max_image_pixels is not None else config.max_image_pixels

    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    if max_concurrent_dirs < 1:
        raise ValueError(f"max_concurrent_dirs must be >= 1, got {max_concurrent_dirs}")
    validate_grid(grid_width, grid_height)
    if max_image_pixels < 0:
        raise ValueError(f"max_image_pixels must be >= 0, got {max_image_pixels}")

    # Pillow keeps this limit process-wide
    set_max_image_pixels(max_image_pixels or None)

    progress = progress or ScanProgress()
    start = time.perf_counter()
    logger.info(f"Starting to find duplicates in directory: {root}")

    image_paths, dir_failures = find_image_files(
        root,
        max_concurrent=max_concurrent_dirs,
        follow_symlinks=follow_symlinks,
    )
    logger.info(f"Found {len(image_paths):,} image(s) to process")

    buckets, file_failures, cancelled = fingerprint_images_parallel(
        image_paths,
        max_workers=workers,
        decoder=decoder,
        grid_width=grid_width,
        grid_height=grid_height,
        progress=progress,
        progress_callback=progress_callback,
        stop_event=stop_event,
    )

    result = ScanResult(
        buckets=buckets.as_dict(),
        progress=progress.value,
        failures=sorted(dir_failures + file_failures, key=lambda f: (f.path, f.kind)),
        total_files=len(image_paths),
        cancelled=cancelled,
        elapsed_seconds=time.perf_counter() - start,
    )
    logger.info(
        f"Total time for finding duplicates: {result.elapsed_seconds:.2f}s "
        f"({len(result.buckets):,} distinct fingerprints)"
    )
    return result


__all__ = ['find_duplicates']
