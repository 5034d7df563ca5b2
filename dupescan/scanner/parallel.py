"""
Parallel processing module for the scanner package.

Provides the bounded fingerprinting worker pool. Work is submitted
through a fixed-size in-flight window rather than one future per file,
so memory stays bounded on very large trees.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_COMPLETED
from typing import Optional, Callable, Sequence

from ..config import DEFAULT_WORKERS, DEFAULT_GRID_WIDTH, DEFAULT_GRID_HEIGHT, MAX_PENDING_PER_WORKER
from ..errors import DecodeFailure, DupeScanError
from ..models import ScanFailure
from ..progress import ScanProgress, ProgressSnapshot
from .deduplication import HashBuckets
from .hashing import Decoder, load_image, fingerprint_file, validate_grid

logger = logging.getLogger(__name__)


def fingerprint_images_parallel(
    filepaths: Sequence[str],
    max_workers: int = DEFAULT_WORKERS,
    decoder: Decoder = load_image,
    grid_width: int = DEFAULT_GRID_WIDTH,
    grid_height: int = DEFAULT_GRID_HEIGHT,
    progress: Optional[ScanProgress] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    stop_event: Optional[threading.Event] = None,
) -> tuple[HashBuckets, list[ScanFailure], bool]:
    """
    Fingerprint images in parallel and bucket them by fingerprint.

    Each worker decodes one file, fingerprints it, appends the path to its
    bucket and advances progress. A failing file is recorded and skipped;
    it never cancels sibling work. The call returns only once every
    submitted unit has finished.

    Args:
        filepaths: Image paths to fingerprint (the progress denominator)
        max_workers: Number of parallel workers
        decoder: Callable turning a path into a decoded PIL image
        grid_width: Fingerprint grid width
        grid_height: Fingerprint grid height
        progress: Optional shared ScanProgress (created if omitted)
        progress_callback: Optional callback(completed, total)
        stop_event: Optional cooperative stop signal, checked between
            submissions

    Returns:
        Tuple of (HashBuckets, failures sorted by path, cancelled flag)
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")
    validate_grid(grid_width, grid_height)

    progress = progress or ScanProgress()
    buckets = HashBuckets()
    failures: list[ScanFailure] = []
    failures_lock = threading.Lock()

    def record_failure(failure: ScanFailure) -> None:
        with failures_lock:
            failures.append(failure)

    def process_one(path: str) -> None:
        try:
            fingerprint = fingerprint_file(path, decoder, grid_width, grid_height)
        except DupeScanError as e:
            logger.debug(f"Skipping {path} ({e.kind}): {e.reason}")
            record_failure(ScanFailure.from_error(e))
        except Exception as e:
            logger.debug(f"Skipping {path}: unexpected error {e!r}")
            record_failure(ScanFailure.from_error(DecodeFailure(path, f"Unexpected error: {e}")))
        else:
            buckets.add(fingerprint, path)
        finally:
            progress.advance()

    listener = None
    if progress_callback is not None:
        def listener(snapshot: ProgressSnapshot) -> None:
            progress_callback(snapshot.completed, snapshot.total or 0)
        progress.subscribe(listener)

    max_pending = max_workers * MAX_PENDING_PER_WORKER
    start = time.perf_counter()

    try:
        progress.start(len(filepaths))
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="dupescan-hash") as executor:
            path_iter = iter(filepaths)
            active: set = set()

            while True:
                # Fill the window
                while len(active) < max_pending:
                    if stop_event is not None and stop_event.is_set():
                        break
                    try:
                        path = next(path_iter)
                    except StopIteration:
                        break
                    active.add(executor.submit(process_one, path))

                if not active:
                    break

                done, active = wait(active, return_when=FIRST_COMPLETED)
                for future in done:
                    # process_one records its own errors; anything else is a bug
                    future.result()
    finally:
        if listener is not None:
            progress.unsubscribe(listener)

    processed = progress.snapshot().completed
    cancelled = processed < len(filepaths)
    if cancelled:
        logger.warning(
            f"Scan stopped early: {processed:,} of {len(filepaths):,} images processed"
        )

    failures.sort(key=lambda f: f.path)
    logger.info(
        f"Image processing took {time.perf_counter() - start:.2f}s "
        f"({processed - len(failures):,} fingerprinted, {len(failures)} failed)"
    )
    return buckets, failures, cancelled


__all__ = ['fingerprint_images_parallel']
