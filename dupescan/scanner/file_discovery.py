"""
File discovery module for the scanner package.

Provides the candidate-image predicate and a concurrent recursive
directory walker. Traversal is driven by an explicit work-list of pending
directories consumed by a small thread pool; an admission gate bounds how
many directories are being listed at the same time.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, Optional, Union

from ..config import IMAGE_EXTENSIONS, MAX_CONCURRENT_DIRS
from ..errors import DirectoryUnreadable
from ..models import ScanFailure

logger = logging.getLogger(__name__)

WalkItem = Union[str, DirectoryUnreadable]


def is_candidate_image(path: str | Path) -> bool:
    """
    Check whether a path names a supported image file.

    Only the name is inspected; the file is never opened.

    Args:
        path: File path or bare file name

    Returns:
        True if the extension (case-insensitive) is in IMAGE_EXTENSIONS
    """
    ext = os.path.splitext(os.fspath(path))[1].lower()
    return ext in IMAGE_EXTENSIONS


class AdmissionGate:
    """
    Counting permit pool bounding concurrent directory listings.

    Callers that cannot get a permit block until one is released. Tracks
    the number of active holders and the peak reached, for diagnostics.
    """

    def __init__(self, permits: int = MAX_CONCURRENT_DIRS):
        if permits < 1:
            raise ValueError(f"permits must be >= 1, got {permits}")
        self.permits = permits
        self._semaphore = threading.BoundedSemaphore(permits)
        self._lock = threading.Lock()
        self._active = 0
        self._peak = 0

    def acquire(self) -> None:
        self._semaphore.acquire()
        with self._lock:
            self._active += 1
            self._peak = max(self._peak, self._active)

    def release(self) -> None:
        with self._lock:
            self._active -= 1
        self._semaphore.release()

    def __enter__(self) -> 'AdmissionGate':
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def active(self) -> int:
        with self._lock:
            return self._active

    @property
    def peak(self) -> int:
        with self._lock:
            return self._peak


def _list_directory(directory: str, follow_symlinks: bool) -> tuple[list[str], list[str]]:
    """
    List one directory level.

    Returns:
        (candidate image paths, subdirectory paths)

    Raises:
        OSError: If the directory cannot be opened or read
    """
    files: list[str] = []
    subdirs: list[str] = []
    with os.scandir(directory) as it:
        for entry in it:
            try:
                if entry.is_dir(follow_symlinks=follow_symlinks):
                    subdirs.append(entry.path)
                elif entry.is_file() and is_candidate_image(entry.name):
                    files.append(entry.path)
            except OSError as e:
                # Entry vanished or cannot be stat'ed; skip just this entry
                logger.debug(f"Skipping {entry.path}: {e}")
    return files, subdirs


class DirectoryWalker:
    """
    Concurrent recursive directory walker.

    Each pending directory becomes one listing task on a thread pool. A
    task holds an admission-gate permit while it lists its directory and
    releases it as soon as the listing is done. Subdirectories found by a
    task go back to the consumer, which schedules them; this keeps the
    work-list and the pending count in a single thread.

    A walker object can be iterated once. Errors for a subtree are yielded
    in-band as DirectoryUnreadable and do not stop sibling subtrees.
    """

    def __init__(
        self,
        root: str | Path,
        max_concurrent: int = MAX_CONCURRENT_DIRS,
        gate: Optional[AdmissionGate] = None,
        follow_symlinks: bool = False,
    ):
        self.root = os.fspath(root)
        self.gate = gate or AdmissionGate(max_concurrent)
        self.follow_symlinks = follow_symlinks
        self.directories_visited = 0
        self._consumed = False

    def __iter__(self) -> Iterator[WalkItem]:
        if self._consumed:
            raise RuntimeError("DirectoryWalker can only be iterated once; create a new walker to re-scan")
        self._consumed = True
        return self._walk()

    def _list_task(self, directory: str, results: queue.Queue) -> None:
        start = time.perf_counter()
        try:
            with self.gate:
                files, subdirs = _list_directory(directory, self.follow_symlinks)
        except OSError as e:
            results.put((directory, None, [], DirectoryUnreadable(directory, str(e))))
            return
        except Exception as e:
            results.put((directory, None, [], DirectoryUnreadable(directory, f"Unexpected error: {e}")))
            return
        logger.debug(
            f"Scanned directory: {directory} ({len(files)} images, "
            f"{len(subdirs)} subdirectories) in {time.perf_counter() - start:.3f}s"
        )
        results.put((directory, files, subdirs, None))

    def _walk(self) -> Iterator[WalkItem]:
        results: queue.Queue = queue.Queue()
        seen: set[str] = set()
        pending = 0

        executor = ThreadPoolExecutor(
            max_workers=self.gate.permits,
            thread_name_prefix="dupescan-walk",
        )

        def schedule(directory: str) -> None:
            nonlocal pending
            if self.follow_symlinks:
                real = os.path.realpath(directory)
                if real in seen:
                    logger.debug(f"Skipping already visited directory: {directory}")
                    return
                seen.add(real)
            pending += 1
            executor.submit(self._list_task, directory, results)

        try:
            schedule(self.root)
            while pending:
                directory, files, subdirs, error = results.get()
                pending -= 1
                self.directories_visited += 1

                if error is not None:
                    logger.warning(f"Cannot read directory {directory}: {error.reason}")
                    yield error
                    continue

                for subdir in subdirs:
                    schedule(subdir)
                yield from files
        finally:
            executor.shutdown(wait=True, cancel_futures=True)


def walk_directory(
    root: str | Path,
    max_concurrent: int = MAX_CONCURRENT_DIRS,
    gate: Optional[AdmissionGate] = None,
    follow_symlinks: bool = False,
) -> Iterator[WalkItem]:
    """
    Recursively enumerate candidate images under ``root``.

    Args:
        root: Directory to walk
        max_concurrent: Directories listed at the same time (ignored if gate given)
        gate: Optional shared AdmissionGate
        follow_symlinks: Descend into symlinked directories (each real
            directory is still visited once)

    Yields:
        Image paths as strings, or DirectoryUnreadable for subtrees that
        could not be listed
    """
    return iter(DirectoryWalker(root, max_concurrent, gate, follow_symlinks))


def find_image_files(
    root: str | Path,
    max_concurrent: int = MAX_CONCURRENT_DIRS,
    follow_symlinks: bool = False,
) -> tuple[list[str], list[ScanFailure]]:
    """
    Find all candidate image files under ``root``.

    Args:
        root: Directory path to search for images
        max_concurrent: Directories listed at the same time
        follow_symlinks: Descend into symlinked directories

    Returns:
        Tuple of (sorted image paths, directory failures sorted by path)
    """
    start = time.perf_counter()
    images: list[str] = []
    failures: list[ScanFailure] = []

    for item in walk_directory(root, max_concurrent=max_concurrent, follow_symlinks=follow_symlinks):
        if isinstance(item, DirectoryUnreadable):
            failures.append(ScanFailure.from_error(item))
        else:
            images.append(item)

    images.sort()
    failures.sort(key=lambda f: f.path)
    logger.info(
        f"Directory scanning took {time.perf_counter() - start:.2f}s "
        f"({len(images):,} images, {len(failures)} unreadable directories)"
    )
    return images, failures


__all__ = [
    'is_candidate_image',
    'AdmissionGate',
    'DirectoryWalker',
    'walk_directory',
    'find_image_files',
]
