"""
DupeScan
========
Find duplicate images in a directory tree.

Features:
- Concurrent recursive discovery with a bounded number of open directories
- Difference-hash fingerprints normalized to a fixed grid
  (resolution-independent)
- Bounded worker pool with thread-safe bucket aggregation
- Live, thread-safe progress reporting
- Deterministic duplicate groups and a plain-text report
"""

__version__ = "1.0.0"

from .models import ScanFailure, DuplicateGroup, ScanResult
from .progress import ScanProgress, ProgressSnapshot
from .errors import DupeScanError, DirectoryUnreadable, DecodeFailure, FingerprintFailure
from .config import IMAGE_EXTENSIONS, MAX_CONCURRENT_DIRS, DEFAULT_WORKERS
from .scanner import (
    is_candidate_image,
    walk_directory,
    find_image_files,
    compute_dhash,
    fingerprint_file,
    find_duplicates,
    extract_duplicate_groups,
)

__all__ = [
    "ScanFailure",
    "DuplicateGroup",
    "ScanResult",
    "ScanProgress",
    "ProgressSnapshot",
    "DupeScanError",
    "DirectoryUnreadable",
    "DecodeFailure",
    "FingerprintFailure",
    "IMAGE_EXTENSIONS",
    "MAX_CONCURRENT_DIRS",
    "DEFAULT_WORKERS",
    "is_candidate_image",
    "walk_directory",
    "find_image_files",
    "compute_dhash",
    "fingerprint_file",
    "find_duplicates",
    "extract_duplicate_groups",
]
