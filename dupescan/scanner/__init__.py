"""
Scanner package for DupeScan.

Provides concurrent image discovery, difference-hash fingerprinting and
exact-fingerprint duplicate grouping.

Public API:
- is_candidate_image: Extension-based image predicate
- AdmissionGate: Permit pool bounding concurrent directory listings
- walk_directory: Lazy concurrent recursive walk
- find_image_files: Materialized walk (paths + directory failures)
- load_image: Default decoder (Pillow)
- compute_dhash: Fixed-length difference hash of a decoded image
- fingerprint_file: Decode + fingerprint one file
- fingerprint_images_parallel: Bounded worker pool filling hash buckets
- find_duplicates: Full scan of a directory tree
- extract_duplicate_groups: Duplicate groups from a bucket map
"""

from __future__ import annotations

from .file_discovery import (
    is_candidate_image,
    AdmissionGate,
    DirectoryWalker,
    walk_directory,
    find_image_files,
)
from .hashing import (
    Fingerprint,
    load_image,
    compute_dhash,
    fingerprint_file,
    fingerprint_length,
)
from .deduplication import HashBuckets, extract_duplicate_groups
from .parallel import fingerprint_images_parallel
from .pipeline import find_duplicates
from .dependencies import HAS_TQDM


def has_tqdm() -> bool:
    """Check if tqdm progress bars are available."""
    return HAS_TQDM


# Public API exports
__all__ = [
    # File discovery
    'is_candidate_image',
    'AdmissionGate',
    'DirectoryWalker',
    'walk_directory',
    'find_image_files',
    # Fingerprinting
    'Fingerprint',
    'load_image',
    'compute_dhash',
    'fingerprint_file',
    'fingerprint_length',
    # Aggregation
    'HashBuckets',
    'fingerprint_images_parallel',
    'find_duplicates',
    'extract_duplicate_groups',
    # Feature detection
    'has_tqdm',
]
