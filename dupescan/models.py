"""
Data models for DupeScan.

Contains dataclasses for scan failures, duplicate groups and the
aggregate result of one scan.
"""

from dataclasses import dataclass, field
from typing import Optional
import os


@dataclass(frozen=True)
class ScanFailure:
    """
    A recovered, per-directory or per-file error.

    Attributes:
        path: Directory or file the error is scoped to
        kind: 'directory', 'decode' or 'fingerprint'
        reason: Human-readable description of what went wrong
    """
    path: str
    kind: str
    reason: str

    @classmethod
    def from_error(cls, error) -> 'ScanFailure':
        """Create a ScanFailure from a DupeScanError."""
        return cls(path=error.path, kind=error.kind, reason=error.reason)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {'path': self.path, 'kind': self.kind, 'reason': self.reason}


@dataclass
class DuplicateGroup:
    """
    A set of images sharing one fingerprint.

    Attributes:
        id: 1-based position of this group in the report
        fingerprint: Hex form of the shared fingerprint
        paths: Every member path, sorted
    """
    id: int
    fingerprint: str
    paths: list = field(default_factory=list)

    @property
    def image_count(self) -> int:
        """Number of images in this group."""
        return len(self.paths)

    @property
    def filenames(self) -> list:
        """Base names of the member paths."""
        return [os.path.basename(p) for p in self.paths]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'fingerprint': self.fingerprint,
            'image_count': self.image_count,
            'paths': list(self.paths),
        }


@dataclass
class ScanResult:
    """
    Everything one scan produced.

    Attributes:
        buckets: Fingerprint hex -> sorted member paths (keys sorted)
        progress: Final progress value in [0.0, 1.0]
        failures: Recovered errors, sorted by path
        total_files: Number of candidate images discovered
        cancelled: True if a stop signal prevented some units from running
        elapsed_seconds: Wall-clock duration of the scan
    """
    buckets: dict = field(default_factory=dict)
    progress: float = 0.0
    failures: list = field(default_factory=list)
    total_files: int = 0
    cancelled: bool = False
    elapsed_seconds: float = 0.0

    @property
    def fingerprinted(self) -> int:
        """Number of images that ended up in a bucket."""
        return sum(len(paths) for paths in self.buckets.values())

    def duplicate_groups(self, start_id: int = 1) -> list:
        """Extract the duplicate groups from the bucket map."""
        from .scanner.deduplication import extract_duplicate_groups
        return extract_duplicate_groups(self.buckets, start_id=start_id)

    def failures_of_kind(self, kind: Optional[str] = None) -> list:
        """Return failures, optionally filtered by kind."""
        if kind is None:
            return list(self.failures)
        return [f for f in self.failures if f.kind == kind]
