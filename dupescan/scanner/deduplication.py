"""
Deduplication module for the scanner package.

Provides the shared fingerprint bucket map filled by workers, and the
extraction of duplicate groups from a finished map.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Mapping

from ..models import DuplicateGroup


class HashBuckets:
    """
    Thread-safe mapping of fingerprint -> paths.

    Fingerprints are keyed by their hex string. ``add`` is a pure append
    under the lock; sorting happens only when the map is read out.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._buckets: dict[str, list[str]] = defaultdict(list)

    def add(self, fingerprint, path: str) -> None:
        key = str(fingerprint)
        with self._lock:
            self._buckets[key].append(path)

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def as_dict(self) -> dict[str, list[str]]:
        """Copy of the map with sorted keys and sorted members."""
        with self._lock:
            items = [(key, list(paths)) for key, paths in self._buckets.items()]
        return {key: sorted(paths) for key, paths in sorted(items)}


def extract_duplicate_groups(
    buckets: Mapping[str, list[str]],
    start_id: int = 1,
) -> list[DuplicateGroup]:
    """
    Select every bucket holding two or more paths.

    Groups are ordered by their lexicographically smallest member, and
    members within a group are sorted, so the output is reproducible for
    identical inputs regardless of the order workers finished in.

    Args:
        buckets: Fingerprint -> paths mapping (e.g. ScanResult.buckets)
        start_id: Id assigned to the first group

    Returns:
        List of DuplicateGroup objects
    """
    selected = [
        (sorted(paths), fingerprint)
        for fingerprint, paths in buckets.items()
        if len(paths) >= 2
    ]
    selected.sort(key=lambda item: (item[0][0], item[1]))

    return [
        DuplicateGroup(id=group_id, fingerprint=fingerprint, paths=paths)
        for group_id, (paths, fingerprint) in enumerate(selected, start_id)
    ]


__all__ = ['HashBuckets', 'extract_duplicate_groups']
