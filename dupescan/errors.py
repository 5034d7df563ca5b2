"""
Error types for DupeScan.

Every error is local to one directory or one file. The orchestrator
recovers all of them and reports them as ScanFailure records, so none
of these ever aborts a scan.
"""

from __future__ import annotations


class DupeScanError(Exception):
    """Base class for recoverable scan errors."""

    kind = "error"

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class DirectoryUnreadable(DupeScanError):
    """A directory could not be opened or listed."""

    kind = "directory"


class DecodeFailure(DupeScanError):
    """A candidate file could not be opened or decoded as an image."""

    kind = "decode"


class FingerprintFailure(DupeScanError):
    """Decoded pixel data was empty or malformed."""

    kind = "fingerprint"


__all__ = [
    'DupeScanError',
    'DirectoryUnreadable',
    'DecodeFailure',
    'FingerprintFailure',
]
