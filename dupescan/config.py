"""
Configuration constants for DupeScan.

This module contains all configurable defaults including:
- Supported image extensions
- Concurrency limits for directory traversal and fingerprinting
- Fingerprint grid dimensions
"""

# Supported image extensions (matched case-insensitively)
IMAGE_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.bmp', '.gif', '.tiff',
}

# Maximum number of directories being listed at the same time.
# Keeps open file descriptors bounded on very wide trees.
MAX_CONCURRENT_DIRS = 10

# Default number of parallel workers for fingerprinting
DEFAULT_WORKERS = 4

# In-flight fingerprinting units per worker (bounded submission window)
MAX_PENDING_PER_WORKER = 4

# Fingerprint grid: every image is normalized to WIDTH x HEIGHT before
# differencing, giving (WIDTH - 1) * HEIGHT bits. 9x8 -> 64-bit dHash.
DEFAULT_GRID_WIDTH = 9
DEFAULT_GRID_HEIGHT = 8

# Decompression bomb limit for Pillow (500 megapixels)
MAX_IMAGE_PIXELS = 500_000_000

# Report output
REPORT_HEADER = "Duplicate images:"
DEFAULT_OUTPUT_FILE = "duplicates.txt"

# User config file location
import os
CONFIG_DIR = os.path.join(os.path.expanduser('~'), '.dupescan')
