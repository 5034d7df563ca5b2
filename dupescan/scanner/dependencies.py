"""
Dependency initialization for the scanner package.

Handles PIL, imagehash, numpy and tqdm imports with proper error handling
and configuration.
"""

from __future__ import annotations

import warnings
import logging
from typing import Optional, Any

from ..config import MAX_IMAGE_PIXELS

# Module-level logger
_logger = logging.getLogger(__name__)

# Check for required dependencies
try:
    from PIL import Image
    import imagehash
    import numpy as np
except ImportError:
    raise ImportError(
        "Required packages not found!\n"
        "Install with: pip install Pillow imagehash numpy"
    )

# Raise PIL's decompression bomb limit for legitimately large photos
Image.MAX_IMAGE_PIXELS = MAX_IMAGE_PIXELS

# We raised the limit deliberately; images above it still fail to decode
warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)

# Optional: tqdm for progress bars
HAS_TQDM = False
_tqdm_class: Optional[Any] = None

try:
    from tqdm import tqdm as _tqdm_import
    HAS_TQDM = True
    _tqdm_class = _tqdm_import
except ImportError:
    pass


def set_max_image_pixels(limit: Optional[int]) -> None:
    """Set Pillow's decompression bomb limit (None disables the check)."""
    Image.MAX_IMAGE_PIXELS = limit
    _logger.debug(f"Image.MAX_IMAGE_PIXELS set to {limit}")


__all__ = [
    'Image',
    'imagehash',
    'np',
    'HAS_TQDM',
    '_tqdm_class',
    '_logger',
    'set_max_image_pixels',
]
