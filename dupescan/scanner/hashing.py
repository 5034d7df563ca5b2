"""
Hashing module for the scanner package.

Provides image decoding and the difference-hash (dHash) fingerprint.

Every image is converted to luminance and resized to a fixed grid before
differencing, so fingerprints have the same length for every input and
images that differ only in resolution hash alike.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from ..config import DEFAULT_GRID_WIDTH, DEFAULT_GRID_HEIGHT
from ..errors import DecodeFailure, FingerprintFailure
from .dependencies import Image, imagehash, np

Fingerprint = imagehash.ImageHash
Decoder = Callable[[str], "Image.Image"]


def validate_grid(width: int, height: int) -> None:
    """
    Check fingerprint grid dimensions.

    Raises:
        ValueError: If width < 2 or height < 1
    """
    if width < 2:
        raise ValueError(f"grid width must be >= 2, got {width}")
    if height < 1:
        raise ValueError(f"grid height must be >= 1, got {height}")


def fingerprint_length(width: int = DEFAULT_GRID_WIDTH, height: int = DEFAULT_GRID_HEIGHT) -> int:
    """Number of bits in a fingerprint for the given grid."""
    return (width - 1) * height


def load_image(filepath: str | Path) -> Image.Image:
    """
    Open and fully decode an image file.

    Args:
        filepath: Path to the image

    Returns:
        Decoded PIL image

    Raises:
        DecodeFailure: If the file cannot be opened or decoded
    """
    filepath = str(filepath)
    try:
        with Image.open(filepath) as img:
            # Force load to detect truncated/corrupt images early
            img.load()
            return img
    except Image.UnidentifiedImageError as e:
        raise DecodeFailure(filepath, f"Not a valid image file: {e}") from e
    except Exception as e:
        raise DecodeFailure(filepath, f"Failed to open image: {e}") from e


def compute_dhash(
    image: Image.Image,
    width: int = DEFAULT_GRID_WIDTH,
    height: int = DEFAULT_GRID_HEIGHT,
) -> Fingerprint:
    """
    Compute the difference hash of a decoded image.

    The image is converted to single-channel luminance and resized to
    ``width`` x ``height``. For each horizontally adjacent pixel pair the
    bit is 1 when the left pixel is darker than the right one. Bits are
    laid out row-major, (width - 1) * height of them.

    With the default 9x8 grid this matches ``imagehash.dhash(image, 8)``.

    Args:
        image: Decoded PIL image
        width: Grid width in pixels
        height: Grid height in pixels

    Returns:
        imagehash.ImageHash holding a (height, width - 1) boolean array

    Raises:
        FingerprintFailure: If the image has no pixels or cannot be converted
    """
    validate_grid(width, height)
    path = getattr(image, 'filename', '') or '<image>'

    if image.width == 0 or image.height == 0:
        raise FingerprintFailure(path, f"Empty image ({image.width}x{image.height})")

    try:
        gray = image.convert('L').resize((width, height), Image.Resampling.LANCZOS)
    except (OSError, ValueError) as e:
        raise FingerprintFailure(path, f"Cannot normalize pixel data: {e}") from e

    pixels = np.asarray(gray)
    if pixels.shape != (height, width):
        raise FingerprintFailure(path, f"Unexpected pixel grid shape {pixels.shape}")

    diff = pixels[:, 1:] > pixels[:, :-1]
    return imagehash.ImageHash(diff)


def fingerprint_file(
    filepath: str | Path,
    decoder: Decoder = load_image,
    width: int = DEFAULT_GRID_WIDTH,
    height: int = DEFAULT_GRID_HEIGHT,
) -> Fingerprint:
    """
    Decode one file and fingerprint it.

    Raises:
        DecodeFailure: If ``decoder`` fails (any exception it raises)
        FingerprintFailure: If the decoded data cannot be fingerprinted
    """
    filepath = str(filepath)
    try:
        image = decoder(filepath)
    except DecodeFailure:
        raise
    except Exception as e:
        raise DecodeFailure(filepath, f"Failed to open image: {e}") from e

    try:
        return compute_dhash(image, width, height)
    except FingerprintFailure as e:
        if e.path != filepath:
            raise FingerprintFailure(filepath, e.reason) from e
        raise


__all__ = [
    'Fingerprint',
    'Decoder',
    'validate_grid',
    'fingerprint_length',
    'load_image',
    'compute_dhash',
    'fingerprint_file',
]
