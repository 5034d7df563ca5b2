"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from PIL import Image
import numpy as np


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def gradient_image():
    """
    Factory for grayscale ramp images.

    The top half brightens left to right and the bottom half darkens, so
    the 9x8 dHash is 'ffffffff00000000' at any resolution.
    """
    def _make(width: int, height: int) -> Image.Image:
        ramp = np.linspace(0, 255, width)
        pixels = np.empty((height, width), dtype=np.uint8)
        pixels[: height // 2] = ramp.astype(np.uint8)
        pixels[height // 2:] = ramp[::-1].astype(np.uint8)
        return Image.fromarray(pixels)

    return _make


@pytest.fixture
def coded_image():
    """
    Factory for 9x8 grayscale images whose dHash encodes an integer.

    Bit c of ``code`` sets whether column c + 1 is brighter than column c,
    so different codes below 256 always give different fingerprints.
    """
    def _make(code: int) -> Image.Image:
        row = [128]
        for c in range(8):
            row.append(row[-1] + (12 if (code >> c) & 1 else -12))
        pixels = np.array([row] * 8, dtype=np.uint8)
        return Image.fromarray(pixels)

    return _make


@pytest.fixture
def sample_images(temp_dir):
    """
    Create a small directory of sample files.

    Returns:
        dict with paths to:
        - a.png, b.png (same pixels, b is a copy of a)
        - c.txt (not an image)
        - unique.png (different content)
    """
    rng = np.random.default_rng(42)
    pixels = rng.integers(0, 256, size=(64, 64, 3), dtype=np.uint8)
    img = Image.fromarray(pixels)

    images = {}
    path_a = temp_dir / "a.png"
    img.save(path_a, 'PNG')
    images['a'] = str(path_a)

    path_b = temp_dir / "b.png"
    shutil.copyfile(path_a, path_b)
    images['b'] = str(path_b)

    path_c = temp_dir / "c.txt"
    path_c.write_text("not an image")
    images['c'] = str(path_c)

    other = Image.fromarray(np.ascontiguousarray(pixels[:, ::-1]))
    path_u = temp_dir / "unique.png"
    other.save(path_u, 'PNG')
    images['unique'] = str(path_u)

    return images


@pytest.fixture
def config_dir(temp_dir):
    """An empty config directory, so tests never read ~/.dupescan."""
    path = temp_dir / "config"
    path.mkdir()
    return path


@pytest.fixture
def user_config(config_dir):
    """A UserConfig backed by an empty config directory."""
    from dupescan.user_config import UserConfig
    return UserConfig(config_dir)
