"""Pytest configuration to make the project root importable as a package.

This ensures that ``import meanfilter`` works when tests are run from the
repository root or other locations without an editable install.
"""

import os
import sys

import numpy as np
import pytest
from PIL import Image as PILImage

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def random_pixels():
    """Deterministic noisy RGB image, 37 rows x 53 columns."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(37, 53, 3), dtype=np.uint8)


@pytest.fixture
def single_red_pixel():
    """4x4 black image with (255, 0, 0) at x=1, y=1."""
    pixels = np.zeros((4, 4, 3), dtype=np.uint8)
    pixels[1, 1] = (255, 0, 0)
    return pixels


@pytest.fixture
def png_file(tmp_path, random_pixels):
    path = tmp_path / "input.png"
    PILImage.fromarray(random_pixels).save(path, format="PNG")
    return path
