"""
Shared pytest fixtures for the imglab test suite.

Buffers are built from numpy arrays of shape (H, W, 4) so tests can state
pixels in image terms and compare results channel by channel.
"""

from typing import Sequence, Tuple

import numpy as np
import pytest

from imglab.models.image_model import PixelBuffer
from imglab.services.image_service import ImageService
from imglab.services.process_service import ProcessService


def buffer_from_pixels(pixels: Sequence[Tuple[int, int, int, int]], width: int, height: int) -> PixelBuffer:
    """Build a PixelBuffer from a flat list of RGBA tuples in row-major order."""
    flat = bytes(channel for pixel in pixels for channel in pixel)
    return PixelBuffer(width=width, height=height, data=flat)


def as_array(buffer: PixelBuffer) -> np.ndarray:
    """View a well-formed buffer as an (H, W, 4) uint8 array."""
    return np.frombuffer(buffer.data, dtype=np.uint8).reshape(buffer.height, buffer.width, 4)


def buffer_from_array(arr: np.ndarray) -> PixelBuffer:
    height, width = arr.shape[:2]
    return PixelBuffer(width=width, height=height, data=np.ascontiguousarray(arr, dtype=np.uint8).tobytes())


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def process_service() -> ProcessService:
    return ProcessService()


@pytest.fixture
def image_service() -> ImageService:
    return ImageService()


# =============================================================================
# Buffer Fixtures
# =============================================================================


@pytest.fixture
def primaries_buffer() -> PixelBuffer:
    """2x2 opaque buffer: red, green, blue, white."""
    return buffer_from_pixels(
        [(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255), (255, 255, 255, 255)],
        width=2,
        height=2,
    )


@pytest.fixture
def random_buffer() -> PixelBuffer:
    """Seeded random 32x24 RGBA buffer with roughly a quarter of pixels fully transparent."""
    rng = np.random.default_rng(1234)
    arr = rng.integers(0, 256, size=(24, 32, 4), dtype=np.uint8)
    transparent = rng.random((24, 32)) < 0.25
    arr[transparent, 3] = 0
    return buffer_from_array(arr)


@pytest.fixture
def gradient_buffer() -> PixelBuffer:
    """16x16 buffer whose R, G and B all run through 0..255, alpha fixed at 200."""
    values = np.arange(256, dtype=np.uint8).reshape(16, 16)
    arr = np.stack([values, values[::-1], values.T, np.full_like(values, 200)], axis=-1)
    return buffer_from_array(arr)
