import pytest
import numpy as np

from spektra.processing.adjustments import AdjustmentVector


@pytest.fixture
def sample_image_rgba():
    """Returns a 20x20 RGBA image with four flat colored quadrants."""
    img = np.zeros((20, 20, 4), dtype=np.uint8)
    img[:10, :10] = [255, 0, 0, 255]      # Red quadrant
    img[:10, 10:] = [0, 255, 0, 255]      # Green quadrant
    img[10:, :10] = [0, 0, 255, 255]      # Blue quadrant
    img[10:, 10:] = [255, 255, 0, 128]    # Yellow quadrant, half transparent
    return img


@pytest.fixture
def random_image_rgba():
    """Returns a reproducible 12x9 RGBA image covering the full 0-255 range."""
    rng = np.random.default_rng(1234)
    img = rng.integers(0, 256, size=(9, 12, 4), dtype=np.uint8)
    img[0, 0, :3] = 0
    img[0, 1, :3] = 255
    return img


@pytest.fixture
def gradient_image_rgb():
    """Returns a 16x32 RGB image with horizontal, vertical and diagonal ramps."""
    h, w = 16, 32
    x = np.linspace(0, 255, w)
    y = np.linspace(0, 255, h)
    img = np.zeros((h, w, 3), dtype=np.uint8)
    img[..., 0] = np.round(np.tile(x, (h, 1)))
    img[..., 1] = np.round(np.tile(y[:, None], (1, w)))
    img[..., 2] = np.round((img[..., 0].astype(np.float64) + img[..., 1]) / 2)
    return img


@pytest.fixture
def identity():
    return AdjustmentVector()


@pytest.fixture
def all_max():
    return AdjustmentVector(**{name: 100 for name in AdjustmentVector.field_names()})


@pytest.fixture
def all_min():
    return AdjustmentVector(**{name: -100 for name in AdjustmentVector.field_names()})
