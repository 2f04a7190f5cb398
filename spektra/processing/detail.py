# Spatial detail stage: clarity, dehaze, texture
"""
Neighborhood-based detail adjustments applied after the tone stage.

Two modes are available:

* ``SpatialMode.LEGACY`` finalizes pixels one at a time in scan order and
  samples neighbors from the buffer being written, so pixels above and to
  the left contribute their *final* values while pixels below and to the
  right still contribute their *source* values. Output depends on scan
  order. This is what the original editor produced.
* ``SpatialMode.BUFFERED`` samples every neighbor from the tone-stage
  output, making the result order-independent.

Edges are clamped (replicated) in both modes. An effect set to 0 performs
no neighbor sampling at all.
"""

from enum import Enum

import numpy as np
import cv2

from .adjustments import AdjustmentVector
from .kernels import gaussian_weights, ring_weights, scan_order_detail
from ..config import settings
from ..utils.errors import ConfigurationError
from ..utils.logger import get_logger

logger = get_logger(__name__)

MIDPOINT = settings.ENGINE_DEFAULTS["midpoint"]

BLUR_WEIGHTS = gaussian_weights(
    settings.ENGINE_DEFAULTS["clarity_radius"],
    settings.ENGINE_DEFAULTS["clarity_sigma_sq"],
)
TEXTURE_WEIGHTS = ring_weights(settings.ENGINE_DEFAULTS["texture_radius"])


class SpatialMode(Enum):
    """How the detail filters sample neighboring pixels."""
    LEGACY = "legacy"
    BUFFERED = "buffered"

    @classmethod
    def from_value(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown spatial mode '{value}'. Expected one of: "
                f"{', '.join(m.value for m in cls)}",
                setting_name="spatial_mode",
            ) from None


def quantize(channels):
    """Clamp to [0, 255] and round half to even into uint8."""
    return np.rint(np.clip(channels, 0.0, 255.0)).astype(np.uint8)


def _filter(snapshot, weights):
    """Edge-replicated weighted average of `snapshot` under normalized `weights`."""
    kernel = weights / weights.sum()
    return cv2.filter2D(snapshot, cv2.CV_64F, kernel, borderType=cv2.BORDER_REPLICATE)


def apply_clarity(c, snapshot, clarity):
    blurred = _filter(snapshot, BLUR_WEIGHTS)
    factor = clarity / 100.0
    if factor > 0:
        return np.clip(c + (c - blurred) * (factor * 2.0), 0.0, 255.0)
    strength = abs(factor)
    return np.clip(c * (1.0 - strength) + blurred * strength, 0.0, 255.0)


def apply_dehaze(c, luminance, dehaze):
    mask = luminance < MIDPOINT
    if not mask.any():
        return c
    strength = ((MIDPOINT - luminance) * (dehaze / 100.0))[..., None]
    lifted = np.clip(c + (255.0 - c) * strength, 0.0, 255.0)
    return np.where(mask[..., None], lifted, c)


def apply_texture(c, snapshot, texture):
    # sum(w * (c - n)) / sum(w) == c - weighted mean of the neighbors
    high_freq = c - _filter(snapshot, TEXTURE_WEIGHTS)
    factor = texture / 100.0
    if factor > 0:
        return np.clip(c + high_freq * factor, 0.0, 255.0)
    return np.clip(c - high_freq * abs(factor), 0.0, 255.0)


def apply_detail_buffered(toned, luminance, adjustments: AdjustmentVector):
    """
    Order-independent detail stage.

    Returns:
        float64 (h, w, 3) array in [0, 255].
    """
    snapshot = np.ascontiguousarray(toned, dtype=np.float64)
    c = snapshot
    if adjustments.clarity != 0:
        c = apply_clarity(c, snapshot, adjustments.clarity)
    if adjustments.dehaze != 0:
        c = apply_dehaze(c, luminance, adjustments.dehaze)
    if adjustments.texture != 0:
        c = apply_texture(c, snapshot, adjustments.texture)
    return c


def apply_detail_legacy(buffer, toned, luminance, adjustments: AdjustmentVector):
    """
    Scan-order detail stage, writing final RGB samples into `buffer` in place.

    `buffer` must still hold the source pixels on entry; its alpha channel
    (if any) is left untouched.
    """
    scan_order_detail(
        buffer,
        np.ascontiguousarray(toned, dtype=np.float64),
        np.ascontiguousarray(luminance, dtype=np.float64),
        float(adjustments.clarity),
        float(adjustments.dehaze),
        float(adjustments.texture),
        BLUR_WEIGHTS,
        TEXTURE_WEIGHTS,
        float(MIDPOINT),
    )
    return buffer
