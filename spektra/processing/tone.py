# Tone and color adjustment stage
"""
Per-pixel light and color adjustments.

Steps run in a fixed order. The tone-region gates (whites, blacks,
highlights, shadows) use the lightness of the *source* pixel, while the
saturation step re-derives HSL from the already adjusted channels. The clamp
after each step is part of the result: later steps are nonlinear in their
input, so dropping an intermediate clamp changes the output.
"""

import numpy as np

from .adjustments import AdjustmentVector
from .colorspace import rgb_to_hsl_array, hsl_to_rgb_array
from ..config import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

WHITES_THRESHOLD = settings.ENGINE_DEFAULTS["whites_threshold"]
BLACKS_THRESHOLD = settings.ENGINE_DEFAULTS["blacks_threshold"]
MIDPOINT = settings.ENGINE_DEFAULTS["midpoint"]


def _clip(arr):
    return np.clip(arr, 0.0, 255.0)


def source_luminance(rgb):
    """HSL lightness (0-1) of each pixel of a (..., 3) RGB array."""
    return rgb_to_hsl_array(rgb)[..., 2]


def _toward_white(c, amount):
    return _clip(c + (255.0 - c) * amount)


def _toward_black(c, amount):
    return _clip(c - c * amount)


def _apply_region(c, mask, amount, push):
    """Apply `push(c, amount)` where `mask` holds; amount is per-pixel."""
    if not mask.any():
        return c
    return np.where(mask[..., None], push(c, amount[..., None]), c)


def apply_exposure(c, exposure):
    return _clip(c * (2.0 ** (exposure / 100.0)))


def apply_contrast(c, contrast):
    factor = ((contrast + 100.0) / 100.0) ** 2
    return _clip(128.0 + (c - 128.0) * factor)


def apply_tone_regions(c, l, adj: AdjustmentVector):
    """Whites, blacks, highlights and shadows, gated by source lightness `l`."""
    c = _apply_region(
        c, l > WHITES_THRESHOLD,
        (adj.whites / 100.0) * (l - WHITES_THRESHOLD) * 3.0, _toward_white,
    )
    c = _apply_region(
        c, l < BLACKS_THRESHOLD,
        (adj.blacks / 100.0) * (BLACKS_THRESHOLD - l) * 3.0, _toward_black,
    )
    c = _apply_region(
        c, l > MIDPOINT,
        (adj.highlights / 100.0) * (l - MIDPOINT) * 2.0, _toward_white,
    )
    # Shadows lift proportionally to the channel value
    c = _apply_region(
        c, l < MIDPOINT,
        (adj.shadows / 100.0) * (MIDPOINT - l) * 2.0,
        lambda ch, amount: _clip(ch + ch * amount),
    )
    return c


def apply_temperature(c, temperature):
    t = temperature / 100.0
    r, g, b = c[..., 0], c[..., 1], c[..., 2]
    if t > 0:
        r = np.minimum(255.0, r + (255.0 - r) * t * 0.5)
        g = np.minimum(255.0, g + (255.0 - g) * t * 0.3)
        b = np.maximum(0.0, b - b * t * 0.2)
    else:
        cool = abs(t)
        r = np.maximum(0.0, r - r * cool * 0.2)
        g = np.maximum(0.0, g - g * cool * 0.2)
        b = np.minimum(255.0, b + (255.0 - b) * cool * 0.5)
    return np.stack([r, g, b], axis=-1)


def apply_tint(c, tint):
    t = tint / 100.0
    r, g, b = c[..., 0], c[..., 1], c[..., 2]
    if t > 0:
        r = np.minimum(255.0, r + (255.0 - r) * t * 0.4)
        g = np.maximum(0.0, g - g * t * 0.2)
        b = np.minimum(255.0, b + (255.0 - b) * t * 0.4)
    else:
        green = abs(t)
        r = np.maximum(0.0, r - r * green * 0.2)
        g = np.minimum(255.0, g + (255.0 - g) * green * 0.4)
        b = np.maximum(0.0, b - b * green * 0.2)
    return np.stack([r, g, b], axis=-1)


def apply_saturation(c, saturation):
    hsl = rgb_to_hsl_array(c)
    factor = (saturation + 100.0) / 100.0
    hsl[..., 1] = np.clip(hsl[..., 1] * factor, 0.0, 1.0)
    return hsl_to_rgb_array(hsl)


def apply_tone(rgb, adjustments: AdjustmentVector, luminance=None):
    """
    Run the tone/color stage over an RGB array.

    Args:
        rgb: (..., 3) array of 0-255 values.
        adjustments: The adjustment vector.
        luminance: Optional precomputed source lightness, shape rgb.shape[:-1].

    Returns:
        float64 array of the same shape, every value in [0, 255].
    """
    c = np.asarray(rgb, dtype=np.float64)
    l = source_luminance(c) if luminance is None else luminance

    c = apply_exposure(c, adjustments.exposure)
    c = apply_contrast(c, adjustments.contrast)
    c = apply_tone_regions(c, l, adjustments)
    c = apply_temperature(c, adjustments.temperature)
    c = apply_tint(c, adjustments.tint)
    c = apply_saturation(c, adjustments.saturation)

    # hsl_to_rgb can land a hair outside the range through rounding error
    return _clip(c)
