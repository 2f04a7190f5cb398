"""JIT-compiled kernels for the spatial detail stage.

The scan-order kernel is inherently sequential: every pixel is finalized
and written back before the next one is visited, and neighbor samples are
read from that same buffer. It is compiled with Numba because the loop
cannot be expressed as whole-array operations.
"""

from __future__ import annotations

import math

import numpy as np

from numba import jit


def gaussian_weights(radius: int = 2, sigma_sq: float = 4.0) -> np.ndarray:
    """Unnormalized (2r+1)x(2r+1) weights exp(-d^2 / sigma_sq), indexed [dy+r, dx+r]."""
    size = 2 * radius + 1
    weights = np.empty((size, size), dtype=np.float64)
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            # Distance is squared back rather than using dx*dx+dy*dy directly
            # so weights match the legacy tool bit for bit.
            distance = math.sqrt(dx * dx + dy * dy)
            weights[dy + radius, dx + radius] = math.exp(-(distance * distance) / sigma_sq)
    return weights


def ring_weights(radius: int = 1) -> np.ndarray:
    """Inverse-distance weights 1/d over the neighborhood, 0 at the center."""
    size = 2 * radius + 1
    weights = np.zeros((size, size), dtype=np.float64)
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if dx == 0 and dy == 0:
                continue
            weights[dy + radius, dx + radius] = 1.0 / math.sqrt(dx * dx + dy * dy)
    return weights


@jit(nopython=True, cache=True)
def _clamp(v: float) -> float:
    return min(255.0, max(0.0, v))


@jit(nopython=True, cache=True)
def scan_order_detail(
    buffer: np.ndarray,
    toned: np.ndarray,
    luminance: np.ndarray,
    clarity: float,
    dehaze: float,
    texture: float,
    blur_weights: np.ndarray,
    texture_weights: np.ndarray,
    midpoint: float,
) -> None:
    """Finalize `buffer` in place from the tone-stage output.

    Args:
        buffer: (h, w, c) uint8 array holding the source pixels. Each pixel is
            overwritten with its final value as soon as it is computed, and
            all neighbor samples read this array.
        toned: (h, w, 3) float64 tone-stage output.
        luminance: (h, w) float64 source lightness.
        clarity, dehaze, texture: slider values in [-100, 100].
        blur_weights: Square clarity kernel (unnormalized).
        texture_weights: Square texture kernel, zero at the center.
        midpoint: Lightness below which dehaze applies.
    """
    height = buffer.shape[0]
    width = buffer.shape[1]
    br_radius = blur_weights.shape[0] // 2
    tx_radius = texture_weights.shape[0] // 2

    clarity_factor = clarity / 100.0
    dehaze_factor = dehaze / 100.0
    texture_factor = texture / 100.0

    for y in range(height):
        for x in range(width):
            r = toned[y, x, 0]
            g = toned[y, x, 1]
            b = toned[y, x, 2]

            if clarity != 0.0:
                blur_r = 0.0
                blur_g = 0.0
                blur_b = 0.0
                total = 0.0
                for dy in range(-br_radius, br_radius + 1):
                    for dx in range(-br_radius, br_radius + 1):
                        sx = min(max(x + dx, 0), width - 1)
                        sy = min(max(y + dy, 0), height - 1)
                        w = blur_weights[dy + br_radius, dx + br_radius]
                        total += w
                        blur_r += buffer[sy, sx, 0] * w
                        blur_g += buffer[sy, sx, 1] * w
                        blur_b += buffer[sy, sx, 2] * w
                blur_r /= total
                blur_g /= total
                blur_b /= total

                if clarity_factor > 0:
                    strength = clarity_factor * 2.0
                    r = _clamp(r + (r - blur_r) * strength)
                    g = _clamp(g + (g - blur_g) * strength)
                    b = _clamp(b + (b - blur_b) * strength)
                else:
                    strength = abs(clarity_factor)
                    r = _clamp(r * (1.0 - strength) + blur_r * strength)
                    g = _clamp(g * (1.0 - strength) + blur_g * strength)
                    b = _clamp(b * (1.0 - strength) + blur_b * strength)

            if dehaze != 0.0:
                l = luminance[y, x]
                if l < midpoint:
                    strength = (midpoint - l) * dehaze_factor
                    r = _clamp(r + (255.0 - r) * strength)
                    g = _clamp(g + (255.0 - g) * strength)
                    b = _clamp(b + (255.0 - b) * strength)

            if texture != 0.0:
                hf_r = 0.0
                hf_g = 0.0
                hf_b = 0.0
                total = 0.0
                for dy in range(-tx_radius, tx_radius + 1):
                    for dx in range(-tx_radius, tx_radius + 1):
                        if dx == 0 and dy == 0:
                            continue
                        sx = min(max(x + dx, 0), width - 1)
                        sy = min(max(y + dy, 0), height - 1)
                        w = texture_weights[dy + tx_radius, dx + tx_radius]
                        total += w
                        hf_r += (r - buffer[sy, sx, 0]) * w
                        hf_g += (g - buffer[sy, sx, 1]) * w
                        hf_b += (b - buffer[sy, sx, 2]) * w
                hf_r /= total
                hf_g /= total
                hf_b /= total

                if texture_factor > 0:
                    r = _clamp(r + hf_r * texture_factor)
                    g = _clamp(g + hf_g * texture_factor)
                    b = _clamp(b + hf_b * texture_factor)
                else:
                    strength = abs(texture_factor)
                    r = _clamp(r - hf_r * strength)
                    g = _clamp(g - hf_g * strength)
                    b = _clamp(b - hf_b * strength)

            # Round half to even, as an 8-bit clamped canvas stores samples
            buffer[y, x, 0] = np.uint8(np.rint(_clamp(r)))
            buffer[y, x, 1] = np.uint8(np.rint(_clamp(g)))
            buffer[y, x, 2] = np.uint8(np.rint(_clamp(b)))
