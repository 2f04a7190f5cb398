# RGB <-> HSL conversion
"""
Scalar and vectorized RGB/HSL conversion.

RGB values are 8-bit scale floats (0-255); HSL components are all in 0-1.
The array versions produce the same numbers as the scalar ones and are what
the adjustment pipeline uses.
"""

import numpy as np


def rgb_to_hsl(r, g, b):
    """Convert one 0-255 RGB triple to (h, s, l) in 0-1."""
    r /= 255.0
    g /= 255.0
    b /= 255.0

    mx = max(r, g, b)
    mn = min(r, g, b)
    h = 0.0
    s = 0.0
    l = (mx + mn) / 2.0

    if mx != mn:
        d = mx - mn
        s = d / (2.0 - mx - mn) if l > 0.5 else d / (mx + mn)

        # Red wins ties, then green
        if mx == r:
            h = (g - b) / d + (6.0 if g < b else 0.0)
        elif mx == g:
            h = (b - r) / d + 2.0
        else:
            h = (r - g) / d + 4.0
        h /= 6.0

    return h, s, l


def _hue_to_rgb(p, q, t):
    if t < 0:
        t += 1.0
    if t > 1:
        t -= 1.0
    if t < 1.0 / 6.0:
        return p + (q - p) * 6.0 * t
    if t < 1.0 / 2.0:
        return q
    if t < 2.0 / 3.0:
        return p + (q - p) * (2.0 / 3.0 - t) * 6.0
    return p


def hsl_to_rgb(h, s, l):
    """Convert (h, s, l) in 0-1 to unclamped float RGB on the 0-255 scale."""
    if s == 0:
        r = g = b = l
    else:
        q = l * (1.0 + s) if l < 0.5 else l + s - l * s
        p = 2.0 * l - q
        r = _hue_to_rgb(p, q, h + 1.0 / 3.0)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1.0 / 3.0)

    return r * 255.0, g * 255.0, b * 255.0


# --- Vectorized versions ---

def rgb_to_hsl_array(rgb):
    """
    Vectorized rgb_to_hsl.

    Args:
        rgb: Array of shape (..., 3) with 0-255 values (any numeric dtype).

    Returns:
        float64 array of shape (..., 3) holding h, s, l.
    """
    rgb = np.asarray(rgb, dtype=np.float64) / 255.0
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    mx = np.maximum(np.maximum(r, g), b)
    mn = np.minimum(np.minimum(r, g), b)
    l = (mx + mn) / 2.0
    d = mx - mn
    chroma = d != 0

    # Substitute 1 for the denominators on gray pixels; those lanes are masked out
    safe_d = np.where(chroma, d, 1.0)
    s_den = np.where(l > 0.5, 2.0 - mx - mn, mx + mn)
    s = np.where(chroma, d / np.where(chroma, s_den, 1.0), 0.0)

    h_r = (g - b) / safe_d + np.where(g < b, 6.0, 0.0)
    h_g = (b - r) / safe_d + 2.0
    h_b = (r - g) / safe_d + 4.0
    h = np.where(mx == r, h_r, np.where(mx == g, h_g, h_b)) / 6.0
    h = np.where(chroma, h, 0.0)

    return np.stack([h, s, l], axis=-1)


def _hue_to_rgb_array(p, q, t):
    t = np.where(t < 0, t + 1.0, t)
    t = np.where(t > 1, t - 1.0, t)
    return np.select(
        [t < 1.0 / 6.0, t < 1.0 / 2.0, t < 2.0 / 3.0],
        [p + (q - p) * 6.0 * t, q, p + (q - p) * (2.0 / 3.0 - t) * 6.0],
        default=p,
    )


def hsl_to_rgb_array(hsl):
    """
    Vectorized hsl_to_rgb.

    Args:
        hsl: Array of shape (..., 3) holding h, s, l in 0-1.

    Returns:
        float64 array of shape (..., 3), unclamped 0-255 scale RGB.
    """
    hsl = np.asarray(hsl, dtype=np.float64)
    h, s, l = hsl[..., 0], hsl[..., 1], hsl[..., 2]

    q = np.where(l < 0.5, l * (1.0 + s), l + s - l * s)
    p = 2.0 * l - q

    r = _hue_to_rgb_array(p, q, h + 1.0 / 3.0)
    g = _hue_to_rgb_array(p, q, h)
    b = _hue_to_rgb_array(p, q, h - 1.0 / 3.0)

    gray = s == 0
    rgb = np.stack([
        np.where(gray, l, r),
        np.where(gray, l, g),
        np.where(gray, l, b),
    ], axis=-1)
    return rgb * 255.0
