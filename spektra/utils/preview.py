# Preview resolution management
"""
Fit-to-viewport preview generation.

The interactive view renders a downscaled copy of the source so edits stay
responsive; export always runs on the full-resolution source.
"""

import numpy as np
import cv2
from typing import Optional, Tuple
from dataclasses import dataclass

from .logger import get_logger
from ..config import settings

logger = get_logger(__name__)


@dataclass(frozen=True)
class PreviewInfo:
    """Information about a preview image."""
    original_shape: Tuple[int, ...]
    preview_shape: Tuple[int, ...]
    scale_factor: float

    @property
    def is_scaled(self) -> bool:
        return self.original_shape[:2] != self.preview_shape[:2]

    @property
    def original_megapixels(self) -> float:
        return (self.original_shape[0] * self.original_shape[1]) / 1_000_000

    @property
    def preview_megapixels(self) -> float:
        return (self.preview_shape[0] * self.preview_shape[1]) / 1_000_000


def get_pixel_count(image: np.ndarray) -> int:
    """Get total pixel count of an image."""
    if image is None or len(image.shape) < 2:
        return 0
    return image.shape[0] * image.shape[1]


def fit_scale(width: int, height: int, viewport_width: int, viewport_height: int) -> float:
    """Scale that fits a width x height image inside the viewport, keeping aspect ratio."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if viewport_width <= 0 or viewport_height <= 0:
        raise ValueError(f"Viewport dimensions must be positive, got {viewport_width}x{viewport_height}")
    return min(viewport_width / width, viewport_height / height)


def create_preview(
    image: np.ndarray,
    viewport: Optional[Tuple[int, int]] = None,
    max_pixels: Optional[int] = None,
    interpolation: int = cv2.INTER_AREA,
) -> Tuple[np.ndarray, PreviewInfo]:
    """
    Create the preview-resolution copy of an image.

    Args:
        image: Source image (uint8, RGB or RGBA).
        viewport: Optional (width, height) of the view the preview must fit.
        max_pixels: Pixel budget for the preview; defaults to the configured value.
        interpolation: OpenCV interpolation method used for downscaling.

    Returns:
        Tuple of (preview_image, preview_info). When no scaling is needed the
        source array itself is returned.
    """
    if max_pixels is None:
        max_pixels = settings.PREVIEW_DEFAULTS["max_preview_pixels"]

    h, w = image.shape[:2]
    scale = 1.0
    if viewport is not None:
        scale = fit_scale(w, h, viewport[0], viewport[1])

    pixels = get_pixel_count(image) * scale * scale
    if pixels > max_pixels:
        scale *= float(np.sqrt(max_pixels / pixels))

    if scale >= 1.0 and not settings.PREVIEW_DEFAULTS["allow_upscale"]:
        scale = 1.0

    if scale == 1.0:
        return image, PreviewInfo(image.shape, image.shape, 1.0)

    new_width = max(1, int(round(w * scale)))
    new_height = max(1, int(round(h * scale)))
    preview = cv2.resize(image, (new_width, new_height), interpolation=interpolation)

    info = PreviewInfo(image.shape, preview.shape, scale)
    logger.debug(
        "Created preview: %.2f MP -> %.2f MP (scale=%.3f)",
        info.original_megapixels,
        info.preview_megapixels,
        scale,
    )
    return preview, info
