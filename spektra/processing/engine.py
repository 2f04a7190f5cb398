# Adjustment engine
"""
The full pixel-adjustment pipeline: tone/color stage followed by the
spatial detail stage.

The engine is synchronous and pure per call: it never mutates its inputs and
every call owns a freshly allocated output buffer, so preview and export
renders can run side by side.
"""

import time
from typing import Optional, Tuple, Union

import numpy as np

from .adjustments import AdjustmentVector
from .buffer import PixelBuffer, check_image
from .detail import SpatialMode, apply_detail_buffered, apply_detail_legacy, quantize
from .tone import apply_tone, source_luminance
from ..config import settings
from ..utils.logger import get_logger
from ..utils.preview import PreviewInfo, create_preview

logger = get_logger(__name__)

ImageLike = Union[np.ndarray, PixelBuffer]


class AdjustmentEngine:
    """Applies an AdjustmentVector to RGB/RGBA images."""

    def __init__(self, spatial_mode: Optional[Union[SpatialMode, str]] = None):
        if spatial_mode is None:
            spatial_mode = settings.ENGINE_DEFAULTS["spatial_mode"]
        self.spatial_mode = SpatialMode.from_value(spatial_mode)

    def process(self, image: ImageLike, adjustments: AdjustmentVector) -> ImageLike:
        """
        Run the pipeline.

        Args:
            image: (h, w, 3|4) uint8 array or a PixelBuffer. Not modified.
            adjustments: Vector to apply; validated before any pixel work.

        Returns:
            A new array (or PixelBuffer, matching the input) of the same shape.
            Alpha is carried through unchanged.

        Raises:
            InvalidAdjustmentError: A field is outside [-100, 100].
            DimensionMismatchError: The image is not (h, w, 3|4).
        """
        adjustments.validate()

        if isinstance(image, PixelBuffer):
            return PixelBuffer.from_array(self.process(image.data, adjustments))

        source = check_image(image)
        output = source.copy()
        if output.size == 0:
            return output

        start = time.perf_counter()
        rgb = source[..., :3]
        luminance = source_luminance(rgb)
        toned = apply_tone(rgb, adjustments, luminance=luminance)

        if not adjustments.has_spatial_effects:
            output[..., :3] = quantize(toned)
        elif self.spatial_mode is SpatialMode.LEGACY:
            # The kernel reads neighbors from `output`, which still holds the source pixels
            apply_detail_legacy(output, toned, luminance, adjustments)
        else:
            output[..., :3] = quantize(apply_detail_buffered(toned, luminance, adjustments))

        logger.debug(
            "Processed %dx%d image (%s mode) in %.1f ms",
            output.shape[1],
            output.shape[0],
            self.spatial_mode.value,
            (time.perf_counter() - start) * 1000.0,
        )
        return output

    def render_preview(
        self,
        source: np.ndarray,
        adjustments: AdjustmentVector,
        viewport: Optional[Tuple[int, int]] = None,
        max_pixels: Optional[int] = None,
    ) -> Tuple[np.ndarray, PreviewInfo]:
        """Downscale `source` to fit `viewport` (width, height), then process it."""
        source = check_image(source)
        preview, info = create_preview(source, viewport=viewport, max_pixels=max_pixels)
        return self.process(preview, adjustments), info

    def render_export(self, source: np.ndarray, adjustments: AdjustmentVector) -> np.ndarray:
        """Process `source` at its full resolution."""
        source = check_image(source)
        logger.info("Rendering export at %dx%d", source.shape[1], source.shape[0])
        return self.process(source, adjustments)


def apply_adjustments(
    image: ImageLike,
    adjustments: AdjustmentVector,
    spatial_mode: Optional[Union[SpatialMode, str]] = None,
) -> ImageLike:
    """Convenience wrapper: process `image` with a one-off engine."""
    return AdjustmentEngine(spatial_mode).process(image, adjustments)
