# Pixel buffer container
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from ..utils.errors import DimensionMismatchError, ProcessingError

SUPPORTED_CHANNELS = (3, 4)


def check_image(image: np.ndarray, step: str = "input") -> np.ndarray:
    """
    Validate an image array for the engine.

    Accepts (h, w, 3) RGB or (h, w, 4) RGBA arrays. Non-uint8 numeric input
    is clipped and rounded half to even, like the final output.
    """
    if not isinstance(image, np.ndarray):
        raise ProcessingError(f"Expected a numpy array, got {type(image).__name__}", step=step)
    if image.ndim != 3 or image.shape[2] not in SUPPORTED_CHANNELS:
        raise DimensionMismatchError(
            f"Image must be (height, width, 3|4), got shape {image.shape}",
            actual=tuple(image.shape),
        )
    if image.dtype != np.uint8:
        if not np.issubdtype(image.dtype, np.number):
            raise ProcessingError(f"Unsupported image dtype {image.dtype}", step=step)
        image = np.rint(np.clip(image, 0, 255)).astype(np.uint8)
    return image


@dataclass
class PixelBuffer:
    """
    Row-major raster of interleaved 8-bit samples, origin top-left.

    `data` always has shape (height, width, channels).
    """
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        self.data = check_image(self.data)
        actual = self.data.shape[:2]
        if actual != (self.height, self.width):
            raise DimensionMismatchError(
                f"Buffer is {actual[1]}x{actual[0]}, declared {self.width}x{self.height}",
                expected=(self.height, self.width),
                actual=tuple(actual),
            )

    @property
    def channels(self) -> int:
        return self.data.shape[2]

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'PixelBuffer':
        array = check_image(array)
        return cls(width=array.shape[1], height=array.shape[0], data=array)

    @classmethod
    def from_flat(
        cls,
        samples: Union[bytes, bytearray, Sequence[int], np.ndarray],
        width: int,
        height: int,
        channels: int = 4,
    ) -> 'PixelBuffer':
        """Build a buffer from a flat interleaved sample sequence (e.g. canvas RGBA bytes)."""
        if width <= 0 or height <= 0:
            raise DimensionMismatchError(f"Invalid dimensions {width}x{height}", expected=(height, width))
        if channels not in SUPPORTED_CHANNELS:
            raise DimensionMismatchError(f"Unsupported channel count {channels}")

        if isinstance(samples, (bytes, bytearray)):
            flat = np.frombuffer(samples, dtype=np.uint8)
        else:
            flat = np.asarray(samples)
            if flat.ndim != 1:
                raise DimensionMismatchError(
                    f"Expected a flat sample sequence, got shape {flat.shape}",
                    actual=tuple(flat.shape),
                )

        expected = width * height * channels
        if flat.size != expected:
            raise DimensionMismatchError(
                f"Expected {expected} samples for {width}x{height}x{channels}, got {flat.size}",
                expected=(expected,),
                actual=(flat.size,),
            )
        return cls(width=width, height=height, data=flat.reshape(height, width, channels).copy())

    def to_flat(self) -> np.ndarray:
        """Flat interleaved uint8 samples."""
        return self.data.reshape(-1).copy()

    def copy(self) -> 'PixelBuffer':
        return PixelBuffer(self.width, self.height, self.data.copy())
