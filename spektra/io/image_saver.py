# Export functionality using Pillow
import os
from typing import Optional

import numpy as np
from PIL import Image

from ..config import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

FORMAT_EXTENSIONS = {
    "png": ".png",
    "jpeg": ".jpg",
    "jpg": ".jpg",
    "tiff": ".tif",
    "webp": ".webp",
}

# Formats that cannot store an alpha channel
_OPAQUE_EXTENSIONS = ('.jpg', '.jpeg', '.bmp')


def export_filename(fmt: str = "png", stem: Optional[str] = None) -> str:
    """Default download name for an export, e.g. 'edited-image.jpg'."""
    ext = FORMAT_EXTENSIONS.get(fmt.lower())
    if ext is None:
        raise ValueError(f"Unsupported export format '{fmt}'")
    return f"{stem or settings.EXPORT_DEFAULTS['default_filename']}{ext}"


def save_image(
    image: np.ndarray,
    file_path: str,
    quality: Optional[int] = None,
    png_compression: Optional[int] = None,
) -> bool:
    """Saves an RGB or RGBA image to the specified file path using Pillow.

    The format is chosen from the file extension. Alpha is dropped for
    formats that cannot store it (JPEG, BMP).

    Args:
        image (numpy.ndarray): (h, w, 3) or (h, w, 4) uint8 array.
        file_path (str): Destination path including extension.
        quality (int): JPEG/WebP quality (1-100). Defaults to the export setting.
        png_compression (int): PNG compression level (0-9).

    Returns:
        bool: True if saving was successful, False otherwise.
    """
    if quality is None:
        quality = settings.EXPORT_DEFAULTS["jpeg_quality"]
    if png_compression is None:
        png_compression = settings.EXPORT_DEFAULTS["png_compression"]

    if image is None or image.size == 0:
        logger.error("Cannot save an empty image.")
        return False

    if not isinstance(file_path, str) or not file_path:
        logger.error("Invalid file path provided for saving.")
        return False

    if image.ndim != 3 or image.shape[2] not in (3, 4):
        logger.error("Image must have 3 or 4 channels to save, got shape %s.", image.shape)
        return False

    if image.dtype != np.uint8:
        logger.warning("Image data type is not uint8. Clipping and converting.")
        image = np.clip(image, 0, 255).astype(np.uint8)

    output_dir = os.path.dirname(file_path)
    if output_dir and not os.path.exists(output_dir):
        try:
            os.makedirs(output_dir)
            logger.info("Created output directory: %s", output_dir)
        except OSError:
            logger.exception("Could not create directory '%s'", output_dir)
            return False

    ext = os.path.splitext(file_path)[1].lower()
    mode = 'RGBA' if image.shape[2] == 4 else 'RGB'
    save_kwargs = {}

    try:
        img = Image.fromarray(image)
        if mode == 'RGBA' and ext in _OPAQUE_EXTENSIONS:
            img = img.convert('RGB')

        if ext in ['.jpg', '.jpeg']:
            save_kwargs['quality'] = max(1, min(100, int(quality)))
            save_kwargs['optimize'] = True
        elif ext == '.png':
            save_kwargs['compress_level'] = max(0, min(9, int(png_compression)))
        elif ext in ['.tif', '.tiff']:
            save_kwargs['compression'] = 'tiff_lzw'
        elif ext == '.webp':
            save_kwargs['quality'] = max(0, min(100, int(quality)))

        img.save(file_path, **save_kwargs)
        logger.info("Successfully saved image to: '%s'", file_path)
        return True

    except (KeyError, ValueError):
        # Pillow raises these for unknown extensions
        logger.error("Pillow could not determine save format for: '%s'", file_path)
        return False
    except OSError:
        logger.exception("OS error saving image '%s'", file_path)
        return False
