# Image import functionality using Pillow
import os
from typing import Optional

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..utils.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.tif', '.tiff', '.bmp', '.webp', '.gif')


def load_image(file_path: str) -> Optional[np.ndarray]:
    """Loads an image from the specified file path using Pillow.

    EXIF orientation is applied so the pixels come out the way the image is
    meant to be viewed. Embedded ICC profiles are ignored.

    Args:
        file_path (str): The path to the image file.

    Returns:
        numpy.ndarray: (height, width, 4) uint8 RGBA array, or None if the
                       file is missing or cannot be decoded.
    """
    if not isinstance(file_path, str) or not file_path:
        logger.error("Invalid file path provided.")
        return None

    if not os.path.isfile(file_path):
        logger.error("File not found at '%s'", file_path)
        return None

    try:
        with Image.open(file_path) as img:
            oriented = ImageOps.exif_transpose(img)

            if oriented.info.get('icc_profile'):
                logger.info("Embedded ICC profile in '%s' is ignored.", file_path)

            if oriented.mode != 'RGBA':
                logger.debug("Converting image from mode '%s' to 'RGBA'.", oriented.mode)
                rgba = oriented.convert('RGBA')
            else:
                rgba = oriented

            image_np = np.array(rgba)

        if image_np.size == 0:
            logger.error("Loaded image is empty: '%s'", file_path)
            return None

        logger.info("Loaded image '%s' (%dx%d)", file_path, image_np.shape[1], image_np.shape[0])
        return image_np

    except UnidentifiedImageError:
        logger.error("Pillow could not identify image file format or file is corrupted: '%s'", file_path)
        return None
    except OSError:
        logger.exception("Error loading image '%s'", file_path)
        return None
