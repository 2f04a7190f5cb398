# IO package initialization
from .image_loader import load_image, SUPPORTED_EXTENSIONS
from .image_saver import save_image, export_filename, FORMAT_EXTENSIONS

__all__ = [
    'load_image',
    'SUPPORTED_EXTENSIONS',
    'save_image',
    'export_filename',
    'FORMAT_EXTENSIONS',
]
