"""Tests for image I/O functionality."""

import numpy as np
import pytest
from PIL import Image

from spektra.io.image_loader import SUPPORTED_EXTENSIONS, load_image
from spektra.io.image_saver import export_filename, save_image


class TestImageLoader:
    """Tests for image loading functionality."""

    def test_load_nonexistent_file(self):
        """Loading nonexistent file should return None."""
        assert load_image("/nonexistent/path/to/image.jpg") is None

    def test_load_invalid_path(self):
        assert load_image("") is None
        assert load_image(None) is None

    def test_load_rgb_png_as_rgba(self, tmp_path):
        """Opaque images gain a fully opaque alpha channel."""
        path = tmp_path / "rgb.png"
        Image.fromarray(np.full((3, 5, 3), [10, 20, 30], dtype=np.uint8)).save(path)

        image = load_image(str(path))
        assert image.shape == (3, 5, 4)
        assert image.dtype == np.uint8
        assert list(image[0, 0]) == [10, 20, 30, 255]

    def test_load_corrupt_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"definitely not a png")
        assert load_image(str(path)) is None

    def test_supported_extensions(self):
        assert '.jpg' in SUPPORTED_EXTENSIONS
        assert '.png' in SUPPORTED_EXTENSIONS


class TestImageSaver:
    """Tests for image saving functionality."""

    def test_png_round_trip_keeps_alpha(self, tmp_path, sample_image_rgba):
        path = str(tmp_path / "out.png")
        assert save_image(sample_image_rgba, path)
        assert np.array_equal(load_image(path), sample_image_rgba)

    def test_jpeg_drops_alpha(self, tmp_path, sample_image_rgba):
        path = str(tmp_path / "out.jpg")
        assert save_image(sample_image_rgba, path, quality=92)
        with Image.open(path) as img:
            assert img.mode == "RGB"
            assert img.size == (20, 20)

    def test_creates_missing_directory(self, tmp_path, sample_image_rgba):
        path = tmp_path / "nested" / "dir" / "out.png"
        assert save_image(sample_image_rgba, str(path))
        assert path.exists()

    def test_unknown_extension_fails(self, tmp_path, sample_image_rgba):
        assert not save_image(sample_image_rgba, str(tmp_path / "out.xyz"))

    def test_rejects_bad_shapes(self, tmp_path):
        assert not save_image(np.zeros((4, 4), dtype=np.uint8), str(tmp_path / "flat.png"))
        assert not save_image(np.zeros((0, 0, 3), dtype=np.uint8), str(tmp_path / "empty.png"))

    def test_float_input_is_converted(self, tmp_path):
        path = str(tmp_path / "float.png")
        assert save_image(np.full((2, 2, 3), 300.0), path)
        assert np.all(load_image(path)[..., :3] == 255)


class TestExportFilename:

    @pytest.mark.parametrize("fmt, expected", [
        ("png", "edited-image.png"),
        ("jpeg", "edited-image.jpg"),
        ("JPG", "edited-image.jpg"),
    ])
    def test_default_names(self, fmt, expected):
        assert export_filename(fmt) == expected

    def test_custom_stem(self):
        assert export_filename("webp", stem="holiday") == "holiday.webp"

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            export_filename("gif")
