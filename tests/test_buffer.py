import numpy as np
import pytest

from spektra.processing.buffer import PixelBuffer, check_image
from spektra.utils.errors import DimensionMismatchError, ProcessingError


class TestPixelBuffer:
    """Tests for the flat-sample raster container."""

    def test_from_flat_bytes(self):
        samples = bytes(range(2 * 3 * 4))
        buf = PixelBuffer.from_flat(samples, width=3, height=2)
        assert buf.channels == 4
        assert buf.data.shape == (2, 3, 4)
        # Row-major, origin top-left: pixel (x=1, y=0) starts at sample 4
        assert list(buf.data[0, 1]) == [4, 5, 6, 7]
        assert list(buf.data[1, 0]) == [12, 13, 14, 15]

    def test_to_flat_restores_sample_order(self):
        samples = np.arange(24, dtype=np.uint8)
        buf = PixelBuffer.from_flat(samples, width=2, height=3)
        assert np.array_equal(buf.to_flat(), samples)

    def test_from_flat_list_rgb(self):
        buf = PixelBuffer.from_flat([10, 20, 30, 40, 50, 60], width=2, height=1, channels=3)
        assert buf.channels == 3
        assert list(buf.data[0, 1]) == [40, 50, 60]

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatchError) as exc_info:
            PixelBuffer.from_flat(bytes(15), width=2, height=2)
        assert exc_info.value.expected == (16,)
        assert exc_info.value.actual == (15,)

    @pytest.mark.parametrize("width, height", [(0, 2), (2, -1)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(DimensionMismatchError):
            PixelBuffer.from_flat(b"", width=width, height=height)

    def test_unsupported_channels(self):
        with pytest.raises(DimensionMismatchError):
            PixelBuffer.from_flat(bytes(8), width=2, height=2, channels=2)

    def test_declared_size_must_match_data(self):
        with pytest.raises(DimensionMismatchError):
            PixelBuffer(width=4, height=4, data=np.zeros((4, 3, 4), dtype=np.uint8))

    def test_copy_is_independent(self, sample_image_rgba):
        buf = PixelBuffer.from_array(sample_image_rgba)
        clone = buf.copy()
        clone.data[0, 0] = 0
        assert buf.data[0, 0, 0] == 255


class TestCheckImage:

    def test_passes_uint8_through(self, sample_image_rgba):
        assert check_image(sample_image_rgba) is sample_image_rgba

    def test_converts_float_input(self):
        out = check_image(np.array([[[-5.0, 12.0, 300.0]]]))
        assert out.dtype == np.uint8
        assert out.tolist() == [[[0, 12, 255]]]

    def test_float_input_is_rounded_not_truncated(self):
        out = check_image(np.array([[[127.6, 0.4, 2.5]]]))
        assert out.tolist() == [[[128, 0, 2]]]

    def test_rejects_non_arrays(self):
        with pytest.raises(ProcessingError):
            check_image([[1, 2, 3]])

    def test_rejects_non_numeric(self):
        with pytest.raises(ProcessingError):
            check_image(np.full((1, 1, 3), "a"))
