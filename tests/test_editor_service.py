"""Tests for the editor facade."""

import numpy as np
import pytest
from PIL import Image

from spektra.processing.adjustments import AdjustmentVector
from spektra.processing.detail import SpatialMode
from spektra.services.editor_service import EditorService
from spektra.utils.errors import FileIOError, InvalidAdjustmentError


@pytest.fixture
def service(sample_image_rgba):
    svc = EditorService()
    svc.set_image(sample_image_rgba)
    return svc


class TestAdjustmentState:

    def test_starts_at_identity(self):
        svc = EditorService()
        assert svc.adjustments.is_identity
        assert not svc.can_undo()
        assert not svc.has_image

    def test_set_adjustment_clamps(self, service):
        vec = service.set_adjustment("exposure", 180)
        assert vec.exposure == 100
        assert service.adjustments.exposure == 100

    @pytest.mark.parametrize("value", [float("nan"), "bright", None])
    def test_set_adjustment_rejects_non_numbers(self, service, value):
        """A NaN or non-numeric slider value is an error, never a clamped extreme."""
        service.set_adjustment("exposure", 25)
        with pytest.raises(InvalidAdjustmentError) as exc_info:
            service.set_adjustment("exposure", value)
        assert exc_info.value.field == "exposure"
        assert service.adjustments.exposure == 25
        assert service.history.get_undo_count() == 1

    def test_set_adjustment_clamps_infinity(self, service):
        assert service.set_adjustment("blacks", float("-inf")).blacks == -100

    def test_unknown_adjustment(self, service):
        with pytest.raises(InvalidAdjustmentError):
            service.set_adjustment("vibrance", 10)

    def test_set_adjustments_validates(self, service):
        with pytest.raises(InvalidAdjustmentError):
            service.set_adjustments(AdjustmentVector(tint=-120))
        assert service.adjustments.is_identity

    def test_reset_single_and_all(self, service):
        service.set_adjustment("contrast", 30)
        service.set_adjustment("dehaze", 40)
        assert service.reset_adjustment("contrast") == AdjustmentVector(dehaze=40)
        assert service.reset_all().is_identity

    def test_undo_and_redo(self, service):
        service.set_adjustment("shadows", 20)
        service.set_adjustment("shadows", 45)
        assert service.undo().shadows == 20
        assert service.undo().shadows == 0
        assert not service.can_undo()
        assert service.undo().shadows == 0
        assert service.redo().shadows == 20

    def test_slider_drag_is_one_undo_step(self, service):
        for value in (5, 15, 25, 35):
            service.set_adjustment("clarity", value, coalesce=True)
        assert service.adjustments.clarity == 35
        assert service.undo().clarity == 0

    def test_reset_unknown_adjustment(self, service):
        with pytest.raises(InvalidAdjustmentError):
            service.reset_adjustment("vibrance")

    def test_repeated_value_not_recorded(self, service):
        service.set_adjustment("tint", 10)
        service.set_adjustment("tint", 10)
        assert service.history.get_undo_count() == 1

    def test_on_change_callback(self):
        calls = []
        svc = EditorService(on_change=lambda: calls.append(1))
        before = len(calls)
        svc.set_adjustment("texture", 5)
        assert len(calls) == before + 1


class TestRendering:

    def test_no_image_is_a_noop(self, tmp_path):
        svc = EditorService()
        assert svc.render_preview((100, 100)) is None
        assert svc.render_export() is None
        assert not svc.export(str(tmp_path / "out.png"))

    def test_identity_export_matches_source(self, service, sample_image_rgba):
        assert np.array_equal(service.render_export(), sample_image_rgba)

    def test_preview_is_downscaled(self, service):
        preview, info = service.render_preview((10, 10))
        assert preview.shape == (10, 10, 4)
        assert info.scale_factor == pytest.approx(0.5)

    def test_render_reflects_current_adjustments(self, service):
        service.set_adjustment("exposure", -100)
        result = service.render_export()
        # Red quadrant halves to 127.5
        assert abs(int(result[0, 0, 0]) - 128) <= 1
        assert list(result[0, 0, 1:]) == [0, 0, 255]

    def test_spatial_mode_passed_to_engine(self):
        svc = EditorService(spatial_mode=SpatialMode.BUFFERED)
        assert svc.engine.spatial_mode is SpatialMode.BUFFERED


class TestFiles:

    def test_load_and_export(self, tmp_path):
        src = tmp_path / "in.png"
        Image.fromarray(np.full((6, 8, 3), 100, dtype=np.uint8)).save(src)

        svc = EditorService()
        image = svc.load_image(str(src))
        assert image.shape == (6, 8, 4)
        assert svc.has_image

        svc.set_adjustment("exposure", 100)
        out = tmp_path / "edited-image.png"
        assert svc.export(str(out))
        with Image.open(out) as img:
            saved = np.array(img)
        assert np.all(saved[..., :3] == 200)

    def test_load_missing_file(self, tmp_path):
        svc = EditorService()
        with pytest.raises(FileIOError) as exc_info:
            svc.load_image(str(tmp_path / "missing.png"))
        assert exc_info.value.file_path.endswith("missing.png")
        assert not svc.has_image
