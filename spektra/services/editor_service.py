from __future__ import annotations

from typing import Callable, Optional, Tuple

import numpy as np

from ..io import image_loader, image_saver
from ..processing.adjustments import AdjustmentVector, clamp_adjustment
from ..processing.buffer import check_image
from ..processing.detail import SpatialMode
from ..processing.engine import AdjustmentEngine
from ..utils.errors import FileIOError, InvalidAdjustmentError
from ..utils.history import AdjustmentHistory
from ..utils.logger import get_logger
from ..utils.preview import PreviewInfo

logger = get_logger(__name__)


class EditorService:
    """
    Thin facade over IO, adjustment state and the engine.

    Holds the loaded source image and the current adjustment vector. Every
    change to the vector is recorded in an undoable history. Rendering with
    no image loaded is a no-op.
    """

    def __init__(
        self,
        engine: Optional[AdjustmentEngine] = None,
        spatial_mode: Optional[SpatialMode] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._engine = engine or AdjustmentEngine(spatial_mode)
        self._source: Optional[np.ndarray] = None
        self._adjustments = AdjustmentVector()
        self._history = AdjustmentHistory(self._adjustments, on_change=on_change)

    # --- Source image ---

    @property
    def engine(self) -> AdjustmentEngine:
        return self._engine

    @property
    def source(self) -> Optional[np.ndarray]:
        return self._source

    @property
    def has_image(self) -> bool:
        return self._source is not None

    def load_image(self, file_path: str) -> np.ndarray:
        """Load `file_path` as the source image. Raises FileIOError on failure."""
        image = image_loader.load_image(file_path)
        if image is None:
            raise FileIOError(
                f"Could not load image '{file_path}'",
                file_path=file_path,
                user_message="The image could not be opened.",
            )
        self._source = image
        return image

    def set_image(self, image: Optional[np.ndarray]) -> None:
        self._source = None if image is None else check_image(image)

    # --- Adjustment state ---

    @property
    def adjustments(self) -> AdjustmentVector:
        return self._adjustments

    @property
    def history(self) -> AdjustmentHistory:
        return self._history

    def set_adjustment(self, name: str, value: float, coalesce: bool = False) -> AdjustmentVector:
        """
        Set one slider, clamping to range, and record the change.

        Pass ``coalesce=True`` while a slider is being dragged so the whole
        drag becomes a single undo step.
        """
        if name not in AdjustmentVector.field_names():
            raise InvalidAdjustmentError(f"Unknown adjustment '{name}'", field=name, value=value)
        vector = self._adjustments.replace(**{name: clamp_adjustment(value, field=name)})
        return self._apply(vector, f"set {name}", coalesce=coalesce)

    def set_adjustments(self, adjustments: AdjustmentVector, description: str = "set adjustments") -> AdjustmentVector:
        return self._apply(adjustments.validate(), description)

    def reset_adjustment(self, name: str) -> AdjustmentVector:
        if name not in AdjustmentVector.field_names():
            raise InvalidAdjustmentError(f"Unknown adjustment '{name}'", field=name)
        return self._apply(self._adjustments.replace(**{name: 0.0}), f"reset {name}")

    def reset_all(self) -> AdjustmentVector:
        return self._apply(AdjustmentVector(), "reset all")

    def undo(self) -> AdjustmentVector:
        restored = self._history.undo()
        if restored is not None:
            self._adjustments = restored
        return self._adjustments

    def redo(self) -> AdjustmentVector:
        restored = self._history.redo()
        if restored is not None:
            self._adjustments = restored
        return self._adjustments

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def _apply(self, vector: AdjustmentVector, description: str, coalesce: bool = False) -> AdjustmentVector:
        self._adjustments = vector
        self._history.record(vector, description, coalesce=coalesce)
        return vector

    # --- Rendering ---

    def render_preview(
        self, viewport: Optional[Tuple[int, int]] = None
    ) -> Optional[Tuple[np.ndarray, PreviewInfo]]:
        if self._source is None:
            logger.debug("render_preview called without an image")
            return None
        return self._engine.render_preview(self._source, self._adjustments, viewport=viewport)

    def render_export(self) -> Optional[np.ndarray]:
        if self._source is None:
            logger.debug("render_export called without an image")
            return None
        return self._engine.render_export(self._source, self._adjustments)

    def export(self, file_path: str, quality: Optional[int] = None) -> bool:
        """Render at full resolution and save. Returns False if there is no image or saving fails."""
        rendered = self.render_export()
        if rendered is None:
            return False
        return image_saver.save_image(rendered, file_path, quality=quality)
