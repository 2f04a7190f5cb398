# Processing package initialization
from .adjustments import AdjustmentVector, clamp_adjustment, ADJUSTMENT_MIN, ADJUSTMENT_MAX
from .colorspace import rgb_to_hsl, hsl_to_rgb, rgb_to_hsl_array, hsl_to_rgb_array
from .buffer import PixelBuffer
from .tone import apply_tone
from .detail import SpatialMode, apply_detail_buffered, apply_detail_legacy
from .engine import AdjustmentEngine, apply_adjustments
from .scheduler import RenderScheduler, RenderState
