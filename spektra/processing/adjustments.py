# Adjustment parameters
import math
import numbers
from dataclasses import dataclass, asdict, fields, replace as dc_replace
from typing import Any, Dict, Mapping, Optional

from ..config import settings
from ..utils.errors import InvalidAdjustmentError

ADJUSTMENT_MIN = float(settings.ENGINE_DEFAULTS["adjustment_min"])
ADJUSTMENT_MAX = float(settings.ENGINE_DEFAULTS["adjustment_max"])


@dataclass(frozen=True)
class AdjustmentVector:
    """
    The full set of slider values driving the pipeline.

    Every field lies in [-100, 100] and 0 is the neutral value, so the
    default-constructed vector leaves an image untouched.
    """

    # Light
    exposure: float = 0.0
    contrast: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0
    whites: float = 0.0
    blacks: float = 0.0
    # Color
    temperature: float = 0.0
    tint: float = 0.0
    saturation: float = 0.0
    # Effects
    clarity: float = 0.0
    dehaze: float = 0.0
    texture: float = 0.0

    @classmethod
    def field_names(cls):
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'AdjustmentVector':
        """Build a vector from a mapping; unknown keys are ignored."""
        known = set(cls.field_names())
        return cls(**{k: float(v) for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def replace(self, **changes) -> 'AdjustmentVector':
        return dc_replace(self, **changes)

    @property
    def is_identity(self) -> bool:
        return all(getattr(self, name) == 0 for name in self.field_names())

    @property
    def has_spatial_effects(self) -> bool:
        return self.clarity != 0 or self.dehaze != 0 or self.texture != 0

    def validate(self) -> 'AdjustmentVector':
        """Raise InvalidAdjustmentError for the first out-of-range field; return self otherwise."""
        for name in self.field_names():
            value = getattr(self, name)
            if not isinstance(value, numbers.Real) or isinstance(value, bool) or not math.isfinite(value):
                raise InvalidAdjustmentError(
                    f"Adjustment '{name}' must be a finite number, got {value!r}",
                    field=name,
                    value=value,
                )
            if value < ADJUSTMENT_MIN or value > ADJUSTMENT_MAX:
                raise InvalidAdjustmentError(
                    f"Adjustment '{name}'={value} outside [{ADJUSTMENT_MIN:g}, {ADJUSTMENT_MAX:g}]",
                    field=name,
                    value=value,
                )
        return self

    def clamped(self) -> 'AdjustmentVector':
        """Return a copy with every field clamped into range. NaN is still rejected."""
        return AdjustmentVector(**{
            name: clamp_adjustment(getattr(self, name), field=name) for name in self.field_names()
        })


def clamp_adjustment(value: float, field: Optional[str] = None) -> float:
    """Clamp a single slider value into the adjustment range. NaN has no position to clamp to."""
    label = field or 'value'
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidAdjustmentError(
            f"Adjustment '{label}' must be a number, got {value!r}", field=field, value=value
        ) from None
    if math.isnan(value):
        raise InvalidAdjustmentError(f"Adjustment '{label}' is NaN", field=field, value=value)
    return min(ADJUSTMENT_MAX, max(ADJUSTMENT_MIN, value))
