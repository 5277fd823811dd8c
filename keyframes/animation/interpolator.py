"""
Value interpolators.

An Interpolator turns a segment fraction into a value between a start and
an end value. The easing part (``curve``) is separate from the value part
(``interpolate``) so wrappers such as ConditionalInterpolator can reuse
either one.
"""
import numbers
from typing import Any, Optional

import numpy as np

from keyframes.animation.easing import Curve, cubic_bezier, get_easing_function
from keyframes.animation.types import EasingCurve


def _clamp_unit(fraction: float) -> float:
    return max(0.0, min(1.0, fraction))


def blend(start: Any, end: Any, t: float) -> Any:
    """
    Blend two values at eased fraction ``t``.

    - ints stay ints (rounded), other reals become floats
    - lists, tuples and numpy arrays blend element-wise
    - objects with ``interpolate(end, t)`` do their own blending
    - anything else is discrete: start until t reaches 1
    """
    if isinstance(start, bool) or isinstance(end, bool):
        return end if t >= 1.0 else start

    if isinstance(start, numbers.Integral) and isinstance(end, numbers.Integral):
        return int(round(start + (end - start) * t))

    if isinstance(start, numbers.Real) and isinstance(end, numbers.Real):
        return float(start + (end - start) * t)

    if isinstance(start, (list, tuple, np.ndarray)) and isinstance(end, (list, tuple, np.ndarray)):
        start_arr = np.asarray(start, dtype=float)
        end_arr = np.asarray(end, dtype=float)
        if start_arr.shape == end_arr.shape:
            mixed = start_arr + (end_arr - start_arr) * t
            if isinstance(start, np.ndarray):
                return mixed
            return type(start)(mixed.tolist())

    interpolate = getattr(start, "interpolate", None)
    if callable(interpolate):
        return interpolate(end, t)

    return end if t >= 1.0 else start


class Interpolator:
    """Easing curve plus value blending."""

    def __init__(self, curve: Curve, name: str = "custom"):
        self._curve = curve
        self.name = name

    def curve(self, t: float) -> float:
        """Eased fraction for a linear fraction t in [0, 1]."""
        return self._curve(_clamp_unit(t))

    def interpolate(self, start_value: Any, end_value: Any, fraction: float) -> Any:
        """Value between start_value and end_value at the given fraction."""
        return blend(start_value, end_value, self.curve(fraction))

    @classmethod
    def from_easing(cls, easing: EasingCurve) -> "Interpolator":
        return cls(get_easing_function(easing), name=easing.value)

    @classmethod
    def spline(cls, x1: float, y1: float, x2: float, y2: float) -> "Interpolator":
        return cls(cubic_bezier(x1, y1, x2, y2), name=f"spline({x1}, {y1}, {x2}, {y2})")

    @classmethod
    def of(cls, value: Optional[Any]) -> Optional["Interpolator"]:
        """Coerce an EasingCurve, a bare curve function or an Interpolator."""
        if value is None or isinstance(value, Interpolator):
            return value
        if isinstance(value, EasingCurve):
            return cls.from_easing(value)
        if callable(value):
            return cls(value, name=getattr(value, "__name__", "custom"))
        raise TypeError(f"Cannot build an Interpolator from {value!r}")

    def __repr__(self) -> str:
        return f"Interpolator({self.name})"


LINEAR = Interpolator.from_easing(EasingCurve.LINEAR)
DISCRETE = Interpolator.from_easing(EasingCurve.DISCRETE)
EASE_IN = Interpolator.spline(0.42, 0.0, 1.0, 1.0)
EASE_OUT = Interpolator.spline(0.0, 0.0, 0.58, 1.0)
EASE_BOTH = Interpolator.spline(0.42, 0.0, 0.58, 1.0)

InterpolatorLike = Any  # Interpolator | EasingCurve | Callable[[float], float]
