"""
Easing curves.

Every curve maps t in [0.0, 1.0] to an eased fraction. Most curves stay in
[0, 1]; back and elastic curves overshoot on purpose.

Based on the standard easing equations (Robert Penner, https://easings.net/)
plus the cubic-bezier spline used for CSS-style ease curves.
"""
import math
from typing import Callable, Dict

from keyframes.animation.types import EasingCurve

Curve = Callable[[float], float]

_BACK_C1 = 1.70158
_BACK_C2 = _BACK_C1 * 1.525
_BACK_C3 = _BACK_C1 + 1
_ELASTIC_C4 = (2 * math.pi) / 3
_ELASTIC_C5 = (2 * math.pi) / 4.5


def linear(t: float) -> float:
    return t


def discrete(t: float) -> float:
    """Jump to the end value only when the segment completes."""
    return 1.0 if t >= 1.0 else 0.0


def _power_in(n: int) -> Curve:
    return lambda t: t ** n


def _power_out(n: int) -> Curve:
    return lambda t: 1 - (1 - t) ** n


def _power_in_out(n: int) -> Curve:
    def curve(t: float) -> float:
        if t < 0.5:
            return (2 ** (n - 1)) * t ** n
        return 1 - ((-2 * t + 2) ** n) / 2
    return curve


def sine_in(t: float) -> float:
    return 1 - math.cos(t * math.pi / 2)


def sine_out(t: float) -> float:
    return math.sin(t * math.pi / 2)


def sine_in_out(t: float) -> float:
    return -(math.cos(math.pi * t) - 1) / 2


def expo_in(t: float) -> float:
    return 0.0 if t <= 0 else 2 ** (10 * t - 10)


def expo_out(t: float) -> float:
    return 1.0 if t >= 1 else 1 - 2 ** (-10 * t)


def expo_in_out(t: float) -> float:
    if t <= 0 or t >= 1:
        return float(t >= 1)
    if t < 0.5:
        return 2 ** (20 * t - 10) / 2
    return (2 - 2 ** (-20 * t + 10)) / 2


def elastic_in(t: float) -> float:
    if t <= 0 or t >= 1:
        return float(t >= 1)
    return -(2 ** (10 * t - 10)) * math.sin((t * 10 - 10.75) * _ELASTIC_C4)


def elastic_out(t: float) -> float:
    if t <= 0 or t >= 1:
        return float(t >= 1)
    return 2 ** (-10 * t) * math.sin((t * 10 - 0.75) * _ELASTIC_C4) + 1


def elastic_in_out(t: float) -> float:
    if t <= 0 or t >= 1:
        return float(t >= 1)
    if t < 0.5:
        return -(2 ** (20 * t - 10) * math.sin((20 * t - 11.125) * _ELASTIC_C5)) / 2
    return (2 ** (-20 * t + 10) * math.sin((20 * t - 11.125) * _ELASTIC_C5)) / 2 + 1


def back_in(t: float) -> float:
    return _BACK_C3 * t ** 3 - _BACK_C1 * t ** 2


def back_out(t: float) -> float:
    return 1 + _BACK_C3 * (t - 1) ** 3 + _BACK_C1 * (t - 1) ** 2


def back_in_out(t: float) -> float:
    if t < 0.5:
        return ((2 * t) ** 2 * ((_BACK_C2 + 1) * 2 * t - _BACK_C2)) / 2
    return ((2 * t - 2) ** 2 * ((_BACK_C2 + 1) * (t * 2 - 2) + _BACK_C2) + 2) / 2


def bounce_out(t: float) -> float:
    n1 = 7.5625
    d1 = 2.75
    if t < 1 / d1:
        return n1 * t * t
    if t < 2 / d1:
        t -= 1.5 / d1
        return n1 * t * t + 0.75
    if t < 2.5 / d1:
        t -= 2.25 / d1
        return n1 * t * t + 0.9375
    t -= 2.625 / d1
    return n1 * t * t + 0.984375


def bounce_in(t: float) -> float:
    return 1 - bounce_out(1 - t)


def bounce_in_out(t: float) -> float:
    if t < 0.5:
        return (1 - bounce_out(1 - 2 * t)) / 2
    return (1 + bounce_out(2 * t - 1)) / 2


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> Curve:
    """
    Build a spline curve through (0,0), (x1,y1), (x2,y2), (1,1).

    x1 and x2 must lie in [0, 1] so the curve stays a function of time.
    The bezier parameter for a given t is found with Newton iterations and
    falls back to bisection when the slope flattens out.
    """
    if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
        raise ValueError(f"Spline control x values must be in [0, 1], got {x1}, {x2}")

    cx = 3 * x1
    bx = 3 * (x2 - x1) - cx
    ax = 1 - cx - bx
    cy = 3 * y1
    by = 3 * (y2 - y1) - cy
    ay = 1 - cy - by

    def sample_x(s: float) -> float:
        return ((ax * s + bx) * s + cx) * s

    def sample_y(s: float) -> float:
        return ((ay * s + by) * s + cy) * s

    def slope_x(s: float) -> float:
        return (3 * ax * s + 2 * bx) * s + cx

    def solve(t: float) -> float:
        s = t
        for _ in range(8):
            error = sample_x(s) - t
            if abs(error) < 1e-7:
                return s
            d = slope_x(s)
            if abs(d) < 1e-6:
                break
            s -= error / d
        lo, hi = 0.0, 1.0
        s = t
        while lo < hi:
            x = sample_x(s)
            if abs(x - t) < 1e-7:
                return s
            if t > x:
                lo = s
            else:
                hi = s
            s = (hi - lo) / 2 + lo
            if hi - lo < 1e-9:
                break
        return s

    def curve(t: float) -> float:
        if t <= 0.0:
            return 0.0
        if t >= 1.0:
            return 1.0
        return sample_y(solve(t))

    return curve


EASING_FUNCTIONS: Dict[EasingCurve, Curve] = {
    EasingCurve.LINEAR: linear,
    EasingCurve.DISCRETE: discrete,

    EasingCurve.QUAD_IN: _power_in(2),
    EasingCurve.QUAD_OUT: _power_out(2),
    EasingCurve.QUAD_IN_OUT: _power_in_out(2),

    EasingCurve.CUBIC_IN: _power_in(3),
    EasingCurve.CUBIC_OUT: _power_out(3),
    EasingCurve.CUBIC_IN_OUT: _power_in_out(3),

    EasingCurve.SINE_IN: sine_in,
    EasingCurve.SINE_OUT: sine_out,
    EasingCurve.SINE_IN_OUT: sine_in_out,

    EasingCurve.EXPO_IN: expo_in,
    EasingCurve.EXPO_OUT: expo_out,
    EasingCurve.EXPO_IN_OUT: expo_in_out,

    EasingCurve.ELASTIC_IN: elastic_in,
    EasingCurve.ELASTIC_OUT: elastic_out,
    EasingCurve.ELASTIC_IN_OUT: elastic_in_out,

    EasingCurve.BACK_IN: back_in,
    EasingCurve.BACK_OUT: back_out,
    EasingCurve.BACK_IN_OUT: back_in_out,

    EasingCurve.BOUNCE_IN: bounce_in,
    EasingCurve.BOUNCE_OUT: bounce_out,
    EasingCurve.BOUNCE_IN_OUT: bounce_in_out,
}


def get_easing_function(curve: EasingCurve) -> Curve:
    """
    Get the easing function for a given curve.

    Raises:
        ValueError: If curve is not found
    """
    if curve not in EASING_FUNCTIONS:
        raise ValueError(f"Unknown easing curve: {curve}")

    return EASING_FUNCTIONS[curve]
