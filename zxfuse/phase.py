"""
Phase arithmetic.

Spider phases are angles in radians stored in the half-open range ``[0, 2π)``.
:func:`normalize` is the only place where phases are canonicalized; every
operation that produces a phase goes through it.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import SupportsFloat

TAU = 2 * math.pi

# Absolute tolerance for comparing phases on the circle.
PHASE_EPSILON = 1e-9


def normalize(phase: SupportsFloat) -> float:
    """
    Map an angle to the range ``[0, 2π)``.

    Parameters
    ----------
    phase : SupportsFloat
        An angle in radians.

    Returns
    -------
    float
        The equivalent angle in ``[0, 2π)``.

    Raises
    ------
    ValueError
        If the angle is not finite.

    Examples
    --------
    >>> import math
    >>> normalize(2 * math.pi)
    0.0
    >>> normalize(-math.pi) == math.pi
    True
    """
    value = float(phase)
    if not math.isfinite(value):
        raise ValueError(f"Phase must be finite, got {value!r}")
    r = math.fmod(value, TAU)
    if r < 0:
        r += TAU
    # fmod of a tiny negative value plus TAU rounds up to TAU
    if r >= TAU:
        r = 0.0
    return r


def distance(a: SupportsFloat, b: SupportsFloat) -> float:
    """
    Return the distance between two angles measured along the circle.

    The result lies in ``[0, π]``.
    """
    d = normalize(float(a) - float(b))
    return min(d, TAU - d)


def phases_close(a: SupportsFloat, b: SupportsFloat, eps: float = PHASE_EPSILON) -> bool:
    """
    Check whether two angles are equal up to ``eps`` modulo ``2π``.

    Parameters
    ----------
    a, b : SupportsFloat
        Angles in radians.
    eps : float, optional
        Absolute tolerance. Default is :data:`PHASE_EPSILON`.

    Returns
    -------
    bool
        ``True`` if the angles coincide on the circle within ``eps``.
    """
    return distance(a, b) <= eps


def is_zero(phase: SupportsFloat, eps: float = PHASE_EPSILON) -> bool:
    """Check whether an angle is effectively zero modulo ``2π``."""
    return phases_close(phase, 0.0, eps)


def phase_to_str(phase: SupportsFloat, max_denominator: int = 16) -> str:
    """
    Render an angle as a multiple of π.

    Angles close to a fraction of π with a small denominator are written as
    a fraction (``"π/2"``, ``"3π/4"``); other angles fall back to a decimal
    coefficient (``"0.318π"``). The zero angle renders as ``"0"``.

    Parameters
    ----------
    phase : SupportsFloat
        An angle in radians; it is normalized first.
    max_denominator : int, optional
        Largest denominator accepted for the fractional form. Default is 16.

    Returns
    -------
    str
        The rendered angle.
    """
    value = normalize(phase)
    if is_zero(value):
        return "0"
    coeff = value / math.pi
    frac = Fraction(coeff).limit_denominator(max_denominator)
    if abs(float(frac) - coeff) * math.pi > PHASE_EPSILON:
        return f"{coeff:.3g}π"
    num = "" if frac.numerator == 1 else str(frac.numerator)
    if frac.denominator == 1:
        return f"{num}π"
    return f"{num}π/{frac.denominator}"
