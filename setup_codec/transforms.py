"""Paired numeric transforms between raw and canonical values.

A Transform reconciles one unit or sign convention. ``decode`` maps the
raw vendor number to the canonical number and ``encode`` maps it back;
``encode(decode(x)) == x`` must hold for every finite ``x``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, List

# Zero, both signs, fractions and a large magnitude.
SAMPLE_VALUES = (0.0, 1.0, -1.0, 12.5, -12.5, 1e6, -3.25e-3)


@dataclass(frozen=True)
class Transform:
    decode: Callable[[float], float]
    encode: Callable[[float], float]
    name: str = "custom"


def _negate(value: float) -> float:
    return -value


def negate() -> Transform:
    """Sign-convention flip, e.g. camber reported as a positive number."""
    return Transform(decode=_negate, encode=_negate, name="negate")


def _as_decimal(value: float) -> Decimal:
    # repr gives the shortest string that round-trips the float
    return Decimal(repr(float(value)))


def rescale(factor: float) -> Transform:
    """Unit rescale: canonical = raw * factor.

    The arithmetic is done in decimal so that multiplying and dividing by
    factors like 1000 does not pick up binary rounding error.
    """
    scale = Decimal(str(factor))
    if scale == 0 or not scale.is_finite():
        raise ValueError(f"Scale factor must be finite and non-zero, got {factor!r}")

    def decode(value: float) -> float:
        return float(_as_decimal(value) * scale)

    def encode(value: float) -> float:
        return float(_as_decimal(value) / scale)

    return Transform(decode=decode, encode=encode, name=f"scale({factor})")


def roundtrip_failures(transform: Transform, samples: Iterable[float] = SAMPLE_VALUES) -> List[float]:
    """Samples for which ``encode(decode(x))`` does not give back ``x``."""
    failures = []
    for value in samples:
        try:
            restored = transform.encode(transform.decode(value))
        except (ArithmeticError, TypeError, ValueError):
            failures.append(value)
            continue
        if not math.isclose(restored, value, rel_tol=1e-12, abs_tol=1e-12):
            failures.append(value)
    return failures
