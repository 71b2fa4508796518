"""Sequential color scale over an aggregate-index domain.

The scale maps a normalized value ``t`` in ``[0, 1]`` onto a three-stop ramp
placed at the domain's min, midpoint and max. Inputs outside ``[0, 1]`` clamp
to the end colors.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from aeros.constants import DEFAULT_DOMAIN, PURPLE_RAMP


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    if len(value) != 6:
        raise ValueError(f"Not a hex color: {color!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def rgb_to_hex(rgb: Sequence[float]) -> str:
    r, g, b = (int(round(min(255.0, max(0.0, c)))) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


@dataclass(frozen=True)
class ColorDomain:
    min: float
    max: float

    @classmethod
    def from_values(cls, values: Iterable[float | None]) -> "ColorDomain":
        """Domain over the finite values; widened to ``min + 1`` when degenerate."""
        vals = [float(v) for v in values if v is not None and math.isfinite(v)]
        if not vals:
            lo, hi = DEFAULT_DOMAIN
        else:
            lo, hi = min(vals), max(vals)
        if hi <= lo:
            hi = lo + 1
        return cls(lo, hi)

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def mid(self) -> float:
        return (self.min + self.max) / 2

    def normalize(self, value: float) -> float:
        if self.span <= 0:
            return 0.0
        t = (value - self.min) / self.span
        return max(0.0, min(1.0, t))


class ColorScale:
    """Piecewise-linear RGB interpolation, clamped at both ends."""

    def __init__(self, domain: ColorDomain, ramp: Sequence[str] = PURPLE_RAMP):
        if len(ramp) != 3:
            raise ValueError("ramp needs exactly three colors")
        self.domain = domain
        self.ramp = tuple(rgb_to_hex(hex_to_rgb(c)) for c in ramp)
        self._stops = np.array([domain.min, domain.mid, domain.max], dtype=float)
        self._rgb = np.array([hex_to_rgb(c) for c in self.ramp], dtype=float)
        self.degenerate = not domain.max > domain.min

    def __call__(self, t: float) -> str:
        if self.degenerate or t is None or math.isnan(t):
            return self.ramp[0]
        value = self.domain.min + t * self.domain.span
        channels = [np.interp(value, self._stops, self._rgb[:, i]) for i in range(3)]
        return rgb_to_hex(channels)

    def for_value(self, value: float) -> str:
        return self(self.domain.normalize(value))

    def gradient_stops(self, step: float = 0.04) -> list[tuple[float, str]]:
        ts = np.append(np.arange(0.0, 1.0, step), 1.0)
        return [(float(t), self(float(t))) for t in ts]
