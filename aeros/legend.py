"""Gradient legend drawn from the same scale object as the map."""

from __future__ import annotations

import html
import math
from dataclasses import dataclass

import numpy as np

from aeros.colors import ColorScale
from aeros.constants import PURPLE_LIGHT, SLATE_600, SLATE_700


def nice_ticks(lo: float, hi: float, count: int) -> list[float]:
    if count <= 0 or not hi > lo:
        return [lo]
    step = (hi - lo) / count
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    if error >= math.sqrt(50):
        factor = 10
    elif error >= math.sqrt(10):
        factor = 5
    elif error >= math.sqrt(2):
        factor = 2
    else:
        factor = 1
    inc = factor * 10.0 ** power
    start, stop = math.ceil(lo / inc), math.floor(hi / inc)
    return [round(float(v), 10) for v in np.arange(start, stop + 1) * inc]


@dataclass(frozen=True)
class LegendTick:
    value: float
    offset: float
    color: str


@dataclass(frozen=True)
class LegendLayout:
    bar_length: int
    bar_thickness: int
    stops: list[tuple[float, str]]
    ticks: list[LegendTick]


class LegendRenderer:
    def __init__(self, title: str = "Air Quality Index", orientation: str = "horizontal",
                 bar_thickness: int = 22, narrow_breakpoint: int = 640):
        if orientation not in ("horizontal", "vertical"):
            raise ValueError(f"Unknown legend orientation: {orientation}")
        self.title = title
        self.orientation = orientation
        self.bar_thickness = bar_thickness
        self.narrow_breakpoint = narrow_breakpoint

    def bar_length(self, container_width: float) -> int:
        return min(520, max(260, round(container_width * 0.75)))

    def tick_count(self, container_width: float) -> int:
        return 3 if container_width < self.narrow_breakpoint else 6

    def layout(self, scale: ColorScale, container_width: float) -> LegendLayout:
        length = self.bar_length(container_width)
        domain = scale.domain
        ticks = []
        for value in nice_ticks(domain.min, domain.max, self.tick_count(container_width)):
            t = domain.normalize(value)
            ticks.append(LegendTick(value=value, offset=t * length, color=scale(t)))
        return LegendLayout(
            bar_length=length,
            bar_thickness=self.bar_thickness,
            stops=scale.gradient_stops(),
            ticks=ticks,
        )

    def to_svg(self, scale: ColorScale, container_width: float, gradient_id: str = "aqi-legend") -> str:
        lay = self.layout(scale, container_width)
        horizontal = self.orientation == "horizontal"
        x2, y2 = ("1", "0") if horizontal else ("0", "1")
        stops = "".join(
            f'<stop offset="{t * 100:.0f}%" stop-color="{color}"/>' for t, color in lay.stops
        )
        if horizontal:
            width, height = lay.bar_length + 60, lay.bar_thickness + 42
            rect = f'<rect x="30" y="20" width="{lay.bar_length}" height="{lay.bar_thickness}"'
            ticks = "".join(
                f'<g class="tick" transform="translate({30 + tick.offset:.2f},{20 + lay.bar_thickness})">'
                f'<line y2="4" stroke="{PURPLE_LIGHT}"/>'
                f'<text y="16" text-anchor="middle" fill="{SLATE_600}" font-size="12">{tick.value:g}</text></g>'
                for tick in lay.ticks
            )
            title = (f'<text x="{30 + lay.bar_length / 2:.1f}" y="14" text-anchor="middle" '
                     f'fill="{SLATE_700}" font-size="18" font-weight="600">{html.escape(self.title)}</text>')
        else:
            width, height = lay.bar_thickness + 70, lay.bar_length + 40
            rect = f'<rect x="10" y="30" width="{lay.bar_thickness}" height="{lay.bar_length}"'
            ticks = "".join(
                f'<g class="tick" transform="translate({10 + lay.bar_thickness},{30 + tick.offset:.2f})">'
                f'<line x2="4" stroke="{PURPLE_LIGHT}"/>'
                f'<text x="8" dy="0.32em" fill="{SLATE_600}" font-size="12">{tick.value:g}</text></g>'
                for tick in lay.ticks
            )
            title = (f'<text x="10" y="18" fill="{SLATE_700}" font-size="18" '
                     f'font-weight="600">{html.escape(self.title)}</text>')
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" class="legend" width="{width}" height="{height}">'
            f'<defs><linearGradient id="{gradient_id}" x1="0" y1="0" x2="{x2}" y2="{y2}">{stops}'
            f"</linearGradient></defs>{title}"
            f'{rect} fill="url(#{gradient_id})" rx="8" ry="8" stroke="{PURPLE_LIGHT}" stroke-width="1"/>'
            f"{ticks}</svg>"
        )
