"""State records, the drawing surface and the state render pass."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Callable, Iterable

from aeros.colors import ColorScale
from aeros.constants import NO_DATA_FILL, POLLUTANTS, PURPLE_LIGHT, PURPLE_PRIMARY
from aeros.projection import GeoPath
from aeros.topology import GeoFeature
from aeros.utils import aggregate_index, aqi_level, pad_fips, to_num


@dataclass(frozen=True)
class StateRecord:
    fips: str
    name: str
    NO2: float | None = None
    O3: float | None = None
    PM: float | None = None
    CH2O: float | None = None
    ai: float | None = None

    @classmethod
    def from_readings(cls, fips, name: str | None = None, **readings) -> "StateRecord":
        fips = pad_fips(fips)
        values = {p: to_num(readings.get(p)) for p in POLLUTANTS}
        return cls(fips=fips, name=name or f"FIPS {fips}", ai=aggregate_index(values), **values)

    @property
    def has_data(self) -> bool:
        return self.ai is not None

    def pollutants(self) -> dict:
        return {"NO2": self.NO2, "O3": self.O3, "PM": self.PM, "CH2O": self.CH2O, "AI": self.ai}


def records_from_by_state(by_state: dict) -> dict[str, StateRecord]:
    """Build records from a ``byState`` payload; ``ai`` is always recomputed from the readings."""
    records = {}
    for fips, item in (by_state or {}).items():
        item = item or {}
        record = StateRecord.from_readings(fips, item.get("name"), **{p: item.get(p) for p in POLLUTANTS})
        records[record.fips] = record
    return records


@dataclass(frozen=True)
class ShapeStyle:
    no_data_fill: str = NO_DATA_FILL
    stroke: str = PURPLE_LIGHT
    stroke_width: float = 1.0
    hover_stroke: str = PURPLE_PRIMARY
    hover_stroke_width: float = 2.0


@dataclass
class RenderedShape:
    fips: str
    name: str
    d: str
    fill: str
    stroke: str
    stroke_width: float
    value: float | None = None

    @property
    def has_data(self) -> bool:
        return self.value is not None

    def title(self) -> str:
        if self.value is None:
            return f"{self.name}: no data"
        return f"{self.name}: AI {self.value:g} ({aqi_level(self.value)['label']})"

    def to_svg(self) -> str:
        return (
            f'<path data-fips="{self.fips}" d="{self.d}" fill="{self.fill}" '
            f'stroke="{self.stroke}" stroke-width="{self.stroke_width:g}">'
            f"<title>{html.escape(self.title())}</title></path>"
        )


@dataclass
class MapSurface:
    """Drawing surface for the map shapes. Only the render pass writes to it."""

    shapes: dict[str, RenderedShape] = field(default_factory=dict)
    hovered: str | None = None
    selected: str | None = None

    def clear(self) -> None:
        self.shapes.clear()
        self.hovered = None

    def __len__(self) -> int:
        return len(self.shapes)

    def get(self, fips: str) -> RenderedShape | None:
        return self.shapes.get(pad_fips(fips))

    def to_svg_group(self, transform: str | None = None) -> str:
        attr = f' transform="{transform}"' if transform else ""
        body = "".join(shape.to_svg() for shape in self.shapes.values())
        return f'<g class="states"{attr}>{body}</g>'


class StateRenderPass:
    def __init__(self, surface: MapSurface, style: ShapeStyle | None = None,
                 on_select: Callable[[str], None] | None = None):
        self.surface = surface
        self.style = style or ShapeStyle()
        self.on_select = on_select

    def fill_for(self, record: StateRecord | None, scale: ColorScale) -> str:
        if record is None or not record.has_data:
            return self.style.no_data_fill
        return scale(scale.domain.normalize(record.ai))

    def run(self, features: Iterable[GeoFeature], records: dict[str, StateRecord],
            scale: ColorScale, path: GeoPath) -> MapSurface:
        self.surface.clear()
        for feature in features:
            fips = pad_fips(feature.id)
            record = records.get(fips)
            d = path(feature)
            if not d:
                continue
            name = record.name if record and record.name and not record.name.startswith("FIPS ") else feature.name
            self.surface.shapes[fips] = RenderedShape(
                fips=fips,
                name=name,
                d=d,
                fill=self.fill_for(record, scale),
                stroke=self.style.stroke,
                stroke_width=self.style.stroke_width,
                value=record.ai if record else None,
            )
        if self.surface.selected not in self.surface.shapes:
            self.surface.selected = None
        return self.surface

    def hover(self, fips: str | None) -> None:
        target = pad_fips(fips) if fips is not None else None
        for key, shape in self.surface.shapes.items():
            if key == target:
                shape.stroke, shape.stroke_width = self.style.hover_stroke, self.style.hover_stroke_width
            else:
                shape.stroke, shape.stroke_width = self.style.stroke, self.style.stroke_width
        self.surface.hovered = target if target in self.surface.shapes else None

    def click(self, fips: str) -> bool:
        target = pad_fips(fips)
        if target not in self.surface.shapes:
            return False
        self.surface.selected = target
        if self.on_select is not None:
            self.on_select(target)
        return True
