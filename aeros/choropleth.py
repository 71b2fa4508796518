"""The US choropleth component.

One configurable component owns the whole map: geography, state records,
the fitted projection, the color scale, the drawing surface, the legend and
the zoom controller. Variants (colors, padding, legend orientation) are
expressed through :class:`ChoroplethOptions`.
"""

from __future__ import annotations

import asyncio
import enum
import html
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Callable

import httpx

from aeros.client import AerosClient, ApiError
from aeros.colors import ColorDomain, ColorScale
from aeros.constants import PURPLE_RAMP, SLATE_600
from aeros.legend import LegendRenderer
from aeros.projection import AlbersUsa, GeoPath
from aeros.render import MapSurface, ShapeStyle, StateRecord, StateRenderPass
from aeros.topology import GeoFeature, GeographyLoader, GeographyUnavailable
from aeros.zoom import ZoomController, ZoomTransition

logger = logging.getLogger(__name__)


class MapStatus(enum.Enum):
    LOADING = "loading"
    NO_DATA = "no_data"
    READY = "ready"
    CLOSED = "closed"


@dataclass(frozen=True)
class ChoroplethOptions:
    width: float = 960
    height: float = 600
    padding: float = 20
    ramp: tuple[str, str, str] = PURPLE_RAMP
    style: ShapeStyle = field(default_factory=ShapeStyle)
    legend_title: str = "Air Quality Index"
    legend_orientation: str = "horizontal"


class ChoroplethMap:
    def __init__(self, options: ChoroplethOptions | None = None,
                 geography: GeographyLoader | None = None,
                 clock: Callable[[], float] = time.monotonic):
        self.options = options or ChoroplethOptions()
        self.geography = geography or GeographyLoader()
        self.features: list[GeoFeature] | None = None
        self.records: dict[str, StateRecord] = {}
        self.status = MapStatus.LOADING
        self.message = "Loading map data..."
        self.scale: ColorScale | None = None

        self.surface = MapSurface()
        self.render_pass = StateRenderPass(self.surface, self.options.style, on_select=self._focus)
        self.legend = LegendRenderer(self.options.legend_title, self.options.legend_orientation)
        self.zoom = ZoomController(self.options.width, self.options.height, clock=clock)

        self._path: GeoPath | None = None
        self._path_key: tuple | None = None
        self._load_generation = 0

    # -- data ---------------------------------------------------------------

    async def load(self, http: httpx.AsyncClient, api: AerosClient) -> MapStatus:
        """Fetch geography and state data together; render once both have arrived."""
        self._load_generation += 1
        generation = self._load_generation
        geo, states = await asyncio.gather(
            self.geography.load(http), api.fetch_states(), return_exceptions=True
        )
        if self.status is MapStatus.CLOSED or generation != self._load_generation:
            logger.debug("Ignoring map data that arrived after close or reload")
            return self.status

        for result in (geo, states):
            if isinstance(result, (GeographyUnavailable, ApiError, httpx.HTTPError)):
                self._no_data(f"Map data unavailable: {result}")
                return self.status
            if isinstance(result, BaseException):
                raise result
        self.set_data(geo, states)
        return self.status

    def set_data(self, features: list[GeoFeature] | None, records: dict[str, StateRecord]) -> MapSurface | None:
        if features is not self.features:
            self._path_key = None
        self.features = features
        self.records = dict(records)
        return self.render()

    def domain(self) -> ColorDomain:
        return ColorDomain.from_values(r.ai for r in self.records.values() if r.has_data)

    def state_list(self) -> list[tuple[str, str]]:
        """(fips, name) for every drawn state, sorted by name."""
        return sorted(((s.fips, s.name) for s in self.surface.shapes.values()), key=lambda item: item[1])

    # -- geometry -----------------------------------------------------------

    @property
    def path(self) -> GeoPath:
        key = (self.options.width, self.options.height, self.options.padding)
        if self._path is None or self._path_key != key:
            projection = AlbersUsa().fit_size(self.features, self.options.width, self.options.height,
                                              self.options.padding)
            self._path, self._path_key = GeoPath(projection), key
        return self._path

    def resize(self, width: float, height: float) -> MapSurface | None:
        self.options = replace(self.options, width=width, height=height)
        self.zoom.resize(width, height)
        self.surface.selected = None
        return self.render()

    def set_padding(self, padding: float) -> MapSurface | None:
        self.options = replace(self.options, padding=padding)
        return self.render()

    # -- rendering ----------------------------------------------------------

    def _no_data(self, message: str) -> None:
        self.surface.clear()
        self.scale = None
        self.status, self.message = MapStatus.NO_DATA, message

    def render(self) -> MapSurface | None:
        if self.status is MapStatus.CLOSED:
            return None
        if not self.features:
            self._no_data("No geography loaded")
            return None
        if not any(r.has_data for r in self.records.values()):
            self._no_data("No air quality data available")
            return None

        self.scale = ColorScale(self.domain(), self.options.ramp)
        self.render_pass.run(self.features, self.records, self.scale, self.path)
        self.status, self.message = MapStatus.READY, ""
        return self.surface

    def hover(self, fips: str | None) -> None:
        self.render_pass.hover(fips)

    def select(self, fips: str) -> ZoomTransition | None:
        if self.status is not MapStatus.READY or not self.render_pass.click(fips):
            return None
        return self.zoom.transition

    def _focus(self, fips: str) -> None:
        feature = next((f for f in self.features or () if f.id == fips), None)
        bounds = self.path.bounds(feature) if feature else None
        if bounds is not None:
            self.zoom.focus(fips, bounds)

    def clear_selection(self) -> ZoomTransition:
        self.surface.selected = None
        return self.zoom.reset()

    def close(self) -> None:
        self.zoom.stop()
        self.status, self.message = MapStatus.CLOSED, ""

    # -- output -------------------------------------------------------------

    def map_svg(self, now: float | None = None) -> str:
        w, h = self.options.width, self.options.height
        head = (f'<svg xmlns="http://www.w3.org/2000/svg" class="choropleth" '
                f'viewBox="0 0 {w:g} {h:g}" width="{w:g}" height="{h:g}">')
        if self.status is not MapStatus.READY:
            text = html.escape(self.message or "No data")
            return (f'{head}<text x="{w / 2:g}" y="{h / 2:g}" text-anchor="middle" '
                    f'fill="{SLATE_600}" font-size="16">{text}</text></svg>')
        return head + self.surface.to_svg_group(self.zoom.svg_transform(now)) + "</svg>"

    def legend_svg(self) -> str:
        if self.scale is None:
            return ""
        return self.legend.to_svg(self.scale, self.options.width)

    def to_svg(self, now: float | None = None) -> str:
        """Map and legend stacked in one document."""
        map_part = self.map_svg(now)
        legend_part = self.legend_svg()
        if not legend_part:
            return map_part
        w, h = self.options.width, self.options.height
        if self.legend.orientation == "horizontal":
            legend_height = self.legend.bar_thickness + 76
        else:
            legend_height = self.legend.bar_length(w) + 74
        return (f'<svg xmlns="http://www.w3.org/2000/svg" width="{w:g}" height="{h + legend_height:g}">'
                f'{map_part}<g transform="translate(0,{h + 34:g})">{legend_part}</g></svg>')
