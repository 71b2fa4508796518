"""Albers USA projection and SVG path generation.

The composite projection follows the usual layout: the conterminous states on
an Albers equal-area conic, Alaska shrunk to 0.35 scale below the west coast,
and Hawaii beside it. All three insets share the same scale ``k`` and
translate ``t``, so a projected point is always ``t + k * unit(point)``. That
keeps fitting to a viewport a closed-form step.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

import numpy as np
from pyproj import CRS, Transformer

from aeros.topology import GeoFeature

Bounds = tuple[tuple[float, float], tuple[float, float]]

UNIT_SPHERE = CRS.from_proj4("+proj=longlat +R=1 +no_defs")


class ConicEqualArea:
    """Albers equal-area conic on the unit sphere, centred the way d3's conicEqualArea is.

    ``rotate`` is the central meridian shift and ``center`` is given in the
    rotated frame, so the geographic center is ``center[0] - rotate``.
    """

    def __init__(self, rotate: float, center: Sequence[float], parallels: Sequence[float]):
        lon_0 = -rotate
        aea = CRS.from_proj4(
            f"+proj=aea +lat_1={parallels[0]} +lat_2={parallels[1]} +lat_0=0 +lon_0={lon_0} "
            "+x_0=0 +y_0=0 +R=1 +units=m +no_defs"
        )
        self.transformer = Transformer.from_crs(UNIT_SPHERE, aea, always_xy=True)
        self.cx, self.cy = self.transformer.transform(center[0] + lon_0, center[1])

    def unit(self, lon: np.ndarray, lat: np.ndarray) -> np.ndarray:
        x, y = self.transformer.transform(np.asarray(lon, dtype=float), np.asarray(lat, dtype=float))
        return np.column_stack([np.asarray(x) - self.cx, -(np.asarray(y) - self.cy)])


class AlbersUsa:
    def __init__(self, scale: float = 1070.0, translate: Sequence[float] = (480.0, 250.0)):
        self.k = float(scale)
        self.translate = (float(translate[0]), float(translate[1]))
        self._lower48 = ConicEqualArea(96.0, (-0.6, 38.7), (29.5, 45.5))
        self._alaska = ConicEqualArea(154.0, (-2.0, 58.5), (55.0, 65.0))
        self._hawaii = ConicEqualArea(157.0, (-3.0, 19.9), (8.0, 18.0))

    def unit_ring(self, ring: np.ndarray) -> np.ndarray | None:
        """Project a lon/lat ring at unit scale, or None when it falls outside every inset."""
        lon, lat = ring[:, 0], ring[:, 1]
        mlon, mlat = float(lon.mean()), float(lat.mean())
        if mlat >= 50 and (mlon <= -129 or mlon >= 170):
            return self._alaska.unit(lon, lat) * 0.35 + np.array([-0.307, 0.201])
        if 15 <= mlat <= 24 and -162 <= mlon <= -152:
            return self._hawaii.unit(lon, lat) + np.array([-0.205, 0.212])
        if 22 <= mlat <= 52 and -130 <= mlon <= -64:
            return self._lower48.unit(lon, lat)
        return None

    def project_ring(self, ring: np.ndarray) -> np.ndarray | None:
        unit = self.unit_ring(ring)
        if unit is None:
            return None
        return unit * self.k + np.array(self.translate)

    def __call__(self, lon: float, lat: float) -> tuple[float, float] | None:
        pts = self.project_ring(np.array([[lon, lat]], dtype=float))
        return None if pts is None else (float(pts[0, 0]), float(pts[0, 1]))

    def fit_extent(self, features: Iterable[GeoFeature], extent: Bounds) -> "AlbersUsa":
        (x0, y0), (x1, y1) = extent
        units = [u for f in features for u in (self.unit_ring(r) for r in iter_rings(f)) if u is not None]
        if not units:
            raise ValueError("Nothing to fit: no feature falls inside the projection")
        stacked = np.vstack(units)
        bx0, by0 = stacked.min(axis=0)
        bx1, by1 = stacked.max(axis=0)
        w, h = x1 - x0, y1 - y0
        k = min(w / max(bx1 - bx0, 1e-12), h / max(by1 - by0, 1e-12))
        self.k = float(k)
        self.translate = (
            float(x0 + (w - k * (bx0 + bx1)) / 2),
            float(y0 + (h - k * (by0 + by1)) / 2),
        )
        return self

    def fit_size(self, features: Iterable[GeoFeature], width: float, height: float,
                 padding: float = 0.0) -> "AlbersUsa":
        return self.fit_extent(features, ((padding, padding), (width - padding, height - padding)))


def iter_rings(feature: GeoFeature) -> Iterator[np.ndarray]:
    geometry = feature.geometry
    if geometry["type"] == "Polygon":
        polygons = [geometry["coordinates"]]
    elif geometry["type"] == "MultiPolygon":
        polygons = geometry["coordinates"]
    else:
        return
    for polygon in polygons:
        for ring in polygon:
            if len(ring):
                yield np.asarray(ring, dtype=float)[:, :2]


class GeoPath:
    """Turns features into SVG path data through a projection."""

    def __init__(self, projection: AlbersUsa, precision: int = 2):
        self.projection = projection
        self.precision = precision

    def rings(self, feature: GeoFeature) -> list[np.ndarray]:
        out = []
        for ring in iter_rings(feature):
            projected = self.projection.project_ring(ring)
            if projected is not None:
                out.append(projected)
        return out

    def __call__(self, feature: GeoFeature) -> str:
        p = self.precision
        parts = []
        for ring in self.rings(feature):
            coords = [f"{x:.{p}f},{y:.{p}f}" for x, y in ring]
            parts.append("M" + "L".join(coords) + "Z")
        return "".join(parts)

    def bounds(self, feature: GeoFeature) -> Bounds | None:
        rings = self.rings(feature)
        if not rings:
            return None
        stacked = np.vstack(rings)
        (x0, y0), (x1, y1) = stacked.min(axis=0), stacked.max(axis=0)
        return (float(x0), float(y0)), (float(x1), float(y1))
