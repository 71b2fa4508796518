"""TopoJSON decoding and the one-shot geography loader."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import httpx
import numpy as np

from aeros.constants import STATE_FIPS_TO_NAME, US_ATLAS_STATES_URL
from aeros.utils import pad_fips

logger = logging.getLogger(__name__)

US_ATLAS_URL = os.environ.get("US_ATLAS_URL", US_ATLAS_STATES_URL)


class GeographyUnavailable(Exception):
    pass


@dataclass(frozen=True)
class GeoFeature:
    id: str
    name: str
    geometry: dict


def decode_arcs(topology: dict) -> list[np.ndarray]:
    transform = topology.get("transform")
    if transform:
        scale = np.asarray(transform["scale"], dtype=float)
        translate = np.asarray(transform["translate"], dtype=float)

    arcs = []
    for arc in topology.get("arcs", []):
        pts = np.asarray(arc, dtype=float)
        if pts.ndim != 2:
            pts = pts.reshape(-1, 2)
        pts = pts[:, :2]
        if transform:
            pts = np.cumsum(pts, axis=0) * scale + translate
        arcs.append(pts)
    return arcs


def stitch_ring(arc_indexes: list[int], arcs: list[np.ndarray]) -> list[list[float]]:
    ring: list[list[float]] = []
    for index in arc_indexes:
        pts = arcs[~index][::-1] if index < 0 else arcs[index]
        if ring:
            pts = pts[1:]
        ring.extend(pts.tolist())
    return ring


def _geometry(geom: dict, arcs: list[np.ndarray]) -> dict | None:
    kind = geom.get("type")
    if kind == "Polygon":
        coords = [stitch_ring(r, arcs) for r in geom["arcs"]]
    elif kind == "MultiPolygon":
        coords = [[stitch_ring(r, arcs) for r in poly] for poly in geom["arcs"]]
    else:
        return None
    return {"type": kind, "coordinates": coords}


def features_from_topology(topology: dict, object_name: str = "states") -> list[GeoFeature]:
    obj = topology["objects"][object_name]
    arcs = decode_arcs(topology)
    geometries = obj["geometries"] if obj.get("type") == "GeometryCollection" else [obj]

    features = []
    for geom in geometries:
        geometry = _geometry(geom, arcs)
        if geometry is None:
            continue
        fips = pad_fips(geom.get("id", ""))
        props = geom.get("properties") or {}
        name = props.get("name") or STATE_FIPS_TO_NAME.get(fips) or f"FIPS {fips}"
        features.append(GeoFeature(id=fips, name=name, geometry=geometry))
    return features


class GeographyLoader:
    """Fetches the topology once and keeps the decoded features for its own lifetime.

    A failed attempt is not retried; later calls re-raise the same failure.
    """

    def __init__(self, url: str = US_ATLAS_URL, object_name: str = "states"):
        self.url = url
        self.object_name = object_name
        self._features: list[GeoFeature] | None = None
        self._error: str | None = None

    @property
    def features(self) -> list[GeoFeature] | None:
        return self._features

    async def load(self, client: httpx.AsyncClient) -> list[GeoFeature]:
        if self._features is not None:
            return self._features
        if self._error is not None:
            raise GeographyUnavailable(self._error)

        try:
            resp = await client.get(self.url)
            resp.raise_for_status()
            features = features_from_topology(resp.json(), self.object_name)
        except (httpx.HTTPError, ValueError, KeyError, TypeError, IndexError, AttributeError) as exc:
            self._error = f"Could not load geography from {self.url}: {exc}"
            logger.warning(self._error)
            raise GeographyUnavailable(self._error) from exc

        if not features:
            self._error = f"No '{self.object_name}' features in {self.url}"
            raise GeographyUnavailable(self._error)

        logger.info("Loaded %d features from %s", len(features), self.url)
        self._features = features
        return features
