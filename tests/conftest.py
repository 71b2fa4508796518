"""
Pytest configuration for Aeros tests.

Registers custom markers and provides shared fixtures: a two-state
topology, the matching decoded features and a snapshot payload.
"""

import pytest

from aeros.topology import features_from_topology

ATLAS_URL = "https://atlas.test/states-10m.json"
API_URL = "http://api.test"

# California and Nevada as two boxes sharing the -118 meridian edge (arc 1).
TOPOLOGY = {
    "type": "Topology",
    "arcs": [
        [[-124, 34], [-118, 34]],
        [[-118, 34], [-118, 42]],
        [[-118, 42], [-124, 42], [-124, 34]],
        [[-118, 34], [-112, 34], [-112, 42], [-118, 42]],
    ],
    "objects": {
        "states": {
            "type": "GeometryCollection",
            "geometries": [
                {"type": "Polygon", "id": "6", "arcs": [[0, 1, 2]], "properties": {"name": "California"}},
                {"type": "Polygon", "id": 32, "arcs": [[3, -2]]},
                {"type": None, "id": "99"},
            ],
        }
    },
}

STATES_PAYLOAD = {
    "states": [
        {"fips": "6", "name": "California", "NO2": 12, "O3": 45, "PM": 30, "CH2O": None},
        {"fips": "32", "name": "Nevada", "NO2": "8", "O3": 20, "PM": None, "CH2O": None},
        {"fips": "48", "name": "Texas", "NO2": None, "O3": None, "PM": None, "CH2O": None},
    ],
    "tags": ["Running,Outdoor Activities", "Asthma", "Running"],
}

BY_STATE = {
    "06": {"name": "California", "NO2": 12.0, "O3": 45.0, "PM": 30.0, "CH2O": None, "ai": 45.0},
    "32": {"name": "Nevada", "NO2": 8.0, "O3": 20.0, "PM": None, "CH2O": None, "ai": 20.0},
}

TAGS_CATALOG = {
    "Activity": ["Running", "Cycling"],
    "Vulnerability": ["Asthma"],
    "Lifestyle": ["Outdoor worker"],
}


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "api: tests that exercise the HTTP API through the test client"
    )


@pytest.fixture
def topology():
    return TOPOLOGY


@pytest.fixture
def features():
    return features_from_topology(TOPOLOGY)


@pytest.fixture
def states_payload():
    return STATES_PAYLOAD


@pytest.fixture
def by_state():
    return BY_STATE


@pytest.fixture
def tags_catalog():
    return TAGS_CATALOG
