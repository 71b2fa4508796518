"""
Tests for the sequential color scale and its domain.
"""

import math

import pytest

from aeros.colors import ColorDomain, ColorScale, hex_to_rgb, rgb_to_hex
from aeros.constants import DEFAULT_DOMAIN, PURPLE_RAMP


class TestColorDomain:

    def test_from_values_ignores_missing(self):
        domain = ColorDomain.from_values([45.0, None, 20.0, float("nan")])
        assert (domain.min, domain.max) == (20.0, 45.0)

    def test_degenerate_domain_is_widened(self):
        domain = ColorDomain.from_values([30.0, 30.0])
        assert (domain.min, domain.max) == (30.0, 31.0)

    def test_empty_values_use_default_domain(self):
        domain = ColorDomain.from_values([])
        assert (domain.min, domain.max) == DEFAULT_DOMAIN

    @pytest.mark.parametrize("value,expected", [(20, 0.0), (45, 1.0), (32.5, 0.5), (-5, 0.0), (99, 1.0)])
    def test_normalize_clamps(self, value, expected):
        assert ColorDomain(20.0, 45.0).normalize(value) == pytest.approx(expected)


class TestColorScale:

    @pytest.fixture
    def scale(self):
        return ColorScale(ColorDomain(0.0, 100.0), PURPLE_RAMP)

    def test_endpoints_match_ramp(self, scale):
        assert scale(0.0) == PURPLE_RAMP[0].lower()
        assert scale(0.5) == PURPLE_RAMP[1].lower()
        assert scale(1.0) == PURPLE_RAMP[2].lower()

    @pytest.mark.parametrize("t", [-0.5, -10.0])
    def test_below_range_clamps_to_first_color(self, scale, t):
        assert scale(t) == scale(0.0)

    @pytest.mark.parametrize("t", [1.01, 7.0])
    def test_above_range_clamps_to_last_color(self, scale, t):
        assert scale(t) == scale(1.0)

    def test_midway_between_stops_is_blended(self, scale):
        r, g, b = hex_to_rgb(scale(0.25))
        r0, g0, b0 = hex_to_rgb(PURPLE_RAMP[0])
        r1, g1, b1 = hex_to_rgb(PURPLE_RAMP[1])
        assert r == round((r0 + r1) / 2)
        assert g == round((g0 + g1) / 2)
        assert b == round((b0 + b1) / 2)

    def test_degenerate_domain_produces_valid_scale(self):
        scale = ColorScale(ColorDomain.from_values([42.0, 42.0]))
        for t in (0.0, 0.5, 1.0):
            assert scale(t).startswith("#") and len(scale(t)) == 7
        assert scale.for_value(42.0) == scale(0.0)

    def test_nan_maps_to_first_color(self, scale):
        assert scale(math.nan) == scale.ramp[0]

    def test_ramp_must_have_three_colors(self):
        with pytest.raises(ValueError):
            ColorScale(ColorDomain(0.0, 1.0), ("#000000", "#ffffff"))

    def test_gradient_stops_cover_unit_interval(self, scale):
        stops = scale.gradient_stops()
        assert stops[0] == (0.0, scale(0.0))
        assert stops[-1] == (1.0, scale(1.0))


class TestHexHelpers:

    def test_short_hex_is_expanded(self):
        assert hex_to_rgb("#fff") == (255, 255, 255)

    def test_invalid_hex_raises(self):
        with pytest.raises(ValueError):
            hex_to_rgb("#12345")

    def test_rgb_to_hex_clamps_channels(self):
        assert rgb_to_hex((300, -4, 16.4)) == "#ff0010"
