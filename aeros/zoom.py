"""Zoom/focus controller.

Views are ``(cx, cy, radius)`` triples: the map point at the center of the
viewport and the half-height of the visible area. Transitions follow the
smooth pan-and-zoom path of van Wijk and Nuij, the same path used by
``d3.interpolateZoom``, so translation and scale move together.

Time is read from an injectable clock so transitions can be sampled
deterministically.
"""

from __future__ import annotations

import enum
import math
import time
from dataclasses import dataclass
from typing import Callable

RHO = math.sqrt(2)
EPSILON2 = 1e-12

FOCUS_MARGIN = 24.0
MIN_FOCUS_RADIUS = 120.0
START_DELAY = 0.12


@dataclass(frozen=True)
class ViewTransform:
    cx: float
    cy: float
    radius: float

    def to_svg(self, width: float, height: float) -> str:
        k = height / self.radius
        return (f"translate({width / 2:.3f},{height / 2:.3f}) scale({k:.6f}) "
                f"translate({-self.cx:.3f},{-self.cy:.3f})")


class ZoomInterpolator:
    def __init__(self, start: ViewTransform, end: ViewTransform, rho: float = RHO):
        self.start, self.end, self.rho = start, end, rho
        rho2, rho4 = rho * rho, rho ** 4
        ux0, uy0, w0 = start.cx, start.cy, start.radius
        ux1, uy1, w1 = end.cx, end.cy, end.radius
        self.dx, self.dy = ux1 - ux0, uy1 - uy0
        d2 = self.dx * self.dx + self.dy * self.dy

        if d2 < EPSILON2:
            self._d1 = None
            self.S = math.log(w1 / w0) / rho
        else:
            d1 = math.sqrt(d2)
            b0 = (w1 * w1 - w0 * w0 + rho4 * d2) / (2 * w0 * rho2 * d1)
            b1 = (w1 * w1 - w0 * w0 - rho4 * d2) / (2 * w1 * rho2 * d1)
            self._r0 = math.log(math.sqrt(b0 * b0 + 1) - b0)
            r1 = math.log(math.sqrt(b1 * b1 + 1) - b1)
            self._d1 = d1
            self.S = (r1 - self._r0) / rho

    @property
    def duration(self) -> float:
        """Seconds, proportional to the length of the zoom path."""
        return abs(self.S) * self.rho / math.sqrt(2)

    def __call__(self, t: float) -> ViewTransform:
        s0 = self.start
        if self._d1 is None:
            return ViewTransform(s0.cx + t * self.dx, s0.cy + t * self.dy,
                                 s0.radius * math.exp(self.rho * t * self.S))
        s = t * self.S
        rho2 = self.rho * self.rho
        cosh_r0 = math.cosh(self._r0)
        u = s0.radius / (rho2 * self._d1) * (cosh_r0 * math.tanh(self.rho * s + self._r0) - math.sinh(self._r0))
        return ViewTransform(s0.cx + u * self.dx, s0.cy + u * self.dy,
                             s0.radius * cosh_r0 / math.cosh(self.rho * s + self._r0))


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


@dataclass(frozen=True)
class ZoomTransition:
    interpolator: ZoomInterpolator
    started_at: float
    delay: float = START_DELAY

    @property
    def target(self) -> ViewTransform:
        return self.interpolator.end

    @property
    def ends_at(self) -> float:
        return self.started_at + self.delay + self.interpolator.duration

    def progress(self, now: float) -> float:
        elapsed = now - self.started_at - self.delay
        duration = self.interpolator.duration
        if elapsed >= duration:
            return 1.0
        if elapsed <= 0:
            return 0.0
        return elapsed / duration

    def value_at(self, now: float) -> ViewTransform:
        if now >= self.ends_at:
            return self.interpolator.end
        t = self.progress(now)
        if t <= 0.0:
            return self.interpolator.start
        if t >= 1.0:
            return self.interpolator.end
        return self.interpolator(ease_cubic_in_out(t))


class ZoomState(enum.Enum):
    IDLE = "idle"
    FOCUSED = "focused"


def focus_view(bounds, margin: float = FOCUS_MARGIN, min_radius: float = MIN_FOCUS_RADIUS) -> ViewTransform:
    (x0, y0), (x1, y1) = bounds
    radius = max(x1 - x0, y1 - y0) / 2 + margin
    return ViewTransform((x0 + x1) / 2, (y0 + y1) / 2, max(radius, min_radius))


class ZoomController:
    """Owns the map's current view and the transition that is moving it."""

    def __init__(self, width: float, height: float, clock: Callable[[], float] = time.monotonic,
                 delay: float = START_DELAY):
        self.width = width
        self.height = height
        self.clock = clock
        self.delay = delay
        self.state = ZoomState.IDLE
        self.focused_on: str | None = None
        self._view = self.home
        self._transition: ZoomTransition | None = None

    @property
    def home(self) -> ViewTransform:
        return ViewTransform(self.width / 2, self.height / 2, self.height)

    def current(self, now: float | None = None) -> ViewTransform:
        """The view at ``now``, including a transition that is still in flight."""
        if self._transition is None:
            return self._view
        now = self.clock() if now is None else now
        view = self._transition.value_at(now)
        if now >= self._transition.ends_at:
            self._view, self._transition = view, None
        return view

    def is_animating(self, now: float | None = None) -> bool:
        if self._transition is None:
            return False
        now = self.clock() if now is None else now
        return now < self._transition.ends_at

    @property
    def transition(self) -> ZoomTransition | None:
        return self._transition

    @property
    def target(self) -> ViewTransform:
        return self._transition.target if self._transition else self._view

    def animate_to(self, target: ViewTransform, now: float | None = None) -> ZoomTransition:
        now = self.clock() if now is None else now
        start = self.current(now)
        self._view = start
        self._transition = ZoomTransition(ZoomInterpolator(start, target), now, self.delay)
        return self._transition

    def focus(self, fips: str, bounds, now: float | None = None) -> ZoomTransition:
        transition = self.animate_to(focus_view(bounds), now)
        self.state = ZoomState.FOCUSED
        self.focused_on = fips
        return transition

    def reset(self, now: float | None = None) -> ZoomTransition:
        transition = self.animate_to(self.home, now)
        self.state = ZoomState.IDLE
        self.focused_on = None
        return transition

    def stop(self, now: float | None = None) -> ViewTransform:
        """Freeze the view where it is and drop the running transition."""
        view = self.current(now)
        self._view, self._transition = view, None
        return view

    def resize(self, width: float, height: float) -> None:
        self.stop()
        self.width, self.height = width, height
        self.state, self.focused_on = ZoomState.IDLE, None
        self._view = self.home

    def svg_transform(self, now: float | None = None) -> str:
        return self.current(now).to_svg(self.width, self.height)
