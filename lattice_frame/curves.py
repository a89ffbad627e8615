"""
Strut Curves

Curve geometry for lattice struts: straight lines, polylines and circular
arcs through three points.

Every curve carries a parameter domain (t0, t1). Consolidation reparametrizes
struts to the unit domain [0, 1] so that endpoints and midpoints can be
evaluated uniformly regardless of how the curve was built. Reparametrizing
returns a copy; curves are never mutated in place.
"""

import copy
from typing import Sequence, Tuple

import numpy as np

# Below this |a x b| three arc points are treated as collinear
_COLLINEAR_EPS = 1e-12


class StrutCurve:
    """
    Base class for strut curves.

    Subclasses implement _evaluate(s) for a normalized parameter s in [0, 1],
    the curve length, and their own validity checks.
    """

    def __init__(self, domain: Tuple[float, float] = (0.0, 1.0)):
        self._domain = (float(domain[0]), float(domain[1]))

    @property
    def domain(self) -> Tuple[float, float]:
        return self._domain

    def with_domain(self, t0: float, t1: float) -> 'StrutCurve':
        """Return a copy of the curve with its domain remapped to [t0, t1]."""
        result = copy.copy(self)
        result._domain = (float(t0), float(t1))
        return result

    def unitized(self) -> 'StrutCurve':
        """Return a copy of the curve with the unit domain [0, 1]."""
        return self.with_domain(0.0, 1.0)

    def point_at(self, t: float) -> np.ndarray:
        """Evaluate the curve at parameter t of its domain."""
        t0, t1 = self._domain
        return self._evaluate((t - t0) / (t1 - t0))

    @property
    def start(self) -> np.ndarray:
        return self._evaluate(0.0)

    @property
    def end(self) -> np.ndarray:
        return self._evaluate(1.0)

    @property
    def midpoint(self) -> np.ndarray:
        """Point at the middle of the domain."""
        return self._evaluate(0.5)

    @property
    def length(self) -> float:
        raise NotImplementedError

    @property
    def is_valid(self) -> bool:
        t0, t1 = self._domain
        return bool(np.isfinite(t0) and np.isfinite(t1) and t1 > t0)

    def is_short(self, min_length: float) -> bool:
        """True if the curve is shorter than min_length."""
        return self.length < min_length

    def reversed(self) -> 'StrutCurve':
        raise NotImplementedError

    def _evaluate(self, s: float) -> np.ndarray:
        raise NotImplementedError


class LineCurve(StrutCurve):
    """Straight strut between two points."""

    def __init__(self, start, end, domain: Tuple[float, float] = (0.0, 1.0)):
        super().__init__(domain)
        self._start = np.asarray(start, dtype=np.float64).reshape(3)
        self._end = np.asarray(end, dtype=np.float64).reshape(3)

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self._end - self._start))

    @property
    def is_valid(self) -> bool:
        return (super().is_valid
                and bool(np.all(np.isfinite(self._start)))
                and bool(np.all(np.isfinite(self._end))))

    def reversed(self) -> 'LineCurve':
        return LineCurve(self._end, self._start, self._domain)

    def _evaluate(self, s: float) -> np.ndarray:
        if s == 1.0:
            return self._end.copy()
        return self._start + (self._end - self._start) * s

    def __repr__(self) -> str:
        return f"LineCurve({self._start.tolist()}, {self._end.tolist()})"


class PolylineCurve(StrutCurve):
    """
    Piecewise-linear strut through a sequence of points.

    Parametrized by arc length, so reversing the point order leaves the
    midpoint unchanged.
    """

    def __init__(self, points: Sequence, domain: Tuple[float, float] = (0.0, 1.0)):
        super().__init__(domain)
        self._points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        segment_lengths = np.linalg.norm(np.diff(self._points, axis=0), axis=1)
        self._cumulative = np.concatenate([[0.0], np.cumsum(segment_lengths)])

    @property
    def points(self) -> np.ndarray:
        return self._points.copy()

    @property
    def length(self) -> float:
        return float(self._cumulative[-1])

    @property
    def is_valid(self) -> bool:
        return (super().is_valid
                and len(self._points) >= 2
                and bool(np.all(np.isfinite(self._points)))
                and self.length > 0.0)

    def reversed(self) -> 'PolylineCurve':
        return PolylineCurve(self._points[::-1], self._domain)

    def _evaluate(self, s: float) -> np.ndarray:
        total = self._cumulative[-1]
        if total == 0.0 or s <= 0.0:
            return self._points[0].copy()
        if s >= 1.0:
            return self._points[-1].copy()
        target = min(max(s, 0.0), 1.0) * total
        seg = int(np.searchsorted(self._cumulative, target, side='right')) - 1
        seg = min(max(seg, 0), len(self._points) - 2)
        seg_length = self._cumulative[seg + 1] - self._cumulative[seg]
        local = 0.0 if seg_length == 0.0 else (target - self._cumulative[seg]) / seg_length
        return self._points[seg] + (self._points[seg + 1] - self._points[seg]) * local

    def __repr__(self) -> str:
        return f"PolylineCurve({len(self._points)} points)"


class ArcCurve(StrutCurve):
    """
    Circular arc strut from start through an interior point to end.

    Collinear input points do not define an arc; such a curve reports
    is_valid == False.
    """

    def __init__(self, start, through, end, domain: Tuple[float, float] = (0.0, 1.0)):
        super().__init__(domain)
        self._p0 = np.asarray(start, dtype=np.float64).reshape(3)
        self._p1 = np.asarray(through, dtype=np.float64).reshape(3)
        self._p2 = np.asarray(end, dtype=np.float64).reshape(3)

        a = self._p0 - self._p2
        b = self._p1 - self._p2
        axb = np.cross(a, b)
        axb_sq = float(np.dot(axb, axb))
        self._degenerate = (not np.all(np.isfinite(axb))) or axb_sq < _COLLINEAR_EPS

        if self._degenerate:
            self._center = (self._p0 + self._p2) / 2
            self._radius = 0.0
            self._u = np.zeros(3)
            self._v = np.zeros(3)
            self._sweep = 0.0
            return

        # Circumcenter of the three points
        self._center = self._p2 + np.cross(
            np.dot(a, a) * b - np.dot(b, b) * a, axb) / (2.0 * axb_sq)
        self._radius = float(np.linalg.norm(self._p0 - self._center))

        # Normal oriented so that start -> through -> end runs counterclockwise
        normal = np.cross(self._p1 - self._p0, self._p2 - self._p1)
        normal /= np.linalg.norm(normal)
        self._u = (self._p0 - self._center) / self._radius
        self._v = np.cross(normal, self._u)
        self._sweep = self._angle_of(self._p2)

    def _angle_of(self, point: np.ndarray) -> float:
        rel = point - self._center
        angle = float(np.arctan2(np.dot(rel, self._v), np.dot(rel, self._u)))
        return angle % (2.0 * np.pi)

    @property
    def center(self) -> np.ndarray:
        return self._center.copy()

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def length(self) -> float:
        if self._degenerate:
            return float(np.linalg.norm(self._p2 - self._p0))
        return self._radius * self._sweep

    @property
    def is_valid(self) -> bool:
        return super().is_valid and not self._degenerate

    def reversed(self) -> 'ArcCurve':
        return ArcCurve(self._p2, self._p1, self._p0, self._domain)

    def _evaluate(self, s: float) -> np.ndarray:
        if s == 0.0:
            return self._p0.copy()
        if s == 1.0:
            return self._p2.copy()
        if self._degenerate:
            return self._p0 + (self._p2 - self._p0) * s
        angle = s * self._sweep
        return self._center + self._radius * (np.cos(angle) * self._u + np.sin(angle) * self._v)

    def __repr__(self) -> str:
        return (f"ArcCurve({self._p0.tolist()}, {self._p1.tolist()}, "
                f"{self._p2.tolist()})")
