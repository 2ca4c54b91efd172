"""
Cubic Bezier - Matematyka krzywych Béziera 3. stopnia
=====================================================
Funkcje na punktach kontrolnych (używane też przez Polyline i eksport)
oraz obiekt geometrii CubicBezier.

B(t)  = (1-t)^3 P0 + 3(1-t)^2 t P1 + 3(1-t) t^2 P2 + t^3 P3
B'(t) = 3(1-t)^2 (P1-P0) + 6(1-t) t (P2-P1) + 3 t^2 (P3-P2)
t zawsze przycinane do [0, 1].
"""

import math
from typing import List, Sequence

from ezdxf.math import Vec2

from geometry.base import GeometryObject, ObjectType, Rect
from geometry.transform import (
    PointLike, to_vec, rotate_point, mirror_point, scale_point, is_degenerate_axis
)

# Liczba odcinków przy liczeniu długości i testach trafienia
SAMPLE_COUNT = 20


def _clamp_t(t: float) -> float:
    return max(0.0, min(1.0, t))


def bezier_point(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    """Punkt na krzywej dla parametru t"""
    t = _clamp_t(t)
    u = 1.0 - t
    return (
        p0 * (u * u * u)
        + p1 * (3.0 * u * u * t)
        + p2 * (3.0 * u * t * t)
        + p3 * (t * t * t)
    )


def bezier_derivative(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    """Pochodna (wektor styczny, nieznormalizowany) dla parametru t"""
    t = _clamp_t(t)
    u = 1.0 - t
    return (
        (p1 - p0) * (3.0 * u * u)
        + (p2 - p1) * (6.0 * u * t)
        + (p3 - p2) * (3.0 * t * t)
    )


def bezier_sample(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, segments: int = SAMPLE_COUNT) -> List[Vec2]:
    """segments + 1 punktów równomiernie w parametrze t"""
    segments = max(1, segments)
    return [bezier_point(p0, p1, p2, p3, i / segments) for i in range(segments + 1)]


def bezier_length(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, segments: int = SAMPLE_COUNT) -> float:
    """Długość jako suma cięciw między próbkami"""
    points = bezier_sample(p0, p1, p2, p3, segments)
    return sum(a.distance(b) for a, b in zip(points, points[1:]))


def bezier_distance(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, point: PointLike,
                    segments: int = SAMPLE_COUNT) -> float:
    """Minimalna odległość punktu od próbek krzywej"""
    p = to_vec(point)
    return min(p.distance(s) for s in bezier_sample(p0, p1, p2, p3, segments))


def _derivative_roots(a: float, b: float, c: float, d: float) -> List[float]:
    """
    Pierwiastki pochodnej jednej współrzędnej w przedziale (0, 1).

    a..d to współrzędne P0..P3. B'(t)/3 = A t^2 + B t + C.
    """
    qa = -a + 3 * b - 3 * c + d
    qb = 2 * (a - 2 * b + c)
    qc = b - a
    roots = []
    if abs(qa) < 1e-12:
        if abs(qb) > 1e-12:
            roots.append(-qc / qb)
    else:
        disc = qb * qb - 4 * qa * qc
        if disc >= 0:
            sq = math.sqrt(disc)
            roots.append((-qb + sq) / (2 * qa))
            roots.append((-qb - sq) / (2 * qa))
    return [t for t in roots if 0.0 < t < 1.0]


def bezier_bounds(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2) -> Rect:
    """Dokładny bounding box krzywej (końce + ekstrema), nie punktów kontrolnych"""
    ts = [0.0, 1.0]
    ts += _derivative_roots(p0.x, p1.x, p2.x, p3.x)
    ts += _derivative_roots(p0.y, p1.y, p2.y, p3.y)
    return Rect.from_points(bezier_point(p0, p1, p2, p3, t) for t in ts)


class CubicBezier(GeometryObject):
    """Krzywa Béziera: p0 (start), p1, p2 (uchwyty), p3 (koniec)"""

    object_type = ObjectType.CUBIC_BEZIER

    HIT_TOLERANCE = 5.0

    def __init__(
        self,
        p0: PointLike = (0.0, 0.0),
        p1: PointLike = (0.0, 0.0),
        p2: PointLike = (0.0, 0.0),
        p3: PointLike = (0.0, 0.0),
        **kwargs
    ):
        super().__init__(**kwargs)
        self._points = [to_vec(p0), to_vec(p1), to_vec(p2), to_vec(p3)]

    def _set_point(self, index: int, value: PointLike) -> None:
        value = to_vec(value)
        if value != self._points[index]:
            self._points[index] = value
            self._notify_changed()

    @property
    def p0(self) -> Vec2:
        return self._points[0]

    @p0.setter
    def p0(self, value: PointLike):
        self._set_point(0, value)

    @property
    def p1(self) -> Vec2:
        return self._points[1]

    @p1.setter
    def p1(self, value: PointLike):
        self._set_point(1, value)

    @property
    def p2(self) -> Vec2:
        return self._points[2]

    @p2.setter
    def p2(self, value: PointLike):
        self._set_point(2, value)

    @property
    def p3(self) -> Vec2:
        return self._points[3]

    @p3.setter
    def p3(self, value: PointLike):
        self._set_point(3, value)

    def control_points(self) -> List[Vec2]:
        return list(self._points)

    def set_points(self, p0: PointLike, p1: PointLike, p2: PointLike, p3: PointLike) -> None:
        points = [to_vec(p0), to_vec(p1), to_vec(p2), to_vec(p3)]
        if points != self._points:
            self._points = points
            self._notify_changed()

    # ========== Matematyka ==========

    def point_at(self, t: float) -> Vec2:
        return bezier_point(*self._points, t)

    def tangent_at(self, t: float) -> Vec2:
        return bezier_derivative(*self._points, t)

    def length(self) -> float:
        return bezier_length(*self._points)

    def sample(self, segments: int = SAMPLE_COUNT) -> List[Vec2]:
        return bezier_sample(*self._points, segments)

    # ========== Kontrakt geometrii ==========

    def bounding_rect(self) -> Rect:
        return bezier_bounds(*self._points)

    def contains(self, point: PointLike) -> bool:
        return bezier_distance(*self._points, point) <= self.HIT_TOLERANCE

    def _apply(self, points: Sequence[Vec2]) -> None:
        self._points = list(points)
        self._notify_changed()

    def translate(self, delta: PointLike) -> None:
        delta = to_vec(delta)
        self._apply([p + delta for p in self._points])

    def rotate(self, angle_degrees: float, center: PointLike = (0.0, 0.0)) -> None:
        self._apply([rotate_point(p, angle_degrees, center) for p in self._points])

    def mirror(self, axis_point1: PointLike, axis_point2: PointLike) -> None:
        if is_degenerate_axis(axis_point1, axis_point2):
            return
        self._apply([mirror_point(p, axis_point1, axis_point2) for p in self._points])

    def scale(self, sx: float, sy: float, origin: PointLike = (0.0, 0.0)) -> None:
        self._apply([scale_point(p, sx, sy, origin) for p in self._points])


__all__ = [
    'SAMPLE_COUNT',
    'bezier_point',
    'bezier_derivative',
    'bezier_sample',
    'bezier_length',
    'bezier_distance',
    'bezier_bounds',
    'CubicBezier',
]
