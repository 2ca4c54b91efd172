"""
Line - odcinek między dwoma punktami
"""

import math

from ezdxf.math import Vec2

from geometry.base import GeometryObject, ObjectType, Rect
from geometry.transform import (
    PointLike, to_vec, rotate_point, mirror_point, scale_point, is_degenerate_axis
)


class Line(GeometryObject):
    """
    Odcinek start -> end.

    Odcinek zdegenerowany (długość < DEGENERATE_LENGTH) w zapytaniach
    o odległość i najbliższy punkt zachowuje się jak punkt startowy.
    """

    object_type = ObjectType.LINE

    HIT_TOLERANCE = 5.0
    BOUNDS_MARGIN = 2.0
    DEGENERATE_LENGTH = 0.0001

    def __init__(self, start: PointLike = (0.0, 0.0), end: PointLike = (0.0, 0.0), **kwargs):
        super().__init__(**kwargs)
        self._start = to_vec(start)
        self._end = to_vec(end)

    @property
    def start(self) -> Vec2:
        return self._start

    @start.setter
    def start(self, value: PointLike):
        value = to_vec(value)
        if value != self._start:
            self._start = value
            self._notify_changed()

    @property
    def end(self) -> Vec2:
        return self._end

    @end.setter
    def end(self, value: PointLike):
        value = to_vec(value)
        if value != self._end:
            self._end = value
            self._notify_changed()

    def set_points(self, start: PointLike, end: PointLike) -> None:
        start = to_vec(start)
        end = to_vec(end)
        if start != self._start or end != self._end:
            self._start = start
            self._end = end
            self._notify_changed()

    # ========== Zapytania ==========

    def length(self) -> float:
        return self._start.distance(self._end)

    def angle(self) -> float:
        """
        Kąt w stopniach 0..360, przeciwnie do wskazówek zegara
        na płótnie z osią Y skierowaną w dół.
        """
        d = self._end - self._start
        result = math.degrees(math.atan2(-d.y, d.x))
        return result % 360.0

    def midpoint(self) -> Vec2:
        return self._start.lerp(self._end, 0.5)

    def closest_point(self, point: PointLike) -> Vec2:
        """Najbliższy punkt odcinka (rzut przycięty do [0, 1])"""
        p = to_vec(point)
        d = self._end - self._start
        length_sq = d.dot(d)
        if length_sq < self.DEGENERATE_LENGTH ** 2:
            return self._start
        t = (p - self._start).dot(d) / length_sq
        t = max(0.0, min(1.0, t))
        return self._start + d * t

    def distance_to_point(self, point: PointLike) -> float:
        return to_vec(point).distance(self.closest_point(point))

    # ========== Kontrakt geometrii ==========

    def bounding_rect(self) -> Rect:
        m = self.BOUNDS_MARGIN
        return Rect.from_points([self._start, self._end]).adjusted(-m, -m, m, m)

    def contains(self, point: PointLike) -> bool:
        return self.distance_to_point(point) <= self.HIT_TOLERANCE

    def translate(self, delta: PointLike) -> None:
        delta = to_vec(delta)
        self._start += delta
        self._end += delta
        self._notify_changed()

    def rotate(self, angle_degrees: float, center: PointLike = (0.0, 0.0)) -> None:
        self._start = rotate_point(self._start, angle_degrees, center)
        self._end = rotate_point(self._end, angle_degrees, center)
        self._notify_changed()

    def mirror(self, axis_point1: PointLike, axis_point2: PointLike) -> None:
        if is_degenerate_axis(axis_point1, axis_point2):
            return
        self._start = mirror_point(self._start, axis_point1, axis_point2)
        self._end = mirror_point(self._end, axis_point1, axis_point2)
        self._notify_changed()

    def scale(self, sx: float, sy: float, origin: PointLike = (0.0, 0.0)) -> None:
        self._start = scale_point(self._start, sx, sy, origin)
        self._end = scale_point(self._end, sx, sy, origin)
        self._notify_changed()
