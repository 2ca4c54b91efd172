"""
Circle - okrąg (środek + promień)
"""

import math

from ezdxf.math import Vec2

from geometry.base import GeometryObject, ObjectType, Rect
from geometry.transform import (
    PointLike, to_vec, rotate_point, mirror_point, scale_point, is_degenerate_axis
)


class Circle(GeometryObject):
    """Okrąg. Promień zawsze >= 0 (abs przy tworzeniu i w setterze)."""

    object_type = ObjectType.CIRCLE

    HIT_TOLERANCE = 5.0

    def __init__(self, center: PointLike = (0.0, 0.0), radius: float = 0.0, **kwargs):
        super().__init__(**kwargs)
        self._center = to_vec(center)
        self._radius = abs(radius)

    @property
    def center(self) -> Vec2:
        return self._center

    @center.setter
    def center(self, value: PointLike):
        value = to_vec(value)
        if value != self._center:
            self._center = value
            self._notify_changed()

    @property
    def radius(self) -> float:
        return self._radius

    @radius.setter
    def radius(self, value: float):
        value = abs(value)
        if value != self._radius:
            self._radius = value
            self._notify_changed()

    def diameter(self) -> float:
        return self._radius * 2.0

    def area(self) -> float:
        return math.pi * self._radius * self._radius

    def circumference(self) -> float:
        return 2.0 * math.pi * self._radius

    def contains_point(self, point: PointLike) -> bool:
        """Czy punkt leży wewnątrz koła (wypełnienie, nie obwód)"""
        return self._center.distance(to_vec(point)) <= self._radius

    def distance_to_point(self, point: PointLike) -> float:
        """Odległość od obwodu"""
        return abs(self._center.distance(to_vec(point)) - self._radius)

    def bounding_rect(self) -> Rect:
        r = self._radius
        return Rect(self._center.x - r, self._center.y - r, 2 * r, 2 * r)

    def contains(self, point: PointLike) -> bool:
        return self.distance_to_point(point) <= self.HIT_TOLERANCE

    def translate(self, delta: PointLike) -> None:
        self._center += to_vec(delta)
        self._notify_changed()

    def rotate(self, angle_degrees: float, center: PointLike = (0.0, 0.0)) -> None:
        self._center = rotate_point(self._center, angle_degrees, center)
        self._notify_changed()

    def mirror(self, axis_point1: PointLike, axis_point2: PointLike) -> None:
        if is_degenerate_axis(axis_point1, axis_point2):
            return
        self._center = mirror_point(self._center, axis_point1, axis_point2)
        self._notify_changed()

    def scale(self, sx: float, sy: float, origin: PointLike = (0.0, 0.0)) -> None:
        # Okrąg pozostaje okręgiem: promień przez średnią skalę
        self._center = scale_point(self._center, sx, sy, origin)
        self._radius *= (abs(sx) + abs(sy)) / 2.0
        self._notify_changed()
