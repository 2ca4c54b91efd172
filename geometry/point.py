"""Point2D - pojedynczy punkt na rysunku"""

from ezdxf.math import Vec2

from geometry.base import GeometryObject, ObjectType, Rect
from geometry.transform import (
    PointLike, to_vec, rotate_point, mirror_point, scale_point, is_degenerate_axis
)


class Point2D(GeometryObject):

    object_type = ObjectType.POINT

    # Rozmiar markera punktu (bounding box)
    POINT_SIZE = 6.0
    # Tolerancja trafienia
    HIT_TOLERANCE = 10.0

    def __init__(self, position: PointLike = (0.0, 0.0), **kwargs):
        super().__init__(**kwargs)
        self._position = to_vec(position)

    @property
    def position(self) -> Vec2:
        return self._position

    @position.setter
    def position(self, value: PointLike):
        value = to_vec(value)
        if value != self._position:
            self._position = value
            self._notify_changed()

    @property
    def x(self) -> float:
        return self._position.x

    @property
    def y(self) -> float:
        return self._position.y

    def distance_to(self, point: PointLike) -> float:
        return self._position.distance(to_vec(point))

    def bounding_rect(self) -> Rect:
        half = self.POINT_SIZE / 2
        return Rect(self.x - half, self.y - half, self.POINT_SIZE, self.POINT_SIZE)

    def contains(self, point: PointLike) -> bool:
        return self.distance_to(point) <= self.HIT_TOLERANCE

    def translate(self, delta: PointLike) -> None:
        self._position += to_vec(delta)
        self._notify_changed()

    def rotate(self, angle_degrees: float, center: PointLike = (0.0, 0.0)) -> None:
        self._position = rotate_point(self._position, angle_degrees, center)
        self._notify_changed()

    def mirror(self, axis_point1: PointLike, axis_point2: PointLike) -> None:
        if is_degenerate_axis(axis_point1, axis_point2):
            return
        self._position = mirror_point(self._position, axis_point1, axis_point2)
        self._notify_changed()

    def scale(self, sx: float, sy: float, origin: PointLike = (0.0, 0.0)) -> None:
        self._position = scale_point(self._position, sx, sy, origin)
        self._notify_changed()
