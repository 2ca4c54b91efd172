"""
Rectangle - prostokąt osiowy (lewy górny róg + wymiary)

Obrót, odbicie i skalowanie przekształcają cztery narożniki i dopasowują
nowy prostokąt osiowy. Prostokąt nigdy nie jest obrócony.
"""

from typing import List

from ezdxf.math import Vec2

from geometry.base import GeometryObject, ObjectType, Rect
from geometry.transform import (
    PointLike, to_vec, rotate_point, mirror_point, scale_point, is_degenerate_axis
)


class Rectangle(GeometryObject):

    object_type = ObjectType.RECTANGLE

    HIT_TOLERANCE = 5.0

    def __init__(
        self,
        top_left: PointLike = (0.0, 0.0),
        width: float = 0.0,
        height: float = 0.0,
        **kwargs
    ):
        super().__init__(**kwargs)
        self._top_left = to_vec(top_left)
        self._width = abs(width)
        self._height = abs(height)

    # ========== Właściwości ==========

    @property
    def top_left(self) -> Vec2:
        return self._top_left

    @top_left.setter
    def top_left(self, value: PointLike):
        value = to_vec(value)
        if value != self._top_left:
            self._top_left = value
            self._notify_changed()

    @property
    def width(self) -> float:
        return self._width

    @width.setter
    def width(self, value: float):
        value = abs(value)
        if value != self._width:
            self._width = value
            self._notify_changed()

    @property
    def height(self) -> float:
        return self._height

    @height.setter
    def height(self, value: float):
        value = abs(value)
        if value != self._height:
            self._height = value
            self._notify_changed()

    @property
    def top_right(self) -> Vec2:
        return self._top_left + Vec2(self._width, 0.0)

    @property
    def bottom_left(self) -> Vec2:
        return self._top_left + Vec2(0.0, self._height)

    @property
    def bottom_right(self) -> Vec2:
        return self._top_left + Vec2(self._width, self._height)

    @property
    def center(self) -> Vec2:
        return self._top_left + Vec2(self._width / 2, self._height / 2)

    def corners(self) -> List[Vec2]:
        """Narożniki w kolejności: TL, TR, BR, BL"""
        return [self.top_left, self.top_right, self.bottom_right, self.bottom_left]

    def set_size(self, width: float, height: float) -> None:
        width = abs(width)
        height = abs(height)
        if width != self._width or height != self._height:
            self._width = width
            self._height = height
            self._notify_changed()

    def rect(self) -> Rect:
        return Rect(self._top_left.x, self._top_left.y, self._width, self._height)

    def set_rect(self, rect: Rect) -> None:
        top_left = Vec2(rect.x, rect.y)
        width = abs(rect.width)
        height = abs(rect.height)
        if top_left != self._top_left or width != self._width or height != self._height:
            self._top_left = top_left
            self._width = width
            self._height = height
            self._notify_changed()

    def area(self) -> float:
        return self._width * self._height

    def perimeter(self) -> float:
        return 2.0 * (self._width + self._height)

    # ========== Kontrakt geometrii ==========

    def bounding_rect(self) -> Rect:
        return self.rect()

    def contains(self, point: PointLike) -> bool:
        """
        Trafienie w pas wokół krawędzi: w środku zewnętrznego, poza wewnętrznym.

        Prostokąt węższy lub niższy niż 2 * HIT_TOLERANCE ma pusty prostokąt
        wewnętrzny (Rect.contains go nie normalizuje), więc trafia cały obszar
        łącznie ze środkiem. Świadomie inaczej niż QRectF.contains, który
        odwraca ujemne wymiary i odrzuciłby środek małego prostokąta.
        """
        tol = self.HIT_TOLERANCE
        rect = self.rect()
        outer = rect.adjusted(-tol, -tol, tol, tol)
        inner = rect.adjusted(tol, tol, -tol, -tol)
        return outer.contains(point) and not inner.contains(point)

    def _refit(self, corners: List[Vec2]) -> None:
        fitted = Rect.from_points(corners)
        self._top_left = Vec2(fitted.x, fitted.y)
        self._width = fitted.width
        self._height = fitted.height

    def translate(self, delta: PointLike) -> None:
        self._top_left += to_vec(delta)
        self._notify_changed()

    def rotate(self, angle_degrees: float, center: PointLike = (0.0, 0.0)) -> None:
        self._refit([rotate_point(c, angle_degrees, center) for c in self.corners()])
        self._notify_changed()

    def mirror(self, axis_point1: PointLike, axis_point2: PointLike) -> None:
        if is_degenerate_axis(axis_point1, axis_point2):
            return
        self._refit([mirror_point(c, axis_point1, axis_point2) for c in self.corners()])
        self._notify_changed()

    def scale(self, sx: float, sy: float, origin: PointLike = (0.0, 0.0)) -> None:
        self._refit([scale_point(c, sx, sy, origin) for c in self.corners()])
        self._notify_changed()
