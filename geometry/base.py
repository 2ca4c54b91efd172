"""
Geometry Base - Bazowy obiekt geometrii
=======================================
GeometryObject: wspólny kontrakt wszystkich kształtów
(bounding_rect, contains, translate/rotate/mirror/scale)
oraz Rect - prostokąt osiowy używany jako bounding box.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from ezdxf.math import Vec2

from config.settings import DEFAULT_LAYER
from geometry.transform import PointLike, fit_rect, to_vec


class ObjectType(Enum):
    """Typy obiektów geometrii"""
    POINT = "Point"
    LINE = "Line"
    CIRCLE = "Circle"
    RECTANGLE = "Rectangle"
    CUBIC_BEZIER = "CubicBezier"
    ARC = "Arc"          # tylko znacznik - łuki DXF trafiają do Polyline
    POLYLINE = "Polyline"
    POLYGON = "Polygon"  # tylko znacznik
    SEAM_ALLOWANCE = "SeamAllowance"
    NOTCH = "Notch"
    MATCH_POINT = "MatchPoint"


class LineStyle(Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


@dataclass
class Rect:
    """Prostokąt osiowy: lewy górny róg + wymiary"""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_points(cls, points: Iterable[PointLike]) -> 'Rect':
        return cls(*fit_rect(points))

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Vec2:
        return Vec2(self.x + self.width / 2, self.y + self.height / 2)

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def adjusted(self, dx1: float, dy1: float, dx2: float, dy2: float) -> 'Rect':
        """Nowy prostokąt z przesuniętymi krawędziami (jak QRectF.adjusted)"""
        return Rect(
            self.x + dx1,
            self.y + dy1,
            self.width + dx2 - dx1,
            self.height + dy2 - dy1,
        )

    def contains(self, point: PointLike) -> bool:
        """Punkt wewnątrz lub na krawędzi. Pusty prostokąt niczego nie zawiera."""
        if self.is_empty():
            return False
        p = to_vec(point)
        return self.left <= p.x <= self.right and self.top <= p.y <= self.bottom

    def united(self, other: 'Rect') -> 'Rect':
        return Rect.from_points([
            (self.left, self.top), (self.right, self.bottom),
            (other.left, other.top), (other.right, other.bottom),
        ])

    def as_tuple(self) -> tuple:
        return (self.x, self.y, self.width, self.height)


# Callback wywoływany po każdej zmianie obiektu
ChangeCallback = Callable[['GeometryObject'], None]


class GeometryObject(ABC):
    """
    Bazowa klasa obiektów geometrii.

    Powiadomienia o zmianach idą przez jeden callback instalowany przez
    właściciela (Document). Obiekt bez właściciela nie powiadamia nikogo.

    Attributes:
        id: UUID nadawany przy tworzeniu (niezmienny)
        name: Nazwa wyświetlana
        layer: Nazwa warstwy
        visible / selected / locked: Flagi stanu
    """

    object_type: ObjectType = None

    def __init__(
        self,
        name: Optional[str] = None,
        layer: str = DEFAULT_LAYER,
        object_id: Optional[str] = None
    ):
        self._id = object_id or str(uuid.uuid4())
        self._name = name if name is not None else self.object_type.value
        self._layer = layer
        self._visible = True
        self._selected = False
        self._locked = False
        self._line_weight = 1.0
        self._line_color = "#000000"
        self._line_style = LineStyle.SOLID
        self._change_callback: Optional[ChangeCallback] = None

    # ========== Tożsamość ==========

    @property
    def id(self) -> str:
        return self._id

    @property
    def type_name(self) -> str:
        return self.object_type.value

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        if value != self._name:
            self._name = value
            self._notify_changed()

    @property
    def layer(self) -> str:
        return self._layer

    @layer.setter
    def layer(self, value: str):
        if value != self._layer:
            self._layer = value
            self._notify_changed()

    # ========== Flagi ==========

    @property
    def visible(self) -> bool:
        return self._visible

    @visible.setter
    def visible(self, value: bool):
        if value != self._visible:
            self._visible = value
            self._notify_changed()

    @property
    def selected(self) -> bool:
        return self._selected

    @selected.setter
    def selected(self, value: bool):
        if value != self._selected:
            self._selected = value
            self._notify_changed()

    @property
    def locked(self) -> bool:
        return self._locked

    @locked.setter
    def locked(self, value: bool):
        if value != self._locked:
            self._locked = value
            self._notify_changed()

    # ========== Styl linii ==========

    @property
    def line_weight(self) -> float:
        return self._line_weight

    @line_weight.setter
    def line_weight(self, value: float):
        # Zakres dopuszczalny w edytorze: 0.1 - 5.0
        if 0.1 <= value <= 5.0 and value != self._line_weight:
            self._line_weight = value
            self._notify_changed()

    @property
    def line_color(self) -> str:
        return self._line_color

    @line_color.setter
    def line_color(self, value: str):
        if value != self._line_color:
            self._line_color = value
            self._notify_changed()

    @property
    def line_style(self) -> LineStyle:
        return self._line_style

    @line_style.setter
    def line_style(self, value: LineStyle):
        if value != self._line_style:
            self._line_style = value
            self._notify_changed()

    # ========== Powiadomienia ==========

    def bind_change_callback(self, callback: Optional[ChangeCallback]) -> None:
        """Zainstaluj (lub usuń przez None) callback właściciela"""
        self._change_callback = callback

    def _notify_changed(self) -> None:
        if self._change_callback is not None:
            self._change_callback(self)

    # ========== Kontrakt geometrii ==========

    @abstractmethod
    def bounding_rect(self) -> Rect:
        """Prostokąt osiowy obejmujący obiekt"""

    @abstractmethod
    def contains(self, point: PointLike) -> bool:
        """Test trafienia w pasie tolerancji wokół krawędzi"""

    @abstractmethod
    def translate(self, delta: PointLike) -> None:
        pass

    @abstractmethod
    def rotate(self, angle_degrees: float, center: PointLike = (0.0, 0.0)) -> None:
        pass

    @abstractmethod
    def mirror(self, axis_point1: PointLike, axis_point2: PointLike) -> None:
        pass

    @abstractmethod
    def scale(self, sx: float, sy: float, origin: PointLike = (0.0, 0.0)) -> None:
        pass

    def __repr__(self):
        return f"<{self.__class__.__name__} {self._name!r} layer={self._layer!r} id={self._id[:8]}>"


__all__ = [
    'ObjectType',
    'LineStyle',
    'Rect',
    'ChangeCallback',
    'GeometryObject',
]
