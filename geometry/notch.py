"""
Notch - nacięcie montażowe na krawędzi wykroju
==============================================
Położenie: indeks segmentu konturu + parametr 0-1 wzdłuż segmentu
(krzywe liczone przez segment_controls, nie przez cięciwę).
Nacięcie wchodzi do wnętrza wykroju, przeciwnie do normalnej zewnętrznej.
"""

from enum import Enum
from typing import List, Optional

from ezdxf.math import Vec2

from config.settings import NOTCH_DEPTH
from geometry.attachment import ContourAttachment
from geometry.base import ObjectType, Rect
from geometry.polyline import Polyline
from geometry.transform import PointLike, to_vec


class NotchStyle(Enum):
    V_NOTCH = "vnotch"   # nacięcie w kształcie V
    SLIT = "slit"        # prosta szczelina prostopadła do krawędzi
    DOT = "dot"          # kropka (znacznik, bez cięcia)


class Notch(ContourAttachment):

    object_type = ObjectType.NOTCH

    HIT_TOLERANCE = 10.0
    # Promień kropki: 0.3 * głębokość, nie mniej niż DOT_MIN_RADIUS
    DOT_RATIO = 0.3
    DOT_MIN_RADIUS = 1.5

    def __init__(
        self,
        source: Optional[Polyline] = None,
        segment_index: int = 0,
        position: float = 0.5,
        style: NotchStyle = NotchStyle.V_NOTCH,
        depth: float = NOTCH_DEPTH,
        **kwargs
    ):
        super().__init__(source, **kwargs)
        self._segment_index = segment_index
        self._position = max(0.0, min(1.0, position))
        self._style = style
        self._depth = max(0.0, depth)

    # ========== Właściwości ==========

    @property
    def segment_index(self) -> int:
        return self._segment_index

    @segment_index.setter
    def segment_index(self, value: int):
        if value != self._segment_index:
            self._segment_index = value
            self._notify_changed()

    @property
    def position(self) -> float:
        return self._position

    @position.setter
    def position(self, value: float):
        value = max(0.0, min(1.0, value))
        if value != self._position:
            self._position = value
            self._notify_changed()

    @property
    def style(self) -> NotchStyle:
        return self._style

    @style.setter
    def style(self, value: NotchStyle):
        if value != self._style:
            self._style = value
            self._notify_changed()

    @property
    def depth(self) -> float:
        return self._depth

    @depth.setter
    def depth(self, value: float):
        value = max(0.0, value)
        if value != self._depth:
            self._depth = value
            self._notify_changed()

    # ========== Geometria ==========

    def location(self) -> Vec2:
        """Punkt na konturze; (0, 0) bez konturu lub przy złym indeksie segmentu"""
        point = self.edge_point(self._segment_index, self._position)
        return point if point is not None else Vec2(0, 0)

    def normal(self) -> Vec2:
        return self.edge_normal(self._segment_index, self._position)

    def dot_radius(self) -> float:
        return max(self.DOT_MIN_RADIUS, self._depth * self.DOT_RATIO)

    def marker_points(self) -> List[Vec2]:
        """
        Punkty znacznika:
        V - [lewy brzeg, wierzchołek, prawy brzeg] (szerokość u podstawy = głębokość);
        SLIT - [punkt na krawędzi, koniec w środku];
        DOT - [środek].
        """
        loc = self.location()
        normal = self.normal()
        tip = loc - normal * self._depth

        if self._style == NotchStyle.V_NOTCH:
            tangent = Vec2(-normal.y, normal.x)
            half_width = self._depth * 0.5
            return [loc + tangent * half_width, tip, loc - tangent * half_width]
        if self._style == NotchStyle.SLIT:
            return [loc, tip]
        return [loc]

    def bounding_rect(self) -> Rect:
        if self._style == NotchStyle.DOT:
            r = self.dot_radius()
            loc = self.location()
            return Rect(loc.x - r, loc.y - r, 2 * r, 2 * r)
        return Rect.from_points(self.marker_points())

    def contains(self, point: PointLike) -> bool:
        return self.location().distance(to_vec(point)) <= self.HIT_TOLERANCE


__all__ = ['NotchStyle', 'Notch']
