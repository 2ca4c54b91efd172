"""
Attachment - obiekty przypięte do konturu polilinii
===================================================
Zapas na szew, nacięcia i punkty dopasowania nie mają własnej geometrii:
liczą ją z polilinii źródłowej. Przekształcenia dokumentu przesuwają
kontur, a obiekt przypięty podąża za nim, więc jego własne
translate/rotate/mirror/scale nic nie zmieniają.
"""

from typing import Optional

from ezdxf.math import Vec2

from geometry.base import GeometryObject
from geometry.polyline import Polyline
from geometry.transform import PointLike


class ContourAttachment(GeometryObject):
    """Bazowa klasa obiektów liczonych z konturu (source)"""

    def __init__(self, source: Optional[Polyline] = None, **kwargs):
        super().__init__(**kwargs)
        self._source = source

    @property
    def source(self) -> Optional[Polyline]:
        return self._source

    @source.setter
    def source(self, value: Optional[Polyline]):
        if value is not self._source:
            self._source = value
            self._notify_changed()

    @property
    def source_id(self) -> Optional[str]:
        return self._source.id if self._source is not None else None

    def edge_point(self, segment_index: int, position: float) -> Optional[Vec2]:
        """Punkt na krawędzi konturu albo None bez konturu / przy złym indeksie"""
        if self._source is None:
            return None
        return self._source.point_on_segment(segment_index, position)

    def edge_normal(self, segment_index: int, position: float) -> Vec2:
        """Normalna zewnętrzna krawędzi; (0, -1) bez konturu"""
        if self._source is not None:
            normal = self._source.outward_normal(segment_index, position)
            if normal is not None:
                return normal
        return Vec2(0, -1)

    # ========== Przekształcenia: geometria podąża za konturem ==========

    def translate(self, delta: PointLike) -> None:
        pass

    def rotate(self, angle_degrees: float, center: PointLike = (0.0, 0.0)) -> None:
        pass

    def mirror(self, axis_point1: PointLike, axis_point2: PointLike) -> None:
        pass

    def scale(self, sx: float, sy: float, origin: PointLike = (0.0, 0.0)) -> None:
        pass


__all__ = ['ContourAttachment']
