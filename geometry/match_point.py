"""
MatchPoint - punkt dopasowania między częściami wykroju
=======================================================
Punkt z etykietą ("A", "B", "1"...) w pozycji bezwzględnej albo na
krawędzi konturu. Punkty łączy się parami (w obie strony), żeby pokazać,
które miejsca różnych części mają się spotkać przy szyciu.
"""

from typing import List, Optional

from ezdxf.math import Vec2

from geometry.attachment import ContourAttachment
from geometry.base import ObjectType, Rect
from geometry.polyline import Polyline
from geometry.transform import (
    PointLike, to_vec, rotate_point, mirror_point, scale_point, is_degenerate_axis
)


class MatchPoint(ContourAttachment):
    """
    Punkt dopasowania.

    on_edge=True: pozycja liczona z (segment_index, segment_position) na
    konturze source; bez poprawnego konturu używana jest pozycja bezwzględna.
    Ustawienie position przełącza na tryb bezwzględny.
    """

    object_type = ObjectType.MATCH_POINT

    MARKER_SIZE = 6.0
    HIT_TOLERANCE = 10.0

    def __init__(
        self,
        label: str = "A",
        position: PointLike = (0.0, 0.0),
        source: Optional[Polyline] = None,
        segment_index: int = 0,
        segment_position: float = 0.5,
        on_edge: bool = False,
        **kwargs
    ):
        super().__init__(source, **kwargs)
        self._label = label
        self._absolute = to_vec(position)
        self._on_edge = on_edge
        self._segment_index = segment_index
        self._segment_position = max(0.0, min(1.0, segment_position))
        self._links: List['MatchPoint'] = []

    @classmethod
    def on_contour(cls, label: str, source: Polyline, segment_index: int,
                   segment_position: float, **kwargs) -> 'MatchPoint':
        return cls(label, source=source, segment_index=segment_index,
                   segment_position=segment_position, on_edge=True, **kwargs)

    # ========== Właściwości ==========

    @property
    def label(self) -> str:
        return self._label

    @label.setter
    def label(self, value: str):
        if value != self._label:
            self._label = value
            self._notify_changed()

    @property
    def on_edge(self) -> bool:
        return self._on_edge

    @property
    def absolute_position(self) -> Vec2:
        return self._absolute

    @property
    def segment_index(self) -> int:
        return self._segment_index

    @segment_index.setter
    def segment_index(self, value: int):
        if value != self._segment_index or not self._on_edge:
            self._segment_index = value
            self._on_edge = True
            self._notify_changed()

    @property
    def segment_position(self) -> float:
        return self._segment_position

    @segment_position.setter
    def segment_position(self, value: float):
        value = max(0.0, min(1.0, value))
        if value != self._segment_position or not self._on_edge:
            self._segment_position = value
            self._on_edge = True
            self._notify_changed()

    @property
    def position(self) -> Vec2:
        if self._on_edge:
            point = self.edge_point(self._segment_index, self._segment_position)
            if point is not None:
                return point
        return self._absolute

    @position.setter
    def position(self, value: PointLike):
        value = to_vec(value)
        if value != self._absolute or self._on_edge:
            self._absolute = value
            self._on_edge = False
            self._notify_changed()

    # ========== Połączenia ==========

    @property
    def linked_points(self) -> List['MatchPoint']:
        return list(self._links)

    def link_to(self, other: 'MatchPoint') -> None:
        """Połącz w obie strony (bez duplikatów, bez połączenia z samym sobą)"""
        if other is self or other in self._links:
            return
        self._links.append(other)
        other._links.append(self)
        self._notify_changed()
        other._notify_changed()

    def unlink_from(self, other: 'MatchPoint') -> None:
        if other not in self._links:
            return
        self._links.remove(other)
        if self in other._links:
            other._links.remove(self)
        self._notify_changed()
        other._notify_changed()

    def unlink_all(self) -> None:
        for other in list(self._links):
            self.unlink_from(other)

    def is_linked_to(self, other: 'MatchPoint') -> bool:
        return other in self._links

    # ========== Kontrakt geometrii ==========

    def bounding_rect(self) -> Rect:
        half = self.MARKER_SIZE / 2
        p = self.position
        return Rect(p.x - half, p.y - half, self.MARKER_SIZE, self.MARKER_SIZE)

    def contains(self, point: PointLike) -> bool:
        return self.position.distance(to_vec(point)) <= self.HIT_TOLERANCE

    # Punkt na krawędzi podąża za konturem; bezwzględny przekształca się sam

    def translate(self, delta: PointLike) -> None:
        if self._on_edge:
            return
        self._absolute += to_vec(delta)
        self._notify_changed()

    def rotate(self, angle_degrees: float, center: PointLike = (0.0, 0.0)) -> None:
        if self._on_edge:
            return
        self._absolute = rotate_point(self._absolute, angle_degrees, center)
        self._notify_changed()

    def mirror(self, axis_point1: PointLike, axis_point2: PointLike) -> None:
        if self._on_edge or is_degenerate_axis(axis_point1, axis_point2):
            return
        self._absolute = mirror_point(self._absolute, axis_point1, axis_point2)
        self._notify_changed()

    def scale(self, sx: float, sy: float, origin: PointLike = (0.0, 0.0)) -> None:
        if self._on_edge:
            return
        self._absolute = scale_point(self._absolute, sx, sy, origin)
        self._notify_changed()


__all__ = ['MatchPoint']
