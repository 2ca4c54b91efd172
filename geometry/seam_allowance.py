"""
SeamAllowance - zapas na szew
=============================
Linia cięcia odsunięta od konturu polilinii o szerokość zapasu.
Offset liczy shapely:
- cały kontur: Polygon.buffer(width) z wybranym typem narożnika,
- zakres krawędzi start -> end: LineString.offset_curve po stronie
  zewnętrznej (kierunek obiegu konturu decyduje o znaku).

Kilka zakresów na jednym konturze daje kilka osobnych linii.
Bez zakresów liczony jest cały kontur z szerokością width.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ezdxf.math import Vec2
from shapely.geometry import LineString, Point, Polygon

from config.settings import SEAM_ALLOWANCE_WIDTH
from geometry.attachment import ContourAttachment
from geometry.base import ObjectType, Rect
from geometry.polyline import Polyline, segment_count
from geometry.transform import PointLike, to_vec

# Odcinki na segment krzywej przy spłaszczaniu konturu
CURVE_SEGMENTS = 10
# Limit ostrza dla narożników ostrych (jak w shapely)
MITRE_LIMIT = 5.0


class CornerType(Enum):
    MITER = "mitre"
    ROUND = "round"
    BEVEL = "bevel"


@dataclass
class SeamRange:
    """Zakres krawędzi od wierzchołka start do end (lub cały kontur)"""
    start_vertex: int = -1
    end_vertex: int = -1
    width: float = SEAM_ALLOWANCE_WIDTH
    full_contour: bool = False

    def is_valid(self) -> bool:
        return self.full_contour or (self.start_vertex >= 0 and self.end_vertex >= 0)


def _coords(geometry) -> List[Vec2]:
    """Punkty pierwszej części wyniku shapely (bez punktu zamykającego)"""
    if geometry.is_empty:
        return []
    if hasattr(geometry, "geoms"):
        geometry = max(geometry.geoms, key=lambda g: g.length)
    if isinstance(geometry, Polygon):
        points = [Vec2(x, y) for x, y in geometry.exterior.coords]
        return points[:-1]
    return [Vec2(x, y) for x, y in geometry.coords]


class SeamAllowance(ContourAttachment):

    object_type = ObjectType.SEAM_ALLOWANCE

    HIT_TOLERANCE = 5.0

    def __init__(
        self,
        source: Optional[Polyline] = None,
        width: float = SEAM_ALLOWANCE_WIDTH,
        corner_type: CornerType = CornerType.ROUND,
        **kwargs
    ):
        super().__init__(source, **kwargs)
        self._width = width
        self._corner_type = corner_type
        self._enabled = True
        self._ranges: List[SeamRange] = []

    # ========== Konfiguracja ==========

    @property
    def width(self) -> float:
        return self._width

    @width.setter
    def width(self, value: float):
        if value != self._width:
            self._width = value
            self._notify_changed()

    @property
    def corner_type(self) -> CornerType:
        return self._corner_type

    @corner_type.setter
    def corner_type(self, value: CornerType):
        if value != self._corner_type:
            self._corner_type = value
            self._notify_changed()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool):
        if value != self._enabled:
            self._enabled = value
            self._notify_changed()

    # ========== Zakresy ==========

    @property
    def ranges(self) -> List[SeamRange]:
        return list(self._ranges)

    def add_range(self, start_vertex: int, end_vertex: int, width: float) -> None:
        self._ranges.append(SeamRange(start_vertex, end_vertex, width))
        self._notify_changed()

    def add_full_contour(self, width: float) -> None:
        self._ranges.append(SeamRange(width=width, full_contour=True))
        self._notify_changed()

    def remove_range(self, index: int) -> bool:
        if not 0 <= index < len(self._ranges):
            return False
        del self._ranges[index]
        self._notify_changed()
        return True

    def clear_ranges(self) -> None:
        if self._ranges:
            self._ranges.clear()
            self._notify_changed()

    def is_edge_in_range(self, edge_index: int) -> bool:
        """Czy krawędź edge_index -> edge_index+1 ma zapas"""
        if self._source is None:
            return False
        if not self._ranges:
            return 0 <= edge_index < segment_count(self._source.vertex_count(), self._source.closed)
        for seam_range in self._ranges:
            if seam_range.full_contour or edge_index in self._range_edges(seam_range):
                return True
        return False

    # ========== Obliczenia ==========

    def _range_edges(self, seam_range: SeamRange) -> List[int]:
        """Indeksy krawędzi zakresu; dla zamkniętego konturu zakres może przejść przez 0"""
        if self._source is None:
            return []
        vertex_count = self._source.vertex_count()
        start, end = seam_range.start_vertex, seam_range.end_vertex
        if not (0 <= start < vertex_count and 0 <= end < vertex_count) or start == end:
            return []
        if end > start:
            return list(range(start, end))
        if self._source.closed:
            return list(range(start, vertex_count)) + list(range(0, end))
        return []

    def _contour_offset(self, width: float) -> List[Vec2]:
        points = self._source.flatten(CURVE_SEGMENTS)
        if len(points) < 3:
            return []
        polygon = Polygon([(p.x, p.y) for p in points])
        if not polygon.is_valid:
            polygon = polygon.buffer(0)
        inflated = polygon.buffer(width, join_style=self._corner_type.value, mitre_limit=MITRE_LIMIT)
        return _coords(inflated)

    def _edges_offset(self, edges: List[int], width: float) -> List[Vec2]:
        segments = self._source.segments()
        points: List[Vec2] = []
        for edge in edges:
            part = segments[edge].flatten(CURVE_SEGMENTS)
            points.extend(part if not points else part[1:])
        if len(points) < 2:
            return []
        # offset_curve: dodatni = lewa strona; kontur CCW ma zewnętrze po prawej
        distance = width
        if self._source.closed and self._source.signed_area() > 0:
            distance = -width
        line = LineString([(p.x, p.y) for p in points])
        return _coords(line.offset_curve(distance, join_style=self._corner_type.value, mitre_limit=MITRE_LIMIT))

    def compute_range_offset(self, seam_range: SeamRange) -> List[Vec2]:
        """Linia zapasu jednego zakresu: zamknięta dla całego konturu, otwarta dla krawędzi"""
        if self._source is None or not seam_range.is_valid() or seam_range.width <= 0:
            return []
        if seam_range.full_contour:
            return self._contour_offset(seam_range.width)
        edges = self._range_edges(seam_range)
        if not edges:
            return []
        return self._edges_offset(edges, seam_range.width)

    def _active_ranges(self) -> List[SeamRange]:
        return self._ranges or [SeamRange(width=self._width, full_contour=True)]

    def offset_paths(self) -> List[Tuple[List[Vec2], bool]]:
        """Niepuste linie zapasu jako (punkty, zamknięta)"""
        if not self._enabled or self._source is None:
            return []
        paths = []
        for seam_range in self._active_ranges():
            points = self.compute_range_offset(seam_range)
            if points:
                paths.append((points, seam_range.full_contour))
        return paths

    def compute_all_offsets(self) -> List[List[Vec2]]:
        return [points for points, _ in self.offset_paths()]

    def compute_offset(self) -> List[Vec2]:
        """Pierwsza linia zapasu (pusta lista gdy brak)"""
        offsets = self.compute_all_offsets()
        return offsets[0] if offsets else []

    # ========== Kontrakt geometrii ==========

    def bounding_rect(self) -> Rect:
        points = [p for offset in self.compute_all_offsets() for p in offset]
        if not points:
            return Rect()
        return Rect.from_points(points)

    def contains(self, point: PointLike) -> bool:
        p = to_vec(point)
        target = Point(p.x, p.y)
        for points, closed in self.offset_paths():
            coords = [(q.x, q.y) for q in points]
            if closed:
                coords.append(coords[0])
            if len(coords) >= 2 and LineString(coords).distance(target) <= self.HIT_TOLERANCE:
                return True
        return False


__all__ = ['CornerType', 'SeamRange', 'SeamAllowance']
