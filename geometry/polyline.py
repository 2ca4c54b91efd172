"""
Polyline - Polilinia z wierzchołkami ostrymi i gładkimi
=======================================================
Jedna funkcja budowy segmentów (segment_controls) obsługuje wszystkie
miejsca, które potrzebują krzywej: obliczenia na obiekcie, test trafienia,
bounding box, długości oraz eksport.

Reguła budowy segmentu i -> i+1:
- oba wierzchołki SHARP: odcinek prosty
- w przeciwnym razie krzywa Béziera, control_distance = |p2 - p1| / 3
  * SMOOTH z niezerową styczną: p1 + normalize(t) * control_distance * tension
  * SMOOTH bez stycznej: Catmull-Rom (p2 - p0) * tension / 3
  * SHARP: uchwyt 1% cięciwy od wierzchołka
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ezdxf.math import Vec2

from geometry.base import GeometryObject, ObjectType, Rect
from geometry.bezier import (
    SAMPLE_COUNT, bezier_bounds, bezier_derivative, bezier_distance, bezier_length, bezier_point
)
from geometry.line import Line
from geometry.transform import (
    PointLike, to_vec, rotate_point, rotate_vector, mirror_point, mirror_vector,
    scale_point, scale_vector, is_degenerate_axis
)

# Uchwyt wierzchołka ostrego jako ułamek cięciwy
SHARP_HANDLE_RATIO = 0.01

# Minimalna liczba wierzchołków przy usuwaniu
MIN_VERTICES = 3


class VertexType(Enum):
    SHARP = "sharp"
    SMOOTH = "smooth"


@dataclass
class PolylineVertex:
    """Wierzchołek polilinii (wartość, nie obiekt z tożsamością)"""
    position: Vec2 = field(default_factory=Vec2)
    vertex_type: VertexType = VertexType.SHARP
    tangent: Vec2 = field(default_factory=Vec2)
    incoming_tension: float = 0.5
    outgoing_tension: float = 0.5

    def __post_init__(self):
        self.position = to_vec(self.position)
        self.tangent = to_vec(self.tangent)

    @property
    def is_smooth(self) -> bool:
        return self.vertex_type == VertexType.SMOOTH


@dataclass
class PathSegment:
    """
    Segment zbudowanej ścieżki.

    curved=False oznacza odcinek prosty start -> end (c1/c2 wtedy = końce).
    """
    start: Vec2
    c1: Vec2
    c2: Vec2
    end: Vec2
    curved: bool

    def point_at(self, t: float) -> Vec2:
        if not self.curved:
            t = max(0.0, min(1.0, t))
            return self.start.lerp(self.end, t)
        return bezier_point(self.start, self.c1, self.c2, self.end, t)

    def tangent_at(self, t: float) -> Vec2:
        """Wektor kierunku (nienormalizowany) w punkcie t"""
        if not self.curved:
            return self.end - self.start
        return bezier_derivative(self.start, self.c1, self.c2, self.end, t)

    def length(self) -> float:
        if not self.curved:
            return self.start.distance(self.end)
        return bezier_length(self.start, self.c1, self.c2, self.end)

    def distance_to(self, point: PointLike) -> float:
        if not self.curved:
            return Line(self.start, self.end).distance_to_point(point)
        return bezier_distance(self.start, self.c1, self.c2, self.end, point)

    def closest_point(self, point: PointLike) -> Vec2:
        if not self.curved:
            return Line(self.start, self.end).closest_point(point)
        p = to_vec(point)
        samples = [self.point_at(i / SAMPLE_COUNT) for i in range(SAMPLE_COUNT + 1)]
        return min(samples, key=p.distance)

    def bounds(self) -> Rect:
        if not self.curved:
            return Rect.from_points([self.start, self.end])
        return bezier_bounds(self.start, self.c1, self.c2, self.end)

    def flatten(self, segments: int) -> List[Vec2]:
        """Punkty od start do end włącznie"""
        if not self.curved:
            return [self.start, self.end]
        segments = max(1, segments)
        return [self.point_at(i / segments) for i in range(segments + 1)]


def _outgoing_handle(vertex: PolylineVertex, p0: Vec2, p2: Vec2, control_distance: float) -> Vec2:
    p1 = vertex.position
    if not vertex.is_smooth:
        return p1 + (p2 - p1) * SHARP_HANDLE_RATIO
    if not vertex.tangent.is_null:
        return p1 + vertex.tangent.normalize() * (control_distance * vertex.outgoing_tension)
    # Catmull-Rom przy braku stycznej
    return p1 + (p2 - p0) * (vertex.outgoing_tension / 3.0)


def _incoming_handle(vertex: PolylineVertex, p1: Vec2, p3: Vec2, control_distance: float) -> Vec2:
    p2 = vertex.position
    if not vertex.is_smooth:
        return p2 - (p2 - p1) * SHARP_HANDLE_RATIO
    if not vertex.tangent.is_null:
        return p2 - vertex.tangent.normalize() * (control_distance * vertex.incoming_tension)
    return p2 - (p3 - p1) * (vertex.incoming_tension / 3.0)


def segment_controls(vertices: Sequence[PolylineVertex], index: int, closed: bool) -> PathSegment:
    """
    Zbuduj segment od wierzchołka index do następnego.

    Args:
        vertices: Wierzchołki polilinii
        index: Indeks pierwszego wierzchołka segmentu
        closed: Czy ostatni wierzchołek łączy się z pierwszym

    Returns:
        PathSegment (prosty albo krzywa Béziera)
    """
    count = len(vertices)
    current = vertices[index]
    following = vertices[(index + 1) % count]
    p1 = current.position
    p2 = following.position

    if not current.is_smooth and not following.is_smooth:
        return PathSegment(p1, p1, p2, p2, curved=False)

    # Sąsiedzi dla Catmull-Rom; na końcach otwartej polilinii - sam wierzchołek
    if closed or index > 0:
        p0 = vertices[(index - 1) % count].position
    else:
        p0 = p1
    if closed or index + 2 < count:
        p3 = vertices[(index + 2) % count].position
    else:
        p3 = p2

    control_distance = p1.distance(p2) / 3.0
    c1 = _outgoing_handle(current, p0, p2, control_distance)
    c2 = _incoming_handle(following, p1, p3, control_distance)
    return PathSegment(p1, c1, c2, p2, curved=True)


def segment_count(vertex_count: int, closed: bool) -> int:
    if vertex_count < 2:
        return 0
    return vertex_count if closed else vertex_count - 1


def build_segments(vertices: Sequence[PolylineVertex], closed: bool) -> List[PathSegment]:
    """Wszystkie segmenty ścieżki (dla zamkniętej także ostatni -> pierwszy)"""
    return [
        segment_controls(vertices, i, closed)
        for i in range(segment_count(len(vertices), closed))
    ]


class Polyline(GeometryObject):
    """
    Polilinia: lista wierzchołków + flaga closed.

    Nowa polilinia jest domyślnie zamknięta (jak w edytorze);
    importery ustawiają flagę jawnie.
    """

    object_type = ObjectType.POLYLINE

    HIT_TOLERANCE = 5.0
    VERTEX_TOLERANCE = 5.0

    def __init__(
        self,
        vertices: Optional[Sequence[PolylineVertex]] = None,
        closed: bool = True,
        **kwargs
    ):
        super().__init__(**kwargs)
        self._vertices: List[PolylineVertex] = [replace(v) for v in (vertices or [])]
        self._closed = closed

    @classmethod
    def from_points(cls, points: Sequence[PointLike], closed: bool = True, **kwargs) -> 'Polyline':
        """Polilinia z samych punktów (wszystkie wierzchołki SHARP)"""
        return cls([PolylineVertex(to_vec(p)) for p in points], closed=closed, **kwargs)

    # ========== Wierzchołki ==========

    @property
    def vertices(self) -> List[PolylineVertex]:
        return [replace(v) for v in self._vertices]

    def vertex_count(self) -> int:
        return len(self._vertices)

    def vertex_at(self, index: int) -> PolylineVertex:
        """Kopia wierzchołka; poza zakresem - pusty wierzchołek"""
        if 0 <= index < len(self._vertices):
            return replace(self._vertices[index])
        return PolylineVertex()

    def set_vertices(self, vertices: Sequence[PolylineVertex]) -> None:
        self._vertices = [replace(v) for v in vertices]
        self._notify_changed()

    def add_vertex(self, vertex: PolylineVertex) -> None:
        self._vertices.append(replace(vertex))
        self._notify_changed()

    def insert_vertex(self, index: int, vertex: PolylineVertex) -> None:
        if 0 <= index <= len(self._vertices):
            self._vertices.insert(index, replace(vertex))
            self._notify_changed()

    def remove_vertex(self, index: int) -> bool:
        """Usuń wierzchołek; odmowa poniżej MIN_VERTICES"""
        if 0 <= index < len(self._vertices) and len(self._vertices) > MIN_VERTICES:
            del self._vertices[index]
            self._notify_changed()
            return True
        return False

    def update_vertex(self, index: int, vertex: PolylineVertex) -> None:
        if 0 <= index < len(self._vertices):
            self._vertices[index] = replace(vertex)
            self._notify_changed()

    def set_vertex_type(self, index: int, vertex_type: VertexType) -> None:
        if 0 <= index < len(self._vertices) and self._vertices[index].vertex_type != vertex_type:
            self._vertices[index].vertex_type = vertex_type
            self._notify_changed()

    def clear(self) -> None:
        self._vertices.clear()
        self._notify_changed()

    @property
    def closed(self) -> bool:
        return self._closed

    @closed.setter
    def closed(self, value: bool):
        if value != self._closed:
            self._closed = value
            self._notify_changed()

    # ========== Ścieżka ==========

    def segments(self) -> List[PathSegment]:
        return build_segments(self._vertices, self._closed)

    def segment_length(
        self,
        index: int,
        override_index: Optional[int] = None,
        override_position: Optional[PointLike] = None
    ) -> float:
        """
        Długość segmentu index -> index+1.

        override_index/override_position pozwala policzyć długość dla
        przesuwanego wierzchołka bez modyfikacji polilinii.
        """
        if not 0 <= index < segment_count(len(self._vertices), self._closed):
            return 0.0
        vertices = self._vertices
        if override_index is not None and override_position is not None \
                and 0 <= override_index < len(vertices):
            vertices = list(vertices)
            vertices[override_index] = replace(vertices[override_index], position=to_vec(override_position))
        return segment_controls(vertices, index, self._closed).length()

    def length(self) -> float:
        return sum(s.length() for s in self.segments())

    def flatten(self, segments_per_curve: int = 10) -> List[Vec2]:
        """Punkty ścieżki; segmenty krzywe dzielone na segments_per_curve odcinków"""
        points: List[Vec2] = []
        for segment in self.segments():
            part = segment.flatten(segments_per_curve)
            points.extend(part if not points else part[1:])
        if self._closed and len(points) > 1 and points[0].isclose(points[-1]):
            points.pop()
        if not points:
            points = [v.position for v in self._vertices]
        return points

    def signed_area(self) -> float:
        """Pole ze znakiem (wzór Gaussa) po spłaszczeniu; > 0 dla kolejności przeciwnej do zegara"""
        points = self.flatten()
        if len(points) < 3:
            return 0.0
        total = 0.0
        for a, b in zip(points, points[1:] + points[:1]):
            total += a.x * b.y - b.x * a.y
        return total / 2.0

    def point_on_segment(self, index: int, t: float) -> Optional[Vec2]:
        """Punkt na segmencie index przy parametrze t (0-1); None dla złego indeksu"""
        if not 0 <= index < segment_count(len(self._vertices), self._closed):
            return None
        return segment_controls(self._vertices, index, self._closed).point_at(max(0.0, min(1.0, t)))

    def outward_normal(self, index: int, t: float) -> Optional[Vec2]:
        """
        Jednostkowa normalna w punkcie segmentu.

        Dla zamkniętego konturu skierowana na zewnątrz (zależnie od kierunku
        obiegu); dla otwartej polilinii po lewej stronie kierunku ścieżki.
        """
        if not 0 <= index < segment_count(len(self._vertices), self._closed):
            return None
        direction = segment_controls(self._vertices, index, self._closed).tangent_at(max(0.0, min(1.0, t)))
        if direction.is_null:
            return Vec2(0, -1)
        left = Vec2(-direction.y, direction.x).normalize()
        if self._closed and self.signed_area() > 0:
            return -left
        return left

    def find_vertex_at(self, point: PointLike, tolerance: float = VERTEX_TOLERANCE) -> int:
        """Indeks wierzchołka w promieniu tolerancji albo -1"""
        p = to_vec(point)
        for i, vertex in enumerate(self._vertices):
            if vertex.position.distance(p) <= tolerance:
                return i
        return -1

    def find_closest_segment(self, point: PointLike) -> Tuple[int, Vec2]:
        """
        Najbliższy segment i punkt na nim.

        Returns:
            (index, closest_point); index == -1 przy mniej niż 2 wierzchołkach
        """
        p = to_vec(point)
        best_index = -1
        best_point = p
        best_distance = float("inf")
        for i, segment in enumerate(self.segments()):
            candidate = segment.closest_point(p)
            distance = candidate.distance(p)
            if distance < best_distance:
                best_index = i
                best_point = candidate
                best_distance = distance
        return best_index, best_point

    # ========== Kontrakt geometrii ==========

    def bounding_rect(self) -> Rect:
        segments = self.segments()
        if not segments:
            return Rect.from_points(v.position for v in self._vertices)
        rect = segments[0].bounds()
        for segment in segments[1:]:
            rect = rect.united(segment.bounds())
        return rect

    def contains(self, point: PointLike) -> bool:
        return any(s.distance_to(point) <= self.HIT_TOLERANCE for s in self.segments())

    def translate(self, delta: PointLike) -> None:
        delta = to_vec(delta)
        for vertex in self._vertices:
            vertex.position += delta
        self._notify_changed()

    def rotate(self, angle_degrees: float, center: PointLike = (0.0, 0.0)) -> None:
        for vertex in self._vertices:
            vertex.position = rotate_point(vertex.position, angle_degrees, center)
            if not vertex.tangent.is_null:
                vertex.tangent = rotate_vector(vertex.tangent, angle_degrees)
        self._notify_changed()

    def mirror(self, axis_point1: PointLike, axis_point2: PointLike) -> None:
        if is_degenerate_axis(axis_point1, axis_point2):
            return
        for vertex in self._vertices:
            vertex.position = mirror_point(vertex.position, axis_point1, axis_point2)
            if not vertex.tangent.is_null:
                vertex.tangent = mirror_vector(vertex.tangent, axis_point1, axis_point2)
        self._notify_changed()

    def scale(self, sx: float, sy: float, origin: PointLike = (0.0, 0.0)) -> None:
        for vertex in self._vertices:
            vertex.position = scale_point(vertex.position, sx, sy, origin)
            vertex.tangent = scale_vector(vertex.tangent, sx, sy)
        self._notify_changed()


__all__ = [
    'VertexType',
    'PolylineVertex',
    'PathSegment',
    'segment_controls',
    'segment_count',
    'build_segments',
    'Polyline',
]
