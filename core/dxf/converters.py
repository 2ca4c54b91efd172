"""
DXF Entity Converters - Konwersja rekordów DXF na obiekty geometrii
===================================================================
Obsługuje: LINE, CIRCLE, ARC, POINT, LWPOLYLINE, POLYLINE (+VERTEX)
INSERT jest rozpoznawany i pomijany (bloki nie są rozwijane).
"""

import math
import logging
from typing import Callable, Dict, List, Optional, Sequence

from ezdxf.math import Vec2

from config.settings import ARC_DEGREES_PER_SEGMENT, ARC_MIN_SEGMENTS
from geometry import Circle, GeometryObject, Line, Point2D, Polyline, PolylineVertex, VertexType

from .entities import DXFEntity, EntityType, GroupCode

logger = logging.getLogger(__name__)


def arc_segment_count(
    start_angle_deg: float,
    end_angle_deg: float,
    min_segments: int = ARC_MIN_SEGMENTS,
    degrees_per_segment: float = ARC_DEGREES_PER_SEGMENT
) -> int:
    """max(min_segments, |end - start| / degrees_per_segment)"""
    sweep = abs(end_angle_deg - start_angle_deg)
    return max(min_segments, int(sweep / degrees_per_segment))


def arc_to_points(
    center_x: float, center_y: float,
    radius: float,
    start_angle_deg: float, end_angle_deg: float,
    min_segments: int = ARC_MIN_SEGMENTS,
    degrees_per_segment: float = ARC_DEGREES_PER_SEGMENT
) -> List[Vec2]:
    """
    Konwertuj łuk na listę punktów.

    Args:
        center_x, center_y: Środek łuku
        radius: Promień
        start_angle_deg, end_angle_deg: Kąty w stopniach (bez normalizacji)
        min_segments: Minimalna liczba odcinków
        degrees_per_segment: Docelowy kąt jednego odcinka

    Returns:
        segments + 1 punktów od kąta startowego do końcowego
    """
    segments = arc_segment_count(start_angle_deg, end_angle_deg, min_segments, degrees_per_segment)
    points = []
    for i in range(segments + 1):
        t = i / segments
        angle = math.radians(start_angle_deg + t * (end_angle_deg - start_angle_deg))
        points.append(Vec2(
            center_x + radius * math.cos(angle),
            center_y + radius * math.sin(angle)
        ))
    return points


def _sharp_vertices(points: Sequence[Vec2]) -> List[PolylineVertex]:
    return [PolylineVertex(p, VertexType.SHARP) for p in points]


def _closed_flag(entity: DXFEntity) -> bool:
    return bool(entity.get_int(GroupCode.FLAGS) & 1)


def convert_line(entity: DXFEntity) -> Line:
    """Konwertuj LINE entity"""
    start = (entity.get_float(GroupCode.X), entity.get_float(GroupCode.Y))
    end = (entity.get_float(GroupCode.X2), entity.get_float(GroupCode.Y2))
    logger.debug(f"DXF: LINE {start} -> {end} on layer {entity.layer!r}")
    return Line(start, end)


def convert_circle(entity: DXFEntity) -> Circle:
    """Konwertuj CIRCLE entity"""
    center = (entity.get_float(GroupCode.X), entity.get_float(GroupCode.Y))
    return Circle(center, entity.get_float(GroupCode.RADIUS))


def convert_arc(entity: DXFEntity) -> Polyline:
    """Konwertuj ARC entity na otwartą polilinię z wierzchołków SHARP"""
    points = arc_to_points(
        entity.get_float(GroupCode.X),
        entity.get_float(GroupCode.Y),
        entity.get_float(GroupCode.RADIUS),
        entity.get_float(GroupCode.START_ANGLE),
        entity.get_float(GroupCode.END_ANGLE),
    )
    return Polyline(_sharp_vertices(points), closed=False)


def convert_point(entity: DXFEntity) -> Point2D:
    """Konwertuj POINT entity"""
    return Point2D((entity.get_float(GroupCode.X), entity.get_float(GroupCode.Y)))


def convert_lwpolyline(entity: DXFEntity) -> Optional[Polyline]:
    """
    Konwertuj LWPOLYLINE entity.

    X z kolejnych kodów 10, Y z kolejnych kodów 20, parowane po indeksie
    do krótszej listy. Mniej niż 2 wierzchołki => None.
    """
    xs = entity.get_floats(GroupCode.X)
    ys = entity.get_floats(GroupCode.Y)
    points = [Vec2(x, y) for x, y in zip(xs, ys)]

    if len(points) < 2:
        logger.debug(f"DXF: LWPOLYLINE with {len(points)} vertices, skipping")
        return None

    return Polyline(_sharp_vertices(points), closed=_closed_flag(entity))


def convert_polyline(header: DXFEntity, vertices: Sequence[DXFEntity]) -> Optional[Polyline]:
    """
    Konwertuj stary format POLYLINE / VERTEX / SEQEND.

    Flagi (kod 70) i warstwa pochodzą z nagłówka POLYLINE.
    """
    points = [
        Vec2(v.get_float(GroupCode.X), v.get_float(GroupCode.Y))
        for v in vertices
    ]
    if len(points) < 2:
        logger.debug(f"DXF: POLYLINE with {len(points)} vertices, skipping")
        return None

    return Polyline(_sharp_vertices(points), closed=_closed_flag(header))


def _skip_insert(entity: DXFEntity) -> None:
    block_name = entity.get_string(GroupCode.NAME)
    logger.info(f"DXF: Skipping INSERT of block {block_name!r} (block references not supported)")
    return None


# Mapowanie typ DXF -> konwerter
CONVERTERS: Dict[str, Callable[[DXFEntity], Optional[GeometryObject]]] = {
    EntityType.LINE.value: convert_line,
    EntityType.CIRCLE.value: convert_circle,
    EntityType.ARC.value: convert_arc,
    EntityType.POINT.value: convert_point,
    EntityType.LWPOLYLINE.value: convert_lwpolyline,
    EntityType.INSERT.value: _skip_insert,
}


def convert_entity(entity: DXFEntity) -> Optional[GeometryObject]:
    """
    Konwertuj dowolną entity DXF.

    Returns:
        Obiekt geometrii albo None (typ nieobsługiwany lub za mało danych)
    """
    converter = CONVERTERS.get(entity.entity_type)
    if converter is None:
        logger.debug(f"DXF: Unsupported entity type: {entity.entity_type}")
        return None
    return converter(entity)


__all__ = [
    'arc_segment_count',
    'arc_to_points',
    'convert_line',
    'convert_circle',
    'convert_arc',
    'convert_point',
    'convert_lwpolyline',
    'convert_polyline',
    'convert_entity',
    'CONVERTERS',
]
