"""
PatternCAD Geometry
===================
Model obiektów geometrii i matematyka krzywych.

Główne komponenty:
- GeometryObject: kontrakt wszystkich kształtów
- Point2D, Line, Circle, Rectangle, CubicBezier, Polyline
- SeamAllowance, Notch, MatchPoint: obiekty wykroju przypięte do konturu
- transform: obrót / odbicie / skalowanie punktów i wektorów
- segment_controls: kanoniczna budowa segmentów polilinii

Użycie:
    from geometry import Polyline, PolylineVertex, VertexType

    poly = Polyline([PolylineVertex((0, 0)), PolylineVertex((10, 0), VertexType.SMOOTH),
                     PolylineVertex((10, 10))], closed=False)
    print(f"Długość: {poly.length():.2f}")
"""

from .base import (
    ObjectType,
    LineStyle,
    Rect,
    GeometryObject,
)

from .transform import (
    rotate_point,
    rotate_vector,
    mirror_point,
    mirror_vector,
    scale_point,
    scale_vector,
    is_degenerate_axis,
)

from .point import Point2D
from .line import Line
from .circle import Circle
from .rectangle import Rectangle

from .bezier import (
    CubicBezier,
    bezier_point,
    bezier_derivative,
    bezier_length,
    bezier_bounds,
)

from .polyline import (
    VertexType,
    PolylineVertex,
    PathSegment,
    Polyline,
    segment_controls,
    build_segments,
)

# Wykroje: obiekty przypięte do konturu
from .attachment import ContourAttachment
from .seam_allowance import CornerType, SeamRange, SeamAllowance
from .notch import NotchStyle, Notch
from .match_point import MatchPoint


__all__ = [
    # Base
    'ObjectType',
    'LineStyle',
    'Rect',
    'GeometryObject',

    # Transform
    'rotate_point',
    'rotate_vector',
    'mirror_point',
    'mirror_vector',
    'scale_point',
    'scale_vector',
    'is_degenerate_axis',

    # Shapes
    'Point2D',
    'Line',
    'Circle',
    'Rectangle',
    'CubicBezier',
    'Polyline',

    # Curves
    'bezier_point',
    'bezier_derivative',
    'bezier_length',
    'bezier_bounds',
    'VertexType',
    'PolylineVertex',
    'PathSegment',
    'segment_controls',
    'build_segments',

    # Pattern
    'ContourAttachment',
    'CornerType',
    'SeamRange',
    'SeamAllowance',
    'NotchStyle',
    'Notch',
    'MatchPoint',
]
