"""
Geometry Transform - Wspólne przekształcenia punktów i wektorów
===============================================================
Jedyne miejsce z trygonometrią obrotu i odbicia. Klasy geometrii
korzystają wyłącznie z tych funkcji.

Kąty na wejściu zawsze w stopniach.
"""

import math
from typing import Iterable, Sequence, Tuple, Union

from ezdxf.math import Vec2

# Punkt może być Vec2 albo dowolną parą (x, y)
PointLike = Union[Vec2, Sequence[float]]

# Poniżej tej długości oś odbicia uznajemy za zdegenerowaną
AXIS_EPSILON = 1e-10


def to_vec(point: PointLike) -> Vec2:
    """Zamień parę (x, y) na Vec2 (Vec2 zwracany bez zmian)"""
    if isinstance(point, Vec2):
        return point
    return Vec2(point)


def rotate_vector(vector: PointLike, angle_degrees: float) -> Vec2:
    """Obróć wektor swobodny wokół początku układu"""
    v = to_vec(vector)
    rad = math.radians(angle_degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    return Vec2(v.x * cos_a - v.y * sin_a, v.x * sin_a + v.y * cos_a)


def rotate_point(point: PointLike, angle_degrees: float, center: PointLike = (0.0, 0.0)) -> Vec2:
    """
    Obróć punkt wokół środka.

    Przesunięcie do środka, obrót o radians(angle), przesunięcie z powrotem.
    """
    c = to_vec(center)
    return c + rotate_vector(to_vec(point) - c, angle_degrees)


def is_degenerate_axis(axis_point1: PointLike, axis_point2: PointLike) -> bool:
    """True jeśli punkty osi są praktycznie tym samym punktem"""
    return to_vec(axis_point1).distance(to_vec(axis_point2)) < AXIS_EPSILON


def mirror_point(point: PointLike, axis_point1: PointLike, axis_point2: PointLike) -> Vec2:
    """
    Odbij punkt względem nieskończonej prostej przez dwa punkty.

    Punkt rzutowany na oś, następnie odbity przez rzut.
    Zdegenerowana oś => punkt bez zmian.
    """
    p = to_vec(point)
    a1 = to_vec(axis_point1)
    a2 = to_vec(axis_point2)
    if is_degenerate_axis(a1, a2):
        return p

    axis = a2 - a1
    t = (p - a1).dot(axis) / axis.dot(axis)
    projection = a1 + axis * t
    return projection * 2.0 - p


def mirror_vector(vector: PointLike, axis_point1: PointLike, axis_point2: PointLike) -> Vec2:
    """Odbij wektor swobodny (np. styczną) względem kierunku osi"""
    v = to_vec(vector)
    a1 = to_vec(axis_point1)
    a2 = to_vec(axis_point2)
    if is_degenerate_axis(a1, a2):
        return v

    axis = a2 - a1
    along = axis * (v.dot(axis) / axis.dot(axis))
    return along * 2.0 - v


def scale_vector(vector: PointLike, sx: float, sy: float) -> Vec2:
    v = to_vec(vector)
    return Vec2(v.x * sx, v.y * sy)


def scale_point(point: PointLike, sx: float, sy: float, origin: PointLike = (0.0, 0.0)) -> Vec2:
    """Skaluj punkt względem punktu odniesienia"""
    o = to_vec(origin)
    return o + scale_vector(to_vec(point) - o, sx, sy)


def fit_rect(points: Iterable[PointLike]) -> Tuple[float, float, float, float]:
    """
    Najmniejszy prostokąt osiowy obejmujący punkty.

    Returns:
        (x, y, width, height)
    """
    pts = [to_vec(p) for p in points]
    if not pts:
        return 0.0, 0.0, 0.0, 0.0
    min_x = min(p.x for p in pts)
    min_y = min(p.y for p in pts)
    max_x = max(p.x for p in pts)
    max_y = max(p.y for p in pts)
    return min_x, min_y, max_x - min_x, max_y - min_y


__all__ = [
    'PointLike',
    'AXIS_EPSILON',
    'to_vec',
    'rotate_vector',
    'rotate_point',
    'is_degenerate_axis',
    'mirror_point',
    'mirror_vector',
    'scale_vector',
    'scale_point',
    'fit_rect',
]
