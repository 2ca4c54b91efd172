"""
Testy obiektów wykroju: zapas na szew, nacięcia, punkty dopasowania
"""

import ezdxf
import pytest
from ezdxf.math import Vec2

from config import settings
from core import Document, DXFFormat, NativeFormat
from geometry import (
    CornerType,
    MatchPoint,
    Notch,
    NotchStyle,
    Polyline,
    SeamAllowance,
)


def xy(v):
    return (v.x, v.y)


def has_vertex(points, x, y):
    return any(p.isclose(Vec2(x, y), abs_tol=1e-6) for p in points)


@pytest.fixture
def square():
    """Kwadrat 10x10, obieg przeciwny do zegara (pole > 0)"""
    return Polyline.from_points([(0, 0), (10, 0), (10, 10), (0, 10)], closed=True)


@pytest.fixture
def square_cw():
    return Polyline.from_points([(0, 0), (0, 10), (10, 10), (10, 0)], closed=True)


# ============================================================
# Kontur: normalne i punkty na segmentach
# ============================================================

def test_signed_area_follows_winding(square, square_cw):
    assert square.signed_area() == pytest.approx(100.0)
    assert square_cw.signed_area() == pytest.approx(-100.0)


def test_outward_normal_for_both_windings(square, square_cw):
    assert xy(square.outward_normal(0, 0.5)) == pytest.approx((0.0, -1.0))
    assert xy(square.outward_normal(3, 0.5)) == pytest.approx((-1.0, 0.0))
    # CW: krawędź (0,0) -> (0,10), na zewnątrz to x < 0
    assert xy(square_cw.outward_normal(0, 0.5)) == pytest.approx((-1.0, 0.0))


def test_open_polyline_normal_is_left_side():
    poly = Polyline.from_points([(0, 0), (10, 0)], closed=False)
    assert xy(poly.outward_normal(0, 0.3)) == pytest.approx((0.0, 1.0))


def test_point_on_segment_bad_index(square):
    assert xy(square.point_on_segment(1, 0.25)) == pytest.approx((10.0, 2.5))
    assert square.point_on_segment(4, 0.5) is None
    assert square.outward_normal(-1, 0.5) is None


# ============================================================
# Notch
# ============================================================

def test_notch_location_and_v_marker(square):
    notch = Notch(square, segment_index=0, position=0.5, depth=5.0)
    assert xy(notch.location()) == pytest.approx((5.0, 0.0))
    points = [xy(p) for p in notch.marker_points()]
    assert points == [pytest.approx((7.5, 0.0)), pytest.approx((5.0, 5.0)), pytest.approx((2.5, 0.0))]


def test_notch_slit_points_inward(square):
    notch = Notch(square, 3, 0.5, NotchStyle.SLIT, depth=4.0)
    start, end = notch.marker_points()
    assert xy(start) == pytest.approx((0.0, 5.0))
    assert xy(end) == pytest.approx((4.0, 5.0))


def test_notch_dot_bounds(square):
    notch = Notch(square, 0, 0.5, NotchStyle.DOT, depth=2.0)
    assert notch.dot_radius() == Notch.DOT_MIN_RADIUS
    assert notch.bounding_rect().as_tuple() == pytest.approx((3.5, -1.5, 3.0, 3.0))


def test_notch_clamps_position_and_depth(square):
    notch = Notch(square, 0, 1.7, depth=-3.0)
    assert notch.position == 1.0
    assert notch.depth == 0.0
    notch.position = -0.5
    assert notch.position == 0.0


def test_notch_default_depth_from_settings(square):
    assert Notch(square).depth == settings.NOTCH_DEPTH


def test_notch_follows_contour(square):
    notch = Notch(square, 0, 0.5)
    square.translate((10, 0))
    assert xy(notch.location()) == pytest.approx((15.0, 0.0))

    # Odbicie odwraca obieg; normalna dalej na zewnątrz
    square.mirror((0, 0), (0, 1))
    assert xy(notch.location()) == pytest.approx((-15.0, 0.0))
    assert xy(notch.normal()) == pytest.approx((0.0, -1.0))


def test_notch_own_transform_does_nothing(square):
    notch = Notch(square, 0, 0.5)
    notch.translate((5, 5))
    notch.rotate(90)
    assert xy(notch.location()) == pytest.approx((5.0, 0.0))


def test_notch_without_contour():
    notch = Notch()
    assert xy(notch.location()) == (0.0, 0.0)
    assert xy(notch.normal()) == (0.0, -1.0)


def test_notch_bad_segment_index(square):
    notch = Notch(square, segment_index=7)
    assert xy(notch.location()) == (0.0, 0.0)


def test_notch_hit_test(square):
    notch = Notch(square, 0, 0.5)
    assert notch.contains((5, 3))
    assert not notch.contains((5, 20))


def test_notch_change_notifies(square):
    changes = []
    notch = Notch(square)
    notch.bind_change_callback(changes.append)
    notch.style = NotchStyle.SLIT
    notch.style = NotchStyle.SLIT
    assert changes == [notch]


# ============================================================
# MatchPoint
# ============================================================

def test_match_point_absolute_transforms():
    mp = MatchPoint("A", (3, 4))
    mp.translate((1, 1))
    assert xy(mp.position) == pytest.approx((4.0, 5.0))
    mp.scale(2, 2)
    assert xy(mp.position) == pytest.approx((8.0, 10.0))
    mp.mirror((0, 0), (0, 1))
    assert xy(mp.position) == pytest.approx((-8.0, 10.0))


def test_match_point_on_edge_follows_contour(square):
    mp = MatchPoint.on_contour("B", square, 1, 0.25)
    assert mp.on_edge
    assert xy(mp.position) == pytest.approx((10.0, 2.5))

    mp.translate((50, 50))
    square.translate((0, 5))
    assert xy(mp.position) == pytest.approx((10.0, 7.5))


def test_setting_position_switches_to_absolute(square):
    mp = MatchPoint.on_contour("B", square, 1, 0.25)
    mp.position = (1, 1)
    assert not mp.on_edge
    assert xy(mp.position) == (1.0, 1.0)


def test_on_edge_without_contour_uses_absolute():
    mp = MatchPoint("C", (2, 2), on_edge=True)
    assert xy(mp.position) == (2.0, 2.0)


def test_match_point_links_are_mutual():
    a, b, c = MatchPoint("A"), MatchPoint("A"), MatchPoint("B")
    a.link_to(b)
    a.link_to(b)
    a.link_to(a)
    a.link_to(c)
    assert a.linked_points == [b, c]
    assert b.is_linked_to(a)

    a.unlink_from(b)
    assert not b.is_linked_to(a)
    a.unlink_all()
    assert a.linked_points == []
    assert c.linked_points == []


# ============================================================
# SeamAllowance
# ============================================================

def test_seam_full_contour_mitre(square):
    seam = SeamAllowance(square, width=2.0, corner_type=CornerType.MITER)
    points = seam.compute_offset()
    assert has_vertex(points, 12, 12)
    assert has_vertex(points, -2, -2)
    assert seam.bounding_rect().as_tuple() == pytest.approx((-2.0, -2.0, 14.0, 14.0))


def test_seam_corner_types_differ(square):
    rounded = SeamAllowance(square, width=2.0, corner_type=CornerType.ROUND).compute_offset()
    bevel = SeamAllowance(square, width=2.0, corner_type=CornerType.BEVEL).compute_offset()
    assert not has_vertex(rounded, 12, 12)
    assert not has_vertex(bevel, 12, 12)
    assert has_vertex(bevel, 12, 10)
    assert len(rounded) > len(bevel)


def test_seam_default_width_from_settings(square):
    assert SeamAllowance(square).width == settings.SEAM_ALLOWANCE_WIDTH


def test_seam_hit_test(square):
    seam = SeamAllowance(square, width=2.0)
    assert seam.contains((12, 5))
    assert not seam.contains((5, 5))


def test_seam_follows_contour(square):
    seam = SeamAllowance(square, width=2.0, corner_type=CornerType.MITER)
    square.translate((100, 0))
    assert seam.bounding_rect().left == pytest.approx(98.0)


def test_seam_empty_cases(square):
    assert SeamAllowance().compute_offset() == []
    assert SeamAllowance(Polyline.from_points([(0, 0), (5, 0)], closed=False)).compute_offset() == []

    seam = SeamAllowance(square)
    seam.enabled = False
    assert seam.compute_all_offsets() == []
    assert seam.bounding_rect().is_empty()


def test_seam_edge_range_is_outside(square, square_cw):
    seam = SeamAllowance(square)
    seam.add_range(0, 1, 2.0)
    points = seam.compute_offset()
    assert all(p.y == pytest.approx(-2.0) for p in points)
    assert sorted(p.x for p in points) == pytest.approx([0.0, 10.0])

    seam_cw = SeamAllowance(square_cw)
    seam_cw.add_range(0, 1, 2.0)
    assert all(p.x == pytest.approx(-2.0) for p in seam_cw.compute_offset())


def test_seam_range_wraps_on_closed_contour(square):
    seam = SeamAllowance(square)
    seam.add_range(3, 1, 2.0)
    assert seam.is_edge_in_range(3)
    assert seam.is_edge_in_range(0)
    assert not seam.is_edge_in_range(1)


def test_seam_range_open_path_does_not_wrap():
    poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)], closed=False)
    seam = SeamAllowance(poly)
    seam.add_range(2, 0, 2.0)
    assert seam.compute_all_offsets() == []


def test_seam_multiple_ranges(square):
    seam = SeamAllowance(square)
    seam.add_range(0, 1, 2.0)
    seam.add_range(2, 3, 3.0)
    paths = seam.offset_paths()
    assert len(paths) == 2
    assert not any(closed for _, closed in paths)

    assert not seam.remove_range(5)
    assert seam.remove_range(0)
    seam.clear_ranges()
    # Bez zakresów: cały kontur
    assert seam.offset_paths()[0][1]


# ============================================================
# Zapis w formacie natywnym i eksport DXF
# ============================================================

@pytest.fixture
def piece(square):
    doc = Document("piece")
    doc.add_object_direct(square)
    seam = SeamAllowance(square, width=2.0, corner_type=CornerType.BEVEL)
    seam.add_range(0, 2, 3.0)
    doc.add_object_direct(seam)
    doc.add_object_direct(Notch(square, 1, 0.25, NotchStyle.SLIT, depth=4.0))
    a = MatchPoint.on_contour("A", square, 2, 0.5)
    b = MatchPoint("A", (40, 40))
    a.link_to(b)
    doc.add_object_direct(a)
    doc.add_object_direct(b)
    return doc


def test_native_keeps_attachments(piece, tmp_path):
    path = str(tmp_path / "piece.pcad")
    assert NativeFormat().export_file(path, piece)
    loaded = Document()
    assert NativeFormat().import_file(path, loaded)

    contour, seam, notch, a, b = loaded.objects()
    assert seam.source is contour
    assert seam.corner_type == CornerType.BEVEL
    assert [(r.start_vertex, r.end_vertex, r.width) for r in seam.ranges] == [(0, 2, 3.0)]
    assert notch.source is contour
    assert notch.style == NotchStyle.SLIT
    assert xy(notch.location()) == pytest.approx((10.0, 2.5))
    assert a.on_edge and a.source is contour
    assert xy(a.position) == pytest.approx((5.0, 10.0))
    assert a.is_linked_to(b) and b.is_linked_to(a)


def test_native_missing_contour_leaves_attachment_detached(tmp_path):
    path = tmp_path / "orphan.pcad"
    path.write_text(
        '{"version": 1, "objects": [{"type": "Notch", "data": {"sourceId": "gone", "style": 1}}]}',
        encoding="utf-8",
    )
    document = Document()
    assert NativeFormat().import_file(str(path), document)
    notch = document.objects()[0]
    assert notch.source is None
    assert notch.style == NotchStyle.SLIT


def test_native_bad_corner_type(tmp_path):
    path = tmp_path / "bad.pcad"
    path.write_text(
        '{"version": 1, "objects": [{"type": "SeamAllowance", "data": {"cornerType": "zigzag"}}]}',
        encoding="utf-8",
    )
    fmt = NativeFormat()
    assert not fmt.import_file(str(path), Document())
    assert fmt.last_error.startswith("Invalid SeamAllowance")


def test_dxf_export_of_pattern_objects(piece, tmp_path):
    path = str(tmp_path / "piece.dxf")
    assert DXFFormat().export_file(path, piece)
    msp = ezdxf.readfile(path).modelspace()

    polylines = msp.query("LWPOLYLINE")
    # kontur + linia zapasu (otwarta) + nacięcie
    assert len(polylines) == 3
    assert sum(1 for p in polylines if p.closed) == 1
    assert len(msp.query("POINT")) == 2
