"""
Testy importu DXF (DXFReader, konwertery, DXFFormat)

Pliki budowane z par (kod, wartość) w conftest.build_dxf.
"""

import pytest

from core import DXFFormat, DXFParseError
from core.dxf import DXFEntity, DXFReader, arc_segment_count, arc_to_points
from core.dxf.entities import ParserState
from geometry import Circle, Line, Point2D, Polyline


def xy(v):
    return (v.x, v.y)


def read(document, text, **kwargs):
    return DXFReader(document, **kwargs).parse_string(text)


# ============================================================
# Podstawowe entities
# ============================================================

def test_line_on_layer(document, make_entities_dxf):
    text = make_entities_dxf(
        (0, "LINE"), (8, "Cut"),
        (10, "0"), (20, "0"), (11, "10"), (21, "10"),
    )
    result = read(document, text)

    objects = document.objects()
    assert len(objects) == 1
    line = objects[0]
    assert isinstance(line, Line)
    assert xy(line.start) == (0.0, 0.0)
    assert xy(line.end) == (10.0, 10.0)
    assert line.layer == "Cut"
    assert "Cut" in document.layers()
    assert result.objects_created == 1
    assert result.reached_eof


def test_closed_lwpolyline(document, make_entities_dxf):
    text = make_entities_dxf(
        (0, "LWPOLYLINE"), (8, "Outline"), (90, "3"), (70, "1"),
        (10, "0"), (20, "0"),
        (10, "10"), (20, "0"),
        (10, "10"), (20, "10"),
    )
    read(document, text)

    poly = document.objects()[0]
    assert isinstance(poly, Polyline)
    assert poly.closed
    assert [xy(v.position) for v in poly.vertices] == [(0, 0), (10, 0), (10, 10)]
    assert all(not v.is_smooth for v in poly.vertices)


def test_open_lwpolyline_and_too_short(document, make_entities_dxf):
    text = make_entities_dxf(
        (0, "LWPOLYLINE"), (70, "0"), (10, "0"), (20, "0"), (10, "5"), (20, "5"),
        (0, "LWPOLYLINE"), (10, "1"), (20, "1"),
    )
    result = read(document, text)
    assert len(document) == 1
    assert not document.objects()[0].closed
    assert result.skipped["LWPOLYLINE"] == 1


def test_circle_and_point(document, make_entities_dxf):
    text = make_entities_dxf(
        (0, "CIRCLE"), (8, "0"), (10, "5"), (20, "6"), (40, "2.5"),
        (0, "POINT"), (8, "0"), (10, "1.5"), (20, "-2"),
    )
    read(document, text)
    circle, point = document.objects()
    assert isinstance(circle, Circle)
    assert xy(circle.center) == (5.0, 6.0)
    assert circle.radius == 2.5
    assert isinstance(point, Point2D)
    assert xy(point.position) == (1.5, -2.0)


def test_missing_layer_uses_import_layer(document, make_entities_dxf):
    text = make_entities_dxf((0, "POINT"), (10, "1"), (20, "1"))
    read(document, text)
    assert document.objects()[0].layer == "Imported"
    assert document.has_layer("Imported")


def test_import_does_not_create_undo_entries(document, make_entities_dxf):
    text = make_entities_dxf((0, "POINT"), (10, "1"), (20, "1"))
    read(document, text)
    assert not document.can_undo()


def test_invalid_number_reads_as_zero(document, make_entities_dxf):
    text = make_entities_dxf(
        (0, "LINE"), (10, "abc"), (20, "2"), (11, "3"), (21, "4"),
    )
    read(document, text)
    assert xy(document.objects()[0].start) == (0.0, 2.0)


def test_whitespace_around_codes_and_values(document, make_dxf):
    text = make_dxf(
        ("  0", "SECTION  "), (" 2", " ENTITIES"),
        ("  0", "POINT"), (" 10", "  7.0"), (" 20", "8.0 "),
        ("  0", "ENDSEC"), ("  0", "EOF"),
    )
    read(document, text)
    assert xy(document.objects()[0].position) == (7.0, 8.0)


# ============================================================
# ARC
# ============================================================

def test_arc_segment_count():
    assert arc_segment_count(0, 30) == 8
    assert arc_segment_count(0, 90) == 9
    assert arc_segment_count(0, 360) == 36


def test_arc_points_span_start_to_end():
    points = arc_to_points(0, 0, 10, 0, 90)
    assert len(points) == 10
    assert xy(points[0]) == pytest.approx((10.0, 0.0))
    assert xy(points[-1]) == pytest.approx((0.0, 10.0), abs=1e-9)
    for p in points:
        assert p.magnitude == pytest.approx(10.0)


def test_arc_becomes_open_polyline(document, make_entities_dxf):
    text = make_entities_dxf(
        (0, "ARC"), (8, "Curve"), (10, "0"), (20, "0"), (40, "10"), (50, "0"), (51, "30"),
    )
    read(document, text)
    poly = document.objects()[0]
    assert isinstance(poly, Polyline)
    assert not poly.closed
    assert poly.vertex_count() == 9
    assert poly.layer == "Curve"


# ============================================================
# POLYLINE / VERTEX / SEQEND
# ============================================================

def test_old_style_polyline(document, make_entities_dxf):
    text = make_entities_dxf(
        (0, "POLYLINE"), (8, "L1"), (66, "1"), (70, "1"),
        (0, "VERTEX"), (8, "L1"), (10, "0"), (20, "0"),
        (0, "VERTEX"), (8, "L1"), (10, "4"), (20, "0"),
        (0, "VERTEX"), (8, "L1"), (10, "4"), (20, "3"),
        (0, "SEQEND"),
        (0, "LINE"), (10, "0"), (20, "0"), (11, "1"), (21, "1"),
    )
    result = read(document, text)

    poly, line = document.objects()
    assert isinstance(poly, Polyline)
    assert poly.closed
    assert poly.layer == "L1"
    assert [xy(v.position) for v in poly.vertices] == [(0, 0), (4, 0), (4, 3)]
    assert isinstance(line, Line)
    assert result.entity_counts["VERTEX"] == 0


def test_polyline_without_seqend_is_flushed(document, make_entities_dxf):
    text = make_entities_dxf(
        (0, "POLYLINE"), (70, "0"),
        (0, "VERTEX"), (10, "0"), (20, "0"),
        (0, "VERTEX"), (10, "5"), (20, "5"),
    )
    read(document, text)
    poly = document.objects()[0]
    assert poly.vertex_count() == 2
    assert not poly.closed


# ============================================================
# Sekcje, bloki, pominięte entities
# ============================================================

def test_entities_outside_sections_are_ignored(document, make_dxf):
    text = make_dxf(
        (0, "SECTION"), (2, "HEADER"),
        (9, "$ACADVER"), (1, "AC1015"),
        (0, "ENDSEC"),
        (0, "SECTION"), (2, "TABLES"),
        (0, "TABLE"), (2, "LAYER"),
        (0, "LAYER"), (2, "Cut"),
        (0, "ENDTAB"),
        (0, "ENDSEC"),
        (0, "SECTION"), (2, "ENTITIES"),
        (0, "POINT"), (10, "1"), (20, "1"),
        (0, "ENDSEC"),
        (0, "EOF"),
    )
    result = read(document, text)
    assert len(document) == 1
    assert not document.has_layer("Cut")
    assert result.skipped == {}


def test_blocks_are_captured_not_instantiated(document, make_dxf):
    text = make_dxf(
        (0, "SECTION"), (2, "BLOCKS"),
        (0, "BLOCK"), (8, "0"), (2, "Notch"), (70, "0"), (10, "5"), (20, "6"),
        (0, "LINE"), (10, "0"), (20, "0"), (11, "1"), (21, "0"),
        (0, "CIRCLE"), (10, "0"), (20, "0"), (40, "1"),
        (0, "ENDBLK"),
        (0, "ENDSEC"),
        (0, "SECTION"), (2, "ENTITIES"),
        (0, "INSERT"), (2, "Notch"), (10, "50"), (20, "50"),
        (0, "LINE"), (10, "0"), (20, "0"), (11, "9"), (21, "9"),
        (0, "ENDSEC"),
        (0, "EOF"),
    )
    result = read(document, text)

    assert len(document) == 1
    assert isinstance(document.objects()[0], Line)

    block = result.block("Notch")
    assert block is not None
    assert block.base_point == (5.0, 6.0)
    assert [e.entity_type for e in block.entities] == ["LINE", "CIRCLE"]
    assert result.skipped["INSERT"] == 1


def test_unsupported_entity_is_counted_and_skipped(document, make_entities_dxf):
    text = make_entities_dxf(
        (0, "TEXT"), (1, "Front"), (10, "0"), (20, "0"),
        (0, "POINT"), (10, "1"), (20, "1"),
    )
    result = read(document, text)
    assert len(document) == 1
    assert result.skipped["TEXT"] == 1
    assert result.entity_counts["POINT"] == 1


def test_entity_in_progress_at_eof_is_kept(document, make_dxf):
    """Brak ENDSEC: entity przed EOF trafia do dokumentu"""
    text = make_dxf(
        (0, "SECTION"), (2, "ENTITIES"),
        (0, "POINT"), (10, "3"), (20, "4"),
        (0, "EOF"),
    )
    read(document, text)
    assert len(document) == 1


def test_truncated_stream_finalizes_entity(document, make_dxf):
    text = make_dxf(
        (0, "SECTION"), (2, "ENTITIES"),
        (0, "POINT"), (10, "3"), (20, "4"),
    ) + "0\n"
    reader = DXFReader(document)
    result = reader.parse_string(text)
    assert len(document) == 1
    assert not result.reached_eof
    assert len(result.warnings) == 1
    assert reader.state == ParserState.OUTSIDE


def test_repeated_codes_keep_order():
    entity = DXFEntity("LWPOLYLINE")
    for value in ("1", "2", "3"):
        entity.add(10, value)
    entity.add(8, "Cut")
    assert entity.values(10) == ["1", "2", "3"]
    assert entity.get_floats(10) == [1.0, 2.0, 3.0]
    assert entity.get_float(10) == 1.0
    assert entity.layer == "Cut"
    assert entity.get_string(999, "x") == "x"


# ============================================================
# Kody grup: tryb łagodny / ścisły
# ============================================================

BAD_CODE_PAIRS = (
    (0, "SECTION"), (2, "ENTITIES"),
    (0, "POINT"), (10, "1"), (20, "2"),
    ("xx", "CIRCLE"), (10, "5"), (20, "5"), (40, "3"),
    (0, "ENDSEC"), (0, "EOF"),
)


def test_lenient_mode_treats_bad_code_as_zero(document, make_dxf):
    result = read(document, make_dxf(*BAD_CODE_PAIRS), strict=False)
    kinds = [type(obj) for obj in document.objects()]
    assert kinds == [Point2D, Circle]
    assert len(result.warnings) == 1


def test_strict_mode_rejects_bad_code(document, make_dxf):
    with pytest.raises(DXFParseError) as exc_info:
        read(document, make_dxf(*BAD_CODE_PAIRS), strict=True)
    assert exc_info.value.line_number == 11
    assert exc_info.value.details["value"] == "xx"


def test_strict_mode_rejects_truncated_pair(document, make_dxf):
    text = make_dxf((0, "SECTION"), (2, "ENTITIES"), (0, "POINT"), (10, "1"), (20, "1")) + "0\n"
    with pytest.raises(DXFParseError):
        read(document, text, strict=True)


# ============================================================
# DXFFormat
# ============================================================

def test_format_import_from_file(document, make_entities_dxf, dxf_file):
    path = dxf_file(make_entities_dxf(
        (0, "LINE"), (8, "Cut"), (10, "0"), (20, "0"), (11, "10"), (21, "10"),
    ))
    progress = []
    fmt = DXFFormat(progress_callback=progress.append)

    assert fmt.handles(path)
    assert fmt.import_file(path, document)
    assert not fmt.has_error()
    assert fmt.last_result.objects_created == 1
    assert progress[-1] == 100


def test_format_strict_failure_sets_last_error(document, make_dxf, dxf_file):
    path = dxf_file(make_dxf(*BAD_CODE_PAIRS))
    fmt = DXFFormat(strict=True)
    assert not fmt.import_file(path, document)
    assert "Invalid group code" in fmt.last_error


def test_format_strict_failure_leaves_document_untouched(document, make_dxf, dxf_file):
    path = dxf_file(make_dxf(
        (0, "SECTION"), (2, "ENTITIES"),
        (0, "LINE"), (8, "Cut"), (10, "0"), (20, "0"), (11, "10"), (21, "10"),
        (0, "POINT"), ("XX", "1"),
        (0, "ENDSEC"), (0, "EOF"),
    ))
    fmt = DXFFormat(strict=True)
    assert not fmt.import_file(path, document)
    assert document.objects() == []
    assert document.layers() == ["Default"]


def test_format_missing_file(document, tmp_path):
    fmt = DXFFormat()
    assert not fmt.import_file(str(tmp_path / "missing.dxf"), document)
    assert "missing.dxf" in fmt.last_error


def test_format_custom_fallback_layer(document, make_entities_dxf, dxf_file):
    path = dxf_file(make_entities_dxf((0, "POINT"), (10, "1"), (20, "1")))
    fmt = DXFFormat(fallback_layer="Pattern")
    assert fmt.import_file(path, document)
    assert document.objects()[0].layer == "Pattern"
