"""
Testy formatu natywnego (JSON)
"""

import json

import pytest

from core import Document, NativeFormat
from core.native_format import deserialize_object, serialize_object
from core.exceptions import InvalidGeometryError
from geometry import (
    Circle,
    CubicBezier,
    Line,
    Point2D,
    Polyline,
    PolylineVertex,
    Rectangle,
    VertexType,
)


def xy(v):
    return (v.x, v.y)


def write_json(tmp_path, data, name="doc.pcad"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


@pytest.fixture
def source():
    doc = Document("shirt")
    doc.add_layer("Cut", "#ff0000")
    doc.add_layer("Notes", "#00ff00")
    doc.set_layer_visible("Notes", False)
    doc.set_active_layer("Cut")

    doc.add_object_direct(Point2D((1, 2), name="marker", layer="Notes"))
    doc.add_object_direct(Line((0, 0), (10, 5), layer="Cut"))
    doc.add_object_direct(Circle((3, 4), 5))
    doc.add_object_direct(Rectangle((-1, -2), 30, 40, layer="Cut"))
    doc.add_object_direct(CubicBezier((0, 0), (1, 2), (3, 2), (4, 0)))
    doc.add_object_direct(Polyline(
        [
            PolylineVertex((0, 0)),
            PolylineVertex((10, 0), VertexType.SMOOTH, (1, 0.5), 0.25, 0.75),
            PolylineVertex((10, 10)),
        ],
        closed=False,
        layer="Cut",
    ))
    locked = Line((5, 5), (6, 6))
    locked.locked = True
    locked.visible = False
    doc.add_object_direct(locked)
    return doc


@pytest.fixture
def loaded(source, tmp_path):
    path = str(tmp_path / "shirt.pcad")
    assert NativeFormat().export_file(path, source)
    target = Document()
    assert NativeFormat().import_file(path, target)
    return target


# ============================================================
# Zapis -> odczyt
# ============================================================

def test_document_metadata(loaded):
    assert loaded.name == "shirt"
    assert loaded.layers() == ["Default", "Cut", "Notes"]
    assert loaded.active_layer == "Cut"
    assert loaded.layer_color("Cut") == "#ff0000"
    assert not loaded.is_layer_visible("Notes")


def test_objects_keep_identity_and_layers(source, loaded):
    before = [(o.id, o.type_name, o.layer, o.name) for o in source.objects()]
    after = [(o.id, o.type_name, o.layer, o.name) for o in loaded.objects()]
    assert after == before


def test_flags_preserved(loaded):
    last = loaded.objects()[-1]
    assert last.locked
    assert not last.visible


def test_geometry_preserved(loaded):
    point, line, circle, rect, bezier, poly, _ = loaded.objects()
    assert xy(point.position) == (1.0, 2.0)
    assert xy(line.end) == (10.0, 5.0)
    assert circle.radius == 5.0
    assert (rect.width, rect.height) == (30.0, 40.0)
    assert xy(rect.top_left) == (-1.0, -2.0)
    assert [xy(p) for p in bezier.control_points()] == [(0, 0), (1, 2), (3, 2), (4, 0)]

    assert not poly.closed
    vertex = poly.vertex_at(1)
    assert vertex.is_smooth
    assert xy(vertex.tangent) == (1.0, 0.5)
    assert (vertex.incoming_tension, vertex.outgoing_tension) == (0.25, 0.75)


def test_loaded_objects_notify_document(loaded):
    changes = []
    loaded.events.subscribe_all(changes.append)
    loaded.objects()[0].translate((1, 1))
    assert changes


def test_file_structure(source, tmp_path):
    path = tmp_path / "doc.json"
    assert NativeFormat().export_file(str(path), source)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["version"] == 1
    assert data["type"] == "document"
    assert data["activeLayer"] == "Cut"
    assert {"name": "Notes", "color": "#00ff00", "visible": False} in data["layers"]
    assert data["objects"][1]["data"] == {"x1": 0.0, "y1": 0.0, "x2": 10.0, "y2": 5.0}


# ============================================================
# Błędy i stare pliki
# ============================================================

def test_newer_version_rejected(tmp_path):
    path = write_json(tmp_path, {"version": 2, "objects": []})
    document = Document("keep")
    fmt = NativeFormat()
    assert not fmt.import_file(path, document)
    assert fmt.last_error == "File format version 2 is not supported"
    assert document.name == "keep"


def test_malformed_json(tmp_path):
    path = tmp_path / "broken.pcad"
    path.write_text("{not json", encoding="utf-8")
    fmt = NativeFormat()
    assert not fmt.import_file(str(path), Document())
    assert fmt.last_error.startswith("JSON parse error")


def test_non_object_top_level(tmp_path):
    path = write_json(tmp_path, [1, 2, 3])
    fmt = NativeFormat()
    assert not fmt.import_file(path, Document())
    assert fmt.has_error()


def test_non_utf8_file(tmp_path):
    path = tmp_path / "latin.pcad"
    path.write_bytes(b'{"version": 1, "name": "\xff\xfe"}')
    document = Document("keep")
    fmt = NativeFormat()
    assert not fmt.import_file(str(path), document)
    assert fmt.last_error.startswith("File is not valid UTF-8")
    assert document.name == "keep"


@pytest.mark.parametrize("field", ["objects", "layers"])
def test_field_must_be_list(tmp_path, field):
    path = write_json(tmp_path, {"version": 1, field: 5})
    document = Document("keep")
    document.add_object_direct(Point2D())
    fmt = NativeFormat()
    assert not fmt.import_file(path, document)
    assert fmt.last_error == f"Field '{field}' must be a list"
    assert document.name == "keep"
    assert len(document) == 1


def test_bad_object_data_leaves_document_untouched(tmp_path):
    path = write_json(tmp_path, {
        "version": 1,
        "objects": [{"type": "Line", "data": {"x1": 0}}],
    })
    document = Document()
    document.add_object_direct(Point2D())
    fmt = NativeFormat()
    assert not fmt.import_file(path, document)
    assert fmt.last_error.startswith("Invalid Line")
    assert len(document) == 1


def test_legacy_file(tmp_path):
    """Warstwy jako nazwy, jedno 'tension', brak 'closed'"""
    path = write_json(tmp_path, {
        "version": 1,
        "name": "old",
        "layers": ["Default", "Cut"],
        "objects": [
            {"type": "Polyline", "layer": "Cut", "data": {"vertices": [
                {"x": 0, "y": 0, "type": "smooth", "tension": 0.3},
                {"x": 5, "y": 0},
                {"x": 5, "y": 5},
            ]}},
            {"type": "Spline", "data": {}},
            {"type": "Point", "layer": "Extra", "data": {"x": 1, "y": 1}},
        ],
    })
    document = Document()
    assert NativeFormat().import_file(path, document)

    poly, point = document.objects()
    assert not poly.closed
    assert poly.layer == "Cut"
    vertex = poly.vertex_at(0)
    assert (vertex.incoming_tension, vertex.outgoing_tension) == (0.3, 0.3)
    assert document.has_layer("Extra")
    assert point.layer == "Extra"


def test_document_save_and_load(source, tmp_path):
    path = str(tmp_path / "saved.pcad")
    source.add_object(Point2D((9, 9)))
    assert source.save(path)
    assert not source.is_modified()

    other = Document()
    other.add_object(Point2D())
    assert other.load(path)
    assert not other.can_undo()
    assert not other.is_modified()
    assert len(other) == len(source)


# ============================================================
# Obiekty pojedynczo
# ============================================================

def test_object_round_trip_keeps_id():
    circle = Circle((1, 1), 2, name="hole", layer="Cut")
    copy = deserialize_object(serialize_object(circle))
    assert copy.id == circle.id
    assert copy.name == "hole"
    assert copy.layer == "Cut"


def test_unknown_type_returns_none():
    assert deserialize_object({"type": "Hyperbola", "data": {}}) is None


def test_missing_fields_raise():
    with pytest.raises(InvalidGeometryError):
        deserialize_object({"type": "Circle", "data": {"cx": 1}})
