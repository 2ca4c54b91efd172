"""
PatternCAD - Format natywny (JSON)
==================================
Zapis i odczyt dokumentu: warstwy, aktywna warstwa i obiekty.

Struktura pliku:
    {
        "version": 1,
        "type": "document",
        "name": "...",
        "layers": [{"name": ..., "color": "#rrggbb", "visible": true}],
        "activeLayer": "Default",
        "objects": [{"id", "name", "type", "layer", "visible", "locked", "data"}]
    }
"""

import json
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from config.settings import (
    DEFAULT_DOCUMENT_NAME,
    DEFAULT_LAYER,
    DEFAULT_LAYER_COLOR,
    NATIVE_EXTENSIONS,
    NATIVE_FORMAT_VERSION,
    NOTCH_DEPTH,
    SEAM_ALLOWANCE_WIDTH,
)
from core.exceptions import InvalidFileContentError, InvalidGeometryError, UnsupportedVersionError
from core.file_format import FileFormat, FormatCapability, FormatType
from geometry import (
    Circle,
    ContourAttachment,
    CornerType,
    CubicBezier,
    GeometryObject,
    Line,
    MatchPoint,
    Notch,
    NotchStyle,
    ObjectType,
    Point2D,
    Polyline,
    PolylineVertex,
    Rectangle,
    SeamAllowance,
    VertexType,
)

if TYPE_CHECKING:
    from core.document import Document

logger = logging.getLogger(__name__)


# ============================================================
# Serializacja obiektów
# ============================================================

def _point_data(obj: Point2D) -> dict:
    return {"x": obj.x, "y": obj.y}


def _line_data(obj: Line) -> dict:
    return {"x1": obj.start.x, "y1": obj.start.y, "x2": obj.end.x, "y2": obj.end.y}


def _circle_data(obj: Circle) -> dict:
    return {"cx": obj.center.x, "cy": obj.center.y, "radius": obj.radius}


def _rectangle_data(obj: Rectangle) -> dict:
    return {"x": obj.top_left.x, "y": obj.top_left.y, "width": obj.width, "height": obj.height}


def _bezier_data(obj: CubicBezier) -> dict:
    p0, p1, p2, p3 = obj.control_points()
    return {
        "p0": [p0.x, p0.y],
        "p1": [p1.x, p1.y],
        "p2": [p2.x, p2.y],
        "p3": [p3.x, p3.y],
    }


def _polyline_data(obj: Polyline) -> dict:
    return {
        "vertices": [
            {
                "x": v.position.x,
                "y": v.position.y,
                "type": v.vertex_type.value,
                "incomingTension": v.incoming_tension,
                "outgoingTension": v.outgoing_tension,
                "tangent_x": v.tangent.x,
                "tangent_y": v.tangent.y,
            }
            for v in obj.vertices
        ],
        "closed": obj.closed,
    }


def _seam_allowance_data(obj: SeamAllowance) -> dict:
    return {
        "sourceId": obj.source_id,
        "width": obj.width,
        "cornerType": obj.corner_type.value,
        "enabled": obj.enabled,
        "ranges": [
            {
                "start": r.start_vertex,
                "end": r.end_vertex,
                "width": r.width,
                "fullContour": r.full_contour,
            }
            for r in obj.ranges
        ],
    }


def _notch_data(obj: Notch) -> dict:
    return {
        "sourceId": obj.source_id,
        "segmentIndex": obj.segment_index,
        "position": obj.position,
        "style": obj.style.value,
        "depth": obj.depth,
    }


def _match_point_data(obj: MatchPoint) -> dict:
    return {
        "sourceId": obj.source_id,
        "label": obj.label,
        "x": obj.absolute_position.x,
        "y": obj.absolute_position.y,
        "onEdge": obj.on_edge,
        "segmentIndex": obj.segment_index,
        "segmentPosition": obj.segment_position,
        "linkedIds": [other.id for other in obj.linked_points],
    }


SERIALIZERS: Dict[ObjectType, Callable[[Any], dict]] = {
    ObjectType.POINT: _point_data,
    ObjectType.LINE: _line_data,
    ObjectType.CIRCLE: _circle_data,
    ObjectType.RECTANGLE: _rectangle_data,
    ObjectType.CUBIC_BEZIER: _bezier_data,
    ObjectType.POLYLINE: _polyline_data,
    ObjectType.SEAM_ALLOWANCE: _seam_allowance_data,
    ObjectType.NOTCH: _notch_data,
    ObjectType.MATCH_POINT: _match_point_data,
}


def serialize_object(obj: GeometryObject) -> dict:
    result = {
        "id": obj.id,
        "name": obj.name,
        "type": obj.type_name,
        "layer": obj.layer,
        "visible": obj.visible,
        "locked": obj.locked,
    }
    serializer = SERIALIZERS.get(obj.object_type)
    if serializer is not None:
        result["data"] = serializer(obj)
    return result


# ============================================================
# Deserializacja obiektów
# ============================================================

def _vertex_from_dict(data: dict) -> PolylineVertex:
    # Stary zapis: jedno "tension" dla obu stron
    if "incomingTension" in data:
        incoming = float(data.get("incomingTension", 0.5))
        outgoing = float(data.get("outgoingTension", 0.5))
    else:
        incoming = outgoing = float(data.get("tension", 0.5))

    vertex_type = VertexType.SMOOTH if data.get("type", "sharp") == "smooth" else VertexType.SHARP
    return PolylineVertex(
        position=(float(data["x"]), float(data["y"])),
        vertex_type=vertex_type,
        tangent=(float(data.get("tangent_x", 0.0)), float(data.get("tangent_y", 0.0))),
        incoming_tension=incoming,
        outgoing_tension=outgoing,
    )


def _make_point(data: dict, **kw) -> Point2D:
    return Point2D((data["x"], data["y"]), **kw)


def _make_line(data: dict, **kw) -> Line:
    return Line((data["x1"], data["y1"]), (data["x2"], data["y2"]), **kw)


def _make_circle(data: dict, **kw) -> Circle:
    return Circle((data["cx"], data["cy"]), data["radius"], **kw)


def _make_rectangle(data: dict, **kw) -> Rectangle:
    return Rectangle((data["x"], data["y"]), data["width"], data["height"], **kw)


def _make_bezier(data: dict, **kw) -> CubicBezier:
    return CubicBezier(data["p0"], data["p1"], data["p2"], data["p3"], **kw)


def _make_polyline(data: dict, **kw) -> Polyline:
    vertices = [_vertex_from_dict(v) for v in data.get("vertices", [])]
    return Polyline(vertices, closed=bool(data.get("closed", False)), **kw)


def _make_seam_allowance(data: dict, **kw) -> SeamAllowance:
    seam = SeamAllowance(
        width=float(data.get("width", SEAM_ALLOWANCE_WIDTH)),
        corner_type=CornerType(data.get("cornerType", CornerType.ROUND.value)),
        **kw
    )
    seam.enabled = bool(data.get("enabled", True))
    for r in data.get("ranges", []):
        if r.get("fullContour", False):
            seam.add_full_contour(float(r["width"]))
        else:
            seam.add_range(int(r["start"]), int(r["end"]), float(r["width"]))
    return seam


# Stary zapis stylu nacięcia: liczba 0-2
NOTCH_STYLE_CODES = {0: NotchStyle.V_NOTCH, 1: NotchStyle.SLIT, 2: NotchStyle.DOT}


def _make_notch(data: dict, **kw) -> Notch:
    style = data.get("style", NotchStyle.V_NOTCH.value)
    style = NOTCH_STYLE_CODES[style] if isinstance(style, int) else NotchStyle(style)
    return Notch(
        segment_index=int(data.get("segmentIndex", 0)),
        position=float(data.get("position", 0.5)),
        style=style,
        depth=float(data.get("depth", NOTCH_DEPTH)),
        **kw
    )


def _make_match_point(data: dict, **kw) -> MatchPoint:
    return MatchPoint(
        label=str(data.get("label", "A")),
        position=(float(data.get("x", 0.0)), float(data.get("y", 0.0))),
        segment_index=int(data.get("segmentIndex", 0)),
        segment_position=float(data.get("segmentPosition", 0.5)),
        on_edge=bool(data.get("onEdge", False)),
        **kw
    )


FACTORIES: Dict[str, Callable[..., GeometryObject]] = {
    ObjectType.POINT.value: _make_point,
    ObjectType.LINE.value: _make_line,
    ObjectType.CIRCLE.value: _make_circle,
    ObjectType.RECTANGLE.value: _make_rectangle,
    ObjectType.CUBIC_BEZIER.value: _make_bezier,
    ObjectType.POLYLINE.value: _make_polyline,
    ObjectType.SEAM_ALLOWANCE.value: _make_seam_allowance,
    ObjectType.NOTCH.value: _make_notch,
    ObjectType.MATCH_POINT.value: _make_match_point,
}


def deserialize_object(data: dict) -> Optional[GeometryObject]:
    """
    Odtwórz obiekt z JSON.

    Returns:
        Obiekt albo None dla nieznanego typu

    Raises:
        InvalidGeometryError: brak wymaganych pól lub błędne wartości
    """
    object_type = data.get("type", "")
    factory = FACTORIES.get(object_type)
    if factory is None:
        logger.warning(f"Native: Unknown object type {object_type!r}, skipping")
        return None

    try:
        obj = factory(
            data.get("data", {}),
            name=data.get("name") or None,
            layer=data.get("layer", DEFAULT_LAYER),
            object_id=data.get("id") or None,
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise InvalidGeometryError(object_type, f"bad data field {e}")

    obj.visible = bool(data.get("visible", True))
    obj.locked = bool(data.get("locked", False))
    return obj


def resolve_references(objects: List[Optional[GeometryObject]], raw_objects: List[dict]) -> None:
    """
    Drugi przebieg odczytu: przypnij obiekty wykroju do konturów
    (data.sourceId) i odtwórz połączenia punktów dopasowania (data.linkedIds).

    Brakujący kontur zostawia obiekt bez źródła (ostrzeżenie w logu).
    """
    by_id = {obj.id: obj for obj in objects if obj is not None}

    for obj, raw in zip(objects, raw_objects):
        if not isinstance(obj, ContourAttachment):
            continue
        data = raw.get("data", {})
        source_id = data.get("sourceId")
        if isinstance(source_id, str) and source_id:
            source = by_id.get(source_id)
            if isinstance(source, Polyline):
                obj.source = source
            else:
                logger.warning(f"Native: {obj.type_name} {obj.id[:8]} references missing contour {source_id!r}")
        if isinstance(obj, MatchPoint):
            linked_ids = data.get("linkedIds", [])
            for linked_id in linked_ids if isinstance(linked_ids, list) else []:
                other = by_id.get(linked_id) if isinstance(linked_id, str) else None
                if isinstance(other, MatchPoint):
                    obj.link_to(other)


# ============================================================
# Format
# ============================================================

class NativeFormat(FileFormat):
    """Natywny format dokumentu PatternCAD (JSON)"""

    format_name = "PatternCAD"
    format_description = "PatternCAD Document"
    file_extensions = [ext.lstrip(".") for ext in NATIVE_EXTENSIONS]
    format_type = FormatType.NATIVE
    capabilities = FormatCapability.IMPORT_EXPORT

    def serialize_document(self, document: 'Document') -> dict:
        return {
            "version": NATIVE_FORMAT_VERSION,
            "type": "document",
            "name": document.name,
            "layers": [
                {
                    "name": layer,
                    "color": document.layer_color(layer),
                    "visible": document.is_layer_visible(layer),
                }
                for layer in document.layers()
            ],
            "activeLayer": document.active_layer,
            "objects": [serialize_object(obj) for obj in document.objects()],
        }

    def deserialize_document(self, data: dict, document: 'Document') -> None:
        if not isinstance(data, dict):
            raise InvalidFileContentError("Top-level JSON value must be an object")

        version = data.get("version", 0)
        if not isinstance(version, int):
            raise InvalidFileContentError(f"Invalid version field: {version!r}")
        if version > NATIVE_FORMAT_VERSION:
            raise UnsupportedVersionError(version, NATIVE_FORMAT_VERSION)

        for key in ("objects", "layers"):
            if not isinstance(data.get(key, []), list):
                raise InvalidFileContentError(f"Field '{key}' must be a list", details={"field": key})

        # Obiekty budowane przed czyszczeniem dokumentu, żeby błąd nie zostawił pustego
        raw_objects = [o for o in data.get("objects", []) if isinstance(o, dict)]
        objects = [deserialize_object(o) for o in raw_objects]
        resolve_references(objects, raw_objects)

        document.clear()
        document.name = data.get("name") or DEFAULT_DOCUMENT_NAME

        for layer in data.get("layers", []):
            if isinstance(layer, dict):
                name = layer.get("name", "")
                color = layer.get("color", DEFAULT_LAYER_COLOR)
                if name == DEFAULT_LAYER:
                    document.set_layer_color(name, color)
                else:
                    document.add_layer(name, color)
                document.set_layer_visible(name, bool(layer.get("visible", True)))
            elif isinstance(layer, str) and layer != DEFAULT_LAYER:
                # Stary zapis: same nazwy warstw
                document.add_layer(layer)

        document.set_active_layer(data.get("activeLayer", DEFAULT_LAYER))

        for obj in objects:
            if obj is None:
                continue
            if not document.has_layer(obj.layer):
                document.add_layer(obj.layer)
            document.add_object_direct(obj)

    def _import(self, filepath: str, document: 'Document') -> None:
        self.report_progress(0)
        with open(filepath, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidFileContentError(f"JSON parse error: {e.msg}", details={"line": e.lineno})
            except UnicodeDecodeError as e:
                raise InvalidFileContentError(
                    f"File is not valid UTF-8: {e.reason}", details={"position": e.start}
                )
        self.report_progress(30)
        self.deserialize_document(data, document)

    def _export(self, filepath: str, document: 'Document') -> None:
        self.report_progress(0)
        data = self.serialize_document(document)
        self.report_progress(50)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=4, ensure_ascii=False)
        self.report_progress(100)
