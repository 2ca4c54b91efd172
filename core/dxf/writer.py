"""
DXF Writer - Eksport dokumentu do DXF przez ezdxf
=================================================
Mapowanie obiektów:
- Line -> LINE, Circle -> CIRCLE, Point2D -> POINT
- Rectangle -> zamknięta LWPOLYLINE (4 wierzchołki)
- CubicBezier -> LWPOLYLINE z próbek krzywej
- Polyline -> LWPOLYLINE; segmenty krzywe spłaszczone tą samą
  konstrukcją segmentów co na ekranie
Obiekty niewidoczne są pomijane.
"""

import logging
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

import ezdxf
from ezdxf import units
from ezdxf.document import Drawing
from ezdxf.layouts import Modelspace
from ezdxf.lldxf.const import DXFError

from config.settings import DXF_BEZIER_SEGMENTS, DXF_CURVE_SEGMENTS, DXF_EXPORT_VERSION
from core.exceptions import ExportError
from geometry import (
    Circle, CubicBezier, GeometryObject, Line, MatchPoint, Notch, NotchStyle, ObjectType,
    Point2D, Polyline, Rectangle, SeamAllowance
)

if TYPE_CHECKING:
    from core.document import Document

logger = logging.getLogger(__name__)

# Kolory podstawowe -> indeks ACI
ACI_COLORS = {
    "#ff0000": 1,
    "#ffff00": 2,
    "#00ff00": 3,
    "#00ffff": 4,
    "#0000ff": 5,
    "#ff00ff": 6,
}
DEFAULT_ACI = 7


def hex_to_rgb(color: str) -> Optional[Tuple[int, int, int]]:
    """'#rrggbb' -> (r, g, b); niepoprawny zapis => None"""
    text = color.strip().lstrip("#")
    if len(text) != 6:
        return None
    try:
        return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)
    except ValueError:
        return None


class DXFWriter:
    """
    Buduje rysunek ezdxf z dokumentu.

    Args:
        dxf_version: Wersja DXF (np. "R2010")
        curve_segments: Odcinki na segment krzywej polilinii
        bezier_segments: Odcinki na krzywą Béziera
    """

    def __init__(
        self,
        dxf_version: str = DXF_EXPORT_VERSION,
        curve_segments: int = DXF_CURVE_SEGMENTS,
        bezier_segments: int = DXF_BEZIER_SEGMENTS
    ):
        self.dxf_version = dxf_version
        self.curve_segments = curve_segments
        self.bezier_segments = bezier_segments

        self._writers: Dict[ObjectType, Callable[[Modelspace, GeometryObject, dict], None]] = {
            ObjectType.LINE: self._write_line,
            ObjectType.CIRCLE: self._write_circle,
            ObjectType.POINT: self._write_point,
            ObjectType.RECTANGLE: self._write_rectangle,
            ObjectType.CUBIC_BEZIER: self._write_bezier,
            ObjectType.POLYLINE: self._write_polyline,
            ObjectType.POLYGON: self._write_polyline,
            ObjectType.SEAM_ALLOWANCE: self._write_seam_allowance,
            ObjectType.NOTCH: self._write_notch,
            ObjectType.MATCH_POINT: self._write_match_point,
        }

    def build(self, document: 'Document') -> Drawing:
        """Utwórz Drawing ezdxf z widocznych obiektów dokumentu"""
        try:
            doc = ezdxf.new(self.dxf_version, setup=False)
            doc.units = units.MM
            doc.header["$MEASUREMENT"] = 1

            objects = document.objects()
            for layer_name in dict.fromkeys(obj.layer for obj in objects):
                self._add_layer(doc, layer_name, document.layer_color(layer_name))

            msp = doc.modelspace()
            written = 0
            for obj in objects:
                if not obj.visible:
                    continue
                writer = self._writers.get(obj.object_type)
                if writer is None:
                    logger.warning(f"DXF export: {obj.type_name} not supported, skipping")
                    continue
                writer(msp, obj, {"layer": obj.layer})
                written += 1
        except DXFError as e:
            raise ExportError(f"Cannot build DXF document: {e}", details={"version": self.dxf_version})

        logger.debug(f"DXF export: {written} entities")
        return doc

    def write(self, filepath: str, document: 'Document') -> Drawing:
        doc = self.build(document)
        doc.saveas(filepath)
        return doc

    def _add_layer(self, doc: Drawing, name: str, color: str) -> None:
        if name in doc.layers:
            return
        layer = doc.layers.add(name, color=ACI_COLORS.get(color.lower(), DEFAULT_ACI))
        rgb = hex_to_rgb(color)
        # Czarny zostaje jako ACI 7 (czarny/biały zależnie od tła)
        if color.lower() not in ACI_COLORS and rgb not in (None, (0, 0, 0)):
            layer.rgb = rgb

    # ========== Writers ==========

    def _write_line(self, msp: Modelspace, obj: Line, attribs: dict) -> None:
        msp.add_line(tuple(obj.start), tuple(obj.end), dxfattribs=attribs)

    def _write_circle(self, msp: Modelspace, obj: Circle, attribs: dict) -> None:
        msp.add_circle(tuple(obj.center), obj.radius, dxfattribs=attribs)

    def _write_point(self, msp: Modelspace, obj: Point2D, attribs: dict) -> None:
        msp.add_point(tuple(obj.position), dxfattribs=attribs)

    def _write_rectangle(self, msp: Modelspace, obj: Rectangle, attribs: dict) -> None:
        points = [tuple(c) for c in obj.corners()]
        msp.add_lwpolyline(points, format="xy", close=True, dxfattribs=attribs)

    def _write_bezier(self, msp: Modelspace, obj: CubicBezier, attribs: dict) -> None:
        points = [tuple(p) for p in obj.sample(self.bezier_segments)]
        msp.add_lwpolyline(points, format="xy", close=False, dxfattribs=attribs)

    def _write_polyline(self, msp: Modelspace, obj: Polyline, attribs: dict) -> None:
        points = [tuple(p) for p in obj.flatten(self.curve_segments)]
        if len(points) < 2:
            logger.debug(f"DXF export: polyline {obj.name!r} has < 2 points, skipping")
            return
        msp.add_lwpolyline(points, format="xy", close=obj.closed, dxfattribs=attribs)

    def _write_seam_allowance(self, msp: Modelspace, obj: SeamAllowance, attribs: dict) -> None:
        for points, closed in obj.offset_paths():
            if len(points) >= 2:
                msp.add_lwpolyline([tuple(p) for p in points], format="xy", close=closed, dxfattribs=attribs)

    def _write_notch(self, msp: Modelspace, obj: Notch, attribs: dict) -> None:
        if obj.style == NotchStyle.DOT:
            msp.add_circle(tuple(obj.location()), obj.dot_radius(), dxfattribs=attribs)
            return
        points = [tuple(p) for p in obj.marker_points()]
        msp.add_lwpolyline(points, format="xy", close=False, dxfattribs=attribs)

    def _write_match_point(self, msp: Modelspace, obj: MatchPoint, attribs: dict) -> None:
        msp.add_point(tuple(obj.position), dxfattribs=attribs)


__all__ = [
    'DXFWriter',
    'hex_to_rgb',
]
