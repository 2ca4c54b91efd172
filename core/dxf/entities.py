"""
DXF Entities - Rekordy surowego strumienia DXF
==============================================
Struktury danych parsera: entity jako multimapa kod grupy -> wartości,
definicje bloków i wynik parsowania.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class EntityType(Enum):
    """Znane wartości kodu 0"""
    LINE = "LINE"
    CIRCLE = "CIRCLE"
    ARC = "ARC"
    POINT = "POINT"
    LWPOLYLINE = "LWPOLYLINE"
    POLYLINE = "POLYLINE"
    VERTEX = "VERTEX"
    SEQEND = "SEQEND"
    INSERT = "INSERT"  # Block reference


class Marker(Enum):
    """Znaczniki struktury pliku (kod 0)"""
    SECTION = "SECTION"
    ENDSEC = "ENDSEC"
    BLOCK = "BLOCK"
    ENDBLK = "ENDBLK"
    EOF = "EOF"


class ParserState(Enum):
    OUTSIDE = "outside"
    IN_ENTITIES = "entities"
    IN_BLOCKS = "blocks"


class GroupCode:
    """Kody grup używane przy imporcie"""
    STRUCTURE = 0
    NAME = 2
    LAYER = 8
    X = 10
    Y = 20
    X2 = 11
    Y2 = 21
    RADIUS = 40
    START_ANGLE = 50
    END_ANGLE = 51
    FLAGS = 70


# Sekcje, w których parser zbiera entities
SECTION_STATES = {
    "ENTITIES": ParserState.IN_ENTITIES,
    "BLOCKS": ParserState.IN_BLOCKS,
}


@dataclass
class DXFEntity:
    """
    Pojedyncza entity DXF w postaci surowej.

    attributes: kod grupy -> lista wartości w kolejności wystąpienia
    (kody 10/20 w LWPOLYLINE powtarzają się dla każdego wierzchołka).
    """
    entity_type: str
    layer: str = ""
    attributes: Dict[int, List[str]] = field(default_factory=dict)
    line_number: int = 0

    def add(self, code: int, value: str) -> None:
        self.attributes.setdefault(code, []).append(value)
        if code == GroupCode.LAYER:
            self.layer = value

    def values(self, code: int) -> List[str]:
        return list(self.attributes.get(code, []))

    def get_string(self, code: int, default: str = "") -> str:
        values = self.attributes.get(code)
        return values[0] if values else default

    def get_float(self, code: int, default: float = 0.0) -> float:
        """Pierwsza wartość kodu jako float; nieparsowalna => 0.0"""
        values = self.attributes.get(code)
        if not values:
            return default
        return parse_float(values[0], code)

    def get_floats(self, code: int) -> List[float]:
        return [parse_float(v, code) for v in self.attributes.get(code, [])]

    def get_int(self, code: int, default: int = 0) -> int:
        values = self.attributes.get(code)
        if not values:
            return default
        try:
            return int(values[0])
        except ValueError:
            logger.debug(f"Invalid integer for code {code}: {values[0]!r}")
            return 0


def parse_float(value: str, code: int = None) -> float:
    try:
        return float(value)
    except ValueError:
        logger.debug(f"Invalid number for code {code}: {value!r}, using 0.0")
        return 0.0


@dataclass
class DXFBlock:
    """Definicja bloku (BLOCK ... ENDBLK) - entities tylko zapamiętane"""
    name: str
    base_point: Tuple[float, float] = (0.0, 0.0)
    entities: List[DXFEntity] = field(default_factory=list)


@dataclass
class DXFParseResult:
    """Podsumowanie jednego przebiegu parsera"""
    objects_created: int = 0
    entity_counts: Counter = field(default_factory=Counter)
    skipped: Counter = field(default_factory=Counter)
    blocks: Dict[str, DXFBlock] = field(default_factory=dict)
    layers: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    reached_eof: bool = False

    def block(self, name: str) -> Optional[DXFBlock]:
        return self.blocks.get(name)

    def summary(self) -> str:
        return (
            f"{self.objects_created} objects, "
            f"{len(self.blocks)} blocks, "
            f"{sum(self.skipped.values())} skipped"
        )


__all__ = [
    'EntityType',
    'Marker',
    'ParserState',
    'GroupCode',
    'SECTION_STATES',
    'DXFEntity',
    'DXFBlock',
    'DXFParseResult',
    'parse_float',
]
