"""
DXF Reader - Parser strumienia kodów grup DXF
=============================================
Maszyna stanów czytająca plik ASCII DXF parami (kod, wartość):

    OUTSIDE --SECTION/ENTITIES--> IN_ENTITIES --ENDSEC--> OUTSIDE
    OUTSIDE --SECTION/BLOCKS----> IN_BLOCKS   --ENDSEC--> OUTSIDE

W ENTITIES każda zakończona entity jest konwertowana na obiekt geometrii
i dodawana do dokumentu przez add_object_direct (bez wpisu cofania).
W BLOCKS entities między BLOCK a ENDBLK są tylko zapamiętywane.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple

from config.settings import DXF_ENCODING, DXF_IMPORT_LAYER, DXF_STRICT_GROUP_CODES
from core.exceptions import DXFParseError
from geometry import GeometryObject

from .converters import convert_entity, convert_polyline
from .entities import (
    SECTION_STATES,
    DXFBlock,
    DXFEntity,
    DXFParseResult,
    EntityType,
    GroupCode,
    Marker,
    ParserState,
)

if TYPE_CHECKING:
    from core.document import Document

logger = logging.getLogger(__name__)

# (kod, wartość, numer linii kodu)
GroupPair = Tuple[int, str, int]


class DXFReader:
    """
    Parser DXF zasilający dokument.

    Użycie:
        reader = DXFReader(document)
        result = reader.read_file("pattern.dxf")
        print(result.summary())

    Args:
        document: Dokument docelowy
        strict: True => nienumeryczny kod grupy lub urwana para
                zgłasza DXFParseError zamiast kodu 0
        fallback_layer: Warstwa dla entities bez kodu 8
    """

    def __init__(
        self,
        document: 'Document',
        strict: bool = DXF_STRICT_GROUP_CODES,
        fallback_layer: str = DXF_IMPORT_LAYER
    ):
        self.document = document
        self.strict = strict
        self.fallback_layer = fallback_layer
        self._reset()

    def _reset(self) -> None:
        self._state = ParserState.OUTSIDE
        self._current: Optional[DXFEntity] = None
        self._block: Optional[DXFBlock] = None
        self._polyline: Optional[DXFEntity] = None
        self._vertices: List[DXFEntity] = []
        self._pending: List[GeometryObject] = []
        self._result = DXFParseResult()

    @property
    def state(self) -> ParserState:
        return self._state

    # ========== Wejście ==========

    def read_file(self, filepath: str, encoding: str = DXF_ENCODING) -> DXFParseResult:
        """Parsuj plik DXF (OSError przy braku dostępu)"""
        logger.info(f"DXF: Reading {Path(filepath).name}")
        with open(filepath, "r", encoding=encoding, errors="replace") as f:
            return self.parse(f)

    def parse_string(self, text: str) -> DXFParseResult:
        return self.parse(text.splitlines())

    def iter_pairs(self, lines: Iterable[str]) -> Iterator[GroupPair]:
        """Czytaj linie parami; obie linie obcięte z białych znaków"""
        it = iter(lines)
        line_number = 0
        while True:
            code_line = next(it, None)
            if code_line is None:
                return
            value_line = next(it, None)
            line_number += 2
            code_text = code_line.strip()

            if value_line is None:
                if not code_text:
                    return
                if self.strict:
                    raise DXFParseError(
                        f"Truncated group code pair at line {line_number - 1}",
                        line_number - 1, code_text
                    )
                self._warn(f"Truncated group code pair at line {line_number - 1}, ignoring")
                return

            yield self._parse_code(code_text, line_number - 1), value_line.strip(), line_number - 1

    def _parse_code(self, text: str, line_number: int) -> int:
        try:
            return int(text)
        except ValueError:
            if self.strict:
                raise DXFParseError(
                    f"Invalid group code {text!r} at line {line_number}",
                    line_number, text
                )
            self._warn(f"Invalid group code {text!r} at line {line_number}, treating as 0")
            return GroupCode.STRUCTURE

    def _warn(self, message: str) -> None:
        logger.warning(f"DXF: {message}")
        self._result.warnings.append(message)

    # ========== Maszyna stanów ==========

    def parse(self, lines: Iterable[str]) -> DXFParseResult:
        """
        Parsuj strumień linii DXF.

        Returns:
            DXFParseResult z liczbą obiektów, blokami i pominiętymi typami
        """
        self._reset()
        pairs = self.iter_pairs(lines)

        for code, value, line_number in pairs:
            if code != GroupCode.STRUCTURE:
                if self._current is not None:
                    self._current.add(code, value)
                continue

            if value == Marker.EOF.value:
                self._result.reached_eof = True
                break
            if value == Marker.SECTION.value:
                self._begin_section(pairs)
            elif value == Marker.ENDSEC.value:
                self._end_section()
            elif self._state == ParserState.IN_ENTITIES:
                self._entities_marker(value, line_number)
            elif self._state == ParserState.IN_BLOCKS:
                self._blocks_marker(value, line_number)

        # Entity w toku przy EOF / końcu strumienia
        self._end_section()
        self._commit()

        result = self._result
        logger.info(f"DXF: Parse complete - {result.summary()}")
        logger.debug(f"DXF: Layers: {self.document.layers()}")
        return result

    def _begin_section(self, pairs: Iterator[GroupPair]) -> None:
        self._end_section()
        name_pair = next(pairs, None)
        if name_pair is None:
            return
        code, name, _ = name_pair
        if code == GroupCode.NAME and name in SECTION_STATES:
            self._state = SECTION_STATES[name]
            logger.debug(f"DXF: Entering {name} section")
        else:
            logger.debug(f"DXF: Skipping section {name}")

    def _end_section(self) -> None:
        self._finalize()
        self._flush_polyline()
        self._block = None
        self._state = ParserState.OUTSIDE

    def _entities_marker(self, value: str, line_number: int) -> None:
        self._finalize()

        if self._polyline is not None and value != EntityType.VERTEX.value:
            self._flush_polyline()
            if value == EntityType.SEQEND.value:
                return

        self._current = DXFEntity(value, line_number=line_number)
        if value == EntityType.POLYLINE.value:
            self._polyline = self._current
            self._vertices = []

    def _blocks_marker(self, value: str, line_number: int) -> None:
        self._finalize()
        if value == Marker.ENDBLK.value:
            if self._block is not None:
                logger.debug(f"DXF: Block {self._block.name!r} with {len(self._block.entities)} entities")
            self._block = None
            return
        self._current = DXFEntity(value, line_number=line_number)

    def _finalize(self) -> None:
        """Zamknij entity w toku zgodnie ze stanem parsera"""
        entity = self._current
        self._current = None
        if entity is None:
            return

        if self._state == ParserState.IN_BLOCKS:
            if entity.entity_type == Marker.BLOCK.value:
                self._open_block(entity)
            elif self._block is not None:
                self._block.entities.append(entity)
            else:
                logger.debug(f"DXF: {entity.entity_type} outside of a named block, ignored")
            return

        if self._state != ParserState.IN_ENTITIES:
            return

        if entity is self._polyline:
            return
        if self._polyline is not None and entity.entity_type == EntityType.VERTEX.value:
            self._vertices.append(entity)
            return
        self._emit(convert_entity(entity), entity)

    def _open_block(self, header: DXFEntity) -> None:
        name = header.get_string(GroupCode.NAME)
        if not name:
            logger.debug("DXF: BLOCK without name, entities will be ignored")
            self._block = None
            return
        block = self._result.blocks.get(name)
        if block is None:
            block = DXFBlock(
                name=name,
                base_point=(header.get_float(GroupCode.X), header.get_float(GroupCode.Y))
            )
            self._result.blocks[name] = block
        self._block = block
        logger.debug(f"DXF: Starting block definition: {name}")

    def _flush_polyline(self) -> None:
        header = self._polyline
        if header is None:
            return
        vertices = self._vertices
        self._polyline = None
        self._vertices = []
        logger.debug(f"DXF: Processing POLYLINE with {len(vertices)} vertices")
        self._emit(convert_polyline(header, vertices), header)

    # ========== Wyjście do dokumentu ==========

    def _emit(self, obj: Optional[GeometryObject], entity: DXFEntity) -> None:
        self._result.entity_counts[entity.entity_type] += 1
        if obj is None:
            self._result.skipped[entity.entity_type] += 1
            return

        obj.layer = entity.layer or self.fallback_layer
        self._pending.append(obj)

    def _commit(self) -> None:
        """Przenieś obiekty do dokumentu dopiero po udanym parsowaniu"""
        for obj in self._pending:
            if not self.document.has_layer(obj.layer):
                self.document.add_layer(obj.layer)
            if obj.layer not in self._result.layers:
                self._result.layers.append(obj.layer)
            self.document.add_object_direct(obj)
            self._result.objects_created += 1
        self._pending = []


def load_dxf(filepath: str, document: 'Document', strict: bool = DXF_STRICT_GROUP_CODES) -> DXFParseResult:
    """
    Helper function - wczytaj plik DXF do dokumentu.

    Args:
        filepath: Ścieżka do pliku DXF
        document: Dokument docelowy
        strict: Ścisła walidacja kodów grup

    Returns:
        DXFParseResult
    """
    return DXFReader(document, strict=strict).read_file(filepath)


__all__ = [
    'DXFReader',
    'GroupPair',
    'load_dxf',
]
