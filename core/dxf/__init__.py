"""
Core DXF Module - Import i eksport DXF
======================================

Główne komponenty:
- DXFReader: Parser strumienia kodów grup (maszyna stanów)
- DXFWriter: Eksport dokumentu przez ezdxf
- DXFFormat: Format pliku (import_file / export_file)
- DXFEntity: Surowa entity (multimapa kod -> wartości)

Użycie:
    from core.document import Document
    from core.dxf import DXFFormat

    document = Document()
    fmt = DXFFormat()
    if not fmt.import_file("path/to/file.dxf", document):
        print(fmt.last_error)

    print(f"Obiekty: {len(document.objects())}, warstwy: {document.layers()}")
"""

from .entities import (
    EntityType,
    Marker,
    ParserState,
    GroupCode,
    DXFEntity,
    DXFBlock,
    DXFParseResult,
)

from .converters import (
    arc_segment_count,
    arc_to_points,
    convert_entity,
    convert_polyline,
)

from .reader import (
    DXFReader,
    load_dxf,
)

from .writer import DXFWriter

from .format import DXFFormat


__all__ = [
    # Entities
    'EntityType',
    'Marker',
    'ParserState',
    'GroupCode',
    'DXFEntity',
    'DXFBlock',
    'DXFParseResult',

    # Converters
    'arc_segment_count',
    'arc_to_points',
    'convert_entity',
    'convert_polyline',

    # Reader / Writer
    'DXFReader',
    'load_dxf',
    'DXFWriter',

    # Format
    'DXFFormat',
]
