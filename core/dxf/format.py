"""
DXF Format - Import i eksport plików DXF
========================================
Import: własny parser kodów grup (DXFReader).
Eksport: ezdxf (DXFWriter).
"""

import logging
from typing import TYPE_CHECKING, Dict, Optional

from config.settings import DXF_ENCODING, DXF_IMPORT_LAYER, DXF_STRICT_GROUP_CODES
from core.file_format import FileFormat, FormatCapability, FormatType, ProgressCallback

from .entities import DXFBlock, DXFParseResult
from .reader import DXFReader
from .writer import DXFWriter

if TYPE_CHECKING:
    from core.document import Document

logger = logging.getLogger(__name__)


class DXFFormat(FileFormat):
    """
    Format AutoCAD DXF.

    Po imporcie last_result zawiera podsumowanie parsera,
    a blocks - zapamiętane definicje bloków.
    """

    format_name = "DXF"
    format_description = "AutoCAD Drawing Exchange Format"
    file_extensions = ["dxf"]
    format_type = FormatType.DXF
    capabilities = FormatCapability.IMPORT_EXPORT

    def __init__(
        self,
        strict: bool = DXF_STRICT_GROUP_CODES,
        fallback_layer: str = DXF_IMPORT_LAYER,
        encoding: str = DXF_ENCODING,
        writer: Optional[DXFWriter] = None,
        progress_callback: Optional[ProgressCallback] = None
    ):
        super().__init__(progress_callback)
        self.strict = strict
        self.fallback_layer = fallback_layer
        self.encoding = encoding
        self.writer = writer or DXFWriter()
        self.last_result: Optional[DXFParseResult] = None

    @property
    def blocks(self) -> Dict[str, DXFBlock]:
        return self.last_result.blocks if self.last_result else {}

    def _import(self, filepath: str, document: 'Document') -> None:
        self.report_progress(0)
        reader = DXFReader(document, strict=self.strict, fallback_layer=self.fallback_layer)
        self.report_progress(30)
        self.last_result = reader.read_file(filepath, encoding=self.encoding)

    def _export(self, filepath: str, document: 'Document') -> None:
        self.report_progress(10)
        self.writer.write(filepath, document)
        self.report_progress(100)
