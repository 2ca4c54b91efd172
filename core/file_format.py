"""
PatternCAD - Bazowy format pliku
================================
Wspólny interfejs importu / eksportu.

import_file() i export_file() zwracają bool; opis błędu w last_error.
Podklasy implementują _import() / _export() i zgłaszają wyjątki
z core.exceptions - zamiana na wynik bool odbywa się tutaj.
"""

import logging
from enum import Enum, Flag
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List, Optional

from core.exceptions import FileAccessError, FormatError, PatternCADError

if TYPE_CHECKING:
    from core.document import Document

logger = logging.getLogger(__name__)

# Callback postępu (0-100)
ProgressCallback = Callable[[int], None]


class FormatType(Enum):
    NATIVE = "native"
    DXF = "dxf"


class FormatCapability(Flag):
    IMPORT = 1
    EXPORT = 2
    IMPORT_EXPORT = 3


class FileFormat:
    """
    Bazowa klasa formatów plików.

    Atrybuty klasy opisują format:
        format_name, format_description, file_extensions,
        format_type, capabilities
    """

    format_name: str = ""
    format_description: str = ""
    file_extensions: List[str] = []
    format_type: FormatType = None
    capabilities: FormatCapability = FormatCapability.IMPORT_EXPORT

    def __init__(self, progress_callback: Optional[ProgressCallback] = None):
        self._last_error = ""
        self.progress_callback = progress_callback

    # ========== Możliwości ==========

    def can_import(self) -> bool:
        return bool(self.capabilities & FormatCapability.IMPORT)

    def can_export(self) -> bool:
        return bool(self.capabilities & FormatCapability.EXPORT)

    def file_filter(self) -> str:
        """Filtr dla okna dialogowego, np. 'DXF Files (*.dxf)'"""
        patterns = " ".join(f"*.{ext}" for ext in self.file_extensions)
        return f"{self.format_description} ({patterns})"

    def handles(self, filepath: str) -> bool:
        return Path(filepath).suffix.lower().lstrip(".") in self.file_extensions

    # ========== Błędy ==========

    @property
    def last_error(self) -> str:
        return self._last_error

    def has_error(self) -> bool:
        return bool(self._last_error)

    def set_error(self, message: str) -> None:
        self._last_error = message

    def clear_error(self) -> None:
        self._last_error = ""

    def report_progress(self, percentage: int) -> None:
        if self.progress_callback is not None:
            self.progress_callback(max(0, min(100, int(percentage))))

    # ========== Import / eksport ==========

    def import_file(self, filepath: str, document: 'Document') -> bool:
        """
        Wczytaj plik do dokumentu.

        Returns:
            True przy sukcesie; przy błędzie False i ustawione last_error
        """
        self.clear_error()
        if not self.can_import():
            self.set_error(f"Import not supported for {self.format_name}")
            return False

        try:
            self._import(filepath, document)
        except PatternCADError as e:
            self.set_error(e.message)
            logger.error(f"[{self.format_name}] Import failed for {filepath}: {e}")
            return False
        except OSError as e:
            error = FileAccessError(filepath, "reading", str(e))
            self.set_error(error.message)
            logger.error(f"[{self.format_name}] {error}")
            return False

        self.report_progress(100)
        logger.info(f"[{self.format_name}] Imported {filepath}")
        return True

    def export_file(self, filepath: str, document: 'Document') -> bool:
        """
        Zapisz dokument do pliku.

        Returns:
            True przy sukcesie; przy błędzie False i ustawione last_error
        """
        self.clear_error()
        if not self.can_export():
            self.set_error(f"Export not supported for {self.format_name}")
            return False

        try:
            self._export(filepath, document)
        except PatternCADError as e:
            self.set_error(e.message)
            logger.error(f"[{self.format_name}] Export failed for {filepath}: {e}")
            return False
        except OSError as e:
            error = FileAccessError(filepath, "writing", str(e))
            self.set_error(error.message)
            logger.error(f"[{self.format_name}] {error}")
            return False

        logger.info(f"[{self.format_name}] Exported {filepath}")
        return True

    def _import(self, filepath: str, document: 'Document') -> None:
        raise FormatError("Import not implemented for this format")

    def _export(self, filepath: str, document: 'Document') -> None:
        raise FormatError("Export not implemented for this format")
