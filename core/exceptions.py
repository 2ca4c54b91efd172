"""
PatternCAD - Własne wyjątki
===========================
Hierarchia wyjątków dla rdzenia edytora.

Formaty plików łapią je na granicy import_file/export_file
i zamieniają na wynik False + last_error.
"""


class PatternCADError(Exception):
    """Bazowy wyjątek dla wszystkich błędów PatternCAD"""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"[{self.code}] {self.message} | Details: {self.details}"
        return f"[{self.code}] {self.message}"


# ============================================================
# File Format Errors
# ============================================================

class FormatError(PatternCADError):
    """Błędy importu i eksportu plików"""
    pass


class FileAccessError(FormatError):
    """Nie można otworzyć / zapisać pliku"""

    def __init__(self, filepath: str, mode: str, reason: str = None):
        super().__init__(
            f"Cannot open file for {mode}: {filepath}",
            code="FILE_ACCESS",
            details={"filepath": str(filepath), "mode": mode, "reason": reason}
        )


class DXFParseError(FormatError):
    """Strukturalnie błędny strumień DXF (tryb ścisły)"""

    def __init__(self, message: str, line_number: int = None, value: str = None):
        super().__init__(
            message,
            code="DXF_PARSE",
            details={"line": line_number, "value": value}
        )
        self.line_number = line_number


class UnsupportedVersionError(FormatError):
    """Wersja pliku nowsza niż obsługiwana"""

    def __init__(self, version: int, supported: int):
        super().__init__(
            f"File format version {version} is not supported",
            code="UNSUPPORTED_VERSION",
            details={"version": version, "supported": supported}
        )


class InvalidFileContentError(FormatError):
    """Zawartość pliku nie pasuje do formatu (np. błędny JSON)"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="INVALID_CONTENT", details=details)


class ExportError(FormatError):
    """Błąd zapisu dokumentu"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="EXPORT_FAILED", details=details)


# ============================================================
# Geometry Errors
# ============================================================

class GeometryError(PatternCADError):
    """Błędy geometrii"""
    pass


class InvalidGeometryError(GeometryError):
    """Dane nie opisują poprawnego obiektu"""

    def __init__(self, object_type: str, reason: str):
        super().__init__(
            f"Invalid {object_type}: {reason}",
            code="INVALID_GEOMETRY",
            details={"object_type": object_type, "reason": reason}
        )

