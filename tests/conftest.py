"""
Wspólne fixtures testów PatternCAD
"""

import logging

import pytest

from core.document import Document

logging.basicConfig(level=logging.DEBUG, format='%(name)s - %(levelname)s - %(message)s')


def build_dxf(*pairs) -> str:
    """Zbuduj tekst DXF z par (kod, wartość)"""
    lines = []
    for code, value in pairs:
        lines.append(str(code))
        lines.append(str(value))
    return "\n".join(lines) + "\n"


def entities_dxf(*pairs) -> str:
    """Plik z jedną sekcją ENTITIES zawierającą podane pary"""
    return build_dxf(
        (0, "SECTION"), (2, "ENTITIES"),
        *pairs,
        (0, "ENDSEC"), (0, "EOF"),
    )


@pytest.fixture
def document():
    return Document(name="test")


@pytest.fixture
def make_dxf():
    return build_dxf


@pytest.fixture
def make_entities_dxf():
    return entities_dxf


@pytest.fixture
def dxf_file(tmp_path):
    """Zapisz tekst DXF do pliku tymczasowego i zwróć ścieżkę"""
    def _write(text: str, name: str = "drawing.dxf") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write
