"""
Testy punktu wejścia (main.run) i walidacji konfiguracji
"""

import logging
from pathlib import Path

import pytest

import main
from config import settings
from core import Document, NativeFormat
from geometry import Circle


LINE_DXF = (
    (0, "SECTION"), (2, "ENTITIES"),
    (0, "LINE"), (8, "Cut"), (10, "0"), (20, "0"), (11, "10"), (21, "10"),
    (0, "ENDSEC"), (0, "EOF"),
)


def test_summary_of_dxf(make_dxf, dxf_file, capsys):
    path = dxf_file(make_dxf(*LINE_DXF))
    assert main.run(path) == 0
    out = capsys.readouterr().out
    assert "Obiekty: 1" in out
    assert "Cut" in out


def test_convert_dxf_to_native(make_dxf, dxf_file, tmp_path):
    path = dxf_file(make_dxf(*LINE_DXF))
    output = tmp_path / "converted.pcad"
    assert main.run(path, str(output)) == 0

    document = Document()
    assert NativeFormat().import_file(str(output), document)
    assert document.objects()[0].layer == "Cut"


def test_convert_native_to_dxf(tmp_path):
    source = Document("piece")
    source.add_layer("Cut")
    source.set_active_layer("Cut")
    source.add_object(Circle((0, 0), 5))
    native = tmp_path / "piece.pcad"
    assert source.save(str(native))

    output = tmp_path / "piece.dxf"
    assert main.run(str(native), str(output)) == 0
    assert output.exists()


def test_unsupported_extension(tmp_path, capsys):
    path = tmp_path / "drawing.svg"
    path.write_text("<svg/>", encoding="utf-8")
    assert main.run(str(path)) == 1
    assert "Nieobsługiwany format" in capsys.readouterr().out


def test_strict_import_failure(make_dxf, dxf_file):
    path = dxf_file(make_dxf(
        (0, "SECTION"), (2, "ENTITIES"), (0, "POINT"), ("x", "LINE"), (0, "EOF"),
    ))
    assert main.run(path, strict=False) == 0
    assert main.run(path, strict=True) == 1


def test_create_format_by_extension():
    assert main.create_format("a.DXF").format_name == "DXF"
    assert main.create_format("a.json").format_name == "PatternCAD"
    assert main.create_format("a.txt") is None


def test_default_config_is_valid():
    assert settings.validate_config()


def test_invalid_config_rejected(monkeypatch):
    monkeypatch.setattr(settings, "ARC_DEGREES_PER_SEGMENT", 0.0)
    with pytest.raises(ValueError, match="ARC_DEGREES_PER_SEGMENT"):
        settings.validate_config()


def test_debug_logs_document_events(make_dxf, dxf_file, caplog):
    path = dxf_file(make_dxf(*LINE_DXF))
    with caplog.at_level(logging.DEBUG, logger="patterncad.events"):
        assert main.run(path, log_events=True) == 0
    messages = [r.getMessage() for r in caplog.records if r.name == "patterncad.events"]
    assert any("object.added" in m for m in messages)
    assert all(f"source={Path(path).stem}" in m for m in messages)


def test_events_not_logged_by_default(make_dxf, dxf_file, caplog):
    path = dxf_file(make_dxf(*LINE_DXF))
    with caplog.at_level(logging.DEBUG, logger="patterncad.events"):
        assert main.run(path) == 0
    assert not [r for r in caplog.records if r.name == "patterncad.events"]
