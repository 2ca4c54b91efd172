#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Konfiguracja aplikacji PatternCAD
Rdzeń edytora wykrojów: geometria, krzywe, import/eksport DXF

Wartości można nadpisać w pliku .env lub w zmiennych środowiskowych.
"""

import os
from dotenv import load_dotenv

# Wczytaj zmienne środowiskowe z .env
load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ============================================================
# LOGOWANIE
# ============================================================

LOG_LEVEL = os.getenv("PATTERNCAD_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# ============================================================
# DOKUMENT - WARSTWY
# ============================================================

# Warstwa tworzona razem z nowym dokumentem
DEFAULT_LAYER = "Default"
DEFAULT_LAYER_COLOR = "#000000"

# Nazwa dokumentu bez pliku
DEFAULT_DOCUMENT_NAME = "Untitled"

# ============================================================
# WYKROJE - ZAPAS NA SZEW I ZNACZNIKI
# ============================================================

# Domyślna szerokość zapasu na szew (mm)
SEAM_ALLOWANCE_WIDTH = float(os.getenv("SEAM_ALLOWANCE_WIDTH", "10.0"))

# Domyślna głębokość nacięcia (mm)
NOTCH_DEPTH = float(os.getenv("NOTCH_DEPTH", "5.0"))

# ============================================================
# IMPORT DXF
# ============================================================

# Warstwa dla entities bez kodu 8
DXF_IMPORT_LAYER = os.getenv("DXF_IMPORT_LAYER", "Imported")

# True = nienumeryczny kod grupy przerywa import (DXFParseError)
# False = kod traktowany jako 0 + ostrzeżenie w logu
DXF_STRICT_GROUP_CODES = _env_bool("DXF_STRICT_GROUP_CODES")

# Kodowanie plików tekstowych DXF
DXF_ENCODING = os.getenv("DXF_ENCODING", "utf-8")

# Tesselacja łuków: max(ARC_MIN_SEGMENTS, |kąt| / ARC_DEGREES_PER_SEGMENT)
ARC_MIN_SEGMENTS = int(os.getenv("ARC_MIN_SEGMENTS", "8"))
ARC_DEGREES_PER_SEGMENT = float(os.getenv("ARC_DEGREES_PER_SEGMENT", "10.0"))

# ============================================================
# EKSPORT DXF
# ============================================================

# Wersja DXF zapisywana przez ezdxf
DXF_EXPORT_VERSION = os.getenv("DXF_EXPORT_VERSION", "R2010")

# Liczba odcinków na segment krzywej polilinii
DXF_CURVE_SEGMENTS = int(os.getenv("DXF_CURVE_SEGMENTS", "10"))

# Liczba odcinków dla krzywej Béziera (20 => 21 punktów)
DXF_BEZIER_SEGMENTS = int(os.getenv("DXF_BEZIER_SEGMENTS", "20"))

# ============================================================
# FORMAT NATYWNY (JSON)
# ============================================================

NATIVE_FORMAT_VERSION = 1
NATIVE_EXTENSIONS = (".pcad", ".json")


def validate_config():
    """Sprawdź czy konfiguracja jest poprawna"""
    errors = []

    if LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        errors.append(f"Invalid PATTERNCAD_LOG_LEVEL: {LOG_LEVEL}")

    if not DXF_IMPORT_LAYER.strip():
        errors.append("DXF_IMPORT_LAYER must not be empty")

    if ARC_MIN_SEGMENTS < 1:
        errors.append("ARC_MIN_SEGMENTS must be >= 1")

    if ARC_DEGREES_PER_SEGMENT <= 0:
        errors.append("ARC_DEGREES_PER_SEGMENT must be > 0")

    if DXF_CURVE_SEGMENTS < 1:
        errors.append("DXF_CURVE_SEGMENTS must be >= 1")

    if DXF_BEZIER_SEGMENTS < 1:
        errors.append("DXF_BEZIER_SEGMENTS must be >= 1")

    if SEAM_ALLOWANCE_WIDTH <= 0:
        errors.append("SEAM_ALLOWANCE_WIDTH must be > 0")

    if NOTCH_DEPTH < 0:
        errors.append("NOTCH_DEPTH must be >= 0")

    if errors:
        raise ValueError("Configuration errors:\n" + "\n".join(errors))

    return True
