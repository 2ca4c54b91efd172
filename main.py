#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PatternCAD - Rdzeń edytora wykrojów
Główny plik uruchomieniowy (podgląd i konwersja rysunków)

Uruchomienie:
    python main.py pattern.dxf                     # Podsumowanie rysunku
    python main.py pattern.dxf -o pattern.pcad     # Konwersja DXF -> format natywny
    python main.py pattern.pcad -o out.dxf         # Konwersja do DXF (ezdxf)
    python main.py pattern.dxf --strict --debug    # Ścisłe kody grup, więcej logów
"""

import sys
import argparse
import logging
from collections import Counter
from pathlib import Path
from typing import Optional

from config.settings import DXF_STRICT_GROUP_CODES, LOG_FORMAT, LOG_LEVEL, validate_config

# Konfiguracja logowania
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format=LOG_FORMAT
)
logger = logging.getLogger(__name__)


def create_format(filepath: str, strict: bool = False):
    """Dobierz format pliku po rozszerzeniu"""
    from core import DXFFormat, NativeFormat

    for fmt in (DXFFormat(strict=strict), NativeFormat()):
        if fmt.handles(filepath):
            return fmt
    return None


def print_summary(document, fmt) -> None:
    """Wypisz podsumowanie dokumentu"""
    objects = document.objects()
    print(f"Dokument: {document.name}")
    print(f"Obiekty: {len(objects)}")

    for type_name, count in sorted(Counter(obj.type_name for obj in objects).items()):
        print(f"  {type_name:<12} {count:>6}")

    print(f"Warstwy: {len(document.layers())}")
    for layer in document.layers():
        print(f"  {layer:<20} {len(document.objects_on_layer(layer)):>6}")

    result = getattr(fmt, "last_result", None)
    if result is not None:
        for name, block in result.blocks.items():
            print(f"Blok: {name} ({len(block.entities)} entities)")
        for entity_type, count in result.skipped.items():
            print(f"Pominięto: {entity_type} x{count}")


def run(
    input_path: str,
    output_path: Optional[str] = None,
    strict: bool = False,
    log_events: bool = False
) -> int:
    """Wczytaj plik, wypisz podsumowanie i opcjonalnie zapisz w innym formacie"""
    from core import Document, setup_event_logging

    importer = create_format(input_path, strict)
    if importer is None or not importer.can_import():
        print(f"❌ Nieobsługiwany format: {input_path}")
        return 1

    document = Document(name=Path(input_path).stem)
    if log_events:
        setup_event_logging(document.events)
    if not importer.import_file(input_path, document):
        print(f"❌ Import nieudany: {importer.last_error}")
        return 1
    logger.info(f"Loaded {len(document)} objects from {input_path}")

    print_summary(document, importer)

    if output_path:
        exporter = create_format(output_path, strict)
        if exporter is None or not exporter.can_export():
            print(f"❌ Nieobsługiwany format: {output_path}")
            return 1
        if not exporter.export_file(output_path, document):
            print(f"❌ Eksport nieudany: {exporter.last_error}")
            return 1
        print(f"✓ Zapisano: {output_path}")

    return 0


def main():
    """Główna funkcja"""
    parser = argparse.ArgumentParser(description="PatternCAD - podgląd i konwersja rysunków")
    parser.add_argument('input', help='Plik wejściowy (.dxf, .pcad, .json)')
    parser.add_argument('-o', '--output', help='Plik wyjściowy (format po rozszerzeniu)')
    parser.add_argument('--strict', action='store_true', help='Błędny kod grupy DXF przerywa import')
    parser.add_argument('--debug', action='store_true', help='Tryb debug (więcej logów)')

    args = parser.parse_args()

    # Tryb debug
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    # Walidacja konfiguracji
    try:
        validate_config()
    except ValueError as e:
        print(f"❌ Błąd konfiguracji: {e}")
        print("\nSprawdź plik config/settings.py lub utwórz plik .env")
        return 1

    return run(args.input, args.output, args.strict or DXF_STRICT_GROUP_CODES, log_events=args.debug)


if __name__ == "__main__":
    sys.exit(main())
