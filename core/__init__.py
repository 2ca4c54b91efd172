#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PatternCAD Core Module
======================
Dokument, komendy cofania, zdarzenia, wyjątki i formaty plików.
"""

# Exceptions
from core.exceptions import (
    PatternCADError,
    FormatError,
    FileAccessError,
    DXFParseError,
    UnsupportedVersionError,
    InvalidFileContentError,
    ExportError,
    GeometryError,
    InvalidGeometryError,
)

# Events
from core.events import (
    EventType,
    Event,
    EventBus,
    setup_event_logging,
)

# Document
from core.commands import UndoStack
from core.document import Document

# File formats
from core.file_format import (
    FileFormat,
    FormatType,
    FormatCapability,
)
from core.native_format import NativeFormat
from core.dxf import DXFFormat


__all__ = [
    # Exceptions
    'PatternCADError',
    'FormatError',
    'FileAccessError',
    'DXFParseError',
    'UnsupportedVersionError',
    'InvalidFileContentError',
    'ExportError',
    'GeometryError',
    'InvalidGeometryError',

    # Events
    'EventType',
    'Event',
    'EventBus',
    'setup_event_logging',

    # Document
    'UndoStack',
    'Document',

    # File formats
    'FileFormat',
    'FormatType',
    'FormatCapability',
    'NativeFormat',
    'DXFFormat',
]
