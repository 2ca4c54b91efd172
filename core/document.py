"""
PatternCAD - Dokument
=====================
Kontener obiektów geometrii, warstw i stosu cofania.

Dwie ścieżki dodawania obiektów:
- add_object: przez stos cofania, przypisuje aktywną warstwę
- add_object_direct: bez wpisu cofania (importery, komendy)
"""

import logging
from typing import Dict, List, Optional, Sequence

from config.settings import DEFAULT_DOCUMENT_NAME, DEFAULT_LAYER, DEFAULT_LAYER_COLOR
from core.commands import (
    AddObjectCommand,
    ChangeLayerCommand,
    Command,
    MirrorObjectsCommand,
    MoveObjectsCommand,
    RemoveObjectCommand,
    RemoveObjectsCommand,
    RotateObjectsCommand,
    ScaleObjectsCommand,
    UndoStack,
)
from core.events import EventBus, EventType
from geometry.base import GeometryObject
from geometry.transform import PointLike

logger = logging.getLogger(__name__)


class Document:
    """
    Dokument rysunku.

    Powiadomienia publikowane są na self.events (EventBus dokumentu).
    Każdy obiekt w dokumencie ma zainstalowany callback zmian,
    usuwany przy usunięciu obiektu.
    """

    def __init__(self, name: str = DEFAULT_DOCUMENT_NAME):
        self.events = EventBus()
        self._name = name
        self._modified = False
        self._objects: List[GeometryObject] = []
        self._selected: List[GeometryObject] = []
        self._undo_stack = UndoStack()
        self._reset_layers()

    def _reset_layers(self) -> None:
        self._layers: List[str] = [DEFAULT_LAYER]
        self._layer_visibility: Dict[str, bool] = {DEFAULT_LAYER: True}
        self._layer_colors: Dict[str, str] = {DEFAULT_LAYER: DEFAULT_LAYER_COLOR}
        self._layer_locked: Dict[str, bool] = {}
        self._active_layer = DEFAULT_LAYER

    def _emit(self, event_type: EventType, **data) -> None:
        self.events.emit(event_type, source=self._name, **data)

    # ========== Nazwa / stan ==========

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        if value != self._name:
            self._name = value
            self._emit(EventType.DOCUMENT_NAME_CHANGED, name=value)

    def is_modified(self) -> bool:
        return self._modified

    def set_modified(self, modified: bool) -> None:
        if modified != self._modified:
            self._modified = modified
            self._emit(EventType.DOCUMENT_MODIFIED_CHANGED, modified=modified)

    def _notify_modified(self) -> None:
        self.set_modified(True)

    # ========== Obiekty ==========

    def objects(self) -> List[GeometryObject]:
        return list(self._objects)

    def objects_on_layer(self, layer_name: str) -> List[GeometryObject]:
        return [obj for obj in self._objects if obj.layer == layer_name]

    def find_object(self, object_id: str) -> Optional[GeometryObject]:
        for obj in self._objects:
            if obj.id == object_id:
                return obj
        return None

    def __contains__(self, obj: GeometryObject) -> bool:
        return obj in self._objects

    def __len__(self):
        return len(self._objects)

    def add_object(self, obj: GeometryObject) -> None:
        """Dodaj obiekt przez stos cofania (na aktywnej warstwie)"""
        if obj is None or obj in self._objects:
            return
        obj.layer = self._active_layer
        self.execute(AddObjectCommand(self, obj))

    def remove_object(self, obj: GeometryObject) -> None:
        if obj is None or obj not in self._objects:
            return
        self.execute(RemoveObjectCommand(self, obj))

    def remove_objects(self, objects: Sequence[GeometryObject]) -> None:
        valid = [obj for obj in objects if obj is not None and obj in self._objects]
        if valid:
            self.execute(RemoveObjectsCommand(self, valid))

    def add_object_direct(self, obj: GeometryObject) -> None:
        """Dodaj obiekt bez wpisu cofania"""
        if obj is None or obj in self._objects:
            return
        self._objects.append(obj)
        obj.bind_change_callback(self.notify_object_changed)
        self._emit(EventType.OBJECT_ADDED, object=obj)

    def remove_object_direct(self, obj: GeometryObject) -> None:
        if obj is None or obj not in self._objects:
            return
        self._objects.remove(obj)
        obj.bind_change_callback(None)
        if obj in self._selected:
            self._selected.remove(obj)
        self._emit(EventType.OBJECT_REMOVED, object=obj)

    def notify_object_changed(self, obj: GeometryObject) -> None:
        if obj is not None:
            self._emit(EventType.OBJECT_CHANGED, object=obj)
            self._notify_modified()

    # ========== Przekształcenia z cofaniem ==========

    def move_objects(self, objects: Sequence[GeometryObject], delta: PointLike) -> None:
        if objects:
            self.execute(MoveObjectsCommand(self, objects, delta))

    def rotate_objects(self, objects: Sequence[GeometryObject], angle_degrees: float,
                       center: PointLike) -> None:
        if objects:
            self.execute(RotateObjectsCommand(self, objects, angle_degrees, center))

    def mirror_objects(self, objects: Sequence[GeometryObject], axis_point1: PointLike,
                       axis_point2: PointLike) -> None:
        if objects:
            self.execute(MirrorObjectsCommand(self, objects, axis_point1, axis_point2))

    def scale_objects(self, objects: Sequence[GeometryObject], sx: float, sy: float,
                      origin: PointLike) -> None:
        if objects:
            self.execute(ScaleObjectsCommand(self, objects, sx, sy, origin))

    def move_objects_to_layer(self, objects: Sequence[GeometryObject], layer_name: str) -> bool:
        """Przenieś obiekty na istniejącą warstwę (z cofaniem)"""
        if not objects or layer_name not in self._layers:
            return False
        self.execute(ChangeLayerCommand(self, objects, layer_name))
        return True

    # ========== Zaznaczenie ==========

    def selected_objects(self) -> List[GeometryObject]:
        return list(self._selected)

    def set_selected_objects(self, objects: Sequence[GeometryObject]) -> None:
        self._selected = [obj for obj in objects if obj in self._objects]
        self._emit(EventType.SELECTION_CHANGED, count=len(self._selected))

    def clear_selection(self) -> None:
        if self._selected:
            self._selected = []
            self._emit(EventType.SELECTION_CHANGED, count=0)

    def select_all(self) -> None:
        self._selected = list(self._objects)
        self._emit(EventType.SELECTION_CHANGED, count=len(self._selected))

    # ========== Warstwy ==========

    def layers(self) -> List[str]:
        return list(self._layers)

    def has_layer(self, layer_name: str) -> bool:
        return layer_name in self._layers

    def add_layer(self, layer_name: str, color: str = DEFAULT_LAYER_COLOR) -> bool:
        """Dodaj warstwę; istniejąca warstwa => False, bez zmian"""
        if not layer_name or layer_name in self._layers:
            return False
        self._layers.append(layer_name)
        self._layer_visibility[layer_name] = True
        self._layer_colors[layer_name] = color or DEFAULT_LAYER_COLOR
        self._emit(EventType.LAYER_ADDED, layer=layer_name)
        self._notify_modified()
        return True

    def remove_layer(self, layer_name: str) -> bool:
        """
        Usuń warstwę. Ostatniej warstwy nie można usunąć.

        Obiekty z usuwanej warstwy trafiają na pierwszą pozostałą warstwę.
        """
        if layer_name not in self._layers or len(self._layers) <= 1:
            return False

        self._layers.remove(layer_name)
        self._layer_visibility.pop(layer_name, None)
        self._layer_colors.pop(layer_name, None)
        self._layer_locked.pop(layer_name, None)

        target = self._layers[0]
        for obj in self._objects:
            if obj.layer == layer_name:
                obj.layer = target

        self._emit(EventType.LAYER_REMOVED, layer=layer_name)
        if self._active_layer == layer_name:
            self.set_active_layer(target)
        self._notify_modified()
        return True

    def rename_layer(self, old_name: str, new_name: str) -> bool:
        if old_name not in self._layers or not new_name or new_name in self._layers:
            return False

        self._layers[self._layers.index(old_name)] = new_name
        self._layer_visibility[new_name] = self._layer_visibility.pop(old_name, True)
        self._layer_colors[new_name] = self._layer_colors.pop(old_name, DEFAULT_LAYER_COLOR)
        if old_name in self._layer_locked:
            self._layer_locked[new_name] = self._layer_locked.pop(old_name)

        for obj in self._objects:
            if obj.layer == old_name:
                obj.layer = new_name

        self._emit(EventType.LAYER_RENAMED, old_name=old_name, new_name=new_name)
        if self._active_layer == old_name:
            self._active_layer = new_name
            self._emit(EventType.ACTIVE_LAYER_CHANGED, layer=new_name)
        self._notify_modified()
        return True

    @property
    def active_layer(self) -> str:
        return self._active_layer

    def set_active_layer(self, layer_name: str) -> None:
        if layer_name in self._layers and layer_name != self._active_layer:
            self._active_layer = layer_name
            self._emit(EventType.ACTIVE_LAYER_CHANGED, layer=layer_name)

    def is_layer_visible(self, layer_name: str) -> bool:
        return self._layer_visibility.get(layer_name, True)

    def set_layer_visible(self, layer_name: str, visible: bool) -> None:
        if layer_name in self._layers and self.is_layer_visible(layer_name) != visible:
            self._layer_visibility[layer_name] = visible
            self._emit(EventType.LAYER_VISIBILITY_CHANGED, layer=layer_name, visible=visible)

    def layer_color(self, layer_name: str) -> str:
        return self._layer_colors.get(layer_name, DEFAULT_LAYER_COLOR)

    def set_layer_color(self, layer_name: str, color: str) -> None:
        if layer_name in self._layers and color:
            self._layer_colors[layer_name] = color
            self._notify_modified()

    def is_layer_locked(self, layer_name: str) -> bool:
        return self._layer_locked.get(layer_name, False)

    def set_layer_locked(self, layer_name: str, locked: bool) -> None:
        if layer_name in self._layers and self.is_layer_locked(layer_name) != locked:
            self._layer_locked[layer_name] = locked
            self._notify_modified()

    # ========== Undo / Redo ==========

    def execute(self, command: Command) -> None:
        """Wykonaj komendę i odłóż ją na stos cofania"""
        self._undo_stack.push(command)
        self._sync_modified()

    def undo(self) -> None:
        if self._undo_stack.undo():
            self._sync_modified()

    def redo(self) -> None:
        if self._undo_stack.redo():
            self._sync_modified()

    def can_undo(self) -> bool:
        return self._undo_stack.can_undo()

    def can_redo(self) -> bool:
        return self._undo_stack.can_redo()

    @property
    def undo_stack(self) -> UndoStack:
        return self._undo_stack

    def _sync_modified(self) -> None:
        self.set_modified(not self._undo_stack.is_clean())

    # ========== Zapis / odczyt ==========

    def save(self, filepath: str) -> bool:
        """Zapisz w formacie natywnym"""
        from core.native_format import NativeFormat

        fmt = NativeFormat()
        success = fmt.export_file(filepath, self)
        if success:
            self._undo_stack.set_clean()
            self.set_modified(False)
        else:
            logger.error(f"Save failed: {fmt.last_error}")
        return success

    def load(self, filepath: str) -> bool:
        """Wczytaj plik natywny do dokumentu"""
        from core.native_format import NativeFormat

        fmt = NativeFormat()
        success = fmt.import_file(filepath, self)
        if success:
            self._undo_stack.clear()
            self.set_modified(False)
        else:
            logger.error(f"Load failed: {fmt.last_error}")
        return success

    def clear(self) -> None:
        """Usuń wszystko i przywróć stan nowego dokumentu"""
        for obj in self._objects:
            obj.bind_change_callback(None)
        self._objects.clear()
        self._selected.clear()
        self._undo_stack.clear()
        self._reset_layers()
        self._name = DEFAULT_DOCUMENT_NAME
        self.set_modified(False)
        self._emit(EventType.DOCUMENT_CLEARED)

    def __repr__(self):
        return f"<Document {self._name!r} objects={len(self._objects)} layers={len(self._layers)}>"
