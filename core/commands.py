"""
PatternCAD - Komendy Undo/Redo
==============================
Stos cofania dokumentu i komendy operujące na obiektach.

Komendy korzystają wyłącznie z add_object_direct / remove_object_direct,
więc cofanie nie tworzy nowych wpisów na stosie.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Sequence

from geometry.base import GeometryObject
from geometry.transform import PointLike, to_vec

if TYPE_CHECKING:
    from core.document import Document

logger = logging.getLogger(__name__)


class Command(ABC):
    """Bazowa komenda: redo() wykonuje, undo() odwraca"""

    def __init__(self, document: 'Document', text: str = ""):
        self.document = document
        self.text = text

    @abstractmethod
    def redo(self) -> None:
        pass

    @abstractmethod
    def undo(self) -> None:
        pass


class UndoStack:
    """
    Liniowy stos komend.

    push() wykonuje komendę i usuwa gałąź redo.
    clean_index zapamiętuje stan odpowiadający zapisanemu plikowi.
    """

    def __init__(self):
        self._commands: List[Command] = []
        self._index = 0
        self._clean_index = 0

    def push(self, command: Command) -> None:
        command.redo()
        del self._commands[self._index:]
        if self._clean_index > self._index:
            self._clean_index = -1
        self._commands.append(command)
        self._index += 1
        logger.debug(f"[UndoStack] Pushed: {command.text}")

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._commands)

    def undo(self) -> bool:
        if not self.can_undo():
            return False
        self._index -= 1
        command = self._commands[self._index]
        command.undo()
        logger.debug(f"[UndoStack] Undo: {command.text}")
        return True

    def redo(self) -> bool:
        if not self.can_redo():
            return False
        command = self._commands[self._index]
        command.redo()
        self._index += 1
        logger.debug(f"[UndoStack] Redo: {command.text}")
        return True

    def undo_text(self) -> str:
        return self._commands[self._index - 1].text if self.can_undo() else ""

    def redo_text(self) -> str:
        return self._commands[self._index].text if self.can_redo() else ""

    def set_clean(self) -> None:
        self._clean_index = self._index

    def is_clean(self) -> bool:
        return self._clean_index == self._index

    def clear(self) -> None:
        self._commands.clear()
        self._index = 0
        self._clean_index = 0

    def __len__(self):
        return len(self._commands)


# ============================================================
# Object Commands
# ============================================================

class AddObjectCommand(Command):

    def __init__(self, document: 'Document', obj: GeometryObject):
        super().__init__(document, f"Add {obj.type_name}")
        self.obj = obj

    def redo(self) -> None:
        self.document.add_object_direct(self.obj)

    def undo(self) -> None:
        self.document.remove_object_direct(self.obj)


class RemoveObjectCommand(Command):

    def __init__(self, document: 'Document', obj: GeometryObject):
        super().__init__(document, f"Remove {obj.type_name}")
        self.obj = obj

    def redo(self) -> None:
        self.document.remove_object_direct(self.obj)

    def undo(self) -> None:
        self.document.add_object_direct(self.obj)


class RemoveObjectsCommand(Command):

    def __init__(self, document: 'Document', objects: Sequence[GeometryObject]):
        super().__init__(document, f"Remove {len(objects)} objects")
        self.objects = list(objects)

    def redo(self) -> None:
        for obj in self.objects:
            self.document.remove_object_direct(obj)

    def undo(self) -> None:
        for obj in self.objects:
            self.document.add_object_direct(obj)


class ChangeLayerCommand(Command):
    """Przeniesienie obiektów na inną warstwę"""

    def __init__(self, document: 'Document', objects: Sequence[GeometryObject], layer: str):
        super().__init__(document, f"Move to layer {layer}")
        self.objects = list(objects)
        self.layer = layer
        self.old_layers = [obj.layer for obj in self.objects]

    def redo(self) -> None:
        for obj in self.objects:
            obj.layer = self.layer

    def undo(self) -> None:
        for obj, layer in zip(self.objects, self.old_layers):
            obj.layer = layer


# ============================================================
# Transform Commands
# ============================================================

class MoveObjectsCommand(Command):

    def __init__(self, document: 'Document', objects: Sequence[GeometryObject], delta: PointLike):
        super().__init__(document, "Move objects")
        self.objects = list(objects)
        self.delta = to_vec(delta)

    def redo(self) -> None:
        for obj in self.objects:
            obj.translate(self.delta)

    def undo(self) -> None:
        for obj in self.objects:
            obj.translate(-self.delta)


class RotateObjectsCommand(Command):

    def __init__(self, document: 'Document', objects: Sequence[GeometryObject],
                 angle_degrees: float, center: PointLike):
        super().__init__(document, f"Rotate {angle_degrees:g}°")
        self.objects = list(objects)
        self.angle = angle_degrees
        self.center = to_vec(center)

    def redo(self) -> None:
        for obj in self.objects:
            obj.rotate(self.angle, self.center)

    def undo(self) -> None:
        for obj in self.objects:
            obj.rotate(-self.angle, self.center)


class MirrorObjectsCommand(Command):
    """Odbicie w miejscu (operacja sama dla siebie odwrotna)"""

    def __init__(self, document: 'Document', objects: Sequence[GeometryObject],
                 axis_point1: PointLike, axis_point2: PointLike):
        super().__init__(document, "Mirror objects")
        self.objects = list(objects)
        self.axis = (to_vec(axis_point1), to_vec(axis_point2))

    def redo(self) -> None:
        for obj in self.objects:
            obj.mirror(*self.axis)

    def undo(self) -> None:
        self.redo()


class ScaleObjectsCommand(Command):
    """
    Skalowanie; zerowy współczynnik jest odrzucany przy tworzeniu.

    Okrąg przy sx != sy skaluje promień średnią, więc cofnięcie
    przywraca promień tylko w przybliżeniu.
    """

    def __init__(self, document: 'Document', objects: Sequence[GeometryObject],
                 sx: float, sy: float, origin: PointLike):
        if sx == 0 or sy == 0:
            raise ValueError("Scale factors must be non-zero")
        super().__init__(document, "Scale objects")
        self.objects = list(objects)
        self.sx = sx
        self.sy = sy
        self.origin = to_vec(origin)

    def redo(self) -> None:
        for obj in self.objects:
            obj.scale(self.sx, self.sy, self.origin)

    def undo(self) -> None:
        for obj in self.objects:
            obj.scale(1.0 / self.sx, 1.0 / self.sy, self.origin)
