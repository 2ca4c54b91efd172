"""
PatternCAD - Event Bus
======================
Event bus dokumentu: powiadomienia o obiektach, warstwach i zaznaczeniu.
Każdy Document ma własną instancję (brak singletona), więc dwa otwarte
dokumenty nie widzą nawzajem swoich zdarzeń.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from enum import Enum
import uuid
import logging

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Typy zdarzeń dokumentu"""

    # ========== Object Events ==========
    OBJECT_ADDED = "object.added"
    OBJECT_REMOVED = "object.removed"
    OBJECT_CHANGED = "object.changed"

    # ========== Selection Events ==========
    SELECTION_CHANGED = "selection.changed"

    # ========== Layer Events ==========
    LAYER_ADDED = "layer.added"
    LAYER_REMOVED = "layer.removed"
    LAYER_RENAMED = "layer.renamed"
    LAYER_VISIBILITY_CHANGED = "layer.visibility_changed"
    ACTIVE_LAYER_CHANGED = "layer.active_changed"

    # ========== Document Events ==========
    DOCUMENT_MODIFIED_CHANGED = "document.modified_changed"
    DOCUMENT_NAME_CHANGED = "document.name_changed"
    DOCUMENT_CLEARED = "document.cleared"


@dataclass
class Event:
    """
    Zdarzenie dokumentu.

    Attributes:
        type: Typ zdarzenia
        data: Dane zdarzenia (payload)
        timestamp: Czas wystąpienia
        event_id: Unikalny identyfikator zdarzenia
        source: Nazwa dokumentu źródłowego
    """
    type: EventType
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    source: Optional[str] = None

    def to_dict(self) -> dict:
        """Konwersja do słownika (np. do logowania)"""
        return {
            "event_id": self.event_id,
            "type": self.type.value,
            "data": {k: repr(v) for k, v in self.data.items()},
            "timestamp": self.timestamp.isoformat(),
            "source": self.source
        }


# Type alias dla handlera
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Event Bus dokumentu.

    Użycie:
        bus = EventBus()
        bus.subscribe(EventType.OBJECT_ADDED, handle_added)
        bus.publish(Event(type=EventType.OBJECT_ADDED, data={"object": obj}))
    """

    def __init__(self):
        self._handlers: Dict[EventType, List[tuple]] = {}
        self._global_handlers: List[EventHandler] = []
        self._enabled = True

    def subscribe(
        self,
        event_type: EventType,
        handler: EventHandler,
        priority: int = 0
    ) -> None:
        """
        Subskrybuj handler na konkretny typ zdarzenia.

        Args:
            event_type: Typ zdarzenia do nasłuchiwania
            handler: Funkcja obsługująca zdarzenie
            priority: Priorytet (wyższy = wcześniej wywołany)
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []

        self._handlers[event_type].append((priority, handler))
        # Sortowanie stabilne: równy priorytet = kolejność subskrypcji
        self._handlers[event_type].sort(key=lambda x: x[0], reverse=True)

        logger.debug(f"[EventBus] Subscribed handler to {event_type.value}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subskrybuj handler na WSZYSTKIE zdarzenia (logowanie, debug)"""
        self._global_handlers.append(handler)
        logger.debug("[EventBus] Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """
        Odsubskrybuj handler.

        Returns:
            True jeśli handler został usunięty, False jeśli nie znaleziono
        """
        if event_type not in self._handlers:
            return False

        count_before = len(self._handlers[event_type])
        self._handlers[event_type] = [
            (p, h) for p, h in self._handlers[event_type]
            if h != handler
        ]

        removed = len(self._handlers[event_type]) < count_before
        if removed:
            logger.debug(f"[EventBus] Unsubscribed handler from {event_type.value}")
        return removed

    def publish(self, event: Event) -> None:
        """
        Opublikuj zdarzenie.

        Wszystkie handlery są wywoływane synchronicznie.
        Błąd w jednym handlerze nie blokuje pozostałych.
        """
        if not self._enabled:
            return

        logger.debug(f"[EventBus] Publishing: {event.type.value} | ID: {event.event_id[:8]}")

        for priority, handler in list(self._handlers.get(event.type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"[EventBus] Handler error for {event.type.value}: {e}",
                    exc_info=True
                )

        for handler in list(self._global_handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"[EventBus] Global handler error: {e}", exc_info=True)

    def emit(self, event_type: EventType, source: str = None, **data) -> None:
        """Skrót: utwórz i opublikuj zdarzenie"""
        self.publish(Event(type=event_type, data=data, source=source))

    def enable(self) -> None:
        """Włącz event bus"""
        self._enabled = True

    def disable(self) -> None:
        """Wyłącz event bus (zdarzenia nie będą publikowane)"""
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    def clear(self) -> None:
        """Usuń wszystkie handlery"""
        self._handlers.clear()
        self._global_handlers.clear()

    def get_handler_count(self, event_type: EventType = None) -> int:
        """Zwróć liczbę handlerów"""
        if event_type:
            return len(self._handlers.get(event_type, []))
        return sum(len(h) for h in self._handlers.values()) + len(self._global_handlers)


# ============================================================
# Logging
# ============================================================

def setup_event_logging(bus: EventBus, level: int = logging.DEBUG) -> EventHandler:
    """
    Podłącz handler logujący wszystkie zdarzenia magistrali.

    Returns:
        Zarejestrowany handler
    """
    event_logger = logging.getLogger("patterncad.events")

    def log_event(event: Event):
        entry = event.to_dict()
        event_logger.log(level, f"Event: {entry['type']} | source={entry['source']} | {entry['data']}")

    bus.subscribe_all(log_event)
    return log_event


__all__ = [
    'EventType',
    'Event',
    'EventHandler',
    'EventBus',
    'setup_event_logging',
]
