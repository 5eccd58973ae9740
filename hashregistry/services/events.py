"""Publication of registration events to external subscribers."""
import logging
from typing import Callable, List

from hashregistry.models.models import DOCUMENT_REGISTERED_TOPIC, DocumentRegisteredEvent

logger = logging.getLogger(__name__)


class EventEmitter:
    def publish(self, event: DocumentRegisteredEvent, topic: str = DOCUMENT_REGISTERED_TOPIC) -> None:
        raise NotImplementedError


class LoggingEventEmitter(EventEmitter):
    def publish(self, event, topic=DOCUMENT_REGISTERED_TOPIC):
        logger.info("[%s] %s", topic, event.model_dump_json())


class InMemoryEventEmitter(EventEmitter):
    """Keeps published events and forwards them to subscribers."""

    def __init__(self):
        self.events: List[tuple] = []
        self._subscribers: List[Callable] = []

    def subscribe(self, callback: Callable[[str, DocumentRegisteredEvent], None]) -> None:
        self._subscribers.append(callback)

    def publish(self, event, topic=DOCUMENT_REGISTERED_TOPIC):
        self.events.append((topic, event))
        for callback in self._subscribers:
            callback(topic, event)


class CompositeEventEmitter(EventEmitter):
    def __init__(self, *emitters: EventEmitter):
        self.emitters = list(emitters)

    def publish(self, event, topic=DOCUMENT_REGISTERED_TOPIC):
        for emitter in self.emitters:
            emitter.publish(event, topic)
