# events.py – outbound event fan-out
from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable

import tornado.escape

from CitySim.config import Defaults

logger = logging.getLogger(__name__)

# Event names sent to clients
EVENT_FULL_STATE = "full_state"
EVENT_TICK = "tick"
EVENT_ZONE_PLACED = "zone_placed"
EVENT_ROAD_PLACED = "road_placed"
EVENT_STRUCTURE_PLACED = "structure_placed"
EVENT_BUILDING_UPDATE = "building_update"
EVENT_BULLDOZED = "bulldozed"
EVENT_TRAFFIC = "traffic"


class SubscriberClosed(Exception):
    """Raised when delivering to a subscriber that has already been detached."""


def encode_envelope(event_type: str, payload: Any) -> str:
    return tornado.escape.json_encode({"type": event_type, "payload": payload})


class Subscriber:
    """
    Bounded outbound queue for one connection.

    ``on_message`` is an optional wake-up hook invoked after each enqueue
    (the websocket handler uses it to schedule a flush on its IOLoop);
    ``on_close`` runs once when the subscriber is detached.
    """

    def __init__(self, maxsize: int = Defaults.SUBSCRIBER_QUEUE_SIZE,
                 on_message: Callable[[], None] | None = None,
                 on_close: Callable[[], None] | None = None) -> None:
        self.queue: queue.Queue[str] = queue.Queue(maxsize=maxsize)
        self.on_message = on_message
        self.on_close = on_close
        self.closed = False

    def enqueue(self, message: str) -> None:
        """Non-blocking put; raises ``queue.Full`` when the client is too slow."""
        if self.closed:
            raise SubscriberClosed()
        self.queue.put_nowait(message)
        if self.on_message is not None:
            self.on_message()

    def drain(self) -> list[str]:
        out = []
        while True:
            try:
                out.append(self.queue.get_nowait())
            except queue.Empty:
                return out

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.on_close is not None:
            self.on_close()


class EventPublisher:
    """Broadcasts encoded envelopes to every registered subscriber without ever blocking."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, subscriber: Subscriber) -> Subscriber:
        with self._lock:
            self._subscribers.append(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def send(self, subscriber: Subscriber, event_type: str, payload: Any) -> bool:
        """Deliver to a single subscriber (used for ``full_state``)."""
        return self._deliver(subscriber, encode_envelope(event_type, payload))

    def publish(self, event_type: str, payload: Any) -> None:
        message = encode_envelope(event_type, payload)
        with self._lock:
            targets = list(self._subscribers)
        for subscriber in targets:
            self._deliver(subscriber, message)

    def _deliver(self, subscriber: Subscriber, message: str) -> bool:
        try:
            subscriber.enqueue(message)
            return True
        except queue.Full:
            logger.info("Subscriber queue full, dropping connection")
        except SubscriberClosed:
            pass
        self.unsubscribe(subscriber)
        subscriber.close()
        return False
