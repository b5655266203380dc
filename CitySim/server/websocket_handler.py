# websocket_handler.py – tornado transport around the model
from __future__ import annotations

import logging

import tornado.ioloop
import tornado.web
import tornado.websocket

from CitySim.city_model import CityModel
from CitySim.scheduling.events import Subscriber
from CitySim.server.protocol import handle_client_message

logger = logging.getLogger(__name__)


class GameSocketHandler(tornado.websocket.WebSocketHandler):
    """One connected client: inbound actions in, queued events out."""

    def initialize(self, model: CityModel):
        self.model = model
        self.player = None
        self.subscriber: Subscriber | None = None
        self._pending_write = None
        self.io_loop = tornado.ioloop.IOLoop.current()

    def check_origin(self, origin):
        return True

    def open(self):
        name = self.get_argument("name", default="") or None
        # wake-ups arrive on simulation threads; add_callback is the thread-safe hop
        self.subscriber = Subscriber(
            on_message=lambda: self.io_loop.add_callback(self._flush),
            on_close=lambda: self.io_loop.add_callback(self._drop),
        )
        self.player = self.model.connect(name, self.subscriber)

    def on_message(self, message):
        if self.player is None:
            return
        handle_client_message(self.model, self.player.id, message)

    def on_close(self):
        if self.subscriber is not None:
            self.model.disconnect(self.subscriber)
            self.subscriber.close()
        logger.info("Player %s disconnected", self.player.id if self.player else "?")

    # ------------------------------------------------------------------
    def _flush(self):
        """
        Move queued events to the socket, one batch at a time.

        While a batch is still being written the rest stays in the bounded
        subscriber queue, so a client that stops reading overflows it and
        gets dropped by the publisher.
        """
        if self.subscriber is None or self.subscriber.closed:
            return
        if self._pending_write is not None and not self._pending_write.done():
            return
        messages = self.subscriber.drain()
        if not messages:
            return
        future = None
        try:
            for message in messages:
                future = self.write_message(message)
        except tornado.websocket.WebSocketClosedError:
            self._drop()
            return
        self._pending_write = future
        future.add_done_callback(self._on_write_done)

    def _on_write_done(self, future):
        if future.cancelled() or future.exception() is not None:
            self._drop()
            return
        self._flush()

    def _drop(self):
        if self.ws_connection is not None:
            self.close()


def make_app(model: CityModel) -> tornado.web.Application:
    return tornado.web.Application([
        (r"/ws", GameSocketHandler, dict(model=model)),
    ])
