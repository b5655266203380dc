#server.py
import logging
import socket

import tornado.ioloop

from CitySim.config import Defaults
from CitySim.city_model import CityModel
from CitySim.scheduling.scheduler import make_tick_scheduler, make_traffic_scheduler
from CitySim.server.websocket_handler import make_app

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def get_free_port(default=Defaults.SERVER_PORT, max_tries=Defaults.SERVER_MAX_PORT_TRIES):
    for offset in range(max_tries):
        port = default + offset
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind(('', port))
                return port
            except OSError:
                continue
    raise RuntimeError("No available ports found!")


def main():
    model = CityModel()

    make_tick_scheduler(model).start()
    make_traffic_scheduler(model).start()

    app = make_app(model)
    port = get_free_port()
    app.listen(port)
    logger.info("Server listening on :%d (websocket at /ws)", port)
    tornado.ioloop.IOLoop.current().start()


if __name__ == "__main__":
    main()
