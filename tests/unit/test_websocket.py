"""End-to-end tests for the websocket transport."""

import asyncio

import tornado.escape
from tornado.testing import AsyncHTTPTestCase, gen_test
from tornado.websocket import websocket_connect

from CitySim.city_model import CityModel
from CitySim.config import Defaults
from CitySim.server.websocket_handler import make_app


class TestGameSocket(AsyncHTTPTestCase):
    """A client connects, gets the world, places a zone."""

    def get_app(self):
        self.city = CityModel(width=8, height=8, create_bot=False, seed=3)
        return make_app(self.city)

    async def _connect(self, name="Ann"):
        url = self.get_url(f"/ws?name={name}").replace("http://", "ws://")
        return await websocket_connect(url)

    @gen_test
    async def test_full_state_on_connect(self):
        ws = await self._connect()
        first = tornado.escape.json_decode(await ws.read_message())
        assert first["type"] == "full_state"
        assert first["payload"]["width"] == 8
        names = [p["name"] for p in first["payload"]["players"].values()]
        assert names == ["Ann"]
        ws.close()

    @gen_test
    async def test_place_zone_round_trip(self):
        ws = await self._connect()
        await ws.read_message()
        ws.write_message(tornado.escape.json_encode(
            {"type": "place_zone", "payload": {"x": 1, "y": 1, "zone": "C"}}))
        msg = tornado.escape.json_decode(await ws.read_message())
        assert msg["type"] == "zone_placed"
        assert msg["payload"]["zone"]["type"] == "C"
        player = next(iter(self.city.players.values()))
        assert player.money == Defaults.PLAYER_STARTING_MONEY - Defaults.ZONE_COST
        ws.close()

    @gen_test
    async def test_garbage_ignored(self):
        ws = await self._connect()
        await ws.read_message()
        ws.write_message("definitely not json")
        ws.write_message(tornado.escape.json_encode(
            {"type": "place_road", "payload": {"x": 2, "y": 2}}))
        msg = tornado.escape.json_decode(await ws.read_message())
        assert msg["type"] == "road_placed"
        ws.close()

    @gen_test
    async def test_reading_client_gets_every_event(self):
        ws = await self._connect()
        await ws.read_message()
        for tick in range(20):
            self.city.publish("tick", {"tick": tick})
        received = [tornado.escape.json_decode(await ws.read_message())["payload"]["tick"]
                    for _ in range(20)]
        assert received == list(range(20))
        ws.close()

    @gen_test(timeout=30)
    async def test_client_that_stops_reading_is_dropped(self):
        ws = await self._connect()
        await ws.read_message()
        assert self.city.publisher.subscriber_count == 1

        padding = "x" * 200_000
        for _ in range(400):
            self.city.publish("tick", {"padding": padding})
            await asyncio.sleep(0)
            if self.city.publisher.subscriber_count == 0:
                break

        for _ in range(100):
            if self.city.publisher.subscriber_count == 0:
                break
            await asyncio.sleep(0.05)
        assert self.city.publisher.subscriber_count == 0
        ws.close()
