"""
Pytest configuration and shared fixtures.
"""

import random

import pytest
import tornado.escape

from CitySim.agents.city_structure_entities.building import Building
from CitySim.agents.city_structure_entities.tile import Road, Zone
from CitySim.city_model import CityModel
from CitySim.scheduling.events import Subscriber


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def fixed_random():
    """Factory for a random source pinned to one value."""
    return FixedRandom


@pytest.fixture
def city():
    """Small 16x16 world without the AI planner."""
    return CityModel(width=16, height=16, create_bot=False, seed=42)


@pytest.fixture
def player(city):
    return city.add_player("Tester")


@pytest.fixture
def lay_roads(city):
    """Put roads on the given cells without charging anyone."""
    def _lay(cells):
        for x, y in cells:
            city.get_tile(x, y).set_road(Road("test"))
    return _lay


@pytest.fixture
def make_building(city):
    """Place a zone plus a finished building of the given type on (x, y)."""
    def _make(x, y, zone_type, **attrs):
        tile = city.get_tile(x, y)
        tile.set_zone(Zone(zone_type, "test"))
        b = Building(zone_type, stage=3)
        b.final = True
        for name, value in attrs.items():
            setattr(b, name, value)
        tile.building = b
        return b
    return _make


@pytest.fixture
def events(city):
    """Subscribe to the city's publisher; calling the fixture returns decoded envelopes so far."""
    sub = city.publisher.subscribe(Subscriber(maxsize=100_000))
    received = []

    def _events(event_type=None):
        received.extend(tornado.escape.json_decode(m) for m in sub.drain())
        if event_type is None:
            return list(received)
        return [e for e in received if e["type"] == event_type]
    return _events
