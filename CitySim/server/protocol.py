# protocol.py – client → server action decoding
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import tornado.escape

if TYPE_CHECKING:
    from CitySim.city_model import CityModel

logger = logging.getLogger(__name__)

ACTION_PLACE_ZONE = "place_zone"
ACTION_PLACE_ROAD = "place_road"
ACTION_BULLDOZE = "bulldoze"
ACTION_PLACE_STRUCTURE = "place_structure"


class MalformedMessage(ValueError):
    """The client sent something that is not a well-formed action envelope."""


def _coords(payload: dict) -> tuple[int, int]:
    x, y = payload.get("x"), payload.get("y")
    if not isinstance(x, int) or not isinstance(y, int) or isinstance(x, bool) or isinstance(y, bool):
        raise MalformedMessage("x and y must be integers")
    return x, y


def _place_zone(city: "CityModel", player_id: str, payload: dict) -> bool:
    x, y = _coords(payload)
    zone_type = payload.get("zone", payload.get("zoneType"))
    if not isinstance(zone_type, str):
        raise MalformedMessage("zone type missing")
    return city.place_zone(player_id, x, y, zone_type)


def _place_road(city: "CityModel", player_id: str, payload: dict) -> bool:
    return city.place_road(player_id, *_coords(payload))


def _bulldoze(city: "CityModel", player_id: str, payload: dict) -> bool:
    return city.bulldoze(player_id, *_coords(payload))


def _place_structure(city: "CityModel", player_id: str, payload: dict) -> bool:
    x, y = _coords(payload)
    kind = payload.get("kind")
    if not isinstance(kind, str):
        raise MalformedMessage("structure kind missing")
    return city.place_structure(player_id, x, y, kind)


ACTION_HANDLERS = {
    ACTION_PLACE_ZONE: _place_zone,
    ACTION_PLACE_ROAD: _place_road,
    ACTION_BULLDOZE: _bulldoze,
    ACTION_PLACE_STRUCTURE: _place_structure,
}


def decode_envelope(raw: str | bytes) -> tuple[str, dict]:
    try:
        env = tornado.escape.json_decode(raw)
    except (ValueError, TypeError) as exc:
        raise MalformedMessage("not JSON") from exc
    if not isinstance(env, dict):
        raise MalformedMessage("envelope must be an object")
    action, payload = env.get("type"), env.get("payload")
    if not isinstance(action, str) or not isinstance(payload, dict):
        raise MalformedMessage("envelope needs a string type and an object payload")
    return action, payload


def handle_client_message(city: "CityModel", player_id: str, raw: str | bytes) -> bool:
    """
    Apply one client message. Unknown, malformed or rejected actions are
    dropped silently; the return value only says whether the world changed.
    """
    try:
        action, payload = decode_envelope(raw)
        handler = ACTION_HANDLERS.get(action)
        if handler is None:
            raise MalformedMessage(f"unknown action {action!r}")
        return handler(city, player_id, payload)
    except MalformedMessage as exc:
        logger.debug("Discarding message from %s: %s", player_id, exc)
        return False
