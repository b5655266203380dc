from __future__ import annotations

from typing import Literal

from CitySim.config import Defaults
from CitySim.agents.vehicles.vehicle_base import PathFollowingAgent


class GoodShipmentAgent(PathFollowingAgent):
    """Freight on its way from industry to a shop ("IC") or between shops ("CC")."""

    speed = Defaults.GOODS_SPEED

    def __init__(self, model, custom_id: int, path: list[tuple[int, int]], kind: Literal["IC", "CC"]):
        super().__init__(model, custom_id, path)
        self.kind = kind
