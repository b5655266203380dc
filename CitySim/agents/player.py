from __future__ import annotations

import uuid

from CitySim.config import Defaults


class Player:
    __slots__ = ("id", "name", "money")

    def __init__(self, name: str = Defaults.PLAYER_DEFAULT_NAME,
                 money: int = Defaults.PLAYER_STARTING_MONEY, player_id: str | None = None) -> None:
        self.id = player_id or str(uuid.uuid4())
        self.name = name
        self.money = money

    def can_afford(self, cost: int) -> bool:
        return self.money >= cost

    def charge(self, cost: int) -> bool:
        """Deduct *cost* if affordable; never leaves a negative balance."""
        if not self.can_afford(cost):
            return False
        self.money -= cost
        return True

    def credit(self, amount: int) -> None:
        self.money += amount

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "money": self.money}

    def __repr__(self):
        return f"<Player {self.name} ${self.money}>"
