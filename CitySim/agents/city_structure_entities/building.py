from __future__ import annotations

import time

from CitySim.config import Defaults


class Building:
    """A building growing on a Zone of the same type.

    ── **Lifecycle** ─────────────────────────────────────────────────
    * construction: ``stage`` climbs 1 → 3, then ``final`` is set together
      with ``completed_at``.
    * operation: occupancy (residents or employees) and, for Commercial,
      a supply stock are adjusted by the allocation step.
    * abandonment: chronically failing buildings get an ``abandon_phase``
      countdown (3 → 0); at 0 the building and its zone are removed.
    """

    # ------------------------------------------------------------------
    # Capacity helpers
    # ------------------------------------------------------------------
    @staticmethod
    def capacity_for(zone_type: str) -> int:
        if zone_type == Defaults.RESIDENTIAL:
            return Defaults.RESIDENTIAL_CAPACITY
        if zone_type == Defaults.INDUSTRIAL:
            return Defaults.INDUSTRIAL_CAPACITY
        if zone_type == Defaults.COMMERCIAL:
            return Defaults.COMMERCIAL_CAPACITY
        raise ValueError(f"Unknown zone type: {zone_type}")

    @staticmethod
    def abandon_threshold_for(zone_type: str) -> int:
        if zone_type == Defaults.COMMERCIAL:
            return Defaults.ABANDON_TRIGGER_TICKS_BASE * Defaults.COMMERCIAL_ABANDON_FACTOR
        return Defaults.ABANDON_TRIGGER_TICKS_BASE

    # ------------------------------------------------------------------
    def __init__(self, zone_type: str, stage: int = 1) -> None:
        self.zone_type = zone_type
        self.stage = stage
        self.final = False
        self.completed_at: int | None = None

        self.residents = 0
        self.employees = 0
        self.supplies = 0

        self.idle_ticks = 0
        self.abandon_phase = 0

    @property
    def capacity(self) -> int:
        return self.capacity_for(self.zone_type)

    def is_abandoning(self) -> bool:
        return self.abandon_phase > 0

    def is_active(self) -> bool:
        """Finished and not counting down to removal."""
        return self.final and self.abandon_phase == 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def advance_construction(self) -> None:
        if self.final:
            return
        if self.stage < Defaults.BUILDING_FINAL_STAGE:
            self.stage += 1
        if self.stage >= Defaults.BUILDING_FINAL_STAGE:
            self.final = True
            self.completed_at = int(time.time())

    # ------------------------------------------------------------------
    # Occupancy (all capped by type)
    # ------------------------------------------------------------------
    def add_resident(self) -> bool:
        if self.zone_type != Defaults.RESIDENTIAL or self.residents >= self.capacity:
            return False
        self.residents += 1
        return True

    def add_supply(self) -> bool:
        if self.zone_type != Defaults.COMMERCIAL or self.supplies >= Defaults.MAX_COMMERCIAL_SUPPLIES:
            return False
        self.supplies += 1
        return True

    # ------------------------------------------------------------------
    # Abandonment predicates
    # ------------------------------------------------------------------
    def is_open(self, customer_pool: int) -> bool:
        """Commercial is open with staff, stock and enough customers in town."""
        return (self.employees >= 1
                and self.supplies >= Defaults.COMMERCIAL_SUPPLY_NEED
                and customer_pool >= Defaults.COMMERCIAL_CUSTOMER_NEED)

    def is_failing(self, customer_pool: int) -> bool:
        if self.zone_type == Defaults.RESIDENTIAL:
            return self.residents == 0
        if self.zone_type == Defaults.INDUSTRIAL:
            return self.employees == 0
        return not self.is_open(customer_pool)

    def customers_give_up(self) -> bool:
        """Visitors turn away from an unstaffed, empty shop."""
        return self.zone_type == Defaults.COMMERCIAL and self.supplies == 0 and self.employees == 0

    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        out = {"type": self.zone_type, "stage": self.stage, "final": self.final}
        if self.residents:
            out["residents"] = self.residents
        if self.employees:
            out["employees"] = self.employees
        if self.supplies:
            out["supplies"] = self.supplies
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        if self.abandon_phase:
            out["abandonPhase"] = self.abandon_phase
        return out

    def __repr__(self):
        return f"<Building {self.zone_type} stage={self.stage} final={self.final}>"
