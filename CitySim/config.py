# config.py
from dataclasses import dataclass

@dataclass(frozen=True)
class Defaults:
    # grid
    WIDTH:  int = 64
    HEIGHT: int = 64
    DEFAULT_TERRAIN: str = "grass"
    WATER_TERRAIN:   str = "water"

    ZONE_TYPES = ["R", "C", "I"]
    RESIDENTIAL: str = "R"
    COMMERCIAL:  str = "C"
    INDUSTRIAL:  str = "I"

    # neighbour scan order used by path-finding and adjacency lookups
    DIRECTION_VECTORS = [(1, 0), (-1, 0), (0, 1), (0, -1)]

    # PLAYERS & COSTS

    PLAYER_DEFAULT_NAME: str = "Player"
    PLAYER_STARTING_MONEY: int = 100_000
    BOT_NAME: str = "Planner"
    BOT_STARTING_MONEY: int = 50_000

    ZONE_COST: int = 100
    ROAD_COST: int = 20
    STRUCTURE_COSTS = {
        "power_plant": 5000,
    }

    # DEMAND

    DEMAND_MIN: int = -50
    DEMAND_MAX: int = 120
    DEMAND_DRIFT: int = 2
    INITIAL_DEMAND = {"residential": 10, "commercial": 5, "industrial": 5}

    # BUILDINGS

    BUILDING_FINAL_STAGE: int = 3
    RESIDENTIAL_CAPACITY: int = 10
    INDUSTRIAL_CAPACITY:  int = 4
    COMMERCIAL_CAPACITY:  int = 2
    MAX_COMMERCIAL_SUPPLIES: int = 8
    COMMERCIAL_SUPPLY_NEED:   int = 1
    COMMERCIAL_CUSTOMER_NEED: int = 5

    ABANDON_TRIGGER_TICKS_BASE: int = 5    # R & I
    COMMERCIAL_ABANDON_FACTOR:  int = 3    # commercial takes 3x longer
    ABANDON_PHASE_TICKS:        int = 3

    # GROWTH

    NEW_APPLICANTS_PER_TICK: int = 3
    APPLICANT_MAX_WAIT:      int = 5

    # FEEDBACK

    UNEMPLOYMENT_HIGH_RATIO: float = 0.25
    UNEMPLOYMENT_LOW_RATIO:  float = 0.05
    OUT_MIGRATION_CHANCE_SCALE: float = 0.1
    OUT_MIGRATION_MIN: int = 2
    OUT_MIGRATION_MAX: int = 5
    UNFILLED_JOBS_BONUS_DIVISOR: int = 10
    UNFILLED_JOBS_BONUS_CAP:     int = 6

    # ECONOMY

    INCOME_PER_EMPLOYED_DIVISOR:   int = 10
    INCOME_PER_POPULATION_DIVISOR: int = 20

    # AI CONTROLLER

    AI_ACTION_INTERVAL:      int   = 4
    AI_MIN_MONEY:            int   = 200
    AI_ZONE_ATTEMPTS:        int   = 2
    AI_ROAD_EXTEND_CHANCE:   float = 0.9
    AI_ZONE_AFTER_ROAD_BIAS: float = 0.35
    AI_SEED_ROAD_ARM:        int   = 3
    AI_ZONE_SHUFFLE_WINDOW:  int   = 32
    AI_COMMERCIAL_BIAS:      int   = 5

    # ROAD GROWTH

    ROAD_MAX_ATTEMPTS:   int   = 3
    ROAD_BRANCH_CHANCE:  float = 0.35
    ROAD_CURVE_CHANCE:   float = 0.25
    ROAD_MIN_MONEY:      int   = 5
    RECENT_ROAD_TICKS:   int   = 2

    # PATHFINDING

    PATHFINDING_METHOD = "NUMBA"
    # "NUMBA" "PYTHON"
    PATH_LIMIT_LOCAL:   int = 200
    PATH_LIMIT_FREIGHT: int = 400

    # TRAFFIC

    TRAFFIC_PERIOD_SECONDS: float = 0.1
    TICK_PERIOD_SECONDS:    float = 1.0

    VEHICLE_SPEED: float = 2.0
    GOODS_SPEED:   float = 2.4
    CITIZEN_SPEED: float = 1.5

    VEHICLE_SPAWN_INTERVAL: float = 1.0
    VEHICLE_POPULATION_DIVISOR: int = 25
    VEHICLE_MAX: int = 120
    VEHICLE_MAX_SPAWN_PER_INTERVAL: int = 8

    GOODS_SPAWN_INTERVAL: float = 1.5
    GOODS_MAX: int = 300
    GOODS_SPAWN_TRIES: int = 3

    CITIZEN_SPAWN_INTERVAL: float = 2.0
    CITIZEN_GROUPS_MAX: int = 200
    CITIZEN_SPAWN_TRIES: int = 3
    CITIZEN_GROUP_MIN: int = 3
    CITIZEN_GROUP_MAX: int = 8
    CITIZEN_DWELL_MIN: float = 5.0
    CITIZEN_DWELL_MAX: float = 15.0

    # EVENTS & TRANSPORT

    SUBSCRIBER_QUEUE_SIZE: int = 128
    SERVER_PORT: int = 8080
    SERVER_MAX_PORT_TRIES: int = 100
