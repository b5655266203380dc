"""Unit tests for the AI planner."""

import pytest

from CitySim.agents.city_structure_entities.tile import Zone
from CitySim.config import Defaults


@pytest.fixture
def bot(city):
    return city.create_bot()


class TestAIController:
    """Tests for AIController."""

    def test_bot_is_registered_player(self, city, bot):
        assert city.bot_id == bot.player.id
        assert city.players[bot.player.id].name == Defaults.BOT_NAME
        assert bot.player.money == Defaults.BOT_STARTING_MONEY
        assert city.create_bot() is bot

    def test_seed_road_cross(self, city, bot):
        bot.ensure_some_roads()
        cx, cy = city.width // 2, city.height // 2
        arm = Defaults.AI_SEED_ROAD_ARM
        assert int(city.road_map.sum()) == 4 * arm + 1
        assert city.road_map[cy, cx - arm] and city.road_map[cy + arm, cx]
        assert bot.player.money == Defaults.BOT_STARTING_MONEY - (4 * arm + 1) * Defaults.ROAD_COST

    def test_seed_skipped_when_roads_exist(self, city, bot, lay_roads):
        lay_roads([(0, 0)])
        bot.ensure_some_roads()
        assert int(city.road_map.sum()) == 1

    def test_pick_residential_by_default(self, bot):
        assert bot.pick_zone_type() == "R"

    def test_pick_commercial(self, city, bot):
        city.demand.residential = -50
        city.demand.commercial = 50
        assert bot.pick_zone_type() == "C"

    def test_pick_industrial_with_unemployment(self, city, bot):
        city.demand.residential = -50
        city.demand.commercial = -50
        city.demand.industrial = 100
        city.population = 20
        assert bot.pick_zone_type() == "I"

    def test_encases_road(self, city, bot, lay_roads):
        lay_roads([(1, 0)])
        city.get_tile(0, 1).set_zone(Zone("R", "p"))
        city.get_tile(2, 1).set_zone(Zone("R", "p"))
        assert not bot.encases_road(1, 1)
        city.get_tile(1, 2).set_zone(Zone("R", "p"))
        assert bot.encases_road(1, 1)

    def test_zone_spot_touches_road(self, city, bot, lay_roads):
        lay_roads([(5, 5), (6, 5)])
        x, y = bot.find_zone_spot_near_road()
        assert city.get_tile(x, y).is_empty()
        assert any(city.road_map[y + dy, x + dx] for dx, dy in Defaults.DIRECTION_VECTORS
                   if city.in_bounds(x + dx, y + dy))

    def test_no_spot_without_roads(self, bot):
        assert bot.find_zone_spot_near_road() is None

    def test_place_zones_next_to_roads(self, city, bot, lay_roads):
        lay_roads([(x, 5) for x in range(3, 10)])
        placed = bot.place_zones()
        assert 1 <= placed <= Defaults.AI_ZONE_ATTEMPTS
        zoned = [t for t in city.iter_tiles() if t.zone is not None]
        assert len(zoned) == placed
        assert all(t.zone.owner == bot.player.id for t in zoned)

    def test_waits_for_interval(self, city, bot):
        city.tick = Defaults.AI_ACTION_INTERVAL - 1
        bot.step()
        assert not city.road_map.any()
        city.tick = Defaults.AI_ACTION_INTERVAL
        bot.step()
        assert city.road_map.any()
        assert bot.last_action_tick == Defaults.AI_ACTION_INTERVAL

    def test_idle_when_poor(self, city, bot):
        bot.player.money = Defaults.AI_MIN_MONEY - 1
        city.tick = 10
        bot.step()
        assert not city.road_map.any()
