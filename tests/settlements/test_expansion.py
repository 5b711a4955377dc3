"""Tests for frontier expansion of the settlement network."""

import threading

import pytest

from worldgen.chunks import Chunk
from worldgen.settlements.config import ExpansionConfig
from worldgen.settlements.expansion import ExpansionDriver
from worldgen.settlements.founding import SettlementFounder
from worldgen.settlements.locations import LocationFinder
from worldgen.settlements.models import RouteKind, Settlement, SettlementSite
from worldgen.settlements.routes import RouteFinder
from worldgen.terrain.noise import SeededRandom
from worldgen.terrain_types import Biome
from worldgen.types import Position


def _driver(tiles, config: ExpansionConfig | None = None, founder=None) -> ExpansionDriver:
    return ExpansionDriver(LocationFinder(tiles), RouteFinder(tiles), founder, config)


def _seed(rng: SeededRandom, x: int = 0, y: int = 0) -> Settlement:
    return SettlementFounder().create_settlement_at(Position(x=x, y=y), SettlementSite.COASTAL, rng)


class CancelAfterFirst(SettlementFounder):
    """Founder that raises a cancel flag after its first settlement."""

    def __init__(self, cancel: threading.Event):
        super().__init__()
        self.cancel = cancel

    def create_settlement_at(self, position, site, rng):
        settlement = super().create_settlement_at(position, site, rng)
        self.cancel.set()
        return settlement


class TestExpand:
    """Tests for ExpansionDriver.expand."""

    def test_reaches_target(self, coast_map, rng: SeededRandom) -> None:
        """Along an endless coast the network grows to the target."""
        seed = _seed(rng)
        result = _driver(coast_map).expand(seed, rng, target_count=10)
        assert len(result) == 10
        assert result.settlements[0] is seed
        assert not result.cancelled

    def test_network_invariants(self, coast_map, rng: SeededRandom, assert_network) -> None:
        """Spacing and route shape hold for every settlement."""
        result = _driver(coast_map).expand(_seed(rng), rng, target_count=12)
        assert_network(coast_map, result)

    def test_sites(self, coast_map, rng: SeededRandom) -> None:
        """Coastal settlements sit on the beach, inland ones behind it."""
        result = _driver(coast_map).expand(_seed(rng), rng, target_count=12)
        for settlement in result.settlements:
            if settlement.site is SettlementSite.COASTAL:
                assert coast_map.get_tile(settlement.x, settlement.y).biome is Biome.BEACH
            else:
                assert settlement.y > 0

    def test_deterministic(self, coast_map) -> None:
        """The same rng seed grows the same network."""
        a = _driver(coast_map).expand(_seed(SeededRandom("grow")), SeededRandom("grow"), target_count=8)
        b = _driver(coast_map).expand(_seed(SeededRandom("grow")), SeededRandom("grow"), target_count=8)
        assert [s.id for s in a.settlements] == [s.id for s in b.settlements]
        assert [r.path for r in a.routes] == [r.path for r in b.routes]

    def test_default_target(self, coast_map, rng: SeededRandom) -> None:
        """The configured target applies when none is given."""
        result = _driver(coast_map, ExpansionConfig(target_count=4)).expand(_seed(rng), rng)
        assert len(result) == 4

    def test_target_of_one(self, coast_map, rng: SeededRandom) -> None:
        """A target already met returns only the seed."""
        seed = _seed(rng)
        result = _driver(coast_map).expand(seed, rng, target_count=1)
        assert result.settlements == [seed]
        assert result.routes == []

    def test_no_coast_stops(self, land_map, rng: SeededRandom) -> None:
        """An empty frontier ends the run early."""
        result = _driver(land_map).expand(_seed(rng), rng, target_count=5)
        assert len(result) == 1
        assert not result.cancelled


class TestCancellation:
    """Tests for cooperative cancellation."""

    def test_cancel_before_start(self, coast_map, rng: SeededRandom) -> None:
        cancel = threading.Event()
        cancel.set()
        seed = _seed(rng)
        result = _driver(coast_map).expand(seed, rng, target_count=10, cancel=cancel)
        assert result.cancelled
        assert result.settlements == [seed]

    def test_cancel_mid_run(self, coast_map, rng: SeededRandom, assert_network) -> None:
        """Cancelling stops growth at the next frontier step."""
        cancel = threading.Event()
        driver = _driver(coast_map, founder=CancelAfterFirst(cancel))
        result = driver.expand(_seed(rng), rng, target_count=30, cancel=cancel)
        assert result.cancelled
        assert 2 <= len(result) < 30
        assert_network(coast_map, result)


class TestSeaLaneFallback:
    """Tests for the sea lane fallback when no coastal neighbour is found."""

    @pytest.fixture
    def short_beach(self, biome_map):
        """Ocean to the north, with beach only for |x| <= 8 on the shore."""

        def biome_at(x: int, y: int) -> Biome:
            if y < 0:
                return Biome.OCEAN
            if y == 0 and abs(x) <= 8:
                return Biome.BEACH
            return Biome.GRASSLAND

        return biome_map(biome_at)

    def test_lane_landing_founded(self, short_beach, rng: SeededRandom) -> None:
        """The lane's beach landing becomes the next settlement."""
        result = _driver(short_beach).expand(_seed(rng), rng, target_count=2)
        assert len(result) == 2
        landed = result.settlements[1]
        assert landed.y == 0
        assert abs(landed.x) == 6
        assert result.routes[0].kind is RouteKind.SEA

    def test_fallback_disabled(self, short_beach, rng: SeededRandom) -> None:
        config = ExpansionConfig(sea_lane_fallback=False)
        result = _driver(short_beach, config).expand(_seed(rng), rng, target_count=2)
        assert len(result) == 1


class TestSeedConnectedWorld:
    """Tests for seeding a network from a chunk's coast."""

    def test_seed_on_chunk_coast(
        self, biome_map, bay_chunk: Chunk, rng: SeededRandom, assert_network
    ) -> None:
        """The first settlement sits on the chunk's reachable beach."""
        tiles = biome_map(
            lambda x, y: Biome.OCEAN if y < 10 else Biome.BEACH if y == 10 else Biome.GRASSLAND
        )
        result = _driver(tiles).seed_connected_world(bay_chunk, rng, target_count=5)
        assert 1 <= len(result) <= 5
        seed = result.settlements[0]
        assert seed.site is SettlementSite.COASTAL
        assert seed.y == 10
        assert_network(tiles, result)

    def test_no_coast(self, land_map, uniform_chunk, rng: SeededRandom) -> None:
        """A chunk without coast yields an empty result."""
        result = _driver(land_map).seed_connected_world(uniform_chunk(0, 0, size=16), rng)
        assert result.settlements == []
        assert result.routes == []
