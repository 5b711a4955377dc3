"""Shared test fixtures for world generation tests."""

import itertools
from typing import Callable

import numpy as np
import pytest

from worldgen.chunks import Chunk
from worldgen.settlements.models import RouteKind
from worldgen.terrain.config import TerrainConfig
from worldgen.terrain.generator import ChunkGenerator
from worldgen.terrain.noise import SeededRandom, WorldSeed
from worldgen.terrain_types import LAND_ROUTE_BIOMES, SEA_ROUTE_BIOMES, Biome, Cell

SEED = "ANNA-7742"

# Representative elevation for each biome on synthetic maps
BIOME_ELEVATION = {
    Biome.OCEAN: 0.05,
    Biome.WATER: 0.15,
    Biome.BEACH: 0.185,
}


class BiomeMap:
    """Tile source backed by a function of world coordinates."""

    def __init__(self, biome_at: Callable[[int, int], Biome]):
        self.biome_at = biome_at
        self.queries = 0

    def get_tile(self, x: int, y: int) -> Cell:
        self.queries += 1
        biome = self.biome_at(x, y)
        return Cell(
            elevation=BIOME_ELEVATION.get(biome, 0.3),
            moisture=0.5,
            temperature=0.3,
            biome=biome,
        )


def make_chunk(
    biome: np.ndarray,
    chunk_x: int = 0,
    chunk_y: int = 0,
    elevation: np.ndarray | None = None,
) -> Chunk:
    """Build a chunk from a square array of Biome members."""
    size = biome.shape[0]
    codes = np.vectorize(lambda b: b.code, otypes=[np.uint8])(biome)
    if elevation is None:
        elevation = np.vectorize(lambda b: BIOME_ELEVATION.get(b, 0.3), otypes=[np.float64])(biome)
    return Chunk(
        chunk_x=chunk_x,
        chunk_y=chunk_y,
        size=size,
        elevation=np.array(elevation, dtype=np.float64),
        moisture=np.full((size, size), 0.5),
        temperature=np.full((size, size), 0.3),
        biome=codes,
    )


def check_network(tiles, result, min_distance: float = 6.0) -> None:
    """Assert spacing, tree shape and route sanity of an expansion result."""
    by_id = {s.id: s for s in result.settlements}
    assert len(by_id) == len(result.settlements)

    for a, b in itertools.combinations(result.settlements, 2):
        assert a.position.distance(b.position) >= min_distance

    assert len(result.routes) == len(result.settlements) - 1
    for route in result.routes:
        origin = by_id[route.from_settlement_id]
        target = by_id[route.to_settlement_id]
        assert route.complete
        assert route.path[0] == origin.position
        assert route.path[-1].chebyshev(target.position) <= 1
        assert route.distance == len(route.path)
        allowed = SEA_ROUTE_BIOMES if route.kind is RouteKind.SEA else LAND_ROUTE_BIOMES
        for step in route.path[1:]:
            assert tiles.get_tile(step.x, step.y).biome in allowed


def flat_chunk(chunk_x: int, chunk_y: int, size: int = 8, biome: Biome = Biome.GRASSLAND) -> Chunk:
    """Uniform chunk, cheap enough to build for any size."""
    return Chunk(
        chunk_x=chunk_x,
        chunk_y=chunk_y,
        size=size,
        elevation=np.full((size, size), 0.3),
        moisture=np.full((size, size), 0.5),
        temperature=np.full((size, size), 0.3),
        biome=np.full((size, size), biome.code, dtype=np.uint8),
    )


@pytest.fixture
def world_seed() -> WorldSeed:
    """World seed for the reference seed string."""
    return WorldSeed.from_string(SEED)


@pytest.fixture
def rng() -> SeededRandom:
    """Fresh PRNG for the reference seed string."""
    return SeededRandom(SEED)


@pytest.fixture
def small_config() -> TerrainConfig:
    """Terrain config with 32-tile chunks."""
    return TerrainConfig(chunk_size=32)


@pytest.fixture
def generator(world_seed: WorldSeed, small_config: TerrainConfig) -> ChunkGenerator:
    """Chunk generator for 32-tile chunks."""
    return ChunkGenerator(world_seed, small_config)


@pytest.fixture
def coast_map() -> BiomeMap:
    """Straight east-west coastline.

    Ocean for y < 0, a beach row at y == 0 and grassland for y > 0.
    """

    def biome_at(x: int, y: int) -> Biome:
        if y < 0:
            return Biome.OCEAN
        if y == 0:
            return Biome.BEACH
        return Biome.GRASSLAND

    return BiomeMap(biome_at)


@pytest.fixture
def land_map() -> BiomeMap:
    """Grassland everywhere."""
    return BiomeMap(lambda x, y: Biome.GRASSLAND)


@pytest.fixture
def ocean_map() -> BiomeMap:
    """Ocean everywhere."""
    return BiomeMap(lambda x, y: Biome.OCEAN)


@pytest.fixture
def bay_chunk() -> Chunk:
    """32x32 chunk: ocean rows 0-9, beach row 10, grassland below.

    An isolated beach tile at local (15, 20) cannot reach the ocean.
    """
    biome = np.full((32, 32), Biome.GRASSLAND, dtype=object)
    biome[:10, :] = Biome.OCEAN
    biome[10, :] = Biome.BEACH
    biome[20, 15] = Biome.BEACH
    elevation = np.full((32, 32), 0.3)
    elevation[:10, :] = 0.05
    elevation[10, :] = 0.185
    elevation[20, 15] = 0.185
    return make_chunk(biome, elevation=elevation)


@pytest.fixture
def chunk_from_biomes() -> Callable[..., Chunk]:
    """Factory building a chunk from an array of Biome members."""
    return make_chunk


@pytest.fixture
def uniform_chunk() -> Callable[..., Chunk]:
    """Factory building a uniform chunk."""
    return flat_chunk


@pytest.fixture
def beach_map() -> BiomeMap:
    """Beach everywhere."""
    return BiomeMap(lambda x, y: Biome.BEACH)


@pytest.fixture
def island_map() -> BiomeMap:
    """A single grassland tile at the origin in open ocean."""
    return BiomeMap(lambda x, y: Biome.GRASSLAND if (x, y) == (0, 0) else Biome.OCEAN)


@pytest.fixture
def biome_map() -> Callable[[Callable[[int, int], Biome]], BiomeMap]:
    """Factory building a tile source from a biome function."""
    return BiomeMap


@pytest.fixture
def assert_network() -> Callable[..., None]:
    """Checker for expansion results, see ``check_network``."""
    return check_network
