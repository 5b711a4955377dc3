"""World session: the entry point for terrain queries and settlement growth."""

import threading

import structlog

from .chunks import Chunk, ChunkCache
from .config import Config
from .exceptions import WorldAlreadySeededError, WorldNotSeededError
from .settlements.expansion import ExpansionDriver, ExpansionResult
from .settlements.founding import SettlementFounder
from .settlements.locations import LocationFinder
from .settlements.models import Route, Settlement
from .settlements.routes import RouteFinder
from .terrain.generator import ChunkGenerator
from .terrain.noise import WorldSeed
from .terrain.persistence import FileChunkStore
from .terrain_types import Cell

logger = structlog.get_logger()


class WorldSession:
    """Owns one seeded world, its chunk cache and its settlement network.

    ``seed_world`` must be called exactly once before any terrain query.
    """

    def __init__(self, config: Config | None = None):
        self.config = config or Config()
        self._seed: WorldSeed | None = None
        self._cache: ChunkCache | None = None
        self._generator: ChunkGenerator | None = None
        self._driver: ExpansionDriver | None = None
        self._lock = threading.Lock()
        self.settlements: list[Settlement] = []
        self.routes: list[Route] = []

    @classmethod
    def from_config(cls, config: Config) -> "WorldSession":
        """Create a session, seeding it when the config names a seed."""
        session = cls(config)
        if config.world.seed is not None:
            session.seed_world(config.world.seed)
        return session

    @property
    def is_seeded(self) -> bool:
        return self._seed is not None

    @property
    def seed(self) -> WorldSeed:
        if self._seed is None:
            raise WorldNotSeededError("World has not been seeded; call seed_world() first")
        return self._seed

    @property
    def cache(self) -> ChunkCache:
        if self._cache is None:
            raise WorldNotSeededError("World has not been seeded; call seed_world() first")
        return self._cache

    @property
    def generator(self) -> ChunkGenerator:
        if self._generator is None:
            raise WorldNotSeededError("World has not been seeded; call seed_world() first")
        return self._generator

    @property
    def driver(self) -> ExpansionDriver:
        if self._driver is None:
            raise WorldNotSeededError("World has not been seeded; call seed_world() first")
        return self._driver

    def seed_world(self, seed: str) -> None:
        """Derive the world's PRNG and noise from a seed string.

        Raises:
            WorldAlreadySeededError: If the session already has a seed.
        """
        with self._lock:
            if self._seed is not None:
                raise WorldAlreadySeededError(
                    f"World already seeded with {self._seed.seed!r}"
                )

            world_seed = WorldSeed.from_string(seed)
            generator = ChunkGenerator(world_seed, self.config.terrain)
            chunk_size = self.config.world.chunk_size

            store = None
            if self.config.world.cache_dir is not None:
                store = FileChunkStore(self.config.world.cache_dir, chunk_size)

            cache = ChunkCache(generator.generate, chunk_size, store)
            settlement_cfg = self.config.settlements
            driver = ExpansionDriver(
                LocationFinder(cache, settlement_cfg.search),
                RouteFinder(cache, settlement_cfg.routes),
                SettlementFounder(),
                settlement_cfg.expansion,
            )

            self._seed = world_seed
            self._generator = generator
            self._cache = cache
            self._driver = driver

        logger.info(
            "world_seeded",
            seed=seed,
            noise_seed=world_seed.noise.seed,
            chunk_size=chunk_size,
            cache_dir=str(self.config.world.cache_dir) if store else None,
        )

    def get_tile(self, x: int, y: int) -> Cell:
        """Terrain record at world coordinates."""
        return self.cache.get_tile(x, y)

    def generate_chunk(self, chunk_x: int, chunk_y: int) -> Chunk:
        """The chunk at chunk coordinates (generated once, then cached)."""
        return self.cache.get_chunk(chunk_x, chunk_y)

    def _record(self, result: ExpansionResult) -> ExpansionResult:
        self.settlements = list(result.settlements)
        self.routes = list(result.routes)
        return result

    def expand_settlements(
        self,
        seed_settlement: Settlement,
        target_count: int | None = None,
        cancel: threading.Event | None = None,
    ) -> ExpansionResult:
        """Grow a network from ``seed_settlement``; the session keeps the result."""
        result = self.driver.expand(seed_settlement, self.seed.rng, target_count, cancel)
        return self._record(result)

    def seed_settlements(
        self,
        chunk_x: int,
        chunk_y: int,
        target_count: int | None = None,
        cancel: threading.Event | None = None,
    ) -> ExpansionResult:
        """Found a seed settlement on a chunk's coast and grow from it."""
        chunk = self.generate_chunk(chunk_x, chunk_y)
        result = self.driver.seed_connected_world(chunk, self.seed.rng, target_count, cancel)
        return self._record(result)
