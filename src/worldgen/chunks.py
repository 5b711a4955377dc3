"""Chunk addressing and the lazily-populated chunk cache."""

import threading
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Protocol

import numpy as np
import structlog
from numpy.typing import NDArray

from .exceptions import ChunkStoreError
from .terrain_types import Biome, Cell

logger = structlog.get_logger()

CHUNK_SIZE = 512


def chunk_coords(x: int, y: int, size: int = CHUNK_SIZE) -> tuple[int, int]:
    """Convert world coordinates to chunk coordinates (floor division)."""
    return (x // size, y // size)


def local_coords(x: int, y: int, size: int = CHUNK_SIZE) -> tuple[int, int]:
    """Convert world coordinates to non-negative offsets within a chunk."""
    return (x % size, y % size)


def world_coords(
    chunk_x: int, chunk_y: int, local_x: int, local_y: int, size: int = CHUNK_SIZE
) -> tuple[int, int]:
    """Convert chunk + local offset to world coordinates."""
    return (chunk_x * size + local_x, chunk_y * size + local_y)


@dataclass(frozen=True, eq=False)
class Chunk:
    """A size x size block of terrain, indexed ``[local_y, local_x]``.

    The arrays are made read-only on construction.
    """

    chunk_x: int
    chunk_y: int
    size: int
    elevation: NDArray[np.float64]
    moisture: NDArray[np.float64]
    temperature: NDArray[np.float64]
    biome: NDArray[np.uint8]  # Biome codes

    def __post_init__(self) -> None:
        expected = (self.size, self.size)
        for name in ("elevation", "moisture", "temperature", "biome"):
            array = getattr(self, name)
            if array.shape != expected:
                raise ValueError(f"{name} has shape {array.shape}, expected {expected}")
            array.flags.writeable = False

    @property
    def origin(self) -> tuple[int, int]:
        """World coordinates of local (0, 0)."""
        return world_coords(self.chunk_x, self.chunk_y, 0, 0, self.size)

    def cell(self, local_x: int, local_y: int) -> Cell:
        """Terrain record at a local offset."""
        return Cell(
            elevation=float(self.elevation[local_y, local_x]),
            moisture=float(self.moisture[local_y, local_x]),
            temperature=float(self.temperature[local_y, local_x]),
            biome=Biome.from_code(int(self.biome[local_y, local_x])),
        )

    def biome_at(self, local_x: int, local_y: int) -> Biome:
        return Biome.from_code(int(self.biome[local_y, local_x]))

    def biome_counts(self) -> dict[Biome, int]:
        """Tile count per biome, for summaries and rendering."""
        counts = Counter(self.biome.ravel().tolist())
        return {Biome.from_code(code): n for code, n in sorted(counts.items())}

    def same_terrain(self, other: "Chunk") -> bool:
        """Whether two chunks hold bit-identical terrain at the same place."""
        return (
            (self.chunk_x, self.chunk_y, self.size) == (other.chunk_x, other.chunk_y, other.size)
            and np.array_equal(self.elevation, other.elevation)
            and np.array_equal(self.moisture, other.moisture)
            and np.array_equal(self.temperature, other.temperature)
            and np.array_equal(self.biome, other.biome)
        )


ChunkFactory = Callable[[int, int], Chunk]


class ChunkStore(Protocol):
    """Persistence collaborator for chunks."""

    def load_or_generate(self, chunk_x: int, chunk_y: int, generate: ChunkFactory) -> Chunk:
        ...

    def save(self, chunk: Chunk, chunk_x: int, chunk_y: int) -> None:
        ...


class ChunkCache:
    """Maps world coordinates to chunks, generating each chunk at most once.

    Lookups for different chunks proceed independently. Concurrent lookups
    for the same missing chunk wait on a per-chunk lock so only one of them
    generates it. Entries are never evicted.
    """

    def __init__(
        self,
        generate: ChunkFactory,
        chunk_size: int = CHUNK_SIZE,
        store: ChunkStore | None = None,
    ):
        self._generate = generate
        self.chunk_size = chunk_size
        self.store = store
        self._chunks: dict[tuple[int, int], Chunk] = {}
        self._locks: dict[tuple[int, int], threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._generation_count = 0

    @property
    def generation_count(self) -> int:
        """Number of times the generator has been invoked."""
        with self._registry_lock:
            return self._generation_count

    def __len__(self) -> int:
        return len(self._chunks)

    def __contains__(self, key: object) -> bool:
        return key in self._chunks

    def chunk_coords(self, x: int, y: int) -> tuple[int, int]:
        return chunk_coords(x, y, self.chunk_size)

    def local_coords(self, x: int, y: int) -> tuple[int, int]:
        return local_coords(x, y, self.chunk_size)

    def _key_lock(self, key: tuple[int, int]) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def _counted_generate(self, chunk_x: int, chunk_y: int) -> Chunk:
        with self._registry_lock:
            self._generation_count += 1
        logger.debug("chunk_generating", chunk_x=chunk_x, chunk_y=chunk_y)
        return self._generate(chunk_x, chunk_y)

    def _materialize(self, chunk_x: int, chunk_y: int) -> Chunk:
        if self.store is None:
            return self._counted_generate(chunk_x, chunk_y)
        try:
            return self.store.load_or_generate(chunk_x, chunk_y, self._counted_generate)
        except (ChunkStoreError, OSError) as e:
            logger.warning(
                "chunk_store_failed",
                chunk_x=chunk_x,
                chunk_y=chunk_y,
                error=str(e),
            )
            return self._counted_generate(chunk_x, chunk_y)

    def get_chunk(self, chunk_x: int, chunk_y: int) -> Chunk:
        """Return the chunk at chunk coordinates, generating it if needed."""
        key = (chunk_x, chunk_y)
        chunk = self._chunks.get(key)
        if chunk is not None:
            return chunk

        with self._key_lock(key):
            chunk = self._chunks.get(key)
            if chunk is None:
                chunk = self._materialize(chunk_x, chunk_y)
                self._chunks[key] = chunk
                logger.debug("chunk_cached", chunk_x=chunk_x, chunk_y=chunk_y, cached=len(self._chunks))
        return chunk

    def get_chunk_at(self, x: int, y: int) -> Chunk:
        """Return the chunk containing world coordinates (x, y)."""
        return self.get_chunk(*self.chunk_coords(x, y))

    def get_tile(self, x: int, y: int) -> Cell:
        """Terrain record at world coordinates (x, y)."""
        chunk_x, chunk_y = self.chunk_coords(x, y)
        local_x, local_y = self.local_coords(x, y)
        return self.get_chunk(chunk_x, chunk_y).cell(local_x, local_y)

    def get_biome(self, x: int, y: int) -> Biome:
        """Biome at world coordinates (x, y)."""
        chunk_x, chunk_y = self.chunk_coords(x, y)
        local_x, local_y = self.local_coords(x, y)
        return self.get_chunk(chunk_x, chunk_y).biome_at(local_x, local_y)
