"""Chunk generation: fields, shaping, classification and rivers."""

import logging

import numpy as np
from numpy.typing import NDArray

from ..chunks import Chunk, world_coords
from ..terrain_types import Biome
from .classification import classify_grid
from .config import TerrainConfig
from .fields import make_climate, make_elevation, tile_axes
from .hydrology import River, RiverTracer
from .landforms import Landmark, TerrainGrid, shape_terrain
from .noise import WorldSeed

logger = logging.getLogger(__name__)


class GenerationResult:
    """A generated chunk with the intermediate data that produced it."""

    def __init__(
        self,
        chunk: Chunk,
        raw_elevation: NDArray[np.float64],
        landmark: Landmark | None,
        rivers: list[River],
    ):
        self.chunk = chunk
        self.raw_elevation = raw_elevation
        self.landmark = landmark
        self.rivers = rivers


class ChunkGenerator:
    """Builds immutable chunks from a world seed.

    Generation only reads the seed's noise field, so one generator can serve
    several threads as long as they work on different chunks.
    """

    def __init__(self, seed: WorldSeed, config: TerrainConfig | None = None):
        self.seed = seed
        self.config = config or TerrainConfig()
        self.river_tracer = RiverTracer(self.config.rivers)

    @property
    def chunk_size(self) -> int:
        return self.config.chunk_size

    def generate(self, chunk_x: int, chunk_y: int) -> Chunk:
        """Generate the chunk at chunk coordinates."""
        return self.generate_with_details(chunk_x, chunk_y).chunk

    __call__ = generate

    def generate_with_details(self, chunk_x: int, chunk_y: int) -> GenerationResult:
        """Generate a chunk and keep the intermediate products.

        Args:
            chunk_x: Chunk column.
            chunk_y: Chunk row.

        Returns:
            GenerationResult wrapping the finished chunk.
        """
        size = self.config.chunk_size
        noise = self.seed.noise
        origin_x, origin_y = world_coords(chunk_x, chunk_y, 0, 0, size)
        xs, ys = tile_axes(origin_x, origin_y, size, size)

        logger.debug(f"Generating chunk ({chunk_x}, {chunk_y}) at ({origin_x}, {origin_y})")

        # Stage A: Elevation
        raw_elevation = make_elevation(noise, xs, ys, self.config.elevation)

        # Stage B: Landform shaping
        grid = TerrainGrid(raw_elevation, origin_x, origin_y)
        shape_terrain(grid, noise, self.config.shaping)
        elevation = grid.elevation

        # Stage C: Climate and biomes
        moisture, temperature = make_climate(noise, xs, ys, self.config.climate)
        biome = classify_grid(elevation, moisture, temperature, self.config.classification)

        # Stage D: Rivers
        rivers: list[River] = []
        if self.config.rivers.enabled:
            rivers = self.river_tracer.carve(elevation, moisture, biome, origin_x, origin_y)

        chunk = Chunk(
            chunk_x=chunk_x,
            chunk_y=chunk_y,
            size=size,
            elevation=elevation,
            moisture=moisture,
            temperature=temperature,
            biome=biome,
        )
        _log_chunk_stats(chunk, grid.landmark, rivers)

        return GenerationResult(
            chunk=chunk,
            raw_elevation=raw_elevation,
            landmark=grid.landmark,
            rivers=rivers,
        )


def _log_chunk_stats(chunk: Chunk, landmark: Landmark | None, rivers: list[River]) -> None:
    """Log chunk generation statistics."""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    total = chunk.size * chunk.size
    counts = chunk.biome_counts()
    water = sum(n for b, n in counts.items() if b.is_water)

    logger.debug(
        f"Chunk ({chunk.chunk_x}, {chunk.chunk_y}) stats ({total:,} tiles): "
        f"water {water / total:.1%}, landmark {landmark.value if landmark else 'none'}, "
        f"{len(rivers)} rivers"
    )
    for biome in Biome:
        count = counts.get(biome, 0)
        if count:
            logger.debug(f"  {biome.value}: {count:,} ({count / total * 100:.1f}%)")
