"""Procedural terrain generation package.

This package implements seeded noise fields (elevation, moisture,
temperature), biome classification, landform shaping, coastal river
carving and chunk persistence.
"""

from .classification import classify_biome, classify_grid
from .config import TerrainConfig
from .generator import ChunkGenerator, GenerationResult
from .hydrology import River, RiverTracer
from .landforms import Landmark, TerrainGrid, shape_terrain
from .noise import NoiseSource, SeededRandom, WorldSeed
from .persistence import FileChunkStore, decode_chunk, encode_chunk

__all__ = [
    "ChunkGenerator",
    "FileChunkStore",
    "GenerationResult",
    "Landmark",
    "NoiseSource",
    "River",
    "RiverTracer",
    "SeededRandom",
    "TerrainConfig",
    "TerrainGrid",
    "WorldSeed",
    "classify_biome",
    "classify_grid",
    "decode_chunk",
    "encode_chunk",
    "shape_terrain",
]
