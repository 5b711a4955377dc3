"""Seeded infinite world generation."""

from .chunks import (
    CHUNK_SIZE,
    Chunk,
    ChunkCache,
    ChunkStore,
    chunk_coords,
    local_coords,
    world_coords,
)
from .config import Config, WorldConfig, find_config, list_configs, load_config
from .exceptions import (
    ChunkStoreError,
    InvariantViolationError,
    ShapingError,
    WorldAlreadySeededError,
    WorldError,
    WorldNotSeededError,
)
from .session import WorldSession
from .terrain_types import Biome, Cell
from .types import DIRECTION_DELTAS, Direction, Position

__all__ = [
    # Types
    "Biome",
    "Cell",
    "Direction",
    "DIRECTION_DELTAS",
    "Position",
    # Chunks
    "CHUNK_SIZE",
    "Chunk",
    "ChunkCache",
    "ChunkStore",
    "chunk_coords",
    "local_coords",
    "world_coords",
    # Config
    "Config",
    "WorldConfig",
    "find_config",
    "list_configs",
    "load_config",
    # Session
    "WorldSession",
    # Exceptions
    "WorldError",
    "WorldNotSeededError",
    "WorldAlreadySeededError",
    "InvariantViolationError",
    "ShapingError",
    "ChunkStoreError",
]
