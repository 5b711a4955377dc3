"""Chunk persistence: fixed-width binary records on disk.

Each chunk is stored as ``chunk_{x}_{y}.bin``: one 7-byte record per tile in
row-major order, holding big-endian u16 elevation, moisture and temperature
(fixed point, x1000) followed by a u8 biome code.
"""

import logging
import math
from pathlib import Path

import numpy as np

from ..chunks import Chunk, ChunkFactory
from ..exceptions import ChunkStoreError
from ..terrain_types import VALID_BIOME_CODES

logger = logging.getLogger(__name__)

RECORD_DTYPE = np.dtype([
    ("elevation", ">u2"),
    ("moisture", ">u2"),
    ("temperature", ">u2"),
    ("biome", "u1"),
])
RECORD_SIZE = RECORD_DTYPE.itemsize  # 7 bytes
FIXED_POINT_SCALE = 1000


def _quantize(values: np.ndarray) -> np.ndarray:
    return np.floor(values * FIXED_POINT_SCALE + 0.5).astype(np.uint16)


def encode_chunk(chunk: Chunk) -> bytes:
    """Serialize a chunk's terrain to the binary record layout."""
    records = np.empty((chunk.size, chunk.size), dtype=RECORD_DTYPE)
    records["elevation"] = _quantize(chunk.elevation)
    records["moisture"] = _quantize(chunk.moisture)
    records["temperature"] = _quantize(chunk.temperature)
    records["biome"] = chunk.biome
    return records.tobytes()


def decode_chunk(data: bytes, chunk_x: int, chunk_y: int, expected_size: int | None = None) -> Chunk:
    """Parse a binary payload back into a chunk.

    The chunk edge length is derived from the payload length.

    Raises:
        ChunkStoreError: If the payload is truncated, not square, the wrong
            size, holds an unknown biome code, or a value above 1000.
    """
    if len(data) == 0 or len(data) % RECORD_SIZE != 0:
        raise ChunkStoreError(
            f"Chunk ({chunk_x}, {chunk_y}) payload of {len(data)} bytes "
            f"is not a whole number of {RECORD_SIZE}-byte records"
        )
    cells = len(data) // RECORD_SIZE
    size = math.isqrt(cells)
    if size * size != cells:
        raise ChunkStoreError(f"Chunk ({chunk_x}, {chunk_y}) has {cells} cells, not a square")
    if expected_size is not None and size != expected_size:
        raise ChunkStoreError(
            f"Chunk ({chunk_x}, {chunk_y}) is {size}x{size}, expected {expected_size}x{expected_size}"
        )

    records = np.frombuffer(data, dtype=RECORD_DTYPE).reshape(size, size)
    codes = np.unique(records["biome"])
    unknown = [int(c) for c in codes if int(c) not in VALID_BIOME_CODES]
    if unknown:
        raise ChunkStoreError(f"Chunk ({chunk_x}, {chunk_y}) has unknown biome codes {unknown}")
    for name in ("elevation", "moisture", "temperature"):
        peak = int(records[name].max())
        if peak > FIXED_POINT_SCALE:
            raise ChunkStoreError(
                f"Chunk ({chunk_x}, {chunk_y}) {name} value {peak} exceeds {FIXED_POINT_SCALE}"
            )

    return Chunk(
        chunk_x=chunk_x,
        chunk_y=chunk_y,
        size=size,
        elevation=records["elevation"].astype(np.float64) / FIXED_POINT_SCALE,
        moisture=records["moisture"].astype(np.float64) / FIXED_POINT_SCALE,
        temperature=records["temperature"].astype(np.float64) / FIXED_POINT_SCALE,
        biome=records["biome"].astype(np.uint8),
    )


class FileChunkStore:
    """Stores chunks as binary files in one directory.

    Loaded chunks carry quantized values, so they match a freshly generated
    chunk to three decimals rather than bit-for-bit.
    """

    def __init__(self, directory: Path, chunk_size: int | None = None):
        self.directory = Path(directory)
        self.chunk_size = chunk_size

    def path_for(self, chunk_x: int, chunk_y: int) -> Path:
        return self.directory / f"chunk_{chunk_x}_{chunk_y}.bin"

    def load(self, chunk_x: int, chunk_y: int) -> Chunk:
        """Load a chunk from disk.

        Raises:
            FileNotFoundError: If the chunk was never saved.
            ChunkStoreError: If the file cannot be decoded.
        """
        path = self.path_for(chunk_x, chunk_y)
        if not path.exists():
            raise FileNotFoundError(f"Chunk file not found: {path}")
        return decode_chunk(path.read_bytes(), chunk_x, chunk_y, self.chunk_size)

    def save(self, chunk: Chunk, chunk_x: int, chunk_y: int) -> None:
        """Write a chunk to disk. Failures are logged, not raised."""
        path = self.path_for(chunk_x, chunk_y)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(encode_chunk(chunk))
        except OSError as e:
            logger.warning(f"Failed to save chunk ({chunk_x}, {chunk_y}) to {path}: {e}")
            return
        logger.debug(f"Saved chunk ({chunk_x}, {chunk_y}) to {path}")

    def load_or_generate(self, chunk_x: int, chunk_y: int, generate: ChunkFactory) -> Chunk:
        """Load a saved chunk, or generate and save it.

        Any load failure falls back to generation.
        """
        try:
            chunk = self.load(chunk_x, chunk_y)
            logger.debug(f"Loaded chunk ({chunk_x}, {chunk_y}) from {self.directory}")
            return chunk
        except FileNotFoundError:
            pass
        except (ChunkStoreError, OSError) as e:
            logger.warning(f"Regenerating chunk ({chunk_x}, {chunk_y}): {e}")

        chunk = generate(chunk_x, chunk_y)
        self.save(chunk, chunk_x, chunk_y)
        return chunk
