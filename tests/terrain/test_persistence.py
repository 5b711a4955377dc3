"""Tests for binary chunk persistence."""

from pathlib import Path

import numpy as np
import pytest

from worldgen.chunks import Chunk
from worldgen.exceptions import ChunkStoreError
from worldgen.terrain.persistence import (
    RECORD_SIZE,
    FileChunkStore,
    decode_chunk,
    encode_chunk,
)
from worldgen.terrain_types import Biome


def _chunk(size: int = 4, chunk_x: int = 0, chunk_y: int = 0) -> Chunk:
    rng = np.random.default_rng(7)
    return Chunk(
        chunk_x=chunk_x,
        chunk_y=chunk_y,
        size=size,
        elevation=rng.random((size, size)),
        moisture=rng.random((size, size)),
        temperature=rng.random((size, size)),
        biome=np.full((size, size), Biome.FOREST.code, dtype=np.uint8),
    )


class CountingGenerator:
    """Chunk factory that records its calls."""

    def __init__(self, size: int = 4):
        self.size = size
        self.calls: list[tuple[int, int]] = []

    def __call__(self, chunk_x: int, chunk_y: int) -> Chunk:
        self.calls.append((chunk_x, chunk_y))
        return _chunk(self.size, chunk_x, chunk_y)


class TestEncoding:
    """Tests for the record layout."""

    def test_record_size(self) -> None:
        """Each tile takes seven bytes."""
        assert RECORD_SIZE == 7
        assert len(encode_chunk(_chunk(4))) == 4 * 4 * 7

    def test_big_endian_layout(self) -> None:
        """Fields are big-endian fixed point, then the biome code."""
        size = 2
        chunk = Chunk(
            chunk_x=0,
            chunk_y=0,
            size=size,
            elevation=np.full((size, size), 0.5),
            moisture=np.full((size, size), 0.25),
            temperature=np.full((size, size), 1.0),
            biome=np.full((size, size), Biome.OCEAN.code, dtype=np.uint8),
        )
        data = encode_chunk(chunk)
        assert data[:7] == bytes([0x01, 0xF4, 0x00, 0xFA, 0x03, 0xE8, 13])

    def test_round_half_up(self) -> None:
        """Values are rounded half up to the nearest thousandth."""
        chunk = Chunk(
            chunk_x=0,
            chunk_y=0,
            size=1,
            elevation=np.array([[0.0125]]),
            moisture=np.array([[0.0]]),
            temperature=np.array([[0.9994]]),
            biome=np.array([[Biome.BEACH.code]], dtype=np.uint8),
        )
        decoded = decode_chunk(encode_chunk(chunk), 0, 0)
        assert decoded.elevation[0, 0] == pytest.approx(0.013)
        assert decoded.temperature[0, 0] == pytest.approx(0.999)

    def test_round_trip(self) -> None:
        """Decoded values are within one thousandth of the originals."""
        chunk = _chunk(8, 3, -1)
        decoded = decode_chunk(encode_chunk(chunk), 3, -1)
        assert (decoded.chunk_x, decoded.chunk_y, decoded.size) == (3, -1, 8)
        np.testing.assert_allclose(decoded.elevation, chunk.elevation, atol=0.0005 + 1e-9)
        np.testing.assert_allclose(decoded.moisture, chunk.moisture, atol=0.0005 + 1e-9)
        np.testing.assert_array_equal(decoded.biome, chunk.biome)

    def test_truncated_raises(self) -> None:
        """Payloads that are not whole records are rejected."""
        data = encode_chunk(_chunk(4))
        with pytest.raises(ChunkStoreError):
            decode_chunk(data[:-3], 0, 0)

    def test_empty_raises(self) -> None:
        with pytest.raises(ChunkStoreError):
            decode_chunk(b"", 0, 0)

    def test_not_square_raises(self) -> None:
        """Record counts must form a square chunk."""
        with pytest.raises(ChunkStoreError):
            decode_chunk(bytes(3 * RECORD_SIZE), 0, 0)

    def test_size_mismatch_raises(self) -> None:
        """A chunk of the wrong size is rejected when a size is expected."""
        with pytest.raises(ChunkStoreError):
            decode_chunk(encode_chunk(_chunk(4)), 0, 0, expected_size=8)

    def test_unknown_biome_raises(self) -> None:
        """Unassigned biome codes are rejected."""
        data = bytearray(encode_chunk(_chunk(2)))
        data[6] = 200
        with pytest.raises(ChunkStoreError):
            decode_chunk(bytes(data), 0, 0)

    @pytest.mark.parametrize("offset", [0, 2, 4])
    def test_value_above_scale_raises(self, offset: int) -> None:
        """Fixed-point fields above 1000 are rejected."""
        data = bytearray(encode_chunk(_chunk(2)))
        data[offset : offset + 2] = (1001).to_bytes(2, "big")
        with pytest.raises(ChunkStoreError):
            decode_chunk(bytes(data), 0, 0)

    def test_value_at_scale_accepted(self) -> None:
        """1000 decodes to exactly 1.0."""
        data = bytearray(encode_chunk(_chunk(2)))
        data[0:2] = (1000).to_bytes(2, "big")
        assert decode_chunk(bytes(data), 0, 0).elevation[0, 0] == 1.0


class TestFileChunkStore:
    """Tests for FileChunkStore."""

    def test_path(self, tmp_path: Path) -> None:
        """Files are named after chunk coordinates."""
        store = FileChunkStore(tmp_path)
        assert store.path_for(-2, 5) == tmp_path / "chunk_-2_5.bin"

    def test_missing_generates_and_saves(self, tmp_path: Path) -> None:
        """A missing file triggers generation and a save."""
        store = FileChunkStore(tmp_path, 4)
        generate = CountingGenerator()
        chunk = store.load_or_generate(1, 2, generate)
        assert generate.calls == [(1, 2)]
        assert chunk.size == 4
        assert store.path_for(1, 2).exists()

    def test_saved_chunk_loaded(self, tmp_path: Path) -> None:
        """A saved chunk is loaded without generating."""
        store = FileChunkStore(tmp_path, 4)
        original = store.load_or_generate(0, 0, CountingGenerator())
        generate = CountingGenerator()
        loaded = store.load_or_generate(0, 0, generate)
        assert generate.calls == []
        np.testing.assert_allclose(loaded.elevation, original.elevation, atol=0.0005 + 1e-9)

    def test_corrupt_file_regenerates(self, tmp_path: Path) -> None:
        """Undecodable files fall back to generation and are rewritten."""
        store = FileChunkStore(tmp_path, 4)
        store.path_for(0, 0).write_bytes(b"\x00" * 10)
        generate = CountingGenerator()
        chunk = store.load_or_generate(0, 0, generate)
        assert generate.calls == [(0, 0)]
        assert chunk.size == 4
        assert len(store.path_for(0, 0).read_bytes()) == 4 * 4 * RECORD_SIZE

    def test_out_of_range_file_regenerates(self, tmp_path: Path) -> None:
        """A file with elevations past 1.0 is treated as corrupt."""
        store = FileChunkStore(tmp_path, 4)
        data = bytearray(encode_chunk(_chunk(4)))
        data[0:2] = b"\xff\xff"
        store.path_for(0, 0).write_bytes(bytes(data))
        generate = CountingGenerator()
        chunk = store.load_or_generate(0, 0, generate)
        assert generate.calls == [(0, 0)]
        assert chunk.elevation.max() <= 1.0
        assert store.load(0, 0).elevation.max() <= 1.0

    def test_wrong_size_file_regenerates(self, tmp_path: Path) -> None:
        """A file holding a chunk of another size is replaced."""
        store = FileChunkStore(tmp_path, 4)
        store.path_for(0, 0).write_bytes(encode_chunk(_chunk(2)))
        generate = CountingGenerator()
        assert store.load_or_generate(0, 0, generate).size == 4
        assert generate.calls == [(0, 0)]

    def test_load_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            FileChunkStore(tmp_path).load(0, 0)

    def test_save_failure_not_raised(self, tmp_path: Path) -> None:
        """Write failures are logged and swallowed."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = FileChunkStore(blocker / "chunks")
        store.save(_chunk(2), 0, 0)
        assert not (blocker / "chunks").exists()
