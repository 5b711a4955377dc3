"""Tests for biome classification."""

import itertools

import numpy as np
import pytest

from worldgen.exceptions import InvariantViolationError
from worldgen.terrain.classification import classify_biome, classify_grid
from worldgen.terrain.config import ClassificationConfig
from worldgen.terrain_types import VALID_BIOME_CODES, Biome


class TestClassifyBiome:
    """Tests for the scalar decision table."""

    @pytest.mark.parametrize(
        "elevation,moisture,temperature,expected",
        [
            (0.05, 0.5, 0.3, Biome.OCEAN),
            (0.15, 0.5, 0.3, Biome.WATER),
            (0.185, 0.5, 0.3, Biome.BEACH),
            (0.6, 0.5, 0.3, Biome.ROCK),
            (0.4, 0.5, 0.05, Biome.TUNDRA),
            (0.4, 0.5, 0.3, Biome.ALPINE),
            (0.35, 0.2, 0.3, Biome.TUNDRA),
            (0.35, 0.5, 0.05, Biome.TUNDRA),
            (0.35, 0.5, 0.3, Biome.ALPINE_GRASSLAND),
            (0.25, 0.2, 0.05, Biome.TUNDRA),
            (0.25, 0.5, 0.05, Biome.TAIGA),
            (0.25, 0.2, 0.5, Biome.DESERT),
            (0.25, 0.5, 0.5, Biome.RAINFOREST),
            (0.25, 0.2, 0.3, Biome.GRASSLAND),
            (0.25, 0.4, 0.3, Biome.WOODLAND),
            (0.25, 0.6, 0.3, Biome.FOREST),
        ],
    )
    def test_decision_table(
        self, elevation: float, moisture: float, temperature: float, expected: Biome
    ) -> None:
        """Each row of the table maps to its biome."""
        assert classify_biome(elevation, moisture, temperature) is expected

    def test_boundaries(self) -> None:
        """Elevation thresholds are exclusive on the upper side."""
        assert classify_biome(0.12, 0.5, 0.3) is Biome.WATER
        assert classify_biome(0.18, 0.5, 0.3) is Biome.BEACH
        assert classify_biome(0.19, 0.5, 0.3) is not Biome.BEACH
        assert classify_biome(0.49, 0.5, 0.3) is not Biome.ROCK

    def test_custom_thresholds(self) -> None:
        """Config thresholds are honoured."""
        config = ClassificationConfig(ocean_max=0.5)
        assert classify_biome(0.4, 0.5, 0.3, config) is Biome.OCEAN

    def test_never_mountain(self) -> None:
        """The reserved mountain biome is never produced."""
        samples = np.linspace(0.0, 1.0, 11)
        for e, m, t in itertools.product(samples, samples, samples):
            assert classify_biome(e, m, t) is not Biome.MOUNTAIN

    @pytest.mark.parametrize(
        "elevation,moisture,temperature",
        [
            (float("nan"), 0.5, 0.5),
            (-0.01, 0.5, 0.5),
            (1.01, 0.5, 0.5),
            (0.5, 1.5, 0.5),
            (0.5, 0.5, -1.0),
        ],
    )
    def test_out_of_range_raises(self, elevation: float, moisture: float, temperature: float) -> None:
        """NaN or out-of-range inputs are rejected."""
        with pytest.raises(InvariantViolationError):
            classify_biome(elevation, moisture, temperature)


class TestClassifyGrid:
    """Tests for the vectorized classifier."""

    def _lattice(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        samples = np.linspace(0.0, 1.0, 21)
        e, m, t = np.meshgrid(samples, samples, samples, indexing="ij")
        return e.reshape(-1, 21), m.reshape(-1, 21), t.reshape(-1, 21)

    def test_total(self) -> None:
        """Every input in the unit cube gets a valid biome code."""
        e, m, t = self._lattice()
        codes = classify_grid(e, m, t)
        assert codes.dtype == np.uint8
        assert codes.shape == e.shape
        assert set(np.unique(codes).tolist()) <= VALID_BIOME_CODES

    def test_matches_scalar(self) -> None:
        """Grid and scalar classification agree cell by cell."""
        e, m, t = self._lattice()
        codes = classify_grid(e, m, t)
        for idx in np.ndindex(e.shape):
            expected = classify_biome(float(e[idx]), float(m[idx]), float(t[idx]))
            assert codes[idx] == expected.code

    def test_out_of_range_raises(self) -> None:
        """Any bad cell rejects the whole grid."""
        e = np.full((4, 4), 0.3)
        m = np.full((4, 4), 0.5)
        t = np.full((4, 4), 0.3)
        t[2, 3] = np.nan
        with pytest.raises(InvariantViolationError):
            classify_grid(e, m, t)
