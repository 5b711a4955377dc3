"""Biome classification from elevation, moisture and temperature."""

import math

import numpy as np
from numpy.typing import NDArray

from ..exceptions import InvariantViolationError
from ..terrain_types import Biome
from .config import ClassificationConfig


def _check_unit_range(name: str, value: float) -> None:
    if math.isnan(value) or value < 0.0 or value > 1.0:
        raise InvariantViolationError(f"{name} out of range [0, 1]: {value!r}")


def _check_unit_range_grid(name: str, values: NDArray[np.float64]) -> None:
    bad = np.isnan(values) | (values < 0.0) | (values > 1.0)
    if np.any(bad):
        first = values[bad].flat[0]
        raise InvariantViolationError(
            f"{name} out of range [0, 1] in {int(np.sum(bad))} cells (e.g. {first!r})"
        )


def classify_biome(
    elevation: float,
    moisture: float,
    temperature: float,
    config: ClassificationConfig | None = None,
) -> Biome:
    """Classify one tile with the ordered decision table.

    Args:
        elevation: Elevation in [0, 1].
        moisture: Moisture in [0, 1].
        temperature: Temperature in [0, 1].
        config: Threshold configuration.

    Returns:
        The tile's biome.

    Raises:
        InvariantViolationError: If any input is NaN or outside [0, 1].
    """
    if config is None:
        config = ClassificationConfig()

    _check_unit_range("elevation", elevation)
    _check_unit_range("moisture", moisture)
    _check_unit_range("temperature", temperature)

    arid = moisture < config.arid_moisture
    cold = temperature < config.cold_temperature
    hot = temperature > config.hot_temperature

    if elevation < config.ocean_max:
        return Biome.OCEAN
    if elevation < config.water_max:
        return Biome.WATER
    if elevation < config.beach_max:
        return Biome.BEACH
    if elevation > config.rock_min:
        return Biome.ROCK
    if elevation > config.alpine_min:
        return Biome.TUNDRA if cold else Biome.ALPINE
    if elevation > config.subalpine_min:
        return Biome.TUNDRA if (cold or arid) else Biome.ALPINE_GRASSLAND
    if cold:
        return Biome.TUNDRA if arid else Biome.TAIGA
    if hot:
        return Biome.DESERT if arid else Biome.RAINFOREST
    if arid:
        return Biome.GRASSLAND
    if moisture < config.woodland_moisture:
        return Biome.WOODLAND
    return Biome.FOREST


def classify_grid(
    elevation: NDArray[np.float64],
    moisture: NDArray[np.float64],
    temperature: NDArray[np.float64],
    config: ClassificationConfig | None = None,
) -> NDArray[np.uint8]:
    """Vectorized ``classify_biome`` over whole grids.

    Returns:
        Array of biome codes (see ``Biome.code``) with the input shape.

    Raises:
        InvariantViolationError: If any input cell is NaN or outside [0, 1].
    """
    if config is None:
        config = ClassificationConfig()

    _check_unit_range_grid("elevation", elevation)
    _check_unit_range_grid("moisture", moisture)
    _check_unit_range_grid("temperature", temperature)

    e, m, t = elevation, moisture, temperature
    arid = m < config.arid_moisture
    cold = t < config.cold_temperature
    hot = t > config.hot_temperature

    conditions = [
        e < config.ocean_max,
        e < config.water_max,
        e < config.beach_max,
        e > config.rock_min,
        e > config.alpine_min,
        e > config.subalpine_min,
        cold,
        hot,
        arid,
        m < config.woodland_moisture,
    ]
    choices = [
        Biome.OCEAN.code,
        Biome.WATER.code,
        Biome.BEACH.code,
        Biome.ROCK.code,
        np.where(cold, Biome.TUNDRA.code, Biome.ALPINE.code),
        np.where(cold | arid, Biome.TUNDRA.code, Biome.ALPINE_GRASSLAND.code),
        np.where(arid, Biome.TUNDRA.code, Biome.TAIGA.code),
        np.where(arid, Biome.DESERT.code, Biome.RAINFOREST.code),
        Biome.GRASSLAND.code,
        Biome.WOODLAND.code,
    ]
    return np.select(conditions, choices, default=Biome.FOREST.code).astype(np.uint8)
