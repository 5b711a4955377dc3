"""Continuous terrain fields: elevation, wind, moisture and temperature.

All fields are pure functions of global tile coordinates and the world's
noise source. The grid functions evaluate a rectangular block of tiles at
once; the scalar ``*_at`` helpers evaluate a single tile through the same
code path, so a tile gets the same value whichever way it is computed.
"""

import numpy as np
from numpy.typing import NDArray

from .config import ClimateConfig, ElevationConfig
from .noise import NoiseSource


def tile_axes(
    origin_x: int, origin_y: int, width: int, height: int
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Global x and y coordinates of a block of tiles."""
    xs = np.arange(origin_x, origin_x + width, dtype=np.float64)
    ys = np.arange(origin_y, origin_y + height, dtype=np.float64)
    return xs, ys


def _layer(
    noise: NoiseSource,
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    freq_x: float,
    freq_y: float | None = None,
) -> NDArray[np.float64]:
    """One noise layer sampled at the given frequency."""
    if freq_y is None:
        freq_y = freq_x
    return noise.grid(xs * freq_x, ys * freq_y)


def _point(x: float, y: float) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    return np.array([x], dtype=np.float64), np.array([y], dtype=np.float64)


def make_elevation(
    noise: NoiseSource,
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    config: ElevationConfig | None = None,
) -> NDArray[np.float64]:
    """Generate the elevation field.

    Blends a squared continent mask, cubed absolute-value tectonic ridges,
    medium and high octaves and a fine grain term. The blend is raised to
    ``lowland_power`` and values above ``peak_threshold`` get a convex boost.

    Args:
        noise: World noise source.
        xs: Global x coordinates (columns).
        ys: Global y coordinates (rows).
        config: Elevation parameters.

    Returns:
        Elevation array of shape (len(ys), len(xs)), in [0, 1].
    """
    if config is None:
        config = ElevationConfig()

    continent = _layer(noise, xs, ys, config.continent_freq_x, config.continent_freq_y) * 0.5 + 0.5
    continent = continent * continent
    tectonic = np.abs(_layer(noise, xs, ys, config.tectonic_freq)) ** 3
    mid = _layer(noise, xs, ys, config.mid_freq) * 0.5 + 0.5
    high = _layer(noise, xs, ys, config.high_freq) * 0.5 + 0.5
    grain = _layer(noise, xs, ys, config.grain_freq) * 0.5

    elevation = (
        continent * config.continent_weight
        + tectonic * config.tectonic_weight
        + mid * config.mid_weight
        + high * config.high_weight
        + (grain - 0.25) * config.grain_weight
    )
    elevation = np.clip(elevation, 0.0, 1.0) ** config.lowland_power

    peaks = elevation > config.peak_threshold
    if np.any(peaks):
        boost = _layer(noise, xs, ys, config.peak_freq) * 0.5 + 0.5
        excess = np.maximum(elevation - config.peak_threshold, 0.0)
        elevation = np.where(
            peaks, elevation + excess**2.5 * config.peak_gain * boost, elevation
        )

    return np.clip(elevation, 0.0, 1.0)


def make_wind(
    noise: NoiseSource,
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    config: ClimateConfig | None = None,
) -> NDArray[np.float64]:
    """Wind influence: a sinusoid of latitude plus local variation."""
    if config is None:
        config = ClimateConfig()

    band = np.sin(ys / config.wind_period * 2.0 * np.pi)[:, np.newaxis]
    local = _layer(noise, xs, ys, config.wind_local_freq)
    return 0.7 + 0.25 * band + (local - 0.5) * 0.2


def make_climate(
    noise: NoiseSource,
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    config: ClimateConfig | None = None,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Generate moisture and temperature together.

    Both fields share the wind term and the elevation-proxy noise, and
    temperature takes a small correction from moisture.

    Args:
        noise: World noise source.
        xs: Global x coordinates (columns).
        ys: Global y coordinates (rows).
        config: Climate parameters.

    Returns:
        Tuple of (moisture, temperature), each of shape (len(ys), len(xs))
        and in [0, 1].
    """
    if config is None:
        config = ClimateConfig()

    wind = make_wind(noise, xs, ys, config)
    relief = _layer(noise, xs, ys, config.relief_freq)

    # Moisture
    base = _layer(noise, xs, ys, config.moisture_freq) * 0.5 + 0.5
    grain = (_layer(noise, xs, ys, config.moisture_grain_freq) - 0.5) * 0.1
    moisture = (base + grain) * (relief * 0.4 + 0.6) * wind
    moisture = np.clip(moisture, 0.0, 1.0) ** config.moisture_power

    # Temperature
    octaves = np.zeros((len(ys), len(xs)), dtype=np.float64)
    for freq, weight in zip(config.temperature_freqs, config.temperature_weights):
        octaves = octaves + weight * _layer(noise, xs, ys, freq)
    t_grain = (_layer(noise, xs, ys, config.temperature_grain_freq) - 0.5) * 0.1
    latitude = np.cos(ys * config.latitude_freq * np.pi)[:, np.newaxis]
    cooling = 1.0 - relief * 0.3

    temperature = (
        (octaves + t_grain) * 0.5
        + (latitude * 0.4 + wind * 0.1) * cooling
        - moisture * 0.05
    )
    temperature = np.clip(0.2 + temperature * 0.6, 0.0, 1.0)

    return moisture, temperature


def elevation_at(
    noise: NoiseSource, x: float, y: float, config: ElevationConfig | None = None
) -> float:
    """Elevation of a single tile."""
    xs, ys = _point(x, y)
    return float(make_elevation(noise, xs, ys, config)[0, 0])


def moisture_at(
    noise: NoiseSource, x: float, y: float, config: ClimateConfig | None = None
) -> float:
    """Moisture of a single tile."""
    xs, ys = _point(x, y)
    moisture, _ = make_climate(noise, xs, ys, config)
    return float(moisture[0, 0])


def temperature_at(
    noise: NoiseSource, x: float, y: float, config: ClimateConfig | None = None
) -> float:
    """Temperature of a single tile."""
    xs, ys = _point(x, y)
    _, temperature = make_climate(noise, xs, ys, config)
    return float(temperature[0, 0])
