"""Landform shaping passes over a materialized elevation grid.

A chunk's raw elevation is copied into a TerrainGrid and run through a fixed
pipeline: macro landmark injection, erosion, peak enhancement, cliff
sharpening, lake flattening and short downhill river cuts. Each pass runs at
most once per grid. Passes that look at neighbours read a snapshot of the
grid as it stood when the pass began, so results do not depend on scan order.
"""

import logging
from enum import Enum

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from ..exceptions import ShapingError
from .config import ShapingConfig
from .fields import tile_axes
from .noise import NoiseSource

logger = logging.getLogger(__name__)

# 3x3 footprint without the centre cell
_RING = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=bool)

SHAPING_PASSES = (
    "landmark",
    "erosion",
    "peaks",
    "cliffs",
    "lakes",
    "downhill_rivers",
)


class Landmark(str, Enum):
    """Macro features that can be injected into a chunk."""

    MESA = "mesa"
    CANYON = "canyon"
    ARCHIPELAGO = "archipelago"
    MOUNTAIN_RANGE = "mountain_range"
    RAVINE = "ravine"


class TerrainGrid:
    """Mutable elevation buffer for one chunk while it is being shaped.

    The grid owns a private copy of the elevation array and remembers which
    passes have been applied to it.
    """

    def __init__(self, elevation: NDArray[np.float64], origin_x: int, origin_y: int):
        self.elevation = np.array(elevation, dtype=np.float64, copy=True)
        self.origin_x = origin_x
        self.origin_y = origin_y
        self.applied: list[str] = []
        self.landmark: Landmark | None = None

    @property
    def height(self) -> int:
        return self.elevation.shape[0]

    @property
    def width(self) -> int:
        return self.elevation.shape[1]

    def axes(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Global x and y coordinates of the grid's columns and rows."""
        return tile_axes(self.origin_x, self.origin_y, self.width, self.height)

    def interior(self) -> NDArray[np.bool_]:
        """Mask of cells that have all 8 neighbours inside the grid."""
        mask = np.zeros(self.elevation.shape, dtype=bool)
        mask[1:-1, 1:-1] = True
        return mask

    def begin(self, pass_name: str) -> None:
        """Record that a pass is starting.

        Raises:
            ShapingError: If the pass already ran on this grid.
        """
        if pass_name in self.applied:
            raise ShapingError(
                f"Pass '{pass_name}' already applied to grid at "
                f"({self.origin_x}, {self.origin_y})"
            )
        self.applied.append(pass_name)


def neighbor_mean(elevation: NDArray[np.float64]) -> NDArray[np.float64]:
    """Mean of the 8 surrounding cells (edges replicate the border)."""
    return ndimage.correlate(elevation, _RING.astype(np.float64) / 8.0, mode="nearest")


def neighbor_max(elevation: NDArray[np.float64]) -> NDArray[np.float64]:
    """Maximum of the 8 surrounding cells."""
    return ndimage.maximum_filter(elevation, footprint=_RING, mode="nearest")


def max_neighbor_delta(elevation: NDArray[np.float64]) -> NDArray[np.float64]:
    """Largest absolute difference between each cell and a neighbour."""
    upper = ndimage.maximum_filter(elevation, footprint=_RING, mode="nearest")
    lower = ndimage.minimum_filter(elevation, footprint=_RING, mode="nearest")
    return np.maximum(upper - elevation, elevation - lower)


def select_landmark(gate: float, gate_min: float = 0.3) -> Landmark | None:
    """Map the gate noise sample to a landmark type (or none)."""
    if gate < gate_min:
        return None
    if gate < 0.92:
        return Landmark.MESA
    if gate < 0.94:
        return Landmark.CANYON
    if gate < 0.96:
        return Landmark.ARCHIPELAGO
    if gate < 0.98:
        return Landmark.MOUNTAIN_RANGE
    return Landmark.RAVINE


def inject_landmark(grid: TerrainGrid, noise: NoiseSource, config: ShapingConfig) -> Landmark | None:
    """Inject at most one macro landmark around the grid centre.

    A single gate sample at the grid's global centre decides whether a
    landmark appears and which kind. The feature only touches cells inside a
    circle of radius ``landmark_radius_fraction * min(width, height)``.

    Returns:
        The injected landmark, or None.
    """
    grid.begin("landmark")

    center_x = grid.origin_x + grid.width // 2
    center_y = grid.origin_y + grid.height // 2
    gate = noise.noise(center_x * config.landmark_gate_freq, center_y * config.landmark_gate_freq)
    landmark = select_landmark(gate, config.landmark_gate)
    grid.landmark = landmark
    if landmark is None:
        return None

    xs, ys = grid.axes()
    radius = min(grid.width, grid.height) * config.landmark_radius_fraction
    dist_sq = (xs[np.newaxis, :] - center_x) ** 2 + (ys[:, np.newaxis] - center_y) ** 2
    region = dist_sq <= radius * radius

    large = noise.grid(xs * config.landmark_large_freq, ys * config.landmark_large_freq)
    fine = noise.grid(xs * config.landmark_fine_freq, ys * config.landmark_fine_freq)
    e = grid.elevation

    if landmark is Landmark.MESA:
        hit = region & (large > 0.65) & (fine > 0.4)
        e[hit] += 0.15
    elif landmark is Landmark.CANYON:
        hit = region & (large < -0.6) & (fine < 0.0)
        e[hit] -= 0.2
    elif landmark is Landmark.ARCHIPELAGO:
        hit = region & (large > 0.3) & (large < 0.5) & (e < 0.25)
        e[hit] += 0.3
    elif landmark is Landmark.MOUNTAIN_RANGE:
        hit = region & (large > 0.7)
        e[hit] += (large[hit] - 0.7) * 0.6
    else:
        hit = region & (large < -0.65) & (e > 0.2)
        lowered = e[hit] - 0.15
        e[hit] = np.where(lowered < 0.18, 0.17, lowered)

    logger.debug(
        f"Landmark {landmark.value} at ({center_x}, {center_y}): "
        f"gate={gate:.3f}, {int(np.sum(hit))} cells"
    )
    return landmark


def erode(grid: TerrainGrid, config: ShapingConfig) -> int:
    """Lower interior cells that stand well above their neighbours.

    Returns:
        Number of eroded cells.
    """
    grid.begin("erosion")
    snapshot = grid.elevation.copy()
    hit = grid.interior() & (snapshot - neighbor_mean(snapshot) > config.erosion_threshold)
    grid.elevation[hit] -= config.erosion_amount
    return int(np.sum(hit))


def enhance_peaks(grid: TerrainGrid, config: ShapingConfig) -> int:
    """Raise high local maxima.

    Returns:
        Number of enhanced peaks.
    """
    grid.begin("peaks")
    snapshot = grid.elevation.copy()
    hit = (
        grid.interior()
        & (snapshot > config.peak_threshold)
        & (snapshot >= neighbor_max(snapshot))
    )
    grid.elevation[hit] += config.peak_bonus
    return int(np.sum(hit))


def sharpen_cliffs(grid: TerrainGrid, config: ShapingConfig) -> int:
    """Push steep cells further away from the 0.5 midline.

    Returns:
        Number of sharpened cells.
    """
    grid.begin("cliffs")
    snapshot = grid.elevation.copy()
    hit = grid.interior() & (max_neighbor_delta(snapshot) > config.cliff_delta)
    direction = np.where(snapshot >= 0.5, 1.0, -1.0)
    grid.elevation[hit] += direction[hit] * config.cliff_nudge
    return int(np.sum(hit))


def flatten_lakes(grid: TerrainGrid, noise: NoiseSource, config: ShapingConfig) -> int:
    """Pull low-lying cells with lake-like noise into smooth basins.

    Returns:
        Number of flattened cells.
    """
    grid.begin("lakes")
    snapshot = grid.elevation.copy()
    xs, ys = grid.axes()
    lake_noise = noise.grid(xs * config.lake_freq, ys * config.lake_freq)
    basin = ndimage.uniform_filter(snapshot, size=3, mode="nearest") - config.lake_depth
    hit = (
        grid.interior()
        & (lake_noise < config.lake_noise_max)
        & (snapshot > config.lake_min)
        & (snapshot < config.lake_max)
    )
    grid.elevation[hit] = np.minimum(snapshot[hit], basin[hit])
    return int(np.sum(hit))


def carve_downhill_rivers(grid: TerrainGrid, noise: NoiseSource, config: ShapingConfig) -> int:
    """Cut short channels downhill from rare high seed points.

    Seeds are interior cells above ``river_min_elevation`` whose river noise
    exceeds ``river_seed_threshold``, visited in row-major order. Each walk
    steps to the lowest neighbour, lowering the cell it leaves. It stops
    without cutting at a local minimum, on reaching a cell below
    ``river_stop_elevation``, or after ``river_steps`` moves.

    Returns:
        Number of channels carved.
    """
    grid.begin("downhill_rivers")
    e = grid.elevation
    xs, ys = grid.axes()
    seed_noise = noise.grid(xs * config.river_freq, ys * config.river_freq)
    seeds = np.argwhere(
        grid.interior()
        & (seed_noise > config.river_seed_threshold)
        & (e > config.river_min_elevation)
    )

    for seed_y, seed_x in seeds:
        y, x = int(seed_y), int(seed_x)
        for _ in range(config.river_steps):
            top, left = max(y - 1, 0), max(x - 1, 0)
            window = e[top : y + 2, left : x + 2]
            wy, wx = np.unravel_index(int(np.argmin(window)), window.shape)
            if window[wy, wx] >= e[y, x]:
                break  # local minimum
            e[y, x] = max(e[y, x] - config.river_cut, 0.0)
            y, x = top + int(wy), left + int(wx)
            if e[y, x] < config.river_stop_elevation:
                break

    return len(seeds)


def shape_terrain(grid: TerrainGrid, noise: NoiseSource, config: ShapingConfig | None = None) -> TerrainGrid:
    """Run every shaping pass once, in order, then clamp to [0, 1].

    Raises:
        ShapingError: If the grid has already been shaped.
    """
    if config is None:
        config = ShapingConfig()

    landmark = inject_landmark(grid, noise, config)
    eroded = erode(grid, config)
    peaks = enhance_peaks(grid, config)
    cliffs = sharpen_cliffs(grid, config)
    lakes = flatten_lakes(grid, noise, config)
    channels = carve_downhill_rivers(grid, noise, config)
    np.clip(grid.elevation, 0.0, 1.0, out=grid.elevation)

    logger.debug(
        f"Shaped grid at ({grid.origin_x}, {grid.origin_y}): "
        f"landmark={landmark.value if landmark else None}, eroded={eroded}, "
        f"peaks={peaks}, cliffs={cliffs}, lakes={lakes}, channels={channels}"
    )
    return grid
