"""Coastal river tracing and carving.

Rivers are found from the sea upward: coastal cells just below the coast
line are filtered to well-spaced sources, each source is traced uphill over
its 4-neighbours, and sufficiently long paths that end away from the chunk
edge are carved into the chunk's elevation, moisture and biome arrays.
"""

import logging
import threading
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from ..terrain_types import Biome
from ..types import CARDINAL_DELTAS
from .config import RiverConfig

logger = logging.getLogger(__name__)


@dataclass
class River:
    """A carved river in global tile coordinates."""

    source: tuple[int, int]  # (x, y) at the coast
    path: list[tuple[int, int]] = field(default_factory=list)  # (x, y) coast to head
    carved: int = 0  # Cells actually lowered

    @property
    def length(self) -> int:
        return len(self.path)


def find_coastal_candidates(
    elevation: NDArray[np.float64], coast_elevation: float
) -> list[tuple[int, int]]:
    """Interior cells below the coast line with a 4-neighbour at or above it.

    Returns:
        (row, col) cells in row-major order.
    """
    below = elevation < coast_elevation
    above = ~below
    touches = np.zeros_like(below)
    touches[1:-1, 1:-1] = (
        above[:-2, 1:-1] | above[2:, 1:-1] | above[1:-1, :-2] | above[1:-1, 2:]
    )
    interior = np.zeros_like(below)
    interior[1:-1, 1:-1] = True
    return [(int(r), int(c)) for r, c in np.argwhere(below & touches & interior)]


def select_sources(
    candidates: list[tuple[int, int]], spacing: float, max_sources: int
) -> list[tuple[int, int]]:
    """Greedily keep candidates at least ``spacing`` from every kept source."""
    sources: list[tuple[int, int]] = []
    min_sq = spacing * spacing
    for r, c in candidates:
        if len(sources) >= max_sources:
            break
        if all((r - sr) ** 2 + (c - sc) ** 2 >= min_sq for sr, sc in sources):
            sources.append((r, c))
    return sources


def trace_uphill(
    elevation: NDArray[np.float64], start: tuple[int, int], max_steps: int
) -> list[tuple[int, int]]:
    """Walk uphill from ``start`` to the highest 4-neighbour.

    Every step climbs strictly, so the walk stops at the first cell with no
    higher neighbour and never revisits a cell.

    Returns:
        (row, col) cells from ``start`` to the head.
    """
    height, width = elevation.shape
    path = [start]
    r, c = start

    for _ in range(max_steps):
        best: tuple[int, int] | None = None
        best_elev = elevation[r, c]
        for dc, dr in CARDINAL_DELTAS:
            nr, nc = r + dr, c + dc
            if not (0 <= nr < height and 0 <= nc < width):
                continue
            if elevation[nr, nc] > best_elev:
                best, best_elev = (nr, nc), elevation[nr, nc]

        if best is None:
            break
        r, c = best
        path.append(best)

    return path


class RiverTracer:
    """Finds, traces and carves coastal rivers into materialized chunks.

    Carved paths are cached by their global source coordinate and can be
    fetched later with ``get_cached_path``. One tracer may be shared by
    several generator threads.
    """

    def __init__(self, config: RiverConfig | None = None):
        self.config = config or RiverConfig()
        self._paths: dict[tuple[int, int], list[tuple[int, int]]] = {}
        self._lock = threading.Lock()

    def get_cached_path(self, x: int, y: int) -> list[tuple[int, int]] | None:
        """Path of the river sourced at global (x, y), if one was carved."""
        with self._lock:
            path = self._paths.get((x, y))
        return list(path) if path is not None else None

    @property
    def cached_count(self) -> int:
        with self._lock:
            return len(self._paths)

    def _reaches_interior(self, end: tuple[int, int], shape: tuple[int, int]) -> bool:
        margin = self.config.boundary_margin
        r, c = end
        height, width = shape
        return margin <= r < height - margin and margin <= c < width - margin

    def carve(
        self,
        elevation: NDArray[np.float64],
        moisture: NDArray[np.float64],
        biome: NDArray[np.uint8],
        origin_x: int,
        origin_y: int,
    ) -> list[River]:
        """Trace and carve rivers in place.

        Args:
            elevation: Chunk elevation, modified in place.
            moisture: Chunk moisture, modified in place.
            biome: Chunk biome codes, modified in place.
            origin_x: Global x of column 0.
            origin_y: Global y of row 0.

        Returns:
            Rivers carved into this chunk.
        """
        cfg = self.config
        candidates = find_coastal_candidates(elevation, cfg.coast_elevation)
        sources = select_sources(candidates, cfg.source_spacing, cfg.max_sources)

        rivers: list[River] = []
        for source in sources:
            path = trace_uphill(elevation, source, cfg.max_steps)
            if len(path) < cfg.min_length or not self._reaches_interior(path[-1], elevation.shape):
                continue

            body = path[: max(len(path) - cfg.tail_length, 0)]
            for r, c in body:
                elevation[r, c] = max(elevation[r, c] - cfg.cut, 0.0)
                moisture[r, c] = min(moisture[r, c] + cfg.wetting, 1.0)
                biome[r, c] = Biome.WATER.code

            global_path = [(origin_x + c, origin_y + r) for r, c in path]
            river = River(source=global_path[0], path=global_path, carved=len(body))
            rivers.append(river)
            with self._lock:
                self._paths[river.source] = global_path

        logger.debug(
            f"Rivers at ({origin_x}, {origin_y}): {len(candidates)} coastal candidates, "
            f"{len(sources)} sources, {len(rivers)} carved"
        )
        return rivers
