"""Candidate sites for settlements: coastal, inland and across the sea."""

import math
from dataclasses import dataclass
from typing import Protocol

import numpy as np
import structlog
from numpy.typing import NDArray
from scipy import ndimage

from ..chunks import Chunk
from ..terrain.noise import SeededRandom
from ..terrain_types import LAND_ROUTE_BIOMES, Biome, Cell
from ..types import CARDINAL_DELTAS, DIRECTION_DELTAS, Direction, Position
from .config import SearchConfig
from .models import RouteKind

logger = structlog.get_logger()

# Biomes that can hold an inland settlement
INLAND_SITE_BIOMES = LAND_ROUTE_BIOMES - {Biome.BEACH}

# Move order for sea lanes: cardinals first, then diagonals
SEA_LANE_STEPS = tuple(
    DIRECTION_DELTAS[d]
    for d in (
        Direction.NORTH,
        Direction.EAST,
        Direction.SOUTH,
        Direction.WEST,
        Direction.SOUTHEAST,
        Direction.NORTHWEST,
        Direction.SOUTHWEST,
        Direction.NORTHEAST,
    )
)

_FOUR_CONNECTED = ndimage.generate_binary_structure(2, 1)


class TileSource(Protocol):
    """Anything that can answer terrain queries by world coordinate."""

    def get_tile(self, x: int, y: int) -> Cell:
        ...


@dataclass(frozen=True)
class SeaLane:
    """A sailed path from a settlement to a landing spot."""

    path: tuple[Position, ...]  # Water tiles after the origin, ending at destination
    destination: Position  # Last water tile
    landing: Position  # Land tile next to the destination


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def polar_offset(origin: Position, rng: SeededRandom, min_dist: float, max_dist: float) -> Position:
    """Random point at a distance in [min_dist, max_dist) from origin."""
    angle = rng() * math.pi * 2
    dist = min_dist + rng() * (max_dist - min_dist)
    return Position(
        x=origin.x + round_half_up(math.cos(angle) * dist),
        y=origin.y + round_half_up(math.sin(angle) * dist),
    )


def pick_random(candidates: list[Position], rng: SeededRandom, count: int) -> list[Position]:
    """Draw up to ``count`` distinct candidates without replacement."""
    remaining = list(candidates)
    picked: list[Position] = []
    while len(picked) < count and remaining:
        picked.append(remaining.pop(rng.randint(len(remaining))))
    return picked


def _chunk_positions(chunk: Chunk, mask: NDArray[np.bool_]) -> list[Position]:
    origin_x, origin_y = chunk.origin
    return [Position(x=origin_x + int(c), y=origin_y + int(r)) for r, c in np.argwhere(mask)]


class LocationFinder:
    """Searches the terrain for places to found settlements."""

    def __init__(self, tiles: TileSource, config: SearchConfig | None = None):
        self.tiles = tiles
        self.config = config or SearchConfig()

    def biome(self, position: Position) -> Biome:
        return self.tiles.get_tile(position.x, position.y).biome

    def touches(self, position: Position, water: bool) -> Position | None:
        """First 4-neighbour that is water (or land, when ``water`` is False)."""
        for dx, dy in CARDINAL_DELTAS:
            neighbor = Position(x=position.x + dx, y=position.y + dy)
            if self.biome(neighbor).is_water == water:
                return neighbor
        return None

    def land_neighbors(self, position: Position) -> int:
        """Number of 4-neighbours that are land."""
        count = 0
        for dx, dy in CARDINAL_DELTAS:
            if self.biome(Position(x=position.x + dx, y=position.y + dy)).is_land:
                count += 1
        return count

    def find_coastal_locations(
        self, chunk: Chunk, rng: SeededRandom, count: int | None = None
    ) -> list[Position]:
        """Random beach tiles that reach ocean over water or beach.

        A beach qualifies when a 4-connected path of at most
        ``coast_search_steps`` steps through water and beach leads to ocean
        inside the chunk. Border tiles are skipped.

        Returns:
            Up to ``count`` global positions.
        """
        if count is None:
            count = self.config.coastal_count
        codes = chunk.biome
        ocean = codes == Biome.OCEAN.code
        beach = codes == Biome.BEACH.code
        passable = ocean | beach | (codes == Biome.WATER.code)

        reach = ocean
        if np.any(ocean):
            reach = ndimage.binary_dilation(
                ocean,
                structure=_FOUR_CONNECTED,
                iterations=self.config.coast_search_steps,
                mask=passable,
            )
        interior = np.zeros_like(beach)
        interior[1:-1, 1:-1] = True

        candidates = _chunk_positions(chunk, reach & beach & interior)
        logger.debug("coastal_candidates", chunk_x=chunk.chunk_x, chunk_y=chunk.chunk_y, count=len(candidates))
        if not candidates:
            logger.warning("no_coastal_locations", chunk_x=chunk.chunk_x, chunk_y=chunk.chunk_y)
        return pick_random(candidates, rng, count)

    def find_inland_locations(
        self,
        chunk: Chunk,
        rng: SeededRandom,
        count: int,
        coastal: list[Position],
    ) -> list[Position]:
        """Random raised land tiles within an annulus of a coastal site."""
        cfg = self.config
        land = (chunk.biome != Biome.OCEAN.code) & (chunk.biome != Biome.WATER.code)
        raised = land & (chunk.elevation > cfg.inland_min_elevation)

        origin_x, origin_y = chunk.origin
        gx = np.arange(origin_x, origin_x + chunk.size, dtype=np.float64)[np.newaxis, :]
        gy = np.arange(origin_y, origin_y + chunk.size, dtype=np.float64)[:, np.newaxis]
        near = np.zeros(raised.shape, dtype=bool)
        for site in coastal:
            dist = np.sqrt((gx - site.x) ** 2 + (gy - site.y) ** 2)
            near |= (dist >= cfg.inland_min_distance) & (dist <= cfg.inland_max_distance)

        candidates = _chunk_positions(chunk, raised & near)
        logger.debug("inland_candidates", chunk_x=chunk.chunk_x, chunk_y=chunk.chunk_y, count=len(candidates))
        return pick_random(candidates, rng, count)

    def find_sea_expansion_route(self, origin: Position, rng: SeededRandom) -> SeaLane | None:
        """Sail greedily from ``origin`` until land is sighted far enough away.

        Each move goes to an unvisited water tile, penalised by how far its
        count of land neighbours strays from a preferred count, plus jitter.
        The preferred count is at least 4, so lanes hug the shore. The lane
        ends on the first tile that touches land at least
        ``min_landing_distance`` from the origin.

        Returns:
            The lane, or None when blocked or out of steps.
        """
        cfg = self.config
        preferred = cfg.preferred_land_contact + rng.randint(cfg.preferred_land_jitter)
        current = origin
        visited = {origin}
        path: list[Position] = []

        for _ in range(cfg.sea_lane_steps):
            options: list[tuple[float, Position]] = []
            for dx, dy in SEA_LANE_STEPS:
                step = Position(x=current.x + dx, y=current.y + dy)
                if step in visited or not self.biome(step).is_water:
                    continue
                penalty = abs(self.land_neighbors(step) - preferred) + rng() * cfg.sea_lane_jitter
                options.append((penalty, step))

            if not options:
                logger.warning("sea_lane_blocked", x=origin.x, y=origin.y, steps=len(path))
                return None

            current = min(options, key=lambda option: option[0])[1]
            visited.add(current)
            path.append(current)

            if current.chebyshev(origin) >= cfg.min_landing_distance:
                landing = self.touches(current, water=False)
                if landing is not None:
                    return SeaLane(path=tuple(path), destination=current, landing=landing)

        logger.warning("sea_lane_exhausted", x=origin.x, y=origin.y, steps=len(path))
        return None

    def find_coastal_neighbors(self, origin: Position, count: int, rng: SeededRandom) -> list[Position]:
        """Sample beaches next to water at 12-40 tiles from ``origin``."""
        cfg = self.config
        found: list[Position] = []
        for _ in range(cfg.neighbor_attempts):
            if len(found) >= count:
                break
            point = polar_offset(origin, rng, cfg.neighbor_min_distance, cfg.neighbor_max_distance)
            if self.biome(point) is not Biome.BEACH:
                continue
            if self.touches(point, water=True) is None:
                continue
            found.append(point)

        if len(found) < count:
            logger.debug("coastal_neighbors_short", x=origin.x, y=origin.y, wanted=count, found=len(found))
        return found

    def find_inland_neighbor(
        self, origin: Position, min_dist: float, max_dist: float, rng: SeededRandom
    ) -> Position | None:
        """Sample a dry, non-beach tile at ``min_dist``-``max_dist`` from ``origin``."""
        for _ in range(self.config.inland_attempts):
            point = polar_offset(origin, rng, min_dist, max_dist)
            if self.biome(point) in INLAND_SITE_BIOMES:
                return point
        logger.debug("inland_neighbor_not_found", x=origin.x, y=origin.y)
        return None

    def find_expansion_location(
        self, origin: Position, kind: RouteKind, rng: SeededRandom
    ) -> Position | None:
        """Scan an annulus around ``origin`` and pick one valid tile at random.

        Land expansion accepts any dry tile within 6-20 tiles. Sea expansion
        accepts water tiles within 6-160 tiles that touch land.
        """
        cfg = self.config
        min_radius = cfg.expansion_min_radius
        max_radius = cfg.sea_max_radius if kind is RouteKind.SEA else cfg.land_max_radius
        reach = int(max_radius)

        candidates: list[Position] = []
        for dy in range(-reach, reach + 1):
            for dx in range(-reach, reach + 1):
                dist = math.hypot(dx, dy)
                if dist < min_radius or dist > max_radius:
                    continue
                point = Position(x=origin.x + dx, y=origin.y + dy)
                biome = self.biome(point)
                if kind is RouteKind.LAND:
                    if biome.is_land:
                        candidates.append(point)
                elif biome.is_water and self.touches(point, water=False) is not None:
                    candidates.append(point)

        if not candidates:
            logger.warning("no_expansion_location", x=origin.x, y=origin.y, kind=kind.value)
            return None
        return candidates[rng.randint(len(candidates))]
