"""Greedy route finding between settlements over land or sea."""

from collections.abc import Set
from dataclasses import dataclass

import structlog

from ..terrain.noise import SeededRandom
from ..terrain_types import LAND_ROUTE_BIOMES, SEA_ROUTE_BIOMES, Biome
from ..types import Position
from .config import RouteConfig
from .locations import TileSource

logger = structlog.get_logger()

# Step order: cardinals east-first, then diagonals
ROUTE_STEPS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (0, 1),
    (-1, 0),
    (0, -1),
    (1, 1),
    (-1, 1),
    (1, -1),
    (-1, -1),
)


@dataclass
class RouteResult:
    """Tiles walked from the start, and whether the goal was reached."""

    path: list[Position]
    complete: bool


class RouteFinder:
    """Walks toward a goal one tile at a time over an allowed biome set.

    This is a greedy walk, not a shortest-path search. At each step it moves
    to the allowed neighbour with the lowest score. It keeps no record of
    visited tiles, so it can get boxed in or wander until its step budget
    runs out. Such routes come back with ``complete=False``.
    """

    def __init__(self, tiles: TileSource, config: RouteConfig | None = None):
        self.tiles = tiles
        self.config = config or RouteConfig()

    def _biome(self, x: int, y: int) -> Biome:
        return self.tiles.get_tile(x, y).biome

    def goal_context(self, goal: Position, allowed: Set[Biome]) -> float:
        """Score adjustment from the goal's surroundings.

        Adds ``enclosed_penalty`` when most of the goal's neighbours are
        outside ``allowed`` and subtracts ``inland_bonus`` when several are
        not beach.
        """
        cfg = self.config
        neighbors = [self._biome(p.x, p.y) for p in goal.neighbors()]
        outside = sum(1 for b in neighbors if b not in allowed)
        not_beach = sum(1 for b in neighbors if b is not Biome.BEACH)

        context = 0.0
        if outside >= cfg.enclosed_neighbors:
            context += cfg.enclosed_penalty
        if not_beach >= cfg.inland_neighbors:
            context -= cfg.inland_bonus
        return context

    def find_route(
        self,
        start: Position,
        goal: Position,
        allowed: Set[Biome],
        rng: SeededRandom,
    ) -> RouteResult:
        """Walk from ``start`` until within one tile of ``goal``.

        Each candidate step is scored by its Euclidean distance to the goal,
        plus jitter, plus the goal context. The walk ends when the goal is
        adjacent, when no allowed step exists, or after ``max_steps`` tiles.
        """
        cfg = self.config
        context = self.goal_context(goal, allowed)
        path: list[Position] = []
        current = start

        for _ in range(cfg.max_steps):
            path.append(current)
            if current.chebyshev(goal) <= 1:
                return RouteResult(path=path, complete=True)

            best: Position | None = None
            best_score = 0.0
            for dx, dy in ROUTE_STEPS:
                nx, ny = current.x + dx, current.y + dy
                if self._biome(nx, ny) not in allowed:
                    continue
                step = Position(x=nx, y=ny)
                score = step.distance(goal) + rng() * cfg.jitter + context
                if best is None or score < best_score:
                    best, best_score = step, score

            if best is None:
                logger.warning(
                    "route_blocked",
                    start=str(start),
                    goal=str(goal),
                    at=str(current),
                    steps=len(path),
                )
                return RouteResult(path=path, complete=False)
            current = best

        logger.warning("route_budget_exhausted", start=str(start), goal=str(goal), steps=len(path))
        return RouteResult(path=path, complete=False)

    def find_sea_route(self, start: Position, goal: Position, rng: SeededRandom) -> RouteResult:
        return self.find_route(start, goal, SEA_ROUTE_BIOMES, rng)

    def find_land_route(self, start: Position, goal: Position, rng: SeededRandom) -> RouteResult:
        return self.find_route(start, goal, LAND_ROUTE_BIOMES, rng)
