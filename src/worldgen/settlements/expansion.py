"""Frontier-driven growth of a connected settlement network."""

import threading
from collections import deque
from dataclasses import dataclass, field

import structlog

from ..chunks import Chunk
from ..terrain.noise import SeededRandom
from ..terrain_types import Biome
from ..types import Position
from .config import ExpansionConfig
from .founding import SettlementFounder
from .locations import LocationFinder
from .models import Route, RouteKind, Settlement, SettlementSite
from .routes import RouteFinder

logger = structlog.get_logger()


@dataclass
class ExpansionResult:
    """Settlements (seed first) and the routes that connect them."""

    settlements: list[Settlement] = field(default_factory=list)
    routes: list[Route] = field(default_factory=list)
    cancelled: bool = False

    def __len__(self) -> int:
        return len(self.settlements)


class _ExpansionState:
    """Mutable bookkeeping for one expansion run."""

    def __init__(self, seed: Settlement, target_count: int):
        self.settlements: list[Settlement] = [seed]
        self.routes: list[Route] = []
        self.frontier: deque[Settlement] = deque([seed])
        self.target_count = target_count

    @property
    def full(self) -> bool:
        return len(self.settlements) >= self.target_count


class ExpansionDriver:
    """Grows settlements outward from a seed settlement.

    Each frontier settlement looks for coastal neighbours reachable by sea,
    and each new coastal settlement may spawn an inland offshoot reachable by
    land, which may in turn spawn one more. Every new settlement keeps at
    least ``min_distance`` from all earlier ones, and a candidate whose
    route cannot be completed is skipped, so every recorded route joins its
    two settlements. The run is sequential; it can be cancelled between
    frontier steps.
    """

    def __init__(
        self,
        locations: LocationFinder,
        routes: RouteFinder,
        founder: SettlementFounder | None = None,
        config: ExpansionConfig | None = None,
    ):
        self.locations = locations
        self.routes = routes
        self.founder = founder or SettlementFounder()
        self.config = config or ExpansionConfig()

    def is_far_enough(self, settlements: list[Settlement], position: Position) -> bool:
        """Whether ``position`` keeps the minimum distance from every settlement."""
        return all(s.position.distance(position) >= self.config.min_distance for s in settlements)

    def _coastal_candidates(self, origin: Settlement, rng: SeededRandom) -> list[Position]:
        candidates = self.locations.find_coastal_neighbors(
            origin.position, self.config.coastal_neighbors, rng
        )
        if candidates or not self.config.sea_lane_fallback:
            return candidates

        lane = self.locations.find_sea_expansion_route(origin.position, rng)
        if lane is not None and self.locations.biome(lane.landing) is Biome.BEACH:
            logger.debug("sea_lane_landing", origin=origin.id, landing=str(lane.landing))
            return [lane.landing]
        return []

    def _connect(
        self,
        state: _ExpansionState,
        origin: Settlement,
        position: Position,
        kind: RouteKind,
        rng: SeededRandom,
    ) -> Settlement | None:
        """Route from ``origin`` to ``position`` and found a settlement there."""
        if not self.is_far_enough(state.settlements, position):
            logger.debug("candidate_too_close", origin=origin.id, candidate=str(position))
            return None

        if kind is RouteKind.SEA:
            result = self.routes.find_sea_route(origin.position, position, rng)
            site = SettlementSite.COASTAL
        else:
            result = self.routes.find_land_route(origin.position, position, rng)
            site = SettlementSite.INLAND

        if not result.complete:
            logger.warning(
                "route_incomplete_skipping_candidate",
                origin=origin.id,
                candidate=str(position),
                kind=kind.value,
                steps=len(result.path),
            )
            return None

        settlement = self.founder.create_settlement_at(position, site, rng)
        state.settlements.append(settlement)
        state.routes.append(Route.from_path(origin.id, settlement.id, result.path, kind))
        state.frontier.append(settlement)
        return settlement

    def _expand_inland(
        self,
        state: _ExpansionState,
        origin: Settlement,
        min_dist: float,
        max_dist: float,
        rng: SeededRandom,
    ) -> Settlement | None:
        point = self.locations.find_inland_neighbor(origin.position, min_dist, max_dist, rng)
        if point is None:
            return None
        return self._connect(state, origin, point, RouteKind.LAND, rng)

    def expand(
        self,
        seed: Settlement,
        rng: SeededRandom,
        target_count: int | None = None,
        cancel: threading.Event | None = None,
    ) -> ExpansionResult:
        """Grow the network until ``target_count`` settlements or an empty frontier.

        Args:
            seed: Initial coastal settlement; included in the result.
            rng: Randomness for every decision, consumed in a fixed order.
            target_count: Settlement count to stop at.
            cancel: Checked before each frontier step.

        Returns:
            ExpansionResult with all settlements and routes.
        """
        cfg = self.config
        if target_count is None:
            target_count = cfg.target_count
        state = _ExpansionState(seed, target_count)
        cancelled = False

        logger.info("expansion_started", seed=seed.id, target_count=target_count)

        while not state.full and state.frontier:
            if cancel is not None and cancel.is_set():
                cancelled = True
                logger.info("expansion_cancelled", settlements=len(state.settlements))
                break

            current = state.frontier.popleft()
            for candidate in self._coastal_candidates(current, rng):
                if state.full:
                    break
                coastal = self._connect(state, current, candidate, RouteKind.SEA, rng)
                if coastal is None or state.full:
                    continue

                if rng() >= cfg.inland_chance:
                    continue
                inland = self._expand_inland(
                    state, coastal, cfg.inland_min_distance, cfg.inland_max_distance, rng
                )
                if inland is None or state.full:
                    continue

                if rng() < cfg.chain_chance:
                    self._expand_inland(
                        state, inland, cfg.chain_min_distance, cfg.chain_max_distance, rng
                    )

        logger.info(
            "expansion_finished",
            settlements=len(state.settlements),
            routes=len(state.routes),
            frontier=len(state.frontier),
            cancelled=cancelled,
        )
        return ExpansionResult(
            settlements=state.settlements,
            routes=state.routes,
            cancelled=cancelled,
        )

    def seed_connected_world(
        self,
        chunk: Chunk,
        rng: SeededRandom,
        target_count: int | None = None,
        cancel: threading.Event | None = None,
    ) -> ExpansionResult:
        """Found a seed settlement on the chunk's coast, then expand from it.

        Returns an empty result when the chunk has no usable coast.
        """
        sites = self.locations.find_coastal_locations(chunk, rng)
        if not sites:
            logger.warning("no_seed_site", chunk_x=chunk.chunk_x, chunk_y=chunk.chunk_y)
            return ExpansionResult()

        seed = self.founder.create_settlement_at(sites[0], SettlementSite.COASTAL, rng)
        return self.expand(seed, rng, target_count, cancel)
