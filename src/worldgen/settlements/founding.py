"""Founding new settlements: kind, name, population and buildings."""

import structlog

from ..terrain.noise import SeededRandom
from ..types import Position
from .models import (
    Population,
    Settlement,
    SettlementKind,
    SettlementSite,
    Specialization,
    Structure,
    StructureKind,
)
from .naming import SettlementNamer

logger = structlog.get_logger()

# (base, spread): total = base + floor(rng * spread)
POPULATION_RANGES: dict[SettlementKind, tuple[int, int]] = {
    SettlementKind.HAMLET: (40, 60),
    SettlementKind.VILLAGE: (100, 200),
    SettlementKind.TOWN: (400, 600),
    SettlementKind.LIGHTHOUSE: (1, 2),
}
LARGE_POPULATION_RANGE = (1000, 4000)

STRUCTURE_TEMPLATES: dict[SettlementKind, tuple[StructureKind, ...]] = {
    SettlementKind.CITY: (
        StructureKind.TOWN_HALL,
        StructureKind.HARBOR,
        StructureKind.MARKET,
        StructureKind.WAREHOUSE,
    ),
    SettlementKind.TOWN: (StructureKind.MARKET, StructureKind.DOCKS, StructureKind.TAVERN),
    SettlementKind.VILLAGE: (StructureKind.WELL, StructureKind.GRAIN_FARM, StructureKind.WOODCUTTER),
    SettlementKind.HAMLET: (StructureKind.HUT, StructureKind.WELL),
}

SPECIALIZATION_COUNTS: dict[SettlementKind, int] = {
    SettlementKind.CITY: 3,
    SettlementKind.TOWN: 2,
}


def settlement_id(position: Position) -> str:
    return f"settlement_{position.x}_{position.y}"


class SettlementFounder:
    """Creates settlement records at approved positions.

    All randomness comes from the rng passed in, drawn in a fixed order:
    kind, name, population, specializations.
    """

    def __init__(self, namer: SettlementNamer | None = None):
        self.namer = namer or SettlementNamer()

    def pick_kind(self, site: SettlementSite, rng: SeededRandom) -> SettlementKind:
        roll = rng()
        if site is SettlementSite.COASTAL:
            if roll < 0.2:
                return SettlementKind.CITY
            if roll < 0.5:
                return SettlementKind.TOWN
            return SettlementKind.VILLAGE
        if roll < 0.5:
            return SettlementKind.VILLAGE
        return SettlementKind.HAMLET

    def population_for(self, kind: SettlementKind, rng: SeededRandom) -> Population:
        base, spread = POPULATION_RANGES.get(kind, LARGE_POPULATION_RANGE)
        return Population.from_total(base + rng.randint(spread))

    def pick_specializations(self, kind: SettlementKind, rng: SeededRandom) -> list[Specialization]:
        """Distinct specializations, in the order drawn."""
        options = list(Specialization)
        count = SPECIALIZATION_COUNTS.get(kind, 1)
        picks: list[Specialization] = []
        while len(picks) < count:
            pick = rng.choice(options)
            if pick not in picks:
                picks.append(pick)
        return picks

    def create_settlement_at(
        self, position: Position, site: SettlementSite, rng: SeededRandom
    ) -> Settlement:
        """Found a settlement at a global position."""
        kind = self.pick_kind(site, rng)
        hint = "coast" if kind is SettlementKind.CITY else "inland"
        sid = settlement_id(position)

        settlement = Settlement(
            id=sid,
            name=self.namer.generate(rng, hint),
            kind=kind,
            site=site,
            position=position,
            population=self.population_for(kind, rng),
            specializations=self.pick_specializations(kind, rng),
            structures=[
                Structure(id=f"{sid}_structure_{i}", kind=structure)
                for i, structure in enumerate(STRUCTURE_TEMPLATES.get(kind, ()))
            ],
        )
        logger.debug(
            "settlement_founded",
            settlement_id=sid,
            name=settlement.name,
            kind=kind.value,
            site=site.value,
            population=settlement.population.total,
        )
        return settlement
