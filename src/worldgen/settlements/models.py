"""Settlement and route records."""

import math
from enum import Enum

from pydantic import BaseModel, Field

from ..types import Position


class SettlementKind(str, Enum):
    """Settlement sizes and special forms.

    Expansion only founds hamlets, villages, towns and cities; the other
    kinds are reserved for later world-building systems.
    """

    HAMLET = "hamlet"
    VILLAGE = "village"
    TOWN = "town"
    CITY = "city"
    CAPITAL = "capital"
    METROPOLIS = "metropolis"
    TRADE_HUB = "trade_hub"
    TRADING_POST = "trading_post"
    FORTRESS = "fortress"
    LIGHTHOUSE = "lighthouse"
    TRIBE = "tribe"
    RUINS = "ruins"
    ANCIENT_RUINS = "ancient_ruins"
    FLOATING_CITY = "floating_city"
    PHASING_CITY = "phasing_city"
    UNDERGROUND_CITY = "underground_city"


class SettlementSite(str, Enum):
    """Where a settlement was founded."""

    COASTAL = "coastal"
    INLAND = "inland"


class Specialization(str, Enum):
    """Economic focus of a settlement."""

    AGRICULTURE = "agriculture"
    FISHING = "fishing"
    FORESTRY = "forestry"
    MINING = "mining"
    CRAFTING = "crafting"
    TRADE = "trade"
    SHIPBUILDING = "shipbuilding"
    SCHOLARSHIP = "scholarship"


class StructureKind(str, Enum):
    """Buildings placed by settlement templates."""

    TOWN_HALL = "town_hall"
    HARBOR = "harbor"
    MARKET = "market"
    WAREHOUSE = "warehouse"
    DOCKS = "docks"
    TAVERN = "tavern"
    WELL = "well"
    GRAIN_FARM = "grain_farm"
    WOODCUTTER = "woodcutter"
    HUT = "hut"


class RouteKind(str, Enum):
    """Travel medium of a route."""

    LAND = "land"
    SEA = "sea"


class Population(BaseModel):
    """Head counts by stratum."""

    total: int
    workforce: int
    middle: int
    upper: int
    elite: int
    children: int
    elderly: int
    infirm: int

    @classmethod
    def from_total(cls, total: int) -> "Population":
        """Split a total into strata with fixed ratios."""
        return cls(
            total=total,
            workforce=math.ceil(total * 0.4),
            middle=math.floor(total * 0.15),
            upper=math.floor(total * 0.04),
            elite=math.floor(total * 0.01),
            children=math.floor(total * 0.25),
            elderly=math.floor(total * 0.1),
            infirm=math.floor(total * 0.05),
        )


class Structure(BaseModel):
    """A building inside a settlement."""

    id: str
    kind: StructureKind
    name: str = ""


class Settlement(BaseModel):
    """A founded settlement. Its position never changes."""

    id: str
    name: str
    kind: SettlementKind
    site: SettlementSite
    position: Position
    population: Population
    specializations: list[Specialization] = Field(default_factory=list)
    structures: list[Structure] = Field(default_factory=list)
    estates: list[str] = Field(default_factory=list)

    @property
    def x(self) -> int:
        return self.position.x

    @property
    def y(self) -> int:
        return self.position.y


class Route(BaseModel, frozen=True):
    """A travelled path between two settlements."""

    from_settlement_id: str
    to_settlement_id: str
    path: tuple[Position, ...]
    kind: RouteKind
    distance: int
    complete: bool = True

    @classmethod
    def from_path(
        cls,
        from_settlement_id: str,
        to_settlement_id: str,
        path: list[Position],
        kind: RouteKind,
        complete: bool = True,
    ) -> "Route":
        """Build a route whose distance is its tile count."""
        return cls(
            from_settlement_id=from_settlement_id,
            to_settlement_id=to_settlement_id,
            path=tuple(path),
            kind=kind,
            distance=len(path),
            complete=complete,
        )
