"""Settlement placement, routing and frontier expansion."""

from .config import ExpansionConfig, RouteConfig, SearchConfig, SettlementConfig
from .expansion import ExpansionDriver, ExpansionResult
from .founding import SettlementFounder
from .locations import LocationFinder, SeaLane, TileSource
from .models import (
    Population,
    Route,
    RouteKind,
    Settlement,
    SettlementKind,
    SettlementSite,
    Specialization,
    Structure,
    StructureKind,
)
from .naming import SettlementNamer
from .routes import RouteFinder, RouteResult

__all__ = [
    "ExpansionConfig",
    "ExpansionDriver",
    "ExpansionResult",
    "LocationFinder",
    "Population",
    "Route",
    "RouteConfig",
    "RouteFinder",
    "RouteKind",
    "RouteResult",
    "SeaLane",
    "SearchConfig",
    "Settlement",
    "SettlementConfig",
    "SettlementFounder",
    "SettlementKind",
    "SettlementNamer",
    "SettlementSite",
    "Specialization",
    "Structure",
    "StructureKind",
    "TileSource",
]
