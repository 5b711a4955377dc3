"""Settlement search, routing and expansion configuration models."""

from pydantic import BaseModel, Field


class SearchConfig(BaseModel):
    """Location finder parameters."""

    coastal_count: int = Field(default=6, description="Coastal sites picked per chunk scan")
    coast_search_steps: int = Field(
        default=20, description="Max BFS steps from a beach to reach ocean"
    )
    inland_min_elevation: float = Field(default=0.2, description="Minimum inland site elevation")
    inland_min_distance: float = Field(default=8.0, description="Min distance to a coastal site")
    inland_max_distance: float = Field(default=24.0, description="Max distance to a coastal site")
    sea_lane_steps: int = Field(default=100, description="Step budget for a sea lane walk")
    preferred_land_contact: int = Field(
        default=4, description="Base preferred count of land neighbours while sailing"
    )
    preferred_land_jitter: int = Field(
        default=4, description="Random extra preferred count, in [0, jitter)"
    )
    sea_lane_jitter: float = Field(default=0.5, description="Random jitter added to move penalties")
    min_landing_distance: int = Field(
        default=6, description="A lane may only land this far (Chebyshev) from its origin"
    )
    neighbor_attempts: int = Field(default=1000, description="Samples for coastal neighbours")
    neighbor_min_distance: float = Field(default=12.0, description="Coastal neighbour min distance")
    neighbor_max_distance: float = Field(default=40.0, description="Coastal neighbour max distance")
    inland_attempts: int = Field(default=100, description="Samples for an inland neighbour")
    expansion_min_radius: float = Field(default=6.0, description="Expansion scan inner radius")
    land_max_radius: float = Field(default=20.0, description="Land expansion scan outer radius")
    sea_max_radius: float = Field(default=160.0, description="Sea expansion scan outer radius")


class RouteConfig(BaseModel):
    """Route finder parameters."""

    max_steps: int = Field(default=1000, description="Step budget per route")
    jitter: float = Field(default=0.3, description="Random jitter added to step scores")
    enclosed_neighbors: int = Field(
        default=6, description="Goal neighbours outside the allowed set that mark it enclosed"
    )
    enclosed_penalty: float = Field(default=3.0, description="Score added when the goal is enclosed")
    inland_neighbors: int = Field(
        default=3, description="Goal neighbours that are not beach to mark it inland"
    )
    inland_bonus: float = Field(default=8.0, description="Score removed when the goal is inland")


class ExpansionConfig(BaseModel):
    """Frontier expansion parameters."""

    target_count: int = Field(default=30, description="Default settlement count to grow to")
    min_distance: float = Field(default=6.0, description="Minimum distance between settlements")
    coastal_neighbors: int = Field(default=2, description="Coastal candidates per frontier step")
    inland_chance: float = Field(default=0.5, description="Chance of an inland offshoot")
    inland_min_distance: float = Field(default=6.0, description="Inland offshoot min distance")
    inland_max_distance: float = Field(default=20.0, description="Inland offshoot max distance")
    chain_chance: float = Field(default=0.5, description="Chance of chaining a further inland site")
    chain_min_distance: float = Field(default=12.0, description="Chained site min distance")
    chain_max_distance: float = Field(default=30.0, description="Chained site max distance")
    sea_lane_fallback: bool = Field(
        default=True, description="Sail a sea lane when no coastal neighbour is found"
    )


class SettlementConfig(BaseModel):
    """Complete settlement generation configuration."""

    search: SearchConfig = Field(default_factory=SearchConfig)
    routes: RouteConfig = Field(default_factory=RouteConfig)
    expansion: ExpansionConfig = Field(default_factory=ExpansionConfig)
