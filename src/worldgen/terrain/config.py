"""Terrain generation configuration models."""

from pydantic import BaseModel, Field

DEFAULT_CHUNK_SIZE = 512


class ElevationConfig(BaseModel):
    """Elevation field blend parameters."""

    continent_freq_x: float = Field(default=0.001, description="Continent mask x frequency")
    continent_freq_y: float = Field(default=0.002, description="Continent mask y frequency")
    continent_weight: float = Field(default=0.5, description="Continent mask weight")
    tectonic_freq: float = Field(default=0.015, description="Tectonic ridge frequency")
    tectonic_weight: float = Field(default=0.3, description="Tectonic ridge weight")
    mid_freq: float = Field(default=0.01, description="Medium octave frequency")
    mid_weight: float = Field(default=0.15, description="Medium octave weight")
    high_freq: float = Field(default=0.05, description="High octave frequency")
    high_weight: float = Field(default=0.05, description="High octave weight")
    grain_freq: float = Field(default=0.08, description="Fine grain frequency")
    grain_weight: float = Field(default=0.16, description="Fine grain weight")
    lowland_power: float = Field(
        default=1.5, description="Exponent compressing mid-range values toward lowlands"
    )
    peak_threshold: float = Field(default=0.85, description="Elevation where peak boost starts")
    peak_freq: float = Field(default=0.1, description="Peak boost noise frequency")
    peak_gain: float = Field(default=0.3, description="Peak boost scale")


class ClimateConfig(BaseModel):
    """Moisture, temperature and wind parameters."""

    moisture_freq: float = Field(default=0.01, description="Base moisture frequency")
    moisture_grain_freq: float = Field(default=0.08, description="Moisture grain frequency")
    relief_freq: float = Field(
        default=0.005, description="Elevation-proxy noise frequency (moisture and cooling)"
    )
    moisture_power: float = Field(
        default=0.8, description="Exponent favouring moderate moisture"
    )
    wind_period: float = Field(default=1000.0, description="Global wind band period in tiles")
    wind_local_freq: float = Field(default=0.003, description="Local wind variation frequency")
    temperature_freqs: tuple[float, float, float] = Field(
        default=(0.0005, 0.001, 0.002), description="Temperature octave frequencies"
    )
    temperature_weights: tuple[float, float, float] = Field(
        default=(0.4, 0.3, 0.3), description="Temperature octave weights"
    )
    temperature_grain_freq: float = Field(default=0.07, description="Temperature grain frequency")
    latitude_freq: float = Field(default=0.002, description="Latitude cosine frequency")


class ClassificationConfig(BaseModel):
    """Biome decision table thresholds."""

    ocean_max: float = Field(default=0.12, description="Elevation below this is ocean")
    water_max: float = Field(default=0.18, description="Elevation below this is water")
    beach_max: float = Field(default=0.19, description="Elevation below this is beach")
    rock_min: float = Field(default=0.49, description="Elevation above this is rock")
    alpine_min: float = Field(default=0.38, description="Elevation above this is alpine")
    subalpine_min: float = Field(default=0.30, description="Elevation above this is sub-alpine")
    arid_moisture: float = Field(default=0.3, description="Moisture below this is arid")
    woodland_moisture: float = Field(
        default=0.45, description="Moisture below this (and not arid) is woodland"
    )
    cold_temperature: float = Field(default=0.07, description="Temperature below this is cold")
    hot_temperature: float = Field(default=0.42, description="Temperature above this is hot")


class ShapingConfig(BaseModel):
    """Landform shaping pass parameters."""

    erosion_threshold: float = Field(default=0.12, description="Height above neighbour mean that erodes")
    erosion_amount: float = Field(default=0.02, description="Elevation removed by erosion")
    peak_threshold: float = Field(default=0.85, description="Minimum elevation for peak bonus")
    peak_bonus: float = Field(default=0.03, description="Elevation added to local maxima")
    cliff_delta: float = Field(default=0.25, description="Neighbour delta that marks a cliff")
    cliff_nudge: float = Field(default=0.02, description="Cliff steepening amount")
    lake_freq: float = Field(default=0.02, description="Lake noise frequency")
    lake_noise_max: float = Field(default=0.1, description="Lake noise must be below this")
    lake_min: float = Field(default=0.18, description="Lower bound of lake elevation band")
    lake_max: float = Field(default=0.3, description="Upper bound of lake elevation band")
    lake_depth: float = Field(default=0.02, description="Depth below local mean for lake basins")
    river_freq: float = Field(default=0.004, description="Downhill river seed noise frequency")
    river_seed_threshold: float = Field(default=0.985, description="Seed noise threshold")
    river_min_elevation: float = Field(default=0.5, description="Minimum seed elevation")
    river_steps: int = Field(default=12, description="Maximum downhill steps")
    river_cut: float = Field(default=0.015, description="Elevation removed per river step")
    river_stop_elevation: float = Field(default=0.18, description="Stop carving below this")
    landmark_gate_freq: float = Field(default=0.01, description="Landmark gate noise frequency")
    landmark_gate: float = Field(default=0.3, description="Gate value below which no landmark appears")
    landmark_large_freq: float = Field(default=0.02, description="Large landmark noise frequency")
    landmark_fine_freq: float = Field(default=0.1, description="Fine landmark noise frequency")
    landmark_radius_fraction: float = Field(
        default=1.0 / 3.0, description="Landmark radius as a fraction of chunk size"
    )


class RiverConfig(BaseModel):
    """Coastal river tracing parameters."""

    enabled: bool = Field(default=True, description="Carve rivers into generated chunks")
    coast_elevation: float = Field(default=0.2, description="Water/land split for river mouths")
    source_spacing: float = Field(default=50.0, description="Min spacing between river sources")
    max_sources: int = Field(default=8, description="Maximum river sources per chunk")
    max_steps: int = Field(default=200, description="Maximum uphill trace steps")
    min_length: int = Field(default=6, description="Minimum path length to carve")
    boundary_margin: int = Field(default=2, description="Path ends closer to the edge are discarded")
    tail_length: int = Field(default=4, description="Trailing path cells left uncarved")
    cut: float = Field(default=0.02, description="Elevation removed along the river")
    wetting: float = Field(default=0.3, description="Moisture added along the river")


class TerrainConfig(BaseModel):
    """Complete terrain generation configuration."""

    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, description="Chunk edge length in tiles")
    elevation: ElevationConfig = Field(default_factory=ElevationConfig)
    climate: ClimateConfig = Field(default_factory=ClimateConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    shaping: ShapingConfig = Field(default_factory=ShapingConfig)
    rivers: RiverConfig = Field(default_factory=RiverConfig)
