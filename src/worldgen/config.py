"""World configuration loading from TOML files."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from .settlements.config import SettlementConfig
from .terrain.config import DEFAULT_CHUNK_SIZE, TerrainConfig

CONFIGS_DIR = Path(__file__).parent.parent.parent / "configs"


class WorldConfig(BaseModel):
    """World identity and storage."""

    seed: str | None = Field(default=None, description="Seed string; None means seed later")
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0, description="Chunk edge length")
    cache_dir: Path | None = Field(
        default=None, description="Directory for persisted chunks; None keeps chunks in memory"
    )


class Config(BaseModel):
    """Complete configuration for a world session."""

    world: WorldConfig = Field(default_factory=WorldConfig)
    terrain: TerrainConfig = Field(default_factory=TerrainConfig)
    settlements: SettlementConfig = Field(default_factory=SettlementConfig)

    @model_validator(mode="after")
    def _sync_chunk_size(self) -> "Config":
        # world.chunk_size is authoritative
        self.terrain.chunk_size = self.world.chunk_size
        return self


def load_config(config_path: Path) -> Config:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed Config object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return Config.model_validate(data)


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator
    2. configs/{name}.toml
    3. configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        FileNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {name}")

    config_path = CONFIGS_DIR / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = CONFIGS_DIR / name
    if config_path.exists():
        return config_path

    raise FileNotFoundError(
        f"Config '{name}' not found in {CONFIGS_DIR}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    if not CONFIGS_DIR.exists():
        return []
    return sorted(p.stem for p in CONFIGS_DIR.glob("*.toml"))
