"""Biome types, their persistence codes, and the per-tile terrain record."""

from dataclasses import dataclass
from enum import Enum


class Biome(str, Enum):
    """Closed set of biomes produced by the classifier."""

    BEACH = "beach"
    DESERT = "desert"
    WOODLAND = "woodland"
    TAIGA = "taiga"
    TUNDRA = "tundra"
    RAINFOREST = "rainforest"
    GRASSLAND = "grassland"
    FOREST = "forest"
    MOUNTAIN = "mountain"
    ROCK = "rock"
    ALPINE = "alpine"
    ALPINE_GRASSLAND = "alpine_grassland"
    OCEAN = "ocean"
    WATER = "water"

    @property
    def code(self) -> int:
        """Stable u8 code used in the binary chunk format."""
        return _BIOME_CODES[self]

    @property
    def is_water(self) -> bool:
        """Whether this biome is open water."""
        return self in _WATER_BIOMES

    @property
    def is_land(self) -> bool:
        """Whether this biome is dry land (beach included)."""
        return self not in _WATER_BIOMES

    @classmethod
    def from_code(cls, code: int) -> "Biome":
        """Look up a biome by persistence code.

        Raises:
            ValueError: If the code is not assigned.
        """
        try:
            return _BIOMES_BY_CODE[code]
        except KeyError:
            raise ValueError(f"Unknown biome code: {code}") from None


_BIOME_CODES: dict[Biome, int] = {
    Biome.BEACH: 1,
    Biome.DESERT: 2,
    Biome.WOODLAND: 3,
    Biome.TAIGA: 4,
    Biome.TUNDRA: 5,
    Biome.RAINFOREST: 6,
    Biome.GRASSLAND: 7,
    Biome.FOREST: 8,
    Biome.MOUNTAIN: 9,
    Biome.ROCK: 10,
    Biome.ALPINE: 11,
    Biome.ALPINE_GRASSLAND: 12,
    Biome.OCEAN: 13,
    Biome.WATER: 14,
}

_BIOMES_BY_CODE: dict[int, Biome] = {code: biome for biome, code in _BIOME_CODES.items()}

_WATER_BIOMES = frozenset({
    Biome.OCEAN,
    Biome.WATER,
})

# Biomes a sea route may cross, and biomes a land route may cross
SEA_ROUTE_BIOMES = frozenset({
    Biome.OCEAN,
    Biome.WATER,
    Biome.BEACH,
})

LAND_ROUTE_BIOMES = frozenset(b for b in Biome if b.is_land)

VALID_BIOME_CODES = frozenset(_BIOMES_BY_CODE)


@dataclass(frozen=True)
class Cell:
    """Terrain record for a single tile."""

    elevation: float
    moisture: float
    temperature: float
    biome: Biome
