"""Settlement name generation."""

from ..terrain.noise import SeededRandom

COASTAL_ROOTS = ("Port", "Lake", "Stone", "Bay", "Shore", "Cliff", "North", "South", "East", "West")
INLAND_ROOTS = ("Ridge", "Field", "Oak", "River", "Pine", "Hill", "Crest", "Willow", "Glen", "Crown")
SUFFIXES = ("ton", "ville", "stead", "burg", "mouth", "ford", "haven", "holm")

_COASTAL_HINTS = ("coast", "ocean", "bay")


class SettlementNamer:
    """Builds names from a root and a suffix."""

    def roots_for(self, hint: str | None) -> tuple[str, ...]:
        """Root list for a biome hint; no hint allows every root."""
        if not hint:
            return COASTAL_ROOTS + INLAND_ROOTS
        if any(word in hint for word in _COASTAL_HINTS):
            return COASTAL_ROOTS
        return INLAND_ROOTS

    def generate(self, rng: SeededRandom, hint: str | None = None) -> str:
        """Draw a root, then a suffix."""
        root = rng.choice(self.roots_for(hint))
        suffix = rng.choice(SUFFIXES)
        return f"{root}{suffix}"
