"""Custom exceptions for world generation."""


class WorldError(Exception):
    """Base exception for world errors."""

    pass


class WorldNotSeededError(WorldError):
    """Raised when terrain is queried before the world has a seed."""

    pass


class WorldAlreadySeededError(WorldError):
    """Raised when a session is seeded a second time."""

    pass


class InvariantViolationError(WorldError):
    """Raised when a terrain value falls outside its documented range."""

    pass


class ShapingError(WorldError):
    """Raised when a landform pass runs twice on the same grid."""

    pass


class ChunkStoreError(WorldError):
    """Raised when a persisted chunk cannot be decoded."""

    pass
