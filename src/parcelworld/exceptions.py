"""Custom exceptions for world generation."""


class WorldGenError(Exception):
    """Base exception for world generation errors."""

    pass


class ConfigurationError(WorldGenError):
    """Raised when a world cannot be built from the given configuration."""

    pass


class DuplicateLocationError(ConfigurationError):
    """Raised when a location id is registered twice."""

    pass


class UnknownLocationError(WorldGenError):
    """Raised when a route references a location that does not exist."""

    pass


class FrozenStructureError(WorldGenError):
    """Raised when registering into a structure after the build finished."""

    pass
