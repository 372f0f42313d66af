"""Exception hierarchy for the isocity package."""


class IsoCityError(Exception):
    """Base class for all isocity errors."""


class ConfigurationError(IsoCityError, ValueError):
    """Raised when a transformer or system configuration is unusable."""


class GeoJSONError(IsoCityError):
    """Raised when a footprint source is not a usable GeoJSON FeatureCollection."""


class UnknownVenueError(IsoCityError, KeyError):
    """Raised when a venue preset key is not registered."""

    # KeyError quotes its message
    def __str__(self):
        return str(self.args[0]) if self.args else ""


class GraphicsDestroyedError(IsoCityError, RuntimeError):
    """Raised when drawing into a graphics handle that was already released."""
