"""Error taxonomy for astro-purpose-mcp.

Only invalid input and failed house geometry abort a calculation. A single
body that cannot be computed is reported as a PartialBodyFailure on the chart,
and missing table coverage comes back as an Unavailable result.
"""


class AstroError(Exception):
    """Base class for every error raised by the calculation core."""
    pass


class InvalidInput(AstroError, ValueError):
    """Raised when a birth event or query argument is out of range."""
    pass


class InvalidTimeZone(InvalidInput):
    """Raised when a timezone identifier is unknown or malformed."""
    pass


class InvalidCivilTime(InvalidInput):
    """Raised when a wall-clock time does not exist in its zone (DST gap)."""
    pass


class EphemerisError(AstroError):
    """Raised when an ephemeris calculation fails."""
    pass


class HouseCalculationError(EphemerisError):
    """Raised when house cusps cannot be computed for a location."""
    pass


class ReferenceDataError(AstroError):
    """Raised when a reference table file is missing required fields."""
    pass
