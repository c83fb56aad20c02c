"""
Exception types raised by the pipeline.

All errors are raised where the problem is detected and propagate up to
`main.py`; nothing is retried.
"""


class HeatCostError(Exception):
    """Base class for all pipeline errors."""


class DataError(HeatCostError, ValueError):
    """Raised when an input table is missing required fields or holds invalid values."""


class RoutingError(DataError):
    """Raised when the routing engine returns no itineraries or malformed geometries."""


class ConfigurationError(HeatCostError, ValueError):
    """Raised when configuration values are invalid (e.g. weights not summing to 1)."""


class DegenerateNormalizationError(DataError):
    """Raised when a normalization base would divide by zero."""
