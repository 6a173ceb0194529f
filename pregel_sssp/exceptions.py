"""Custom exception types used across :mod:`pregel_sssp`."""

from __future__ import annotations


class PregelSSSPError(Exception):
    """Base class for all package-specific errors."""


class InputError(PregelSSSPError, ValueError):
    """Raised for invalid user input such as malformed vertex ids."""


class GraphFormatError(InputError):
    """Raised when parsing a graph file fails."""


class ConfigError(PregelSSSPError, ValueError):
    """Raised for invalid job configuration, detected before superstep 0."""


class EdgeWeightError(PregelSSSPError, ValueError):
    """Raised when an edge cannot yield a usable weight during relaxation."""


class WeightTypeError(EdgeWeightError):
    """Raised when the weight property holds a non-numeric value."""


class WeightRangeError(EdgeWeightError):
    """Raised when a resolved weight is not a positive finite number."""


class AlgorithmError(PregelSSSPError, RuntimeError):
    """Raised when algorithm invariants are violated at runtime."""


__all__ = [
    "PregelSSSPError",
    "InputError",
    "GraphFormatError",
    "ConfigError",
    "EdgeWeightError",
    "WeightTypeError",
    "WeightRangeError",
    "AlgorithmError",
]
