"""Edge weight resolution from a configured edge property."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any

from .exceptions import ConfigError, WeightRangeError, WeightTypeError
from .graph import Edge

DEFAULT_WEIGHT = 1.0


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class EdgeWeightConfig:
    """Which edge property carries the weight, and the fallback weight.

    Attributes:
        property_name: Edge property read as the weight. An empty name means
            every edge uses ``default_weight``.
        default_weight: Weight of edges lacking the property (``> 0``).
    """

    property_name: str = ""
    default_weight: float = DEFAULT_WEIGHT

    def __post_init__(self) -> None:
        if not _is_number(self.default_weight):
            raise ConfigError(
                f"the default weight must be a number, actual got {self.default_weight!r}"
            )
        if not (self.default_weight > 0 and math.isfinite(self.default_weight)):
            raise ConfigError(
                f"the default weight must be greater than 0, actual got {self.default_weight!r}"
            )

    def weight(self, edge: Edge) -> float:
        """Return the positive weight of ``edge``.

        Deterministic and side-effect free; called once per outgoing edge each
        time a vertex forwards.

        Raises:
            WeightTypeError: If the property is present but not numeric.
            WeightRangeError: If the property is numeric but not a positive
                finite number.
        """
        if not self.property_name:
            return self.default_weight
        raw = edge.property(self.property_name)
        if raw is None:
            return self.default_weight
        if not _is_number(raw):
            raise WeightTypeError(
                f"the value of {self.property_name} must be a numeric value, "
                f"actual got {raw!r} on edge to {edge.target}"
            )
        weight = float(raw)
        if not (weight > 0 and math.isfinite(weight)):
            raise WeightRangeError(
                f"the value of {self.property_name} must be greater than 0, "
                f"actual got {raw!r} on edge to {edge.target}"
            )
        return weight


__all__ = ["DEFAULT_WEIGHT", "EdgeWeightConfig"]
