"""Job and engine configuration, validated before superstep 0."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .exceptions import ConfigError
from .ids import VertexId
from .targets import TargetSpec, parse_source_id
from .weights import DEFAULT_WEIGHT, EdgeWeightConfig

OPTION_PREFIX = "single_source_shortest_path."
OPTION_SOURCE_ID = OPTION_PREFIX + "source_id"
OPTION_TARGET_ID = OPTION_PREFIX + "target_id"
OPTION_WEIGHT_PROPERTY = OPTION_PREFIX + "weight_property"
OPTION_DEFAULT_WEIGHT = OPTION_PREFIX + "default_weight"


def _lookup(options: Mapping[str, Any], key: str, default: Any) -> Any:
    if key in options:
        return options[key]
    short = key[len(OPTION_PREFIX):]
    return options.get(short, default)


def _text(raw: Any) -> str:
    # an explicit None is as blank as a missing option
    return "" if raw is None else str(raw)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ShortestPathConfig:
    """Source/target selection and edge weighting for one job.

    Attributes:
        source_id: Text form of the source vertex id (required).
        target_id: Comma-separated target ids, or ``*`` for every vertex.
        weight_property: Edge property used as weight; empty for none.
        default_weight: Weight of edges without ``weight_property``.

    Raises:
        ConfigError: On construction, for any invalid option.
    """

    source_id: str
    target_id: str
    weight_property: str = ""
    default_weight: float = DEFAULT_WEIGHT

    source: VertexId = field(init=False, repr=False, compare=False)
    targets: TargetSpec = field(init=False, repr=False, compare=False)
    weights: EdgeWeightConfig = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.source_id, str) or not isinstance(self.target_id, str):
            raise ConfigError("source_id and target_id must be strings")
        if self.weight_property is None:
            object.__setattr__(self, "weight_property", "")
        object.__setattr__(self, "source", parse_source_id(self.source_id))
        object.__setattr__(self, "targets", TargetSpec.parse(self.target_id))
        object.__setattr__(
            self,
            "weights",
            EdgeWeightConfig(self.weight_property.strip(), self.default_weight),
        )

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "ShortestPathConfig":
        """Build from a key/value mapping using the option names above.

        Both the prefixed keys (``single_source_shortest_path.source_id``) and
        the short keys (``source_id``) are accepted. ``default_weight`` may be
        given as a string.
        """
        raw_weight = _lookup(options, OPTION_DEFAULT_WEIGHT, DEFAULT_WEIGHT)
        if isinstance(raw_weight, str):
            try:
                raw_weight = float(raw_weight)
            except ValueError:
                raise ConfigError(
                    f"the param '{OPTION_DEFAULT_WEIGHT}' must be a number, "
                    f"actual got {raw_weight!r}"
                ) from None
        return cls(
            source_id=_text(_lookup(options, OPTION_SOURCE_ID, "")),
            target_id=_text(_lookup(options, OPTION_TARGET_ID, "")),
            weight_property=_text(_lookup(options, OPTION_WEIGHT_PROPERTY, "")),
            default_weight=raw_weight,
        )

    def to_options(self) -> dict:
        return {
            OPTION_SOURCE_ID: self.source_id,
            OPTION_TARGET_ID: self.target_id,
            OPTION_WEIGHT_PROPERTY: self.weight_property,
            OPTION_DEFAULT_WEIGHT: self.default_weight,
        }


@dataclass(frozen=True)
class EngineConfig:
    """Knobs for the local BSP harness.

    Attributes:
        num_workers: Number of partitions/workers (``>= 1``).
        parallel: Run the workers of a superstep on a thread pool.
        max_supersteps: Upper bound on supersteps after superstep 0; ``0``
            means unbounded.
        stop_when_targets_reached: Halt as soon as the aggregated reached set
            covers every SINGLE/MULTIPLE target, even if messages are pending.
            Later improvements to already reached targets are then lost.
    """

    num_workers: int = 1
    parallel: bool = False
    max_supersteps: int = 0
    stop_when_targets_reached: bool = False

    def __post_init__(self) -> None:
        if not _is_int(self.num_workers) or self.num_workers < 1:
            raise ConfigError("num_workers must be a positive integer")
        if not _is_int(self.max_supersteps) or self.max_supersteps < 0:
            raise ConfigError("max_supersteps must be a non-negative integer")


def load_config(options: Mapping[str, Any], engine: Optional[Mapping[str, Any]] = None) -> tuple:
    """Return ``(ShortestPathConfig, EngineConfig)`` from plain mappings."""
    try:
        engine_cfg = EngineConfig(**dict(engine or {}))
    except TypeError as exc:
        raise ConfigError(f"invalid engine option: {exc}") from None
    return ShortestPathConfig.from_options(options), engine_cfg


__all__ = [
    "OPTION_SOURCE_ID",
    "OPTION_TARGET_ID",
    "OPTION_WEIGHT_PROPERTY",
    "OPTION_DEFAULT_WEIGHT",
    "ShortestPathConfig",
    "EngineConfig",
    "load_config",
]
