"""Public package exports for :mod:`pregel_sssp`."""

from __future__ import annotations

from .aggregator import (
    REACHED_TARGETS,
    ReachedTargets,
    ReachedTargetsAggregator,
    is_all_targets_reached,
)
from .combiner import ShortestPathCombiner, combine, combine_all
from .computation import SingleSourceShortestPath, StepResult
from .config import EngineConfig, ShortestPathConfig, load_config
from .engine import BSPEngine, ShortestPathResult, run_shortest_path
from .exceptions import (
    AlgorithmError,
    ConfigError,
    EdgeWeightError,
    GraphFormatError,
    InputError,
    PregelSSSPError,
    WeightRangeError,
    WeightTypeError,
)
from .graph import Edge, PropertyGraph, Vertex, VertexState
from .ids import IdType, VertexId
from .io import read_graph, write_graph
from .logger import Logger, NoopLogger, StdLogger
from .targets import QuantityType, TargetSpec, parse_source_id
from .value import PathValue, RelaxationMessage
from .weights import EdgeWeightConfig

__version__ = "0.1.0"

__all__ = [
    "IdType",
    "VertexId",
    "PathValue",
    "RelaxationMessage",
    "combine",
    "combine_all",
    "ShortestPathCombiner",
    "QuantityType",
    "TargetSpec",
    "parse_source_id",
    "EdgeWeightConfig",
    "ReachedTargets",
    "ReachedTargetsAggregator",
    "REACHED_TARGETS",
    "is_all_targets_reached",
    "SingleSourceShortestPath",
    "StepResult",
    "ShortestPathConfig",
    "EngineConfig",
    "load_config",
    "Edge",
    "Vertex",
    "VertexState",
    "PropertyGraph",
    "BSPEngine",
    "ShortestPathResult",
    "run_shortest_path",
    "read_graph",
    "write_graph",
    "Logger",
    "NoopLogger",
    "StdLogger",
    "PregelSSSPError",
    "InputError",
    "GraphFormatError",
    "ConfigError",
    "EdgeWeightError",
    "WeightTypeError",
    "WeightRangeError",
    "AlgorithmError",
]
