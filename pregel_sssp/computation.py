"""Vertex program for single-source shortest paths.

Single-source Bellman-Ford unrolled as a BSP vertex program: superstep 0
seeds the source's neighbours, and every later superstep performs one round
of edge relaxation for the vertices that received a (combined) message.

The two phases are exposed as reducers over local state:

* :meth:`SingleSourceShortestPath.init` - ``vertex -> StepResult``
* :meth:`SingleSourceShortestPath.step` - ``(vertex, messages, reached) -> StepResult``

and as engine callbacks (:meth:`~SingleSourceShortestPath.compute0`,
:meth:`~SingleSourceShortestPath.compute`) that apply the result to the
vertex and hand the outbound messages to the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Protocol, Tuple

from .aggregator import REACHED_TARGETS, ReachedTargets, is_all_targets_reached
from .config import ShortestPathConfig
from .graph import Vertex, VertexState
from .ids import VertexId
from .logger import Logger, NoopLogger
from .targets import QuantityType
from .value import PathValue, RelaxationMessage

Outbound = Tuple[VertexId, RelaxationMessage]


class ComputationContext(Protocol):
    """Message channel offered by the engine during a compute call."""

    superstep: int

    def send_message(self, target: VertexId, message: RelaxationMessage) -> None:
        """Deliver ``message`` to ``target`` at the next superstep."""
        ...


class WorkerContext(Protocol):
    """Aggregation primitive offered by the engine around each superstep."""

    superstep: int

    def aggregated_value(self, key: str) -> FrozenSet[VertexId]:
        ...

    def aggregate_value(self, key: str, value: Iterable[VertexId]) -> None:
        ...


@dataclass
class StepResult:
    """New vertex value plus the messages a compute call emits.

    Attributes:
        value: The vertex's value after the call.
        messages: ``(recipient, message)`` pairs in emission order.
        adoptions: Number of inbound messages that improved the value.
        newly_reached: Whether the vertex added itself to the reached set.
    """

    value: PathValue
    messages: List[Outbound] = field(default_factory=list)
    adoptions: int = 0
    newly_reached: bool = False


class SingleSourceShortestPath:
    """Per-worker computation instance.

    Holds the worker's replica of the reached-target set between
    :meth:`before_superstep` and :meth:`after_superstep`; everything else is
    read-only configuration.
    """

    name = "single_source_shortest_path"
    category = "path"

    def __init__(self, config: ShortestPathConfig, logger: Logger | None = None) -> None:
        self.config = config
        self.source = config.source
        self.targets = config.targets
        self.weights = config.weights
        self.logger = logger or NoopLogger()
        self.reached_targets = ReachedTargets()

    # ---- reducers -----------------------------------------------------

    def init(self, vertex: Vertex) -> StepResult:
        """Superstep 0 for ``vertex``."""
        value = PathValue()
        if vertex.id != self.source:
            return StepResult(value)

        value.zero_distance(vertex.id)

        if (
            self.targets.quantity is QuantityType.SINGLE
            and self.targets.single_target == self.source
        ):
            self.logger.debug("source_equals_target", source=self.source)
            return StepResult(value)

        if vertex.num_edges() <= 0:
            self.logger.debug("source_isolated", source=self.source, targets=self.targets.to_text())
            return StepResult(value)

        result = StepResult(value)
        for edge in vertex.edges:
            message = RelaxationMessage.extend(value.path, self.weights.weight(edge))
            result.messages.append((edge.target, message))
        return result

    def step(
        self,
        vertex: Vertex,
        messages: Iterable[RelaxationMessage],
        reached: Optional[ReachedTargets] = None,
    ) -> StepResult:
        """Steady-state superstep for ``vertex`` given its inbound messages.

        Args:
            vertex: The vertex being computed; its value is not modified.
            messages: Inbound messages, normally exactly one after combining.
            reached: Worker-local reached-target replica; defaults to this
                instance's replica. The vertex adds itself when it is a target.
        """
        if reached is None:
            reached = self.reached_targets
        value = vertex.value.copy()
        result = StepResult(value)

        is_target = self.targets.is_target(vertex.id)
        if is_target and vertex.id not in reached:
            reached.add(vertex.id)
            result.newly_reached = True

        for message in messages:
            if not message.total_weight < value.total_weight:
                continue
            value.shorter_path(vertex.id, message.path, message.total_weight)
            result.adoptions += 1

            if is_target and is_all_targets_reached(self.targets, reached, vertex.id):
                continue
            if vertex.num_edges() <= 0:
                continue

            for edge in vertex.edges:
                forward = RelaxationMessage.extend(
                    value.path, value.total_weight + self.weights.weight(edge)
                )
                result.messages.append((edge.target, forward))
        return result

    # ---- engine callbacks ---------------------------------------------

    def compute0(self, context: ComputationContext, vertex: Vertex) -> StepResult:
        vertex.state = VertexState.INITIALIZED
        result = self.init(vertex)
        vertex.value = result.value
        for target, message in result.messages:
            context.send_message(target, message)
        vertex.inactivate()
        return result

    def compute(
        self,
        context: ComputationContext,
        vertex: Vertex,
        messages: Iterable[RelaxationMessage],
    ) -> StepResult:
        result = self.step(vertex, messages)
        vertex.value = result.value
        for target, message in result.messages:
            context.send_message(target, message)
        vertex.inactivate()
        return result

    def before_superstep(self, context: WorkerContext) -> None:
        """Replace the local replica with the globally merged value."""
        self.reached_targets = ReachedTargets(context.aggregated_value(REACHED_TARGETS))

    def after_superstep(self, context: WorkerContext) -> None:
        """Submit the local replica for the barrier merge."""
        context.aggregate_value(REACHED_TARGETS, self.reached_targets.snapshot())


__all__ = [
    "ComputationContext",
    "WorkerContext",
    "StepResult",
    "SingleSourceShortestPath",
]
