"""Local bulk-synchronous-parallel harness driving the vertex program.

Vertices are hash-partitioned over workers. Each superstep every worker
computes its active vertices, buffering outbound messages in a per-worker
outbox that already combines messages per recipient. At the barrier the
outboxes are combined again across workers, the reached-target aggregator
is merged, and the surviving messages become the next superstep's inboxes.
The run ends when a barrier leaves no message pending.
"""

from __future__ import annotations

import time
import zlib
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt

from .aggregator import REACHED_TARGETS, Aggregators, ReachedTargetsAggregator
from .combiner import ShortestPathCombiner
from .computation import SingleSourceShortestPath, StepResult
from .config import EngineConfig, ShortestPathConfig
from .exceptions import AlgorithmError
from .graph import PropertyGraph, Vertex, VertexState
from .ids import VertexId
from .logger import Logger, NoopLogger
from .targets import QuantityType, TargetSpec
from .value import PathValue, RelaxationMessage


def partition(vertex_ids: Sequence[VertexId], num_workers: int) -> npt.NDArray[np.int64]:
    """Assign each vertex to a worker by a stable hash of its id.

    Returns:
        Array of worker indexes aligned with ``vertex_ids``.
    """
    keys = np.fromiter(
        (zlib.crc32(f"{v.kind.code}:{v.value}".encode("utf-8")) for v in vertex_ids),
        dtype=np.uint32,
        count=len(vertex_ids),
    )
    return (keys % np.uint32(num_workers)).astype(np.int64)


@dataclass
class SuperstepStats:
    """What happened during one superstep across all workers."""

    superstep: int
    active: int = 0
    messages_sent: int = 0
    messages_delivered: int = 0
    adoptions: int = 0
    reached: int = 0


class Worker:
    """One partition of the graph with its own computation instance.

    Implements the computation and worker contexts: ``send_message`` buffers
    into the outbox, ``aggregated_value``/``aggregate_value`` talk to the
    master's aggregators.
    """

    def __init__(
        self,
        index: int,
        vertices: List[Vertex],
        computation: SingleSourceShortestPath,
        aggregators: Aggregators,
        combiner: Callable[[RelaxationMessage, RelaxationMessage], RelaxationMessage],
    ) -> None:
        self.index = index
        self.vertices = {v.id: v for v in vertices}
        self.computation = computation
        self.aggregators = aggregators
        self.combiner = combiner
        self.superstep = 0
        self.inbox: Dict[VertexId, RelaxationMessage] = {}
        self.outbox: Dict[VertexId, RelaxationMessage] = {}
        self.sent = 0

    # ---- contexts -----------------------------------------------------

    def send_message(self, target: VertexId, message: RelaxationMessage) -> None:
        self.sent += 1
        current = self.outbox.get(target)
        self.outbox[target] = message if current is None else self.combiner(current, message)

    def aggregated_value(self, key: str) -> FrozenSet[VertexId]:
        return self.aggregators.read(key)

    def aggregate_value(self, key: str, value: Iterable[VertexId]) -> None:
        self.aggregators.write(key, value)

    # ---- superstep ----------------------------------------------------

    def compute(self, superstep: int) -> SuperstepStats:
        """Run every vertex due in ``superstep``; messages go to the outbox."""
        self.superstep = superstep
        self.sent = 0
        stats = SuperstepStats(superstep)
        if superstep == 0:
            for vertex in self.vertices.values():
                self._account(stats, self.computation.compute0(self, vertex))
        else:
            inbox, self.inbox = self.inbox, {}
            for vertex_id, message in inbox.items():
                vertex = self.vertices[vertex_id]
                vertex.state = VertexState.ACTIVE
                self._account(stats, self.computation.compute(self, vertex, [message]))
        stats.messages_sent = self.sent
        return stats

    @staticmethod
    def _account(stats: SuperstepStats, result: StepResult) -> None:
        stats.active += 1
        stats.adoptions += result.adoptions

    def drain(self) -> Dict[VertexId, RelaxationMessage]:
        outbox, self.outbox = self.outbox, {}
        return outbox


@dataclass
class ShortestPathResult:
    """Final per-vertex values of a finished job.

    Attributes:
        source: The source vertex id.
        targets: The parsed target selection.
        values: Final :class:`PathValue` of every vertex.
        supersteps: Number of supersteps executed, superstep 0 included.
        reached_targets: Last globally merged reached-target set.
        counters: Totals over the whole run.
        history: Per-superstep statistics.
        wall_ms: Wall-clock duration of the run.
    """

    source: VertexId
    targets: TargetSpec
    values: Dict[VertexId, PathValue]
    supersteps: int
    reached_targets: FrozenSet[VertexId]
    counters: Dict[str, int] = field(default_factory=dict)
    history: List[SuperstepStats] = field(default_factory=list)
    wall_ms: float = 0.0

    def value(self, vertex_id: Any) -> PathValue:
        return self.values[VertexId.of(vertex_id)]

    def distance(self, vertex_id: Any) -> float:
        return self.value(vertex_id).total_weight

    def path(self, vertex_id: Any) -> List[VertexId]:
        """Vertices from the source to ``vertex_id``; empty if unreachable."""
        return list(self.value(vertex_id).path)

    def raw_path(self, vertex_id: Any) -> List[Any]:
        return [v.value for v in self.path(vertex_id)]

    def targets_values(self) -> Dict[VertexId, PathValue]:
        """Values of the configured targets, or of every reachable vertex for ALL."""
        if self.targets.quantity is QuantityType.ALL:
            chosen = [v for v, val in self.values.items() if val.reachable]
        else:
            chosen = [v for v in self.targets.target_ids if v in self.values]
        return {v: self.values[v] for v in sorted(chosen, key=lambda v: v.sort_key)}

    def distances(self, order: Sequence[Any]) -> npt.NDArray[np.float64]:
        """Distances for ``order`` as a float array (``inf`` when unreachable)."""
        return np.array([self.distance(v) for v in order], dtype=np.float64)


class BSPEngine:
    """Runs :class:`SingleSourceShortestPath` over a :class:`PropertyGraph`."""

    def __init__(
        self,
        graph: PropertyGraph,
        config: ShortestPathConfig,
        engine_config: Optional[EngineConfig] = None,
        logger: Logger | None = None,
    ) -> None:
        self.graph = graph
        self.config = config
        self.cfg = engine_config or EngineConfig()
        self.logger = logger or NoopLogger()
        self.combiner = ShortestPathCombiner()
        self.counters: Dict[str, int] = {
            "messages_sent": 0,
            "messages_delivered": 0,
            "adoptions": 0,
            "vertices_computed": 0,
        }

    def _build_workers(self, aggregators: Aggregators) -> List[Worker]:
        ids = self.graph.vertex_ids()
        owners = partition(ids, self.cfg.num_workers)
        buckets: List[List[Vertex]] = [[] for _ in range(self.cfg.num_workers)]
        for vid, owner in zip(ids, owners.tolist()):
            buckets[owner].append(self.graph.vertex(vid))
        self._owner = dict(zip(ids, owners.tolist()))
        return [
            Worker(
                i,
                bucket,
                SingleSourceShortestPath(self.config, logger=self.logger.bind(worker=i)),
                aggregators,
                self.combiner,
            )
            for i, bucket in enumerate(buckets)
        ]

    def _barrier(
        self, workers: List[Worker], aggregators: Aggregators, stats: SuperstepStats
    ) -> int:
        """Merge aggregators and route combined messages; return pending count."""
        aggregators.merge()
        delivered: Dict[VertexId, RelaxationMessage] = {}
        for worker in workers:
            for target, message in worker.drain().items():
                current = delivered.get(target)
                delivered[target] = message if current is None else self.combiner(current, message)
        for target, message in delivered.items():
            workers[self._owner[target]].inbox[target] = message
        stats.messages_delivered = len(delivered)
        return len(delivered)

    def _superstep(
        self,
        superstep: int,
        workers: List[Worker],
        aggregators: Aggregators,
        pool: Optional[ThreadPoolExecutor],
    ) -> Tuple[SuperstepStats, int]:
        for worker in workers:
            worker.computation.before_superstep(worker)
        if pool is not None:
            partials = list(pool.map(lambda w: w.compute(superstep), workers))
        else:
            partials = [w.compute(superstep) for w in workers]
        for worker in workers:
            worker.computation.after_superstep(worker)

        stats = SuperstepStats(superstep)
        for part in partials:
            stats.active += part.active
            stats.messages_sent += part.messages_sent
            stats.adoptions += part.adoptions
        pending = self._barrier(workers, aggregators, stats)
        stats.reached = len(aggregators.read(REACHED_TARGETS))

        self.counters["messages_sent"] += stats.messages_sent
        self.counters["messages_delivered"] += stats.messages_delivered
        self.counters["adoptions"] += stats.adoptions
        self.counters["vertices_computed"] += stats.active
        self.logger.debug(
            "superstep",
            superstep=superstep,
            active=stats.active,
            sent=stats.messages_sent,
            delivered=stats.messages_delivered,
            adoptions=stats.adoptions,
            reached=stats.reached,
        )
        return stats, pending

    def run(self) -> ShortestPathResult:
        """Execute the job to convergence.

        Raises:
            EdgeWeightError: If an edge weight cannot be resolved; the run is
                aborted and no result is produced.
            AlgorithmError: If ``max_supersteps`` is exceeded.
        """
        t0 = time.perf_counter()
        self.counters = {key: 0 for key in self.counters}
        for vertex in self.graph:
            vertex.value = PathValue()
            vertex.state = VertexState.UNVISITED

        aggregator = ReachedTargetsAggregator(self.config.targets)
        aggregators = Aggregators()
        aggregators.register(REACHED_TARGETS, aggregator)
        workers = self._build_workers(aggregators)
        if self.config.source not in self.graph:
            self.logger.warning("source_missing", source=self.config.source)

        self.logger.info(
            "init",
            source=self.config.source,
            targets=self.config.targets.to_text(),
            quantity=self.config.targets.quantity.value,
            weight_property=self.config.weights.property_name,
            default_weight=self.config.weights.default_weight,
            n=self.graph.n,
            m=self.graph.m,
            workers=self.cfg.num_workers,
        )

        history: List[SuperstepStats] = []
        pool = ThreadPoolExecutor(max_workers=self.cfg.num_workers) if self.cfg.parallel else None
        try:
            superstep = 0
            stats, pending = self._superstep(superstep, workers, aggregators, pool)
            history.append(stats)
            while pending:
                if self.cfg.stop_when_targets_reached and aggregator.converged():
                    self.logger.info("targets_reached", superstep=superstep, pending=pending)
                    break
                superstep += 1
                if self.cfg.max_supersteps and superstep > self.cfg.max_supersteps:
                    raise AlgorithmError(
                        f"no convergence within {self.cfg.max_supersteps} supersteps "
                        f"({pending} messages pending)"
                    )
                stats, pending = self._superstep(superstep, workers, aggregators, pool)
                history.append(stats)
        finally:
            if pool is not None:
                pool.shutdown(wait=True)

        wall_ms = (time.perf_counter() - t0) * 1000.0
        self.logger.info(
            "converged",
            supersteps=superstep + 1,
            reached=len(aggregator.read()),
            wall_ms=round(wall_ms, 3),
            **self.counters,
        )
        return ShortestPathResult(
            source=self.config.source,
            targets=self.config.targets,
            values={v.id: v.value for v in self.graph},
            supersteps=superstep + 1,
            reached_targets=aggregator.read(),
            counters=dict(self.counters),
            history=history,
            wall_ms=wall_ms,
        )


def run_shortest_path(
    graph: PropertyGraph,
    config: ShortestPathConfig,
    engine_config: Optional[EngineConfig] = None,
    logger: Logger | None = None,
) -> ShortestPathResult:
    """Convenience wrapper: build a :class:`BSPEngine` and run it."""
    return BSPEngine(graph, config, engine_config, logger).run()


__all__ = [
    "partition",
    "SuperstepStats",
    "Worker",
    "ShortestPathResult",
    "BSPEngine",
    "run_shortest_path",
]
