"""Cross-worker tracking of the targets that have already been reached.

Each worker keeps a local :class:`ReachedTargets` replica. At the start of a
superstep the replica is replaced by the global value; vertices add to it
while computing; at the end of the superstep it is written back and the
master unions every worker's submission at the barrier.
"""

from __future__ import annotations

from typing import AbstractSet, Dict, FrozenSet, Iterable, Iterator, List, Optional

from .exceptions import AlgorithmError, ConfigError
from .ids import VertexId
from .targets import QuantityType, TargetSpec

REACHED_TARGETS = "single_source_shortest_path.reached_targets"


class ReachedTargets:
    """Worker-local replica of the reached-target set."""

    def __init__(self, ids: Iterable[VertexId] = ()) -> None:
        self._ids = set(ids)

    def add(self, vertex_id: VertexId) -> None:
        self._ids.add(vertex_id)

    def __contains__(self, vertex_id: object) -> bool:
        return vertex_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[VertexId]:
        return iter(self._ids)

    def snapshot(self) -> FrozenSet[VertexId]:
        return frozenset(self._ids)

    def __repr__(self) -> str:
        return f"ReachedTargets({sorted(self._ids, key=lambda v: v.sort_key)!r})"


def is_all_targets_reached(
    spec: TargetSpec,
    reached: AbstractSet[VertexId] | ReachedTargets,
    vertex_id: VertexId,
) -> bool:
    """Return whether every configured target counts as reached at ``vertex_id``.

    SINGLE: true exactly when ``vertex_id`` is the sole target.
    MULTIPLE: true when ``reached`` holds every target id.
    ALL: always false; propagation runs until no messages are sent.
    """
    if spec.quantity is QuantityType.SINGLE:
        return vertex_id == spec.single_target
    if spec.quantity is QuantityType.MULTIPLE:
        if len(reached) != len(spec.target_ids):
            return False
        return all(t in reached for t in spec.target_ids)
    return False


class ReachedTargetsAggregator:
    """Master-side union of the workers' reached-target submissions.

    The global value is monotonically non-decreasing and always a subset of
    the configured targets.
    """

    def __init__(self, spec: TargetSpec) -> None:
        self.spec = spec
        self._global: FrozenSet[VertexId] = frozenset()
        self._pending: List[FrozenSet[VertexId]] = []

    def read(self) -> FrozenSet[VertexId]:
        """Return the value merged at the last barrier."""
        return self._global

    def write(self, reached: Iterable[VertexId]) -> None:
        """Queue one worker's replica for the next merge."""
        self._pending.append(frozenset(reached))

    def merge(self) -> FrozenSet[VertexId]:
        """Union all pending submissions into the global value.

        Raises:
            AlgorithmError: If a submission names a vertex that is not a
                configured target.
        """
        merged = set(self._global)
        for submission in self._pending:
            merged |= submission
        self._pending = []
        stray = merged - self.spec.target_ids
        if stray:
            raise AlgorithmError(
                f"reached targets contain non-target vertices: {sorted(map(str, stray))}"
            )
        self._global = frozenset(merged)
        return self._global

    def converged(self) -> bool:
        """Whether every configured target has been reached (never for ALL)."""
        if self.spec.quantity is QuantityType.ALL:
            return False
        return self.spec.target_ids <= self._global


class Aggregators:
    """Keyed registry of aggregators, merged together at each barrier."""

    def __init__(self) -> None:
        self._by_key: Dict[str, ReachedTargetsAggregator] = {}

    def register(self, key: str, aggregator: ReachedTargetsAggregator) -> None:
        if key in self._by_key:
            raise ConfigError(f"aggregator {key!r} already registered")
        self._by_key[key] = aggregator

    def get(self, key: str) -> Optional[ReachedTargetsAggregator]:
        return self._by_key.get(key)

    def read(self, key: str) -> FrozenSet[VertexId]:
        return self._require(key).read()

    def write(self, key: str, value: Iterable[VertexId]) -> None:
        self._require(key).write(value)

    def merge(self) -> None:
        for aggregator in self._by_key.values():
            aggregator.merge()

    def _require(self, key: str) -> ReachedTargetsAggregator:
        try:
            return self._by_key[key]
        except KeyError:
            raise AlgorithmError(f"no aggregator registered under {key!r}") from None


__all__ = [
    "REACHED_TARGETS",
    "ReachedTargets",
    "ReachedTargetsAggregator",
    "Aggregators",
    "is_all_targets_reached",
]
