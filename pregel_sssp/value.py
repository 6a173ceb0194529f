"""Per-vertex path state and the relaxation messages exchanged between vertices."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .exceptions import AlgorithmError
from .ids import VertexId

Float = float


@dataclass
class PathValue:
    """Best known distance and path of one vertex.

    Owned by its vertex and mutated only during that vertex's own compute
    call. Once ``reachable`` is set, ``total_weight`` is finite, ``path`` ends
    at the vertex itself and ``total_weight`` only decreases.

    Attributes:
        reachable: Whether any path from the source has been adopted.
        total_weight: Sum of edge weights along ``path`` (``inf`` if unreached).
        path: Vertices from the source to this vertex (inclusive).
    """

    reachable: bool = False
    total_weight: Float = math.inf
    path: List[VertexId] = field(default_factory=list)

    def unreachable(self) -> None:
        """Reset to the initial unreachable state."""
        self.reachable = False
        self.total_weight = math.inf
        self.path = []

    def zero_distance(self, vertex_id: VertexId) -> None:
        """Mark this vertex as the source: weight ``0`` and path ``[self]``."""
        self.reachable = True
        self.total_weight = 0.0
        self.path = [vertex_id]

    def shorter_path(
        self, vertex_id: VertexId, prefix: Iterable[VertexId], total_weight: Float
    ) -> None:
        """Adopt a strictly better path whose prefix ends at the sender.

        Args:
            vertex_id: Id of the vertex owning this value.
            prefix: Path of the inbound message (source .. sender).
            total_weight: Weight of the extended path.

        Raises:
            AlgorithmError: If the candidate does not strictly improve the
                current weight or is not finite.
        """
        if not total_weight < self.total_weight:
            raise AlgorithmError(
                f"vertex {vertex_id} cannot adopt weight {total_weight} "
                f"over current {self.total_weight}"
            )
        if math.isinf(total_weight) or math.isnan(total_weight):
            raise AlgorithmError(f"vertex {vertex_id} received non-finite weight {total_weight}")
        self.reachable = True
        self.total_weight = float(total_weight)
        self.path = list(prefix)
        self.path.append(vertex_id)

    def copy(self) -> "PathValue":
        return PathValue(self.reachable, self.total_weight, list(self.path))


@dataclass(frozen=True)
class RelaxationMessage:
    """Candidate path travelling to a neighbour across a superstep boundary.

    Attributes:
        path: Vertices from the source up to and including the sender.
        total_weight: Weight of ``path`` plus the edge to the recipient.
    """

    path: Tuple[VertexId, ...]
    total_weight: Float

    @classmethod
    def extend(cls, path: Iterable[VertexId], total_weight: Float) -> "RelaxationMessage":
        return cls(tuple(path), float(total_weight))

    @property
    def sender(self) -> VertexId:
        return self.path[-1]


__all__ = ["PathValue", "RelaxationMessage"]
