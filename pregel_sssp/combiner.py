"""Combiner collapsing relaxation messages bound for the same vertex."""

from __future__ import annotations

from functools import reduce
from typing import Iterable, Optional, Tuple

from .value import RelaxationMessage


def _rank(message: RelaxationMessage) -> Tuple[float, int, Tuple[object, ...]]:
    # weight first; ties fall back to the shorter, then lexicographically
    # smaller path so the choice never depends on arrival order
    return (
        message.total_weight,
        len(message.path),
        tuple(v.sort_key for v in message.path),
    )


def combine(first: RelaxationMessage, second: RelaxationMessage) -> RelaxationMessage:
    """Return the message with the lower total weight.

    The operation is associative and commutative, so messages can be combined
    pairwise in any order (sender side, receiver side, or both).

    Examples:
        ```python
        >>> from pregel_sssp.ids import VertexId
        >>> a = RelaxationMessage((VertexId.of("s"),), 3.0)
        >>> b = RelaxationMessage((VertexId.of("t"),), 5.0)
        >>> combine(b, a).total_weight
        3.0
        ```
    """
    return first if _rank(first) <= _rank(second) else second


def combine_all(messages: Iterable[RelaxationMessage]) -> Optional[RelaxationMessage]:
    """Fold ``messages`` into one, or return ``None`` when there are none."""
    return reduce(lambda acc, m: m if acc is None else combine(acc, m), messages, None)


class ShortestPathCombiner:
    """Combiner object handed to the engine's message routing."""

    name = "shortest_path_combiner"

    def __call__(self, first: RelaxationMessage, second: RelaxationMessage) -> RelaxationMessage:
        return combine(first, second)


__all__ = ["combine", "combine_all", "ShortestPathCombiner"]
