"""Export utilities for finished shortest-path jobs."""

from __future__ import annotations

import json
import math
from typing import Any, Dict, List, Tuple

from .engine import ShortestPathResult
from .ids import IdType, VertexId
from .value import PathValue


def _json_id(vertex_id: VertexId) -> Any:
    return vertex_id.value if vertex_id.kind is IdType.LONG else str(vertex_id)


def _entry(vertex_id: VertexId, value: PathValue) -> Dict[str, Any]:
    return {
        "id": _json_id(vertex_id),
        "id_type": vertex_id.kind.name,
        "reachable": value.reachable,
        "total_weight": value.total_weight if math.isfinite(value.total_weight) else None,
        "path": [_json_id(v) for v in value.path],
    }


def result_to_dict(result: ShortestPathResult) -> Dict[str, Any]:
    """Return a JSON-serialisable summary of ``result``.

    Unreachable targets are listed with ``reachable: false`` and a ``null``
    weight. For ALL, every reachable vertex is listed.
    """
    return {
        "source": str(result.source),
        "quantity": result.targets.quantity.value,
        "supersteps": result.supersteps,
        "targets": [_entry(v, val) for v, val in result.targets_values().items()],
        "counters": dict(result.counters),
    }


def export_result_json(result: ShortestPathResult) -> str:
    """Return :func:`result_to_dict` as a JSON string."""
    return json.dumps(result_to_dict(result))


def shortest_path_tree(result: ShortestPathResult) -> List[Tuple[VertexId, VertexId]]:
    """Edges ``(u, v)`` used by the final paths of reachable vertices."""
    tree = set()
    for value in result.values.values():
        if not value.reachable:
            continue
        for u, v in zip(value.path, value.path[1:]):
            tree.add((u, v))
    return sorted(tree, key=lambda e: (e[0].sort_key, e[1].sort_key))


__all__ = ["result_to_dict", "export_result_json", "shortest_path_tree"]
