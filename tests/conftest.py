from __future__ import annotations

import pytest

from pregel_sssp.config import ShortestPathConfig
from pregel_sssp.graph import PropertyGraph


def make_config(
    source: str,
    target: str,
    weight_property: str = "weight",
    default_weight: float = 1.0,
) -> ShortestPathConfig:
    return ShortestPathConfig(
        source_id=source,
        target_id=target,
        weight_property=weight_property,
        default_weight=default_weight,
    )


@pytest.fixture
def chain_graph() -> PropertyGraph:
    """S -> A -> B with unit weights."""
    return PropertyGraph.from_edges(
        [
            ("S", "A", {"weight": 1.0}),
            ("A", "B", {"weight": 1.0}),
        ]
    )


@pytest.fixture
def detour_graph() -> PropertyGraph:
    """A heavy direct edge S -> T and a cheaper three-hop route through A and B."""
    return PropertyGraph.from_edges(
        [
            ("S", "T", {"weight": 10.0}),
            ("S", "A", {"weight": 1.0}),
            ("A", "B", {"weight": 1.0}),
            ("B", "T", {"weight": 1.0}),
        ]
    )
