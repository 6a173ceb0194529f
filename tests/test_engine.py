from __future__ import annotations

import math
import random

import networkx as nx
import numpy as np
import pytest
from conftest import make_config

from pregel_sssp.config import EngineConfig
from pregel_sssp.engine import BSPEngine, partition, run_shortest_path
from pregel_sssp.exceptions import AlgorithmError, WeightTypeError
from pregel_sssp.graph import PropertyGraph, VertexState
from pregel_sssp.ids import VertexId


def test_chain_reaches_end_of_chain(chain_graph: PropertyGraph) -> None:
    res = run_shortest_path(chain_graph, make_config("S", "B"))
    assert res.distance("B") == 2.0
    assert res.raw_path("B") == ["S", "A", "B"]
    assert res.reached_targets == {VertexId.of("B")}


def test_source_equal_to_target_is_trivial(chain_graph: PropertyGraph) -> None:
    res = run_shortest_path(chain_graph, make_config("S", "S"))
    assert res.distance("S") == 0.0
    assert res.raw_path("S") == ["S"]
    assert res.supersteps == 1
    assert res.counters["messages_sent"] == 0
    assert not res.value("A").reachable


def test_isolated_source_leaves_target_unreachable() -> None:
    g = PropertyGraph.from_edges([("A", "T", {"weight": 1.0})], vertices=["S"])
    res = run_shortest_path(g, make_config("S", "T"))
    assert not res.value("T").reachable
    assert res.distance("T") == math.inf
    assert res.path("T") == []


def test_missing_source_leaves_everything_unreachable(chain_graph: PropertyGraph) -> None:
    res = run_shortest_path(chain_graph, make_config("X", "*"))
    assert all(not v.reachable for v in res.values.values())


def test_cheaper_detour_wins(detour_graph: PropertyGraph) -> None:
    res = run_shortest_path(detour_graph, make_config("S", "*"))
    assert res.distance("T") == 3.0
    assert res.raw_path("T") == ["S", "A", "B", "T"]
    assert res.reached_targets == frozenset()
    assert res.counters["adoptions"] >= 4


def test_default_weight_applies_to_edges_without_property() -> None:
    g = PropertyGraph.from_edges([("S", "A", {}), ("A", "T", {"cost": 4})])
    res = run_shortest_path(g, make_config("S", "T", weight_property="cost", default_weight=2.0))
    assert res.distance("T") == 6.0


def test_multiple_targets_prune_beyond_last_target() -> None:
    g = PropertyGraph.from_edges(
        [
            ("S", "A", {"weight": 1.0}),
            ("A", "B", {"weight": 1.0}),
            ("B", "C", {"weight": 1.0}),
        ]
    )
    res = run_shortest_path(g, make_config("S", "A,B"))
    assert res.distance("A") == 1.0
    assert res.distance("B") == 2.0
    # B completed the target set, so it never forwarded to C
    assert not res.value("C").reachable
    assert res.reached_targets == {VertexId.of("A"), VertexId.of("B")}


def test_non_numeric_weight_aborts_the_job() -> None:
    g = PropertyGraph.from_edges([("S", "A", {"weight": "heavy"})])
    with pytest.raises(WeightTypeError, match="weight"):
        run_shortest_path(g, make_config("S", "A"))


def test_reached_set_grows_monotonically(detour_graph: PropertyGraph) -> None:
    res = run_shortest_path(detour_graph, make_config("S", "A,B,T"))
    counts = [h.reached for h in res.history]
    assert counts == sorted(counts)
    assert res.reached_targets == {VertexId.of(x) for x in "ABT"}
    # B completes the target set, so the cheaper route never reaches T
    assert res.distance("T") == 10.0


def test_equal_weight_paths_break_ties_deterministically() -> None:
    edges = [
        ("S", "B", {"weight": 1.0}),
        ("S", "A", {"weight": 1.0}),
        ("B", "T", {"weight": 1.0}),
        ("A", "T", {"weight": 1.0}),
    ]
    for workers in (1, 2, 3):
        g = PropertyGraph.from_edges(edges)
        res = run_shortest_path(g, make_config("S", "T"), EngineConfig(num_workers=workers))
        assert res.raw_path("T") == ["S", "A", "T"]


@pytest.mark.parametrize(
    "engine",
    [
        EngineConfig(),
        EngineConfig(num_workers=3),
        EngineConfig(num_workers=4, parallel=True),
    ],
)
@pytest.mark.parametrize("seed", [1, 7, 42])
def test_matches_dijkstra_on_random_graphs(engine: EngineConfig, seed: int) -> None:
    rng = random.Random(seed)
    G = nx.gnm_random_graph(40, 160, seed=seed, directed=True)
    for u, v in G.edges:
        G.edges[u, v]["weight"] = rng.uniform(0.5, 5.0)

    res = BSPEngine(PropertyGraph.from_networkx(G), make_config("0", "*"), engine).run()
    expected = nx.single_source_dijkstra_path_length(G, 0, weight="weight")

    for node in G.nodes:
        if node in expected:
            assert res.distance(node) == pytest.approx(expected[node])
            path = res.raw_path(node)
            assert path[0] == 0 and path[-1] == node
            total = sum(G.edges[a, b]["weight"] for a, b in zip(path, path[1:]))
            assert total == pytest.approx(res.distance(node))
        else:
            assert not res.value(node).reachable

    order = sorted(G.nodes)
    dist = res.distances(order)
    assert dist.shape == (40,)
    assert np.isinf(dist).sum() == 40 - len(expected)


def test_single_target_matches_dijkstra() -> None:
    G = nx.gnm_random_graph(30, 90, seed=3, directed=True)
    for u, v in G.edges:
        G.edges[u, v]["weight"] = float((u * 7 + v * 3) % 5 + 1)
    target = max(nx.single_source_dijkstra_path_length(G, 0), key=lambda n: n)

    res = run_shortest_path(PropertyGraph.from_networkx(G), make_config("0", str(target)))
    assert res.distance(target) == pytest.approx(nx.dijkstra_path_length(G, 0, target))


def test_max_supersteps_bounds_the_run(chain_graph: PropertyGraph) -> None:
    with pytest.raises(AlgorithmError, match="supersteps"):
        run_shortest_path(chain_graph, make_config("S", "B"), EngineConfig(max_supersteps=1))


def test_stop_when_targets_reached(detour_graph: PropertyGraph) -> None:
    early = run_shortest_path(
        detour_graph,
        make_config("S", "T"),
        EngineConfig(stop_when_targets_reached=True),
    )
    assert early.distance("T") == 10.0
    assert early.supersteps == 2

    full = run_shortest_path(detour_graph, make_config("S", "T"))
    assert full.distance("T") == 3.0


def test_all_vertices_end_inactive(detour_graph: PropertyGraph) -> None:
    run_shortest_path(detour_graph, make_config("S", "T"), EngineConfig(num_workers=2))
    assert {v.state for v in detour_graph} == {VertexState.INACTIVE}


def test_rerun_starts_from_fresh_values(detour_graph: PropertyGraph) -> None:
    engine = BSPEngine(detour_graph, make_config("S", "*"))
    first = engine.run()
    second = engine.run()
    assert second.distance("T") == first.distance("T") == 3.0
    assert second.counters == first.counters


def test_partition_is_stable_and_in_range() -> None:
    ids = [VertexId.of(i) for i in range(100)] + [VertexId.of(f"v{i}") for i in range(100)]
    owners = partition(ids, 4)
    assert owners.tolist() == partition(ids, 4).tolist()
    assert owners.min() >= 0 and owners.max() < 4
    assert set(partition(ids, 1).tolist()) == {0}
