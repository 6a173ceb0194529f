"""Render a graph with the shortest-path tree of a finished job highlighted."""

from __future__ import annotations

import random
from typing import Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import networkx as nx  # noqa: E402

from .engine import ShortestPathResult  # noqa: E402
from .export import shortest_path_tree  # noqa: E402
from .graph import PropertyGraph  # noqa: E402


def draw_shortest_paths(
    graph: PropertyGraph,
    result: ShortestPathResult,
    out_path: Optional[str] = None,
    *,
    layout: str = "spring",
    max_edges: int = 300,
    show_weights: bool = False,
    node_size: int = 300,
    seed: int = 0,
) -> nx.DiGraph:
    """Draw ``graph`` and highlight the edges of the final shortest paths.

    The source is red, configured targets orange, other reachable vertices
    blue and unreachable ones grey. Graphs with more than ``max_edges``
    non-tree edges are downsampled (tree edges are always kept).

    Returns:
        The networkx graph that was drawn.
    """
    tree = set(shortest_path_tree(result))
    others = [
        (v.id, e.target, e.properties)
        for v in graph
        for e in v.edges
        if (v.id, e.target) not in tree
    ]
    if len(others) > max_edges:
        others = random.Random(seed).sample(others, max_edges)

    G = nx.DiGraph()
    for vertex in graph:
        G.add_node(vertex.id)
    for u, v, props in others:
        G.add_edge(u, v, **{**props, "tree": False})
    for u, v in tree:
        G.add_edge(u, v, tree=True)

    if layout == "spring":
        pos = nx.spring_layout(G, seed=seed)
    elif layout == "kamada_kawai":
        pos = nx.kamada_kawai_layout(G)
    elif layout == "shell":
        pos = nx.shell_layout(G)
    else:
        raise ValueError(f"Unknown layout: {layout}")

    def colour(node) -> str:
        if node == result.source:
            return "tab:red"
        if result.targets.is_target(node):
            return "tab:orange"
        return "tab:blue" if result.values[node].reachable else "tab:gray"

    fig = plt.figure(figsize=(12, 10))
    nx.draw_networkx_nodes(
        G, pos, node_color=[colour(n) for n in G.nodes], node_size=node_size, alpha=0.9
    )
    nx.draw_networkx_edges(
        G, pos, edgelist=[e for e in G.edges if not G.edges[e]["tree"]],
        arrowstyle="->", arrowsize=10, width=0.8, alpha=0.3,
    )
    nx.draw_networkx_edges(
        G, pos, edgelist=[e for e in G.edges if G.edges[e]["tree"]],
        arrowstyle="->", arrowsize=14, width=2.0, edge_color="tab:red",
    )
    nx.draw_networkx_labels(G, pos, labels={n: str(n) for n in G.nodes}, font_size=8)

    if show_weights:
        labels = {(u, v): f"{result.distance(v):g}" for u, v in tree}
        nx.draw_networkx_edge_labels(G, pos, edge_labels=labels, font_size=7)

    plt.title(f"Shortest paths from {result.source}", fontsize=14)
    plt.axis("off")
    plt.tight_layout()
    if out_path:
        fig.savefig(out_path)
    plt.close(fig)
    return G


__all__ = ["draw_shortest_paths"]
