"""In-memory property graph used as vertex and edge storage by the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import networkx as nx

from .exceptions import InputError
from .ids import VertexId
from .value import PathValue

PropertyEdge = Tuple[Any, Any, Mapping[str, Any]]


@dataclass(frozen=True)
class Edge:
    """Directed edge with named properties.

    Attributes:
        target: Id of the head vertex.
        properties: Property name to value; values may be of any type.
    """

    target: VertexId
    properties: Mapping[str, Any] = field(default_factory=dict)

    def property(self, name: str) -> Optional[Any]:
        """Return the property value or ``None`` when absent."""
        return self.properties.get(name)


class VertexState(Enum):
    """Lifecycle of a vertex within one job."""

    UNVISITED = "unvisited"
    INITIALIZED = "initialized"
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Vertex:
    """A vertex with its outgoing edges and its computation value."""

    id: VertexId
    edges: List[Edge] = field(default_factory=list)
    value: PathValue = field(default_factory=PathValue)
    state: VertexState = VertexState.UNVISITED

    def num_edges(self) -> int:
        return len(self.edges)

    def inactivate(self) -> None:
        self.state = VertexState.INACTIVE


class PropertyGraph:
    """Directed multigraph keyed by :class:`VertexId`.

    Self-loops and parallel edges are kept; adding an edge to an unknown
    vertex creates that vertex.

    Examples:
        ```python
        >>> g = PropertyGraph()
        >>> g.add_edge("s", "a", weight=2.5)
        >>> g.out_degree("s"), g.n, g.m
        (1, 2, 1)
        ```
    """

    def __init__(self) -> None:
        self._vertices: Dict[VertexId, Vertex] = {}

    # ---- construction -------------------------------------------------

    def add_vertex(self, vertex_id: Any) -> Vertex:
        """Return the vertex for ``vertex_id``, creating it if needed."""
        vid = VertexId.of(vertex_id)
        vertex = self._vertices.get(vid)
        if vertex is None:
            vertex = Vertex(vid)
            self._vertices[vid] = vertex
        return vertex

    def add_edge(self, u: Any, v: Any, **properties: Any) -> None:
        """Add a directed edge from ``u`` to ``v`` carrying ``properties``."""
        tail = self.add_vertex(u)
        head = self.add_vertex(v)
        tail.edges.append(Edge(head.id, dict(properties)))

    @classmethod
    def from_edges(
        cls, edges: Iterable[PropertyEdge], vertices: Iterable[Any] = ()
    ) -> "PropertyGraph":
        """Create a graph from ``(u, v, properties)`` triples.

        Args:
            edges: Edge triples; ``properties`` may be an empty mapping.
            vertices: Extra (possibly isolated) vertices to include.
        """
        g = cls()
        for vid in vertices:
            g.add_vertex(vid)
        for u, v, props in edges:
            g.add_edge(u, v, **dict(props))
        return g

    @classmethod
    def from_networkx(cls, G: nx.Graph) -> "PropertyGraph":
        """Build a graph from a networkx graph, keeping edge attributes.

        Undirected graphs contribute one edge per direction.
        """
        g = cls()
        for node in G.nodes:
            g.add_vertex(node)
        for u, v, data in G.edges(data=True):
            g.add_edge(u, v, **data)
            if not G.is_directed() and u != v:
                g.add_edge(v, u, **data)
        return g

    def to_networkx(self) -> nx.MultiDiGraph:
        """Return a networkx copy keyed by the raw id values."""
        G = nx.MultiDiGraph()
        for vertex in self._vertices.values():
            G.add_node(vertex.id.value)
        for vertex in self._vertices.values():
            for edge in vertex.edges:
                G.add_edge(vertex.id.value, edge.target.value, **edge.properties)
        return G

    # ---- queries ------------------------------------------------------

    def vertex(self, vertex_id: Any) -> Vertex:
        vid = VertexId.of(vertex_id)
        try:
            return self._vertices[vid]
        except KeyError:
            raise InputError(f"unknown vertex {vid}") from None

    def __contains__(self, vertex_id: Any) -> bool:
        try:
            return VertexId.of(vertex_id) in self._vertices
        except InputError:
            return False

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices.values())

    def vertex_ids(self) -> List[VertexId]:
        return list(self._vertices)

    def out_degree(self, vertex_id: Any) -> int:
        return self.vertex(vertex_id).num_edges()

    @property
    def n(self) -> int:
        return len(self._vertices)

    @property
    def m(self) -> int:
        return sum(v.num_edges() for v in self._vertices.values())


__all__ = ["Edge", "Vertex", "VertexState", "PropertyGraph", "PropertyEdge"]
