from __future__ import annotations

from pathlib import Path

import networkx as nx
import pytest

from pregel_sssp.exceptions import GraphFormatError
from pregel_sssp.graph import PropertyGraph
from pregel_sssp.ids import IdType, VertexId
from pregel_sssp.io import read_graph, write_graph


def edge_props(g: PropertyGraph, u: object, v: object) -> dict:
    (edge,) = [e for e in g.vertex(u).edges if e.target == VertexId.of(v)]
    return dict(edge.properties)


def test_csv_with_header_names_property_columns(tmp_path: Path) -> None:
    p = tmp_path / "g.csv"
    p.write_text("# comment\nu,v,cost,label\n1,2,3.5,x\n2,3,,y\n\n")
    g = read_graph(str(p))
    assert g.n == 3 and g.m == 2
    assert edge_props(g, 1, 2) == {"cost": 3.5, "label": "x"}
    assert edge_props(g, 2, 3) == {"label": "y"}


def test_csv_without_header_uses_weight_column(tmp_path: Path) -> None:
    p = tmp_path / "g.tsv"
    p.write_text("a\tb\t2\nb\tc\n")
    g = read_graph(str(p))
    assert edge_props(g, "a", "b") == {"weight": 2}
    assert edge_props(g, "b", "c") == {}
    assert g.vertex("a").id.kind is IdType.UTF8


def test_csv_rejects_short_rows(tmp_path: Path) -> None:
    p = tmp_path / "g.csv"
    p.write_text("a\n")
    with pytest.raises(GraphFormatError, match=":1:"):
        read_graph(str(p))


def test_empty_file_is_rejected(tmp_path: Path) -> None:
    p = tmp_path / "g.csv"
    p.write_text("# nothing here\n")
    with pytest.raises(GraphFormatError, match="no edges"):
        read_graph(str(p))


def test_jsonl_keeps_json_id_types(tmp_path: Path) -> None:
    p = tmp_path / "g.jsonl"
    p.write_text('{"u": 1, "v": "1", "properties": {"weight": 2}}\n{"u": "1", "v": 3}\n')
    g = read_graph(str(p))
    assert VertexId(IdType.LONG, 1) in g
    assert VertexId(IdType.UTF8, "1") in g
    assert edge_props(g, 1, "1") == {"weight": 2}


def test_jsonl_reports_bad_lines(tmp_path: Path) -> None:
    p = tmp_path / "g.jsonl"
    p.write_text('{"u": 1, "v": 2}\n{"u": 1}\n')
    with pytest.raises(GraphFormatError, match=":2:"):
        read_graph(str(p))


def test_graphml_through_networkx(tmp_path: Path) -> None:
    nxg = nx.DiGraph()
    nxg.add_edge("s", "t", weight=2.5)
    nxg.add_node("lonely")
    p = tmp_path / "g.graphml"
    nx.write_graphml(nxg, p)

    g = read_graph(str(p))
    assert g.n == 3 and g.m == 1
    assert edge_props(g, "s", "t") == {"weight": 2.5}


def test_undirected_graphml_adds_both_directions(tmp_path: Path) -> None:
    p = tmp_path / "g.graphml"
    nx.write_graphml(nx.path_graph(3), p)
    g = read_graph(str(p))
    assert g.m == 4
    assert g.out_degree(1) == 2


@pytest.mark.parametrize("name", ["g.csv", "g.jsonl"])
def test_written_graph_reads_back(tmp_path: Path, name: str) -> None:
    g = PropertyGraph.from_edges(
        [
            (1, "7", {"weight": 2.5}),
            ("7", "x", {"weight": 1.0, "kind": "road"}),
        ]
    )
    p = tmp_path / name
    write_graph(g, str(p))
    back = read_graph(str(p))
    assert sorted(back.vertex_ids(), key=lambda v: v.sort_key) == sorted(
        g.vertex_ids(), key=lambda v: v.sort_key
    )
    assert edge_props(back, "7", "x") == {"weight": 1.0, "kind": "road"}


def test_unknown_format(tmp_path: Path) -> None:
    p = tmp_path / "g.txt"
    p.write_text("a,b\n")
    with pytest.raises(GraphFormatError):
        read_graph(str(p))
    with pytest.raises(GraphFormatError):
        write_graph(PropertyGraph(), str(tmp_path / "g.graphml"))
