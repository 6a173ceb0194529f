"""Property-graph input/output helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import networkx as nx

from .exceptions import GraphFormatError, InputError
from .graph import PropertyGraph
from .ids import VertexId

PropertyRow = Tuple[VertexId, VertexId, Dict[str, Any]]

_HEADER_NAMES = {("u", "v"), ("source", "target"), ("src", "dst")}


def _scalar(text: str) -> Any:
    """Parse a CSV cell as int, then float, falling back to the raw string."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def _iter_rows(G: PropertyGraph) -> Iterable[PropertyRow]:
    for vertex in G:
        for edge in vertex.edges:
            yield vertex.id, edge.target, dict(edge.properties)


def _read_csv(path: Path) -> PropertyGraph:
    """Read ``u,v[,p1,...]`` rows.

    Lines starting with ``#`` and blank lines are skipped. A first row of
    ``u,v,...`` (or ``source,target,...``) names the property columns;
    without a header the third column is the ``weight`` property and further
    columns are ignored. Empty cells leave the property absent. Tabs are
    accepted as separators.

    Raises:
        GraphFormatError: On rows with fewer than two columns, bad ids, or
            when no edges are parsed.
    """
    G = PropertyGraph()
    columns: Optional[List[str]] = None
    seen_row = False
    rows = 0
    with path.open("r", encoding="utf-8") as fh:
        for lineno, raw in enumerate(fh, start=1):
            row = raw.strip()
            if not row or row.startswith("#"):
                continue
            parts = [p.strip() for p in row.replace("\t", ",").split(",")]
            if not seen_row:
                seen_row = True
                if tuple(p.lower() for p in parts[:2]) in _HEADER_NAMES:
                    columns = parts[2:]
                    continue
            if len(parts) < 2:
                raise GraphFormatError(f"{path}:{lineno}: expected at least 'u,v'")
            try:
                u = VertexId.parse(parts[0])
                v = VertexId.parse(parts[1])
            except InputError as exc:
                raise GraphFormatError(f"{path}:{lineno}: {exc}") from exc
            names = columns if columns is not None else ["weight"]
            props = {
                name: _scalar(cell)
                for name, cell in zip(names, parts[2:])
                if name and cell != ""
            }
            G.add_edge(u, v, **props)
            rows += 1
    if rows == 0:
        raise GraphFormatError("no edges parsed from file")
    return G


def _write_csv(path: Path, G: PropertyGraph) -> None:
    """Write a header row naming every property, then one row per edge."""
    rows = list(_iter_rows(G))
    names: List[str] = []
    for _, _, props in rows:
        for key in props:
            if key not in names:
                names.append(key)
    with path.open("w", encoding="utf-8") as fh:
        fh.write(",".join(["u", "v", *names]) + "\n")
        for u, v, props in rows:
            cells = [u.to_text(), v.to_text()]
            cells.extend("" if props.get(k) is None else str(props[k]) for k in names)
            fh.write(",".join(cells) + "\n")


def _read_jsonl(path: Path) -> PropertyGraph:
    """Read ``{"u": .., "v": .., "properties": {..}}`` objects, one per line.

    JSON ids keep their JSON type: numbers are LONG ids, strings are UTF8 ids.
    """
    G = PropertyGraph()
    rows = 0
    with path.open("r", encoding="utf-8") as fh:
        for lineno, raw in enumerate(fh, start=1):
            row = raw.strip()
            if not row:
                continue
            try:
                obj = json.loads(row)
                u, v = obj["u"], obj["v"]
                props = dict(obj.get("properties") or {})
                G.add_edge(VertexId.of(u), VertexId.of(v), **props)
            except (ValueError, KeyError, TypeError, InputError) as exc:
                raise GraphFormatError(f"{path}:{lineno}: {exc}") from exc
            rows += 1
    if rows == 0:
        raise GraphFormatError("no edges parsed from file")
    return G


def _write_jsonl(path: Path, G: PropertyGraph) -> None:
    with path.open("w", encoding="utf-8") as fh:
        for u, v, props in _iter_rows(G):
            row = {"u": u.value, "v": v.value, "properties": props}
            fh.write(json.dumps(row, default=str) + "\n")


def _read_graphml(path: Path) -> PropertyGraph:
    """Parse GraphML through networkx; node ids use the text id form."""
    try:
        nxg = nx.read_graphml(path)
    except (nx.NetworkXError, ValueError) as exc:
        raise GraphFormatError(f"cannot parse GraphML {path}: {exc}") from exc
    G = PropertyGraph()
    for node in nxg.nodes:
        G.add_vertex(VertexId.parse(str(node)))
    for u, v, data in nxg.edges(data=True):
        u_id, v_id = VertexId.parse(str(u)), VertexId.parse(str(v))
        G.add_edge(u_id, v_id, **data)
        if not nxg.is_directed() and u_id != v_id:
            G.add_edge(v_id, u_id, **data)
    if G.m == 0:
        raise GraphFormatError("no edges parsed from file")
    return G


_FMT_READERS = {
    "csv": _read_csv,
    "jsonl": _read_jsonl,
    "graphml": _read_graphml,
}

_FMT_WRITERS = {
    "csv": _write_csv,
    "jsonl": _write_jsonl,
}


def _detect_format(path: Path) -> Optional[str]:
    ext = path.suffix.lower()
    if ext in {".csv", ".tsv"}:
        return "csv"
    if ext in {".jsonl", ".json"}:
        return "jsonl"
    if ext == ".graphml":
        return "graphml"
    return None


def read_graph(path: str, fmt: Optional[str] = None) -> PropertyGraph:
    """Read a property graph from ``path``.

    Args:
        path: The path to the graph file.
        fmt: ``"csv"``, ``"jsonl"`` or ``"graphml"``; auto-detected from the
            extension when ``None``.

    Raises:
        GraphFormatError: If the format is unknown or the file is malformed.
    """
    p = Path(path)
    fmt = fmt or _detect_format(p)
    if fmt is None or fmt not in _FMT_READERS:
        raise GraphFormatError("unknown graph format")
    return _FMT_READERS[fmt](p)


def write_graph(G: PropertyGraph, path: str, fmt: Optional[str] = None) -> None:
    """Write ``G`` as CSV or JSONL.

    Raises:
        GraphFormatError: If the format is unknown or unsupported.
    """
    p = Path(path)
    fmt = fmt or _detect_format(p)
    if fmt is None or fmt not in _FMT_WRITERS:
        raise GraphFormatError("unknown graph format")
    _FMT_WRITERS[fmt](p, G)


__all__ = ["read_graph", "write_graph"]
