"""Command-line interface for running a shortest-path job."""

from __future__ import annotations

import argparse
import json
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .engine import BSPEngine
from .exceptions import ConfigError, EdgeWeightError, GraphFormatError, InputError, PregelSSSPError
from .export import export_result_json, result_to_dict
from .graph import PropertyGraph
from .io import read_graph
from .logger import StdLogger

EXAMPLE_CSV = """# u,v,weight
u,v,weight
s,a,1.0
a,b,1.0
s,b,4.0
b,c,2.5
"""


def _read_edges(path: str, fmt: Optional[str]) -> PropertyGraph:
    """Read the edges file, failing early when it does not exist."""
    if not Path(path).exists():
        raise InputError(f"edges file not found: {path}")
    return read_graph(path, fmt)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``pregel-sssp`` command-line tool."""
    examples = (
        "Examples:\n"
        "  pregel-sssp --edges graph.csv --source s --target b\n"
        "  pregel-sssp --edges graph.csv --source 0 --target '3,7' --workers 4\n"
        "  pregel-sssp --edges graph.csv --source 0 --target '*' --weight-property cost\n"
    )
    p = argparse.ArgumentParser(
        prog="pregel-sssp",
        description="Vertex-centric (BSP) single-source shortest paths",
        epilog=examples,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    p.add_argument("--verbose", action="store_true", help="Show full tracebacks")
    p.add_argument("--log-json", action="store_true", help="Emit structured log lines")
    p.add_argument(
        "--log-level",
        choices=["debug", "info", "warning"],
        default="warning",
        help="Log verbosity",
    )
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--edges", type=str, help="Path to edges file")
    src.add_argument(
        "--example",
        action="store_true",
        help="Print a sample edges CSV to stdout and exit",
    )
    p.add_argument(
        "--format",
        choices=["csv", "jsonl", "graphml"],
        default=None,
        help="Edge file format (auto-detected from extension)",
    )

    p.add_argument("--source", type=str, default="", help="Source vertex id")
    p.add_argument(
        "--target",
        type=str,
        default="",
        help="Target vertex id, comma-separated ids, or '*' for all vertices",
    )
    p.add_argument(
        "--weight-property", type=str, default="", help="Edge property holding the weight"
    )
    p.add_argument(
        "--default-weight", type=str, default="1", help="Weight of edges lacking the property"
    )

    p.add_argument("--workers", type=int, default=1, help="Number of BSP workers")
    p.add_argument("--parallel", action="store_true", help="Run workers on a thread pool")
    p.add_argument("--max-supersteps", type=int, default=0, help="Superstep bound (0 = none)")
    p.add_argument(
        "--stop-when-reached",
        action="store_true",
        help="Stop as soon as every configured target has been reached",
    )

    p.add_argument("--export-json", type=str, default=None, help="Write the result as JSON")
    p.add_argument("--plot", type=str, default=None, help="Save a drawing of the shortest paths")

    args = p.parse_args(argv)

    if args.example:
        sys.stdout.write(EXAMPLE_CSV)
        return 0

    try:
        cfg, engine_cfg = load_config(
            {
                "source_id": args.source,
                "target_id": args.target,
                "weight_property": args.weight_property,
                "default_weight": args.default_weight,
            },
            {
                "num_workers": args.workers,
                "parallel": args.parallel,
                "max_supersteps": args.max_supersteps,
                "stop_when_targets_reached": args.stop_when_reached,
            },
        )
        G = _read_edges(args.edges, args.format)

        stream = sys.stdout if args.log_json else sys.stderr
        level = "info" if args.log_json and args.log_level == "warning" else args.log_level
        logger = StdLogger(level=level, json_fmt=args.log_json, stream=stream)

        if args.verbose and not args.log_json:
            sys.stderr.write(
                f"config: n={G.n} m={G.m} source={cfg.source} targets={cfg.targets.to_text()} "
                f"workers={engine_cfg.num_workers}\n"
            )

        result = BSPEngine(G, cfg, engine_cfg, logger=logger).run()

        if args.export_json:
            with open(args.export_json, "w", encoding="utf-8") as fh:
                fh.write(export_result_json(result))
        if args.plot:
            from .visualize import draw_shortest_paths

            draw_shortest_paths(G, result, args.plot)

        if not args.log_json:
            print(json.dumps(result_to_dict(result)))
        return 0

    except (InputError, ConfigError, GraphFormatError, EdgeWeightError) as exc:
        if args.verbose:
            traceback.print_exc()
        else:
            sys.stderr.write(f"error: {exc}\n")
        return 64
    except PregelSSSPError as exc:
        if args.verbose:
            traceback.print_exc()
        else:
            sys.stderr.write(f"internal error: {exc}\n")
        return 70
    except Exception as exc:  # pragma: no cover - unexpected
        if args.verbose:
            traceback.print_exc()
        else:
            sys.stderr.write(f"internal error: {exc}\n")
        return 70


if __name__ == "__main__":
    sys.exit(main())
