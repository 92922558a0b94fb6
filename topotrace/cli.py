"""Command-line interface for topotrace."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from topotrace.algorithms import NEEDS_START, AlgorithmResult, AlgorithmType, run_algorithm
from topotrace.logging import get_logger, level_for_flags, set_global_log_level
from topotrace.model.loader import load_graph_file
from topotrace.representations import VIEWS, render

logger = get_logger(__name__)


def _format_step(index: int, step_data: Dict[str, Any]) -> str:
    """Return one trace step as an indented block of ``key: value`` lines."""
    lines = [f"[{index:>3}] {step_data['log']}"]
    for key, value in step_data.items():
        if key == "log":
            continue
        if key in ("mstLinks", "traversedEdges"):
            value = ", ".join(f"{e['source']}-{e['target']}" for e in value)
        elif key == "currentLinkId":
            value = f"{value['source']}->{value['target']}"
        lines.append(f"        {key}: {value}")
    return "\n".join(lines)


def _print_result(result: AlgorithmResult, show_steps: bool) -> None:
    if show_steps:
        for index, step in enumerate(result.steps):
            print(_format_step(index, step.to_dict()))
    else:
        for line in result.logs:
            print(line)
    if result.ok:
        print(f"✅ {result.algorithm.value} finished in {len(result.steps)} steps")
    else:
        print(f"❌ {result.algorithm.value} rejected: {result.error}")


def _run(
    path: Path,
    algorithm: str,
    start: Optional[str],
    end: Optional[str],
    show_steps: bool,
    as_json: bool,
    output: Optional[Path],
) -> None:
    """Load a graph file, run one algorithm, and report the result."""
    try:
        graph = load_graph_file(path)
        kind = AlgorithmType(algorithm)
        if kind in NEEDS_START and start is None:
            raise ValueError(f"--start is required for {kind.value}")
        logger.info(f"Running {kind.value} on {len(graph.nodes)} nodes")
        result = run_algorithm(kind, graph, start, end)
    except FileNotFoundError:
        logger.error(f"Graph file not found: {path}")
        print(f"❌ ERROR: Graph file not found: {path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to run algorithm: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to run algorithm: {type(e).__name__}: {e}")
        sys.exit(1)

    payload = result.to_dict(include_steps=True)
    if as_json:
        print(json.dumps(payload, indent=2))
    else:
        _print_result(result, show_steps)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(payload, indent=2))
        logger.info(f"Result written to: {output}")


def _show(path: Path, view: str) -> None:
    try:
        graph = load_graph_file(path)
    except FileNotFoundError:
        logger.error(f"Graph file not found: {path}")
        print(f"❌ ERROR: Graph file not found: {path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to load graph: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to load graph: {type(e).__name__}: {e}")
        sys.exit(1)
    print(render(graph, view))


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``topotrace`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="topotrace",
        description="Run traced graph algorithms on network topologies.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress informational logging"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,show}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser("run", help="Run an algorithm on a graph file")
    run_parser.add_argument("graph", type=Path, help="Path to graph YAML/JSON")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=[a.value for a in AlgorithmType],
        help="Algorithm to run",
    )
    run_parser.add_argument(
        "--start", "-s", default=None, help="Start node id (source for max_flow)"
    )
    run_parser.add_argument(
        "--end", "-e", default=None, help="End node id (sink for max_flow)"
    )
    run_parser.add_argument(
        "--steps", action="store_true", help="Print every trace step with its fields"
    )
    run_parser.add_argument(
        "--json", action="store_true", help="Print the full result as JSON"
    )
    run_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Also write the JSON result to this file",
    )

    show_parser = subparsers.add_parser("show", help="Print a graph representation")
    show_parser.add_argument("graph", type=Path, help="Path to graph YAML/JSON")
    show_parser.add_argument(
        "--view", choices=list(VIEWS), default="edge_list", help="Representation"
    )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    set_global_log_level(level_for_flags(args.verbose, args.quiet))
    logger.debug("Debug logging enabled")

    if args.command == "run":
        _run(
            path=args.graph,
            algorithm=args.algorithm,
            start=args.start,
            end=args.end,
            show_steps=args.steps,
            as_json=args.json,
            output=args.output,
        )
    elif args.command == "show":
        _show(args.graph, args.view)


if __name__ == "__main__":
    main()
