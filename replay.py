"""Replay a recorded rover trace into an exploration map and report on it.

A trace is a JSON list of steps, each {"x": int, "y": int, "border": ...},
where border is "x", "y", or null/absent for an ordinary point.
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Literal, Sequence, cast

from core import Pos
from exploration_map import ExplorationMap, NegativeCoordinateError
from serialization import deserialize_pos, serialize_exploration_map, serialize_pos

logger = logging.getLogger(__name__)

Border = Literal["x", "y"]


@dataclass(frozen=True)
class TraceStep:
    pos: Pos
    border: Border | None = None


def parse_trace(data: Any) -> list[TraceStep]:
    if not isinstance(data, list):
        raise ValueError(f"Trace must be a JSON list, got {type(data).__name__}")
    steps = []
    for i, item in enumerate(data):
        try:
            pos = deserialize_pos(item)
        except ValueError as e:
            raise ValueError(f"step {i}: {e}")
        border = item.get("border")
        if border not in (None, "x", "y"):
            raise ValueError(f"step {i}: unknown border {border!r}")
        steps.append(TraceStep(pos=pos, border=cast("Border | None", border)))
    return steps


def load_trace(path: str) -> list[TraceStep]:
    """Read a trace from a file, or from stdin if path is "-"."""
    try:
        if path == "-":
            data = json.load(sys.stdin)
        else:
            with open(path) as f:
                data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: invalid JSON: {e}")
    return parse_trace(data)


def replay(
    steps: Sequence[TraceStep], exploration_map: ExplorationMap | None = None
) -> ExplorationMap:
    """Feed each step to the map's matching registration call."""
    if exploration_map is None:
        exploration_map = ExplorationMap()
    for step in steps:
        if step.border == "x":
            exploration_map.register_border_point_x(step.pos)
        elif step.border == "y":
            exploration_map.register_border_point_y(step.pos)
        else:
            exploration_map.register_point(step.pos)
    logger.info(
        "replayed %d steps, map is %dx%d",
        len(steps),
        exploration_map.width,
        exploration_map.height,
    )
    return exploration_map


def distance_travelled(steps: Sequence[TraceStep]) -> int:
    """Total Manhattan distance between consecutive steps."""
    return sum(a.pos.manhattan_distance(b.pos) for a, b in zip(steps, steps[1:]))


def build_report(
    steps: Sequence[TraceStep],
    exploration_map: ExplorationMap,
    summary_only: bool = False,
    include_cells: bool = False,
) -> dict[str, Any]:
    report = serialize_exploration_map(exploration_map, include_cells=include_cells)
    report["steps"] = len(steps)
    report["distance_travelled"] = distance_travelled(steps)
    if steps:
        report["final_position"] = serialize_pos(steps[-1].pos)
    if summary_only:
        report.pop("explored_points")
        report.pop("cells", None)
    return report


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Replay a rover trace into an exploration map"
    )
    parser.add_argument("trace", help="Path to a JSON trace file, or - for stdin")
    parser.add_argument(
        "--summary-only",
        action="store_true",
        help="Only print statistics, not the explored points",
    )
    parser.add_argument(
        "--cells",
        action="store_true",
        help="Include the full cell grid in the output",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent the JSON output by this many spaces (default: compact)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log progress to stderr"
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for a replay."""
    parser = make_parser()
    args = parser.parse_args(argv)
    if args.summary_only and args.cells:
        parser.error("--cells cannot be combined with --summary-only")
    return args


def main(argv: Sequence[str] | None = None) -> int:
    parser = make_parser()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        steps = load_trace(args.trace)
    except OSError as e:
        parser.error(f"cannot read {args.trace}: {e.strerror}")
    except ValueError as e:
        parser.error(str(e))

    try:
        exploration_map = replay(steps)
    except NegativeCoordinateError as e:
        parser.error(str(e))

    report = build_report(
        steps,
        exploration_map,
        summary_only=args.summary_only,
        include_cells=args.cells,
    )
    print(json.dumps(report, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
