"""Serialization of map snapshots into JSON-friendly structures."""

from __future__ import annotations
from typing import Any, Dict

from core import Pos
from exploration_map import ExplorationMap, PointState
from stats import ExplorationStats


# ===== Basic Types =====


def serialize_pos(pos: Pos) -> Dict[str, int]:
    return {"x": pos.x, "y": pos.y}


def deserialize_pos(data: Dict[str, Any]) -> Pos:
    try:
        x, y = data["x"], data["y"]
    except (KeyError, TypeError):
        raise ValueError(f"Expected an object with x and y, got: {data!r}")
    # bool is an int subclass, but true/false are not coordinates
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (x, y)):
        raise ValueError(f"Coordinates must be integers, got: {data!r}")
    return Pos(x=x, y=y)


def serialize_point_state(state: PointState) -> str:
    return state.name


def deserialize_point_state(data: str) -> PointState:
    try:
        return PointState[data]
    except KeyError:
        raise ValueError(f"Unknown point state: {data!r}")


# ===== Statistics =====


def serialize_stats(stats: ExplorationStats) -> Dict[str, Any]:
    return {
        "width": stats.width,
        "height": stats.height,
        "explored_count": stats.explored_count,
        "revisit_count": stats.revisit_count,
        "percent_explored": stats.percent_explored,
        "efficiency": stats.efficiency,
        "fully_explored": stats.fully_explored,
        "x_maxed": stats.x_maxed,
        "y_maxed": stats.y_maxed,
    }


# ===== Map =====


def serialize_exploration_map(
    exploration_map: ExplorationMap, include_cells: bool = False
) -> Dict[str, Any]:
    """Snapshot a map for a consumer such as a display.

    Cells, when included, are a list of columns of point state names, so
    that result["cells"][x][y] matches ExplorationMap.state_at(Pos(x, y)).
    """
    result: Dict[str, Any] = {
        "stats": serialize_stats(exploration_map.stats()),
        "explored_points": [
            serialize_pos(p) for p in exploration_map.explored_points()
        ],
    }
    if include_cells:
        result["cells"] = [
            [serialize_point_state(PointState(int(v))) for v in column]
            for column in exploration_map.cells()
        ]
    return result
