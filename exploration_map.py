"""Growable map of the area a rover has explored."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
import logging
import threading

import numpy as np

from core import PointLike, Pos
from stats import ExplorationStats

logger = logging.getLogger(__name__)


class PointState(IntEnum):
    ESTIMATED = 0
    EXPLORED = 1


class NegativeCoordinateError(ValueError):
    """A point with a negative coordinate was registered on the map."""

    def __init__(self, pos: Pos) -> None:
        super().__init__(f"cannot register ({pos.x}, {pos.y}): coordinates must be >= 0")
        self.pos = pos


def _empty_cells() -> np.ndarray:
    return np.zeros((0, 0), dtype=np.int8)


@dataclass(eq=False)
class ExplorationMap:
    """The explored area of a world whose extent is not known up front.

    The map starts empty and grows whenever a point beyond the current bounds
    is registered. Cells inside the bounds are either ESTIMATED (never visited)
    or EXPLORED. Cells are indexed [x, y].

    Not thread-safe; see SynchronizedExplorationMap.
    """

    revisit_count: int = field(default=0, init=False)
    # Overwritten by every border registration, not accumulated.
    x_maxed: bool = field(default=False, init=False)
    y_maxed: bool = field(default=False, init=False)

    _cells: np.ndarray = field(default_factory=_empty_cells, init=False, repr=False)
    _explored_points: list[Pos] = field(default_factory=list, init=False, repr=False)

    @property
    def width(self) -> int:
        """Minimum width of the world, given the points registered so far."""
        return self._cells.shape[0]

    @property
    def height(self) -> int:
        """Minimum height of the world, given the points registered so far."""
        return self._cells.shape[1]

    @property
    def explored_count(self) -> int:
        return len(self._explored_points)

    def register_point(self, point: PointLike) -> None:
        """Mark a point as visited, growing the map to contain it if needed."""
        pos = Pos.of(point)
        if pos.is_negative():
            raise NegativeCoordinateError(pos)

        # Columns first, so the row growth below also covers the new columns.
        if pos.x >= self.width:
            self._expand_x(pos.x + 1)
        if pos.y >= self.height:
            self._expand_y(pos.y + 1)

        if self._cells[pos.x, pos.y] == PointState.ESTIMATED:
            self._cells[pos.x, pos.y] = PointState.EXPLORED
            self._explored_points.append(pos)
        else:
            self.revisit_count += 1

    def register_border_point_x(self, point: PointLike) -> None:
        """Register a point on the left or right border of the world."""
        self.register_point(point)
        self.x_maxed = int(point.x) > 0

    def register_border_point_y(self, point: PointLike) -> None:
        """Register a point on the top or bottom border of the world."""
        self.register_point(point)
        self.y_maxed = int(point.y) > 0

    def cells(self) -> np.ndarray:
        """Read-only view of the (width, height) array of PointState values."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def state_at(self, point: PointLike) -> PointState:
        if not self._in_bounds(point):
            return PointState.ESTIMATED
        return PointState(int(self._cells[point.x, point.y]))

    def explored_points(self) -> list[Pos]:
        return list(self._explored_points)

    def percent_explored(self) -> float:
        """Fraction of the currently known world that has been explored.

        The known world grows as new points come in, so this can go down.
        """
        if self.explored_count == 0:
            return 0.0
        return self.explored_count / (self.width * self.height)

    def efficiency(self) -> float:
        """Fraction of registrations that explored a new point.

        Returns 0.0 before anything has been registered.
        """
        visits = self.explored_count + self.revisit_count
        if visits == 0:
            return 0.0
        return self.explored_count / visits

    def is_explored(self, point: PointLike | None = None) -> bool:
        """Check whether one point, or with no argument the whole map, is explored.

        Points outside the map (including negative ones) are never explored.
        """
        if point is None:
            return self.explored_count == self.width * self.height
        return self.state_at(point) == PointState.EXPLORED

    def stats(self) -> ExplorationStats:
        return ExplorationStats(
            width=self.width,
            height=self.height,
            explored_count=self.explored_count,
            revisit_count=self.revisit_count,
            percent_explored=self.percent_explored(),
            efficiency=self.efficiency(),
            fully_explored=self.is_explored(),
            x_maxed=self.x_maxed,
            y_maxed=self.y_maxed,
        )

    def _in_bounds(self, point: PointLike) -> bool:
        return 0 <= point.x < self.width and 0 <= point.y < self.height

    def _expand_x(self, width: int) -> None:
        new_columns = np.full(
            (width - self.width, self.height), PointState.ESTIMATED, dtype=np.int8
        )
        self._cells = np.concatenate([self._cells, new_columns], axis=0)
        logger.debug("expanded map to %dx%d", self.width, self.height)

    def _expand_y(self, height: int) -> None:
        new_rows = np.full(
            (self.width, height - self.height), PointState.ESTIMATED, dtype=np.int8
        )
        self._cells = np.concatenate([self._cells, new_rows], axis=1)
        logger.debug("expanded map to %dx%d", self.width, self.height)


@dataclass(eq=False)
class SynchronizedExplorationMap(ExplorationMap):
    """ExplorationMap that can be shared between threads.

    Every operation runs under a single lock, so a reader never sees the map
    halfway through growing.
    """

    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    @property
    def width(self) -> int:
        with self._lock:
            return super().width

    @property
    def height(self) -> int:
        with self._lock:
            return super().height

    @property
    def explored_count(self) -> int:
        with self._lock:
            return super().explored_count

    def register_point(self, point: PointLike) -> None:
        with self._lock:
            super().register_point(point)

    def register_border_point_x(self, point: PointLike) -> None:
        with self._lock:
            super().register_border_point_x(point)

    def register_border_point_y(self, point: PointLike) -> None:
        with self._lock:
            super().register_border_point_y(point)

    def cells(self) -> np.ndarray:
        # Copy, since the backing array is written in place between growths.
        with self._lock:
            snapshot = self._cells.copy()
        snapshot.flags.writeable = False
        return snapshot

    def state_at(self, point: PointLike) -> PointState:
        with self._lock:
            return super().state_at(point)

    def explored_points(self) -> list[Pos]:
        with self._lock:
            return super().explored_points()

    def percent_explored(self) -> float:
        with self._lock:
            return super().percent_explored()

    def efficiency(self) -> float:
        with self._lock:
            return super().efficiency()

    def is_explored(self, point: PointLike | None = None) -> bool:
        with self._lock:
            return super().is_explored(point)

    def stats(self) -> ExplorationStats:
        with self._lock:
            return super().stats()
