"""Capabilities the exploration map exposes to statistics and display consumers."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from core import Pos


@runtime_checkable
class StatsSource(Protocol):
    """Something that can report how well exploration is going."""

    def percent_explored(self) -> float:
        """Fraction in [0, 1] of the known world that has been visited."""
        ...

    def efficiency(self) -> float:
        """Fraction in [0, 1] of visits that found new territory."""
        ...


@runtime_checkable
class ExploredPointsSource(Protocol):
    def explored_points(self) -> list[Pos]:
        """Every visited point, in the order it was first visited."""
        ...


@dataclass(frozen=True)
class ExplorationStats:
    """Point-in-time summary of an exploration map."""

    width: int
    height: int
    explored_count: int
    revisit_count: int
    percent_explored: float
    efficiency: float
    fully_explored: bool
    x_maxed: bool = False
    y_maxed: bool = False

    @property
    def total_visits(self) -> int:
        return self.explored_count + self.revisit_count

    @property
    def area(self) -> int:
        return self.width * self.height
