"""Core data structures and utilities."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol


class PointLike(Protocol):
    """Anything that exposes integer x/y coordinates."""

    @property
    def x(self) -> int: ...

    @property
    def y(self) -> int: ...


@dataclass(frozen=True)
class Pos:
    x: int
    y: int

    @classmethod
    def of(cls, point: PointLike) -> Pos:
        """Copy the coordinates of any point-like object into a Pos."""
        if isinstance(point, Pos):
            return point
        return cls(int(point.x), int(point.y))

    def manhattan_distance(self, other: Pos) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def is_negative(self) -> bool:
        return self.x < 0 or self.y < 0
