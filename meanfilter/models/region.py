from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True)
class Region:
    """
    Half-open rectangle [x0, x1) x [y0, y1) of destination pixels.
    Owned by exactly one worker for the duration of a filter run.
    """
    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def area(self) -> int:
        return max(self.width, 0) * max(self.height, 0)

    def contains(self, x: int, y: int) -> bool:
        return self.x0 <= x < self.x1 and self.y0 <= y < self.y1

    def slices(self) -> Tuple[slice, slice]:
        """(rows, cols) slices for indexing an (H, W, C) array."""
        return slice(self.y0, self.y1), slice(self.x0, self.x1)

    def coordinates(self) -> Iterator[Tuple[int, int]]:
        for y in range(self.y0, self.y1):
            for x in range(self.x0, self.x1):
                yield x, y

    def __str__(self) -> str:
        return f"[{self.x0},{self.x1})x[{self.y0},{self.y1})"
