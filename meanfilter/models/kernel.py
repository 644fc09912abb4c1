from __future__ import annotations
from dataclasses import dataclass
from numbers import Integral
from typing import Iterator, Tuple

from ..exceptions import ConfigurationError


@dataclass(frozen=True)
class Kernel:
    """
    Value-object for a square box kernel.
    `size` is the side length and must be a positive odd integer.
    """
    size: int

    def __post_init__(self):
        # bool is an int subclass; reject it explicitly
        if isinstance(self.size, bool) or not isinstance(self.size, Integral):
            raise ConfigurationError(
                f"Kernel size must be an integer, got {self.size!r}")
        # normalise numpy integers
        object.__setattr__(self, "size", int(self.size))
        if self.size <= 0 or self.size % 2 == 0:
            raise ConfigurationError(
                f"Kernel size must be a positive odd integer, got {self.size}")

    @property
    def pad(self) -> int:
        return self.size // 2

    def offsets(self) -> Iterator[Tuple[int, int]]:
        """Yield (dx, dy) for every cell of the neighborhood, row by row."""
        for dy in range(-self.pad, self.pad + 1):
            for dx in range(-self.pad, self.pad + 1):
                yield dx, dy

    @classmethod
    def coerce(cls, kernel_size: int | Kernel) -> Kernel:
        if isinstance(kernel_size, cls):
            return kernel_size
        return cls(kernel_size)
