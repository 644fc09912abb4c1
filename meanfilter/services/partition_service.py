"""
Split an image into disjoint rectangular regions, one per worker.

The union of the regions returned by `partition` is exactly the image
[0, width) x [0, height); no coordinate belongs to two regions. The worker
pool writes into a shared destination buffer without locks, so this
cover property is what keeps concurrent writes from colliding.
"""
from __future__ import annotations

import math
import logging
from typing import List, Sequence

import numpy as np

from ..exceptions import ConfigurationError
from ..models.region import Region

logger = logging.getLogger(__name__)

STRATEGIES = ("rows", "tiles")


def _bounds(length: int, parts: int) -> List[int]:
    """Cut [0, length) into *parts* equal runs; the last run takes the remainder."""
    step = length // parts
    return [i * step for i in range(parts)] + [length]


def _grid_shape(width: int, height: int, worker_count: int) -> tuple[int, int]:
    best = None
    for rows in range(1, min(worker_count, height) + 1):
        cols = min(worker_count // rows, width)
        if cols < 1:
            continue
        # prefer more tiles, then tiles closest to square
        skew = abs(math.log((height / rows) / (width / cols)))
        key = (-(rows * cols), skew, rows)
        if best is None or key < best[0]:
            best = (key, rows, cols)
    return best[1], best[2]


def partition(
    width: int,
    height: int,
    worker_count: int,
    strategy: str = "rows",
) -> List[Region]:
    """
    Partition a width x height image into at most *worker_count* regions.

    Args:
        width, height: image dimensions, both >= 1.
        worker_count: requested number of workers. Values <= 0 are treated
            as 1; values larger than the number of available strips are
            clamped so that no region is empty.
        strategy: "rows" for full-width horizontal strips, "tiles" for an
            area-balanced 2D grid.

    Returns:
        Regions ordered top-to-bottom, left-to-right.
    """
    if width < 1 or height < 1:
        raise ConfigurationError(f"Cannot partition a {width}x{height} image")
    if strategy not in STRATEGIES:
        raise ConfigurationError(
            f"Unknown partition strategy {strategy!r}; expected one of {STRATEGIES}")

    requested = max(1, worker_count)

    if strategy == "rows":
        rows, cols = min(requested, height), 1
    else:
        rows, cols = _grid_shape(width, height, requested)

    ys = _bounds(height, rows)
    xs = _bounds(width, cols)
    regions = [
        Region(xs[c], ys[r], xs[c + 1], ys[r + 1])
        for r in range(rows)
        for c in range(cols)
    ]

    if len(regions) != worker_count:
        logger.debug(
            f"Requested {worker_count} workers, using {len(regions)} regions "
            f"({rows}x{cols}) for a {width}x{height} image")
    return regions


def validate_partition(regions: Sequence[Region], width: int, height: int) -> None:
    """
    Raise ConfigurationError unless *regions* cover [0, width) x [0, height)
    exactly once.
    """
    if not regions:
        raise ConfigurationError("Partition is empty")

    owned = np.zeros((height, width), dtype=bool)
    for region in regions:
        if region.area <= 0:
            raise ConfigurationError(f"Region {region} is empty")
        if region.x0 < 0 or region.y0 < 0 or region.x1 > width or region.y1 > height:
            raise ConfigurationError(
                f"Region {region} lies outside the {width}x{height} image")
        cells = owned[region.slices()]
        if cells.any():
            raise ConfigurationError(f"Region {region} overlaps another region")
        cells[...] = True

    if not owned.all():
        missing = int(owned.size - np.count_nonzero(owned))
        raise ConfigurationError(f"Partition leaves {missing} pixel(s) uncovered")
